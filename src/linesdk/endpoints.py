"""
Request objects for the LINE Platform endpoints used by the facade.

Each request describes one HTTP call and how to parse its response body.
``Session.send`` does the rest.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .types import (
    AccessToken,
    AccessTokenVerifyResult,
    BotFriendshipStatus,
    UserProfile,
)


class Request:
    method: ClassVar[str] = "GET"
    path: ClassVar[str] = ""
    authenticated: ClassVar[bool] = False

    def params(self) -> Optional[dict]:
        """Query string parameters."""
        return None

    def data(self) -> Optional[dict]:
        """Form-encoded body."""
        return None

    def parse(self, body: Optional[dict]) -> Any:
        return body


# ── OAuth ─────────────────────────────────────────────────


@dataclass(frozen=True)
class PostRefreshTokenRequest(Request):
    channel_id: str
    refresh_token: str

    method: ClassVar[str] = "POST"
    path: ClassVar[str] = "/oauth2/v2.1/token"

    def data(self) -> dict:
        return {
            "grant_type": "refresh_token",
            "refresh_token": self.refresh_token,
            "client_id": self.channel_id,
        }

    def parse(self, body: Optional[dict]) -> AccessToken:
        return AccessToken.from_response(body or {}, self.refresh_token)


@dataclass(frozen=True)
class PostRevokeTokenRequest(Request):
    channel_id: str
    access_token: str

    method: ClassVar[str] = "POST"
    path: ClassVar[str] = "/oauth2/v2.1/revoke"

    def data(self) -> dict:
        return {"client_id": self.channel_id, "access_token": self.access_token}

    def parse(self, body: Optional[dict]) -> None:
        return None


@dataclass(frozen=True)
class GetVerifyTokenRequest(Request):
    access_token: str

    path: ClassVar[str] = "/oauth2/v2.1/verify"

    def params(self) -> dict:
        return {"access_token": self.access_token}

    def parse(self, body: Optional[dict]) -> AccessTokenVerifyResult:
        return AccessTokenVerifyResult.from_response(body or {})


# ── Profile / friendship ──────────────────────────────────


@dataclass(frozen=True)
class GetUserProfileRequest(Request):
    path: ClassVar[str] = "/v2/profile"
    authenticated: ClassVar[bool] = True

    def parse(self, body: Optional[dict]) -> UserProfile:
        return UserProfile.from_response(body or {})


@dataclass(frozen=True)
class GetBotFriendshipStatusRequest(Request):
    path: ClassVar[str] = "/friendship/v1/status"
    authenticated: ClassVar[bool] = True

    def parse(self, body: Optional[dict]) -> BotFriendshipStatus:
        return BotFriendshipStatus.from_response(body or {})
