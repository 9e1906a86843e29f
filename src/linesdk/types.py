"""
Shared types for the LINE SDK client.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

API_BASE = "https://api.line.me"

DEFAULT_HEADERS = {
    "User-Agent": "linesdk-python/0.1.0",
    "Accept": "application/json",
}


def _split_scope(scope: str) -> list[str]:
    return scope.split() if scope else []


@dataclass(frozen=True)
class AccessToken:
    value: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"
    scope: str = ""
    id_token: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    @property
    def permissions(self) -> list[str]:
        return _split_scope(self.scope)

    @property
    def expires_at(self) -> float:
        return self.created_at + self.expires_in

    @classmethod
    def from_response(
        cls, body: dict, previous_refresh_token: Optional[str] = None
    ) -> "AccessToken":
        """Build from an /oauth2/v2.1/token response body."""
        return cls(
            value=body["access_token"],
            refresh_token=body.get("refresh_token") or previous_refresh_token or "",
            expires_in=int(body["expires_in"]),
            token_type=body.get("token_type", "Bearer"),
            scope=body.get("scope", ""),
            id_token=body.get("id_token"),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "AccessToken":
        return cls(
            value=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_in=int(data["expires_in"]),
            token_type=data.get("token_type", "Bearer"),
            scope=data.get("scope", ""),
            id_token=data.get("id_token"),
            created_at=float(data["created_at"]),
        )

    def to_dict(self) -> dict:
        return {
            "access_token": self.value,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "token_type": self.token_type,
            "scope": self.scope,
            "id_token": self.id_token,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class AccessTokenVerifyResult:
    channel_id: str
    scope: str
    expires_in: int

    @property
    def permissions(self) -> list[str]:
        return _split_scope(self.scope)

    @classmethod
    def from_response(cls, body: dict) -> "AccessTokenVerifyResult":
        return cls(
            channel_id=str(body["client_id"]),
            scope=body.get("scope", ""),
            expires_in=int(body["expires_in"]),
        )

    def to_dict(self) -> dict:
        return {
            "channel_id": self.channel_id,
            "scope": self.scope,
            "expires_in": self.expires_in,
        }


@dataclass(frozen=True)
class UserProfile:
    user_id: str
    display_name: str
    picture_url: Optional[str] = None
    status_message: Optional[str] = None

    @classmethod
    def from_response(cls, body: dict) -> "UserProfile":
        return cls(
            user_id=body["userId"],
            display_name=body["displayName"],
            picture_url=body.get("pictureUrl"),
            status_message=body.get("statusMessage"),
        )

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "display_name": self.display_name,
            "picture_url": self.picture_url,
            "status_message": self.status_message,
        }


@dataclass(frozen=True)
class BotFriendshipStatus:
    friend_flag: bool

    @classmethod
    def from_response(cls, body: dict) -> "BotFriendshipStatus":
        return cls(friend_flag=bool(body["friendFlag"]))

    def to_dict(self) -> dict[str, bool]:
        return {"friend_flag": self.friend_flag}
