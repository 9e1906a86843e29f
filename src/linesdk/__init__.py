"""
linesdk — LINE Platform API client: token refresh, revoke and verify,
user profile and bot friendship status.
"""

from .api import (
    API,
    get_bot_friendship_status,
    get_profile,
    refresh_access_token,
    revoke_access_token,
    verify_access_token,
)
from .callback import CallbackQueue, Result
from .config import LoginConfiguration, configure, get_configuration
from .errors import GeneralError, LineSDKError, RequestFailed, ResponseFailed
from .session import Session, get_session
from .store import AccessTokenStore, TokenEvent, get_store
from .types import (
    AccessToken,
    AccessTokenVerifyResult,
    BotFriendshipStatus,
    UserProfile,
)

__all__ = [
    "API",
    "AccessToken",
    "AccessTokenStore",
    "AccessTokenVerifyResult",
    "BotFriendshipStatus",
    "CallbackQueue",
    "GeneralError",
    "LineSDKError",
    "LoginConfiguration",
    "RequestFailed",
    "ResponseFailed",
    "Result",
    "Session",
    "TokenEvent",
    "UserProfile",
    "configure",
    "get_bot_friendship_status",
    "get_configuration",
    "get_profile",
    "get_session",
    "get_store",
    "refresh_access_token",
    "revoke_access_token",
    "verify_access_token",
]
__version__ = "0.1.0"
