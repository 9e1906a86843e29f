"""
Process-wide LINE Login configuration.

Call ``configure()`` once at startup, or export ``LINESDK_CHANNEL_ID``
(and optionally ``LINESDK_TOKEN_PATH``, ``LINESDK_TOKEN_KEY``,
``LINESDK_API_BASE``, ``LINESDK_TIMEOUT``). Explicit ``configure()``
arguments win over the environment.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import GeneralError, GeneralFailureReason
from .types import API_BASE

logger = logging.getLogger(__name__)

ENV_PREFIX = "LINESDK_"
DEFAULT_TIMEOUT_SEC = 10.0


class LoginConfiguration(BaseSettings):
    """LINE Login settings loaded from ``LINESDK_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore", frozen=True)

    channel_id: Optional[str] = None
    token_path: Optional[Path] = None
    # Fernet key for the token file; a key file beside the token is used when unset
    token_key: Optional[str] = None
    api_base: str = API_BASE
    timeout: float = DEFAULT_TIMEOUT_SEC

    @field_validator("api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def resolved_token_path(self) -> Path:
        if self.token_path is not None:
            return Path(self.token_path)
        return Path.home() / ".linesdk" / self.channel_id / "access_token.json"


_lock = threading.Lock()
_configuration: Optional[LoginConfiguration] = None


def _require_channel(config: LoginConfiguration) -> LoginConfiguration:
    if not config.channel_id:
        raise GeneralError(
            GeneralFailureReason.NOT_CONFIGURED,
            f"call linesdk.configure() or set {ENV_PREFIX}CHANNEL_ID",
        )
    return config


def configure(
    channel_id: str,
    token_path: Optional[os.PathLike] = None,
    api_base: Optional[str] = None,
    timeout: Optional[float] = None,
    token_key: Optional[str] = None,
) -> LoginConfiguration:
    """Install the shared configuration and drop cached session/store."""
    global _configuration
    overrides = {
        "token_path": Path(token_path) if token_path else None,
        "api_base": api_base,
        "timeout": timeout,
        "token_key": token_key,
    }
    config = _require_channel(LoginConfiguration(
        channel_id=channel_id,
        **{k: v for k, v in overrides.items() if v is not None},
    ))
    with _lock:
        _configuration = config
    _reset_shared()
    logger.debug("Configured channel %s", channel_id)
    return config


def get_configuration() -> LoginConfiguration:
    global _configuration
    with _lock:
        if _configuration is None:
            _configuration = _require_channel(LoginConfiguration())
        return _configuration


def reset() -> None:
    """Forget the shared configuration, session and store."""
    global _configuration
    with _lock:
        _configuration = None
    _reset_shared()


def _reset_shared() -> None:
    from . import session, store

    store.reset_store()
    session.reset_session()
