"""
Access token persistence.

The current token lives in a Fernet-encrypted JSON file readable only by
its owner. The key comes from configuration, or from a key file created
beside the token. Observers are told whenever the token is replaced or
removed.
"""

import json
import logging
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from cryptography.fernet import Fernet, InvalidToken

from .errors import GeneralError, GeneralFailureReason
from .types import AccessToken

logger = logging.getLogger(__name__)

FILE_MODE = 0o600
DIR_MODE = 0o700


class TokenEvent(Enum):
    TOKEN_DID_UPDATE = "token_did_update"
    TOKEN_DID_REMOVE = "token_did_remove"


Observer = Callable[[TokenEvent, Optional[AccessToken]], None]

_UNLOADED = object()


class AccessTokenStore:
    """File-backed holder of the current access token."""

    def __init__(self, path: os.PathLike, key: Optional[Union[str, bytes]] = None):
        self._path = Path(path)
        self._key = key.encode() if isinstance(key, str) else key
        self._cipher: Optional[Fernet] = None
        self._lock = threading.RLock()
        self._current = _UNLOADED
        self._observers: list[Observer] = []

    @property
    def key_path(self) -> Path:
        return self._path.with_name(self._path.name + ".key")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def current(self) -> Optional[AccessToken]:
        with self._lock:
            if self._current is _UNLOADED:
                self._current = self._load()
            return self._current

    def _fernet(self, create: bool) -> Optional[Fernet]:
        """Cipher for the token file; ``None`` if no key exists and ``create`` is off."""
        if self._cipher is not None:
            return self._cipher
        key = self._key
        if key is None:
            try:
                key = self.key_path.read_bytes().strip()
            except FileNotFoundError:
                if not create:
                    return None
                key = Fernet.generate_key()
                self._write_private(self.key_path, key)
                logger.info("Generated token encryption key %s", self.key_path)
        try:
            self._cipher = Fernet(key)
        except ValueError as exc:
            raise GeneralError(
                GeneralFailureReason.STORAGE_FAILED,
                f"invalid token encryption key: {exc}",
                underlying=exc,
            ) from exc
        return self._cipher

    def _write_private(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.chmod(path, FILE_MODE)

    def _load(self) -> Optional[AccessToken]:
        try:
            payload = self._path.read_bytes()
        except FileNotFoundError:
            return None
        try:
            cipher = self._fernet(create=False)
            if cipher is None:
                raise ValueError(f"no key file {self.key_path}")
            return AccessToken.from_dict(json.loads(cipher.decrypt(payload)))
        except InvalidToken:
            logger.warning("Cannot decrypt token file %s with the configured key", self._path)
            return None
        except (OSError, ValueError, KeyError, TypeError, GeneralError) as exc:
            logger.warning("Ignoring unreadable token file %s: %s", self._path, exc)
            return None

    def set_current_token(self, token: AccessToken) -> None:
        with self._lock:
            try:
                cipher = self._fernet(create=True)
                payload = cipher.encrypt(json.dumps(token.to_dict()).encode("utf-8"))
                self._write_private(self._path, payload)
            except OSError as exc:
                raise GeneralError(
                    GeneralFailureReason.STORAGE_FAILED,
                    f"cannot write token to {self._path}: {exc}",
                    underlying=exc,
                ) from exc
            self._current = token
        logger.debug("Stored access token in %s", self._path)
        self._notify(TokenEvent.TOKEN_DID_UPDATE, token)

    def remove_current_access_token(self) -> None:
        with self._lock:
            try:
                self._path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                raise GeneralError(
                    GeneralFailureReason.STORAGE_FAILED,
                    f"cannot remove token file {self._path}: {exc}",
                    underlying=exc,
                ) from exc
            self._current = None
        logger.debug("Removed access token from %s", self._path)
        self._notify(TokenEvent.TOKEN_DID_REMOVE, None)

    # ── Observers ─────────────────────────────────────────

    def add_observer(self, observer: Observer) -> None:
        with self._lock:
            self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def _notify(self, event: TokenEvent, token: Optional[AccessToken]) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            observer(event, token)


_shared_lock = threading.Lock()
_shared: Optional[AccessTokenStore] = None


def get_store() -> AccessTokenStore:
    """Shared store built from the shared configuration."""
    global _shared
    from .config import get_configuration

    with _shared_lock:
        if _shared is None:
            config = get_configuration()
            _shared = AccessTokenStore(config.resolved_token_path, key=config.token_key)
        return _shared


def reset_store() -> None:
    global _shared
    with _shared_lock:
        _shared = None
