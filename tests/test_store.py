"""
Tests for linesdk.store module.

Covers:
- Loading, saving and removing the current token
- File permissions
- Encryption at rest, configured and generated keys, wrong keys
- Observer notifications
- Storage failures surfaced as GeneralError
"""

import logging
import os
import stat
from unittest.mock import MagicMock, patch

import pytest
from cryptography.fernet import Fernet

from linesdk import config
from linesdk.errors import GeneralError, GeneralFailureReason
from linesdk.store import AccessTokenStore, TokenEvent, get_store


class TestAccessTokenStore:

    def test_empty_store_has_no_token(self, tmp_path):
        store = AccessTokenStore(tmp_path / "missing.json")
        assert store.current is None

    def test_set_current_token_persists(self, tmp_path, access_token):
        path = tmp_path / "nested" / "token.json"
        AccessTokenStore(path).set_current_token(access_token)

        assert AccessTokenStore(path).current == access_token

    def test_token_file_is_owner_only(self, tmp_path, access_token):
        path = tmp_path / "token.json"
        AccessTokenStore(path).set_current_token(access_token)
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_remove_current_access_token(self, tmp_path, access_token):
        path = tmp_path / "token.json"
        store = AccessTokenStore(path)
        store.set_current_token(access_token)

        store.remove_current_access_token()

        assert store.current is None
        assert not path.exists()

    def test_remove_without_token_is_fine(self, tmp_path):
        store = AccessTokenStore(tmp_path / "token.json")
        store.remove_current_access_token()
        assert store.current is None

    def test_corrupt_file_treated_as_absent(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text("{not json")
        assert AccessTokenStore(path).current is None

    def test_write_failure_raises_storage_error(self, tmp_path, access_token):
        store = AccessTokenStore(tmp_path / "token.json")
        with patch("linesdk.store.os.open", side_effect=PermissionError("denied")):
            with pytest.raises(GeneralError) as exc_info:
                store.set_current_token(access_token)

        assert exc_info.value.reason is GeneralFailureReason.STORAGE_FAILED
        assert store.current is None

    def test_remove_failure_raises_storage_error(self, tmp_path, access_token):
        store = AccessTokenStore(tmp_path / "token.json")
        store.set_current_token(access_token)
        with patch("pathlib.Path.unlink", side_effect=PermissionError("denied")):
            with pytest.raises(GeneralError):
                store.remove_current_access_token()

        assert store.current == access_token


class TestEncryption:

    def test_token_file_is_encrypted(self, tmp_path, access_token):
        path = tmp_path / "token.json"
        AccessTokenStore(path).set_current_token(access_token)

        payload = path.read_bytes()
        assert access_token.value.encode() not in payload
        assert access_token.refresh_token.encode() not in payload

    def test_generated_key_file_is_owner_only(self, tmp_path, access_token):
        store = AccessTokenStore(tmp_path / "token.json")
        store.set_current_token(access_token)

        assert store.key_path.exists()
        assert stat.S_IMODE(os.stat(store.key_path).st_mode) == 0o600

    def test_round_trip_with_configured_key(self, tmp_path, access_token):
        key = Fernet.generate_key().decode()
        path = tmp_path / "token.json"
        AccessTokenStore(path, key=key).set_current_token(access_token)

        assert AccessTokenStore(path, key=key).current == access_token
        assert not AccessTokenStore(path, key=key).key_path.exists()

    def test_wrong_key_treated_as_absent(self, tmp_path, access_token, caplog):
        path = tmp_path / "token.json"
        AccessTokenStore(path, key=Fernet.generate_key()).set_current_token(access_token)

        with caplog.at_level(logging.WARNING, logger="linesdk.store"):
            assert AccessTokenStore(path, key=Fernet.generate_key()).current is None
        assert "Cannot decrypt" in caplog.text

    def test_missing_key_file_treated_as_absent(self, tmp_path, access_token):
        store = AccessTokenStore(tmp_path / "token.json")
        store.set_current_token(access_token)
        store.key_path.unlink()

        assert AccessTokenStore(tmp_path / "token.json").current is None

    def test_invalid_key_fails_to_store(self, tmp_path, access_token):
        store = AccessTokenStore(tmp_path / "token.json", key="not-a-fernet-key")
        with pytest.raises(GeneralError) as exc_info:
            store.set_current_token(access_token)
        assert exc_info.value.reason is GeneralFailureReason.STORAGE_FAILED

    def test_shared_store_uses_configured_key(self, tmp_path, access_token):
        key = Fernet.generate_key().decode()
        config.configure("999", token_path=tmp_path / "shared.json", token_key=key)
        get_store().set_current_token(access_token)

        assert AccessTokenStore(tmp_path / "shared.json", key=key).current == access_token


class TestObservers:

    def test_update_notifies_observers(self, tmp_path, access_token):
        store = AccessTokenStore(tmp_path / "token.json")
        observer = MagicMock()
        store.add_observer(observer)

        store.set_current_token(access_token)

        observer.assert_called_once_with(TokenEvent.TOKEN_DID_UPDATE, access_token)

    def test_remove_notifies_observers(self, tmp_path, access_token):
        store = AccessTokenStore(tmp_path / "token.json")
        store.set_current_token(access_token)
        observer = MagicMock()
        store.add_observer(observer)

        store.remove_current_access_token()

        observer.assert_called_once_with(TokenEvent.TOKEN_DID_REMOVE, None)

    def test_removed_observer_not_called(self, tmp_path, access_token):
        store = AccessTokenStore(tmp_path / "token.json")
        observer = MagicMock()
        store.add_observer(observer)
        store.remove_observer(observer)

        store.set_current_token(access_token)

        observer.assert_not_called()


class TestSharedStore:

    def test_shared_store_uses_configured_path(self, configured):
        assert get_store().path == configured.token_path

    def test_shared_store_is_cached(self):
        assert get_store() is get_store()
