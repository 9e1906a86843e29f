"""
Networking session for the LINE Platform.

Sends request objects with ``requests``, maps every outcome into a
``Result`` and hands it to the completion on the chosen callback queue.
Authenticated requests that come back 401 get one retry after a token
refresh.
"""

import logging
import threading
from typing import Optional

import requests

from .callback import CallbackQueue, Completion, Result
from .config import LoginConfiguration, get_configuration
from .endpoints import PostRefreshTokenRequest, Request
from .errors import (
    APIErrorDetail,
    LineSDKError,
    RequestFailed,
    RequestFailureReason,
    ResponseFailed,
    ResponseFailureReason,
)
from .store import AccessTokenStore, get_store
from .types import DEFAULT_HEADERS

logger = logging.getLogger(__name__)


class Session:
    """Sends ``Request`` objects and delivers parsed results."""

    def __init__(self, configuration: LoginConfiguration, store: AccessTokenStore):
        self._configuration = configuration
        self._store = store

    @property
    def configuration(self) -> LoginConfiguration:
        return self._configuration

    @property
    def store(self) -> AccessTokenStore:
        return self._store

    def send(
        self,
        request: Request,
        callback_queue: Optional[CallbackQueue] = None,
        completion: Optional[Completion] = None,
    ) -> Result:
        try:
            result = Result.success(self._perform(request))
        except LineSDKError as exc:
            logger.debug("%s %s failed: %s", request.method, request.path, exc)
            result = Result.failure(exc)

        if completion is not None:
            queue = callback_queue or CallbackQueue.current()
            queue.execute(lambda: completion(result))
        return result

    def _headers(self, request: Request) -> dict:
        headers = {**DEFAULT_HEADERS}
        if request.authenticated:
            token = self._store.current
            if token is None:
                raise RequestFailed(RequestFailureReason.LACK_OF_ACCESS_TOKEN)
            headers["Authorization"] = f"Bearer {token.value}"
        return headers

    def _perform(self, request: Request, retry_on_401: bool = True):
        resp = self._call(request)

        if resp.status_code == 401 and request.authenticated and retry_on_401:
            logger.info("Access token rejected, refreshing before retry")
            self._refresh()
            return self._perform(request, retry_on_401=False)

        body = self._decode(resp)
        if not 200 <= resp.status_code < 300:
            raise ResponseFailed(
                ResponseFailureReason.INVALID_HTTP_STATUS_API_ERROR,
                status_code=resp.status_code,
                detail=APIErrorDetail.from_response(resp.status_code, body),
            )

        try:
            return request.parse(body)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ResponseFailed(
                ResponseFailureReason.DATA_PARSING_FAILED,
                status_code=resp.status_code,
                message=f"unexpected response for {request.path}: {exc}",
            ) from exc

    def _call(self, request: Request) -> requests.Response:
        headers = self._headers(request)
        try:
            return requests.request(
                request.method,
                f"{self._configuration.api_base}{request.path}",
                headers=headers,
                params=request.params(),
                data=request.data(),
                timeout=self._configuration.timeout,
            )
        except requests.RequestException as exc:
            raise RequestFailed(
                RequestFailureReason.NETWORK_ERROR, str(exc), underlying=exc
            ) from exc

    @staticmethod
    def _decode(resp: requests.Response) -> Optional[dict]:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            if 200 <= resp.status_code < 300:
                raise ResponseFailed(
                    ResponseFailureReason.DATA_PARSING_FAILED,
                    status_code=resp.status_code,
                    message=f"response body is not JSON: {exc}",
                ) from exc
            return None

    def _refresh(self) -> None:
        current = self._store.current
        if current is None or not current.refresh_token:
            raise RequestFailed(RequestFailureReason.LACK_OF_ACCESS_TOKEN)
        token = self._perform(
            PostRefreshTokenRequest(self._configuration.channel_id, current.refresh_token)
        )
        self._store.set_current_token(token)


_shared_lock = threading.Lock()
_shared: Optional[Session] = None


def get_session() -> Session:
    """Shared session built from the shared configuration and store."""
    global _shared
    with _shared_lock:
        if _shared is None:
            _shared = Session(get_configuration(), get_store())
        return _shared


def reset_session() -> None:
    global _shared
    with _shared_lock:
        _shared = None
