"""
Error types raised or relayed by the LINE SDK client.

Every failure delivered to a completion callback is a ``LineSDKError``.
The facade never raises them directly; ``Result.unwrap()`` does.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class RequestFailureReason(Enum):
    LACK_OF_ACCESS_TOKEN = "lack_of_access_token"
    NETWORK_ERROR = "network_error"


class ResponseFailureReason(Enum):
    INVALID_HTTP_STATUS_API_ERROR = "invalid_http_status_api_error"
    DATA_PARSING_FAILED = "data_parsing_failed"


class GeneralFailureReason(Enum):
    NOT_CONFIGURED = "not_configured"
    STORAGE_FAILED = "storage_failed"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class APIErrorDetail:
    """Parsed body of a non-2xx response."""

    code: int
    error: Optional[str] = None
    error_description: Optional[str] = None
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_response(cls, code: int, body: Any) -> "APIErrorDetail":
        if body is None:
            body = {}
        elif not isinstance(body, dict):
            body = {"body": body}
        return cls(
            code=code,
            error=body.get("error") or body.get("message"),
            error_description=body.get("error_description"),
            raw=body,
        )


class LineSDKError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, reason: Enum, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or reason.value.replace("_", " "))

    def to_dict(self) -> dict:
        return {"type": type(self).__name__, "reason": self.reason.value, "message": str(self)}


class RequestFailed(LineSDKError):
    def __init__(
        self,
        reason: RequestFailureReason,
        message: Optional[str] = None,
        underlying: Optional[BaseException] = None,
    ):
        self.underlying = underlying
        super().__init__(reason, message)


class ResponseFailed(LineSDKError):
    def __init__(
        self,
        reason: ResponseFailureReason,
        status_code: Optional[int] = None,
        detail: Optional[APIErrorDetail] = None,
        message: Optional[str] = None,
    ):
        self.status_code = status_code
        self.detail = detail
        if message is None and detail is not None:
            message = f"HTTP {detail.code}: {detail.error_description or detail.error or 'no detail'}"
        super().__init__(reason, message)

    @property
    def is_invalid_http_status(self) -> bool:
        return self.reason is ResponseFailureReason.INVALID_HTTP_STATUS_API_ERROR

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status_code"] = self.status_code
        if self.detail is not None:
            data["detail"] = self.detail.raw
        return data


class GeneralError(LineSDKError):
    def __init__(
        self,
        reason: GeneralFailureReason,
        message: Optional[str] = None,
        underlying: Optional[BaseException] = None,
    ):
        self.underlying = underlying
        super().__init__(reason, message)


def as_sdk_error(exc: BaseException) -> LineSDKError:
    """Map any exception into the SDK error hierarchy."""
    if isinstance(exc, LineSDKError):
        return exc
    return GeneralError(GeneralFailureReason.UNEXPECTED, str(exc), underlying=exc)
