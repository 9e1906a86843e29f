"""
LINE Platform API facade.

Each operation builds one request, sends it through the shared session
and delivers a ``Result`` to ``completion`` on ``callback_queue``.
Some operations also keep the shared token store in sync.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .callback import CallbackQueue, Completion, Result
from .config import configure, get_configuration
from .endpoints import (
    GetBotFriendshipStatusRequest,
    GetUserProfileRequest,
    GetVerifyTokenRequest,
    PostRefreshTokenRequest,
    PostRevokeTokenRequest,
)
from .errors import (
    LineSDKError,
    RequestFailed,
    RequestFailureReason,
    ResponseFailed,
    as_sdk_error,
)
from .session import get_session
from .store import get_store

logger = logging.getLogger(__name__)


def _noop(result: Result) -> None:
    pass


def _deliver(queue: CallbackQueue, completion: Completion, result: Result) -> None:
    queue.execute(lambda: completion(result))


# ── Tokens ────────────────────────────────────────────────


def refresh_access_token(
    refresh_token: Optional[str] = None,
    callback_queue: Optional[CallbackQueue] = None,
    completion: Optional[Completion] = None,
) -> None:
    """Refresh the access token and store the new one.

    Without ``refresh_token`` the stored token's refresh token is used.
    Observers of the store are notified when the new token is saved.
    """
    queue = callback_queue or CallbackQueue.current()
    completion = completion or _noop
    store = get_store()

    current = store.current
    token = refresh_token if refresh_token is not None else (
        (current.refresh_token or None) if current else None
    )
    if token is None:
        _deliver(queue, completion, Result.failure(
            RequestFailed(RequestFailureReason.LACK_OF_ACCESS_TOKEN)
        ))
        return

    def handle(result: Result) -> None:
        if not result.ok:
            completion(result)
            return
        try:
            store.set_current_token(result.value)
        except Exception as exc:
            completion(Result.failure(as_sdk_error(exc)))
            return
        completion(result)

    request = PostRefreshTokenRequest(get_configuration().channel_id, token)
    get_session().send(request, queue, handle)


def revoke_access_token(
    access_token: Optional[str] = None,
    callback_queue: Optional[CallbackQueue] = None,
    completion: Optional[Completion] = None,
) -> None:
    """Revoke the access token and remove it from the store.

    With no token given and none stored there is nothing to revoke, so
    the completion gets a success. A 400 from the server means the token
    was already invalid and is also reported as success.
    """
    queue = callback_queue or CallbackQueue.current()
    completion = completion or _noop
    store = get_store()

    def handle_success() -> None:
        try:
            store.remove_current_access_token()
        except Exception as exc:
            completion(Result.failure(as_sdk_error(exc)))
            return
        completion(Result.success())

    current = store.current
    token = access_token if access_token is not None else (
        current.value if current else None
    )
    if token is None:
        _deliver(queue, completion, Result.success())
        return

    def handle(result: Result) -> None:
        if result.ok:
            handle_success()
            return
        error = result.error
        if (
            isinstance(error, ResponseFailed)
            and error.is_invalid_http_status
            and error.status_code == 400
        ):
            logger.info("Treating revoke failure as success: %s", error)
            handle_success()
            return
        completion(result)

    request = PostRevokeTokenRequest(get_configuration().channel_id, token)
    get_session().send(request, queue, handle)


def verify_access_token(
    access_token: Optional[str] = None,
    callback_queue: Optional[CallbackQueue] = None,
    completion: Optional[Completion] = None,
) -> None:
    """Verify the given access token, or the stored one."""
    queue = callback_queue or CallbackQueue.current()
    completion = completion or _noop

    current = get_store().current
    token = access_token if access_token is not None else (
        current.value if current else None
    )
    if token is None:
        _deliver(queue, completion, Result.failure(
            RequestFailed(RequestFailureReason.LACK_OF_ACCESS_TOKEN)
        ))
        return

    get_session().send(GetVerifyTokenRequest(token), queue, completion)


# ── Users ─────────────────────────────────────────────────


def get_profile(
    callback_queue: Optional[CallbackQueue] = None,
    completion: Optional[Completion] = None,
) -> None:
    """Get the user's profile. Needs the ``profile`` permission."""
    get_session().send(GetUserProfileRequest(), callback_queue, completion or _noop)


def get_bot_friendship_status(
    callback_queue: Optional[CallbackQueue] = None,
    completion: Optional[Completion] = None,
) -> None:
    """Get the friendship status between the user and the channel's bot.

    Needs the ``profile`` permission.
    """
    get_session().send(
        GetBotFriendshipStatusRequest(), callback_queue, completion or _noop
    )


class API:
    """Namespace for the facade operations."""

    refresh_access_token = staticmethod(refresh_access_token)
    revoke_access_token = staticmethod(revoke_access_token)
    verify_access_token = staticmethod(verify_access_token)
    get_profile = staticmethod(get_profile)
    get_bot_friendship_status = staticmethod(get_bot_friendship_status)


# ── CLI ───────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linesdk", description="LINE Platform API client")
    parser.add_argument("--channel-id", help="LINE Login channel ID (default: $LINESDK_CHANNEL_ID)")
    parser.add_argument("--token-path", help="token file (default: ~/.linesdk/<channel>/access_token.json)")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("refresh")
    p.add_argument("--refresh-token")

    p = sub.add_parser("revoke")
    p.add_argument("--access-token")

    p = sub.add_parser("verify")
    p.add_argument("--access-token")

    sub.add_parser("profile")
    sub.add_parser("friendship")
    sub.add_parser("show-token")

    return parser


def _to_output(value) -> dict:
    if value is None:
        return {"ok": True}
    return value.to_dict()


def _show_token(completion: Completion) -> None:
    current = get_store().current
    if current is None:
        completion(Result.failure(RequestFailed(RequestFailureReason.LACK_OF_ACCESS_TOKEN)))
        return
    completion(Result.success(current))


_DISPATCH = {
    "refresh": lambda a, done: refresh_access_token(a.refresh_token, completion=done),
    "revoke": lambda a, done: revoke_access_token(a.access_token, completion=done),
    "verify": lambda a, done: verify_access_token(a.access_token, completion=done),
    "profile": lambda _, done: get_profile(completion=done),
    "friendship": lambda _, done: get_bot_friendship_status(completion=done),
    "show-token": lambda _, done: _show_token(done),
}


def main(argv: Optional[list] = None) -> None:
    """CLI entry point for API operations."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handler = _DISPATCH.get(args.command)
    if not handler:
        print("Unknown command", file=sys.stderr)
        sys.exit(1)

    results: list[Result] = []
    try:
        if args.channel_id:
            configure(args.channel_id, token_path=args.token_path)
        elif args.token_path:
            configure(get_configuration().channel_id, token_path=args.token_path)
        handler(args, results.append)
        value = results[0].unwrap()
    except LineSDKError as exc:
        print(json.dumps({"error": exc.to_dict()}), file=sys.stderr)
        sys.exit(1)

    json.dump(_to_output(value), sys.stdout, ensure_ascii=False, indent=2)
    print()
