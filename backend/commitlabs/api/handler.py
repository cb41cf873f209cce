"""Request Handler Wrapper — route handlers that always return a response.

Invariants:
    - The wrapped handler's result is returned unchanged on success
    - Every Exception raised inside the handler becomes a failure envelope
      (via error_response); the wrapper never re-raises
    - The wrapper keeps the handler's signature, so FastAPI dependency
      injection sees the original parameters

Design Decisions:
    - Decorator over middleware: errors are rendered inside the route, so
      rate-limit denials and validation failures never reach the framework's
      server-error middleware
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from fastapi.responses import Response

from commitlabs.api.error_handlers import error_response


def _find_request(args: tuple, kwargs: dict) -> Request | None:
    for value in (*args, *kwargs.values()):
        if isinstance(value, Request):
            return value
    return None


def with_api_handler(
    handler: Callable[..., Awaitable[Response]],
) -> Callable[..., Awaitable[Response]]:
    """Wrap an async route handler with taxonomy-based error rendering."""

    @functools.wraps(handler)
    async def wrapper(*args: Any, **kwargs: Any) -> Response:
        try:
            return await handler(*args, **kwargs)
        except Exception as exc:
            return error_response(_find_request(args, kwargs), exc)

    return wrapper
