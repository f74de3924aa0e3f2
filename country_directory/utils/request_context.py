"""Request-scoped identifiers shared by middleware, handlers and logs.

Each inbound HTTP call receives an identifier from the middleware in
:mod:`country_directory.main`; error payloads read it back through
:func:`get_request_id` so a client can quote it when reporting a problem.
"""

from __future__ import annotations

from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "clear_request_id",
    "get_request_id",
    "set_request_id",
]

REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(request_id: str) -> Token[str]:
    """Store ``request_id`` for the active task and return the reset token."""

    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Return the current request identifier, or an empty string outside a request."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    """Reset the identifier, restoring the value captured by ``token`` when given."""

    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")
