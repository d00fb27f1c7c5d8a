"""Ambient binding of the in-flight request for code that is not handed it explicitly."""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from starlette.requests import HTTPConnection

_current_connection: ContextVar[HTTPConnection | None] = ContextVar("current_connection", default=None)


@contextmanager
def bind_connection(connection: HTTPConnection) -> Iterator[None]:
    """Make `connection` the ambient request for the duration of the block."""
    reset_token = _current_connection.set(connection)
    try:
        yield
    finally:
        _current_connection.reset(reset_token)


def current_connection() -> HTTPConnection | None:
    return _current_connection.get()
