"""
Streaming helpers for request handlers that render into a response writer.
"""
import functools
from typing import Any, Callable

Handler = Callable[[Any, Any], Any]


class FlushWriter:
    """Writer that flushes the underlying writer after every write."""

    def __init__(self, writer: Any):
        self.writer = writer

    def __getattr__(self, name: str) -> Any:
        return getattr(self.writer, name)

    def write(self, data):
        n = self.writer.write(data)
        self.writer.flush()
        return n


def always_flush(handler: Handler) -> Handler:
    """
    Wrap a ``handler(writer, request)`` so output is flushed after each write.

    Writers without a ``flush`` method are passed through untouched.
    """
    @functools.wraps(handler)
    def wrapper(writer, request):
        if not callable(getattr(writer, "flush", None)):
            return handler(writer, request)
        return handler(FlushWriter(writer), request)

    return wrapper
