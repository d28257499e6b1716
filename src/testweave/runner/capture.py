"""Output capture for test execution.

``with_capture`` swaps ``sys.stdout``/``sys.stderr`` for proxies that write
to the test buffer bound in the writer's context, falling back to the real
stream. ``with_test_buffer`` binds a fresh buffer around one test, and the
reporter reads it back with ``read_test_buffer`` only when that test fails.
"""

from __future__ import annotations

import contextvars
import io
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO

_buffer: contextvars.ContextVar[io.StringIO | None] = contextvars.ContextVar(
    "testweave_test_buffer", default=None
)

_install_lock = threading.Lock()
_install_depth = 0
_saved_streams: tuple[TextIO, TextIO] | None = None


class CapturingStream:
    """Text stream that routes writes to the current test buffer, if any."""

    def __init__(self, original: TextIO) -> None:
        self._original = original

    @property
    def original(self) -> TextIO:
        return self._original

    def _target(self) -> TextIO:
        buffer = _buffer.get()
        return buffer if buffer is not None else self._original

    def write(self, s: str) -> int:
        return self._target().write(s)

    def writelines(self, lines: list[str]) -> None:
        self._target().writelines(lines)

    def flush(self) -> None:
        self._target().flush()

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return _buffer.get() is None and self._original.isatty()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._original, name)


@contextmanager
def with_capture() -> Iterator[None]:
    """Install capturing proxies on stdout and stderr for the block.

    Nested and concurrent uses share one installation; the real streams come
    back when the outermost block exits.
    """
    global _install_depth, _saved_streams
    with _install_lock:
        if _install_depth == 0:
            _saved_streams = (sys.stdout, sys.stderr)
            sys.stdout = CapturingStream(sys.stdout)  # type: ignore[assignment]
            sys.stderr = CapturingStream(sys.stderr)  # type: ignore[assignment]
        _install_depth += 1
    try:
        yield
    finally:
        with _install_lock:
            _install_depth -= 1
            if _install_depth == 0 and _saved_streams is not None:
                sys.stdout, sys.stderr = _saved_streams
                _saved_streams = None


@contextmanager
def with_test_buffer() -> Iterator[io.StringIO]:
    """Bind a fresh output buffer for one test."""
    buffer = io.StringIO()
    token = _buffer.set(buffer)
    try:
        yield buffer
    finally:
        _buffer.reset(token)


def read_test_buffer() -> str:
    """Return what the current test has written so far, or ``""``."""
    buffer = _buffer.get()
    return buffer.getvalue() if buffer is not None else ""


@contextmanager
def passthrough() -> Iterator[None]:
    """Write to the real streams for the block, even inside a test buffer."""
    token = _buffer.set(None)
    try:
        yield
    finally:
        _buffer.reset(token)
