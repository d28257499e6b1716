"""Decorators that attach run metadata to test functions.

Modules set the same metadata for all of their tests with a module-level
``__testweave__`` dict, e.g. ``__testweave__ = {"synchronized": True}``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

METADATA_ATTR = "__testweave__"


def _mark[F: Callable[..., Any]](fn: F, key: str) -> F:
    meta = dict(getattr(fn, METADATA_ATTR, {}))
    meta[key] = True
    setattr(fn, METADATA_ATTR, meta)
    return fn


def synchronized[F: Callable[..., Any]](fn: F) -> F:
    """Never run this test at the same time as another synchronized test."""
    return _mark(fn, "synchronized")


def slow[F: Callable[..., Any]](fn: F) -> F:
    """Known to be slow; exempt from slow-test warnings."""
    return _mark(fn, "slow")


def metadata(obj: object) -> dict[str, Any]:
    meta = getattr(obj, METADATA_ATTR, None)
    return meta if isinstance(meta, dict) else {}
