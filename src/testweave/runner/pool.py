"""Bounded worker pool for running callables in parallel.

Every call builds its own fixed-size ``ThreadPoolExecutor`` and always tears
it down before returning. Results come back in submission order. The first
task to raise aborts the batch: tasks that have not started are cancelled and
the error is re-raised. Python threads cannot be interrupted, so tasks that
are already running when a sibling fails are left to finish on their own.
"""

from __future__ import annotations

import functools
import threading
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor

import structlog

from testweave.runner.context import bound

logger = structlog.get_logger()


class _Aborted(CancelledError):
    """Raised inside a queued task that started after its batch was aborted."""


def _guarded[T](fn: Callable[[], T], cancelled: threading.Event) -> Callable[[], T]:
    bound_fn = bound(fn)

    def task() -> T:
        if cancelled.is_set():
            raise _Aborted
        return bound_fn()

    return task


def run_all[T](threads: int, fns: Iterable[Callable[[], T]]) -> list[T]:
    """Run ``fns`` on ``threads`` workers and return their results in order.

    The callables run with the caller's context bindings.

    Raises:
        Exception: Whatever the first failing task (in submission order) raised.
    """
    cancelled = threading.Event()
    executor = ThreadPoolExecutor(max_workers=threads, thread_name_prefix="testweave-worker")
    futures: list[Future[T]] = []
    try:
        futures = [executor.submit(_guarded(fn, cancelled)) for fn in fns]
        return [future.result() for future in futures]
    except BaseException:
        cancelled.set()
        pending = sum(1 for future in futures if future.cancel())
        logger.debug("pool_aborted", submitted=len(futures), cancelled=pending)
        raise
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def pmap[T, R](threads: int, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
    """Parallel ``map`` over ``items`` using ``run_all``."""
    return run_all(threads, [functools.partial(fn, item) for item in items])
