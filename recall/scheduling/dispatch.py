"""
Effect dispatch for the orchestrator.

Sink and store calls are fire-and-forget: the engine never waits on them,
never retries them, and never rolls back its own state when one fails.
Dispatchers run the effects in submission order and log failures.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable

from loguru import logger

Effect = Callable[..., Any]


def _describe(effect: Effect) -> str:
    return getattr(effect, "__qualname__", repr(effect))


class ImmediateDispatcher:
    """Runs each effect inline; a failing effect is logged and skipped."""

    def submit(self, effect: Effect, *args: Any) -> None:
        try:
            effect(*args)
        except Exception:
            logger.exception(f"Side effect {_describe(effect)} failed; in-memory state kept")

    def drain(self, timeout: float | None = None) -> bool:
        return True

    def close(self) -> None:
        pass


class BackgroundDispatcher:
    """
    Runs effects on a single worker thread.

    One worker keeps cancel-then-schedule ordering intact. ``submit``
    returns at once, so a slow or hanging sink cannot block the caller.

    Usage:
        dispatcher = BackgroundDispatcher()
        orchestrator = SchedulingOrchestrator(sink, store, dispatcher=dispatcher)
        # ...
        dispatcher.close()
    """

    def __init__(self, name: str = "recall-effects"):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)

    def submit(self, effect: Effect, *args: Any) -> None:
        future = self._executor.submit(effect, *args)
        future.add_done_callback(lambda f, e=effect: self._finished(f, e))

    def _finished(self, future: Future, effect: Effect) -> None:
        exc = future.exception()
        if exc is not None:
            logger.opt(exception=exc).error(
                f"Side effect {_describe(effect)} failed; in-memory state kept"
            )

    def drain(self, timeout: float | None = None) -> bool:
        """
        Wait for every effect submitted so far.

        Returns:
            True if the queue emptied within ``timeout``
        """
        marker = self._executor.submit(lambda: None)
        try:
            marker.result(timeout=timeout)
        except FutureTimeoutError:
            return False
        return True

    def close(self) -> None:
        self._executor.shutdown(wait=True)
