"""Deferred execution of store actions with latest-wins supersession.

Save, reset and meal-log actions run after a configurable delay. A newer submission
under the same key cancels the pending one, so a stale action never overwrites state
produced by a later request.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Literal, Optional, TypeVar

from mise import metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

OutcomeStatus = Literal["completed", "superseded"]


@dataclass(frozen=True)
class DeferredOutcome(Generic[T]):
    """Result of a deferred action; ``value`` is only set when it completed."""

    key: str
    status: OutcomeStatus
    value: Optional[T] = None

    @property
    def completed(self) -> bool:
        return self.status == "completed"


class DeferredRunner:
    """Run synchronous callables after a delay, one pending action per key."""

    def __init__(self, *, delay: float = 0.0) -> None:
        if delay < 0:
            raise ValueError("delay cannot be negative")
        self._delay = delay
        self._pending: Dict[str, asyncio.Task] = {}

    @property
    def delay(self) -> float:
        return self._delay

    def pending(self) -> List[str]:
        return [key for key, task in self._pending.items() if not task.done()]

    def cancel(self, key: str) -> bool:
        """Cancel the pending action for ``key``; returns True when one was cancelled."""

        task = self._pending.get(key)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    @staticmethod
    def _metric_key(key: str) -> str:
        return key.split(":", 1)[0]

    async def _delayed(self, action: Callable[[], T], delay: float) -> T:
        if delay > 0:
            await asyncio.sleep(delay)
        return action()

    async def run(
        self,
        key: str,
        action: Callable[[], T],
        *,
        delay: Optional[float] = None,
    ) -> DeferredOutcome[T]:
        """Wait for the delay, then run ``action`` unless a newer submission replaced it.

        Exceptions raised by ``action`` propagate to the caller.
        """

        if self.cancel(key):
            logger.info("Deferred action %r superseded by a newer request", key)

        task = asyncio.ensure_future(self._delayed(action, self._delay if delay is None else delay))
        self._pending[key] = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._pending.get(key) is task:
                del self._pending[key]

        if task.cancelled():
            metrics.DEFERRED_ACTIONS.labels(key=self._metric_key(key), status="superseded").inc()
            return DeferredOutcome(key=key, status="superseded")

        value = task.result()
        metrics.DEFERRED_ACTIONS.labels(key=self._metric_key(key), status="completed").inc()
        return DeferredOutcome(key=key, status="completed", value=value)

    async def drain(self) -> None:
        """Wait for every pending action to finish or be cancelled."""

        tasks: List[Any] = [task for task in self._pending.values() if not task.done()]
        if tasks:
            await asyncio.wait(tasks)


__all__ = ["DeferredOutcome", "DeferredRunner"]
