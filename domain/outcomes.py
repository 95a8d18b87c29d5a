"""Calls whose failure is recovered locally.

A step awaited directly propagates its failure to the caller. A step wrapped
in `best_effort` never raises: the failure is logged and handed back as a
`BestEffort` with no value, so the caller can carry on without it.
"""

from dataclasses import dataclass
import logging
from typing import Awaitable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BestEffort[T]:
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def best_effort[T](call: Awaitable[T], *, step: str) -> BestEffort[T]:
    try:
        value = await call
    except Exception as e:
        logger.warning("%s failed, continuing without it: %r", step, e)
        return BestEffort(error=e)
    return BestEffort(value=value)
