"""Bounded poll-with-sleep loop shared by every wait in the pipeline."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PollBudget:
    max_attempts: int
    interval: float  # seconds between attempts

    @property
    def timeout(self) -> float:
        return self.max_attempts * self.interval


@dataclass
class PollResult(Generic[T]):
    attempts: int
    value: T | None = None
    timed_out: bool = False


def poll(
    probe: Callable[[], T | None],
    budget: PollBudget,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult[T]:
    """Call probe until it returns something other than None.

    Sleeps budget.interval after each unresolved attempt except the last,
    so a budget of N attempts makes exactly N probe calls before timing out.
    """
    for attempt in range(1, budget.max_attempts + 1):
        value = probe()
        if value is not None:
            return PollResult(attempts=attempt, value=value)
        if attempt < budget.max_attempts:
            sleep(budget.interval)
    return PollResult(attempts=budget.max_attempts, timed_out=True)
