"""Single-user plan state: profile, current calendar and conversation log."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Iterator, Optional, Tuple

from fastapi import Request

from fittrainer.api.schemas.plan import Calendar, ChatMessage, UserProfile
from fittrainer.core.errors import PlanBusyError

BUSY_MESSAGE = "Another plan update is still running; try again shortly."

DEFAULT_PROFILE = {
    "startDate": "2025-09-01",
    "name": "Hello World!",
    "age": 40,
    "gender": "Male",
    "heightIn": 65,
    "weightLb": 150,
    "targetWeightLb": 175,
    "activityLevel": "moderate",
    "hoursPerWeek": 12,
    "restDays": ["Tuesday"],
    "trainDays": ["Sunday"],
    "goals": ["endurance"],
}


def default_profile() -> UserProfile:
    return UserProfile.model_validate(DEFAULT_PROFILE)


@dataclass(frozen=True)
class PlanState:
    profile: UserProfile
    calendar: Optional[Calendar] = None
    messages: Tuple[ChatMessage, ...] = field(default_factory=tuple)


class PlanSession:
    """
    Holds the one live PlanState for this process.

    Readers take ``state`` as an immutable snapshot. Writers wrap their whole
    read/oracle/write sequence in ``mutation()`` so concurrent generate and
    override requests apply one after another instead of racing; ``commit``
    swaps in the new state in a single assignment.
    """

    def __init__(self, profile: UserProfile | None = None, *, wait_seconds: float | None = None) -> None:
        self._state = PlanState(profile=profile or default_profile())
        self._write_lock = threading.Lock()
        self._wait_seconds = wait_seconds

    @property
    def state(self) -> PlanState:
        return self._state

    @contextmanager
    def mutation(self) -> Iterator[PlanState]:
        """Hold the write lock; gives up with PlanBusyError after ``wait_seconds``."""
        timeout = -1 if self._wait_seconds is None else self._wait_seconds
        if not self._write_lock.acquire(timeout=timeout):
            raise PlanBusyError(BUSY_MESSAGE)
        try:
            yield self._state
        finally:
            self._write_lock.release()

    def commit(self, **changes) -> PlanState:
        if not self._write_lock.locked():
            raise RuntimeError("PlanSession.commit() must run inside mutation()")
        self._state = replace(self._state, **changes)
        return self._state


def get_plan_session(request: Request) -> PlanSession:
    """FastAPI dependency returning the application's PlanSession."""
    return request.app.state.plan_session
