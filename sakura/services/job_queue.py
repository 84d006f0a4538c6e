from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Job:
    user_id: str
    text: str
    enqueued_at: datetime = field(default_factory=_utcnow)


class JobQueue:
    """Unbounded FIFO of pending reply jobs."""

    def __init__(self):
        self._jobs: deque[Job] = deque()

    def push(self, job: Job) -> None:
        self._jobs.append(job)

    def pop(self) -> Optional[Job]:
        """Return the oldest job, or None when empty."""
        if not self._jobs:
            return None
        return self._jobs.popleft()

    def __len__(self) -> int:
        return len(self._jobs)

    def __bool__(self) -> bool:
        return bool(self._jobs)
