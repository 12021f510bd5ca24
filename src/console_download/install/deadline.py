"""Caller-supplied deadline checked between blocking API calls."""

from __future__ import annotations

import time

from console_download.utils.errors import DeadlineExceededError


class Deadline:
    """A point in monotonic time after which the installer stops.

    The installer calls ``check()`` before each blocking Kubernetes call;
    a call already in flight is bounded by the per-request timeout instead.
    """

    def __init__(self, expires_at: float) -> None:
        self.expires_at = expires_at

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        """Create a deadline ``seconds`` from now."""
        return cls(time.monotonic() + seconds)

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self, step: str) -> None:
        """Raise DeadlineExceededError if the deadline has passed."""
        if self.expired:
            raise DeadlineExceededError(step)


def check_deadline(deadline: Deadline | None, step: str) -> None:
    """Check an optional deadline."""
    if deadline is not None:
        deadline.check(step)
