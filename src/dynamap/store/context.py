"""Per-call cancellation and deadlines."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from ..core.exceptions import OperationCancelledError


@dataclass
class CallContext:
    """Cancellation signal and optional deadline for one repository call.

    The gateway checks the context before every store request and between
    result pages. A single context may be shared by several calls, and
    cancel() may be called from any thread.

    Attributes:
        deadline: Monotonic clock time after which the call is abandoned.
    """

    deadline: float | None = None
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def with_timeout(cls, seconds: float) -> "CallContext":
        """Create a context that expires after the given number of seconds."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        """Signal cancellation to every call using this context."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        """Check if cancel() was called."""
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self, operation: str = "operation") -> None:
        """Raise if the call was cancelled or its deadline has passed.

        Raises:
            OperationCancelledError: If cancelled or past the deadline.
        """
        if self._cancelled.is_set():
            raise OperationCancelledError(f"{operation} cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise OperationCancelledError(f"{operation} exceeded its deadline")


def ensure_context(ctx: CallContext | None) -> CallContext:
    """Return ctx, or a context that is never cancelled."""
    return ctx if ctx is not None else CallContext()
