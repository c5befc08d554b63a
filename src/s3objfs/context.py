from s3objfs.errors import DeadlineExceededError
from s3objfs.errors import FetchCancelledError

import math
import threading
import time


class Context:
    """Cancellation and deadline token carried through every fetch.

    A reader keeps the context it was opened with; cancelling it (from any
    thread) makes the next fetch, or the body currently being drained,
    fail with FetchCancelledError.
    """

    def __init__(self, timeout=None):
        if timeout is not None and timeout < 0:
            raise ValueError(f"timeout must not be negative: {timeout!r}")
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self):
        return self._cancelled.is_set()

    @property
    def expired(self):
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self):
        """Seconds left before the deadline, or None without a deadline."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def remaining_seconds(self):
        """Whole seconds left, rounded up, for SDKs taking integer timeouts."""
        remaining = self.remaining()
        if remaining is None:
            return None
        return max(math.ceil(remaining), 1)

    def check(self):
        if self.cancelled:
            raise FetchCancelledError("fetch cancelled")
        if self.expired:
            raise DeadlineExceededError("fetch deadline exceeded")
