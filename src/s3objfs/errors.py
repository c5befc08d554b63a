class ObjectStoreError(Exception):
    """Wraps SDK errors to avoid leaking provider infrastructure details."""


class ObjectNotFoundError(ObjectStoreError, FileNotFoundError):
    """The requested key does not exist."""


class RangeNotSatisfiableError(ObjectStoreError):
    """The store rejected the requested byte range (HTTP 416).

    Expected for zero-length objects, whose valid byte range is empty.
    """


class ContentRangeError(ObjectStoreError, ValueError):
    """A range response is missing, malformed or inconsistent."""


class ObjectChangedError(ObjectStoreError):
    """The object was modified between two fetches of the same reader."""

    def __init__(self, name, expected, actual):
        super().__init__(
            f"object {name!r} changed during read: "
            f"last-modified was {expected}, now {actual}"
        )
        self.name = name
        self.expected = expected
        self.actual = actual


class FetchCancelledError(ObjectStoreError):
    """The fetch context was cancelled."""


class DeadlineExceededError(ObjectStoreError, TimeoutError):
    """The fetch context deadline has passed."""
