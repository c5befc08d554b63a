from datetime import datetime
from datetime import timezone
from s3objfs.contentrange import format_content_range
from s3objfs.errors import ObjectNotFoundError
from s3objfs.errors import RangeNotSatisfiableError
from s3objfs.interfaces import IObjectClient
from s3objfs.interfaces import IWritableObjectClient
from s3objfs.response import FetchResponse
from zope.interface import implementer

import pytest


MTIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class BrokenBody:
    """Body that yields some bytes, then fails like a dropped connection."""

    def __init__(self, data, fail_after):
        self._data = data
        self._fail_after = fail_after

    def __iter__(self):
        yield self._data[: self._fail_after]
        raise ConnectionResetError("connection reset by peer")


@implementer(IObjectClient, IWritableObjectClient)
class FakeObjectClient:
    """In-memory store recording every fetch as ``(key, start, end)``.

    Behaves like S3: ranged requests on empty objects are rejected,
    range ends past the object are clamped.
    """

    def __init__(self, objects=None, chunk_size=4):
        self.objects = dict(objects or {})
        self.mtimes = {key: MTIME for key in self.objects}
        self.fetches = []
        self.responses = []
        self.chunk_size = chunk_size
        self._faults = []

    def put(self, key, data):
        self.objects[key] = bytes(data)
        self.mtimes[key] = MTIME

    def delete(self, key):
        self.objects.pop(key, None)
        self.mtimes.pop(key, None)

    def touch(self, key, mtime):
        self.mtimes[key] = mtime

    def fail_next(self, exc):
        """Make the next fetch raise ``exc`` before any body is returned."""
        self._faults.append(("raise", exc))

    def break_next_body(self, after):
        """Make the next body fail after ``after`` bytes were delivered."""
        self._faults.append(("break", after))

    def corrupt_next_range(self, value):
        """Make the next response carry ``value`` as its content-range."""
        self._faults.append(("range", value))

    def fetch(self, key, start=None, end=None, context=None):
        self.fetches.append((key, start, end))
        fault, arg = self._faults.pop(0) if self._faults else (None, None)
        if fault == "raise":
            raise arg
        if key not in self.objects:
            raise ObjectNotFoundError(key)
        data = self.objects[key]

        if start is None:
            payload = data
            content_range = None
        else:
            if start >= len(data):
                raise RangeNotSatisfiableError(f"{key} bytes={start}-{end}")
            end = min(end, len(data) - 1)
            payload = data[start : end + 1]
            content_range = format_content_range(start, end, len(data))

        body = [
            payload[i : i + self.chunk_size]
            for i in range(0, len(payload), self.chunk_size)
        ]
        if fault == "break":
            body = BrokenBody(payload, arg)
        elif fault == "range":
            content_range = arg
        response = FetchResponse(
            body=body,
            content_length=len(payload),
            content_range=content_range,
            last_modified=self.mtimes[key],
        )
        self.responses.append(response)
        return response


@pytest.fixture
def fake_client():
    return FakeObjectClient(
        {
            "hello.txt": b"hello, world",
            "empty.bin": b"",
            "lines.txt": b"line1\nline2\n",
            "digits.bin": b"0123456789" * 10,
        }
    )
