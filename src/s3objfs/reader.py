"""Seekable file view of a remote object, fetched lazily by byte range.

The reader keeps one contiguous prefix of the object in memory and grows it
one chunk at a time as the caller reads. Backward seeks are served from the
buffer; a forward seek past the buffered prefix is resolved by fetching the
whole remainder in one request. All fetches of one reader must observe the
same Last-Modified value, otherwise the read fails with ObjectChangedError.
"""

from s3objfs.contentrange import parse_content_range
from s3objfs.context import Context
from s3objfs.errors import ContentRangeError
from s3objfs.errors import ObjectChangedError
from s3objfs.errors import ObjectStoreError
from s3objfs.errors import RangeNotSatisfiableError
from s3objfs.interfaces import IRemoteObject
from zope.interface import implementer

import collections
import io
import logging


logger = logging.getLogger(__name__)

# Marker returned by the fetch planner for a request without Range header.
WHOLE_OBJECT = "whole-object"

ObjectStat = collections.namedtuple("ObjectStat", ["name", "size", "last_modified"])


def _drain(response, context):
    """Read a response body to the end and release it on every exit path.

    The body is collected in a scratch buffer so a failure mid-stream never
    leaves a truncated tail in the reader's buffer.
    """
    data = bytearray()
    try:
        for chunk in response.iter_chunks():
            context.check()
            data += chunk
    finally:
        response.close()
    return data


def read_object(client, name, context=None):
    """Return the whole object using one whole-object fetch."""
    context = context if context is not None else Context()
    context.check()
    logger.debug("fetching %s (whole object)", name)
    response = client.fetch(name, context=context)
    data = _drain(response, context)
    if response.content_length is not None and len(data) != response.content_length:
        raise ObjectStoreError(
            f"incomplete body for {name!r}: "
            f"got {len(data)} of {response.content_length} bytes"
        )
    return bytes(data)


@implementer(IRemoteObject)
class RemoteObject(io.RawIOBase):
    """Read-only, seekable file over an IObjectClient.

    The first chunk is fetched by the constructor, so size and modification
    time are known as soon as the object is open. ``buffer_size`` is the
    number of bytes requested per fetch; 0 downloads the whole object at
    once.

    Not safe for concurrent use; open one reader per thread instead.
    """

    def __init__(self, client, name, buffer_size=0, context=None):
        super().__init__()
        if buffer_size < 0:
            raise ValueError(f"buffer_size must not be negative: {buffer_size!r}")
        self.name = name
        self._client = client
        self._buffer_size = buffer_size
        self._context = context if context is not None else Context()
        self._buf = bytearray()
        self._download_offset = 0
        self._position = 0
        self._size = None
        self._last_modified = None
        self._last_modified_recorded = False
        self._complete = False
        self._fetch(self._chunk_range())

    def __repr__(self):
        return (
            f"<RemoteObject {self.name!r} size={self._size} "
            f"downloaded={self._download_offset} position={self._position}>"
        )

    # -- State --

    @property
    def size(self):
        return self._size

    @property
    def last_modified(self):
        return self._last_modified

    @property
    def download_offset(self):
        return self._download_offset

    @property
    def complete(self):
        return self._complete

    def stat(self):
        return ObjectStat(self.name, self._size, self._last_modified)

    # -- io.RawIOBase --

    def readable(self):
        return True

    def seekable(self):
        return True

    def readinto(self, b):
        self._checkClosed()
        view = memoryview(b).cast("B")
        wanted = len(view)
        if wanted == 0 or self._position >= self._size:
            return 0

        plan = self._plan_fetch(wanted)
        if plan is not None:
            self._fetch(plan)

        data = self._buf[self._position : self._position + wanted]
        n = len(data)
        view[:n] = data
        self._position += n
        return n

    def seek(self, offset, whence=io.SEEK_SET):
        self._checkClosed()
        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._position + offset
        elif whence == io.SEEK_END:
            position = self._size + offset
        else:
            raise ValueError(f"invalid whence ({whence!r}, should be 0, 1 or 2)")
        if position < 0:
            raise ValueError(f"negative seek position {position}")
        self._position = position
        return position

    def tell(self):
        self._checkClosed()
        return self._position

    def close(self):
        super().close()
        self._buf = bytearray()

    # -- Fetching --

    def _plan_fetch(self, wanted):
        """Decide what to fetch before serving ``wanted`` bytes.

        Returns None when the buffer suffices, WHOLE_OBJECT, or an
        inclusive ``(start, end)`` range.
        """
        if self._complete:
            return None
        if self._position > self._download_offset:
            # The buffer cannot hold a gap: download everything up to the end.
            return self._download_offset, self._size - 1
        if len(self._buf) - self._position >= wanted:
            return None
        return self._chunk_range()

    def _chunk_range(self):
        if self._buffer_size == 0 and self._download_offset == 0:
            return WHOLE_OBJECT
        start = self._download_offset
        end = start + self._buffer_size - 1
        if self._size is not None:
            end = min(end, self._size - 1)
        return start, end

    def _fetch(self, plan):
        if plan == WHOLE_OBJECT:
            self._fetch_whole()
            return

        start, end = plan
        self._context.check()
        logger.debug("fetching %s bytes %d-%d", self.name, start, end)
        try:
            response = self._client.fetch(
                self.name, start, end, context=self._context
            )
        except RangeNotSatisfiableError:
            if self._download_offset != 0:
                raise
            # Zero-length objects have no satisfiable range.
            logger.debug("range rejected for %s, fetching whole object", self.name)
            self._fetch_whole()
            return

        data = _drain(response, self._context)
        self._check_last_modified(response.last_modified)
        got_start, got_end, total = parse_content_range(response.content_range)
        if got_start != self._download_offset:
            raise ContentRangeError(
                f"{self.name!r}: expected range starting at "
                f"{self._download_offset}, got {response.content_range!r}"
            )
        if self._size is not None and total != self._size:
            raise ContentRangeError(
                f"{self.name!r}: size changed from {self._size} to {total}"
            )
        if len(data) != got_end - got_start + 1:
            raise ContentRangeError(
                f"{self.name!r}: got {len(data)} bytes for "
                f"{response.content_range!r}"
            )

        self._buf += data
        self._download_offset = got_end + 1
        self._size = total
        self._complete = got_end == total - 1
        self._record_last_modified(response.last_modified)

    def _fetch_whole(self):
        self._context.check()
        logger.debug("fetching %s (whole object)", self.name)
        response = self._client.fetch(self.name, context=self._context)
        data = _drain(response, self._context)
        self._check_last_modified(response.last_modified)
        if response.content_length is not None and len(data) != response.content_length:
            raise ObjectStoreError(
                f"incomplete body for {self.name!r}: "
                f"got {len(data)} of {response.content_length} bytes"
            )

        self._buf = data
        self._download_offset = len(data)
        self._size = len(data)
        self._complete = True
        self._record_last_modified(response.last_modified)

    def _check_last_modified(self, value):
        # None is a recorded value too; a later timestamp is still a change.
        if self._last_modified_recorded and value != self._last_modified:
            raise ObjectChangedError(self.name, self._last_modified, value)

    def _record_last_modified(self, value):
        if not self._last_modified_recorded:
            self._last_modified = value
            self._last_modified_recorded = True
