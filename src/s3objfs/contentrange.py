"""HTTP byte-range helpers (RFC 9110 ``Range`` / ``Content-Range``)."""

from s3objfs.errors import ContentRangeError

import re


_CONTENT_RANGE_RE = re.compile(r"bytes ([0-9]+)-([0-9]+)/([0-9]+)")


def parse_content_range(value):
    """Parse ``"bytes start-end/total"`` into ``(start, end, total)``.

    ``end`` is the last included byte, ``total`` the full object length.
    Raises ContentRangeError for absent, malformed or impossible values.
    """
    if not value:
        raise ContentRangeError(f"missing content-range: {value!r}")
    m = _CONTENT_RANGE_RE.fullmatch(value.strip())
    if m is None:
        raise ContentRangeError(f"malformed content-range: {value!r}")
    start, end, total = (int(g) for g in m.groups())
    if start > end or end >= total:
        raise ContentRangeError(f"invalid content-range: {value!r}")
    return start, end, total


def format_content_range(start, end, total):
    return f"bytes {start}-{end}/{total}"


def format_range_header(start, end):
    """Request header value for the inclusive range ``[start, end]``."""
    if start < 0 or end < start:
        raise ValueError(f"invalid byte range: {start}-{end}")
    return f"bytes={start}-{end}"
