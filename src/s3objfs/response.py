from s3objfs.interfaces import IFetchResponse
from zope.interface import implementer


@implementer(IFetchResponse)
class FetchResponse:
    """Body and metadata of one GET, normalized across providers.

    ``body`` is an iterable of byte strings; ``release`` is called once
    on close to free the provider's stream.
    """

    def __init__(
        self, body, content_length, content_range, last_modified, release=None
    ):
        self._body = body
        self.content_length = content_length
        self.content_range = content_range
        self.last_modified = last_modified
        self._release = release
        self.closed = False

    def iter_chunks(self):
        return iter(self._body)

    def close(self):
        if self.closed:
            return
        self.closed = True
        if self._release is not None:
            self._release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return (
            f"<FetchResponse length={self.content_length} "
            f"range={self.content_range!r} last_modified={self.last_modified}>"
        )
