from zope.interface import Attribute
from zope.interface import Interface


class IObjectClient(Interface):
    """The single capability a backing object store must provide."""

    def fetch(key, start=None, end=None, context=None):
        """Fetch an object, or the inclusive byte range [start, end] of it.

        ``start=None`` requests the whole object without a Range header.
        Returns an IFetchResponse the caller must drain and close.
        Raises ObjectNotFoundError for a missing key and
        RangeNotSatisfiableError when the store rejects the range.
        """


class IFetchResponse(Interface):
    """One response body plus the metadata the reader needs."""

    content_length = Attribute("Number of body bytes")
    content_range = Attribute("'bytes start-end/total' or None for whole objects")
    last_modified = Attribute("Last-Modified timestamp of the object")

    def iter_chunks():
        """Yield the body as byte strings."""

    def close():
        """Release the underlying HTTP body stream."""


class IWritableObjectClient(Interface):
    """Thin pass-through write operations of a store client."""

    def put(key, data):
        """Upload bytes or a readable binary file object."""

    def delete(key):
        """Delete an object."""


class IPresigningClient(Interface):
    """Clients able to generate presigned URLs."""

    def presign_get(key, expires_in=900):
        """Return a URL granting GET access to the object."""

    def presign_put(key, expires_in=900):
        """Return a URL granting PUT access to the object."""


class INamespacedClient(Interface):
    """Clients bound to one bucket or container."""

    def namespace(name):
        """Return a copy of this client bound to another namespace."""


class IRemoteObject(Interface):
    """Read-only, seekable file view of a remote object."""

    name = Attribute("Object key")

    def read(size=-1):
        """Read up to size bytes; b'' at end of object."""

    def seek(offset, whence=0):
        """Move the read position; never fetches."""

    def tell():
        """Return the read position."""

    def stat():
        """Return an ObjectStat(name, size, last_modified)."""


class IObjectFS(Interface):
    """Filesystem-style facade over one namespace."""

    def open(name, context=None):
        """Open an object for reading, fetching its first chunk."""

    def read_file(name, context=None):
        """Return the whole object with one whole-object fetch."""

    def put(name, data):
        """Write an object."""

    def delete(name):
        """Remove an object."""

    def namespace(name):
        """Return a filesystem bound to another bucket, container or dir."""
