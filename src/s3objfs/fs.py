from s3objfs.interfaces import IObjectFS
from s3objfs.interfaces import IPresigningClient
from s3objfs.reader import read_object
from s3objfs.reader import RemoteObject
from zope.interface import implementer


@implementer(IObjectFS)
class ObjectFS:
    """Filesystem-style access to one bucket or container.

    ``buffer_size`` is the per-fetch chunk size of opened objects; 0 fetches
    each object whole on open.
    """

    def __init__(self, client, buffer_size=0):
        if buffer_size < 0:
            raise ValueError(f"buffer_size must not be negative: {buffer_size!r}")
        self._client = client
        self.buffer_size = buffer_size

    def __repr__(self):
        return f"<ObjectFS {self._client!r} buffer_size={self.buffer_size}>"

    @property
    def client(self):
        return self._client

    def namespace(self, name):
        return ObjectFS(self._client.namespace(name), self.buffer_size)

    def open(self, name, context=None):
        return RemoteObject(
            self._client, name, buffer_size=self.buffer_size, context=context
        )

    def read_file(self, name, context=None):
        return read_object(self._client, name, context=context)

    def put(self, name, data):
        self._client.put(name, data)

    def delete(self, name):
        self._client.delete(name)

    def presign_get(self, name, expires_in=900):
        return self._presigning_client().presign_get(name, expires_in=expires_in)

    def presign_put(self, name, expires_in=900):
        return self._presigning_client().presign_put(name, expires_in=expires_in)

    def _presigning_client(self):
        if not IPresigningClient.providedBy(self._client):
            raise NotImplementedError(
                f"{type(self._client).__name__} does not support presigned URLs"
            )
        return self._client
