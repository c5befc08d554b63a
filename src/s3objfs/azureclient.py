"""Azure Blob Storage adapter.

Requests a byte range through the ``offset``/``length`` arguments of
``download_blob`` rather than a Range header string. Credentials are either
a shared key (account name plus key) or a SAS token embedded in the account
URL, in which case no credential object is passed.
"""

from azure.core.exceptions import AzureError
from azure.core.exceptions import HttpResponseError
from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient
from s3objfs.contentrange import format_content_range
from s3objfs.errors import ContentRangeError
from s3objfs.errors import ObjectNotFoundError
from s3objfs.errors import ObjectStoreError
from s3objfs.errors import RangeNotSatisfiableError
from s3objfs.interfaces import INamespacedClient
from s3objfs.interfaces import IObjectClient
from s3objfs.interfaces import IWritableObjectClient
from s3objfs.keys import full_key
from s3objfs.keys import validate_prefix
from s3objfs.response import FetchResponse
from zope.interface import implementer

import copy
import logging


logger = logging.getLogger(__name__)


def _total_size(content_range):
    """Object length from the ``/total`` suffix of a content-range value."""
    _, sep, total = (content_range or "").rpartition("/")
    if not sep or not total.isdigit():
        raise ContentRangeError(f"malformed content-range: {content_range!r}")
    return int(total)


@implementer(IObjectClient, IWritableObjectClient, INamespacedClient)
class AzureBlobClient:
    """Thin azure-storage-blob wrapper bound to one container."""

    def __init__(
        self,
        container_name,
        account_url=None,
        account_name=None,
        account_key=None,
        prefix="",
        service_client=None,
    ):
        if not container_name:
            raise ValueError("container_name must not be empty")
        self.container_name = container_name
        self._prefix = validate_prefix(prefix)

        if service_client is None:
            if not account_url:
                raise ValueError("account_url is required")
            credential = None
            if account_key:
                credential = {"account_name": account_name, "account_key": account_key}
            service_client = BlobServiceClient(account_url, credential=credential)
        self._service = service_client
        self._container = service_client.get_container_client(container_name)

    def __repr__(self):
        return (
            f"<AzureBlobClient container={self.container_name!r} "
            f"prefix={self._prefix!r}>"
        )

    @property
    def client(self):
        """The underlying ContainerClient, for advanced usages."""
        return self._container

    def namespace(self, name):
        if not name:
            raise ValueError("namespace must not be empty")
        clone = copy.copy(self)
        clone.container_name = name
        clone._container = self._service.get_container_client(name)
        return clone

    def _blob_name(self, key):
        return full_key(self._prefix, key)

    def _wrap_error(self, e, operation, key):
        logger.debug("Azure %s failed for key=%s: %s", operation, key, e)
        if isinstance(e, ResourceNotFoundError):
            raise ObjectNotFoundError(f"Azure blob not found: key={key}") from e
        if isinstance(e, HttpResponseError) and e.status_code == 416:
            raise RangeNotSatisfiableError(
                f"Azure range not satisfiable for key={key}"
            ) from e
        code = getattr(e, "error_code", None) or type(e).__name__
        raise ObjectStoreError(f"Azure {operation} failed for key={key}: {code}") from e

    def fetch(self, key, start=None, end=None, context=None):
        kwargs = {}
        if start is not None:
            kwargs["offset"] = start
            kwargs["length"] = end - start + 1
        if context is not None and context.remaining_seconds() is not None:
            kwargs["timeout"] = context.remaining_seconds()
        try:
            downloader = self._container.download_blob(self._blob_name(key), **kwargs)
        except AzureError as e:
            self._wrap_error(e, "download", key)

        content_range = None
        if start is not None:
            # The service clamps the end to the blob size; describe the bytes returned.
            content_range = format_content_range(
                start,
                start + downloader.size - 1,
                _total_size(downloader.properties.content_range),
            )
        return FetchResponse(
            body=self._iter_body(downloader, key),
            content_length=downloader.size,
            content_range=content_range,
            last_modified=downloader.properties.last_modified,
        )

    def _iter_body(self, downloader, key):
        try:
            yield from downloader.chunks()
        except AzureError as e:
            self._wrap_error(e, "download", key)

    def put(self, key, data):
        try:
            self._container.upload_blob(self._blob_name(key), data, overwrite=True)
        except AzureError as e:
            self._wrap_error(e, "upload", key)

    def delete(self, key):
        try:
            self._container.delete_blob(self._blob_name(key))
        except AzureError as e:
            self._wrap_error(e, "delete", key)
