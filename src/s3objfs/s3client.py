from botocore.config import Config
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError
from s3objfs.contentrange import format_range_header
from s3objfs.errors import ObjectNotFoundError
from s3objfs.errors import ObjectStoreError
from s3objfs.errors import RangeNotSatisfiableError
from s3objfs.interfaces import INamespacedClient
from s3objfs.interfaces import IObjectClient
from s3objfs.interfaces import IPresigningClient
from s3objfs.interfaces import IWritableObjectClient
from s3objfs.keys import full_key
from s3objfs.keys import validate_prefix
from s3objfs.response import FetchResponse
from zope.interface import implementer

import base64
import boto3
import copy
import io
import logging


logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = ("NoSuchKey", "NotFound", "404")
_INVALID_RANGE_CODES = ("InvalidRange", "416")
_STREAM_CHUNK_SIZE = 64 * 1024


@implementer(
    IObjectClient, IWritableObjectClient, IPresigningClient, INamespacedClient
)
class S3Client:
    """Thin boto3 wrapper for S3-compatible object storage."""

    def __init__(
        self,
        bucket_name,
        prefix="",
        endpoint_url=None,
        region_name=None,
        aws_access_key_id=None,
        aws_secret_access_key=None,
        use_ssl=True,
        addressing_style="auto",
        connect_timeout=60,
        read_timeout=60,
        sse_customer_key=None,
        client=None,
    ):
        if not bucket_name:
            raise ValueError("bucket_name must not be empty")
        self.bucket_name = bucket_name
        self._prefix = validate_prefix(prefix)

        # SSE-C setup
        if sse_customer_key:
            if not use_ssl:
                raise ValueError("SSE-C requires SSL, set use-ssl to true")
            raw_key = base64.b64decode(sse_customer_key)
            if len(raw_key) != 32:
                raise ValueError(
                    f"SSE-C key must be 32 bytes (256-bit), got {len(raw_key)}"
                )
            self._sse_extra_args = {
                "SSECustomerAlgorithm": "AES256",
                "SSECustomerKey": raw_key,
            }
        else:
            self._sse_extra_args = {}

        if client is not None:
            self._client = client
            return

        config = Config(
            s3={"addressing_style": addressing_style},
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
        )

        kwargs = {"config": config}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        if region_name:
            kwargs["region_name"] = region_name
        if aws_access_key_id:
            kwargs["aws_access_key_id"] = aws_access_key_id
        if aws_secret_access_key:
            kwargs["aws_secret_access_key"] = aws_secret_access_key
        kwargs["use_ssl"] = use_ssl
        if not use_ssl:
            logger.warning(
                "S3 SSL is disabled, data and credentials are transmitted in cleartext"
            )

        self._client = boto3.client("s3", **kwargs)

    def __repr__(self):
        return f"<S3Client bucket={self.bucket_name!r} prefix={self._prefix!r}>"

    @property
    def client(self):
        """The underlying boto3 client, for advanced usages."""
        return self._client

    def namespace(self, name):
        if not name:
            raise ValueError("namespace must not be empty")
        clone = copy.copy(self)
        clone.bucket_name = name
        return clone

    def _full_key(self, s3_key):
        return full_key(self._prefix, s3_key)

    def _wrap_client_error(self, e, operation, s3_key):
        """Map ClientError onto the store error hierarchy, logging the SDK error."""
        logger.debug("S3 %s failed for key=%s: %s", operation, s3_key, e)
        error = e.response.get("Error", {})
        code = str(error.get("Code", "Unknown"))
        status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if code in _NOT_FOUND_CODES or status == 404:
            raise ObjectNotFoundError(f"S3 object not found: key={s3_key}") from e
        if code in _INVALID_RANGE_CODES or status == 416:
            raise RangeNotSatisfiableError(
                f"S3 range not satisfiable for key={s3_key}"
            ) from e
        raise ObjectStoreError(
            f"S3 {operation} failed for key={s3_key}: {code}"
        ) from e

    def fetch(self, key, start=None, end=None, context=None):
        """GET the object or a byte range.

        ``context`` is not passed to boto3, which has no per-call timeout;
        the connect and read timeouts of the client Config apply instead.
        """
        kwargs = {"Bucket": self.bucket_name, "Key": self._full_key(key)}
        if start is not None:
            kwargs["Range"] = format_range_header(start, end)
        kwargs.update(self._sse_extra_args)
        try:
            rsp = self._client.get_object(**kwargs)
        except ClientError as e:
            self._wrap_client_error(e, "get", key)
        except BotoCoreError as e:
            logger.debug("S3 get failed for key=%s: %s", key, e)
            raise ObjectStoreError(f"S3 get failed for key={key}: {e}") from e

        body = rsp["Body"]
        return FetchResponse(
            body=self._iter_body(body, key),
            content_length=rsp.get("ContentLength"),
            content_range=rsp.get("ContentRange"),
            last_modified=rsp.get("LastModified"),
            release=body.close,
        )

    def _iter_body(self, body, key):
        try:
            yield from body.iter_chunks(_STREAM_CHUNK_SIZE)
        except BotoCoreError as e:
            logger.debug("S3 body read failed for key=%s: %s", key, e)
            raise ObjectStoreError(f"S3 body read failed for key={key}: {e}") from e

    def put(self, key, data):
        if isinstance(data, (bytes, bytearray, memoryview)):
            data = io.BytesIO(data)
        try:
            self._client.upload_fileobj(
                data,
                self.bucket_name,
                self._full_key(key),
                ExtraArgs=self._sse_extra_args or None,
            )
        except ClientError as e:
            self._wrap_client_error(e, "upload", key)

    def delete(self, key):
        try:
            self._client.delete_object(Bucket=self.bucket_name, Key=self._full_key(key))
        except ClientError as e:
            self._wrap_client_error(e, "delete", key)

    def _presign(self, method, key, expires_in):
        # Signing is local; no request is sent.
        return self._client.generate_presigned_url(
            method,
            Params={"Bucket": self.bucket_name, "Key": self._full_key(key)},
            ExpiresIn=expires_in,
        )

    def presign_get(self, key, expires_in=900):
        return self._presign("get_object", key, expires_in)

    def presign_put(self, key, expires_in=900):
        return self._presign("put_object", key, expires_in)
