from s3objfs.fs import ObjectFS

import io
import logging
import os
import ZConfig


logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
_ADDRESSING_STYLES = ("auto", "path", "virtual")
_SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.xml")


def create_fs(
    namespace,
    endpoint=None,
    region=None,
    access_key=None,
    secret_key=None,
    prefix="",
    use_ssl=True,
    addressing_style="auto",
    connect_timeout=60,
    read_timeout=60,
    buffer_size=0,
):
    """Create an ObjectFS for an S3-compatible or Azure Blob endpoint."""
    if not namespace:
        raise ValueError("namespace (bucket or container) is required")
    if addressing_style not in _ADDRESSING_STYLES:
        raise ValueError(
            f"addressing-style must be one of {_ADDRESSING_STYLES}, "
            f"got {addressing_style!r}"
        )

    if endpoint and "blob.core" in endpoint:
        from s3objfs.azureclient import AzureBlobClient

        client = AzureBlobClient(
            container_name=namespace,
            account_url=endpoint,
            account_name=access_key,
            account_key=secret_key,
            prefix=prefix,
        )
    else:
        from s3objfs.s3client import S3Client

        client = S3Client(
            bucket_name=namespace,
            prefix=prefix,
            endpoint_url=endpoint,
            region_name=region or DEFAULT_REGION,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            use_ssl=use_ssl,
            addressing_style=addressing_style,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
        )
    logger.debug("created %r", client)
    return ObjectFS(client, buffer_size=buffer_size)


def load_schema():
    with open(_SCHEMA_PATH) as f:
        return ZConfig.loadSchemaFile(f)


def _fs_from_config(config):
    return create_fs(
        namespace=config.namespace,
        endpoint=config.endpoint,
        region=config.region,
        access_key=config.access_key,
        secret_key=config.secret_key,
        prefix=config.prefix,
        use_ssl=config.use_ssl,
        addressing_style=config.addressing_style,
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
        buffer_size=config.buffer_size,
    )


def fs_from_config_string(text):
    """Create an ObjectFS from ZConfig text."""
    config, _handlers = ZConfig.loadConfigFile(load_schema(), io.StringIO(text))
    return _fs_from_config(config)


def fs_from_config_file(path):
    """Create an ObjectFS from a ZConfig file."""
    with open(path) as f:
        config, _handlers = ZConfig.loadConfigFile(load_schema(), f)
    return _fs_from_config(config)
