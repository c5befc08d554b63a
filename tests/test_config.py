from moto import mock_aws
from s3objfs.azureclient import AzureBlobClient
from s3objfs.config import create_fs
from s3objfs.config import fs_from_config_file
from s3objfs.config import fs_from_config_string
from s3objfs.fs import ObjectFS
from s3objfs.s3client import S3Client
from unittest.mock import patch

import boto3
import pytest
import ZConfig


@pytest.fixture
def s3_env():
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket="test-bucket")
        s3.put_object(Bucket="test-bucket", Key="hello.txt", Body=b"hello, world")
        yield


class TestZConfig:
    def test_creates_fs(self, s3_env):
        fs = fs_from_config_string(
            """\
            namespace test-bucket
            region us-east-1
            """
        )
        assert isinstance(fs, ObjectFS)
        assert isinstance(fs.client, S3Client)
        assert fs.read_file("hello.txt") == b"hello, world"

    def test_all_options(self, s3_env):
        fs = fs_from_config_string(
            """\
            namespace test-bucket
            endpoint http://localhost:9000
            region eu-central-1
            access-key minioadmin
            secret-key minioadmin
            prefix myprefix
            use-ssl false
            addressing-style path
            connect-timeout 5
            read-timeout 10
            buffer-size 1MB
            """
        )
        assert fs.buffer_size == 1024 * 1024
        assert fs.client.bucket_name == "test-bucket"
        assert fs.client._prefix == "myprefix"
        assert fs.client.client.meta.endpoint_url == "http://localhost:9000"
        assert fs.client.client.meta.region_name == "eu-central-1"

    def test_default_values(self, s3_env):
        fs = fs_from_config_string("namespace test-bucket\n")
        assert fs.buffer_size == 0
        assert fs.client._prefix == ""
        assert fs.client.client.meta.region_name == "us-east-1"

    def test_namespace_required(self):
        with pytest.raises(ZConfig.ConfigurationError):
            fs_from_config_string("region us-east-1\n")

    def test_invalid_buffer_size(self):
        with pytest.raises(ZConfig.ConfigurationError):
            fs_from_config_string("namespace test-bucket\nbuffer-size lots\n")

    def test_from_file(self, s3_env, tmp_path):
        path = tmp_path / "objfs.conf"
        path.write_text("namespace test-bucket\nbuffer-size 4\n")
        fs = fs_from_config_file(str(path))
        assert fs.buffer_size == 4
        with fs.open("hello.txt") as f:
            f.seek(7)
            assert f.read() == b"world"

    def test_azure_endpoint(self):
        with patch("s3objfs.azureclient.BlobServiceClient"):
            fs = fs_from_config_string(
                """\
                namespace test-container
                endpoint https://acct.blob.core.windows.net
                access-key acct
                secret-key c2VjcmV0
                """
            )
        assert isinstance(fs.client, AzureBlobClient)
        assert fs.client.container_name == "test-container"


class TestCreateFS:
    def test_requires_namespace(self):
        with pytest.raises(ValueError):
            create_fs("")

    def test_invalid_addressing_style(self):
        with pytest.raises(ValueError, match="addressing-style"):
            create_fs("test-bucket", addressing_style="sideways")

    def test_s3_default_region(self, s3_env):
        fs = create_fs("test-bucket")
        assert fs.client.client.meta.region_name == "us-east-1"

    def test_azure_selected_by_endpoint(self):
        with patch("s3objfs.azureclient.BlobServiceClient") as cls:
            fs = create_fs(
                "test-container",
                endpoint="https://acct.blob.core.windows.net",
                access_key="acct",
                secret_key="c2VjcmV0",
                buffer_size=1024,
            )
        assert isinstance(fs.client, AzureBlobClient)
        assert fs.buffer_size == 1024
        cls.assert_called_once_with(
            "https://acct.blob.core.windows.net",
            credential={"account_name": "acct", "account_key": "c2VjcmV0"},
        )
