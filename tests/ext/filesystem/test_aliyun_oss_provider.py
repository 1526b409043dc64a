"""
测试 Aliyun OSS Provider

使用内存 Bucket 替换 SDK 的网络调用
"""

import base64
import io
import json

import pytest

oss2 = pytest.importorskip("oss2")

from oss2.exceptions import ServerError  # noqa: E402

from ext.filesystem.base import UploadRequest  # noqa: E402
from ext.filesystem.exceptions import FileDeleteError, FileUploadError  # noqa: E402
from ext.filesystem.factory import FileSystemProviderFactory  # noqa: E402
from ext.filesystem.lookup import PropertiesLookup  # noqa: E402
from ext.filesystem.providers.aliyun_oss import AliyunOSSProvider  # noqa: E402


class FakeBucket:
    """内存 Bucket"""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, dict]] = {}

    def put_object(self, key, data, headers=None):
        if hasattr(data, "read"):
            data = data.read()
        self.objects[key] = (data, headers or {})

    def put_object_from_file(self, key, filename, headers=None):
        with open(filename, "rb") as f:
            self.objects[key] = (f.read(), headers or {})

    def object_exists(self, key):
        return key in self.objects

    def delete_object(self, key):
        self.objects.pop(key, None)


class FailingBucket(FakeBucket):
    def put_object(self, key, data, headers=None):
        raise ServerError(403, {}, b"", {"Code": "AccessDenied", "Message": "denied"})

    def object_exists(self, key):
        raise ServerError(403, {}, b"", {"Code": "AccessDenied", "Message": "denied"})


@pytest.fixture
def provider(oss_properties):
    provider = FileSystemProviderFactory.build("private", PropertiesLookup(oss_properties))
    assert isinstance(provider, AliyunOSSProvider)
    return provider


@pytest.fixture
def fake_bucket(provider):
    bucket = FakeBucket()
    provider._bucket = bucket
    return bucket


class TestAliyunOSSProvider:
    """测试 Aliyun OSS Provider"""

    def test_create_provider(self, provider):
        assert provider.config.bucket_name == "private-bucket"
        assert provider.is_private is True
        assert isinstance(provider.bucket, oss2.Bucket)

    def test_upload_bytes(self, provider, fake_bucket, sample_file_content):
        request = UploadRequest.from_bytes(sample_file_content, key="a.txt").with_catalog("docs")

        url = provider.upload(request)

        assert url == "https://private-bucket.oss-cn-hangzhou.aliyuncs.com/docs/a.txt"
        content, headers = fake_bucket.objects["docs/a.txt"]
        assert content == sample_file_content
        assert headers["Content-Type"] == "text/plain"

    def test_upload_stream(self, provider, fake_bucket, sample_file_content):
        request = UploadRequest.from_stream(io.BytesIO(sample_file_content), "image/png", key="img.png")

        provider.upload(request)

        content, headers = fake_bucket.objects["img.png"]
        assert content == sample_file_content
        assert headers["Content-Type"] == "image/png"

    def test_upload_file_generates_key(self, provider, fake_bucket, tmp_path, sample_file_content):
        """测试未指定 key 时生成 uuid 文件名并保留扩展名"""
        file_path = tmp_path / "report.pdf"
        file_path.write_bytes(sample_file_content)

        url = provider.upload(UploadRequest.from_file(file_path).with_catalog("reports"))

        key = url.rsplit(".com/", 1)[1]
        assert key.startswith("reports/")
        assert key.endswith(".pdf")
        assert fake_bucket.objects[key][0] == sample_file_content

    def test_upload_failed(self, provider, sample_file_content):
        provider._bucket = FailingBucket()
        with pytest.raises(FileUploadError, match="a.txt"):
            provider.upload(UploadRequest.from_bytes(sample_file_content, key="a.txt"))

    def test_delete(self, provider, fake_bucket, sample_file_content):
        url = provider.upload(UploadRequest.from_bytes(sample_file_content, key="a.txt"))

        assert provider.delete(url) is True
        assert provider.delete("a.txt") is False

    def test_delete_failed(self, provider):
        provider._bucket = FailingBucket()
        with pytest.raises(FileDeleteError):
            provider.delete("a.txt")

    def test_private_download_url(self, provider):
        """测试私有 Bucket 返回签名链接"""
        url = provider.get_download_url("docs/a.txt")

        assert "/docs/a.txt?" in url
        assert "%2F" not in url
        assert "Signature=" in url
        assert "Expires=" in url

    def test_public_download_url(self, oss_properties):
        oss_properties["private"]["filesystem"]["private"] = False
        provider = FileSystemProviderFactory.build("private", PropertiesLookup(oss_properties))

        assert provider.get_download_url("docs/a.txt") == (
            "https://private-bucket.oss-cn-hangzhou.aliyuncs.com/docs/a.txt"
        )

    def test_create_upload_token(self, provider):
        """测试生成 PostObject 直传凭证"""
        token = json.loads(provider.create_upload_token({"owner": "alice"}, 300, "docs/a.txt"))

        assert token["accessid"] == "test-access-key"
        assert token["key"] == "docs/a.txt"
        assert token["x-oss-meta-owner"] == "alice"
        policy = json.loads(base64.b64decode(token["policy"]))
        assert ["eq", "$key", "docs/a.txt"] in policy["conditions"]
        assert {"bucket": "private-bucket"} in policy["conditions"]
        assert token["signature"]
