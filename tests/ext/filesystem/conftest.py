"""
FileSystem 模块的 conftest.py

定义测试所需的 fixtures
"""

import pytest

from ext.filesystem.lookup import PropertiesLookup
from ext.filesystem.types import BaseProviderConfig
from tests.ext.filesystem.fakes import CountingFactory, RecordingProvider


@pytest.fixture
def recording_provider():
    return RecordingProvider(identifier="test", config=BaseProviderConfig(urlprefix="http://cdn.example.com/"))


@pytest.fixture
def counting_factory():
    return CountingFactory()


@pytest.fixture
def qiniu_properties():
    """七牛配置"""
    return {
        "public": {
            "filesystem": {
                "provider": "qiniu",
                "private": False,
                "urlprefix": "http://cdn.example.com",
                "bucketName": "public-bucket",
                "accessKey": "test-access-key",
                "secretKey": "test-secret-key",
            }
        }
    }


@pytest.fixture
def oss_properties():
    """阿里云 OSS 配置"""
    return {
        "private": {
            "filesystem": {
                "provider": "aliyun-oss",
                "private": True,
                "urlprefix": "https://private-bucket.oss-cn-hangzhou.aliyuncs.com",
                "endpoint": "https://oss-cn-hangzhou.aliyuncs.com",
                "bucketName": "private-bucket",
                "accessKey": "test-access-key",
                "secretKey": "test-secret-key",
            }
        }
    }


@pytest.fixture
def fastdfs_properties():
    """FastDFS 配置（未设置 connectTimeout / maxThreads）"""
    return {
        "archive": {
            "filesystem": {
                "provider": "fastdfs",
                "urlprefix": "http://fdfs.example.com",
                "groupName": "group1",
                "servers": "10.0.0.1:22122;10.0.0.2:22122",
            }
        }
    }


@pytest.fixture
def sample_file_content():
    """示例文件内容"""
    return b"Hello, World! This is a test file for filesystem providers."
