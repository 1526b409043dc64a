"""
FileSystem Providers 初始化

自动注册所有存储 providers, SDK 未安装的 provider 不会注册
"""

from loguru import logger

from ext.filesystem.factory import FileSystemProviderFactory
from ext.filesystem.types import FileSystemProviderEnum

try:
    from ext.filesystem.providers.qiniu import QiniuProvider

    FileSystemProviderFactory.register(FileSystemProviderEnum.qiniu, QiniuProvider)
except ImportError as e:
    logger.warning(f"Failed to register Qiniu provider: {e}")

try:
    from ext.filesystem.providers.aliyun_oss import AliyunOSSProvider

    FileSystemProviderFactory.register(FileSystemProviderEnum.aliyun_oss, AliyunOSSProvider)
except ImportError as e:
    logger.warning(f"Failed to register Aliyun OSS provider: {e}")

try:
    from ext.filesystem.providers.fastdfs import FastDFSProvider

    FileSystemProviderFactory.register(FileSystemProviderEnum.fastdfs, FastDFSProvider)
except ImportError as e:
    logger.warning(f"Failed to register FastDFS provider: {e}")

__all__ = ["QiniuProvider", "AliyunOSSProvider", "FastDFSProvider"]
