"""
FileSystem 模块

提供统一的对象存储客户端, 按标识符通过配置选择 qiniu / aliyun-oss / fastdfs
"""

from ext.filesystem.base import BaseStorageProvider, UploadRequest
from ext.filesystem.types import (
    BaseProviderConfig,
    QiniuConfig,
    AliyunOSSConfig,
    FastDFSConfig,
    FileSystemProviderEnum,
)
from ext.filesystem.lookup import ConfigLookup, PropertiesLookup
from ext.filesystem.factory import FileSystemProviderFactory
from ext.filesystem.client import (
    FileSystemClient,
    FileSystemClientRegistry,
    default_registry,
    get_client,
    get_public_client,
    get_private_client,
)
from ext.filesystem.exceptions import (
    FileSystemError,
    FileSystemConfigMissingError,
    FileSystemArgumentError,
    FileSystemProviderTypeError,
    FileSystemProviderInitError,
    FileUploadError,
    FileDeleteError,
    FileSystemOperationNotSupportedError,
)

__all__ = [
    # Core
    "BaseStorageProvider",
    "UploadRequest",
    # Config types
    "BaseProviderConfig",
    "QiniuConfig",
    "AliyunOSSConfig",
    "FastDFSConfig",
    "FileSystemProviderEnum",
    "ConfigLookup",
    "PropertiesLookup",
    # Factory & clients
    "FileSystemProviderFactory",
    "FileSystemClient",
    "FileSystemClientRegistry",
    "default_registry",
    "get_client",
    "get_public_client",
    "get_private_client",
    # Exceptions
    "FileSystemError",
    "FileSystemConfigMissingError",
    "FileSystemArgumentError",
    "FileSystemProviderTypeError",
    "FileSystemProviderInitError",
    "FileUploadError",
    "FileDeleteError",
    "FileSystemOperationNotSupportedError",
]
