"""
FileSystem Client - 按标识符缓存的存储客户端
"""

import threading
from pathlib import Path
from typing import Any, BinaryIO, Protocol

from loguru import logger

from config.default import DEFAULT_PRIVATE_ID, DEFAULT_PUBLIC_ID
from config.main import create_local_configs
from ext.filesystem.base import BaseStorageProvider, UploadRequest
from ext.filesystem.factory import FileSystemProviderFactory
from ext.filesystem.lookup import ConfigLookup, PropertiesLookup

# 未指定过期时间时上传凭证的有效期(秒)
DEFAULT_UPLOAD_TOKEN_EXPIRES = 300

PUBLIC_ID_KEY = "public.filesystem.id"
PRIVATE_ID_KEY = "private.filesystem.id"


class ProviderBuilder(Protocol):
    def build(self, identifier: str, config: ConfigLookup) -> BaseStorageProvider: ...


class FileSystemClient:
    """存储客户端

    持有一个已初始化的 provider, 所有操作直接委托给 provider
    """

    def __init__(self, identifier: str, provider: BaseStorageProvider) -> None:
        self.identifier = identifier
        self.provider = provider

    def upload(self, request: UploadRequest) -> str:
        return self.provider.upload(request)

    def upload_file(
        self,
        file_path: str | Path,
        key: str | None = None,
        catalog: str | None = None,
    ) -> str:
        """上传本地文件

        Args:
            file_path: 本地文件路径
            key: 目标 key, 为空时由后端分配
            catalog: 逻辑子目录

        Returns:
            文件 URL
        """
        return self.upload(UploadRequest.from_file(file_path, key=key).with_catalog(catalog))

    def upload_bytes(self, key: str | None, contents: bytes, catalog: str | None = None) -> str:
        return self.upload(UploadRequest.from_bytes(contents, key=key).with_catalog(catalog))

    def upload_stream(
        self,
        key: str | None,
        stream: BinaryIO,
        mime_type: str | None,
        catalog: str | None = None,
    ) -> str:
        return self.upload(UploadRequest.from_stream(stream, mime_type, key=key).with_catalog(catalog))

    def delete(self, key: str) -> bool:
        return self.provider.delete(key)

    def get_download_url(self, key: str) -> str:
        return self.provider.get_download_url(key)

    def create_upload_token(
        self,
        metadata: dict[str, Any] | None = None,
        expires: int = DEFAULT_UPLOAD_TOKEN_EXPIRES,
        file_key: str | None = None,
    ) -> str:
        """生成客户端直传凭证

        Args:
            metadata: 自定义信息
            expires: 凭证有效期（秒）
            file_key: 限定上传的 key

        Raises:
            FileSystemOperationNotSupportedError: provider 不支持直传
        """
        return self.provider.create_upload_token(metadata, expires, file_key)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} identifier={self.identifier!r} provider={self.provider!r}>"


class FileSystemClientRegistry:
    """存储客户端注册表

    每个标识符的客户端只创建一次并永久缓存; 创建失败不会写入缓存, 下次调用会重新创建。
    不同标识符的创建互不阻塞。
    """

    def __init__(
        self,
        config: ConfigLookup,
        factory: ProviderBuilder = FileSystemProviderFactory,  # type: ignore[assignment]
    ) -> None:
        self._config = config
        self._factory = factory

        # 客户端缓存（identifier -> FileSystemClient）
        self._clients: dict[str, FileSystemClient] = {}

        # 每个标识符一把锁, 用于防止并发创建同一实例
        self._locks: dict[str, threading.Lock] = {}

        # 保护 _locks 本身
        self._lock = threading.Lock()

    @property
    def public_id(self) -> str:
        return self._config.get(PUBLIC_ID_KEY) or DEFAULT_PUBLIC_ID

    @property
    def private_id(self) -> str:
        return self._config.get(PRIVATE_ID_KEY) or DEFAULT_PRIVATE_ID

    def _get_lock(self, identifier: str) -> threading.Lock:
        with self._lock:
            lock = self._locks.get(identifier)
            if lock is None:
                lock = self._locks[identifier] = threading.Lock()
            return lock

    def get(self, identifier: str) -> FileSystemClient:
        """获取客户端, 不存在时创建

        Raises:
            FileSystemError: 配置或初始化错误（不会缓存）
        """
        client = self._clients.get(identifier)
        if client is not None:
            return client

        with self._get_lock(identifier):
            # 再次检查缓存（可能在等待锁时已被其他线程创建）
            client = self._clients.get(identifier)
            if client is not None:
                return client

            provider = self._factory.build(identifier, self._config)
            client = FileSystemClient(identifier, provider)
            self._clients[identifier] = client
            logger.info(f"Cached filesystem client [{identifier}]")

        return client

    def get_public(self) -> FileSystemClient:
        return self.get(self.public_id)

    def get_private(self) -> FileSystemClient:
        return self.get(self.private_id)

    def identifiers(self) -> list[str]:
        return list(self._clients.keys())

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._clients

    def __len__(self) -> int:
        return len(self._clients)


_default_registry: FileSystemClientRegistry | None = None
_default_registry_lock = threading.Lock()


def default_registry() -> FileSystemClientRegistry:
    """进程级默认注册表, 配置来自 LocalConfig.properties"""
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                _default_registry = FileSystemClientRegistry(PropertiesLookup(create_local_configs().properties))
    return _default_registry


def get_client(identifier: str) -> FileSystemClient:
    return default_registry().get(identifier)


def get_public_client() -> FileSystemClient:
    return default_registry().get_public()


def get_private_client() -> FileSystemClient:
    return default_registry().get_private()
