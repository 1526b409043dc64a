"""
FastDFS Provider

基于 py3Fdfs（fdfs_client）, 每个 tracker 一个客户端, 连接失败时依次切换
"""

import errno
import os
import socket
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from fdfs_client import exceptions as fdfs_exceptions
from fdfs_client.client import Fdfs_client
from loguru import logger

from ext.filesystem.base import BaseStorageProvider, UploadRequest, join_key
from ext.filesystem.exceptions import (
    FileDeleteError,
    FileSystemProviderInitError,
    FileUploadError,
)
from ext.filesystem.types import FastDFSConfig, FileSystemProviderEnum

T = TypeVar("T")


class FastDFSProvider(BaseStorageProvider[FastDFSConfig]):
    """FastDFS Provider（文件 ID 由 storage 分配, 不支持上传凭证）"""

    provider_type = FileSystemProviderEnum.fastdfs

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._trackers = self.config.tracker_addresses
        self._check_trackers()
        self._clients = [
            Fdfs_client(
                {
                    "host_tuple": (host,),
                    "port": port,
                    "timeout": self.config.connect_timeout_seconds,
                    "name": f"Tracker Pool {host}:{port}",
                }
            )
            for host, port in self._trackers
        ]
        # 限制同时进行的操作数
        self._semaphore = threading.BoundedSemaphore(self.config.max_threads)

    def _check_trackers(self) -> None:
        """探测 tracker 是否可达, 全部不可达时初始化失败"""
        reachable = []
        for host, port in self._trackers:
            try:
                with socket.create_connection((host, port), timeout=self.config.connect_timeout_seconds):
                    reachable.append((host, port))
            except OSError as e:
                logger.warning(f"FastDFS tracker {host}:{port} unreachable: {e}")

        if not reachable:
            raise FileSystemProviderInitError(
                f"No reachable FastDFS tracker for [{self.identifier}]: {self.config.servers}"
            )

    def _call(self, operation: Callable[[Fdfs_client], T]) -> T:
        """在 tracker 客户端上执行操作, 连接失败时切换到下一个 tracker"""
        last_error: Exception | None = None
        with self._semaphore:
            for (host, port), client in zip(self._trackers, self._clients):
                try:
                    return operation(client)
                except fdfs_exceptions.ConnectionError as e:
                    logger.warning(f"FastDFS tracker {host}:{port} failed: {e}")
                    last_error = e
        raise fdfs_exceptions.ConnectionError(f"All FastDFS trackers failed: {last_error}") from last_error

    def _to_file_id(self, key: str) -> str:
        file_id = self._extract_key(key)
        if file_id.startswith(f"{self.config.group_name}/"):
            return file_id
        return join_key(self.config.group_name, file_id)

    def upload(self, request: UploadRequest) -> str:
        """上传文件, key/catalog 仅用于确定扩展名"""
        if request.key or request.catalog:
            logger.debug(f"FastDFS assigns file ids itself, ignoring key [{request.effective_key}]")

        ext_name = request.extension.lstrip(".") or None
        try:
            if request.file_path is not None:
                result = self._call(lambda client: client.upload_by_filename(str(request.file_path)))
            else:
                content = self._read_content(request)
                result = self._call(lambda client: client.upload_by_buffer(content, file_ext_name=ext_name))
        except (fdfs_exceptions.FDFSError, OSError) as e:
            raise FileUploadError(f"FastDFS upload failed: {e}") from e

        file_id = result["Remote file_id"]
        if isinstance(file_id, bytes):
            file_id = file_id.decode("utf-8")
        logger.debug(f"FastDFS uploaded {file_id}")
        return self._build_url(file_id)

    def delete(self, key: str) -> bool:
        file_id = self._to_file_id(key)
        try:
            self._call(lambda client: client.delete_file(file_id.encode("utf-8")))
        except fdfs_exceptions.DataError as e:
            if os.strerror(errno.ENOENT) in str(e):
                return False
            raise FileDeleteError(f"FastDFS delete failed for [{file_id}]: {e}") from e
        except (fdfs_exceptions.FDFSError, OSError) as e:
            raise FileDeleteError(f"FastDFS delete failed for [{file_id}]: {e}") from e
        return True

    def get_download_url(self, key: str) -> str:
        return self._build_url(self._to_file_id(key))
