"""
FileSystem Provider 基类

定义上传请求模型以及统一的存储操作接口
"""

import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar, Generic, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from constant.regex import URI_REGEX
from ext.filesystem.exceptions import (
    FileSystemArgumentError,
    FileSystemOperationNotSupportedError,
)
from ext.filesystem.types import BaseProviderConfig, FileSystemProviderEnum

ConfigT = TypeVar("ConfigT", bound=BaseProviderConfig)

DEFAULT_MIME_TYPE = "application/octet-stream"


def join_key(*parts: str | None) -> str:
    """用单个 ``/`` 拼接 key 片段, 忽略空片段"""
    return "/".join(part.strip("/") for part in parts if part and part.strip("/"))


class UploadRequest(BaseModel):
    """上传请求

    file_path / content / stream 三者必须且只能提供一个。
    catalog 为逻辑子目录, 在交给 provider 之前拼接到 key 前面。
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    file_path: Path | None = Field(None, description="本地文件路径")
    content: bytes | None = Field(None, description="文件内容")
    stream: Any = Field(None, description="可读的二进制流")
    key: str | None = Field(None, description="目标 key, 为空时由服务端分配")
    mime_type: str | None = Field(None, description="MIME类型")
    catalog: str | None = Field(None, description="逻辑子目录")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise FileSystemArgumentError(f"Invalid upload request: {e}") from e

    @model_validator(mode="after")
    def check_single_source(self) -> "UploadRequest":
        sources = [source for source in (self.file_path, self.content, self.stream) if source is not None]
        if len(sources) != 1:
            raise ValueError("exactly one of file_path, content or stream must be provided")
        if self.stream is not None and not callable(getattr(self.stream, "read", None)):
            raise ValueError("stream must provide a read() method")
        return self

    @classmethod
    def from_file(cls, file_path: str | Path, key: str | None = None) -> "UploadRequest":
        return cls(file_path=Path(file_path), key=key)

    @classmethod
    def from_bytes(cls, content: bytes, key: str | None = None) -> "UploadRequest":
        return cls(content=content, key=key)

    @classmethod
    def from_stream(cls, stream: Any, mime_type: str | None, key: str | None = None) -> "UploadRequest":
        return cls(stream=stream, mime_type=mime_type, key=key)

    def with_catalog(self, catalog: str | None) -> "UploadRequest":
        """返回设置了 catalog 的新请求, 原请求不变"""
        return self.model_copy(update={"catalog": catalog})

    @property
    def effective_key(self) -> str | None:
        """实际写入后端的 key（catalog/key）, 未指定 key 时为 None"""
        if not self.key:
            return None
        return self.build_key(self.key)

    def build_key(self, name: str) -> str:
        """把 catalog 应用到任意名称上（用于 provider 自行生成 key 的场景）"""
        return join_key(self.catalog, name)

    @property
    def file_name(self) -> str | None:
        if self.key:
            return self.key.rsplit("/", 1)[-1]
        if self.file_path is not None:
            return self.file_path.name
        return None

    @property
    def extension(self) -> str:
        """文件扩展名（含点号）, 无法确定时为空字符串"""
        if not self.file_name:
            return ""
        return Path(self.file_name).suffix

    def guess_mime_type(self) -> str:
        if self.mime_type:
            return self.mime_type
        if self.file_name:
            guessed, _ = mimetypes.guess_type(self.file_name)
            if guessed:
                return guessed
        return DEFAULT_MIME_TYPE


class BaseStorageProvider(ABC, Generic[ConfigT]):
    """
    存储 Provider 基类（泛型）

    类型参数:
        ConfigT: 配置的具体类型（必须继承 BaseProviderConfig）

    设计原则:
        1. 定义统一的存储操作接口（上传、删除、下载链接、上传凭证）
        2. 构造完成后不可变, 可在多线程间共享
        3. 构造失败直接抛出, 不存在半初始化的实例
    """

    provider_type: ClassVar[FileSystemProviderEnum]

    config: ConfigT

    def __init__(self, identifier: str, config: ConfigT) -> None:
        self.identifier = identifier
        self.config = config
        self._validate_config()

    @classmethod
    def get_config_cls(cls) -> type[BaseProviderConfig]:
        """从泛型参数提取配置类型"""
        for klass in cls.__mro__:
            for base in getattr(klass, "__orig_bases__", ()):
                args = getattr(base, "__args__", None)
                if args and isinstance(args[0], type) and issubclass(args[0], BaseProviderConfig):
                    return args[0]

        logger.warning(f"无法从泛型参数提取 {cls.__name__} 的配置类型，使用默认类型 BaseProviderConfig")
        return BaseProviderConfig

    def _validate_config(self) -> None:
        """验证配置（子类可覆盖）"""

    @property
    def is_private(self) -> bool:
        return self.config.is_private

    @abstractmethod
    def upload(self, request: UploadRequest) -> str:
        """上传文件

        Args:
            request: 上传请求

        Returns:
            可用于下载/删除的 URL 或 key

        Raises:
            FileUploadError: 传输或认证失败
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """删除文件, 文件不存在时返回 False

        Raises:
            FileDeleteError: 传输或认证失败
        """

    @abstractmethod
    def get_download_url(self, key: str) -> str:
        """获取下载链接, 私有空间返回带签名的限时链接"""

    def create_upload_token(
        self,
        metadata: dict[str, Any] | None,
        expires: int,
        file_key: str | None = None,
    ) -> str:
        """生成客户端直传凭证（可选）"""
        raise FileSystemOperationNotSupportedError(f"{self.__class__.__name__} does not support upload token")

    def _build_url(self, key: str) -> str:
        """拼接下载链接, 未配置 url 前缀时直接返回 key"""
        if not self.config.url_prefix:
            return key
        return f"{self.config.url_prefix}/{key.lstrip('/')}"

    def _extract_key(self, key_or_url: str) -> str:
        """从 upload 返回的 URL 中提取 object key, 传入 key 时原样返回"""
        prefix = self.config.url_prefix
        if prefix and key_or_url.startswith(f"{prefix}/"):
            return key_or_url[len(prefix) + 1 :]
        match = URI_REGEX.match(key_or_url)
        if match:
            return (match.group(1) or "").lstrip("/")
        return key_or_url.lstrip("/")

    @staticmethod
    def _read_content(request: UploadRequest) -> bytes:
        """读取上传内容"""
        if request.content is not None:
            return request.content
        if request.file_path is not None:
            return request.file_path.read_bytes()
        data = request.stream.read()
        if isinstance(data, str):
            return data.encode("utf-8")
        return data  # type: ignore[no-any-return]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} identifier={self.identifier!r}>"
