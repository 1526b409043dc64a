"""
FileSystem Provider Factory - 存储 provider 工厂类
"""

from typing import Any

from loguru import logger
from pydantic import ValidationError

from constant.validate import MissingErrorTypes, format_validation_error
from ext.filesystem.base import BaseStorageProvider
from ext.filesystem.exceptions import (
    FileSystemArgumentError,
    FileSystemConfigMissingError,
    FileSystemError,
    FileSystemProviderInitError,
    FileSystemProviderTypeError,
)
from ext.filesystem.lookup import ConfigLookup
from ext.filesystem.types import BaseProviderConfig, FileSystemProviderEnum

PROPERTY_NAMESPACE = "filesystem"


def property_key(identifier: str, name: str) -> str:
    """``{id}.filesystem.{name}``"""
    return f"{identifier}.{PROPERTY_NAMESPACE}.{name}"


class FileSystemProviderFactory:
    """存储 provider 工厂类

    根据 ``{id}.filesystem.provider`` 选择 provider 类型, 读取并校验该类型所需的配置后创建实例。
    本身不做缓存, 缓存由 FileSystemClientRegistry 负责。
    """

    # provider 类型到 provider 类的映射
    _providers: dict[FileSystemProviderEnum, type[BaseStorageProvider]] = {}

    @classmethod
    def register(
        cls,
        provider_type: FileSystemProviderEnum,
        provider_class: type[BaseStorageProvider],
    ) -> None:
        """
        注册新的存储 provider

        Args:
            provider_type: provider 类型标识（如 qiniu）
            provider_class: 实现 BaseStorageProvider 的类

        Example:
            >>> FileSystemProviderFactory.register(FileSystemProviderEnum.qiniu, QiniuProvider)
        """
        if provider_type in cls._providers and cls._providers[provider_type] is not provider_class:
            logger.warning(f"Provider {provider_type.value} already registered, overriding")
        cls._providers[provider_type] = provider_class
        logger.info(f"Registered filesystem provider: {provider_type.value} -> {provider_class.__name__}")

    @classmethod
    def unregister(cls, provider_type: FileSystemProviderEnum) -> None:
        cls._providers.pop(provider_type, None)

    @classmethod
    def has_provider(cls, provider_type: FileSystemProviderEnum) -> bool:
        return provider_type in cls._providers

    @classmethod
    def get_registered_provider_types(cls) -> list[FileSystemProviderEnum]:
        return list(cls._providers.keys())

    @classmethod
    def resolve_provider_type(cls, identifier: str, config: ConfigLookup) -> FileSystemProviderEnum:
        """读取并解析 ``{id}.filesystem.provider``

        Raises:
            FileSystemConfigMissingError: 未配置或为空
            FileSystemProviderTypeError: 未知类型
        """
        key = property_key(identifier, "provider")
        value = config.get(key)
        if value is None or not value.strip():
            raise FileSystemConfigMissingError(f"[{key}] not defined")
        try:
            return FileSystemProviderEnum(value.strip())
        except ValueError:
            available = ", ".join(t.value for t in FileSystemProviderEnum)
            raise FileSystemProviderTypeError(
                f"file provider [{value}] for id [{identifier}] not supported, available: {available}"
            ) from None

    @classmethod
    def resolve_config(
        cls,
        identifier: str,
        config: ConfigLookup,
        config_cls: type[BaseProviderConfig],
    ) -> BaseProviderConfig:
        """按配置类型声明的字段读取 ``{id}.filesystem.*`` 并校验

        Raises:
            FileSystemConfigMissingError: 必填项缺失
            FileSystemArgumentError: 配置格式错误
        """
        data: dict[str, Any] = {}
        for name in config_cls.property_names():
            value = config.get(property_key(identifier, name))
            if value is not None and value.strip():
                data[name] = value.strip()

        try:
            return config_cls.model_validate(data)
        except ValidationError as e:
            missing, invalid = [], []
            for error in e.errors():
                name = str(error["loc"][0]) if error["loc"] else "?"
                message = format_validation_error(
                    f"[{property_key(identifier, name)}]", error["type"], error.get("ctx"),
                )
                if error["type"] in MissingErrorTypes:
                    missing.append(message)
                else:
                    invalid.append(message)
            if missing:
                raise FileSystemConfigMissingError("; ".join(missing)) from e
            raise FileSystemArgumentError("; ".join(invalid)) from e

    @classmethod
    def build(cls, identifier: str, config: ConfigLookup) -> BaseStorageProvider:
        """
        创建 provider 实例

        Args:
            identifier: 存储标识符（如 public / private）
            config: 配置查询对象

        Returns:
            BaseStorageProvider 实例

        Raises:
            FileSystemConfigMissingError: 缺少必要配置
            FileSystemArgumentError: 配置格式错误
            FileSystemProviderTypeError: 不支持的 provider 类型
            FileSystemProviderInitError: 后端初始化失败
        """
        provider_type = cls.resolve_provider_type(identifier, config)

        provider_cls = cls._providers.get(provider_type)
        if not provider_cls:
            available = ", ".join(t.value for t in cls._providers.keys())
            raise FileSystemProviderTypeError(
                f"file provider [{provider_type.value}] is not registered, available: {available}"
            )

        provider_config = cls.resolve_config(identifier, config, provider_cls.get_config_cls())

        try:
            provider = provider_cls(identifier=identifier, config=provider_config)
        except FileSystemError:
            raise
        except Exception as e:
            raise FileSystemProviderInitError(
                f"Failed to initialize {provider_type.value} provider for [{identifier}]: {e}"
            ) from e

        logger.info(f"Created filesystem provider for [{identifier}]: {provider!r}")
        return provider


# 注册内置 provider（导入时自动注册）
import ext.filesystem.providers  # noqa: E402,F401
