"""
配置查询能力

存储客户端只依赖 ``get(key)`` 这一查询接口, 具体的配置来源（YAML、环境变量、字典）由调用方注入
"""

from typing import Any, Protocol, runtime_checkable
from collections.abc import Mapping


@runtime_checkable
class ConfigLookup(Protocol):
    """配置查询接口"""

    def get(self, key: str) -> str | None:
        """返回配置项的字符串值, 不存在或为空时返回 None"""
        ...


class PropertiesLookup:
    """基于映射的配置查询

    嵌套字典会被展开为点号分隔的 key::

        >>> lookup = PropertiesLookup({"public": {"filesystem": {"provider": "qiniu"}}})
        >>> lookup.get("public.filesystem.provider")
        'qiniu'
    """

    def __init__(self, properties: Mapping[str, Any] | None = None) -> None:
        self._properties: dict[str, str] = {}
        self._flatten(properties or {}, prefix="")
        # 环境变量来源的 key 会被转为小写, 精确匹配失败时忽略大小写
        self._folded = {key.lower(): value for key, value in self._properties.items()}

    def _flatten(self, data: Mapping[str, Any], prefix: str) -> None:
        for key, value in data.items():
            full_key = f"{prefix}.{key}" if prefix else str(key)
            if isinstance(value, Mapping):
                self._flatten(value, full_key)
            elif value is not None:
                self._properties[full_key] = self._render(value)

    @staticmethod
    def _render(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def get(self, key: str) -> str | None:
        value = self._properties.get(key)
        if value is None:
            value = self._folded.get(key.lower())
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_or_default(self, key: str, default: str) -> str:
        return self.get(key) or default

    def keys(self) -> list[str]:
        return list(self._properties.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self._properties)} properties)"
