"""
FileSystem 配置类型定义

定义 provider 类型枚举以及各 provider 的配置类型。
字段 alias 与配置项 ``{id}.filesystem.<alias>`` 的后缀一一对应。
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from constant.regex import TRACKER_SERVERS_REGEX, TRACKER_SERVER_SEPARATOR_REGEX


class FileSystemProviderEnum(str, Enum):
    """存储 provider 类型"""

    qiniu = "qiniu"
    aliyun_oss = "aliyun-oss"
    fastdfs = "fastdfs"


class BaseProviderConfig(BaseModel):
    """
    Provider 配置基础类型

    所有 provider 的配置都应继承此类, 子类通过声明字段决定需要读取哪些配置项
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    is_private: bool = Field(default=False, alias="private", description="是否私有空间（影响下载链接签名）")
    url_prefix: str | None = Field(default=None, alias="urlprefix", description="下载链接前缀")

    @field_validator("url_prefix")
    @classmethod
    def strip_url_prefix(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().rstrip("/")

    @classmethod
    def property_names(cls) -> list[str]:
        """该配置类型需要读取的配置项后缀"""
        return [field.alias or name for name, field in cls.model_fields.items()]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class QiniuConfig(BaseProviderConfig):
    """七牛云存储配置"""

    url_prefix: str = Field(..., alias="urlprefix", min_length=1, description="下载链接前缀")
    bucket_name: str = Field(..., alias="bucketName", min_length=1, description="bucket 名称")
    access_key: str = Field(..., alias="accessKey", min_length=1)
    secret_key: str = Field(..., alias="secretKey", min_length=1)


class AliyunOSSConfig(QiniuConfig):
    """阿里云 OSS 配置（在七牛配置基础上增加 endpoint）"""

    endpoint: str = Field(..., alias="endpoint", min_length=1, description="OSS endpoint")


class FastDFSConfig(BaseProviderConfig):
    """FastDFS 配置"""

    group_name: str = Field(..., alias="groupName", min_length=1, description="group 名称")
    servers: str = Field(
        ..., alias="servers", pattern=TRACKER_SERVERS_REGEX.pattern, description="tracker 列表 host:port[;host:port]*",
    )
    connect_timeout: int = Field(default=3000, alias="connectTimeout", gt=0, description="连接超时(ms)")
    max_threads: int = Field(default=50, alias="maxThreads", gt=0, description="最大并发操作数")

    @field_validator("servers")
    @classmethod
    def check_server_ports(cls, value: str) -> str:
        for server in TRACKER_SERVER_SEPARATOR_REGEX.split(value):
            port = int(server.strip().rsplit(":", 1)[1])
            if not 0 < port <= 65535:
                raise ValueError(f"port {port} out of range 1-65535")
        return value

    @property
    def tracker_addresses(self) -> list[tuple[str, int]]:
        """解析 servers 为 (host, port) 列表"""
        addresses = []
        for server in TRACKER_SERVER_SEPARATOR_REGEX.split(self.servers):
            server = server.strip()
            if not server:
                continue
            host, port = server.rsplit(":", 1)
            addresses.append((host, int(port)))
        return addresses

    @property
    def connect_timeout_seconds(self) -> float:
        return self.connect_timeout / 1000
