from typing import Any
from functools import lru_cache

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    YamlConfigSettingsSource,
    PydanticBaseSettingsSource,
)

from config.default import BASE_DIR, ENVIRONMENT, ProjectConfig


class LocalConfig(BaseSettings):
    """全部的配置信息.

    宿主应用的配置入口; 默认注册表 (ext.filesystem.client.default_registry) 从 properties 构建

    properties 保存按标识符划分的存储配置, 形如::

        properties:
          public:
            filesystem:
              provider: qiniu
              bucketName: demo
    """

    model_config = SettingsConfigDict(env_prefix="FS_", env_nested_delimiter="__")

    project: ProjectConfig = ProjectConfig()
    properties: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, f"{str(BASE_DIR)}/etc/{ENVIRONMENT.lower()}.yaml", "utf-8"),
        )


@lru_cache
def create_local_configs() -> LocalConfig:
    """create yaml file base setting object"""

    return LocalConfig()
