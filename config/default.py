import os
import enum
from typing import Self
from pathlib import Path

from pydantic import BaseModel, model_validator


class EnvironmentEnum(str, enum.Enum):
    local = "local"
    development = "development"
    test = "test"
    production = "production"


ENVIRONMENT = os.environ.get(
    "environment",  # noqa
    EnvironmentEnum.local.value,
)

BASE_DIR = Path(__file__).resolve().parent.parent

# 公共/私有存储标识符的默认值
DEFAULT_PUBLIC_ID = "public"
DEFAULT_PRIVATE_ID = "private"


class ProjectConfig(BaseModel):
    """宿主应用的项目级配置, 通过 create_local_configs().project 读取"""

    unique_code: str = "multi-filesystem"
    debug: bool = False
    environment: EnvironmentEnum = EnvironmentEnum(ENVIRONMENT)

    @model_validator(mode="after")
    def check_debug_options(self) -> Self:
        assert not (
            self.debug and self.environment == EnvironmentEnum.production
        ), "Production cannot set with debug enabled"
        return self

    @property
    def base_dir(self) -> Path:
        return BASE_DIR
