from __future__ import annotations

import sys
import logging
import warnings
from enum import Enum
from types import FrameType
from typing import Any, cast
from itertools import chain

import loguru
from loguru import logger

from config.default import ENVIRONMENT, EnvironmentEnum


class LoggerNameEnum(str, Enum):
    root = "root"
    oss2 = "oss2"
    qiniu = "qiniu"
    fdfs_client = "fdfs_client"
    urllib3 = "urllib3"
    requests = "requests"


# 存储 SDK 的 logger, 统一转发到 loguru
SDK_LOGGING_MODULES = (
    LoggerNameEnum.oss2.value,
    LoggerNameEnum.qiniu.value,
    LoggerNameEnum.fdfs_client.value,
)

IgnoredLoggerNames = [
    LoggerNameEnum.urllib3.value,
]


class InterceptHandler(logging.Handler):
    """Logs to loguru from Python logging module"""

    def emit(self, record: logging.LogRecord) -> None:
        if record.name in IgnoredLoggerNames:
            return
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:  # noqa: WPS609
            frame = cast(FrameType, frame.f_back)
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level,
            record.getMessage(),
        )


def setup_loguru_logging_intercept(
    level: int = logging.DEBUG,
    modules: tuple = (),
) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=level)  # noqa
    for logger_name in chain(("",), modules):
        mod_logger = logging.getLogger(logger_name)
        mod_logger.handlers = [InterceptHandler(level=level)]
        mod_logger.setLevel(level)
        mod_logger.propagate = False


def edit_record_and_gen_format(record: loguru.Record) -> str:
    extra = record.get("extra") or {}
    if record["level"].no <= 10:
        level_color = "white"
    elif record["level"].no <= 20:
        level_color = "blue"
    elif record["level"].no <= 30:
        level_color = "yellow"
    elif record["level"].no <= 40:
        level_color = "red"
    else:
        level_color = "magenta"
    if ENVIRONMENT in [EnvironmentEnum.local.value]:
        format_s = (
            "<green>[{time:YYYY-MM-DD HH:mm:ss}]</green> | "
            + f"<{level_color}>"
            + "<bold>[{level}]</bold>"
            + f"</{level_color}>"
            + " | <fg 0,75,0><underline>{name}:{line}</underline> >> {function}</fg 0,75,0> | <cyan>{message}</cyan>"
        )
    else:
        format_s = "[{time:YYYY-MM-DD HH:mm:ss}] | [{level}] | {name}:{line} >> {function} | {message}"

    if extra:
        # 绑定了 identifier 等上下文时一并输出
        format_s += " | {extra}"

    return format_s + "\n{exception}"


def setup_loguru(level: str = "INFO", sink: Any = None) -> int:
    """初始化 loguru 输出并接管标准库 logging

    由宿主应用在启动时调用一次; 本库内部只通过 loguru.logger 输出日志, 不会主动初始化

    Args:
        level: 日志级别名称
        sink: 输出目标, 默认 stdout

    Returns:
        新增 sink 的 handler id
    """
    logger.remove()
    handler_id = logger.add(
        sink=sink or sys.stdout,  # type: ignore
        format=edit_record_and_gen_format,
        level=level,
        enqueue=False,
        serialize=False,
        backtrace=True,
        diagnose=ENVIRONMENT != EnvironmentEnum.production.value,
        colorize=None,
    )

    setup_loguru_logging_intercept(
        level=logging.getLevelName(level),  # type: ignore
        modules=SDK_LOGGING_MODULES,
    )

    # capture warning
    logging.captureWarnings(True)
    showwarning_ = warnings.showwarning

    def showwarning(message, *args, **kwargs):
        logger.warning(message)
        showwarning_(message, *args, **kwargs)

    warnings.showwarning = showwarning
    return handler_id
