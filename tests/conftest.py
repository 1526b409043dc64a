import pytest
from loguru import logger


@pytest.fixture
def loguru_messages():
    """收集 loguru 输出的日志消息"""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
