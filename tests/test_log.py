"""测试 sessopts 日志模块."""

import logging

import pytest

from sessopts import MalformedInputError, SessionOptionsDecoder, TransactionOptionsDecoder
from sessopts.log import get_hexdump, logger


def test_logger_config() -> None:
    """验证 Logger 默认配置不包含 Handler 且名称正确."""
    assert logger.name == "sessopts"
    assert not logger.handlers
    assert logger.level == logging.NOTSET


def test_get_hexdump_basic() -> None:
    """get_hexdump() 应正确格式化十六进制数据."""
    dump = get_hexdump(b"\x01\x02\x03", pos=1, window=1)

    assert "01 02" in dump.lower()
    assert "共 3 字节" in dump


def test_get_hexdump_empty() -> None:
    """get_hexdump() 应能处理空字节输入而不报错."""
    dump = get_hexdump(b"")
    assert "位置" in dump


def test_get_hexdump_memoryview() -> None:
    """get_hexdump() 应接受 memoryview."""
    dump = get_hexdump(memoryview(b"\xaa\xbb"), pos=0, window=4)
    assert "aa bb" in dump.lower()


def test_decode_logs_debug(caplog: pytest.LogCaptureFixture) -> None:
    """成功解码时记录 debug 日志."""
    caplog.set_level(logging.DEBUG, logger="sessopts")

    TransactionOptionsDecoder().decode({"maxCommitTimeMS": 1})

    messages = [r.getMessage() for r in caplog.records]
    assert any("[TransactionOptionsDecoder] 开始解码" in m for m in messages)
    assert any("[TransactionOptionsDecoder] 成功解码" in m for m in messages)


def test_decode_logs_error(caplog: pytest.LogCaptureFixture) -> None:
    """解码失败时记录 error 日志, 嵌套错误在两个层级各记录一次."""
    caplog.set_level(logging.DEBUG, logger="sessopts")

    with pytest.raises(MalformedInputError):
        SessionOptionsDecoder().decode({"defaultTransactionOptions": {"maxCommitTimeMS": "1"}})

    errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 2
    assert errors[0].startswith("[TransactionOptionsDecoder] 解码错误")
    assert errors[1].startswith("[SessionOptionsDecoder] 解码错误")


def test_invalid_bson_logs_hexdump(caplog: pytest.LogCaptureFixture) -> None:
    """无效 BSON 数据应以 debug 级别记录十六进制转储."""
    caplog.set_level(logging.DEBUG, logger="sessopts")

    with pytest.raises(MalformedInputError):
        TransactionOptionsDecoder().decode(b"\x10\x00\x00\x00\xff")

    assert any("ff" in r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG)
