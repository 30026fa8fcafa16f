"""会话 / 事务选项解码器.

解码流程 (单次、无状态):
    1. 文档物化: BSON 字节经 `bson.decode` 解析, 映射直接复制.
    2. 解析为中间记录: 已识别的键进入字段, 其余键进入 extra 集合.
    3. extra 集合非空即失败 (UnrecognizedFieldError).
    4. 在全新的默认选项对象上逐字段应用已识别的值.

任何错误都终止本次调用, 不返回部分结果.
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any, ClassVar

import bson
from bson.errors import BSONError

from .concerns import ReadConcernDocument, ReadPreferenceDocument, WriteConcernDocument
from .config import DecoderConfig
from .exceptions import MalformedInputError, OptionsDecodeError
from .log import get_hexdump, logger
from .struct import DocField, OptionsRecord
from .types import Document, SessionOptions, TransactionOptions


class TransactionOptionsRecord(OptionsRecord):
    """TransactionOptions 的中间记录."""

    record_name: ClassVar[str] = "TransactionOptions"

    read_concern: ReadConcernDocument | None = DocField(key="readConcern")
    read_preference: ReadPreferenceDocument | None = DocField(key="readPreference")
    write_concern: WriteConcernDocument | None = DocField(key="writeConcern")
    max_commit_time_ms: int | None = DocField(key="maxCommitTimeMS")


class SessionOptionsRecord(OptionsRecord):
    """SessionOptions 的中间记录.

    `defaultTransactionOptions` 保持原始映射, 由 TransactionOptionsDecoder 解码.
    """

    record_name: ClassVar[str] = "SessionOptions"

    causal_consistency: bool | None = DocField(key="causalConsistency")
    max_commit_time_ms: int | None = DocField(key="maxCommitTimeMS")
    default_transaction_options: dict[str, Any] | None = DocField(
        key="defaultTransactionOptions"
    )


def _plain(value: Any) -> Any:
    """递归地把嵌套映射转换为 dict, 列表元素同样处理."""
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _milliseconds(value: int, loc: list[str | int]) -> timedelta:
    """整数毫秒 -> timedelta.

    Raises:
        MalformedInputError: 超出 timedelta 可表示的范围.
    """
    try:
        return timedelta(milliseconds=value)
    except OverflowError as e:
        raise MalformedInputError(
            f"maxCommitTimeMS out of range: {value}", [*loc, "maxCommitTimeMS"]
        ) from e


def materialize(
    document: Document, config: DecoderConfig, loc: list[str | int] | None = None
) -> dict[str, Any]:
    """把输入物化为 dict.

    嵌套的映射 (如 RawBSONDocument, MappingProxyType) 同样被转换为 dict.

    Args:
        document: 单个 BSON 文档的字节, 或任意 `Mapping[str, Any]`.
        config: 解码配置 (提供 BSON 的 codec_options).
        loc: 文档的位置路径, 用于错误信息.

    Raises:
        MalformedInputError: 输入类型不受支持, 或 BSON 数据无效.
    """
    if isinstance(document, bytes | bytearray | memoryview):
        data = bytes(document)
        try:
            # RawBSONDocument 延迟解析, 展开时也可能失败
            return _plain(bson.decode(data, codec_options=config.codec_options))
        except BSONError as e:
            logger.debug("[materialize] 无效的 BSON 数据\n%s", get_hexdump(data))
            raise MalformedInputError(f"error decoding BSON document: {e}", loc) from e

    if isinstance(document, Mapping):
        return _plain(document)

    raise MalformedInputError(
        f"expected a BSON document or mapping, got {type(document).__name__}", loc
    )


class TransactionOptionsDecoder:
    """把文档解码为 TransactionOptions.

    识别的键: `readConcern`, `readPreference`, `writeConcern`, `maxCommitTimeMS`.
    任何其他键都会导致 UnrecognizedFieldError.

    Examples:
        >>> decoder = TransactionOptionsDecoder()
        >>> decoder.decode({"maxCommitTimeMS": 1000}).max_commit_time
        datetime.timedelta(seconds=1)
    """

    __slots__ = ("_config",)

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self._config = config if config is not None else DecoderConfig()

    @property
    def config(self) -> DecoderConfig:
        return self._config

    def decode(
        self, document: Document, *, loc: list[str | int] | None = None
    ) -> TransactionOptions:
        """解码文档.

        Args:
            document: BSON 字节或映射.
            loc: 文档在外层文档中的位置路径 (嵌套解码时使用).

        Returns:
            TransactionOptions: 填充完毕的事务选项.

        Raises:
            MalformedInputError: 结构解析失败.
            UnrecognizedFieldError: 包含未识别的键.
            ConversionError: 读关注 / 读偏好 / 写关注子文档转换失败.
        """
        loc = loc or []
        logger.debug("[TransactionOptionsDecoder] 开始解码")
        try:
            result = self._decode(document, loc)
        except OptionsDecodeError as e:
            logger.error("[TransactionOptionsDecoder] 解码错误: %s", e)
            raise
        logger.debug("[TransactionOptionsDecoder] 成功解码: %r", result)
        return result

    def _decode(self, document: Document, loc: list[str | int]) -> TransactionOptions:
        record = TransactionOptionsRecord.parse(
            materialize(document, self._config, loc), loc
        )
        record.ensure_no_extra(loc)

        strict = self._config.strict_subdocuments
        options = TransactionOptions()
        if record.max_commit_time_ms is not None:
            options.max_commit_time = _milliseconds(record.max_commit_time_ms, loc)
        if record.read_concern is not None:
            options.read_concern = record.read_concern.to_option(
                "readConcern", loc=[*loc, "readConcern"], strict=strict
            )
        if record.read_preference is not None:
            options.read_preference = record.read_preference.to_option(
                "readPreference", loc=[*loc, "readPreference"], strict=strict
            )
        if record.write_concern is not None:
            options.write_concern = record.write_concern.to_option(
                "writeConcern", loc=[*loc, "writeConcern"], strict=strict
            )
        return options


class SessionOptionsDecoder:
    """把文档解码为 SessionOptions.

    识别的键: `causalConsistency`, `maxCommitTimeMS`, `defaultTransactionOptions`.
    嵌套的 `defaultTransactionOptions` 交给 TransactionOptionsDecoder,
    其错误原样向上传播.

    注意: 只有读关注、读偏好、写关注会从嵌套事务选项提升到会话;
    嵌套的 `maxCommitTimeMS` 被丢弃, 会话使用自己层级的 `maxCommitTimeMS`.
    """

    __slots__ = ("_config", "_transaction_decoder")

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self._config = config if config is not None else DecoderConfig()
        self._transaction_decoder = TransactionOptionsDecoder(self._config)

    @property
    def config(self) -> DecoderConfig:
        return self._config

    def decode(
        self, document: Document, *, loc: list[str | int] | None = None
    ) -> SessionOptions:
        """解码文档.

        Raises:
            MalformedInputError: 结构解析失败 (含嵌套事务选项).
            UnrecognizedFieldError: 任一层级包含未识别的键.
            ConversionError: 嵌套的关注点子文档转换失败.
        """
        loc = loc or []
        logger.debug("[SessionOptionsDecoder] 开始解码")
        try:
            result = self._decode(document, loc)
        except OptionsDecodeError as e:
            logger.error("[SessionOptionsDecoder] 解码错误: %s", e)
            raise
        logger.debug("[SessionOptionsDecoder] 成功解码: %r", result)
        return result

    def _decode(self, document: Document, loc: list[str | int]) -> SessionOptions:
        record = SessionOptionsRecord.parse(materialize(document, self._config, loc), loc)
        record.ensure_no_extra(loc)

        txn_options = TransactionOptions()
        if record.default_transaction_options is not None:
            txn_options = self._transaction_decoder.decode(
                record.default_transaction_options,
                loc=[*loc, "defaultTransactionOptions"],
            )

        options = SessionOptions()
        if record.causal_consistency is not None:
            options.causal_consistency = record.causal_consistency
        if record.max_commit_time_ms is not None:
            options.default_max_commit_time = _milliseconds(
                record.max_commit_time_ms, loc
            )
        if txn_options.read_concern is not None:
            options.default_read_concern = txn_options.read_concern
        if txn_options.read_preference is not None:
            options.default_read_preference = txn_options.read_preference
        if txn_options.write_concern is not None:
            options.default_write_concern = txn_options.write_concern
        return options
