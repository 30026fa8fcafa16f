"""sessopts API模块.

提供选项文档解码的高级接口 `loads`, `load`,
以及按目标类型区分的 `decode_transaction_options`, `decode_session_options`.
"""

from typing import IO, overload

from bson.codec_options import CodecOptions

from .config import DecoderConfig
from .decoder import SessionOptionsDecoder, TransactionOptionsDecoder
from .options import DecodeOption
from .types import Document, SessionOptions, TransactionOptions


def decode_transaction_options(
    document: Document,
    *,
    option: DecodeOption = DecodeOption.NONE,
    codec_options: CodecOptions | None = None,
) -> TransactionOptions:
    """将文档解码为事务选项.

    Args:
        document: BSON 字节或映射.
        option: 解码选项 (如 `DecodeOption.STRICT_SUBDOCUMENTS`).
        codec_options: 解析 BSON 字节时使用的 `bson.CodecOptions`.

    Returns:
        TransactionOptions: 事务选项.

    Raises:
        MalformedInputError: 文档无法解析.
        UnrecognizedFieldError: 文档包含未识别的键.
        ConversionError: 关注点子文档转换失败.

    Examples:
        >>> from sessopts import decode_transaction_options
        >>> decode_transaction_options({"maxCommitTimeMS": 1000}).max_commit_time
        datetime.timedelta(seconds=1)
    """
    config = DecoderConfig.from_params(option=option, codec_options=codec_options)
    return TransactionOptionsDecoder(config).decode(document)


def decode_session_options(
    document: Document,
    *,
    option: DecodeOption = DecodeOption.NONE,
    codec_options: CodecOptions | None = None,
) -> SessionOptions:
    """将文档解码为会话选项.

    参数与异常同 `decode_transaction_options`.

    Examples:
        >>> from sessopts import decode_session_options
        >>> opts = decode_session_options({"causalConsistency": True})
        >>> opts.causal_consistency
        True
    """
    config = DecoderConfig.from_params(option=option, codec_options=codec_options)
    return SessionOptionsDecoder(config).decode(document)


@overload
def loads(
    document: Document,
    target: type[TransactionOptions],
    *,
    option: DecodeOption = DecodeOption.NONE,
    codec_options: CodecOptions | None = None,
) -> TransactionOptions: ...


@overload
def loads(
    document: Document,
    target: type[SessionOptions] = SessionOptions,
    *,
    option: DecodeOption = DecodeOption.NONE,
    codec_options: CodecOptions | None = None,
) -> SessionOptions: ...


def loads(
    document: Document,
    target: type[SessionOptions] | type[TransactionOptions] = SessionOptions,
    *,
    option: DecodeOption = DecodeOption.NONE,
    codec_options: CodecOptions | None = None,
) -> SessionOptions | TransactionOptions:
    """按目标类型解码文档.

    Args:
        document: BSON 字节或映射.
        target: `SessionOptions` (默认) 或 `TransactionOptions`.
        option: 解码选项.
        codec_options: 解析 BSON 字节时使用的 `bson.CodecOptions`.

    Raises:
        TypeError: 不支持的目标类型.
    """
    if target is TransactionOptions:
        return decode_transaction_options(
            document, option=option, codec_options=codec_options
        )
    if target is SessionOptions:
        return decode_session_options(
            document, option=option, codec_options=codec_options
        )
    raise TypeError(f"unsupported target type: {target!r}")


def load(
    fp: IO[bytes],
    target: type[SessionOptions] | type[TransactionOptions] = SessionOptions,
    *,
    option: DecodeOption = DecodeOption.NONE,
    codec_options: CodecOptions | None = None,
) -> SessionOptions | TransactionOptions:
    """从二进制文件对象读取一个 BSON 文档并解码.

    Args:
        fp: 以二进制模式打开的文件对象.
        target: `SessionOptions` (默认) 或 `TransactionOptions`.
        option: 解码选项.
        codec_options: 解析 BSON 字节时使用的 `bson.CodecOptions`.
    """
    return loads(fp.read(), target, option=option, codec_options=codec_options)
