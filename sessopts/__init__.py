"""会话 / 事务选项文档解码库.

把 BSON 文档 (或映射) 严格地解码为 `TransactionOptions` 与 `SessionOptions`:
未识别的键一律报错, 嵌套的 `defaultTransactionOptions` 委托给事务选项解码器.
"""

from .api import decode_session_options, decode_transaction_options, load, loads
from .config import DecoderConfig
from .decoder import SessionOptionsDecoder, TransactionOptionsDecoder
from .exceptions import (
    ConversionError,
    MalformedInputError,
    OptionsDecodeError,
    OptionsError,
    UnrecognizedFieldError,
)
from .options import DecodeOption
from .types import Document, SessionOptions, TransactionOptions

__version__ = "0.1.0"

__all__ = [
    "ConversionError",
    "DecodeOption",
    "DecoderConfig",
    "Document",
    "MalformedInputError",
    "OptionsDecodeError",
    "OptionsError",
    "SessionOptions",
    "SessionOptionsDecoder",
    "TransactionOptions",
    "TransactionOptionsDecoder",
    "UnrecognizedFieldError",
    "__version__",
    "decode_session_options",
    "decode_transaction_options",
    "load",
    "loads",
]
