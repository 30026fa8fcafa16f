"""测试 sessopts 高级 API: loads / load / decode_* ."""

import io
from datetime import timedelta

import bson
import pytest
from bson.codec_options import CodecOptions
from bson.raw_bson import RawBSONDocument
from bson.son import SON
from pymongo.read_concern import ReadConcern

import sessopts
from sessopts import (
    DecodeOption,
    SessionOptions,
    TransactionOptions,
    UnrecognizedFieldError,
    load,
    loads,
)


def test_loads_defaults_to_session_options():
    """loads 默认解码为 SessionOptions."""
    opts = loads({"causalConsistency": True})

    assert isinstance(opts, SessionOptions)
    assert opts.causal_consistency is True


def test_loads_transaction_target():
    """target=TransactionOptions 时使用事务选项解码器."""
    opts = loads({"maxCommitTimeMS": 1000}, TransactionOptions)

    assert isinstance(opts, TransactionOptions)
    assert opts.max_commit_time == timedelta(seconds=1)


def test_loads_target_decides_recognized_keys():
    """同一文档在不同目标下识别的键不同."""
    with pytest.raises(UnrecognizedFieldError):
        loads({"causalConsistency": True}, TransactionOptions)
    with pytest.raises(UnrecognizedFieldError):
        loads({"readConcern": {"level": "local"}}, SessionOptions)


def test_loads_unsupported_target():
    """不支持的目标类型应抛出 TypeError."""
    with pytest.raises(TypeError, match="unsupported target type"):
        loads({}, dict)  # type: ignore[call-overload]


def test_loads_passes_option():
    """option 参数应传递给解码器."""
    document = {"defaultTransactionOptions": {"readConcern": {"level": "local", "x": 1}}}

    assert loads(document).default_read_concern == ReadConcern("local")
    with pytest.raises(UnrecognizedFieldError):
        loads(document, option=DecodeOption.STRICT_SUBDOCUMENTS)


def test_loads_with_codec_options():
    """自定义 codec_options 应用于 BSON 解析."""
    data = bson.encode(SON([("maxCommitTimeMS", 5), ("causalConsistency", False)]))
    opts = loads(data, codec_options=CodecOptions(document_class=SON))

    assert opts == SessionOptions(
        causal_consistency=False, default_max_commit_time=timedelta(milliseconds=5)
    )


def test_loads_with_raw_bson_document_class():
    """RawBSONDocument 作为 document_class 时嵌套文档同样可解码."""
    data = bson.encode(
        {
            "causalConsistency": True,
            "defaultTransactionOptions": {
                "readConcern": {"level": "majority"},
                "readPreference": {"mode": "secondary", "tagSets": [{"dc": "ny"}]},
            },
        }
    )
    opts = loads(data, codec_options=CodecOptions(document_class=RawBSONDocument))

    assert opts.causal_consistency is True
    assert opts.default_read_concern == ReadConcern("majority")
    assert opts.default_read_preference is not None
    assert opts.default_read_preference.tag_sets == [{"dc": "ny"}]


def test_load_reads_binary_file():
    """load 应从二进制文件对象读取一个 BSON 文档."""
    fp = io.BytesIO(bson.encode({"maxCommitTimeMS": 2000}))
    opts = load(fp, TransactionOptions)

    assert opts == TransactionOptions(max_commit_time=timedelta(seconds=2))


def test_decode_functions_exported():
    """顶层包应导出 decode_* 函数."""
    assert sessopts.decode_session_options({}) == SessionOptions()
    assert sessopts.decode_transaction_options(b"\x05\x00\x00\x00\x00") == TransactionOptions()
