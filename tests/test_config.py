"""测试 DecoderConfig 与 DecodeOption."""

import dataclasses

import pytest
from bson.codec_options import DEFAULT_CODEC_OPTIONS, CodecOptions
from bson.son import SON

from sessopts import DecodeOption, DecoderConfig, SessionOptionsDecoder, TransactionOptionsDecoder


def test_default_config():
    """默认配置不启用任何选项."""
    config = DecoderConfig()

    assert config.option == DecodeOption.NONE
    assert config.codec_options == DEFAULT_CODEC_OPTIONS
    assert not config.strict_subdocuments


def test_from_params():
    """from_params 应处理 None 与整数形式的选项."""
    codec_options = CodecOptions(document_class=SON)
    config = DecoderConfig.from_params(option=1, codec_options=codec_options)  # type: ignore[arg-type]

    assert config.option is DecodeOption.STRICT_SUBDOCUMENTS
    assert config.strict_subdocuments
    assert config.codec_options is codec_options
    assert DecoderConfig.from_params().codec_options == DEFAULT_CODEC_OPTIONS


def test_config_is_frozen():
    """配置对象不可变."""
    config = DecoderConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.option = DecodeOption.STRICT_SUBDOCUMENTS  # type: ignore[misc]


def test_decoders_default_config():
    """未提供配置时解码器使用默认配置."""
    assert TransactionOptionsDecoder().config == DecoderConfig()
    assert SessionOptionsDecoder().config == DecoderConfig()
