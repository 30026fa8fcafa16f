"""解码配置对象."""

from dataclasses import dataclass, field

from bson.codec_options import DEFAULT_CODEC_OPTIONS, CodecOptions

from .options import DecodeOption


@dataclass(frozen=True)
class DecoderConfig:
    """选项解码配置 (不可变).

    这是所有配置的统一容器, 在 API 入口层创建,
    然后传递给 TransactionOptionsDecoder / SessionOptionsDecoder.

    Attributes:
        option: 解码选项标志 (IntFlag).
        codec_options: 解析 BSON 字节时使用的 `bson.CodecOptions`.
    """

    option: DecodeOption = DecodeOption.NONE
    codec_options: CodecOptions = field(default_factory=lambda: DEFAULT_CODEC_OPTIONS)

    @classmethod
    def from_params(
        cls,
        option: DecodeOption = DecodeOption.NONE,
        codec_options: CodecOptions | None = None,
    ) -> "DecoderConfig":
        """从参数构建配置对象.

        Args:
            option: DecodeOption 枚举.
            codec_options: BSON 解码选项, None 表示使用 bson 默认值.

        Returns:
            DecoderConfig: 配置对象.
        """
        return cls(
            option=DecodeOption(option),
            codec_options=(
                codec_options if codec_options is not None else DEFAULT_CODEC_OPTIONS
            ),
        )

    @property
    def strict_subdocuments(self) -> bool:
        """是否拒绝关注点子文档中的未知键."""
        return bool(self.option & DecodeOption.STRICT_SUBDOCUMENTS)
