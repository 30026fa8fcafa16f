"""sessopts 特定的异常类.

该模块为选项解码定义了异常层次结构.
"""


class OptionsError(Exception):
    """所有 sessopts 异常的基类."""

    pass


class OptionsDecodeError(OptionsError):
    """解码选项文档失败时抛出的基类.

    Case:
        - 文档无法解析为中间记录.
        - 文档包含未识别的键.
        - 子文档 (readConcern 等) 转换失败.
    """

    def __init__(
        self,
        msg: str,
        loc: list[str | int] | None = None,
    ) -> None:
        """初始化解码错误.

        Args:
            msg: 错误描述信息.
            loc: 错误发生的位置路径 (键名或索引).
        """
        super().__init__(msg)
        self.loc = loc or []

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.loc:
            loc_str = ".".join(str(x) for x in self.loc)
            return f"{base_msg} (at {loc_str})"
        return base_msg


class MalformedInputError(OptionsDecodeError):
    """文档无法解析为中间记录时抛出.

    Case:
        - 输入既不是映射也不是 BSON 字节.
        - BSON 数据被截断或格式错误.
        - 已识别键的值类型不匹配 (如 `maxCommitTimeMS` 为字符串).
    """

    pass


class UnrecognizedFieldError(OptionsDecodeError):
    """文档包含未识别的键时抛出.

    Attributes:
        record: 记录名称 (如 `SessionOptions`).
        fields: 所有未识别的键名 (已排序).
    """

    def __init__(
        self,
        record: str,
        fields: list[str],
        loc: list[str | int] | None = None,
    ) -> None:
        self.record = record
        self.fields = sorted(fields)
        super().__init__(f"unrecognized fields for {record}: {self.fields}", loc)


class ConversionError(OptionsDecodeError):
    """已识别的子文档转换失败时抛出.

    Attributes:
        field: 转换失败的键名 (如 `readPreference`).
    """

    def __init__(
        self,
        field: str,
        msg: str,
        loc: list[str | int] | None = None,
    ) -> None:
        self.field = field
        super().__init__(msg, loc if loc is not None else [field])
