"""中间记录定义模块.

中间记录是每次解码调用的临时结构: 它保存已识别的原始字段,
并把所有其他键收集进 `model_extra` (即 extra 集合), 仅用于检测未识别的输入.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticUndefined
from typing_extensions import Self

from .exceptions import MalformedInputError, UnrecognizedFieldError


def DocField(default: Any = None, *, key: str) -> Any:
    """创建中间记录字段配置.

    这是一个 Pydantic `Field` 的包装函数, 用于把 Python 字段名绑定到
    文档中的键名 (如 `maxCommitTimeMS`).

    Args:
        default: 字段缺省时的值. 传入 `PydanticUndefined` 表示该键为**必填**.
        key: 文档中的键名.

    Returns:
        Any: 带有别名的 Pydantic FieldInfo 对象.

    Raises:
        ValueError: 如果 `key` 为空.

    Examples:
        >>> class Doc(OptionsRecord):
        ...     max_commit_time_ms: int | None = DocField(key="maxCommitTimeMS")
    """
    if not key:
        raise ValueError("DocField key must be a non-empty string")
    return Field(default, alias=key)


Required: Any = PydanticUndefined


def _describe_validation_error(
    exc: ValidationError, loc: list[str | int]
) -> tuple[str, list[str | int]]:
    """取第一个校验错误, 返回 (描述, 完整位置)."""
    errors = exc.errors(include_url=False)
    first = errors[0]
    msg = first["msg"]
    if len(errors) > 1:
        msg = f"{msg} (and {len(errors) - 1} more errors)"
    return msg, [*loc, *first["loc"]]


class OptionsRecord(BaseModel):
    """中间记录基类.

    - 键按别名 (文档键名) 识别, Python 字段名本身不会被识别.
    - 值类型严格校验, 不做隐式转换 (如 `"500"` 不会被当作整数).
    - 未识别的键收集到 `model_extra`, 由 `ensure_no_extra` 决定是否报错.
    """

    model_config = ConfigDict(
        extra="allow",
        strict=True,
        frozen=True,
    )

    record_name: ClassVar[str] = "OptionsRecord"

    @classmethod
    def parse(cls, document: Any, loc: list[str | int] | None = None) -> Self:
        """将文档解析为中间记录.

        Raises:
            MalformedInputError: 结构解析失败 (如已识别键的值类型不匹配).
        """
        loc = loc or []
        try:
            return cls.model_validate(document)
        except ValidationError as e:
            msg, err_loc = _describe_validation_error(e, loc)
            raise MalformedInputError(
                f"error unmarshalling to temporary {cls.record_name} object: {msg}",
                err_loc,
            ) from e

    @property
    def extra_fields(self) -> list[str]:
        """所有未识别的键名 (已排序)."""
        return sorted(str(k) for k in (self.model_extra or {}))

    def ensure_no_extra(self, loc: list[str | int] | None = None) -> None:
        """extra 集合非空时抛出 UnrecognizedFieldError, 列出全部未识别的键."""
        extra = self.extra_fields
        if extra:
            raise UnrecognizedFieldError(self.record_name, extra, loc)
