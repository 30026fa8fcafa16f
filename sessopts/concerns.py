"""读关注 / 读偏好 / 写关注子文档.

每种子文档都是一个中间记录, 负责把原始字段转换为 pymongo 的对应类型.
同时提供反向渲染函数, 把 pymongo 类型还原成同样键名的文档.
"""

from typing import Any, ClassVar

from pymongo.errors import ConfigurationError
from pymongo.read_concern import ReadConcern
from pymongo.read_preferences import (
    Nearest,
    Primary,
    PrimaryPreferred,
    Secondary,
    SecondaryPreferred,
    _ServerMode,
)
from pymongo.write_concern import WriteConcern

from .exceptions import ConversionError
from .struct import DocField, OptionsRecord, Required

# 模式名大小写不敏感
READ_PREFERENCE_MODES: dict[str, type[_ServerMode]] = {
    "primary": Primary,
    "primarypreferred": PrimaryPreferred,
    "secondary": Secondary,
    "secondarypreferred": SecondaryPreferred,
    "nearest": Nearest,
}


class ConcernDocument(OptionsRecord):
    """关注点子文档基类."""

    description: ClassVar[str] = "concern"

    def convert(self) -> Any:
        """转换为 pymongo 类型, 失败时抛出 pymongo / 内置异常."""
        raise NotImplementedError

    def to_option(
        self, key: str, *, loc: list[str | int] | None = None, strict: bool = False
    ) -> Any:
        """转换子文档, 并把转换器的错误包装为 ConversionError.

        Args:
            key: 子文档在父文档中的键名.
            loc: 子文档的完整位置路径, 默认为 `[key]`.
            strict: 是否拒绝子文档中的未知键.

        Raises:
            UnrecognizedFieldError: `strict` 且子文档包含未知键.
            ConversionError: 转换器拒绝了子文档的内容.
        """
        loc = loc if loc is not None else [key]
        if strict:
            self.ensure_no_extra(loc)
        try:
            return self.convert()
        except (ConfigurationError, TypeError, ValueError) as e:
            raise ConversionError(
                key, f"error parsing {self.description} document: {e}", loc
            ) from e


class ReadConcernDocument(ConcernDocument):
    """readConcern 子文档."""

    record_name: ClassVar[str] = "ReadConcern"
    description: ClassVar[str] = "read concern"

    level: str | None = DocField(key="level")

    def convert(self) -> ReadConcern:
        return ReadConcern(self.level)


class ReadPreferenceDocument(ConcernDocument):
    """readPreference 子文档.

    `mode` 必填; `tagSets` 和 `maxStalenessSeconds` 不能与 `primary` 同时使用.
    """

    record_name: ClassVar[str] = "ReadPreference"
    description: ClassVar[str] = "read preference"

    mode: str = DocField(Required, key="mode")
    tag_sets: list[dict[str, str]] | None = DocField(key="tagSets")
    max_staleness_seconds: int | None = DocField(key="maxStalenessSeconds")

    def convert(self) -> _ServerMode:
        mode_cls = READ_PREFERENCE_MODES.get(self.mode.lower())
        if mode_cls is None:
            raise ValueError(f"invalid read preference mode {self.mode!r}")

        if mode_cls is Primary:
            if self.tag_sets or self.max_staleness_seconds is not None:
                raise ValueError(
                    "can not specify tag sets or max staleness with mode primary"
                )
            return Primary()

        max_staleness = (
            self.max_staleness_seconds if self.max_staleness_seconds is not None else -1
        )
        return mode_cls(tag_sets=self.tag_sets, max_staleness=max_staleness)


class WriteConcernDocument(ConcernDocument):
    """writeConcern 子文档."""

    record_name: ClassVar[str] = "WriteConcern"
    description: ClassVar[str] = "write concern"

    w: int | str | None = DocField(key="w")
    journal: bool | None = DocField(key="journal")
    wtimeout_ms: int | None = DocField(key="wtimeoutMS")

    def convert(self) -> WriteConcern:
        return WriteConcern(w=self.w, wtimeout=self.wtimeout_ms, j=self.journal)


def read_concern_document(read_concern: ReadConcern) -> dict[str, Any]:
    """ReadConcern -> readConcern 子文档."""
    return dict(read_concern.document)


def read_preference_document(read_preference: _ServerMode) -> dict[str, Any]:
    """读偏好 -> readPreference 子文档 (省略默认的空标签集和 -1 过期时间)."""
    doc: dict[str, Any] = {"mode": read_preference.mongos_mode}
    tag_sets = read_preference.tag_sets
    if tag_sets and tag_sets != [{}]:
        doc["tagSets"] = [dict(tags) for tags in tag_sets]
    if read_preference.max_staleness != -1:
        doc["maxStalenessSeconds"] = read_preference.max_staleness
    return doc


def write_concern_document(write_concern: WriteConcern) -> dict[str, Any]:
    """WriteConcern -> writeConcern 子文档 (键名与解码时一致)."""
    raw = write_concern.document
    doc: dict[str, Any] = {}
    if "w" in raw:
        doc["w"] = raw["w"]
    if "j" in raw:
        doc["journal"] = raw["j"]
    if "wtimeout" in raw:
        doc["wtimeoutMS"] = raw["wtimeout"]
    return doc
