"""选项值类型.

解码器的目标对象: 纯数据类, 由解码器逐字段填充.
所有字段默认为 None, 表示沿用驱动的默认行为.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, TypeAlias

from pymongo import client_session
from pymongo.read_concern import ReadConcern
from pymongo.read_preferences import _ServerMode
from pymongo.write_concern import WriteConcern

from .concerns import (
    read_concern_document,
    read_preference_document,
    write_concern_document,
)

Document: TypeAlias = bytes | bytearray | memoryview | Mapping[str, Any]

_ONE_MS = timedelta(milliseconds=1)


def to_milliseconds(duration: timedelta) -> int:
    """timedelta -> 整数毫秒 (向下取整)."""
    return duration // _ONE_MS


@dataclass
class TransactionOptions:
    """事务选项.

    Attributes:
        read_concern: 事务的读关注.
        read_preference: 事务的读偏好.
        write_concern: 事务的写关注.
        max_commit_time: commitTransaction 允许运行的最长时间.
    """

    read_concern: ReadConcern | None = None
    read_preference: _ServerMode | None = None
    write_concern: WriteConcern | None = None
    max_commit_time: timedelta | None = None

    def to_document(self) -> dict[str, Any]:
        """渲染为文档, 仅包含已设置的字段, 键名与解码时一致."""
        doc: dict[str, Any] = {}
        if self.read_concern is not None:
            doc["readConcern"] = read_concern_document(self.read_concern)
        if self.read_preference is not None:
            doc["readPreference"] = read_preference_document(self.read_preference)
        if self.write_concern is not None:
            doc["writeConcern"] = write_concern_document(self.write_concern)
        if self.max_commit_time is not None:
            doc["maxCommitTimeMS"] = to_milliseconds(self.max_commit_time)
        return doc

    def to_pymongo(self) -> client_session.TransactionOptions:
        """转换为 `pymongo.client_session.TransactionOptions`."""
        return client_session.TransactionOptions(
            read_concern=self.read_concern,
            write_concern=self.write_concern,
            read_preference=self.read_preference,
            max_commit_time_ms=(
                to_milliseconds(self.max_commit_time)
                if self.max_commit_time is not None
                else None
            ),
        )


@dataclass
class SessionOptions:
    """会话选项.

    三个 `default_*` 关注点字段来自嵌套的 `defaultTransactionOptions`,
    而 `default_max_commit_time` 只来自会话层级自己的 `maxCommitTimeMS`.

    Attributes:
        causal_consistency: 是否启用因果一致性.
        default_max_commit_time: 会话内事务的默认最长提交时间.
        default_read_concern: 会话内事务的默认读关注.
        default_read_preference: 会话内事务的默认读偏好.
        default_write_concern: 会话内事务的默认写关注.
    """

    causal_consistency: bool | None = None
    default_max_commit_time: timedelta | None = None
    default_read_concern: ReadConcern | None = None
    default_read_preference: _ServerMode | None = None
    default_write_concern: WriteConcern | None = None

    def default_transaction_options(self) -> TransactionOptions:
        """由会话默认值组装出的事务选项."""
        return TransactionOptions(
            read_concern=self.default_read_concern,
            read_preference=self.default_read_preference,
            write_concern=self.default_write_concern,
            max_commit_time=self.default_max_commit_time,
        )

    def to_document(self) -> dict[str, Any]:
        """渲染为文档, 仅包含已设置的字段, 键名与解码时一致."""
        doc: dict[str, Any] = {}
        if self.causal_consistency is not None:
            doc["causalConsistency"] = self.causal_consistency
        if self.default_max_commit_time is not None:
            doc["maxCommitTimeMS"] = to_milliseconds(self.default_max_commit_time)

        nested = TransactionOptions(
            read_concern=self.default_read_concern,
            read_preference=self.default_read_preference,
            write_concern=self.default_write_concern,
        ).to_document()
        if nested:
            doc["defaultTransactionOptions"] = nested
        return doc

    def to_pymongo(self) -> client_session.SessionOptions:
        """转换为 `pymongo.client_session.SessionOptions`.

        会话默认值被折叠进 pymongo 的 `default_transaction_options`;
        全部未设置时传入 None.
        """
        txn = self.default_transaction_options()
        return client_session.SessionOptions(
            causal_consistency=self.causal_consistency,
            default_transaction_options=(
                txn.to_pymongo() if txn != TransactionOptions() else None
            ),
        )
