"""sessopts命令行工具."""

import json
import pprint
import sys
import traceback
from pathlib import Path
from typing import Any

import click
from bson import json_util
from rich.console import Console
from rich.syntax import Syntax

from .api import loads
from .exceptions import OptionsDecodeError
from .options import DecodeOption
from .types import Document, SessionOptions, TransactionOptions

TARGETS: dict[str, type[SessionOptions] | type[TransactionOptions]] = {
    "session": SessionOptions,
    "transaction": TransactionOptions,
}


def _parse_extended_json(text: str) -> dict[str, Any]:
    """解析 Extended JSON 文本, 顶层必须是对象.

    Raises:
        ValueError: 文本不是有效的 JSON 或顶层不是对象.
    """
    document = json_util.loads(text)
    if not isinstance(document, dict):
        raise ValueError(f"顶层必须是 JSON 对象, 得到 {type(document).__name__}")
    return document


def _read_document_file(file_path: Path, verbose: bool) -> Document:
    """读取文档文件: 优先按 Extended JSON 解析, 失败则作为 BSON 字节.

    Args:
        file_path: 文件路径.
        verbose: 是否显示详细信息.

    Returns:
        dict (Extended JSON) 或 bytes (BSON).
    """
    raw = file_path.read_bytes()
    try:
        document = _parse_extended_json(raw.decode("utf-8"))
        if verbose:
            click.echo("[DEBUG] 从文件读取 Extended JSON 文档 (文本模式)", err=True)
        return document
    except (UnicodeDecodeError, ValueError):
        if verbose:
            click.echo(
                f"[DEBUG] 从文件读取 BSON 数据 (二进制模式, {len(raw)} 字节)", err=True
            )
        return raw


def _decode_and_print(
    document: Document,
    target: str,
    output_format: str,
    output_file: str | None,
    verbose: bool,
    strict_subdocuments: bool,
) -> None:
    """解码并输出结果."""
    option = (
        DecodeOption.STRICT_SUBDOCUMENTS if strict_subdocuments else DecodeOption.NONE
    )
    try:
        result = loads(document, TARGETS[target], option=option)
    except OptionsDecodeError as e:
        if verbose:
            traceback.print_exc(file=sys.stderr)
        raise click.ClickException(f"解码失败: {e}") from e

    if verbose:
        click.echo(f"[DEBUG] 解码目标: {type(result).__name__}", err=True)

    normalized = result.to_document()

    if output_format == "json":
        output_text = json.dumps(normalized, indent=2, ensure_ascii=False)
    else:
        output_text = pprint.pformat(normalized, width=100)

    if output_file:
        Path(output_file).write_text(output_text, encoding="utf-8")
        click.echo(f"结果已保存到: {output_file}", err=True)
        return

    console = Console()
    if output_format == "json":
        console.print(Syntax(output_text, "json", theme="monokai", word_wrap=True))
    else:
        console.print(normalized)


@click.command(help="会话/事务选项文档解码工具")
@click.argument("document", required=False)
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="从文件读取文档 (Extended JSON 或 BSON)",
)
@click.option(
    "-t",
    "--target",
    type=click.Choice(sorted(TARGETS)),
    default="session",
    show_default=True,
    help="解码目标",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["pretty", "json"]),
    default="pretty",
    show_default=True,
    help="输出格式",
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, writable=True),
    help="将输出保存到文件 (如不指定则输出到控制台)",
)
@click.option(
    "--strict-subdocuments",
    is_flag=True,
    help="拒绝 readConcern/readPreference/writeConcern 子文档中的未知键",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="显示详细的解码过程信息",
)
def cli(
    document: str | None,
    file_path: Path | None,
    target: str,
    output_format: str,
    output_file: str | None,
    strict_subdocuments: bool,
    verbose: bool,
) -> None:
    """会话/事务选项文档解码工具.

    Examples:
      # 解码 Extended JSON 形式的会话选项
      sessopts '{"causalConsistency": true, "maxCommitTimeMS": 500}'

      # 从 BSON 文件解码事务选项
      sessopts -f txn.bson --target transaction

      # 以 JSON 格式输出结果
      sessopts -f session.json --format json
    """
    # 互斥参数检查
    if document and file_path:
        raise click.UsageError("不能同时指定 DOCUMENT 数据和 --file 参数")
    if not document and not file_path:
        raise click.UsageError("必须指定 DOCUMENT 数据或 --file 参数")

    if file_path:
        data = _read_document_file(file_path, verbose)
    else:
        assert document is not None
        try:
            data = _parse_extended_json(document)
        except ValueError as e:
            raise click.BadParameter(f"无效的 Extended JSON - {e}") from e

    _decode_and_print(
        data, target, output_format, output_file, verbose, strict_subdocuments
    )


def main() -> None:
    """入口函数."""
    cli()


if __name__ == "__main__":
    main()
