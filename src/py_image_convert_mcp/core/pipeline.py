"""单条目转换流水线。

输入解析 → 解码 → 编码 → 打包，适用于单线程和线程池环境。
"""

from typing import Any

from ..models.conversion_config import ConversionOptions
from ..models.conversion_item import ConversionItem, OutputItem
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .codec import decode, encode
from .input_resolver import resolve_input
from .packager import package


logger = get_logger()


def convert_item(
    item: ConversionItem | dict[str, Any],
    options: ConversionOptions,
    index: int | None = None,
) -> OutputItem:
    """转换单个条目

    任何阶段的错误都直接抛出，由批处理驱动决定如何处理。

    Args:
        item: 宿主条目
        options: 参数快照
        index: 条目序号（仅用于日志）

    Returns:
        OutputItem: 成功的输出条目
    """
    spec = resolve_input(item, options)

    with decode(spec.raw_data) as img:
        encoded = encode(img, options.output_file_format, options.effective_quality)

    logger.debug(MessageFormatter.conversion_done(index, encoded.mime_type, encoded.size))
    return package(encoded, options.output_type, spec.original_file_name)
