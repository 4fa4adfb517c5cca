"""输入解析模块。

从条目中提取 base64 图像数据和原始文件名，不做任何解码。
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import get_config
from ..exceptions import (
    ConversionError,
    MissingBinaryDataError,
    MissingFieldError,
    NotAnImageError,
)
from ..models.constants import ImageFormats
from ..models.conversion_config import ConversionOptions, InputType
from ..models.conversion_item import ConversionItem, InputSpec
from ..utils.logging_helpers import get_logger


logger = get_logger()


def resolve_input(
    item: ConversionItem | dict[str, Any], options: ConversionOptions
) -> InputSpec:
    """按输入形式解析条目

    Args:
        item: 宿主条目
        options: 参数快照

    Returns:
        InputSpec: 解析后的输入

    Raises:
        MissingFieldError: base64 字段缺失
        MissingBinaryDataError: 附件、附件元数据或附件内容缺失
        NotAnImageError: 附件内容类别不是图像
    """
    try:
        item = ConversionItem.coerce(item)
    except PydanticValidationError as e:
        raise ConversionError(
            f"Malformed item: {e.error_count()} invalid field(s)"
        ) from e

    match options.input_type:
        case InputType.BASE64:
            return _resolve_base64(item, options.base64_field)
        case InputType.FILE:
            return _resolve_binary(item)


def _resolve_base64(item: ConversionItem, field_name: str) -> InputSpec:
    """从 JSON 字段读取 base64 文本"""
    value = item.json_data.get(field_name)
    if value is None or value == "":
        raise MissingFieldError(field_name)

    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")

    logger.debug(f"从字段 {field_name} 读取 base64 数据")
    return InputSpec(mode=InputType.BASE64, raw_data=str(value))


def _resolve_binary(item: ConversionItem) -> InputSpec:
    """从固定槽位读取二进制附件"""
    slot = get_config().conversion.BINARY_PROPERTY

    if item.binary is None:
        raise MissingBinaryDataError("binary")

    attachment = item.binary.get(slot)
    if attachment is None:
        raise MissingBinaryDataError(f"binary.{slot}")
    if attachment.data is None:
        raise MissingBinaryDataError(f"binary.{slot}.data")

    if attachment.file_type != ImageFormats.IMAGE_FILE_TYPE:
        raise NotAnImageError(attachment.file_type)

    return InputSpec(
        mode=InputType.FILE,
        raw_data=attachment.data,
        original_file_name=attachment.file_name or "",
    )
