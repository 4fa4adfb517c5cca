"""输出打包模块。

把编码结果包装成 base64 字段或二进制附件记录，只做元数据推导。
"""

import base64

from ..config import get_config
from ..models.constants import ImageFormats
from ..models.conversion_config import OutputType
from ..models.conversion_item import BinaryData, EncodedResult, OutputItem
from ..utils.naming_helpers import FileNamingStrategy, format_size_label


def package(
    encoded: EncodedResult,
    output_type: OutputType | str,
    original_file_name: str = "",
) -> OutputItem:
    """打包编码结果

    Args:
        encoded: 编码结果
        output_type: 输出形式
        original_file_name: 原始文件名，可为空

    Returns:
        OutputItem: 输出条目
    """
    payload = base64.b64encode(encoded.data).decode("ascii")
    conversion_config = get_config().conversion

    if OutputType(output_type) == OutputType.BASE64:
        return OutputItem(json_data={conversion_config.OUTPUT_FIELD: payload})

    attachment = BinaryData(
        file_name=FileNamingStrategy.generate_output_name(
            original_file_name, encoded.extension
        ),
        data=payload,
        file_type=ImageFormats.IMAGE_FILE_TYPE,
        file_size=format_size_label(encoded.size),
        file_extension=encoded.extension,
        mime_type=encoded.mime_type,
    )
    return OutputItem(binary={conversion_config.BINARY_PROPERTY: attachment})
