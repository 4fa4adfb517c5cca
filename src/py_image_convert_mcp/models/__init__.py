"""数据模型包。

定义图像格式转换相关的数据结构和模型。
"""

from .constants import (
    FormatSpec,
    ImageFormats,
    OutputFormat,
    get_extension,
    get_pillow_format,
    is_lossy_format,
)
from .conversion_config import ConversionOptions, InputType, OutputType
from .conversion_item import (
    BinaryData,
    ConversionItem,
    EncodedResult,
    InputSpec,
    OutputItem,
)


__all__ = [
    "BinaryData",
    "ConversionItem",
    "ConversionOptions",
    "EncodedResult",
    "FormatSpec",
    "ImageFormats",
    "InputSpec",
    "InputType",
    "OutputFormat",
    "OutputItem",
    "OutputType",
    "get_extension",
    "get_pillow_format",
    "is_lossy_format",
]
