"""图像格式转换库。

基于 Pillow 的批量图像格式转换，支持 base64 字段和二进制附件两种输入输出形式。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "批量图像格式转换库，基于 Pillow"

# 核心功能导出
from .converter import ImageFormatConverter, convert_images
from .exceptions import (
    ConfigurationError,
    ConversionError,
    EncodeError,
    MissingBinaryDataError,
    NotAnImageError,
    UnsupportedImageError,
)
from .models import ConversionItem, ConversionOptions, OutputFormat, OutputItem


__all__ = [
    "ConfigurationError",
    "ConversionError",
    "ConversionItem",
    "ConversionOptions",
    "EncodeError",
    "ImageFormatConverter",
    "MissingBinaryDataError",
    "NotAnImageError",
    "OutputFormat",
    "OutputItem",
    "UnsupportedImageError",
    "convert_images",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
