"""核心模块包。

图像格式转换的核心流水线：输入解析、编解码、输出打包。
"""

from .codec import FormatProcessor, decode, decode_base64, encode, get_save_parameters
from .input_resolver import resolve_input
from .packager import package
from .pipeline import convert_item


__all__ = [
    "FormatProcessor",
    "convert_item",
    "decode",
    "decode_base64",
    "encode",
    "get_save_parameters",
    "package",
    "resolve_input",
]
