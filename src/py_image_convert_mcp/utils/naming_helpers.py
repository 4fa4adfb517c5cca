"""文件命名工具模块。

提供输出附件的文件名和大小标签生成功能。
"""

import math

from ..config import get_config


class FileNamingStrategy:
    """文件命名策略类"""

    @staticmethod
    def strip_extension(file_name: str) -> str:
        """去掉最后一个扩展名

        没有点号的文件名会得到空字符串，与宿主原有行为一致。
        """
        return ".".join(file_name.split(".")[:-1])

    @staticmethod
    def generate_output_name(original_file_name: str, extension: str) -> str:
        """生成输出文件名

        基础名与新扩展名直接拼接，中间不插入分隔符：
        ``photo.png`` + ``jpeg`` -> ``photojpeg``。

        Args:
            original_file_name: 原始文件名，可为空
            extension: 新扩展名（不含点）

        Returns:
            str: 生成的文件名
        """
        if original_file_name:
            base_name = FileNamingStrategy.strip_extension(original_file_name)
        else:
            base_name = get_config().conversion.DEFAULT_BASE_NAME

        return f"{base_name}{extension}"


def format_size_label(size_bytes: int) -> str:
    """生成以 kB 为单位、保留一位小数的大小标签

    四舍五入采用 half-up，整数值不带小数部分（``12 kB`` 而非 ``12.0 kB``）。
    """
    value = math.floor(size_bytes / 1024 * 10 + 0.5) / 10
    text = str(int(value)) if value.is_integer() else str(value)
    return f"{text} kB"
