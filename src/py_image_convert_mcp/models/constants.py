"""图像格式相关常量定义。

输出格式以 MIME 类型为键，集中维护 MIME → Pillow 格式、扩展名别名等映射，
新增格式别名时只需修改这里的表，不必改动编码逻辑。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final


class OutputFormat(str, Enum):
    """支持的目标格式（值为 MIME 类型）"""

    JPEG = "image/jpeg"
    PNG = "image/png"
    BMP = "image/bmp"
    MS_BMP = "image/x-ms-bmp"
    TIFF = "image/tiff"
    GIF = "image/gif"


@dataclass(frozen=True)
class FormatSpec:
    """单个目标格式的编码描述"""

    pillow_format: str
    lossy: bool = False


class ImageFormats:
    """输出格式映射表"""

    FORMATS: Final[dict[OutputFormat, FormatSpec]] = {
        OutputFormat.JPEG: FormatSpec("JPEG", lossy=True),
        OutputFormat.PNG: FormatSpec("PNG"),
        OutputFormat.BMP: FormatSpec("BMP"),
        OutputFormat.MS_BMP: FormatSpec("BMP"),
        OutputFormat.TIFF: FormatSpec("TIFF"),
        OutputFormat.GIF: FormatSpec("GIF"),
    }

    # MIME 子类型不能直接作为扩展名的特例
    EXTENSION_ALIASES: Final[dict[str, str]] = {
        "image/x-ms-bmp": "bmp",
    }

    # 二进制附件的内容类别标记
    IMAGE_FILE_TYPE: Final[str] = "image"

    @classmethod
    def get_spec(cls, output_format: OutputFormat | str) -> FormatSpec:
        """获取格式描述，未知格式抛出 ValueError"""
        return cls.FORMATS[OutputFormat(output_format)]

    @classmethod
    def get_extension(cls, mime_type: str) -> str:
        """由 MIME 类型得到小写扩展名（不含点）"""
        mime_lower = mime_type.lower()
        if mime_lower in cls.EXTENSION_ALIASES:
            return cls.EXTENSION_ALIASES[mime_lower]
        return mime_lower.split("/", 1)[-1]

    @classmethod
    def mime_types(cls) -> list[str]:
        """所有支持的 MIME 类型"""
        return [fmt.value for fmt in cls.FORMATS]


# 便捷访问函数
def get_extension(mime_type: str) -> str:
    """获取 MIME 类型对应的扩展名"""
    return ImageFormats.get_extension(mime_type)


def get_pillow_format(output_format: OutputFormat | str) -> str:
    """获取 Pillow 保存时使用的格式名"""
    return ImageFormats.get_spec(output_format).pillow_format


def is_lossy_format(output_format: OutputFormat | str) -> bool:
    """检查目标格式是否为有损格式（需要质量参数）"""
    return ImageFormats.get_spec(output_format).lossy
