"""编解码引擎模块。

将 base64 文本解码为内存中的图像，再按目标格式重新编码。
解码与编码是两个相互独立的纯内存操作，同一个解码结果可以被多次编码。
"""

import base64
import re
from io import BytesIO
from typing import Any

from PIL import Image

from ..config import get_config
from ..exceptions import EncodeError, UnsupportedImageError, handle_image_errors
from ..models.constants import ImageFormats, OutputFormat, get_extension
from ..models.conversion_item import EncodedResult
from ..utils.logging_helpers import get_logger


logger = get_logger()

# base64 字母表之外的字符（空白、换行、填充符）全部忽略
_NON_BASE64_CHARS = re.compile(r"[^A-Za-z0-9+/\-_]")
_URL_SAFE_TABLE = str.maketrans("-_", "+/")


class FormatProcessor:
    """格式处理器 - 为目标格式准备色彩模式"""

    # 这些色彩空间只能以 RGB 形式写入 PNG/BMP/GIF
    NON_RGB_COLOR_SPACES = frozenset({"CMYK", "YCbCr", "LAB", "HSV"})

    # 16 位 / 32 位整数和浮点灰度
    HIGH_BIT_DEPTH_MODES = frozenset({"I;16", "I;16L", "I;16B", "I;16N", "I", "F"})

    # JPEG 透明区域合成时使用的背景色
    JPEG_BACKGROUND = (255, 255, 255)

    def prepare_for_format(self, img: Image.Image, pillow_format: str) -> Image.Image:
        """为目标格式准备图片

        TIFF 可以原样写入所有模式；PNG 只缺浮点灰度；
        JPEG/BMP/GIF 只接受 8 位通道，高位深灰度先缩放到 L。

        Args:
            img: PIL图片对象
            pillow_format: Pillow 格式名

        Returns:
            Image.Image: 处理后的图片对象
        """
        match pillow_format:
            case "JPEG":
                return self._prepare_for_jpeg(self._to_8bit_grayscale(img))
            case "BMP":
                return self._prepare_for_bmp(self._to_8bit_grayscale(img))
            case "GIF":
                return self._prepare_rgb_color_space(self._to_8bit_grayscale(img))
            case "PNG":
                if img.mode == "F":
                    img = self._to_8bit_grayscale(img)
                return self._prepare_rgb_color_space(img)
            case _:
                return img

    def _to_8bit_grayscale(self, img: Image.Image) -> Image.Image:
        """把高位深灰度按取值范围缩放为 L 模式

        整数图像最大值超过 255 时按 16 位范围缩放，
        浮点图像最大值不超过 1.0 时按 [0, 1] 范围缩放，否则直接截断。
        """
        if img.mode not in self.HIGH_BIT_DEPTH_MODES:
            return img

        if img.mode.startswith("I;16"):
            img = img.convert("I")

        _, high = img.getextrema()
        if img.mode == "F" and high <= 1.0:
            scale = 255.0
        elif high > 255:
            scale = 1 / 256
        else:
            scale = 1.0

        return img.point(lambda v: v * scale).convert("L")

    def _prepare_for_jpeg(self, img: Image.Image) -> Image.Image:
        """JPEG 不支持透明度，透明区域合成到白色背景后转为 RGB"""
        if img.mode == "P" and "transparency" in img.info:
            img = img.convert("RGBA")
        elif img.mode in ("LA", "PA"):
            img = img.convert("RGBA")

        if img.mode == "RGBA":
            background = Image.new("RGB", img.size, self.JPEG_BACKGROUND)
            background.paste(img, mask=img.getchannel("A"))
            return background

        if img.mode != "RGB":
            return img.convert("RGB")

        return img

    def _prepare_for_bmp(self, img: Image.Image) -> Image.Image:
        """BMP 只能写入 1/L/P/RGB/RGBA"""
        if img.mode in ("LA", "PA"):
            return img.convert("RGBA")
        return self._prepare_rgb_color_space(img)

    def _prepare_rgb_color_space(self, img: Image.Image) -> Image.Image:
        if img.mode in self.NON_RGB_COLOR_SPACES:
            return img.convert("RGB")
        return img


def get_save_parameters(
    output_format: OutputFormat, quality: int | None
) -> dict[str, Any]:
    """获取保存参数

    只有有损格式会读取质量值，其余格式使用各自的默认编码。
    """
    if not ImageFormats.get_spec(output_format).lossy:
        return {}

    if quality is None:
        quality = get_config().conversion.QUALITY
    return {"quality": quality}


def decode_base64(raw_data: str) -> bytes:
    """宽松的 base64 解码

    忽略字母表之外的字符并补齐缺失的填充，同时接受 URL 安全字母表。
    """
    cleaned = _NON_BASE64_CHARS.sub("", raw_data).translate(_URL_SAFE_TABLE)
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned, validate=True)


@handle_image_errors("图像解码", UnsupportedImageError)
def decode(raw_data: str) -> Image.Image:
    """将 base64 文本解码为图像

    Args:
        raw_data: base64 编码的图像数据

    Returns:
        Image.Image: 已完成像素加载的图像（多帧图像只取第一帧）

    Raises:
        UnsupportedImageError: 数据不是可识别的图像
    """
    payload = decode_base64(raw_data)
    if not payload:
        raise UnsupportedImageError("Unsupported or corrupt image: empty payload")

    img = Image.open(BytesIO(payload))
    img.load()
    logger.debug(f"解码完成: {img.format} {img.mode} {img.size}")
    return img


def encode(
    img: Image.Image,
    output_format: OutputFormat | str,
    quality: int | None = None,
) -> EncodedResult:
    """按目标格式编码图像

    Args:
        img: 解码后的图像
        output_format: 目标格式（MIME 类型）
        quality: JPEG 质量 0-100，其他格式忽略

    Returns:
        EncodedResult: 编码结果

    Raises:
        EncodeError: 目标格式无法表示该图像
    """
    output_format = OutputFormat(output_format)
    pillow_format = ImageFormats.get_spec(output_format).pillow_format
    save_params = get_save_parameters(output_format, quality)

    buffer = BytesIO()
    try:
        prepared = FormatProcessor().prepare_for_format(img, pillow_format)
        prepared.save(buffer, format=pillow_format, **save_params)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.debug(f"编码为 {output_format.value} 失败: {e}")
        raise EncodeError(
            f"Cannot encode image as {output_format.value}: {e}",
            target_format=output_format.value,
        ) from e

    return EncodedResult(
        data=buffer.getvalue(),
        mime_type=output_format.value,
        extension=get_extension(output_format.value),
        dimensions=prepared.size,
    )
