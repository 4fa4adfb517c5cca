"""测试配置文件。

提供测试所需的fixtures和辅助函数，所有测试图片都在内存中生成。
"""

import base64
from io import BytesIO
from typing import Any

import pytest
from PIL import Image, ImageDraw

from py_image_convert_mcp.config import reset_config


def create_test_image(
    size: tuple[int, int] = (120, 80), mode: str = "RGB"
) -> Image.Image:
    """绘制带有多种颜色矩形的测试图片"""
    width, height = size
    background = (0, 0, 0, 0) if mode == "RGBA" else "white"
    img = Image.new(mode, size, color=background)
    draw = ImageDraw.Draw(img)
    for i in range(30):
        x, y = (i * 13) % width, (i * 7) % height
        color = (i * 5 % 256, i * 37 % 256, i * 11 % 256)
        if mode == "RGBA":
            color = (*color, 100 + (i * 15) % 155)
        draw.rectangle([x, y, x + 20, y + 15], fill=color)
    return img


def image_to_base64(img: Image.Image, format: str = "PNG") -> str:
    """把图片编码为 base64 文本"""
    buffer = BytesIO()
    img.save(buffer, format=format)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def open_base64(data: str) -> Image.Image:
    """从 base64 文本打开图片"""
    img = Image.open(BytesIO(base64.b64decode(data)))
    img.load()
    return img


def make_base64_item(data: str, field: str = "data") -> dict[str, Any]:
    """创建 base64 输入条目"""
    return {"json": {field: data}}


def make_binary_item(
    data: str | None,
    file_name: str | None = "photo.png",
    file_type: str | None = "image",
) -> dict[str, Any]:
    """创建二进制附件输入条目"""
    attachment: dict[str, Any] = {"fileType": file_type, "mimeType": "image/png"}
    if data is not None:
        attachment["data"] = data
    if file_name is not None:
        attachment["fileName"] = file_name
    return {"json": {}, "binary": {"data": attachment}}


@pytest.fixture(autouse=True)
def fresh_config():
    """每个测试使用新的全局配置"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_image() -> Image.Image:
    """120x80 的 RGB 测试图片"""
    return create_test_image()


@pytest.fixture
def png_base64(sample_image: Image.Image) -> str:
    """RGB PNG 图片的 base64 文本"""
    return image_to_base64(sample_image, "PNG")


@pytest.fixture
def rgba_png_base64() -> str:
    """带透明通道的 PNG 图片的 base64 文本"""
    return image_to_base64(create_test_image((64, 64), mode="RGBA"), "PNG")
