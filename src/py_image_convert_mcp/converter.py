"""图像格式转换器接口。

基于核心转换流水线的简洁用户接口，支持单条目和批量转换。
"""

from collections.abc import Callable, Sequence
from typing import Any

from .core.pipeline import convert_item
from .engine.batch import BatchConverter
from .engine.config import BatchParameters, OptionsBuilder
from .exceptions import ConfigurationError
from .models import ConversionItem, ImageFormats, OutputItem
from .utils.logging_helpers import get_logger


logger = get_logger()


class ImageFormatConverter:
    """图像格式转换器。

    在 JPEG、PNG、BMP、TIFF、GIF 之间转换条目中的图像，
    输入和输出都可以是 base64 字段或二进制附件。
    """

    def __init__(
        self,
        continue_on_fail: bool | None = None,
        max_workers: int | None = None,
    ):
        """初始化转换器。

        Args:
            continue_on_fail: 失败时是否记录错误并继续，None 使用全局配置
            max_workers: 批量转换时的最大并发数，None 使用全局配置
        """
        if max_workers is not None and max_workers <= 0:
            raise ConfigurationError(
                "max_workers must be greater than 0", field="max_workers"
            )

        self.options_builder = OptionsBuilder()
        self.batch_converter = BatchConverter(
            continue_on_fail=continue_on_fail,
            max_workers=max_workers,
            options_builder=self.options_builder,
        )

        logger.debug("初始化图像格式转换器")

    def convert(
        self,
        items: Sequence[ConversionItem | dict[str, Any]],
        parameters: BatchParameters | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ) -> list[OutputItem]:
        """转换一批条目。

        Args:
            items: 宿主条目列表
            parameters: 宿主参数（camelCase），缺省项使用全局默认值
            should_cancel: 宿主取消检查

        Returns:
            list[OutputItem]: 与输入顺序一致的输出条目

        Examples:
            >>> converter = ImageFormatConverter(continue_on_fail=True)
            >>> results = converter.convert(
            ...     [{"json": {"data": png_base64}}],
            ...     {"inputType": "base64", "outputType": "base64", "quality": 80},
            ... )
        """
        return self.batch_converter.convert(
            items, parameters if parameters is not None else {}, should_cancel
        )

    def convert_item(
        self,
        item: ConversionItem | dict[str, Any],
        parameters: BatchParameters | None = None,
    ) -> OutputItem:
        """转换单个条目，错误直接抛出。"""
        options = self.options_builder.resolve(
            parameters if parameters is not None else {}, 0
        )
        return convert_item(item, options)

    @staticmethod
    def supported_formats() -> list[str]:
        """支持的目标格式（MIME 类型）"""
        return ImageFormats.mime_types()


def convert_images(
    items: Sequence[ConversionItem | dict[str, Any]],
    parameters: BatchParameters | None = None,
    continue_on_fail: bool | None = None,
    max_workers: int | None = None,
) -> list[dict[str, Any]]:
    """便捷函数：转换一批条目并返回宿主字典结构"""
    converter = ImageFormatConverter(
        continue_on_fail=continue_on_fail, max_workers=max_workers
    )
    return [result.to_dict() for result in converter.convert(items, parameters)]
