"""图像转换异常处理模块。

定义统一的异常类和错误处理机制，包含 Pillow 异常转换装饰器。
"""

import binascii
from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.conversion_item import OutputItem
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class ConversionError(Exception):
    """转换相关错误基类"""

    def __init__(self, message: str, item_index: int | None = None):
        super().__init__(message)
        self.message = message
        self.item_index = item_index


class MissingBinaryDataError(ConversionError):
    """文件输入模式下缺少二进制附件、附件元数据或附件内容"""

    def __init__(self, missing: str = "binary", item_index: int | None = None):
        super().__init__("No binary data exists on item!", item_index)
        self.missing = missing


class NotAnImageError(ConversionError):
    """附件存在但内容类别不是图像"""

    def __init__(self, file_type: str | None = None, item_index: int | None = None):
        super().__init__("No image data exists on item!", item_index)
        self.file_type = file_type


class MissingFieldError(ConversionError):
    """base64 输入模式下指定字段不存在或为空"""

    def __init__(self, field_name: str, item_index: int | None = None):
        super().__init__(f"No base64 data found in field '{field_name}'", item_index)
        self.field_name = field_name


class UnsupportedImageError(ConversionError):
    """字节流无法解析为任何支持的图像格式"""

    pass


class EncodeError(ConversionError):
    """目标格式无法表示解码后的图像"""

    def __init__(
        self,
        message: str,
        target_format: str | None = None,
        item_index: int | None = None,
    ):
        super().__init__(message, item_index)
        self.target_format = target_format


class ConfigurationError(ConversionError):
    """参数验证错误"""

    def __init__(
        self, message: str, field: str | None = None, item_index: int | None = None
    ):
        super().__init__(message, item_index)
        self.field = field


class BatchCancelledError(ConversionError):
    """宿主取消了批量任务"""

    pass


def handle_image_errors(
    operation_name: str,
    error_cls: type[ConversionError],
    message_prefix: str = "Unsupported or corrupt image",
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """统一的 Pillow 异常转换装饰器

    Args:
        operation_name: 操作名称，用于日志记录
        error_cls: 转换后抛出的异常类型
        message_prefix: 异常消息前缀，后接底层错误信息
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except ConversionError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                # 原始消息包含缓冲区对象地址，每次运行都不同
                raise error_cls(f"{message_prefix}: cannot identify image file") from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise error_cls(f"Image is too large to process safely: {e}") from e
            except binascii.Error as e:
                logger.debug(f"{operation_name} - base64 解码失败: {e}")
                raise error_cls(f"Invalid base64 data: {e}") from e
            # Pillow 对损坏文件会抛出 SyntaxError/EOFError
            except (OSError, SyntaxError, EOFError, ValueError, TypeError, KeyError) as e:
                logger.debug(f"{operation_name} - 处理失败: {e}")
                raise error_cls(f"{message_prefix}: {e}") from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    批处理驱动是唯一决定吞掉还是向上抛出错误的地方，这里只负责记录和构造结果。
    """

    @staticmethod
    def failure_record(error: ConversionError) -> OutputItem:
        """构造容错模式下的失败记录"""
        logger.warning(
            MessageFormatter.stage_failed("转换", error.item_index, error)
        )
        return OutputItem(json_data={"error": error.message})

    @staticmethod
    def abort(error: ConversionError, item_index: int) -> ConversionError:
        """标记出错条目并记录中止日志，返回待抛出的异常"""
        error.item_index = item_index
        logger.error(MessageFormatter.stage_failed("转换", item_index, error))
        return error
