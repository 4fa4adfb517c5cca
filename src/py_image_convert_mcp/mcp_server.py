"""图像格式转换 MCP 服务器。

把批量转换能力作为 MCP 工具暴露给宿主。
"""

from typing import Any

from fastmcp import FastMCP

from .converter import ImageFormatConverter
from .exceptions import ConfigurationError, ConversionError
from .models import ImageFormats
from .utils.logging_helpers import configure_logging, get_logger


# MCP 服务器响应类型定义
MCPConversionResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def validation_error(message: str, field: str | None = None) -> dict[str, Any]:
        """构建参数验证错误结果。"""
        details = {"field": field} if field else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="validation",
            details=details,
        )

    @staticmethod
    def conversion_error(error: ConversionError) -> dict[str, Any]:
        """构建条目转换错误结果（遇错即停模式）。"""
        details: dict[str, Any] = {"error_class": type(error).__name__}
        if error.item_index is not None:
            details["item_index"] = error.item_index
        return MCPResponseBuilder.error(
            message=error.message,
            error_type="conversion",
            details=details,
        )


logger = get_logger()

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("图像格式转换服务")


def convert_images(
    items: list[dict[str, Any]],
    input_type: str | None = None,
    base64_field: str | None = None,
    output_file_format: str | None = None,
    output_type: str | None = None,
    quality: int | None = None,
    continue_on_fail: bool | None = None,
) -> MCPConversionResponse:
    """批量转换图像格式

    每个条目形如 ``{"json": {...}, "binary": {"data": {...}}}``。

    Args:
        items: 宿主条目列表
        input_type: 输入形式 "base64" 或 "file"
        base64_field: base64 输入时读取的 JSON 字段名
        output_file_format: 目标格式，如 "image/png"、"image/jpeg"
        output_type: 输出形式 "base64" 或 "file"
        quality: JPEG 质量 0-100，其他格式忽略
        continue_on_fail: 失败时是否记录错误并继续

    Returns:
        dict: 包含按输入顺序排列的输出条目
    """
    parameters = {
        "inputType": input_type,
        "base64Field": base64_field,
        "outputFileFormat": output_file_format,
        "outputType": output_type,
        "quality": quality,
    }

    try:
        converter = ImageFormatConverter(continue_on_fail=continue_on_fail)
        results = converter.convert(items, parameters)
    except ConfigurationError as e:
        return MCPResponseBuilder.validation_error(e.message, e.field)
    except ConversionError as e:
        return MCPResponseBuilder.conversion_error(e)

    return {
        "success": True,
        "total": len(results),
        "failed": sum(1 for r in results if r.is_error),
        "items": [r.to_dict() for r in results],
    }


def list_output_formats() -> dict[str, Any]:
    """列出支持的目标格式（MIME 类型）及对应扩展名"""
    return {
        "success": True,
        "formats": [
            {"mime_type": mime, "extension": ImageFormats.get_extension(mime)}
            for mime in ImageFormats.mime_types()
        ],
    }


mcp.tool(name="convert_images")(convert_images)
mcp.tool(name="list_output_formats")(list_output_formats)


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    configure_logging()
    logger.info("启动图像格式转换 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
