"""消息格式化工具模块。

提供统一的日志消息格式化功能。
"""

from typing import Any

from humanize import naturalsize


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def item_label(index: int | None) -> str:
        """条目标识"""
        return f"条目 #{index}" if index is not None else "条目"

    @staticmethod
    def stage_failed(
        stage: str, index: int | None = None, error: Exception | None = None
    ) -> str:
        """阶段失败消息"""
        msg = f"{MessageFormatter.item_label(index)} {stage}失败"
        if error:
            msg += f": {error}"
        return msg

    @staticmethod
    def conversion_done(
        index: int | None, mime_type: str, size_bytes: int
    ) -> str:
        """转换成功消息"""
        return (
            f"{MessageFormatter.item_label(index)} 已转换为 {mime_type} "
            f"({naturalsize(size_bytes, binary=True)})"
        )

    @staticmethod
    def batch_summary(total: int, failed: int) -> str:
        """批量处理摘要"""
        return f"批量转换完成: {total - failed}/{total} 成功"

    @staticmethod
    def validation_error(field: str, value: Any, reason: str | None = None) -> str:
        """参数验证错误消息"""
        msg = f"Invalid parameter '{field}': {value!r}"
        if reason:
            msg += f" ({reason})"
        return msg
