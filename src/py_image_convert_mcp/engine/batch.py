"""批量转换驱动模块。

逐个条目执行转换流水线，并实现失败策略（容错继续或遇错即停）。
"""

from collections.abc import Callable, Sequence
from typing import Any

from ..config import get_config
from ..core.pipeline import convert_item
from ..exceptions import BatchCancelledError, ConversionError, ErrorHandler
from ..models.conversion_item import ConversionItem, OutputItem
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .concurrent_executor import ConcurrentExecutor
from .config import BatchParameters, OptionsBuilder


logger = get_logger()


class BatchConverter:
    """批量图像转换器

    条目之间不共享任何可变状态，除了按序累积的结果列表。
    """

    def __init__(
        self,
        continue_on_fail: bool | None = None,
        max_workers: int | None = None,
        options_builder: OptionsBuilder | None = None,
    ):
        """初始化批量转换器

        Args:
            continue_on_fail: 失败时是否记录错误并继续，None 使用全局配置
            max_workers: 最大并发数，None 使用全局配置
            options_builder: 参数快照构建器实例
        """
        processing = get_config().processing
        self.continue_on_fail = (
            processing.CONTINUE_ON_FAIL if continue_on_fail is None else continue_on_fail
        )
        self.max_workers = processing.MAX_WORKERS if max_workers is None else max_workers
        self.options_builder = options_builder or OptionsBuilder()
        self.concurrent_executor = ConcurrentExecutor(self.max_workers)

    def convert(
        self,
        items: Sequence[ConversionItem | dict[str, Any]],
        parameters: BatchParameters,
        should_cancel: Callable[[], bool] | None = None,
    ) -> list[OutputItem]:
        """转换一批条目

        Args:
            items: 宿主条目列表
            parameters: 批量参数（映射、快照或按序号求值的函数）
            should_cancel: 宿主取消检查，返回 True 时中止批量任务

        Returns:
            list[OutputItem]: 与输入顺序一致的输出条目

        Raises:
            ConversionError: 遇错即停模式下的首个失败（按条目顺序）
            BatchCancelledError: 宿主取消了批量任务
        """

        def run(index: int, item: ConversionItem | dict[str, Any]) -> OutputItem:
            if should_cancel is not None and should_cancel():
                raise BatchCancelledError("Batch conversion was cancelled", index)
            return self._convert_one(index, item, parameters)

        results = self.concurrent_executor.execute_tasks(items, run)

        failed = sum(1 for result in results if result.is_error)
        logger.info(MessageFormatter.batch_summary(len(results), failed))
        return results

    def _convert_one(
        self,
        index: int,
        item: ConversionItem | dict[str, Any],
        parameters: BatchParameters,
    ) -> OutputItem:
        """转换单个条目并应用失败策略"""
        try:
            options = self.options_builder.resolve(parameters, index)
            return convert_item(item, options, index)
        except ConversionError as e:
            e.item_index = index
            if self.continue_on_fail:
                return ErrorHandler.failure_record(e)
            raise ErrorHandler.abort(e, index)
