"""并发执行器模块。

按条目顺序返回结果的任务执行器，支持顺序执行和线程池执行。
"""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ConcurrentExecutor:
    """通用并发执行器

    结果顺序始终与输入顺序一致；任务抛出的异常按输入顺序向上传播，
    首个异常出现后取消尚未开始的任务。
    """

    def __init__(self, max_workers: int = 1):
        """初始化并发执行器

        Args:
            max_workers: 最大并发数，1 表示顺序执行
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be greater than 0")
        self.max_workers = max_workers

    def execute_tasks(
        self,
        tasks: Sequence[T],
        task_function: Callable[[int, T], R],
    ) -> list[R]:
        """执行任务

        Args:
            tasks: 任务参数列表
            task_function: 接收 (序号, 任务参数) 的任务函数

        Returns:
            list: 与输入顺序一致的结果列表
        """
        if not tasks:
            return []

        if self.max_workers == 1 or len(tasks) == 1:
            return [task_function(index, task) for index, task in enumerate(tasks)]

        logger.debug(f"使用ThreadPoolExecutor: 任务数={len(tasks)}, 线程数={self.max_workers}")
        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            futures = [
                executor.submit(task_function, index, task)
                for index, task in enumerate(tasks)
            ]
            return self._collect_results(futures)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _collect_results(self, futures: list[Future]) -> list:
        """按提交顺序收集结果"""
        results = []
        for future in futures:
            try:
                results.append(future.result())
            except Exception:
                for pending in futures:
                    pending.cancel()
                raise
        return results
