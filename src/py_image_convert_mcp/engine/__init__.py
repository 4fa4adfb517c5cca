"""图像转换处理引擎模块。

包含批量驱动、并发执行和参数快照构建等处理逻辑。
"""

from .batch import BatchConverter
from .concurrent_executor import ConcurrentExecutor
from .config import BatchParameters, OptionsBuilder


__all__ = [
    "BatchConverter",
    "BatchParameters",
    "ConcurrentExecutor",
    "OptionsBuilder",
]
