"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ConversionDefaults:
    """转换相关的默认配置"""

    # 宿主参数默认值
    QUALITY: int = 80
    OUTPUT_FILE_FORMAT: str = "image/jpeg"
    INPUT_TYPE: str = "file"
    OUTPUT_TYPE: str = "file"
    BASE64_FIELD: str = "data"

    # 二进制附件固定槽位名
    BINARY_PROPERTY: str = "data"

    # base64 输出写入的 JSON 字段名
    OUTPUT_FIELD: str = "data"

    # 未提供原始文件名时使用的基础名
    DEFAULT_BASE_NAME: str = "image"

    def as_parameters(self) -> dict[str, str | int]:
        """以宿主参数名（camelCase）返回默认值"""
        return {
            "inputType": self.INPUT_TYPE,
            "base64Field": self.BASE64_FIELD,
            "outputFileFormat": self.OUTPUT_FILE_FORMAT,
            "outputType": self.OUTPUT_TYPE,
            "quality": self.QUALITY,
        }


@dataclass(frozen=True)
class ProcessingDefaults:
    """处理相关的默认配置"""

    # 1 表示按顺序逐个处理
    MAX_WORKERS: int = 1

    # 失败策略：False 为遇错即停
    CONTINUE_ON_FAIL: bool = False


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.conversion = ConversionDefaults()
        self.processing = ProcessingDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        if quality := os.getenv("PIC_DEFAULT_QUALITY"):
            object.__setattr__(self.conversion, "QUALITY", int(quality))

        if max_workers := os.getenv("PIC_MAX_WORKERS"):
            object.__setattr__(self.processing, "MAX_WORKERS", int(max_workers))

        if continue_on_fail := os.getenv("PIC_CONTINUE_ON_FAIL"):
            object.__setattr__(
                self.processing,
                "CONTINUE_ON_FAIL",
                continue_on_fail.lower() in ("true", "1", "yes"),
            )

        if log_level := os.getenv("PIC_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
