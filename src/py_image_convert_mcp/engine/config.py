"""参数快照构建模块。

把宿主参数（camelCase）解析为不可变的 ConversionOptions，集成参数验证。
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import get_config
from ..exceptions import ConfigurationError
from ..models.conversion_config import ConversionOptions
from ..utils.message_formatter import MessageFormatter


logger = logging.getLogger(__name__)

# 批量参数：固定映射、已构建的快照，或按条目序号求值的函数
BatchParameters = ConversionOptions | Mapping[str, Any] | Callable[[int], Any]


class OptionsBuilder:
    """参数快照构建器

    每个条目在进入流水线前解析一次参数，之后只读取快照。
    """

    # 宿主参数名 → 模型字段名
    PARAMETER_FIELDS = {
        "inputType": "input_type",
        "base64Field": "base64_field",
        "outputFileFormat": "output_file_format",
        "outputType": "output_type",
        "quality": "quality",
    }

    def build(self, parameters: ConversionOptions | Mapping[str, Any]) -> ConversionOptions:
        """构建参数快照

        Args:
            parameters: 宿主参数，缺省项使用全局默认值

        Returns:
            ConversionOptions: 不可变参数快照

        Raises:
            ConfigurationError: 参数验证失败
        """
        if isinstance(parameters, ConversionOptions):
            return parameters
        if not isinstance(parameters, Mapping):
            raise ConfigurationError(
                f"Invalid parameters: expected a mapping, got {type(parameters).__name__}"
            )

        values = get_config().conversion.as_parameters()
        values.update({k: v for k, v in parameters.items() if v is not None})

        unknown = set(values) - set(self.PARAMETER_FIELDS)
        if unknown:
            logger.debug(f"忽略未知参数: {sorted(unknown)}")

        try:
            return ConversionOptions(
                **{
                    field: values[key]
                    for key, field in self.PARAMETER_FIELDS.items()
                    if key in values
                }
            )
        except PydanticValidationError as e:
            raise self._to_configuration_error(e) from e

    def resolve(self, parameters: BatchParameters, index: int) -> ConversionOptions:
        """为指定条目解析参数快照"""
        if callable(parameters) and not isinstance(parameters, Mapping):
            return self.build(parameters(index))
        return self.build(parameters)

    def _to_configuration_error(self, error: PydanticValidationError) -> ConfigurationError:
        """把 pydantic 的首个错误转换为 ConfigurationError"""
        first = error.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        host_name = next(
            (key for key, value in self.PARAMETER_FIELDS.items() if value == field),
            field,
        )
        message = MessageFormatter.validation_error(
            host_name or "options", first.get("input"), first.get("msg")
        )
        return ConfigurationError(message, field=host_name)
