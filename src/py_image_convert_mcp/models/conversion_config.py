"""转换配置模型。

定义单个条目转换时使用的参数快照。
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import OutputFormat, is_lossy_format


class InputType(str, Enum):
    """输入形式"""

    BASE64 = "base64"  # JSON 字段中的 base64 字符串
    FILE = "file"  # 二进制附件


class OutputType(str, Enum):
    """输出形式"""

    BASE64 = "base64"
    FILE = "file"


class ConversionOptions(BaseModel):
    """单个条目的转换参数快照

    在进入转换流水线之前一次性解析完成，之后不可修改。
    """

    model_config = ConfigDict(frozen=True)

    input_type: InputType = Field(InputType.FILE, description="输入形式")
    base64_field: str = Field("data", description="base64 输入时读取的字段名")
    output_file_format: OutputFormat = Field(
        OutputFormat.JPEG, description="目标格式（MIME 类型）"
    )
    output_type: OutputType = Field(OutputType.FILE, description="输出形式")
    quality: int = Field(80, ge=0, le=100, description="JPEG 质量（0-100）")

    @field_validator("output_file_format", mode="before")
    @classmethod
    def normalize_output_format(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("base64_field")
    @classmethod
    def validate_base64_field(cls, v: str) -> str:
        if not v:
            raise ValueError("base64 field name must not be empty")
        return v

    @property
    def effective_quality(self) -> int | None:
        """只有有损目标格式才使用质量值"""
        if is_lossy_format(self.output_file_format):
            return self.quality
        return None
