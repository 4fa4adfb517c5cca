"""转换条目模型。

定义宿主批处理中的条目结构（JSON 记录 + 二进制附件），
以及流水线各阶段之间传递的数据结构。
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .conversion_config import InputType


class BinaryData(BaseModel):
    """二进制附件记录"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    data: str | None = Field(None, description="base64 编码的文件内容")
    file_name: str | None = Field(None, alias="fileName", description="文件名")
    file_type: str | None = Field(None, alias="fileType", description="内容类别")
    file_size: str | None = Field(None, alias="fileSize", description="可读大小")
    file_extension: str | None = Field(
        None, alias="fileExtension", description="扩展名"
    )
    mime_type: str | None = Field(None, alias="mimeType", description="MIME 类型")


class ConversionItem(BaseModel):
    """宿主传入的单个条目"""

    model_config = ConfigDict(populate_by_name=True)

    json_data: dict[str, Any] = Field(
        default_factory=dict, alias="json", description="结构化数据"
    )
    binary: dict[str, BinaryData | None] | None = Field(
        None, description="按槽位名存放的二进制附件"
    )

    @classmethod
    def coerce(cls, item: "ConversionItem | dict[str, Any]") -> "ConversionItem":
        """接受模型实例或宿主字典"""
        if isinstance(item, ConversionItem):
            return item
        return cls.model_validate(item)


class OutputItem(BaseModel):
    """输出条目：成功记录或失败记录"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    json_data: dict[str, Any] = Field(default_factory=dict, alias="json")
    binary: dict[str, BinaryData] = Field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return "error" in self.json_data

    @property
    def error(self) -> str | None:
        return self.json_data.get("error")

    def to_dict(self) -> dict[str, Any]:
        """转换为宿主使用的字典结构"""
        return {
            "json": dict(self.json_data),
            "binary": {
                name: attachment.model_dump(by_alias=True, exclude_none=True)
                for name, attachment in self.binary.items()
            },
        }


@dataclass(frozen=True)
class InputSpec:
    """解析后的输入：base64 文本和原始文件名"""

    mode: InputType
    raw_data: str
    original_file_name: str = ""


@dataclass(frozen=True)
class EncodedResult:
    """编码结果"""

    data: bytes
    mime_type: str
    extension: str
    dimensions: tuple[int, int] | None = None

    @property
    def size(self) -> int:
        return len(self.data)
