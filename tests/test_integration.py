"""集成测试。

测试批量驱动、转换器接口和 MCP 服务器的端到端行为。
"""

import logging

import pytest

from py_image_convert_mcp.config import get_config, reset_config
from py_image_convert_mcp.converter import ImageFormatConverter, convert_images
from py_image_convert_mcp.engine.batch import BatchConverter
from py_image_convert_mcp.engine.config import OptionsBuilder
from py_image_convert_mcp.exceptions import (
    BatchCancelledError,
    ConfigurationError,
    MissingBinaryDataError,
    NotAnImageError,
)
from py_image_convert_mcp.models import ConversionOptions, InputType, OutputFormat
from tests.conftest import (
    create_test_image,
    image_to_base64,
    make_base64_item,
    make_binary_item,
    open_base64,
)


FILE_TO_FILE = {"inputType": "file", "outputType": "file", "outputFileFormat": "image/jpeg"}


class TestBatchConverter:
    """批量驱动测试"""

    def test_tolerant_mode_replaces_failed_item(self, png_base64: str):
        """容错模式下失败条目替换为错误记录，其余条目照常输出"""
        items = [
            make_binary_item(png_base64, file_name="a.png"),
            make_binary_item(png_base64, file_name="b.txt", file_type="text"),
            make_binary_item(png_base64, file_name="c.png"),
        ]

        results = BatchConverter(continue_on_fail=True).convert(items, FILE_TO_FILE)

        assert len(results) == 3
        assert results[1].to_dict() == {
            "json": {"error": "No image data exists on item!"},
            "binary": {},
        }
        assert results[0].binary["data"].file_name == "ajpeg"
        assert results[2].binary["data"].file_name == "cjpeg"

    def test_strict_mode_aborts_batch(self, png_base64: str):
        """遇错即停模式下抛出首个错误，后续条目不再处理"""
        items = [
            make_binary_item(png_base64),
            make_binary_item(png_base64, file_type="text"),
            make_binary_item(png_base64),
        ]
        checked: list[int] = []

        def should_cancel() -> bool:
            checked.append(len(checked))
            return False

        with pytest.raises(NotAnImageError) as exc_info:
            BatchConverter(continue_on_fail=False).convert(
                items, FILE_TO_FILE, should_cancel
            )

        assert exc_info.value.item_index == 1
        assert len(checked) == 2

    def test_base64_in_base64_out(self, png_base64: str):
        """base64 PNG 转为 base64 JPEG，尺寸不变"""
        results = BatchConverter().convert(
            [make_base64_item(png_base64)],
            {
                "inputType": "base64",
                "outputFileFormat": "image/jpeg",
                "outputType": "base64",
                "quality": 80,
            },
        )

        assert list(results[0].json_data) == ["data"]
        assert results[0].binary == {}
        with open_base64(results[0].json_data["data"]) as img:
            assert img.format == "JPEG"
            assert img.size == (120, 80)

    def test_file_output_metadata(self, png_base64: str):
        """PNG 附件转为 JPEG 附件"""
        results = BatchConverter().convert(
            [make_binary_item(png_base64, file_name="photo.png")], FILE_TO_FILE
        )
        attachment = results[0].binary["data"]

        assert attachment.file_name == "photojpeg"
        assert attachment.file_extension == "jpeg"
        assert attachment.mime_type == "image/jpeg"
        assert attachment.file_type == "image"
        assert attachment.file_size.endswith(" kB")

    def test_threaded_batch_preserves_order(self):
        """多线程处理时输出顺序与输入顺序一致"""
        sizes = [(20 + i * 7, 10 + i * 3) for i in range(8)]
        items = [make_base64_item(image_to_base64(create_test_image(s))) for s in sizes]

        results = BatchConverter(max_workers=4).convert(
            items,
            {"inputType": "base64", "outputType": "base64", "outputFileFormat": "image/png"},
        )

        assert [open_base64(r.json_data["data"]).size for r in results] == sizes

    def test_threaded_strict_mode_raises_earliest_failure(self, png_base64: str):
        """多线程遇错即停时抛出序号最小的失败"""
        items = [
            make_binary_item(png_base64),
            make_binary_item(png_base64, file_type="text"),
            make_binary_item(png_base64),
            {"json": {}},
        ]

        with pytest.raises(NotAnImageError) as exc_info:
            BatchConverter(max_workers=4).convert(items, FILE_TO_FILE)

        assert exc_info.value.item_index == 1

    def test_per_item_parameters(self, png_base64: str):
        """按条目序号求值的参数"""
        formats = ["image/png", "image/gif", "image/x-ms-bmp"]
        items = [make_base64_item(png_base64) for _ in formats]

        results = BatchConverter().convert(
            items,
            lambda index: {
                "inputType": "base64",
                "outputType": "file",
                "outputFileFormat": formats[index],
            },
        )

        assert [r.binary["data"].mime_type for r in results] == formats
        assert [r.binary["data"].file_name for r in results] == [
            "imagepng",
            "imagegif",
            "imagebmp",
        ]

    def test_configuration_error_follows_policy(self, png_base64: str):
        """参数错误也按失败策略处理"""
        results = BatchConverter(continue_on_fail=True).convert(
            [make_base64_item(png_base64)],
            {"inputType": "base64", "quality": 150},
        )

        assert results[0].is_error
        assert "quality" in results[0].error

    def test_non_mapping_parameters_follow_policy(self, png_base64: str):
        """参数函数返回非映射时按失败策略记录"""
        results = BatchConverter(continue_on_fail=True).convert(
            [make_binary_item(png_base64), make_binary_item(png_base64)],
            lambda index: None if index == 0 else FILE_TO_FILE,
        )

        assert results[0].error == (
            "Invalid parameters: expected a mapping, got NoneType"
        )
        assert not results[1].is_error

    def test_corrupt_image_error_message(self):
        """解码错误信息包含底层错误"""
        results = BatchConverter(continue_on_fail=True).convert(
            [make_base64_item("bm90IGFuIGltYWdl")],
            {"inputType": "base64"},
        )

        assert results[0].error.startswith("Unsupported or corrupt image")

    def test_cancellation(self, png_base64: str):
        """宿主取消时即使容错模式也中止"""
        with pytest.raises(BatchCancelledError):
            BatchConverter(continue_on_fail=True).convert(
                [make_binary_item(png_base64)], FILE_TO_FILE, lambda: True
            )

    def test_tolerated_failure_is_logged(self, caplog, png_base64: str):
        """容错的失败记录 WARNING 日志"""
        with caplog.at_level(logging.WARNING):
            BatchConverter(continue_on_fail=True).convert([{"json": {}}], FILE_TO_FILE)

        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_empty_batch(self):
        """空批量返回空列表"""
        assert BatchConverter().convert([], FILE_TO_FILE) == []


class TestOptionsBuilder:
    """参数快照构建测试"""

    @pytest.fixture
    def builder(self):
        return OptionsBuilder()

    def test_defaults(self, builder):
        """缺省参数使用全局默认值"""
        options = builder.build({})

        assert options.input_type == InputType.FILE
        assert options.base64_field == "data"
        assert options.output_file_format == OutputFormat.JPEG
        assert options.quality == 80

    def test_format_is_normalized(self, builder):
        """格式名大小写不敏感"""
        options = builder.build({"outputFileFormat": "IMAGE/PNG"})
        assert options.output_file_format == OutputFormat.PNG

    @pytest.mark.parametrize(
        ("parameters", "field"),
        [
            ({"quality": 101}, "quality"),
            ({"quality": -1}, "quality"),
            ({"outputFileFormat": "image/webp"}, "outputFileFormat"),
            ({"inputType": "url"}, "inputType"),
            ({"base64Field": ""}, "base64Field"),
        ],
    )
    def test_invalid_parameters(self, builder, parameters: dict, field: str):
        """非法参数转换为 ConfigurationError"""
        with pytest.raises(ConfigurationError) as exc_info:
            builder.build(parameters)

        assert exc_info.value.field == field

    def test_options_are_frozen(self, builder):
        """参数快照不可修改"""
        options = builder.build({})

        with pytest.raises(Exception):
            options.quality = 10  # type: ignore[misc]

    @pytest.mark.parametrize("parameters", [None, ["quality", 80], "image/png"])
    def test_non_mapping_parameters_rejected(self, builder, parameters):
        """非映射参数转换为 ConfigurationError"""
        with pytest.raises(ConfigurationError, match="expected a mapping"):
            builder.build(parameters)

    def test_prebuilt_options_passthrough(self, builder):
        """已构建的快照直接使用"""
        options = ConversionOptions(quality=42)
        assert builder.resolve(options, 3) is options


class TestAppConfig:
    """全局配置测试"""

    def test_env_overrides(self, monkeypatch):
        """环境变量覆盖默认值"""
        monkeypatch.setenv("PIC_DEFAULT_QUALITY", "55")
        monkeypatch.setenv("PIC_MAX_WORKERS", "3")
        monkeypatch.setenv("PIC_CONTINUE_ON_FAIL", "yes")
        reset_config()

        config = get_config()
        assert config.conversion.QUALITY == 55
        assert config.processing.MAX_WORKERS == 3
        assert config.processing.CONTINUE_ON_FAIL is True
        assert OptionsBuilder().build({}).quality == 55

        converter = BatchConverter()
        assert converter.max_workers == 3
        assert converter.continue_on_fail is True


class TestImageFormatConverter:
    """转换器接口测试"""

    def test_convert_images_returns_host_dicts(self, png_base64: str):
        """便捷函数返回宿主字典结构"""
        results = convert_images(
            [make_binary_item(png_base64, file_name="logo.png")],
            {"outputFileFormat": "image/tiff"},
        )

        attachment = results[0]["binary"]["data"]
        assert attachment["fileName"] == "logotiff"
        assert attachment["fileExtension"] == "tiff"
        assert open_base64(attachment["data"]).format == "TIFF"

    def test_convert_item_raises(self):
        """单条目转换直接抛出错误"""
        with pytest.raises(MissingBinaryDataError):
            ImageFormatConverter().convert_item({"json": {}})

    def test_supported_formats(self):
        """支持的目标格式列表"""
        assert ImageFormatConverter.supported_formats() == [f.value for f in OutputFormat]

    def test_invalid_max_workers(self):
        """非法并发数"""
        with pytest.raises(ConfigurationError):
            ImageFormatConverter(max_workers=0)


class TestMCPServer:
    """MCP服务器功能测试"""

    def test_mcp_server_imports(self):
        """测试MCP服务器模块导入"""
        from py_image_convert_mcp.mcp_server import mcp

        assert mcp is not None

    def test_convert_images_tool(self, png_base64: str):
        """转换工具返回按顺序排列的条目"""
        from py_image_convert_mcp.mcp_server import convert_images as tool

        response = tool(
            items=[make_base64_item(png_base64), {"json": {}}],
            input_type="base64",
            output_type="base64",
            output_file_format="image/png",
            continue_on_fail=True,
        )

        assert response["success"] is True
        assert response["total"] == 2
        assert response["failed"] == 1
        assert open_base64(response["items"][0]["json"]["data"]).format == "PNG"
        assert response["items"][1]["json"]["error"] == "No base64 data found in field 'data'"

    def test_convert_images_tool_strict_failure(self, png_base64: str):
        """遇错即停时返回结构化错误"""
        from py_image_convert_mcp.mcp_server import convert_images as tool

        response = tool(
            items=[make_binary_item(png_base64), make_binary_item(png_base64, file_type="video")],
            continue_on_fail=False,
        )

        assert response["success"] is False
        assert response["error_type"] == "conversion"
        assert response["details"]["item_index"] == 1
        assert response["details"]["error_class"] == "NotAnImageError"

    def test_convert_images_tool_validation_error(self, png_base64: str):
        """参数错误返回验证错误"""
        from py_image_convert_mcp.mcp_server import convert_images as tool

        response = tool(items=[make_binary_item(png_base64)], quality=500)

        assert response["success"] is False
        assert response["error_type"] == "validation"
        assert response["details"]["field"] == "quality"

    def test_list_output_formats(self):
        """格式列表工具"""
        from py_image_convert_mcp.mcp_server import list_output_formats

        formats = list_output_formats()["formats"]
        assert {"mime_type": "image/x-ms-bmp", "extension": "bmp"} in formats
        assert len(formats) == 6
