"""Tests for resolution data models."""

import pytest

from resolver_chain.models import InverseDepNode
from resolver_chain.models import Resolution
from resolver_chain.models import ResolutionContext
from resolver_chain.models import ResolutionRequest
from resolver_chain.models import ResolutionType


class TestResolutionContext:
    """Tests for platform normalization."""

    @pytest.mark.parametrize(
        ("platform", "expected"),
        [("web", False), ("ios", True), ("android", True), (None, True)],
    )
    def test_prefer_native_platform(self, platform, expected):
        context = ResolutionContext(origin_module_path="/app/index.js")
        assert context.for_platform(platform).prefer_native_platform is expected

    def test_for_platform_copies(self):
        context = ResolutionContext(origin_module_path="/app/index.js", extras={"dev": True})
        web = context.for_platform("web")

        assert web is not context
        assert context.prefer_native_platform is True
        assert web.origin_module_path == "/app/index.js"
        assert web.get("dev") is True

    def test_get_missing_extra(self):
        context = ResolutionContext(origin_module_path="/app/index.js")
        assert context.get("missing", "fallback") == "fallback"


class TestResolutionRequest:
    def test_to_context(self):
        request = ResolutionRequest("/app/index.js", "react", "ios", {"env": "dev"})
        context = request.to_context(dev=True)

        assert context.origin_module_path == "/app/index.js"
        assert context.custom_resolver_options == {"env": "dev"}
        assert context.get("dev") is True


class TestResolution:
    """Tests for Resolution coercion."""

    def test_from_bundler_mapping(self):
        resolution = Resolution.from_value({"type": "sourceFile", "filePath": "/app/a.js"})

        assert resolution == Resolution.source_file("/app/a.js")
        assert resolution.is_source_file

    def test_from_instance(self):
        resolution = Resolution.empty()
        assert Resolution.from_value(resolution) is resolution

    def test_asset_files(self):
        resolution = Resolution.from_value({"type": "assetFiles", "filePaths": ["/a@2x.png", "/a@3x.png"]})

        assert resolution.type == ResolutionType.ASSET_FILES
        assert resolution.file_paths == ("/a@2x.png", "/a@3x.png")
        assert not resolution.is_source_file

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "sourceFile",
            {"type": "unknown", "filePath": "/a.js"},
            {"filePath": "/a.js"},
            {"type": "sourceFile", "filePath": 42},
            {"type": "assetFiles", "filePaths": "/a.png"},
            {"type": "assetFiles", "filePaths": 5},
            {"type": "assetFiles", "filePaths": ["/a.png", None]},
        ],
    )
    def test_malformed_values(self, value):
        assert Resolution.from_value(value) is None

    def test_to_dict(self):
        assert Resolution.source_file("/a.js").to_dict() == {"type": "sourceFile", "filePath": "/a.js"}
        assert Resolution.empty().to_dict() == {"type": "empty"}


class TestInverseDepNode:
    def test_iter_lines_depth_first(self):
        tree = InverseDepNode(
            "c",
            [
                InverseDepNode("b", [InverseDepNode("a")]),
                InverseDepNode("d"),
            ],
        )

        assert list(tree.iter_lines()) == [(0, "c"), (1, "b"), (2, "a"), (1, "d")]
        assert tree.count() == 4

    def test_to_dict(self):
        tree = InverseDepNode("b", [InverseDepNode("a")])
        assert tree.to_dict() == {"origin": "b", "previous": [{"origin": "a", "previous": []}]}
