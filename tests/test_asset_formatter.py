"""Tests for asset normalisation"""

import pytest

from managers.asset_formatter import AssetFormatter, download_from_api_binary, format_size
from models.config import CantoConfig


@pytest.fixture
def formatter(config):
    return AssetFormatter(config)


def search_item(**overrides):
    item = {
        "id": "abc123def456",
        "scheme": "image",
        "name": "Hero Banner",
        "size": 2621440,
        "lastUploaded": "20260101120000000",
        "url": {
            "directUrlPreview": "https://acme.canto.com/direct/image/abc123def456/preview",
            "directUrlOriginal": "https://acme.canto.com/direct/image/abc123def456/token/original",
            "preview": "https://acme.canto.com/api_binary/v1/image/abc123def456/preview",
            "download": "https://acme.canto.com/api_binary/v1/image/abc123def456/download",
        },
        "default": {
            "Filename": "hero-banner.jpg",
            "Dimensions": "1920x1080",
            "Content Type": "image/jpeg",
        },
    }
    item.update(overrides)
    return item


class TestValidity:
    @pytest.mark.parametrize("raw", [None, "abc", 42, [], {}, {"id": ""}, {"name": "no id"}])
    def test_invalid_input_returns_none(self, formatter, raw):
        assert formatter.format_from_search(raw) is None
        assert formatter.format_from_get_by_id(raw, "abc") is None

    def test_minimal_record(self, formatter):
        record = formatter.format_from_search({"id": "abc123"})
        assert record.id == "abc123"
        assert record.scheme == "image"
        assert record.name == "Untitled"
        assert record.filename == "Untitled.jpg"
        assert record.thumbnail
        assert record.download_url


class TestFullItem:
    def test_fields(self, formatter):
        record = formatter.format_from_search(search_item())
        assert record.filename == "hero-banner.jpg"
        assert record.url == "https://acme.canto.com/direct/image/abc123def456/preview"
        assert record.thumbnail == record.url
        assert record.download_url == "https://acme.canto.com/direct/image/abc123def456/token/original"
        assert record.dimensions == "1920x1080"
        assert record.mime_type == "image/jpeg"
        assert record.size == "2.5 MB"
        assert record.uploaded == "20260101120000000"
        assert record.metadata["Filename"] == "hero-banner.jpg"

    def test_both_shapes_converge(self, formatter):
        item = search_item()
        assert formatter.format_from_search(item) == formatter.format_from_get_by_id(item, "abc123def456")

    def test_lite_view(self, formatter):
        lite = formatter.format_from_search(search_item()).to_lite()
        assert lite["id"] == "abc123def456"
        assert "metadata" not in lite
        assert "url" not in lite


class TestScheme:
    def test_explicit_field_wins(self, formatter):
        item = search_item(scheme="document")
        item["url"]["preview"] = "https://acme.canto.com/api_binary/v1/video/x/preview"
        assert formatter.format_from_search(item).scheme == "document"

    def test_unknown_field_falls_through_to_preview(self, formatter):
        item = {"id": "abc", "scheme": "album", "url": {"preview": "https://x/api_binary/v1/video/abc/preview"}}
        assert formatter.format_from_search(item).scheme == "video"

    def test_document_preview(self, formatter):
        item = {"id": "abc", "url": {"preview": "https://x/api_binary/v1/document/abc/preview"}}
        assert formatter.format_from_search(item).scheme == "document"

    @pytest.mark.parametrize(
        "content_type,expected",
        [("video/mp4", "video"), ("application/pdf", "document"), ("text/plain", "document"), ("image/png", "image")],
    )
    def test_mime_type(self, formatter, content_type, expected):
        item = {"id": "abc", "default": {"Content Type": content_type}}
        assert formatter.format_from_search(item).scheme == expected


class TestFilename:
    def test_metadata_field_order(self, formatter):
        item = {"id": "abc", "default": {"file_name": "late.png", "Original Filename": "early.png"}}
        assert formatter.format_from_search(item).filename == "early.png"

    def test_name_with_extension(self, formatter):
        assert formatter.format_from_search({"id": "abc", "name": "report.pdf"}).filename == "report.pdf"

    def test_synthesized_from_name_and_scheme(self, formatter):
        record = formatter.format_from_search({"id": "abc", "name": "My Photo (1)", "scheme": "video"})
        assert record.filename == "My_Photo__1_.mp4"

    def test_long_extension_is_not_an_extension(self, formatter):
        record = formatter.format_from_search({"id": "abc", "name": "notes.markdown"})
        assert record.filename == "notes_markdown.jpg"

    def test_stable_across_calls(self, formatter):
        item = {"id": "abc", "name": "My Photo (1)"}
        assert formatter.format_from_search(item).filename == formatter.format_from_search(item).filename


class TestUrls:
    def test_legacy_preview_is_url_but_not_thumbnail(self, formatter):
        item = {"id": "abc123", "url": {"preview": "https://acme.canto.com/api_binary/v1/image/abc123/preview"}}
        record = formatter.format_from_search(item)
        assert record.url == "https://acme.canto.com/api_binary/v1/image/abc123/preview"
        assert record.thumbnail == "http://localhost:8000/canto-thumbnail/image/abc123"

    def test_default_thumbnail_when_unconfigured(self, unconfigured):
        record = AssetFormatter(unconfigured).format_from_search({"id": "abc123", "scheme": "document"})
        assert record.thumbnail == "http://localhost:8000/static/images/default-document.svg"

    def test_legacy_download(self, formatter):
        item = {"id": "abc", "url": {"download": "https://acme.canto.com/api_binary/v1/image/abc/download"}}
        assert formatter.format_from_search(item).download_url.endswith("/image/abc/download")

    def test_direct_document_fallback(self, formatter):
        record = formatter.format_from_search({"id": "abc123"})
        assert record.download_url == "https://acme.canto.com/direct/document/abc123"

    @pytest.mark.parametrize(
        "asset_id,expected",
        [
            ("abc.123", "https://acme.canto.com/api_binary/v1/video/abc.123/download"),
            ("abc 123", "https://acme.canto.com/api_binary/v1/video/abc%20123/download"),
        ],
    )
    def test_binary_download_when_direct_url_cannot_carry_id(self, formatter, asset_id, expected):
        record = formatter.format_from_search({"id": asset_id, "scheme": "video"})
        assert record.download_url == expected

    def test_no_download_without_domain(self, unconfigured):
        assert AssetFormatter(unconfigured).format_from_search({"id": "abc123"}).download_url == ""

    def test_api_binary_urls(self, config):
        image = download_from_api_binary({}, {"id": "abc", "scheme": "image", "config": config})
        video = download_from_api_binary({}, {"id": "abc", "scheme": "video", "config": config})
        assert image == "https://acme.canto.com/api_binary/v1/advance/image/abc/download/directuri?type=jpg&dpi=72"
        assert video == "https://acme.canto.com/api_binary/v1/video/abc/download"
        assert download_from_api_binary({}, {"id": "abc", "scheme": "image", "config": CantoConfig()}) == ""


class TestFormatSize:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (512, "512 B"),
            (2048, "2 KB"),
            (2621440, "2.5 MB"),
            ("1024", "1 KB"),
            (0, "0 B"),
            (1024 ** 5, "1024 TB"),
            (1048575, "1 MB"),
            (1023.96, "1 KB"),
            (1048524, "1023.9 KB"),
        ],
    )
    def test_values(self, value, expected):
        assert format_size(value) == expected

    @pytest.mark.parametrize("value", [None, "", "big", -1, True, float("nan"), float("inf")])
    def test_unusable(self, value):
        assert format_size(value) == ""
