"""Tests for the host field boundary"""

import pytest

from fakes import API_BASE, BINARY_BASE, FakeResponse, json_response, make_session
from managers.cache_manager import TransientCache
from managers.field_manager import (
    MAX_STORED_LENGTH,
    NOT_CONFIGURED_MESSAGE,
    NOT_FOUND_MESSAGE,
    REQUIRED_MESSAGE,
    FieldManager,
)
from models.asset import AssetRecord
from models.config import CantoConfig

ASSET_ID = "abc123def456"
ASSET = {
    "id": ASSET_ID,
    "scheme": "image",
    "name": "Hero",
    "url": {
        "directUrlPreview": "https://acme.canto.com/direct/image/abc123def456/preview",
        "directUrlOriginal": "https://acme.canto.com/direct/image/abc123def456/tok/original",
    },
    "default": {"Filename": "hero.jpg"},
}


@pytest.fixture
def routes():
    return {API_BASE + "image/" + ASSET_ID: json_response(ASSET)}


@pytest.fixture
def manager(config, routes):
    return FieldManager.from_config(config, cache=TransientCache(), session=make_session(routes))


@pytest.fixture
def unconfigured_manager(unconfigured, routes):
    return FieldManager.from_config(unconfigured, session=make_session(routes))


class TestRender:
    def test_not_configured(self, unconfigured_manager):
        state = unconfigured_manager.render_field(ASSET_ID)
        assert state["status"] == "not_configured"
        assert state["message"] == NOT_CONFIGURED_MESSAGE
        assert "Canto domain not configured" in state["errors"]
        unconfigured_manager.canto_client.session.get.assert_not_called()

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_empty(self, manager, value):
        assert manager.render_field(value)["status"] == "empty"

    def test_asset(self, manager):
        state = manager.render_field(ASSET_ID)
        assert state["status"] == "asset"
        assert state["asset"]["filename"] == "hero.jpg"

    def test_not_found(self, manager):
        state = manager.render_field("zzzzzzzzzzzzzz")
        assert state == {"status": "not_found", "value": "zzzzzzzzzzzzzz", "message": NOT_FOUND_MESSAGE}


class TestStorage:
    @pytest.mark.parametrize("value", [None, "", 42, ["x"]])
    def test_non_strings(self, manager, value):
        assert manager.format_for_storage(value) == ""

    def test_trims(self, manager):
        assert manager.format_for_storage("  https://acme.canto.com/direct/document/abc  ") == (
            "https://acme.canto.com/direct/document/abc"
        )

    def test_long_url_truncated(self, manager):
        url = "https://acme.canto.com/" + "a" * 3000
        assert len(manager.format_for_storage(url)) == MAX_STORED_LENGTH

    def test_long_filename_kept(self, manager):
        value = "b" * 3000 + ".png"
        assert manager.format_for_storage(value) == value

    def test_legacy_values_kept(self, manager):
        assert manager.format_for_storage("CANTO_abc_hero") == "CANTO_abc_hero"


class TestOutput:
    def test_empty_is_false(self, manager):
        assert manager.format_for_output("") is False

    def test_object(self, manager):
        record = manager.format_for_output(ASSET_ID)
        assert isinstance(record, AssetRecord)
        assert record.id == ASSET_ID

    def test_id(self, manager):
        assert manager.format_for_output(ASSET_ID, "id") == ASSET_ID

    def test_url(self, manager):
        assert manager.format_for_output(ASSET_ID, "url") == ASSET["url"]["directUrlPreview"]

    def test_download_url(self, manager):
        assert manager.format_for_output(ASSET_ID, "download_url") == ASSET["url"]["directUrlOriginal"]

    def test_missing_field_is_false(self, config):
        payload = {"id": ASSET_ID}
        routes = {API_BASE + "image/" + ASSET_ID: json_response(payload)}
        manager = FieldManager.from_config(config, session=make_session(routes))
        assert manager.format_for_output(ASSET_ID, "url") is False

    def test_unresolvable_is_false(self, manager):
        assert manager.format_for_output("zzzzzzzzzzzzzz", "id") is False


class TestValidation:
    def test_required(self, manager):
        assert manager.validate_value("", required=True) == REQUIRED_MESSAGE
        assert manager.validate_value(ASSET_ID, required=True) is True

    def test_optional(self, manager):
        assert manager.validate_value("", required=False) is True


class TestLifecycle:
    def test_deactivate_clears_cache(self, manager):
        manager.format_for_output(ASSET_ID)
        assert manager.deactivate() == 1
        assert manager.deactivate() == 0

    def test_reconfigure(self, manager):
        manager.format_for_output(ASSET_ID)
        manager.reconfigure(CantoConfig(domain="other", token="t2"))
        assert manager.config.domain == "other"
        assert manager.formatter.config.domain == "other"
        assert len(manager.canto_client.cache) == 0

    def test_reconfigure_stops_serving_old_previews(self, manager, routes):
        routes[BINARY_BASE + "image/" + ASSET_ID + "/preview"] = FakeResponse(200, content=b"old account")
        assert manager.thumbnail_proxy.get_thumbnail("image", ASSET_ID).content == b"old account"

        manager.reconfigure(CantoConfig(domain="other", token="t2"))
        assert manager.thumbnail_proxy.get_thumbnail("image", ASSET_ID) is None

    def test_clear_cache_counts_previews(self, manager, routes):
        routes[BINARY_BASE + "image/" + ASSET_ID + "/preview"] = FakeResponse(200, content=b"preview")
        manager.format_for_output(ASSET_ID)
        manager.thumbnail_proxy.get_thumbnail("image", ASSET_ID)
        assert manager.clear_cache() == 2
        assert manager.deactivate() == 0

    def test_configuration_status_hides_token(self, manager):
        status = manager.configuration_status()
        assert status == {"configured": True, "errors": [], "domain": "acme", "api_domain": "canto.com"}
