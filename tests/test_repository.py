# tests/test_repository.py
"""
Tests for object map loading and capabilities files.
"""

import json

import pytest
import yaml

from uiauto_appium.exceptions import ConfigError
from uiauto_appium.repository import (SCENARIO_ELEMENTS, Repository, SessionConfig,
                                      load_capabilities, with_session_overrides)


def _write_map(tmp_path, data):
    path = tmp_path / "elements.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


def _minimal_map(**extra):
    data = {
        "search": {"query": "ps5"},
        "elements": {name: {"query": f"//{name}"} for name in SCENARIO_ELEMENTS},
    }
    data.update(extra)
    return data


class TestPackagedMap:
    """The object map shipped with the package."""

    def test_loads(self, repo):
        assert repo.app.name == "Mercado Libre Android"
        assert repo.query == "playstation 5"
        assert repo.extraction.limit == 2
        assert repo.extraction.currency_marker == "Pesos"
        assert repo.session.capabilities["platformName"] == "Android"
        assert repo.session.implicit_wait == 0.0

    def test_has_every_scenario_element(self, repo):
        assert set(SCENARIO_ELEMENTS) <= set(repo.list_elements())

    def test_locators_and_descriptions(self, repo):
        loc = repo.get_locator("sort_price_desc")

        assert loc.by == "xpath"
        assert "sort-price_desc" in loc.query
        assert repo.describe("search_bar") == "search bar"


class TestLoading:
    """Validation of user-supplied maps."""

    def test_defaults_for_missing_sections(self, tmp_path):
        repo = Repository(_write_map(tmp_path, _minimal_map()))

        assert repo.app.artifacts_dir == "screenshots"
        assert repo.session.server_url == "http://127.0.0.1:4723"
        assert repo.extraction.unavailable == "unavailable"
        assert repo.describe("wifi_filter") == "wifi filter"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            Repository(str(tmp_path / "missing.yaml"))

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "elements.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            Repository(str(path))

    def test_schema_violations_are_listed(self, tmp_path):
        data = _minimal_map(windows={}, extraction={"limit": -1})

        with pytest.raises(ConfigError) as exc_info:
            Repository(_write_map(tmp_path, data))

        message = str(exc_info.value)
        assert "windows" in message
        assert "limit" in message

    def test_unknown_strategy(self, tmp_path):
        data = _minimal_map()
        data["elements"]["search_bar"]["by"] = "css"

        with pytest.raises(ConfigError):
            Repository(_write_map(tmp_path, data))

    def test_missing_scenario_element(self, tmp_path):
        data = _minimal_map()
        del data["elements"]["result_card"]

        with pytest.raises(ConfigError) as exc_info:
            Repository(_write_map(tmp_path, data))
        assert "result_card" in str(exc_info.value)

        repo = Repository(_write_map(tmp_path, data), require_scenario_elements=False)
        assert "result_card" not in repo.list_elements()

    def test_missing_search_section(self, tmp_path):
        data = _minimal_map()
        del data["search"]

        with pytest.raises(ConfigError) as exc_info:
            Repository(_write_map(tmp_path, data))
        assert "search.query" in str(exc_info.value)

        repo = Repository(_write_map(tmp_path, data), require_scenario_elements=False)
        assert repo.query == ""

    @pytest.mark.parametrize("search", [{}, {"query": ""}, {"query": "   "}])
    def test_empty_search_query(self, tmp_path, search):
        with pytest.raises(ConfigError):
            Repository(_write_map(tmp_path, _minimal_map(search=search)))

    def test_unknown_element(self, repo):
        with pytest.raises(ConfigError):
            repo.get_locator("nope")


class TestCapabilities:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "caps.yaml"
        path.write_text("platformName: Android\nappium:udid: emulator-5554\n", encoding="utf-8")

        assert load_capabilities(str(path)) == {"platformName": "Android", "appium:udid": "emulator-5554"}

    def test_json_file_with_caps_wrapper(self, tmp_path):
        path = tmp_path / "appium.json"
        path.write_text(json.dumps({"caps": {"platformName": "Android"}}), encoding="utf-8")

        assert load_capabilities(str(path)) == {"platformName": "Android"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_capabilities(str(tmp_path / "caps.yaml"))

    def test_session_overrides(self):
        base = SessionConfig(server_url="http://a:4723", implicit_wait=2.0, capabilities={"x": 1})

        same = with_session_overrides(base)
        replaced = with_session_overrides(base, server_url="http://b:4723", capabilities={"y": 2})

        assert same == base
        assert replaced.server_url == "http://b:4723"
        assert replaced.capabilities == {"y": 2}
        assert replaced.implicit_wait == 2.0
