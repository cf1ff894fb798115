# tests/test_cli.py
"""
Tests for the command-line interface.
"""

import json

import pytest

from uiauto_appium import cli
from uiauto_appium.config import TimeConfig
from uiauto_appium.repository import DEFAULT_OBJECT_MAP
from uiauto_appium.session import Session
from uiauto_appium.timings import PAUSE_FIELDS


@pytest.fixture
def fake_session(monkeypatch, scenario_driver):
    """Route the CLI's Session through the fake driver and record its config."""
    seen = {}

    def _session(config):
        seen["config"] = config
        return Session(config, driver_factory=lambda url, caps: scenario_driver)

    monkeypatch.setattr(cli, "Session", _session)
    return seen


def _run_args(tmp_path, *extra):
    args = [
        "run",
        "--report", str(tmp_path / "report.json"),
        "--screenshots-dir", str(tmp_path / "shots"),
        "--timeout", "0.3",
    ]
    for name in PAUSE_FIELDS:
        args += ["--pause", f"{name}=0"]
    return args + list(extra)


class TestRun:
    """The run command."""

    def test_passing_run(self, fake_session, tmp_path, capsys):
        code = cli.main(_run_args(tmp_path))
        out = capsys.readouterr().out

        assert code == 0
        assert "Status:   PASSED" in out
        assert "===== RESULTS (first 2) =====" in out
        assert "1) Consola PlayStation 5 Slim | 4500000 Pesos" in out
        report = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
        assert report["status"] == "passed"

    def test_failing_run_exit_code(self, fake_session, scenario_driver, repo, tmp_path, capsys):
        scenario_driver.remove(repo.get_locator("result_card").query)

        code = cli.main(_run_args(tmp_path))
        out = capsys.readouterr().out

        assert code == 2
        assert "No products found to extract" in out
        assert "AssertionError" in out

    def test_server_url_and_caps(self, fake_session, tmp_path, monkeypatch):
        caps = tmp_path / "caps.yaml"
        caps.write_text("platformName: Android\nappium:udid: emulator-5554\n", encoding="utf-8")

        cli.main(_run_args(tmp_path, "--server-url", "http://10.0.0.5:4723", "--caps", str(caps)))

        config = fake_session["config"]
        assert config.server_url == "http://10.0.0.5:4723"
        assert config.capabilities["appium:udid"] == "emulator-5554"

    def test_bad_pause_is_setup_error(self, fake_session, tmp_path, capsys):
        code = cli.main(["run", "--pause", "after_tap_pause"])

        assert code == 1
        assert "KEY=SECONDS" in capsys.readouterr().err
        assert "config" not in fake_session

    def test_unknown_pause_field(self, fake_session, tmp_path):
        assert cli.main(["run", "--pause", "nap=1"]) == 1

    def test_negative_limit_is_setup_error(self, fake_session, scenario_driver, tmp_path, capsys):
        code = cli.main(_run_args(tmp_path, "--limit", "-1"))

        assert code == 1
        assert "limit must be >= 0" in capsys.readouterr().err
        assert scenario_driver.lookups == []
        assert not (tmp_path / "report.json").exists()

    def test_missing_elements_file(self, fake_session, tmp_path):
        assert cli.main(["run", "--elements", str(tmp_path / "missing.yaml")]) == 1


class TestTimingOptions:
    """Preset flags, --timeout and --pause."""

    def test_preset_flag(self):
        args = cli.build_parser().parse_args(["run", "--fast"])

        assert args.preset == "fast"
        assert cli._build_time_config(args).to_dict() == TimeConfig("fast").to_dict()

    def test_default_preset(self):
        assert cli.build_parser().parse_args(["run"]).preset == "default"

    def test_presets_are_exclusive(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["run", "--ci", "--fast"])

    def test_pause_after_timeout(self):
        args = cli.build_parser().parse_args(
            ["run", "--ci", "-t", "10", "--pause", "after_tap_pause=0.25", "--pause", "results_confirm_wait=1"]
        )

        config = cli._build_time_config(args)

        assert config.preset == "ci"
        assert config.search_bar_wait == 10.0
        assert config.results_confirm_wait == 1.0
        assert config.after_tap_pause == 0.25
        assert config.after_results_pause == TimeConfig("ci").after_results_pause


class TestValidateAndList:
    def test_validate_packaged_map(self, capsys):
        assert cli.main(["validate"]) == 0
        assert "+ Elements file is valid" in capsys.readouterr().out

    def test_validate_invalid_map(self, tmp_path, capsys):
        path = tmp_path / "elements.yaml"
        path.write_text("elements:\n  search_bar:\n    query: '//x'\n", encoding="utf-8")

        assert cli.main(["validate", "--elements", str(path)]) == 2
        assert "X Elements file is invalid" in capsys.readouterr().err

    def test_list_elements(self, capsys):
        assert cli.main(["list-elements", "--elements", DEFAULT_OBJECT_MAP]) == 0
        out = capsys.readouterr().out

        assert "Elements (15):" in out
        assert "  - search_bar: search bar" in out


class TestActionLoggerEnv:
    def test_enabled_from_env(self, monkeypatch, tmp_path):
        log_file = tmp_path / "actions.jsonl"
        monkeypatch.setenv("UIAUTO_ACTION_LOGGING", "1")
        monkeypatch.setenv("UIAUTO_ACTION_LOG_FILE", str(log_file))
        monkeypatch.setenv("UIAUTO_ACTION_LOG_FORMAT", "jsonl")
        try:
            cli._configure_action_logger_from_env()
            assert cli.ACTION_LOGGER.is_enabled()
            cli.ACTION_LOGGER.log(event="probe", action="type", metadata={"text": "playstation 5 slim"})
        finally:
            monkeypatch.delenv("UIAUTO_ACTION_LOGGING")
            cli._configure_action_logger_from_env()
            cli.ACTION_LOGGER.configure(console=True, file_path=None)

        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["event"] == "probe"
        assert record["metadata"]["text"] == "playstatio..."
        assert not cli.ACTION_LOGGER.is_enabled()
