"""Tests for the command-line entry points."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from cache_cleanup.app import BROWSER, DEVELOPER, ExitCode, PreflightError
from cache_cleanup.config import CleanupConfig
from cache_cleanup.main import browser_main, build_parser, dev_main, options_from_args, run_cli
from cache_cleanup.modules import load_registry


@pytest.fixture(autouse=True)
def _no_user_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the real user configuration out of the tests."""
    monkeypatch.setattr(
        "cache_cleanup.config.CleanupConfig.get_config_path",
        classmethod(lambda cls: tmp_path / "missing.yaml"),
    )


@pytest.fixture
def mock_run():
    """Replace the cleanup run and capture its construction."""
    with patch("cache_cleanup.main.CleanupRun") as run_cls:
        run_cls.return_value.execute.return_value = ExitCode.OK
        yield run_cls


def _options(run_cls: MagicMock):
    return run_cls.call_args.args[2]


class TestBuildParser:
    """Tests for the generated parser."""

    def test_one_flag_per_entry(self) -> None:
        parser = build_parser(BROWSER, load_registry("browser"), "browser-cleaner")
        help_text = parser.format_help()

        for flag in ("--safari", "--chrome", "--firefox", "--arc", "--orion"):
            assert flag in help_text

    def test_developer_flags(self) -> None:
        parser = build_parser(DEVELOPER, load_registry("developer"), "dev-cleanup")
        args = parser.parse_args(["--xcode", "--docker"])

        assert args.selected == ["xcode", "docker"]

    def test_defaults(self) -> None:
        parser = build_parser(BROWSER, load_registry("browser"), "browser-cleaner")
        options = options_from_args(parser.parse_args([]))

        assert options.clean_all
        assert not options.dry_run
        assert not options.force
        assert not options.list_mode
        assert options.log_file is None

    def test_all_overrides_selection(self) -> None:
        parser = build_parser(BROWSER, load_registry("browser"), "browser-cleaner")
        options = options_from_args(parser.parse_args(["--chrome", "--all"]))

        assert options.selected == []
        assert options.clean_all

    def test_repeated_flag_deduplicated(self) -> None:
        parser = build_parser(BROWSER, load_registry("browser"), "browser-cleaner")
        options = options_from_args(parser.parse_args(["--chrome", "--chrome", "--safari"]))

        assert options.selected == ["chrome", "safari"]


class TestRunCli:
    """Tests for run_cli."""

    def test_flags_reach_the_run(self, mock_run: MagicMock, tmp_path: Path) -> None:
        code = browser_main(["--chrome", "-n", "--log", str(tmp_path / "b.log")])

        assert code == ExitCode.OK
        options = _options(mock_run)
        assert options.selected == ["chrome"]
        assert options.dry_run
        assert options.log_file == tmp_path / "b.log"

    def test_short_flags(self, mock_run: MagicMock) -> None:
        dev_main(["-y", "-v", "--list"])

        options = _options(mock_run)
        assert options.force
        assert options.verbose
        assert options.list_mode

    def test_pipeline_passed(self, mock_run: MagicMock) -> None:
        dev_main([])

        assert mock_run.call_args.args[0] is DEVELOPER

    def test_unknown_option_prints_usage(self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        code = browser_main(["--netscape"])

        assert code == ExitCode.OK
        captured = capsys.readouterr()
        assert "usage:" in captured.out
        assert "Unknown option: --netscape" in captured.err
        mock_run.assert_not_called()

    def test_missing_log_value_exits_1(self, mock_run: MagicMock) -> None:
        with pytest.raises(SystemExit) as exc_info:
            browser_main(["--log"])

        assert exc_info.value.code == ExitCode.FAILURE
        mock_run.assert_not_called()

    def test_help_exits_0(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            dev_main(["--help"])

        assert exc_info.value.code == 0
        assert "--xcode" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            browser_main(["--version"])

        assert exc_info.value.code == 0
        assert "Browser Cleaner 2.0.0" in capsys.readouterr().out

    def test_invalid_config_exits_1(self, mock_run: MagicMock, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("logging: [unclosed")

        code = dev_main(["--config", str(config_file)])

        assert code == ExitCode.FAILURE
        mock_run.assert_not_called()

    def test_scalar_logging_section_exits_1(self, mock_run: MagicMock, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("logging: yes\n")

        code = dev_main(["--config", str(config_file)])

        assert code == ExitCode.FAILURE
        mock_run.assert_not_called()

    def test_config_file_used(self, mock_run: MagicMock, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("modules_disabled:\n  - docker\n")

        dev_main(["-c", str(config_file)])

        config = mock_run.call_args.args[1]
        assert config.modules_disabled == ["docker"]

    def test_preflight_exit_code(self, mock_run: MagicMock) -> None:
        mock_run.return_value.execute.side_effect = PreflightError("root", ExitCode.PRIVILEGED)

        assert browser_main([]) == ExitCode.PRIVILEGED

    def test_root_refused_end_to_end(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setattr("cache_cleanup.app.is_privileged_user", lambda: True)

        assert run_cli(DEVELOPER, ["--dry-run"]) == ExitCode.PRIVILEGED
        assert "should not be run as root" in capsys.readouterr().err

    def test_other_platform_end_to_end(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cache_cleanup.app.is_privileged_user", lambda: False)
        monkeypatch.setattr("cache_cleanup.app.is_supported_platform", lambda: False)

        assert run_cli(BROWSER, ["--list"]) == ExitCode.FAILURE

    def test_abbreviated_flag_not_accepted(self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        """A prefix of a module flag must not select that module."""
        code = dev_main(["--sys"])

        assert code == ExitCode.OK
        assert "Unknown option: --sys" in capsys.readouterr().err
        mock_run.assert_not_called()


class TestInitConfig:
    """Tests for --init-config."""

    def test_creates_default_config(self, mock_run: MagicMock, tmp_path: Path) -> None:
        config_file = tmp_path / "conf" / "config.yaml"

        code = dev_main(["--init-config", "--config", str(config_file)])

        assert code == ExitCode.OK
        mock_run.assert_not_called()
        data = yaml.safe_load(config_file.read_text())
        assert data["allow_unsafe_paths"] is False
        assert data["modules_disabled"] == []
        assert data["logging"]["level"] == "INFO"

    def test_created_config_loads(self, mock_run: MagicMock, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"

        browser_main(["--init-config", "-c", str(config_file)])

        assert CleanupConfig.load(config_file).log_level == "INFO"

    def test_existing_config_untouched(self, mock_run: MagicMock, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("modules_disabled:\n  - docker\n")

        code = dev_main(["--init-config", "--config", str(config_file)])

        assert code == ExitCode.FAILURE
        assert config_file.read_text() == "modules_disabled:\n  - docker\n"

    def test_default_location(self, mock_run: MagicMock, tmp_path: Path) -> None:
        code = dev_main(["--init-config"])

        assert code == ExitCode.OK
        assert (tmp_path / "missing.yaml").exists()
