"""Unit tests for the main entry point.

Tests the main() function including:
- CLI argument parsing and merging with configured search defaults
- Configuration loading with priority (CLI > env > config)
- Text and JSON result rendering
- Exit code handling and error reporting
- Ctrl+C turning into cooperative cancellation
"""

import io
import json
import signal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from jobhonter.config.loader import parse_config
from jobhonter.discovery import DiscoveryOrchestrator
from jobhonter.domain.models import SearchMode
from jobhonter.main import build_parser, build_request, load_runtime_config, main, run_discovery
from jobhonter.sources.exceptions import SourceHTTPError
from tests.helpers import FIXTURE_NOW, FIXTURES_DIR, FailingFetcher, FixtureFetcher

CONFIG_YAML = """
sources:
  - name: reddit
    type: reddit
  - name: remoteok
    type: remoteok
search:
  mode: moderate
  max_age_days: 7
  limit: 20
logging:
  level: WARNING
"""


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Config file on disk with a clean environment."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("JOBHONTER_CONFIG", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture
def fixture_fetchers():
    candidates = FIXTURES_DIR / "candidates.yaml"
    return [
        FixtureFetcher("reddit", fixture_path=candidates),
        FixtureFetcher("remoteok", fixture_path=candidates),
    ]


@pytest.fixture
def patched_runtime():
    """Patch logging setup and the orchestrator clock so fixtures stay fresh."""
    with patch("jobhonter.main.configure_logging") as mock_logging, patch.object(
        DiscoveryOrchestrator,
        "from_config",
        side_effect=lambda app_config: DiscoveryOrchestrator(clock=lambda: FIXTURE_NOW),
    ):
        yield mock_logging


def run_main(argv, fetchers):
    stdout = io.StringIO()
    with patch("jobhonter.main.build_fetchers", return_value=fetchers):
        exit_code = main(argv, stdout=stdout)
    return exit_code, stdout.getvalue()


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    def test_log_level_from_config(self, config_file):
        app_config, env_config = load_runtime_config(config_file, None)

        assert app_config.sources[0].name == "reddit"
        assert env_config.log_level == "WARNING"

    def test_env_overrides_config(self, config_file, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        _, env_config = load_runtime_config(config_file, None)

        assert env_config.log_level == "ERROR"

    def test_cli_overrides_env(self, config_file, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        _, env_config = load_runtime_config(config_file, "DEBUG")

        assert env_config.log_level == "DEBUG"

    def test_config_path_from_env(self, config_file, monkeypatch):
        monkeypatch.setenv("JOBHONTER_CONFIG", str(config_file))

        app_config, _ = load_runtime_config(None, None)

        assert len(app_config.sources) == 2


class TestBuildRequest:
    """Test suite for merging CLI arguments with search defaults."""

    def test_defaults_from_config(self):
        app_config = parse_config({"sources": [{"name": "reddit", "type": "reddit"}], "search": {"limit": 5}})
        args = build_parser().parse_args(["-k", "php"])

        request = build_request(args, app_config)

        assert request.keywords == ("php",)
        assert request.mode == SearchMode.MODERATE
        assert request.limit == 5
        assert request.remote_only is False

    def test_cli_wins(self):
        app_config = parse_config(
            {"sources": [{"name": "reddit", "type": "reddit"}], "search": {"remote_only": True}}
        )
        args = build_parser().parse_args(
            ["-k", "WordPress developer", "-k", "php", "--mode", "loose", "--location", "NYC",
             "--max-age-days", "3", "--limit", "10"]
        )

        request = build_request(args, app_config)

        assert request.keywords == ("WordPress developer", "php")
        assert request.mode == SearchMode.LOOSE
        assert request.location == "NYC"
        assert request.max_age_days == 3
        assert request.limit == 10
        assert request.remote_only is True

    def test_invalid_mode_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-k", "php", "--mode", "fuzzy"])


class TestMain:
    """Test suite for main()."""

    def test_text_output(self, config_file, fixture_fetchers, patched_runtime):
        exit_code, output = run_main(
            ["--config", str(config_file), "-k", "WordPress developer"], fixture_fetchers
        )

        assert exit_code == 0
        assert output.startswith("3 result(s) from 8 candidate(s) [done]")
        assert "[Hiring] WordPress Developer - fully remote" in output
        assert "matched: WordPress developer" in output
        assert "Source errors" not in output
        patched_runtime.assert_called_once_with(level="WARNING", format_type="key-value", environment="local")

    def test_json_output(self, config_file, fixture_fetchers, patched_runtime):
        exit_code, output = run_main(
            ["--config", str(config_file), "-k", "WordPress developer", "--format", "json", "--remote-only"],
            fixture_fetchers,
        )

        data = json.loads(output)
        assert exit_code == 0
        assert data["state"] == "done"
        assert [item["candidate"]["id"] for item in data["items"]] == ["r1"]
        assert data["items"][0]["is_remote"] is True
        assert [s["source_name"] for s in data["source_stats"]] == ["reddit", "remoteok"]

    def test_partial_failure_exits_zero(self, config_file, fixture_fetchers, patched_runtime):
        failing = FailingFetcher("reddit", SourceHTTPError("HTTP 503: down", status_code=503, url="u"))

        exit_code, output = run_main(
            ["--config", str(config_file), "-k", "WordPress developer"], [failing, fixture_fetchers[1]]
        )

        assert exit_code == 0
        assert "[partial_failure]" in output
        assert "  - reddit: HTTP 503: down" in output

    def test_all_sources_failed_exits_two(self, config_file, patched_runtime):
        fetchers = [
            FailingFetcher("reddit", SourceHTTPError("HTTP 500", status_code=500, url="u")),
            FailingFetcher("remoteok", RuntimeError("boom")),
        ]

        exit_code, output = run_main(["--config", str(config_file), "-k", "php"], fetchers)

        assert exit_code == 2
        assert "0 result(s)" in output

    def test_missing_config_exits_one(self, tmp_path, patched_runtime, capsys):
        exit_code, _ = run_main(["--config", str(tmp_path / "missing.yaml"), "-k", "php"], [])

        assert exit_code == 1
        assert "Configuration Error" in capsys.readouterr().err

    def test_missing_keywords_exits_one(self, config_file, fixture_fetchers, patched_runtime, capsys):
        exit_code, _ = run_main(["--config", str(config_file)], fixture_fetchers)

        assert exit_code == 1
        assert "Invalid request" in capsys.readouterr().err
        assert fixture_fetchers[0].calls == []

    def test_unexpected_error_exits_one(self, config_file, fixture_fetchers, patched_runtime, capsys):
        with patch("jobhonter.main.run_discovery", side_effect=RuntimeError("kaboom")):
            exit_code, _ = run_main(["--config", str(config_file), "-k", "php"], fixture_fetchers)

        assert exit_code == 1
        assert "Fatal error: kaboom" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_zero(self, config_file, fixture_fetchers, patched_runtime):
        with patch("jobhonter.main.run_discovery", side_effect=KeyboardInterrupt):
            exit_code, _ = run_main(["--config", str(config_file), "-k", "php"], fixture_fetchers)

        assert exit_code == 0

    def test_fetchers_closed(self, config_file, patched_runtime):
        fetcher = MagicMock()
        fetcher.name = "reddit"
        fetcher.fetch_timeout = None
        fetcher.fetch.return_value = []

        run_main(["--config", str(config_file), "-k", "php"], [fetcher])

        fetcher.close.assert_called_once()


class TestRunDiscovery:
    """Test suite for SIGINT handling around a discovery run."""

    def test_sigint_cancels_token_and_restores_handler(self):
        original = signal.getsignal(signal.SIGINT)
        seen = {}

        def fake_discover(request, sources, cancellation):
            handler = signal.getsignal(signal.SIGINT)
            handler(signal.SIGINT, None)
            seen["cancelled"] = cancellation.is_cancelled
            seen["reason"] = cancellation.reason
            return "result"

        orchestrator = MagicMock()
        orchestrator.discover.side_effect = fake_discover

        assert run_discovery(orchestrator, MagicMock(), []) == "result"
        assert seen == {"cancelled": True, "reason": "interrupted"}
        assert signal.getsignal(signal.SIGINT) is original
