"""Command line entry point for JobHonter."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import signal
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from jobhonter.config.environment import EnvironmentConfig, load_environment_config
from jobhonter.config.exceptions import ConfigurationError
from jobhonter.config.loader import load_config
from jobhonter.config.models import AppConfig
from jobhonter.discovery import CancellationToken, DiscoveryOrchestrator, DiscoveryResult
from jobhonter.domain.exceptions import InvalidRequestError
from jobhonter.domain.models import SearchMode, SearchRequest
from jobhonter.logging import get_logger
from jobhonter.logging.config import configure_logging
from jobhonter.sources.exceptions import SourceConfigurationError
from jobhonter.sources.factory import build_fetchers

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_USAGE_ERROR = 1
EXIT_ALL_SOURCES_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobhonter",
        description="JobHonter - discover relevant job postings across community and job board sources",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: $JOBHONTER_CONFIG or config.yaml)",
    )
    parser.add_argument(
        "--keyword",
        "-k",
        action="append",
        default=[],
        help="Keyword phrase to search for (repeatable)",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in SearchMode],
        default=None,
        help="Matching tier (default from config)",
    )
    parser.add_argument("--location", default=None, help="Requested location, e.g. 'New York'")
    parser.add_argument(
        "--remote-only",
        action="store_true",
        default=None,
        help="Only return postings with a remote-work signal",
    )
    parser.add_argument("--max-age-days", type=int, default=None, help="Maximum posting age in days")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of results")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=["text", "json"],
        default="text",
        help="Result output format on stdout (default: text)",
    )
    return parser


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    env_config = load_environment_config()
    app_config = load_config(config_path or env_config.config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_request(args: argparse.Namespace, app_config: AppConfig) -> SearchRequest:
    """Merge CLI arguments over configured search defaults.

    Raises:
        InvalidRequestError: If the resulting request is invalid
    """
    defaults = app_config.search
    return SearchRequest.build(
        keywords=args.keyword,
        mode=args.mode or defaults.mode,
        location=args.location,
        remote_only=defaults.remote_only if args.remote_only is None else args.remote_only,
        max_age_days=defaults.max_age_days if args.max_age_days is None else args.max_age_days,
        limit=defaults.limit if args.limit is None else args.limit,
    )


def render_text(result: DiscoveryResult, out: TextIO) -> None:
    """Write a human-readable summary of result to out."""
    out.write(
        f"{len(result.items)} result(s) from {result.total_candidates_seen} candidate(s) "
        f"[{result.state.value}]\n"
    )
    for index, item in enumerate(result.items, 1):
        candidate = item.candidate
        flags = []
        if item.is_remote:
            flags.append("remote")
        if item.job_type:
            flags.append(item.job_type)
        if item.salary:
            flags.append(item.salary)
        created = candidate.created_at.strftime("%Y-%m-%d %H:%M") if candidate.created_at else "unknown date"
        out.write(f"\n{index:>3}. [{item.relevance_score:.2f}] {candidate.title or '(untitled)'}\n")
        out.write(f"     {candidate.source_name} | {created}")
        if flags:
            out.write(f" | {', '.join(flags)}")
        out.write("\n")
        if item.matched_keywords:
            out.write(f"     matched: {', '.join(item.matched_keywords)}\n")
        if candidate.source_url:
            out.write(f"     {candidate.source_url}\n")

    if result.per_source_errors:
        out.write("\nSource errors:\n")
        for name, message in result.per_source_errors.items():
            out.write(f"  - {name}: {message}\n")


def render_json(result: DiscoveryResult, out: TextIO) -> None:
    json.dump(result.to_dict(), out, indent=2, ensure_ascii=False)
    out.write("\n")


def run_discovery(
    orchestrator: DiscoveryOrchestrator,
    request: SearchRequest,
    sources: Sequence[object],
) -> DiscoveryResult:
    """Run a request, turning the first Ctrl+C into cooperative cancellation."""
    token = CancellationToken()

    def handle_interrupt(signum, frame):
        logger.warning(
            "Interrupt received, cancelling remaining fetches",
            extra={"event": "cli.cancel_requested", "signal": signum},
        )
        token.cancel("interrupted")
        signal.signal(signal.SIGINT, previous_handler)

    if threading.current_thread() is not threading.main_thread():
        return orchestrator.discover(request, sources, cancellation=token)

    previous_handler = signal.signal(signal.SIGINT, handle_interrupt)
    try:
        return orchestrator.discover(request, sources, cancellation=token)
    finally:
        signal.signal(signal.SIGINT, previous_handler)


def main(argv: Optional[List[str]] = None, stdout: TextIO = sys.stdout) -> int:
    """
    Main entry point for the jobhonter command.

    Returns:
        0 on success (including partial source failure), 1 on configuration
        or request errors, 2 when every source failed.
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)
    fetchers = []

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        request = build_request(args, app_config)
        fetchers = build_fetchers(app_config)
        orchestrator = DiscoveryOrchestrator.from_config(app_config)

        logger.info(
            "JobHonter search starting",
            extra={
                "event": "cli.search.starting",
                "source_count": len(fetchers),
                "log_level": env_config.log_level,
            },
        )

        result = run_discovery(orchestrator, request, fetchers)

        if args.output_format == "json":
            render_json(result, stdout)
        else:
            render_text(result, stdout)

        logger.info(
            "JobHonter search finished",
            extra={
                "event": "cli.search.completed",
                "duration_seconds": round(time.time() - start_time, 2),
                "returned": len(result.items),
                "state": result.state.value,
            },
        )

        return EXIT_ALL_SOURCES_FAILED if result.all_sources_failed else EXIT_OK

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return EXIT_USAGE_ERROR
    except InvalidRequestError as e:
        print(f"Invalid request: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except SourceConfigurationError as e:
        print(f"Source configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except KeyboardInterrupt:
        print("\nSearch aborted by user", file=sys.stderr)
        return EXIT_OK
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during search",
            extra={
                "event": "cli.search.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return EXIT_USAGE_ERROR
    finally:
        for fetcher in fetchers:
            fetcher.close()


if __name__ == "__main__":
    sys.exit(main())
