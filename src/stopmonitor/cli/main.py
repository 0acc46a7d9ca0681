"""
Command-line interface for the stopmonitor dashboard.

This module runs a dashboard session against a backend: it polls the stop
records, logs every new snapshot and optionally keeps an HTML rendering of the
dashboard up to date. It runs until interrupted or, with --cycles, until the
given number of polls has been applied.
"""

import argparse
import asyncio
import dataclasses
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..config.validators import validate_dashboard_config
from ..dashboard import DashboardSession
from ..models.config import AppConfig
from ..models.views import DashboardViews
from ..rendering import error_banner_text, save_view_figures, write_dashboard_html
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_base_url,
    validate_enum_choice,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stopmonitor",
        description="Monitor downtime stops of a production machine.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config.toml. Defaults to conf/config.toml of the repository.",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        help="Backend base URL, overriding [backend].base_url.",
    )
    parser.add_argument(
        "-m",
        "--machine",
        type=str,
        help="Machine label to monitor, overriding [dashboard].monitored_machine.",
    )
    parser.add_argument(
        "-i",
        "--interval-ms",
        type=str,
        help="Poll interval in milliseconds, overriding [dashboard].poll_interval_ms.",
    )
    parser.add_argument(
        "-n",
        "--cycles",
        type=str,
        help="Stop after this many polls (successful or failed). Runs until interrupted if omitted.",
    )
    parser.add_argument(
        "-r",
        "--reason",
        type=str,
        help="Start with the views filtered to this stop reason.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="HTML file rewritten with the dashboard after every update.",
    )
    parser.add_argument(
        "--figures-dir",
        type=Path,
        help="Directory where the final figures are saved as separate files on exit.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help=f"Logging level, one of {LOG_LEVELS}.",
    )
    return parser


def apply_cli_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    Return a copy of `config` with the command-line overrides applied.

    Raises:
        ValidationError: If an override is invalid
    """
    backend = config.backend
    if args.base_url is not None:
        backend = dataclasses.replace(
            backend, base_url=validate_base_url(args.base_url, field_name="--base-url argument")
        )

    dashboard_overrides = {}
    if args.machine is not None:
        dashboard_overrides["monitored_machine"] = args.machine
    if args.interval_ms is not None:
        dashboard_overrides["poll_interval_ms"] = args.interval_ms

    dashboard = config.dashboard
    if dashboard_overrides:
        raw = dataclasses.asdict(dashboard)
        raw.update(dashboard_overrides)
        dashboard = validate_dashboard_config(raw)

    return AppConfig(backend=backend, dashboard=dashboard)


def describe_views(views: DashboardViews) -> str:
    """One-line description of a snapshot for the log."""
    summary = views.summary
    parts = [
        f"rev {views.revision}",
        f"{views.distribution.total} stops on machine",
        f"{summary.total_stops} shown",
        f"{summary.total_minutes:.0f} min total",
        f"{summary.ongoing_stops} ongoing",
    ]
    if views.selected_reason is not None:
        parts.append(f"filter={views.selected_reason!r}")
    if summary.top_reason is not None:
        parts.append(f"top={summary.top_reason!r}")
    return ", ".join(parts)


async def run_dashboard(
    config: AppConfig,
    cycles: Optional[int] = None,
    reason: Optional[str] = None,
    output: Optional[Path] = None,
    session: Optional[DashboardSession] = None,
    shutdown_event: Optional[asyncio.Event] = None,
) -> DashboardViews:
    """
    Run a dashboard session until `cycles` polls were applied or shutdown is requested.

    Returns:
        The last snapshot
    """
    session = session or DashboardSession(config)
    shutdown_event = shutdown_event or asyncio.Event()
    labels = config.dashboard.labels

    def on_views(views: DashboardViews) -> None:
        banner = error_banner_text(views, labels)
        if banner:
            logger.warning(banner)
        else:
            logger.info(describe_views(views))
        if output is not None:
            try:
                write_dashboard_html(views, output, labels)
            except OSError as e:
                logger.error(f"Could not write dashboard page {output}: {e}")

        stats = session.poller.stats
        if cycles is not None and stats.results_delivered + stats.errors_delivered >= cycles:
            shutdown_event.set()

    session.subscribe(on_views)
    if reason is not None:
        session.select_reason(reason)

    session.start()
    try:
        await shutdown_event.wait()
    finally:
        await session.aclose()
    return session.views


def _install_signal_handlers(shutdown_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()

    def request_shutdown(signum: int) -> None:
        if shutdown_event.is_set():
            logger.warning("Shutdown already in progress. Please be patient.")
            return
        logger.info(f"Signal {signal.strsignal(signum)} received. Initiating graceful shutdown...")
        shutdown_event.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, request_shutdown, signum)
        except (NotImplementedError, RuntimeError):
            logger.debug(f"Signal handlers not supported for {signum} on this platform")


async def _main_async(config: AppConfig, args: argparse.Namespace, cycles: Optional[int]) -> DashboardViews:
    shutdown_event = asyncio.Event()
    _install_signal_handlers(shutdown_event)
    return await run_dashboard(
        config,
        cycles=cycles,
        reason=args.reason,
        output=args.output,
        shutdown_event=shutdown_event,
    )


def main_cli(argv: Optional[List[str]] = None) -> int:
    """
    Main command-line entry point.

    Returns:
        Process exit code

    Raises:
        SystemExit: On configuration or argument errors
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        log_level = validate_enum_choice(
            args.log_level, LOG_LEVELS, field_name="--log-level argument", case_sensitive=False
        )
    except ValidationError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=getattr(logging, log_level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    if args.config is not None:
        set_config_path(args.config)

    try:
        app_config = apply_cli_overrides(get_config(), args)
    except (FileNotFoundError, KeyError, ValidationError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )

    cycles = None
    if args.cycles is not None:
        try:
            cycles = validate_positive_integer(args.cycles, field_name="--cycles argument")
        except ValidationError as e:
            handle_cli_error(error=e, context="cycles argument validation", exit_code=1, logger=logger)

    final_views = asyncio.run(_main_async(app_config, args, cycles))

    if args.figures_dir is not None:
        save_view_figures(final_views, args.figures_dir)

    logger.info(f"Dashboard stopped after revision {final_views.revision}")
    return 0


if __name__ == "__main__":
    sys.exit(main_cli())
