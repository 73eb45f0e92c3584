"""mdns-discover command-line entry point.

Usage::

    python -m mdns_discover [--output=text|json] [--timeout=15s] [--concurrency N]
                            [--debug] [--summary] [--no-color] [help | man | show-fields "a,b"]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import time

from mdns_discover import __version__
from mdns_discover.catalog import load_catalog
from mdns_discover.config import DiscoverConfig, parse_duration, split_fields
from mdns_discover.docmeta import help_text, man_page
from mdns_discover.errors import (
    DiscoveryError,
    ExitCode,
    NoServicesConfiguredError,
    exit_code_for,
)
from mdns_discover.formatter import build_summary, render_json
from mdns_discover.orchestrator import DiscoveryStats, Orchestrator
from mdns_discover.resolver import get_resolver
from mdns_discover.service import OutputMode, Service
from mdns_discover.stats import print_summary, stream_supports_color
from mdns_discover.worker import DiscoveryWorker

PROG = "mdns-discover"

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad flags or subcommand."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=PROG, add_help=False)
    parser.add_argument("--output", default="text")
    parser.add_argument("-h", "--help", action="store_true", dest="want_help")
    parser.add_argument("--man", action="store_true", dest="want_man")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--summary", action="store_true")
    parser.add_argument("--no-color", action="store_true", dest="no_color")
    parser.add_argument("--concurrency", type=int, default=None)
    parser.add_argument("--timeout", default=None)
    parser.add_argument("command", nargs="*")
    return parser


def _usage(message: str) -> int:
    print(message, file=sys.stderr)
    print(help_text(PROG, __version__), file=sys.stderr, end="")
    return ExitCode.USAGE


def _apply_args(config: DiscoverConfig, args: argparse.Namespace) -> None:
    """Flags override the environment.  Raises :class:`UsageError`."""
    if args.debug:
        config.debug = True
    if args.summary:
        config.summary = True
    if args.no_color:
        config.color = False

    mode = args.output.strip().lower()
    if mode in ("text", ""):
        config.output_mode = OutputMode.TEXT
    elif mode == "json":
        config.output_mode = OutputMode.JSON
    else:
        raise UsageError(f"Unknown --output value: {args.output} (expected text or json)")

    if args.concurrency is not None:
        if args.concurrency <= 0:
            raise UsageError(f"Invalid --concurrency value: {args.concurrency} (must be > 0)")
        config.concurrency = args.concurrency

    if args.timeout:
        try:
            config.timeout = parse_duration(args.timeout)
        except ValueError:
            raise UsageError(f"Invalid --timeout value: {args.timeout}") from None


async def _discover(config: DiscoverConfig) -> tuple[list[Service], DiscoveryStats]:
    text_mode = config.output_mode is OutputMode.TEXT
    if config.service_filter:
        worker = DiscoveryWorker(get_resolver)
        result = await worker.run_query(
            config.service_filter, config.fields, text_mode, config.timeout
        )
        if result.error is not None:
            raise result.error
        return result.services, DiscoveryStats(attempts=1)

    orchestrator = Orchestrator(
        get_resolver, concurrency=config.concurrency, verbose=config.debug
    )
    return await orchestrator.discover_all(
        load_catalog(),
        config.fields,
        emit_immediately=text_mode,
        output_mode=config.output_mode,
        timeout=config.timeout,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        return _usage(str(exc))

    env_debug = os.environ.get("MDNS_DEBUG", "").strip().lower() in ("1", "true")
    logging.basicConfig(
        level=logging.DEBUG if (args.debug or env_debug) else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if args.want_help:
        print(help_text(PROG, __version__), end="")
        return ExitCode.OK
    if args.want_man:
        print(man_page(PROG, __version__), end="")
        return ExitCode.OK

    config = DiscoverConfig.from_env()
    try:
        _apply_args(config, args)
    except UsageError as exc:
        return _usage(str(exc))

    command = args.command
    if command:
        if command[0] == "help":
            print(help_text(PROG, __version__), end="")
            return ExitCode.OK
        if command[0] == "man":
            print(man_page(PROG, __version__), end="")
            return ExitCode.OK
        if command[0] != "show-fields":
            return _usage(f"Unknown command: {command[0]}")
        if len(command) == 1:
            return _usage('Missing output filter. Please specify what to output with "show-fields"')
        if len(command) > 2:
            return _usage(f"Unexpected extra arguments: {command[2:]}")
        config.fields = split_fields(command[1])

    started = time.monotonic()
    try:
        services, stats = asyncio.run(_discover(config))
    except NoServicesConfiguredError:
        logger.error("No built-in services available (services list empty) — reinstall may be required")
        return ExitCode.USAGE
    except DiscoveryError as exc:
        logger.error("discover %s: %s", config.service_filter or "(all)", exc)
        return exit_code_for(exc)
    except asyncio.CancelledError:
        logger.error("discover %s: cancelled", config.service_filter or "(all)")
        return ExitCode.ERROR
    except KeyboardInterrupt:
        print("\n\nDiscovery cancelled.", file=sys.stderr)
        return ExitCode.ERROR

    if config.output_mode is OutputMode.JSON:
        summary = build_summary(services, started, stats) if config.summary else None
        print(render_json(services, summary))
        return ExitCode.OK

    if not services:
        logger.warning("No services discovered (consider adjusting MDNS_TIMEOUT or filters)")
    color = config.color and stream_supports_color(sys.stderr)
    print_summary(services, started, config.summary, stats, color)
    return ExitCode.OK


if __name__ == "__main__":
    sys.exit(main())
