# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""netcheck CLI."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from typing import Any

from ..config import WatchdogSettings, load_settings
from ..errors import ConfigError
from ..log import setup_logging, verbosity_to_level
from ..runtime import NetCheck

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def _non_negative_int(value: str) -> int:
    if not value.isdigit():
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Repeatedly request a page from a host and look for a string in the response. "
            "After enough consecutive failures, run a recovery command (by default a reboot)."
        )
    )
    parser.add_argument("-n", "--host", help="Host to connect to")
    parser.add_argument("-p", "--port", type=_non_negative_int, help="Port to connect to (default 80, or 443 with --tls)")
    parser.add_argument("-a", "--pattern", help="String to look for in the response body")
    parser.add_argument(
        "-t",
        "--timeout",
        type=_non_negative_int,
        help="Seconds allowed to connect, and for the whole request/response exchange (default 60)",
    )
    parser.add_argument("-w", "--wait", type=_non_negative_int, help="Seconds to wait between requests (default: the timeout)")
    parser.add_argument(
        "-f",
        "--failures",
        type=_non_negative_int,
        help="Number of consecutive failures before taking action (default 60)",
    )
    parser.add_argument("--path", help="Request path (default /)")
    parser.add_argument("--tls", action="store_true", default=None, help="Connect using TLS")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification")
    parser.add_argument("--user-agent", help="User-Agent header to send")
    parser.add_argument("--show-raw", action="store_true", default=None, help="Print the raw response headers and body")
    parser.add_argument("--recovery-command", help="Command to run when the failure threshold is hit (default /sbin/reboot)")
    parser.add_argument("--once", action="store_true", help="Probe once and exit 0 if connected, 1 otherwise")
    parser.add_argument("--no-root-check", action="store_true", help="Do not require running as root")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Enable verbose output (repeat for debug)")
    return parser


def settings_from_args(args: argparse.Namespace, base: WatchdogSettings | None = None) -> WatchdogSettings:
    """Overlay command-line values on environment-backed settings."""
    settings = base or load_settings()
    overrides: dict[str, Any] = {
        "host": args.host,
        "port": args.port,
        "pattern": args.pattern,
        "timeout": args.timeout,
        "wait": args.wait,
        "failures": args.failures,
        "path": args.path,
        "use_tls": args.tls,
        "user_agent": args.user_agent,
        "show_raw": args.show_raw,
        "recovery_command": args.recovery_command,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(settings, name, value)
    if args.insecure:
        settings.verify_tls = False
    if args.verbose:
        settings.verbose = True
    return settings.validate()


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def _install_signal_handlers(netcheck: NetCheck) -> None:
    def _handle(signum, _frame):  # noqa: ANN001
        logger.info("Received signal %s, stopping", signum)
        netcheck.stop()

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ConfigError as exc:
        sys.stderr.write(f"{exc}\n")
        parser.print_usage(sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(verbosity_to_level(args.verbose) or ("INFO" if settings.verbose else None))

    netcheck = NetCheck(settings)

    if args.once:
        result = netcheck.probe_once()
        print("Connected" if result.ok else f"Not connected: {result.error_message}")
        return EXIT_OK if result.ok else EXIT_FAILURE

    if not args.no_root_check and not _is_root():
        sys.stderr.write("You must run this program as root.\n")
        return EXIT_FAILURE

    _install_signal_handlers(netcheck)
    return netcheck.run()


if __name__ == "__main__":
    raise SystemExit(main())
