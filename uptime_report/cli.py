"""Command-line interface for uptime-report."""

from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from . import __version__
from .config.settings import load_settings
from .models.schema import Credential
from .query import BACKENDS, select_query
from .query.common.local import local_computer_name
from .report.output import FORMATS, render, write_report
from .reporter import Diagnostics, generate_report


# ── argument parsing ──────────────────────────────────────────────────────────

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="uptime-report",
        description="Report how long one or more Windows machines have been up.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  uptime-report\n"
            "  uptime-report SRV1 SRV2 --credential CORP\\admin\n"
            "  type servers.txt | uptime-report --format csv -o uptime.csv\n"
            "\n"
            "Environment:\n"
            "  UPTIME_REPORT_USERNAME, UPTIME_REPORT_PASSWORD,\n"
            "  UPTIME_REPORT_FORMAT, UPTIME_REPORT_BACKEND\n"
        ),
    )
    parser.add_argument(
        "computer_name",
        nargs="*",
        metavar="COMPUTER",
        help="Target names; '-' reads names from stdin (default: this computer)",
    )
    parser.add_argument(
        "--computer-name", "-c",
        action="append",
        default=[],
        dest="extra_names",
        metavar="COMPUTER",
        help="Additional target name (repeatable)",
    )
    parser.add_argument(
        "--credential",
        metavar="USER",
        help="Connect as USER; password from UPTIME_REPORT_PASSWORD or a prompt",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--output", "-o",
        metavar="PATH",
        help="Write the report to PATH instead of stdout",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help="Boot-time query backend (default: auto)",
    )
    parser.add_argument(
        "--no-pretty",
        action="store_true",
        default=False,
        help="Write compact JSON instead of indented output",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"uptime-report {__version__}",
    )
    args = parser.parse_args(argv)

    names = []
    for name in args.computer_name + args.extra_names:
        name = name.strip()
        if not name:
            parser.error("computer names must not be empty")
        names.append(name)
    args.targets = names
    return args


# ── target resolution ─────────────────────────────────────────────────────────

def read_targets(stream: TextIO) -> Iterator[str]:
    """Yield one target per non-blank, non-comment line of *stream*."""
    for line in stream:
        name = line.strip()
        if name and not name.startswith("#"):
            yield name


def _or_local(names: Iterable[str]) -> Iterator[str]:
    seen = False
    for name in names:
        seen = True
        yield name
    if not seen:
        yield local_computer_name()


def resolve_targets(names: list[str], stdin: TextIO | None) -> Iterable[str]:
    """Return the targets for this run.

    Explicit names win; ``-`` splices in stdin at that position. With no
    names, piped stdin is read. When nothing at all is supplied the local
    computer name is used.
    """
    if names:
        if "-" not in names:
            return names
        return _splice_stdin(names, stdin)
    if stdin is not None and not stdin.isatty():
        return _or_local(read_targets(stdin))
    return [local_computer_name()]


def _splice_stdin(names: list[str], stdin: TextIO | None) -> Iterator[str]:
    for name in names:
        if name == "-":
            if stdin is not None:
                yield from read_targets(stdin)
        else:
            yield name


# ── credential ────────────────────────────────────────────────────────────────

def resolve_credential(username: str | None, password: str | None) -> Credential | None:
    if not username:
        return None
    if password is None:
        password = getpass.getpass(f"Password for {username}: ")
    return Credential(username=username, password=password)


# ── main entry point ──────────────────────────────────────────────────────────

def run(argv=None, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
    args = parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        sys.exit(2)

    fmt = args.format or settings["format"]
    backend = args.backend or settings["backend"]
    username = args.credential or settings["username"]

    credential = resolve_credential(username, settings["password"])
    targets = resolve_targets(
        args.targets,
        stdin if stdin is not None else sys.stdin,
    )

    rows = generate_report(
        targets,
        credential,
        query=select_query(backend),
        diagnostics=Diagnostics(),
    )

    text = render(rows, fmt, pretty=not args.no_pretty)
    output_path = Path(args.output) if args.output else None
    write_report(text, output_path, stream=stdout)

    if output_path is not None:
        print(f"[uptime-report] {len(rows)} row(s) written -> {output_path.resolve()}")
