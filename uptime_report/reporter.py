"""Query each target in turn and build the uptime report."""

from __future__ import annotations

import datetime
import sys
from typing import Callable, Iterable, Iterator, Optional, TextIO

from .models.schema import (
    Credential,
    FailureKind,
    ReportRow,
    TargetFailure,
    TargetResult,
)
from .query import BootTimeQuery, ConnectionFailure, select_query
from .query.common.local import local_computer_name
from .uptime import uptime_between

Clock = Callable[[], datetime.datetime]


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Diagnostics:
    """Warning and error streams for per-target failures."""

    def __init__(self, warnings: TextIO | None = None, errors: TextIO | None = None) -> None:
        self._warnings = warnings
        self._errors = errors

    def warning(self, message: str) -> None:
        print(f"[warning] {message}", file=self._warnings or sys.stderr, flush=True)

    def error(self, message: str) -> None:
        print(f"[error] {message}", file=self._errors or sys.stderr, flush=True)

    def report(self, failure: TargetFailure) -> None:
        self.warning(f"{failure.computer_name}: {failure.summary}")
        if failure.kind is FailureKind.UNKNOWN:
            self.error(f"{failure.computer_name}: {failure.detail}")


def query_target(
    target: str,
    query: BootTimeQuery,
    credential: Optional[Credential] = None,
    clock: Clock = _utc_now,
) -> TargetResult:
    """Query one target; never raises."""
    try:
        if credential is not None:
            with query.session(target, credential) as session:
                boot = session.boot_time()
                now = clock()
        else:
            boot = query.boot_time(target)
            now = clock()
        days, hours, minutes = uptime_between(boot, now)
        row = ReportRow(computer_name=target, days=days, hours=hours, minutes=minutes)
        return TargetResult(computer_name=target, row=row)
    except ConnectionFailure as exc:
        failure = TargetFailure(
            computer_name=target, kind=FailureKind.CONNECTION, detail=exc.reason,
        )
    except Exception as exc:  # noqa: BLE001
        failure = TargetFailure(
            computer_name=target,
            kind=FailureKind.UNKNOWN,
            detail=f"{type(exc).__name__}: {exc}",
        )
    return TargetResult(computer_name=target, failure=failure)


def iter_results(
    targets: Optional[Iterable[str]] = None,
    credential: Optional[Credential] = None,
    *,
    query: Optional[BootTimeQuery] = None,
    clock: Clock = _utc_now,
) -> Iterator[TargetResult]:
    """Yield one TargetResult per target, in target order.

    *targets* defaults to the local computer name when None; an empty
    iterable yields nothing. Targets are consumed lazily so piped input is
    processed as it arrives.
    """
    if targets is None:
        targets = [local_computer_name()]
    if query is None:
        query = select_query()
    for target in targets:
        yield query_target(target, query, credential, clock)


def collect_results(
    targets: Optional[Iterable[str]] = None,
    credential: Optional[Credential] = None,
    *,
    query: Optional[BootTimeQuery] = None,
    clock: Clock = _utc_now,
) -> list[TargetResult]:
    return list(iter_results(targets, credential, query=query, clock=clock))


def generate_report(
    targets: Optional[Iterable[str]] = None,
    credential: Optional[Credential] = None,
    *,
    query: Optional[BootTimeQuery] = None,
    clock: Clock = _utc_now,
    diagnostics: Optional[Diagnostics] = None,
) -> list[ReportRow]:
    """Return a ReportRow for every target that answered, in target order.

    Failed targets are left out of the result; each one produces a warning
    (and, for unexpected errors, an error record) on *diagnostics*.
    """
    diagnostics = diagnostics or Diagnostics()
    rows: list[ReportRow] = []
    for result in iter_results(targets, credential, query=query, clock=clock):
        if result.row is not None:
            rows.append(result.row)
        else:
            diagnostics.report(result.failure)
    return rows
