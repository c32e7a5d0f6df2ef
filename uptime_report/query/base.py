"""Base classes for boot-time queries."""

from __future__ import annotations

import contextlib
import datetime
from abc import ABC, abstractmethod
from typing import Iterator

from ..models.schema import Credential


class QueryError(Exception):
    """Base class for boot-time query failures."""


class ConnectionFailure(QueryError):
    """The target could not be reached or refused the credential."""

    def __init__(self, target: str, reason: str = "") -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"{target}: {reason}" if reason else target)


class BootTimeSession(ABC):
    """Authenticated channel to one target, used for a single query."""

    def __init__(self, target: str) -> None:
        self.target = target
        self.closed = False

    @abstractmethod
    def boot_time(self) -> datetime.datetime:
        ...

    def close(self) -> None:
        self.closed = True


class BootTimeQuery(ABC):
    name: str = "base"

    @abstractmethod
    def boot_time(self, target: str) -> datetime.datetime:
        """Return the UTC boot time of *target* using the caller's identity."""
        ...

    @abstractmethod
    def open_session(self, target: str, credential: Credential) -> BootTimeSession:
        ...

    @contextlib.contextmanager
    def session(self, target: str, credential: Credential) -> Iterator[BootTimeSession]:
        """Open a session for *target*; it is closed on every exit path."""
        sess = self.open_session(target, credential)
        try:
            yield sess
        finally:
            sess.close()
