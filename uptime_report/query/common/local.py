"""Boot time of the local machine via psutil."""

from __future__ import annotations

import datetime
import os
import socket

import psutil

from ...models.schema import Credential
from ..base import BootTimeQuery, BootTimeSession, ConnectionFailure

_LOOPBACK_NAMES = {"localhost", ".", "127.0.0.1", "::1"}


def local_computer_name() -> str:
    """Return this machine's name the way Windows reports %COMPUTERNAME%."""
    name = os.environ.get("COMPUTERNAME")
    if name:
        return name
    return socket.gethostname().split(".")[0].upper()


def is_local(target: str) -> bool:
    name = target.strip().lower()
    if name in _LOOPBACK_NAMES:
        return True
    hostname = socket.gethostname().lower()
    return name in {
        local_computer_name().lower(),
        hostname,
        hostname.split(".")[0],
        socket.getfqdn().lower(),
    }


def _local_boot_time(target: str) -> datetime.datetime:
    if not is_local(target):
        raise ConnectionFailure(target, "remote targets require the CIM backend")
    return datetime.datetime.fromtimestamp(psutil.boot_time(), tz=datetime.timezone.utc)


class LocalSession(BootTimeSession):
    def boot_time(self) -> datetime.datetime:
        return _local_boot_time(self.target)


class LocalBootTimeQuery(BootTimeQuery):
    name = "local"

    def boot_time(self, target: str) -> datetime.datetime:
        return _local_boot_time(target)

    def open_session(self, target: str, credential: Credential) -> LocalSession:
        # The local boot time needs no authentication.
        return LocalSession(target)
