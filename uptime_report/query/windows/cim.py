"""Query Win32_OperatingSystem.LastBootUpTime over CIM via PowerShell."""

from __future__ import annotations

import datetime
import subprocess

from ...models.schema import Credential
from ..base import BootTimeQuery, BootTimeSession, ConnectionFailure
from . import _utils

# Exit code the scripts use for CIM (WinRM / DCOM) failures.
CIM_FAILURE_EXIT = 3

_TARGET_ENV = "UPTIME_REPORT_TARGET"
_PRINCIPAL_ENV = "UPTIME_REPORT_PRINCIPAL"
_SECRET_ENV = "UPTIME_REPORT_SECRET"

_EPOCH = "[DateTimeOffset]::new($os.LastBootUpTime.ToUniversalTime()).ToUnixTimeSeconds()"

_CATCH_CIM = (
    "catch [Microsoft.Management.Infrastructure.CimException] { "
    "[Console]::Error.WriteLine($_.Exception.Message); "
    f"exit {CIM_FAILURE_EXIT} "
    "}"
)

AMBIENT_SCRIPT = (
    "$ErrorActionPreference = 'Stop'; "
    "try { "
    f"$os = Get-CimInstance -ClassName Win32_OperatingSystem -ComputerName $env:{_TARGET_ENV}; "
    f"{_EPOCH} "
    "} "
    + _CATCH_CIM
)

SESSION_SCRIPT = (
    "$ErrorActionPreference = 'Stop'; "
    "try { "
    f"$secret = ConvertTo-SecureString $env:{_SECRET_ENV} -AsPlainText -Force; "
    "$cred = New-Object System.Management.Automation.PSCredential("
    f"$env:{_PRINCIPAL_ENV}, $secret); "
    f"$session = New-CimSession -ComputerName $env:{_TARGET_ENV} -Credential $cred; "
    "try { "
    "$os = Get-CimInstance -ClassName Win32_OperatingSystem -CimSession $session; "
    f"{_EPOCH} "
    "} finally { Remove-CimSession -CimSession $session } "
    "} "
    + _CATCH_CIM
)


def parse_boot_time(output: str) -> datetime.datetime:
    """Parse the Unix-epoch seconds printed by the scripts into a UTC datetime.

    Raises ValueError on anything else.
    """
    text = output.strip()
    if not text:
        raise ValueError("empty response from Win32_OperatingSystem query")
    try:
        seconds = int(text.splitlines()[-1].strip())
    except ValueError:
        raise ValueError(f"unexpected LastBootUpTime value: {text!r}") from None
    return datetime.datetime.fromtimestamp(seconds, tz=datetime.timezone.utc)


def _run(target: str, script: str, env: dict) -> datetime.datetime:
    try:
        output = _utils.run_powershell(script, env=env)
    except _utils.PowerShellError as exc:
        if exc.returncode == CIM_FAILURE_EXIT:
            raise ConnectionFailure(target, exc.stderr) from exc
        raise
    except subprocess.TimeoutExpired as exc:
        raise ConnectionFailure(target, "query timed out") from exc
    return parse_boot_time(output)


class CimSession(BootTimeSession):
    """Holds the credential for one target until closed.

    The CIM session itself lives inside the PowerShell child and is removed
    there by the script's ``finally`` block.
    """

    def __init__(self, target: str, credential: Credential) -> None:
        super().__init__(target)
        self._env: dict = {
            _TARGET_ENV:    target,
            _PRINCIPAL_ENV: credential.username,
            _SECRET_ENV:    credential.password.get_secret_value(),
        }

    def boot_time(self) -> datetime.datetime:
        if self.closed:
            raise RuntimeError(f"session for {self.target} is closed")
        return _run(self.target, SESSION_SCRIPT, dict(self._env))

    def close(self) -> None:
        self._env.clear()
        super().close()


class CimBootTimeQuery(BootTimeQuery):
    name = "cim"

    def boot_time(self, target: str) -> datetime.datetime:
        return _run(target, AMBIENT_SCRIPT, {_TARGET_ENV: target})

    def open_session(self, target: str, credential: Credential) -> CimSession:
        return CimSession(target, credential)
