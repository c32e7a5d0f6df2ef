"""PowerShell helpers for the CIM boot-time query."""

import os
import subprocess
import sys


class PowerShellError(RuntimeError):
    """PowerShell exited with a non-zero status."""

    def __init__(self, returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(stderr or f"PowerShell exited with code {returncode}")


def _decode(raw: bytes) -> str:
    """Decode subprocess bytes with UTF-8; fall back to cp1252 then replace."""
    for enc in ("utf-8-sig", "utf-8", "cp1252"):
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")


def run_powershell(cmd: str, env: dict | None = None, timeout: int = 120) -> str:
    """Run a PowerShell command and return stdout as a string.

    *env* entries are added to the child's environment; use it for values
    that must not appear on the command line (targets, secrets).

    Raises PowerShellError on non-zero exit code and
    subprocess.TimeoutExpired when the child outlives *timeout*.
    """
    # Force UTF-8 output encoding so output is readable regardless of system locale
    full_cmd = (
        "[Console]::OutputEncoding = [System.Text.Encoding]::UTF8; "
        "[Console]::InputEncoding  = [System.Text.Encoding]::UTF8; "
        + cmd
    )

    child_env = dict(os.environ)
    if env:
        child_env.update(env)

    kwargs: dict = {
        "args": [
            "powershell",
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy", "Bypass",
            "-Command", full_cmd,
        ],
        "capture_output": True,
        "timeout": timeout,
        "env": child_env,
    }
    if sys.platform == "win32":
        kwargs["creationflags"] = 0x08000000  # CREATE_NO_WINDOW

    result = subprocess.run(**kwargs)
    stdout = _decode(result.stdout).strip()
    stderr = _decode(result.stderr).strip()

    if result.returncode != 0:
        raise PowerShellError(result.returncode, stderr)
    return stdout
