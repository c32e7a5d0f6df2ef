"""Tests for the CIM boot-time query.

run_powershell / subprocess.run are patched; no real PowerShell is invoked.
Run with:  python -m pytest tests/
"""

import datetime
import subprocess
import unittest
import unittest.mock as mock

from uptime_report.models.schema import Credential
from uptime_report.query.base import ConnectionFailure
from uptime_report.query.windows import _utils
from uptime_report.query.windows.cim import (
    AMBIENT_SCRIPT,
    CIM_FAILURE_EXIT,
    SESSION_SCRIPT,
    CimBootTimeQuery,
    parse_boot_time,
)

PATCH_PS = "uptime_report.query.windows._utils.run_powershell"

BOOT_EPOCH = 1760000000
BOOT_DT = datetime.datetime.fromtimestamp(BOOT_EPOCH, tz=datetime.timezone.utc)


class TestParseBootTime(unittest.TestCase):

    def test_epoch_seconds(self):
        self.assertEqual(parse_boot_time(f"{BOOT_EPOCH}\r\n"), BOOT_DT)

    def test_result_is_utc(self):
        self.assertEqual(parse_boot_time(str(BOOT_EPOCH)).tzinfo, datetime.timezone.utc)

    def test_last_line_wins(self):
        self.assertEqual(parse_boot_time(f"WARNING: noise\n{BOOT_EPOCH}"), BOOT_DT)

    def test_empty_raises(self):
        with self.assertRaises(ValueError):
            parse_boot_time("   ")

    def test_garbage_raises(self):
        with self.assertRaises(ValueError):
            parse_boot_time("/Date(1704067200000)/")


class TestCimAmbientQuery(unittest.TestCase):

    def test_target_passed_through_env(self):
        with mock.patch(PATCH_PS, return_value=str(BOOT_EPOCH)) as ps:
            boot = CimBootTimeQuery().boot_time("SRV1")
        self.assertEqual(boot, BOOT_DT)
        script = ps.call_args.args[0]
        self.assertEqual(script, AMBIENT_SCRIPT)
        self.assertNotIn("SRV1", script)
        self.assertEqual(ps.call_args.kwargs["env"]["UPTIME_REPORT_TARGET"], "SRV1")

    def test_cim_exit_code_is_connection_failure(self):
        err = _utils.PowerShellError(CIM_FAILURE_EXIT, "The WinRM client cannot process the request.")
        with mock.patch(PATCH_PS, side_effect=err):
            with self.assertRaises(ConnectionFailure) as ctx:
                CimBootTimeQuery().boot_time("SRV2")
        self.assertEqual(ctx.exception.target, "SRV2")
        self.assertIn("WinRM", ctx.exception.reason)

    def test_other_exit_code_propagates(self):
        err = _utils.PowerShellError(1, "Get-CimInstance : Invalid class")
        with mock.patch(PATCH_PS, side_effect=err):
            with self.assertRaises(_utils.PowerShellError):
                CimBootTimeQuery().boot_time("SRV2")

    def test_timeout_is_connection_failure(self):
        err = subprocess.TimeoutExpired(cmd="powershell", timeout=120)
        with mock.patch(PATCH_PS, side_effect=err):
            with self.assertRaises(ConnectionFailure):
                CimBootTimeQuery().boot_time("SRV3")

    def test_malformed_output_is_value_error(self):
        with mock.patch(PATCH_PS, return_value="not a number"):
            with self.assertRaises(ValueError):
                CimBootTimeQuery().boot_time("SRV1")


class TestCimSession(unittest.TestCase):

    def setUp(self):
        self.cred = Credential(username="CORP\\admin", password="s3cret")

    def test_session_script_and_env(self):
        query = CimBootTimeQuery()
        with mock.patch(PATCH_PS, return_value=str(BOOT_EPOCH)) as ps:
            with query.session("SRV1", self.cred) as session:
                self.assertEqual(session.boot_time(), BOOT_DT)
        script = ps.call_args.args[0]
        env = ps.call_args.kwargs["env"]
        self.assertEqual(script, SESSION_SCRIPT)
        self.assertNotIn("s3cret", script)
        self.assertEqual(env["UPTIME_REPORT_TARGET"], "SRV1")
        self.assertEqual(env["UPTIME_REPORT_PRINCIPAL"], "CORP\\admin")
        self.assertEqual(env["UPTIME_REPORT_SECRET"], "s3cret")

    def test_session_script_removes_cim_session(self):
        self.assertIn("New-CimSession", SESSION_SCRIPT)
        self.assertIn("finally { Remove-CimSession", SESSION_SCRIPT)

    def test_closed_after_failure(self):
        query = CimBootTimeQuery()
        err = _utils.PowerShellError(CIM_FAILURE_EXIT, "Access is denied.")
        with mock.patch(PATCH_PS, side_effect=err):
            with self.assertRaises(ConnectionFailure):
                with query.session("SRV1", self.cred) as session:
                    session.boot_time()
        self.assertTrue(session.closed)

    def test_closed_session_refuses_queries(self):
        session = CimBootTimeQuery().open_session("SRV1", self.cred)
        session.close()
        with mock.patch(PATCH_PS) as ps:
            with self.assertRaises(RuntimeError):
                session.boot_time()
        ps.assert_not_called()


class TestRunPowerShell(unittest.TestCase):

    def _completed(self, returncode=0, stdout=b"", stderr=b""):
        return subprocess.CompletedProcess(args=[], returncode=returncode,
                                           stdout=stdout, stderr=stderr)

    def test_returns_stripped_stdout(self):
        with mock.patch("subprocess.run", return_value=self._completed(stdout=b"\xef\xbb\xbf42\r\n")):
            self.assertEqual(_utils.run_powershell("Write-Output 42"), "42")

    def test_nonzero_exit_raises_with_code(self):
        with mock.patch("subprocess.run",
                        return_value=self._completed(returncode=3, stderr=b"Access is denied.")):
            with self.assertRaises(_utils.PowerShellError) as ctx:
                _utils.run_powershell("x")
        self.assertEqual(ctx.exception.returncode, 3)
        self.assertEqual(ctx.exception.stderr, "Access is denied.")

    def test_env_merged_not_on_command_line(self):
        with mock.patch("subprocess.run", return_value=self._completed(stdout=b"1")) as run:
            _utils.run_powershell("x", env={"UPTIME_REPORT_SECRET": "s3cret"})
        kwargs = run.call_args.kwargs
        self.assertEqual(kwargs["env"]["UPTIME_REPORT_SECRET"], "s3cret")
        self.assertFalse(any("s3cret" in arg for arg in kwargs["args"]))

    def test_decode_cp1252_fallback(self):
        self.assertEqual(_utils._decode("caf\xe9".encode("cp1252")), "caf\xe9")
