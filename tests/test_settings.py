"""Tests for environment-driven settings.

Run with:  python -m pytest tests/
"""

import unittest

from uptime_report.config.settings import load_settings


class TestLoadSettings(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(
            load_settings({}),
            {"username": None, "password": None, "format": "table", "backend": "auto"},
        )

    def test_env_overrides(self):
        s = load_settings({
            "UPTIME_REPORT_USERNAME": "CORP\\svc-uptime",
            "UPTIME_REPORT_PASSWORD": "pw",
            "UPTIME_REPORT_FORMAT":   "CSV",
            "UPTIME_REPORT_BACKEND":  "cim",
        })
        self.assertEqual(s["username"], "CORP\\svc-uptime")
        self.assertEqual(s["password"], "pw")
        self.assertEqual(s["format"], "csv")
        self.assertEqual(s["backend"], "cim")

    def test_empty_values_ignored(self):
        self.assertEqual(load_settings({"UPTIME_REPORT_FORMAT": ""})["format"], "table")

    def test_invalid_choice_names_variable(self):
        with self.assertRaises(ValueError) as ctx:
            load_settings({"UPTIME_REPORT_FORMAT": "xml"})
        self.assertIn("UPTIME_REPORT_FORMAT", str(ctx.exception))

    def test_unrelated_env_ignored(self):
        self.assertEqual(load_settings({"PATH": "/bin"})["backend"], "auto")
