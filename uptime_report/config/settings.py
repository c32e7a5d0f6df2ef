"""Runtime settings for uptime-report.

Resolution order (first match wins):
  1. CLI flags (applied by the caller over the returned dict)
  2. Environment variables:
       UPTIME_REPORT_USERNAME   principal used for every target
       UPTIME_REPORT_PASSWORD   secret for that principal
       UPTIME_REPORT_FORMAT     table | json | csv
       UPTIME_REPORT_BACKEND    auto | cim | local
  3. Built-in defaults

There is no configuration file.
"""

from __future__ import annotations

import os
from typing import Any, Mapping

from ..query import BACKENDS
from ..report.output import FORMATS

_ENV_PREFIX = "UPTIME_REPORT_"

_DEFAULTS: dict[str, Any] = {
    "username": None,
    "password": None,
    "format":   "table",
    "backend":  "auto",
}

_CHOICES: dict[str, tuple[str, ...]] = {
    "format":  FORMATS,
    "backend": BACKENDS,
}


def load_settings(environ: Mapping[str, str] | None = None) -> dict:
    """Return the defaults overlaid with any ``UPTIME_REPORT_*`` variables.

    Empty variables are ignored.

    Raises:
        ValueError: If ``format`` or ``backend`` holds an unsupported value.
    """
    if environ is None:
        environ = os.environ

    settings = dict(_DEFAULTS)
    for key in _DEFAULTS:
        env_name = _ENV_PREFIX + key.upper()
        value = environ.get(env_name)
        if not value:
            continue
        if key in _CHOICES:
            value = value.strip().lower()
            if value not in _CHOICES[key]:
                raise ValueError(
                    f"{env_name}={value!r} is not one of {', '.join(_CHOICES[key])}"
                )
        settings[key] = value
    return settings
