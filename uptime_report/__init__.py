"""uptime-report: last-boot uptime for one or more Windows machines."""

__version__ = "1.0.0"
