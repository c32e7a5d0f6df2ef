"""Pydantic models for uptime-report."""
