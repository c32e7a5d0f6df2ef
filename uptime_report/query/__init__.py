"""Boot-time query backends."""

import sys

from .base import BootTimeQuery, BootTimeSession, ConnectionFailure, QueryError

BACKENDS = ("auto", "cim", "local")


def select_query(backend: str = "auto") -> BootTimeQuery:
    """Return the query collaborator for *backend*.

    ``auto`` picks CIM on Windows and the psutil-based local query elsewhere.
    """
    if backend not in BACKENDS:
        raise ValueError(f"unknown backend {backend!r}; expected one of {', '.join(BACKENDS)}")
    if backend == "auto":
        backend = "cim" if sys.platform == "win32" else "local"
    if backend == "cim":
        from .windows.cim import CimBootTimeQuery
        return CimBootTimeQuery()
    from .common.local import LocalBootTimeQuery
    return LocalBootTimeQuery()


__all__ = [
    "BACKENDS",
    "BootTimeQuery",
    "BootTimeSession",
    "ConnectionFailure",
    "QueryError",
    "select_query",
]
