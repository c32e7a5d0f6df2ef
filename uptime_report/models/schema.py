"""Pydantic v2 schema definitions for uptime-report."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator


class Credential(BaseModel):
    """Principal + secret applied to every target of a single run."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    password: SecretStr


class ReportRow(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    computer_name: str = Field(alias="ComputerName")
    days: int = Field(alias="Days", ge=0)
    hours: int = Field(alias="Hours", ge=0, le=23)
    minutes: int = Field(alias="Minutes", ge=0, le=59)

    def as_record(self) -> dict:
        """Return the row keyed by its column names."""
        return self.model_dump(by_alias=True)


class FailureKind(str, Enum):
    CONNECTION = "connection"
    UNKNOWN = "unknown"


class TargetFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    computer_name: str
    kind: FailureKind
    detail: str = ""

    @property
    def summary(self) -> str:
        if self.kind is FailureKind.CONNECTION:
            return "unable to connect"
        return "unknown error"


class TargetResult(BaseModel):
    """Outcome of one target: exactly one of ``row`` / ``failure`` is set."""

    model_config = ConfigDict(frozen=True)

    computer_name: str
    row: Optional[ReportRow] = None
    failure: Optional[TargetFailure] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "TargetResult":
        if (self.row is None) == (self.failure is None):
            raise ValueError("exactly one of row or failure must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.row is not None
