# src/fairmint/runtime/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class TrackerError(Exception):
    """Canonical error type for emission, participation and distribution failures."""

    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


class InvalidInput(TrackerError):
    """Malformed or out-of-domain input (negative height, negative balance, ...)."""


class DataUnavailable(TrackerError):
    """An external source cannot answer for the requested scope yet.

    Never coerced into an empty / zero-participant result.
    """


class ConsistencyViolation(TrackerError):
    """An internal invariant failed. Indicates a configuration or arithmetic defect."""


__all__ = ["TrackerError", "InvalidInput", "DataUnavailable", "ConsistencyViolation"]
