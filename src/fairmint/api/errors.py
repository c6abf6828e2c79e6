# src/fairmint/api/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fairmint.runtime.errors import ConsistencyViolation, DataUnavailable, InvalidInput, TrackerError


@dataclass(frozen=True, slots=True)
class ApiError(Exception):
    status_code: int
    code: str
    message: str
    details: Dict[str, Any]

    @staticmethod
    def bad_request(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(400, code, message, details or {})

    @staticmethod
    def not_found(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(404, code, message, details or {})

    @staticmethod
    def unavailable(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(503, code, message, details or {})

    @staticmethod
    def internal(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(500, code, message, details or {})

    @staticmethod
    def from_tracker_error(e: TrackerError) -> "ApiError":
        details = e.details if isinstance(e.details, dict) else ({} if e.details is None else {"details": e.details})
        if isinstance(e, InvalidInput):
            return ApiError.bad_request(e.code, e.reason, details)
        if isinstance(e, DataUnavailable):
            return ApiError.unavailable(e.code, e.reason, details)
        if isinstance(e, ConsistencyViolation):
            return ApiError.internal(e.code, e.reason, details)
        return ApiError.internal(e.code, e.reason, details)

    def to_json(self) -> Dict[str, Any]:
        return {"ok": False, "error": {"code": self.code, "message": self.message, "details": dict(self.details)}}
