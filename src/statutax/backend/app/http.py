"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import jsonify

from statutax.backend.errors import (
    ComputationInvariantError,
    InvalidInputError,
    StatutaxError,
    UnsupportedJurisdictionError,
)

ERROR_STATUS: Mapping[type[StatutaxError], int] = {
    UnsupportedJurisdictionError: 422,
    ComputationInvariantError: 422,
    InvalidInputError: 400,
}


@dataclass(frozen=True)
class ProblemResponse:
    """Lightweight representation of an RFC 7807-style error payload."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the serialisable payload for this problem response."""

        payload: dict[str, Any] = {"error": self.error, "status": self.status}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Convenience factory mirroring Flask's ``jsonify`` interface."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


def problem_for_error(error: StatutaxError) -> ProblemResponse:
    """Map an engine error onto its problem code and HTTP status."""

    status = 400
    for error_type, mapped_status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            status = mapped_status
            break
    return problem_response(error.code, status=status, message=str(error))


__all__ = ["ERROR_STATUS", "ProblemResponse", "problem_for_error", "problem_response"]
