"""JSON problem responses shared by the Flask blueprints and error handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import jsonify

from dutchtax.backend.exceptions import UnsupportedYearError


@dataclass(frozen=True)
class ProblemResponse:
    """Error payload with a machine-readable code and optional details.

    ``extra`` entries are merged into the top level of the JSON body.
    """

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        body.update(self.extra or {})
        return body

    def to_response(self) -> tuple[Any, int]:
        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a ``ProblemResponse``; keyword arguments become extra fields."""

    return ProblemResponse(
        error=error, status=status, message=message, extra=extra or None
    )


def unsupported_year_problem(error: UnsupportedYearError) -> ProblemResponse:
    """Answer an unknown tax year with 404 and the years that are available."""

    return problem_response(
        "unsupported_year",
        status=404,
        message=str(error),
        year=error.year,
        supported_years=list(error.supported_years),
    )


__all__ = ["ProblemResponse", "problem_response", "unsupported_year_problem"]
