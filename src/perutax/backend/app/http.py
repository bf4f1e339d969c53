"""Problem payloads returned by every failing API call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import Response, current_app
from werkzeug.exceptions import HTTPException

PROBLEM_MIMETYPE = "application/problem+json"


@dataclass(frozen=True)
class ProblemResponse:
    """JSON error body in the spirit of RFC 7807.

    ``error`` is a stable machine-readable code (``validation_error``,
    ``not_found``); ``message`` carries the human-readable cause and
    ``extra`` any context a route wants to echo back, such as the rejected
    fiscal year.
    """

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, "status": self.status}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Response, int]:
        """Render the payload with the ``application/problem+json`` mimetype."""

        response = current_app.response_class(
            current_app.json.dumps(self.as_dict()), mimetype=PROBLEM_MIMETYPE
        )
        return response, self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a :class:`ProblemResponse`, folding keyword extras into the payload."""

    return ProblemResponse(error=error, status=status, message=message, extra=extra or None)


def problem_from_http_error(
    error: HTTPException, code: str, default_message: str | None = None
) -> ProblemResponse:
    """Wrap a werkzeug HTTP error, keeping its status and description."""

    return problem_response(
        code,
        status=error.code or 500,
        message=error.description or default_message,
    )


__all__ = [
    "PROBLEM_MIMETYPE",
    "ProblemResponse",
    "problem_from_http_error",
    "problem_response",
]
