"""
Uniform response envelope: {success, data?, error?: {code, message, details?}}.

Errors raised inside the router are ApiError subclasses; each carries
its envelope code and HTTP status so transports never re-derive them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
BAD_REQUEST = "BAD_REQUEST"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

STATUS_BY_CODE: dict[str, int] = {
    VALIDATION_ERROR: 400,
    BAD_REQUEST: 400,
    NOT_FOUND: 404,
    METHOD_NOT_ALLOWED: 405,
    INTERNAL_SERVER_ERROR: 500,
}


class ApiError(Exception):
    """Base for errors that render as an error envelope."""

    code = INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: list[str] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_CODE[self.code]


class NotFoundError(ApiError):
    code = NOT_FOUND
    default_message = "Resource not found"


class RequestValidationError(ApiError):
    code = VALIDATION_ERROR
    default_message = "Validation failed"


class BadRequestError(ApiError):
    code = BAD_REQUEST
    default_message = "Bad request"


class MethodNotAllowedError(ApiError):
    code = METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


@dataclass(frozen=True)
class ApiResponse:
    """A rendered envelope plus the HTTP status it maps to."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))


def ok(data: Any = None, status_code: int = 200) -> ApiResponse:
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    return ApiResponse(status_code=status_code, body=body)


def fail(code: str, message: str, details: list[str] | None = None) -> ApiResponse:
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return ApiResponse(
        status_code=STATUS_BY_CODE.get(code, 500),
        body={"success": False, "error": error},
    )


def from_error(exc: ApiError) -> ApiResponse:
    return fail(exc.code, exc.message, exc.details)


def not_found(resource: str, identifier: str | None = None) -> NotFoundError:
    message = (
        f"{resource} with identifier '{identifier}' not found"
        if identifier
        else f"{resource} not found"
    )
    return NotFoundError(message, [message])


def method_not_allowed(method: str, path: str) -> MethodNotAllowedError:
    return MethodNotAllowedError(
        f"HTTP method '{method}' is not allowed for '{path}'",
        [f"HTTP method '{method}' is not supported for this endpoint"],
    )
