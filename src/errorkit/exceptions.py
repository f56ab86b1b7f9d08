"""Exceptions raised by errorkit and by the applications using it.

Application code raises ErrorResponse (directly or via error_if / error_unless)
to abort a request with a response code. The remaining HTTP-flavoured classes
are recognised by the normalizer's status inference table. Exception handlers
in main.py translate everything into the standard error envelope.
"""

import traceback
from collections.abc import Callable
from typing import Any

from errorkit.models import ResponseCode


class ErrorKitError(Exception):
    """Base class for all errorkit exceptions."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(ErrorKitError):
    """Raised when the caller is not authenticated."""


class PermissionDeniedError(ErrorKitError):
    """Raised when the caller may not perform the action."""


class NotFoundError(ErrorKitError):
    """Raised when a requested entity does not exist."""


class MethodNotAllowedError(ErrorKitError):
    """Raised when the HTTP method is not supported by the route."""


class TokenMismatchError(ErrorKitError):
    """Raised when a CSRF or session token does not match."""


class RateLimitedError(ErrorKitError):
    """Raised when the caller exceeded its request quota."""


class ValidationFailedError(ErrorKitError):
    """Raised when input data fails validation."""

    def __init__(self, message: str = "The given data was invalid.", errors: dict[str, str] | None = None) -> None:
        self.errors = errors or {}
        super().__init__(message)


class CatalogWriteError(ErrorKitError):
    """Raised when a message catalog cannot be persisted."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write catalog {path}: {reason}")


class TranslatorNotRegisteredError(ErrorKitError):
    """Raised when the configured translation driver is unknown."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Translator driver [{name}] is not registered.")


class CaseValidationError(ErrorKitError):
    """Raised when response code generation input is invalid.

    Carries one user-facing message per violated rule.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


def _caller_origin() -> tuple[str, int]:
    """File and line of the first frame outside this module."""
    for frame in reversed(traceback.extract_stack()[:-1]):
        if frame.filename != __file__:
            return frame.filename, frame.lineno or 0
    return "unknown", 0


class ErrorResponse(ErrorKitError):
    """Pre-built API error.

    ``payload`` is either a message or a ResponseCode. ``code`` may override
    the response code (int, str or another ResponseCode) and ``http_status``
    the HTTP status::

        raise ErrorResponse(MainRespCode.AppMissingHeaders)
        raise ErrorResponse("Order is locked", code=4090, http_status=409)
    """

    def __init__(
        self,
        payload: str | ResponseCode = "",
        code: int | str | ResponseCode | None = None,
        http_status: int | None = None,
    ) -> None:
        self.payload = payload
        self.code_override = code
        self.http_status_override = http_status
        self.origin = _caller_origin()

        if isinstance(payload, ResponseCode):
            message = payload.default_message or payload.name
        else:
            message = str(payload)
        super().__init__(message)

    @property
    def response_code(self) -> ResponseCode | None:
        """The ResponseCode whose message should be translated, if any."""
        return self.payload if isinstance(self.payload, ResponseCode) else None

    def resolved_code(self) -> int | str | None:
        if isinstance(self.code_override, ResponseCode):
            return self.code_override.value
        if self.code_override is not None:
            return self.code_override
        if isinstance(self.payload, ResponseCode):
            return self.payload.value
        return None

    def resolved_http_status(self) -> int | None:
        if self.http_status_override is not None:
            return self.http_status_override
        if isinstance(self.payload, ResponseCode):
            return self.payload.http_status
        if isinstance(self.code_override, ResponseCode):
            return self.code_override.http_status
        return None


def raise_error(payload: str | ResponseCode, code: int | str | ResponseCode | None = None) -> None:
    """Abort the current request with an ErrorResponse."""
    raise ErrorResponse(payload, code)


def error_if(
    condition: bool | Callable[[], Any],
    payload: str | ResponseCode,
    code: int | str | ResponseCode | None = None,
) -> None:
    """Raise ErrorResponse when ``condition`` (or its result, if callable) is truthy."""
    evaluated = condition() if callable(condition) else condition
    if evaluated:
        raise ErrorResponse(payload, code)


def error_unless(
    condition: bool | Callable[[], Any],
    payload: str | ResponseCode,
    code: int | str | ResponseCode | None = None,
) -> None:
    """Raise ErrorResponse when ``condition`` (or its result, if callable) is falsy."""
    evaluated = condition() if callable(condition) else condition
    if not evaluated:
        raise ErrorResponse(payload, code)
