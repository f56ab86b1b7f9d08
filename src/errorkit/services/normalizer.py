"""Error normalization.

Turns any supported error input into a NormalizedError (message, code, HTTP
status, optional debug context). Inputs, in order of precedence:

    ResponseCode      translated message, its value, its declared status
    ErrorResponse     pre-built error with its own code/status resolution
    BaseException     message from the exception, status from the type table
    list / tuple      [message, code?, http_status?]
    str               the message itself

Anything else is stringified; normalization never fails on its input.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from errorkit.config import Settings
from errorkit.exceptions import (
    AuthenticationError,
    ErrorResponse,
    MethodNotAllowedError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitedError,
    TokenMismatchError,
    ValidationFailedError,
)
from errorkit.logging import get_logger
from errorkit.models import NormalizedError, ResponseCode
from errorkit.services import debug
from errorkit.services.keys import case_key, default_message
from errorkit.services.translators import TranslatorManager

logger = get_logger(__name__)

ErrorInput = ResponseCode | ErrorResponse | BaseException | list[Any] | tuple[Any, ...] | str
CodeInput = int | str | ResponseCode | None

INTERNAL_SERVER_ERROR = 500
UNKNOWN_ERROR = "Unknown error"
UNEXPECTED_ERROR = "Unexpected server error"
VALIDATION_ERROR = "Validation error"

# Checked in order; first isinstance match wins.
EXCEPTION_STATUS: tuple[tuple[type[BaseException], int], ...] = (
    (AuthenticationError, 401),
    (PermissionDeniedError, 403),
    (PermissionError, 403),
    (NotFoundError, 404),
    (MethodNotAllowedError, 405),
    (TokenMismatchError, 419),
    (RateLimitedError, 429),
    (ValidationFailedError, 422),
    (RequestValidationError, 422),
    (ValidationError, 422),
)

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?")
_REQUEST_PARTS = frozenset({"body", "query", "path", "header", "cookie"})


def sanitize_message(value: Any) -> str:
    """Coerce to valid UTF-8 text; invalid sequences are replaced, not rejected."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    text = value if isinstance(value, str) else str(value)
    return text.encode("utf-8", errors="replace").decode("utf-8")


def sanitize_code(code: Any) -> int | str:
    """Numeric-looking codes become ints; everything else stays a (clean) string."""
    if isinstance(code, bool):
        return int(code)
    if isinstance(code, int):
        return code
    if isinstance(code, float):
        return int(code) if math.isfinite(code) else str(code)
    text = sanitize_message(code).strip()
    if _INT_RE.fullmatch(text):
        return int(text)
    if _FLOAT_RE.fullmatch(text):
        value = float(text)
        if math.isfinite(value):
            return int(value)
    return sanitize_message(code)


def status_from_magnitude(value: int) -> int:
    """2xx -> 200, 3xx -> 300, 4xx -> 400, 5xx -> 500, anything else -> 500."""
    if 200 <= value < 600:
        return (value // 100) * 100
    return INTERNAL_SERVER_ERROR


def _first(*values: Any) -> Any:
    """First value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _self_reported_status(exc: BaseException) -> int | None:
    for attr in ("status_code", "http_status", "status"):
        value = getattr(exc, attr, None)
        if callable(value):
            value = value()
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
    return None


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Pydantic-style error list -> ``{field: first message}``.

    ``("body", "user", "email")`` becomes ``"user.email"``; the leading
    request-part marker is dropped.
    """
    fields: dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in _REQUEST_PARTS:
            loc = loc[1:]
        fields.setdefault(".".join(loc) or "__root__", str(error.get("msg", "")))
    return fields


def _validation_errors(exc: BaseException) -> dict[str, str] | None:
    if isinstance(exc, ValidationFailedError):
        return dict(exc.errors)
    if isinstance(exc, (RequestValidationError, ValidationError)):
        return field_errors(exc.errors())
    return None


def _carried_code(exc: BaseException) -> int | str | None:
    value = getattr(exc, "code", None)
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return None
    return value or None


class ErrorNormalizer:
    def __init__(self, settings: Settings, translators: TranslatorManager | None = None) -> None:
        self.settings = settings
        self.translators = translators

    def normalize(
        self,
        payload: ErrorInput,
        code: CodeInput = None,
        http_status: int | None = None,
        *,
        locale: str | None = None,
    ) -> NormalizedError:
        if isinstance(code, ResponseCode):
            code_override: int | str | None = code.value
            status_override = http_status if http_status is not None else code.http_status
        else:
            code_override = code
            status_override = http_status

        default_code = self.settings.default_error_code
        exception: BaseException | None = None
        validation: dict[str, str] | None = None

        match payload:
            case ResponseCode():
                message = self.message_for(payload, locale)
                final_code = payload.value
                final_status = _first(
                    payload.http_status, status_override, status_from_magnitude(payload.value)
                )

            case ErrorResponse():
                exception = payload
                case = payload.response_code
                message = self.message_for(case, locale) if case else payload.message
                final_code = _first(payload.resolved_code(), code_override, default_code)
                final_status = _first(payload.resolved_http_status(), status_override, INTERNAL_SERVER_ERROR)

            case BaseException():
                exception = payload
                validation = _validation_errors(payload)
                if isinstance(payload, (RequestValidationError, ValidationError)):
                    message = VALIDATION_ERROR
                else:
                    message = str(payload) or UNEXPECTED_ERROR
                fallback_code = self.settings.validation_error_code if validation is not None else default_code
                final_code = _first(code_override, _carried_code(payload), fallback_code)
                final_status = _first(status_override, self.exception_status(payload))

            case list() | tuple():
                items = list(payload)
                message = _first(items[0] if items else None) or UNKNOWN_ERROR
                final_code = _first(items[1] if len(items) > 1 else None, code_override, default_code)
                final_status = _first(
                    items[2] if len(items) > 2 else None, status_override, INTERNAL_SERVER_ERROR
                )

            case str() | bytes():
                message = payload
                final_code = _first(code_override, default_code)
                final_status = _first(status_override, INTERNAL_SERVER_ERROR)

            case _:
                message = str(payload) or UNKNOWN_ERROR
                final_code = _first(code_override, default_code)
                final_status = _first(status_override, INTERNAL_SERVER_ERROR)

        context = None
        if exception is not None and debug.should_show_meta(self.settings):
            context = debug.collect(exception)

        return NormalizedError(
            message=sanitize_message(message),
            code=sanitize_code(_first(final_code, default_code)),
            http_status=self._valid_status(final_status),
            debug=context,
            validation_errors=validation or None,
        )

    def message_for(self, code: ResponseCode, locale: str | None = None) -> str:
        """Translated message of ``code``; the default sentence if translation fails."""
        locale = locale or self.settings.fallback_locale
        if self.translators is not None:
            try:
                return self.translators.translate(code, locale)
            except Exception:
                logger.warning("translation_failed", case=code.name, group=code.group, locale=locale, exc_info=True)
        return default_message(
            case_key(code.name), locale, self.settings.message_patterns, self.settings.fallback_locale
        )

    def exception_status(self, exc: BaseException) -> int:
        """HTTP status for an exception without an explicit override."""
        if self.settings.exception_status_mode == "legacy":
            carried = _carried_code(exc)
            fallback = carried if isinstance(carried, int) and 100 <= carried <= 599 else None
            return _self_reported_status(exc) or fallback or INTERNAL_SERVER_ERROR

        for exc_type, status in EXCEPTION_STATUS:
            if isinstance(exc, exc_type):
                return status
        return _self_reported_status(exc) or INTERNAL_SERVER_ERROR

    @staticmethod
    def _valid_status(status: Any) -> int:
        try:
            value = int(status)
        except (TypeError, ValueError, OverflowError):
            return INTERNAL_SERVER_ERROR
        return value if 100 <= value <= 599 else INTERNAL_SERVER_ERROR
