"""Error responses: normalize, log, render.

ErrorResponder is the single entry point used by the exception handlers and by
application code that wants to return (rather than raise) an error.
"""

import traceback
from collections.abc import Mapping
from typing import Any

from fastapi.responses import JSONResponse

from errorkit.config import Settings
from errorkit.logging import get_logger
from errorkit.middleware import current_locale
from errorkit.services import debug
from errorkit.services.normalizer import CodeInput, ErrorInput, ErrorNormalizer
from errorkit.services.renderer import ResponseTemplateRenderer, minimal_body

logger = get_logger(__name__)

GENERIC_MESSAGE = "Internal server error"
MAINTENANCE_MESSAGE = "Server is under maintenance."
MAINTENANCE_STATUS = 503


class ErrorResponder:
    def __init__(
        self,
        settings: Settings,
        normalizer: ErrorNormalizer,
        renderer: ResponseTemplateRenderer,
    ) -> None:
        self.settings = settings
        self.normalizer = normalizer
        self.renderer = renderer

    def build(
        self,
        payload: ErrorInput,
        code: CodeInput = None,
        http_status: int | None = None,
        *,
        locale: str | None = None,
        template: str | None = None,
    ) -> tuple[dict[str, Any], int]:
        """Return ``(body, http_status)`` for any error input.

        A failure inside normalization or rendering degrades to the minimal
        body with a generic message, the default code and HTTP 500.
        """
        try:
            error = self.normalizer.normalize(payload, code, http_status, locale=locale or current_locale.get())
            if isinstance(payload, BaseException):
                log = logger.warning if error.http_status < 500 else logger.error
                log(
                    "error_response",
                    exc_class=type(payload).__name__,
                    message=error.message,
                    code=error.code,
                    http_status=error.http_status,
                    file=error.debug.file if error.debug else None,
                    line=error.debug.line if error.debug else None,
                )
            return self.renderer.render(error, template), error.http_status
        except Exception:
            logger.exception("error_rendering_failed", payload_type=type(payload).__name__)
            meta = None
            if debug.should_show_meta(self.settings):
                meta = {"file": "errorkit", "line": 0, "trace": traceback.format_exc().splitlines()}
            return minimal_body(GENERIC_MESSAGE, self.settings.default_error_code, meta), 500

    def handle(
        self,
        payload: ErrorInput,
        code: CodeInput = None,
        http_status: int | None = None,
        *,
        locale: str | None = None,
        template: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> JSONResponse:
        """Same as build(), wrapped in a JSONResponse carrying ``headers``."""
        body, status = self.build(payload, code, http_status, locale=locale, template=template)
        return JSONResponse(status_code=status, content=body, headers=headers)

    def maintenance(self) -> JSONResponse:
        """503 body returned while the application is in maintenance mode."""
        return self.handle(MAINTENANCE_MESSAGE, MAINTENANCE_STATUS, MAINTENANCE_STATUS)
