"""Request middleware: request ID and locale context, maintenance mode."""

import uuid
from collections.abc import Awaitable, Callable
from contextvars import ContextVar

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from errorkit.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

current_locale: ContextVar[str | None] = ContextVar("errorkit_locale", default=None)


def negotiate_locale(header: str | None, supported: list[str], default: str) -> str:
    """Pick the best supported locale from an Accept-Language header.

    ``"uz-UZ,uz;q=0.9,en;q=0.8"`` with ``["en", "uz"]`` -> ``"uz"``.
    """
    if not header:
        return default

    candidates: list[tuple[float, int, str]] = []
    for index, part in enumerate(header.split(",")):
        lang, _, params = part.strip().partition(";")
        quality = 1.0
        if params.strip().startswith("q="):
            try:
                quality = float(params.strip()[2:])
            except ValueError:
                quality = 0.0
        if lang:
            candidates.append((-quality, index, lang.strip().lower()))

    for _, _, lang in sorted(candidates):
        for option in (lang, lang.split("-")[0]):
            if option in supported:
                return option
    return default


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id and locale for the duration of a request.

    - Reads X-Request-ID from the request, or generates a UUID
    - Negotiates the locale from Accept-Language against the configured locales
    - Binds both to structlog context and echoes X-Request-ID on the response
    """

    def __init__(self, app: ASGIApp, locales: list[str], default_locale: str) -> None:
        super().__init__(app)
        self.locales = [locale.lower() for locale in locales]
        self.default_locale = default_locale

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        locale = negotiate_locale(request.headers.get("accept-language"), self.locales, self.default_locale)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, locale=locale)
        token = current_locale.set(locale)
        try:
            response = await call_next(request)
        finally:
            current_locale.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MaintenanceModeMiddleware(BaseHTTPMiddleware):
    """Answer with the maintenance error body while ``maintenance_mode`` is on.

    Reads the flag from ``app.state.settings`` on every request, so toggling it
    takes effect without rebuilding the app. Exempt paths are served normally.
    """

    def __init__(self, app: ASGIApp, exempt_paths: tuple[str, ...] = ("/health",)) -> None:
        super().__init__(app)
        self.exempt_paths = exempt_paths

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.url.path in self.exempt_paths or not request.app.state.settings.maintenance_mode:
            return await call_next(request)
        logger.info("maintenance_mode_response", path=request.url.path)
        return request.app.state.responder.maintenance()  # type: ignore[no-any-return]
