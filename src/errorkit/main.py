from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from errorkit.config import Settings, get_settings
from errorkit.exceptions import ErrorKitError
from errorkit.logging import configure_logging, get_logger
from errorkit.middleware import MaintenanceModeMiddleware, RequestContextMiddleware
from errorkit.repositories.message_store import MessageStore
from errorkit.schemas.error import ErrorEnvelope
from errorkit.services.normalizer import ErrorNormalizer
from errorkit.services.renderer import ResponseTemplateRenderer
from errorkit.services.responder import ErrorResponder
from errorkit.services.translators import KeyValueBackend, build_translators

logger = get_logger(__name__)


def get_responder(request: Request) -> ErrorResponder:
    """The ErrorResponder bound to the running application."""
    return request.app.state.responder  # type: ignore[no-any-return]


def register_error_handlers(app: FastAPI) -> None:
    """Route every error raised by the application through the ErrorResponder."""

    @app.exception_handler(ErrorKitError)
    async def errorkit_error_handler(request: Request, exc: ErrorKitError) -> JSONResponse:
        """ErrorResponse and the HTTP-flavoured errorkit exceptions."""
        return get_responder(request).handle(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Routing errors (404, 405) and explicit HTTPExceptions; their headers are kept."""
        return get_responder(request).handle([exc.detail, None, exc.status_code], headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """One message, the configured validation code, 422 and the field errors under meta."""
        logger.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
        return get_responder(request).handle(exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log unhandled exceptions; the body only carries debug meta when it is visible."""
        logger.exception("unhandled_exception", path=request.url.path, method=request.method)
        return get_responder(request).handle(exc)


def create_app(settings: Settings | None = None, *, backend: KeyValueBackend | None = None) -> FastAPI:
    """Build the FastAPI application with errorkit's handlers installed.

    ``backend`` is the external translation service used by the ``key_value``
    translation driver.
    """
    settings = settings or get_settings()
    configure_logging()

    store = MessageStore(settings.translations_base_path, settings.translations_layout)
    translators = build_translators(settings, store, backend)
    responder = ErrorResponder(
        settings,
        ErrorNormalizer(settings, translators),
        ResponseTemplateRenderer(settings),
    )

    app = FastAPI(responses={500: {"model": ErrorEnvelope}})
    app.state.settings = settings
    app.state.responder = responder
    # Added first so it runs inside the request context
    app.add_middleware(MaintenanceModeMiddleware)
    app.add_middleware(
        RequestContextMiddleware,
        locales=settings.locales,
        default_locale=settings.fallback_locale,
    )
    register_error_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness check; also confirms the translation driver resolves."""
        translators.driver()
        return {"status": "ok"}

    return app


app = create_app()
