from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from errorkit.config import Settings
from errorkit.repositories.case_catalog import DirectoryCaseCatalog
from errorkit.repositories.message_store import MessageStore
from errorkit.services.normalizer import ErrorNormalizer
from errorkit.services.renderer import ResponseTemplateRenderer
from errorkit.services.sync import TranslationSyncEngine
from errorkit.services.translators import TranslatorManager, build_translators
from tests.factories import make_app, make_settings

# Fixtures in tests/seeds.py are only visible to pytest when registered here.
pytest_plugins = ["tests.seeds"]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every path into the test's tmp directory."""
    return make_settings(tmp_path)


@pytest.fixture
def store(settings: Settings) -> MessageStore:
    return MessageStore(settings.translations_base_path, settings.translations_layout)


@pytest.fixture
def catalog(settings: Settings) -> DirectoryCaseCatalog:
    return DirectoryCaseCatalog(settings.resp_codes_dir, settings.group_suffix)


@pytest.fixture
def engine(store: MessageStore, catalog: DirectoryCaseCatalog, settings: Settings) -> TranslationSyncEngine:
    return TranslationSyncEngine(store, catalog, settings)


@pytest.fixture
def translators(settings: Settings, store: MessageStore) -> TranslatorManager:
    return build_translators(settings, store)


@pytest.fixture
def normalizer(settings: Settings, translators: TranslatorManager) -> ErrorNormalizer:
    return ErrorNormalizer(settings, translators)


@pytest.fixture
def renderer(settings: Settings) -> ResponseTemplateRenderer:
    return ResponseTemplateRenderer(settings)


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[AsyncClient]:
    """HTTP client against an app with a few error-raising routes."""
    app = make_app(settings)

    # Unhandled exceptions are re-raised by Starlette after the handler ran;
    # the response is what we assert on.
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client
