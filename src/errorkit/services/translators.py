"""Translation providers for response code messages.

A translator resolves ``(group_key, case_key, locale)`` to message text. Two
implementations ship:

- FileTranslator reads the catalogs kept in sync by TranslationSyncEngine.
- KeyValueTranslator delegates to an external key/value translation service.
  The English default sentence is the key, the way such services are usually
  seeded, and missing keys are registered on first use.

TranslatorManager picks the implementation named by ``settings.translation_driver``.
"""

import threading
from typing import Protocol

from errorkit.config import Settings
from errorkit.exceptions import TranslatorNotRegisteredError
from errorkit.logging import get_logger
from errorkit.models import Locator, ResponseCode
from errorkit.repositories.message_store import MessageStore
from errorkit.services.keys import case_key, default_message, group_key

logger = get_logger(__name__)


class Translator(Protocol):
    def translate(self, group: str, key: str, locale: str) -> str: ...


class FileTranslator:
    """Read-only lookups in the on-disk message catalogs."""

    def __init__(self, store: MessageStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    def translate(self, group: str, key: str, locale: str) -> str:
        catalog = self.store.read(Locator(group=group, locale=locale), migrate=False)
        text = catalog.get(key)
        if text:
            return text
        return default_message(key, locale, self.settings.message_patterns, self.settings.fallback_locale)


class KeyValueBackend(Protocol):
    """Minimal interface of an external translation service."""

    def get(self, scope: str, text: str, locale: str) -> str | None: ...

    def seed(self, scope: str, text: str, locales: list[str]) -> None: ...


class InMemoryKeyValueBackend:
    """Process-local KeyValueBackend, handy for tests and single-node setups."""

    def __init__(self) -> None:
        self._data: dict[tuple[str, str, str], str | None] = {}
        self._lock = threading.Lock()

    def get(self, scope: str, text: str, locale: str) -> str | None:
        with self._lock:
            return self._data.get((scope, text, locale))

    def seed(self, scope: str, text: str, locales: list[str]) -> None:
        with self._lock:
            for locale in locales:
                self._data.setdefault((scope, text, locale), None)

    def put(self, scope: str, text: str, locale: str, value: str) -> None:
        with self._lock:
            self._data[(scope, text, locale)] = value

    def keys(self, scope: str) -> set[str]:
        with self._lock:
            return {text for (s, text, _), _value in self._data.items() if s == scope}


class KeyValueTranslator:
    """Translator backed by a KeyValueBackend; falls back to the default text."""

    def __init__(self, backend: KeyValueBackend, settings: Settings) -> None:
        self.backend = backend
        self.settings = settings

    def key_for(self, key: str) -> str:
        """The English default sentence used as the service key."""
        return default_message(key, "en", self.settings.message_patterns, self.settings.fallback_locale)

    def translate(self, group: str, key: str, locale: str) -> str:
        text = self.key_for(key)
        scope = self.settings.key_value_scope
        try:
            translated = self.backend.get(scope, text, locale)
            if translated is None:
                self.backend.seed(scope, text, [locale])
        except Exception:
            logger.warning("translation_backend_failed", scope=scope, key=key, locale=locale, exc_info=True)
            translated = None
        return translated or text


class TranslatorManager:
    """Registry of named translators; resolves the configured one once."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._translators: dict[str, Translator] = {}
        self._resolved: Translator | None = None

    def extend(self, name: str, translator: Translator) -> None:
        self._translators[name] = translator
        self._resolved = None

    def driver(self) -> Translator:
        if self._resolved is None:
            name = self.settings.translation_driver
            if name not in self._translators:
                raise TranslatorNotRegisteredError(name)
            self._resolved = self._translators[name]
        return self._resolved

    def translate(self, code: ResponseCode, locale: str | None = None) -> str:
        locale = locale or self.settings.fallback_locale
        return self.driver().translate(
            group_key(code.group, self.settings.group_suffix),
            case_key(code.name),
            locale,
        )


def build_translators(
    settings: Settings,
    store: MessageStore | None = None,
    backend: KeyValueBackend | None = None,
) -> TranslatorManager:
    """TranslatorManager with the ``file`` and ``key_value`` drivers registered."""
    store = store or MessageStore(settings.translations_base_path, settings.translations_layout)
    manager = TranslatorManager(settings)
    manager.extend("file", FileTranslator(store, settings))
    manager.extend("key_value", KeyValueTranslator(backend or InMemoryKeyValueBackend(), settings))
    return manager
