"""Message catalog persistence.

One catalog maps lookup keys to message text for a (group, locale) pair. Catalogs
are JSON files under a base directory. Three on-disk layouts are known, tried in
order when resolving a catalog:

    locale_first   base/{locale}/{group}.json          (current default)
    group_first    base/{group}/{locale}.json          (legacy)
    locale_file    base/{locale}.json -> {group: {...}} (one file per locale)

Data found in a non-current layout is migrated into the current one on read.
Writes are deterministic (sorted keys) and skipped when nothing changed.
"""

import json
import os
import tempfile
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from errorkit.exceptions import CatalogWriteError
from errorkit.logging import get_logger
from errorkit.models import Locator

logger = get_logger(__name__)

MessageCatalog = dict[str, str]

_catalog_adapter = TypeAdapter(dict[str, str])

LOCK_FILE = ".errorkit.lock"


class Layout:
    """Maps a Locator to a file and, for grouped files, a section within it."""

    name: str = ""

    def path(self, base: Path, locator: Locator) -> Path:
        raise NotImplementedError

    def section(self, locator: Locator) -> str | None:
        return None


class LocaleFirstLayout(Layout):
    name = "locale_first"

    def path(self, base: Path, locator: Locator) -> Path:
        return base / locator.locale / f"{locator.group}.json"


class GroupFirstLayout(Layout):
    name = "group_first"

    def path(self, base: Path, locator: Locator) -> Path:
        return base / locator.group / f"{locator.locale}.json"


class LocaleFileLayout(Layout):
    name = "locale_file"

    def path(self, base: Path, locator: Locator) -> Path:
        return base / f"{locator.locale}.json"

    def section(self, locator: Locator) -> str | None:
        return locator.group


LAYOUTS: dict[str, Layout] = {
    layout.name: layout for layout in (LocaleFirstLayout(), GroupFirstLayout(), LocaleFileLayout())
}


def serialize(payload: Mapping[str, Any]) -> str:
    """Stable JSON text for a catalog (or a grouped locale file)."""
    return json.dumps(payload, indent=4, ensure_ascii=False, sort_keys=True) + "\n"


def merge_missing(
    existing: Mapping[str, str],
    desired_keys: Iterable[str],
    default_message: Callable[[str], str],
) -> MessageCatalog:
    """Return a new catalog with a default message for every desired key not in ``existing``.

    Existing entries are copied unchanged, whatever their value.
    """
    merged = dict(existing)
    for key in desired_keys:
        if key not in merged:
            merged[key] = default_message(key)
    return merged


class MessageStore:
    """Reads and writes message catalogs under ``base_path``."""

    def __init__(self, base_path: Path | str, layout: str = "locale_first") -> None:
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown catalog layout: {layout!r}")
        self.base_path = Path(base_path)
        self.layout = LAYOUTS[layout]
        self.legacy_layouts = [scheme for name, scheme in LAYOUTS.items() if name != layout]

    def location(self, locator: Locator, layout: str | None = None) -> Path:
        scheme = LAYOUTS[layout] if layout else self.layout
        return scheme.path(self.base_path, locator)

    # -- reading ---------------------------------------------------------

    def read(self, locator: Locator, *, migrate: bool = True) -> MessageCatalog:
        """Return the catalog for ``locator``; empty if missing or unreadable.

        With ``migrate`` (the default) legacy data is moved into the current
        layout first. Without it, legacy layouts are only consulted, read-only,
        when the current location holds nothing.
        """
        if migrate:
            for scheme in self.legacy_layouts:
                self.migrate_legacy(locator, scheme.name)
            return self._read_at(self.layout, locator)

        catalog = self._read_at(self.layout, locator)
        if catalog:
            return catalog
        for scheme in self.legacy_layouts:
            catalog = self._read_at(scheme, locator)
            if catalog:
                return catalog
        return {}

    def _load_json(self, path: Path) -> Any:
        if not path.is_file():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("catalog_read_failed", path=str(path), error=str(exc))
            return None

    def _read_at(self, scheme: Layout, locator: Locator) -> MessageCatalog:
        path = scheme.path(self.base_path, locator)
        raw = self._load_json(path)
        if raw is None:
            return {}

        section = scheme.section(locator)
        if section is not None:
            raw = raw.get(section) if isinstance(raw, dict) else None
            if raw is None:
                return {}

        try:
            return _catalog_adapter.validate_python(raw)
        except ValidationError:
            logger.warning("catalog_invalid", path=str(path), section=section, layout=scheme.name)
            return {}

    # -- writing ---------------------------------------------------------

    def write(self, locator: Locator, catalog: Mapping[str, str]) -> bool:
        """Persist ``catalog`` in the current layout. Returns False when the file already matched."""
        with self._locked():
            return self._write_at(self.layout, locator, catalog)

    def _write_at(self, scheme: Layout, locator: Locator, catalog: Mapping[str, str]) -> bool:
        path = scheme.path(self.base_path, locator)
        section = scheme.section(locator)

        payload: Mapping[str, Any]
        if section is not None:
            whole = self._load_json(path)
            if not isinstance(whole, dict):
                whole = {}
            whole[section] = dict(catalog)
            payload = whole
        else:
            payload = catalog

        text = serialize(payload)
        try:
            if path.is_file() and path.read_text(encoding="utf-8") == text:
                return False
            self._replace(path, text)
        except OSError as exc:
            raise CatalogWriteError(path, str(exc)) from exc

        logger.info("catalog_written", path=str(path), section=section, keys=len(catalog))
        return True

    @staticmethod
    def _replace(path: Path, text: str) -> None:
        """Write ``text`` to ``path`` atomically via a sibling temp file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Exclusive inter-process lock on the catalog tree (POSIX only)."""
        if os.name == "nt":
            yield
            return

        import fcntl

        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            handle = open(self.base_path / LOCK_FILE, "a", encoding="utf-8")
        except OSError as exc:
            raise CatalogWriteError(self.base_path, str(exc)) from exc
        with handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)

    # -- migration -------------------------------------------------------

    def migrate_legacy(self, locator: Locator, legacy_layout: str) -> bool:
        """Move a catalog from ``legacy_layout`` into the current layout.

        Keys already present in the current location win. The legacy file (or
        its section) is removed afterwards, along with an emptied parent
        directory. Returns True when something was migrated.
        """
        scheme = LAYOUTS[legacy_layout]
        if scheme is self.layout:
            return False

        old_path = scheme.path(self.base_path, locator)
        if not old_path.is_file():
            return False

        old = self._read_at(scheme, locator)
        if not old:
            return False

        with self._locked():
            new = self._read_at(self.layout, locator)
            merged = {**old, **new}
            self._write_at(self.layout, locator, merged)
            self._remove_at(scheme, locator)

        logger.info(
            "catalog_migrated",
            group=locator.group,
            locale=locator.locale,
            source=scheme.name,
            target=self.layout.name,
            keys=len(old),
        )
        return True

    def _remove_at(self, scheme: Layout, locator: Locator) -> None:
        path = scheme.path(self.base_path, locator)
        section = scheme.section(locator)
        try:
            if section is not None:
                whole = self._load_json(path)
                if isinstance(whole, dict):
                    whole.pop(section, None)
                    if whole:
                        self._replace(path, serialize(whole))
                        return
            path.unlink(missing_ok=True)
            parent = path.parent
            if parent != self.base_path and parent.is_dir() and not any(parent.iterdir()):
                parent.rmdir()
        except OSError as exc:
            raise CatalogWriteError(path, str(exc)) from exc
