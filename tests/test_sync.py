"""Tests for TranslationSyncEngine."""

import hashlib
import json
from pathlib import Path

from errorkit.config import Settings
from errorkit.models import Locator
from errorkit.repositories.case_catalog import DirectoryCaseCatalog
from errorkit.repositories.message_store import MessageStore
from errorkit.resp_codes import MainRespCode
from errorkit.services.sync import TranslationSyncEngine
from tests.factories import make_group, make_settings


def _digest(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def test_sync_adds_missing_keys_to_empty_catalog(engine: TranslationSyncEngine, store: MessageStore) -> None:
    report = engine.sync(make_group(), ["en"])

    assert report.added == 2
    assert report.already_present == 0
    assert report.touched == [Locator(group="main", locale="en")]
    assert store.read(Locator(group="main", locale="en")) == {
        "app_missing_headers": "App missing headers error occurred.",
        "validation_error": "Validation error error occurred.",
    }


def test_sync_twice_is_idempotent(engine: TranslationSyncEngine, store: MessageStore) -> None:
    engine.sync(make_group(), ["en"])
    path = store.location(Locator(group="main", locale="en"))
    before = _digest(path)

    report = engine.sync(make_group(), ["en"])

    assert report.added == 0
    assert report.already_present == 2
    assert report.touched == []
    assert _digest(path) == before


def test_sync_preserves_human_edits(engine: TranslationSyncEngine, store: MessageStore) -> None:
    locator = Locator(group="main", locale="en")
    store.write(locator, {"validation_error": "Please check the form."})

    report = engine.sync(make_group(), ["en"])

    assert report.added == 1
    assert report.already_present == 1
    assert store.read(locator)["validation_error"] == "Please check the form."


def test_sync_uses_per_locale_pattern(engine: TranslationSyncEngine, store: MessageStore) -> None:
    engine.sync(make_group(), ["uz"])

    catalog = store.read(Locator(group="main", locale="uz"))
    assert catalog["app_missing_headers"] == "App missing headers xatolik yuz berdi."


def test_sync_unknown_locale_uses_fallback_pattern(engine: TranslationSyncEngine, store: MessageStore) -> None:
    engine.sync(make_group(), ["fr"])

    catalog = store.read(Locator(group="main", locale="fr"))
    assert catalog["validation_error"] == "Validation error error occurred."


def test_sync_defaults_to_configured_locales(engine: TranslationSyncEngine, store: MessageStore) -> None:
    report = engine.sync(make_group())

    assert report.added == 4
    assert {locator.locale for locator in report.touched} == {"en", "uz"}


def test_sync_with_declared_messages(engine: TranslationSyncEngine, store: MessageStore) -> None:
    engine.sync(MainRespCode, ["en", "uz"], use_declared_messages=True)

    en = store.read(Locator(group="main", locale="en"))
    uz = store.read(Locator(group="main", locale="uz"))
    assert en["not_found"] == "The requested resource was not found."
    assert uz["not_found"] == "Not found xatolik yuz berdi."


def test_sync_migrates_legacy_layout_first(engine: TranslationSyncEngine, store: MessageStore) -> None:
    locator = Locator(group="main", locale="en")
    legacy = store.location(locator, "group_first")
    legacy.parent.mkdir(parents=True)
    legacy.write_text(json.dumps({"app_missing_headers": "Send the headers."}), encoding="utf-8")

    report = engine.sync(make_group(), ["en"])

    assert report.added == 1
    assert store.read(locator)["app_missing_headers"] == "Send the headers."
    assert not legacy.exists()


def test_sync_by_group_name(seeded_catalog: DirectoryCaseCatalog, engine: TranslationSyncEngine) -> None:
    report = engine.sync("User", ["en"])

    assert report.group == "UserRespCode"
    assert report.added == 2


def test_sync_all_covers_every_group(
    seeded_catalog: DirectoryCaseCatalog, engine: TranslationSyncEngine, store: MessageStore
) -> None:
    summary = engine.sync_all(["en"])

    assert summary.ok
    assert [report.group for report in summary.reports] == ["MainRespCode", "UserRespCode"]
    assert summary.added == 4
    assert store.read(Locator(group="user", locale="en"))["user_not_found"] == "User not found error occurred."


def test_sync_all_continues_after_group_failure(
    seeded_catalog: DirectoryCaseCatalog, engine: TranslationSyncEngine, store: MessageStore
) -> None:
    # A directory where the user catalog file should go makes that write fail
    store.location(Locator(group="user", locale="en")).mkdir(parents=True)

    summary = engine.sync_all(["en"])

    assert not summary.ok
    assert [failure.group for failure in summary.failures] == ["UserRespCode"]
    assert [report.group for report in summary.reports] == ["MainRespCode"]
    assert store.read(Locator(group="main", locale="en"))


def test_sync_all_records_invalid_definition(
    seeded_catalog: DirectoryCaseCatalog, engine: TranslationSyncEngine
) -> None:
    (seeded_catalog.directory / "BrokenRespCode.json").write_text('{"name": "BrokenRespCode"}', encoding="utf-8")

    summary = engine.sync_all(["en"])

    assert [failure.group for failure in summary.failures] == ["BrokenRespCode"]
    assert len(summary.reports) == 2


def test_sync_all_with_no_groups(engine: TranslationSyncEngine) -> None:
    summary = engine.sync_all(["en"])

    assert summary.ok
    assert summary.reports == []


def test_sync_respects_group_first_layout(tmp_path: Path) -> None:
    settings: Settings = make_settings(tmp_path, translations_layout="group_first")
    store = MessageStore(settings.translations_base_path, settings.translations_layout)
    engine = TranslationSyncEngine(
        store, DirectoryCaseCatalog(settings.resp_codes_dir), settings
    )

    engine.sync(make_group(), ["en"])

    assert (settings.translations_base_path / "main" / "en.json").is_file()
