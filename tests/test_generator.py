import json

import pytest

from errorkit.exceptions import CaseValidationError
from errorkit.models import Locator
from errorkit.repositories.case_catalog import DirectoryCaseCatalog
from errorkit.repositories.message_store import MessageStore
from errorkit.services.generator import format_type_name, generate, http_status_for, parse_cases, validate
from errorkit.services.sync import TranslationSyncEngine


def test_parse_cases_accepts_both_separators() -> None:
    assert parse_cases("NotFound=404, Forbidden:403,,Orphan") == [
        ("NotFound", "404"),
        ("Forbidden", "403"),
        ("Orphan", ""),
    ]


def test_parse_cases_empty() -> None:
    assert parse_cases("") == []


@pytest.mark.parametrize(
    "base, expected",
    [("main", "MainRespCode"), ("User", "UserRespCode"), ("UserRespCode", "UserRespCode"), ("userrespcode", "UserRespCode")],
)
def test_format_type_name(base: str, expected: str) -> None:
    assert format_type_name(base) == expected


def test_http_status_for() -> None:
    assert http_status_for(404) == 404
    assert http_status_for(3000) == 500


def test_validate_returns_parsed_input() -> None:
    parsed = validate("user", [("UserNotFound", "3000"), ("UserBlocked", " 3001 ")])

    assert parsed.name == "UserRespCode"
    assert parsed.cases == [("UserNotFound", 3000), ("UserBlocked", 3001)]


def test_validate_empty_input_lists_every_problem() -> None:
    with pytest.raises(CaseValidationError) as exc_info:
        validate("", [])

    assert exc_info.value.errors == ["Name cannot be empty.", "At least one case is required."]


def test_validate_bad_name() -> None:
    with pytest.raises(CaseValidationError) as exc_info:
        validate("1User", [("UserNotFound", "3000")])

    assert exc_info.value.errors == ["Invalid name. Use only letters/numbers, starting with a letter."]


def test_validate_bad_cases() -> None:
    cases = [("UserNotFound", "3000"), ("bad name", "1"), ("UserNotFound", "3001"), ("UserBlocked", "-5")]

    with pytest.raises(CaseValidationError) as exc_info:
        validate("User", cases)

    assert exc_info.value.errors == [
        "Invalid case name 'bad name'. Use letters/numbers/underscore, starting with a letter.",
        "Duplicate case name 'UserNotFound'.",
        "Code for UserBlocked must be a non-negative integer.",
    ]


def test_generate_writes_group_and_translations(
    catalog: DirectoryCaseCatalog, engine: TranslationSyncEngine, store: MessageStore
) -> None:
    parsed = validate("User", [("UserNotFound", "3000"), ("Forbidden", "403")])

    result = generate(parsed, catalog, engine, ["en", "uz"])

    assert result.group_written
    assert result.path == catalog.directory / "UserRespCode.json"
    definition = json.loads(result.path.read_text(encoding="utf-8"))
    assert definition["cases"] == [
        {"name": "UserNotFound", "code": 3000, "http_status": 500},
        {"name": "Forbidden", "code": 403, "http_status": 403},
    ]
    assert result.report.added == 4
    assert store.read(Locator(group="user", locale="uz")) == {
        "forbidden": "Forbidden xatolik yuz berdi.",
        "user_not_found": "User not found xatolik yuz berdi.",
    }


def test_generate_existing_group_without_force(
    catalog: DirectoryCaseCatalog, engine: TranslationSyncEngine
) -> None:
    generate(validate("User", [("UserNotFound", "3000")]), catalog, engine, ["en"])

    result = generate(validate("User", [("UserBlocked", "3001")]), catalog, engine, ["en"])

    assert not result.group_written
    assert [case.name for case in catalog.list_cases("User")] == ["UserNotFound"]
    # Translations are still merged for the requested cases
    assert result.report.added == 1


def test_generate_with_force_overwrites_definition(
    catalog: DirectoryCaseCatalog, engine: TranslationSyncEngine
) -> None:
    generate(validate("User", [("UserNotFound", "3000")]), catalog, engine, ["en"])

    result = generate(validate("User", [("UserBlocked", "3001")]), catalog, engine, ["en"], force=True)

    assert result.group_written
    assert [case.name for case in catalog.list_cases("User")] == ["UserBlocked"]
