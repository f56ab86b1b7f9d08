import pytest

from errorkit.services.keys import case_key, default_message, group_key, humanize


@pytest.mark.parametrize(
    "name, expected",
    [
        ("AppMissingHeaders", "app_missing_headers"),
        ("UserNotFound", "user_not_found"),
        ("ValidationError", "validation_error"),
        ("Unauthorized", "unauthorized"),
        ("User_Blocked", "user_blocked"),
        ("already_snake", "already_snake"),
    ],
)
def test_case_key(name: str, expected: str) -> None:
    assert case_key(name) == expected


def test_group_key_strips_suffix() -> None:
    assert group_key("MainRespCode") == "main"
    assert group_key("UserProfileRespCode") == "user_profile"


def test_group_key_suffix_is_case_insensitive() -> None:
    assert group_key("Userrespcode") == "user"


def test_group_key_is_idempotent() -> None:
    once = group_key("UserProfileRespCode")
    assert group_key(once) == once


def test_humanize() -> None:
    assert humanize("user_not_found") == "User not found"
    assert humanize("") == ""


def test_default_message_uses_locale_pattern() -> None:
    patterns = {"en": ":readable error occurred.", "uz": ":readable xatolik."}
    assert default_message("user_not_found", "uz", patterns) == "User not found xatolik."


def test_default_message_falls_back_to_fallback_locale() -> None:
    patterns = {"en": "Oops: :readable"}
    assert default_message("user_not_found", "fr", patterns, "en") == "Oops: User not found"


def test_default_message_hardcoded_pattern() -> None:
    assert default_message("invalid_credentials", "fr", {}) == "Invalid credentials error occurred."
