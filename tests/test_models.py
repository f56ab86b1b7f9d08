"""Tests for response code value types and the built-in group."""

import pytest

from errorkit.models import CodeGroup, ResponseCode
from errorkit.resp_codes import MainRespCode
from tests.factories import make_group


def test_case_attribute_access() -> None:
    group = make_group()

    assert group.AppMissingHeaders.value == 1000
    assert group.AppMissingHeaders.group == "MainRespCode"
    assert group.get("Nope") is None


def test_unknown_case_attribute_raises() -> None:
    with pytest.raises(AttributeError, match="Nope"):
        make_group().Nope  # noqa: B018


def test_declaration_order_is_preserved() -> None:
    group = make_group(cases=[("Zeta", 3), ("Alpha", 1), ("Mid", 2)])

    assert group.names == ["Zeta", "Alpha", "Mid"]
    assert [case.value for case in group] == [3, 1, 2]


def test_duplicate_case_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        make_group(cases=[("Same", 1), ("Same", 2)])


@pytest.mark.parametrize("name", ["", "1Leading", "has space", "dash-ed"])
def test_invalid_case_name_rejected(name: str) -> None:
    with pytest.raises(ValueError):
        ResponseCode(name=name, value=1)


@pytest.mark.parametrize("value", [-1, True, "12"])
def test_invalid_case_value_rejected(value: object) -> None:
    with pytest.raises(ValueError):
        ResponseCode(name="Valid", value=value)  # type: ignore[arg-type]


def test_group_of_attaches_messages() -> None:
    group = CodeGroup.of("OrderRespCode", [("OrderLocked", 4090, 409)], messages={"OrderLocked": "Locked."})

    assert group.OrderLocked.default_message == "Locked."
    assert group.OrderLocked.http_status == 409


def test_builtin_main_group() -> None:
    assert len(MainRespCode) == 15
    assert MainRespCode.ValidationError.value == 1002
    assert MainRespCode.ValidationError.http_status == 422
    assert MainRespCode.GatewayTimeout.http_status == 504
    assert all(case.default_message for case in MainRespCode)
    assert len({case.value for case in MainRespCode}) == 15
