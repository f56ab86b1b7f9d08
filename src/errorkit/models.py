"""Domain value types.

Plain frozen dataclasses, no framework dependencies. Response codes are
produced by a generator (or declared in code), consumed read-only by the
translation sync engine and the error normalizer.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

CASE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class ResponseCode:
    """A named, integer-valued error condition belonging to one group."""

    name: str
    value: int
    http_status: int | None = None
    group: str = ""
    default_message: str | None = None

    def __post_init__(self) -> None:
        if not CASE_NAME_RE.match(self.name):
            raise ValueError(f"Invalid response code name: {self.name!r}")
        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value < 0:
            raise ValueError(f"Response code {self.name} must be a non-negative integer")


@dataclass(frozen=True)
class CodeGroup:
    """Ordered collection of response codes, e.g. ``MainRespCode``.

    Declaration order is preserved and drives iteration order. Cases are
    reachable as attributes::

        MainRespCode.AppMissingHeaders.value  # 1000
    """

    name: str
    cases: tuple[ResponseCode, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for case in self.cases:
            if case.name in seen:
                raise ValueError(f"Duplicate case {case.name!r} in {self.name}")
            seen.add(case.name)

    @classmethod
    def of(
        cls,
        name: str,
        cases: Iterable[tuple[str, int] | tuple[str, int, int | None]],
        messages: dict[str, str] | None = None,
    ) -> "CodeGroup":
        """Build a group from ``(name, value[, http_status])`` tuples."""
        messages = messages or {}
        built = []
        for item in cases:
            case_name, value = item[0], item[1]
            http_status = item[2] if len(item) > 2 else None
            built.append(
                ResponseCode(
                    name=case_name,
                    value=value,
                    http_status=http_status,
                    group=name,
                    default_message=messages.get(case_name),
                )
            )
        return cls(name=name, cases=tuple(built))

    def get(self, name: str) -> ResponseCode | None:
        for case in self.cases:
            if case.name == name:
                return case
        return None

    @property
    def names(self) -> list[str]:
        return [case.name for case in self.cases]

    def __getattr__(self, item: str) -> ResponseCode:
        if item.startswith("_"):
            raise AttributeError(item)
        for case in self.__dict__.get("cases", ()):
            if case.name == item:
                return case
        raise AttributeError(f"{self.__dict__.get('name', 'CodeGroup')} has no case {item!r}")

    def __iter__(self) -> Iterator[ResponseCode]:
        return iter(self.cases)

    def __len__(self) -> int:
        return len(self.cases)


@dataclass(frozen=True)
class Locator:
    """Address of one message catalog: a group within a locale."""

    group: str
    locale: str


@dataclass(frozen=True)
class DebugContext:
    file: str
    line: int
    trace: list[dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "trace": self.trace}


@dataclass(frozen=True)
class NormalizedError:
    """Canonical error tuple computed from any error input."""

    message: str
    code: int | str
    http_status: int
    debug: DebugContext | None = None
    # Field name -> first message, for validation failures
    validation_errors: dict[str, str] | None = None
