"""Response code group generation.

Input is validated up front (no file is written when anything is wrong); then
the group definition is saved and its translations are seeded.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from errorkit.exceptions import CaseValidationError
from errorkit.models import CASE_NAME_RE
from errorkit.repositories.case_catalog import DirectoryCaseCatalog
from errorkit.schemas.resp_code import CaseDefinition, CodeGroupDefinition
from errorkit.services.sync import SyncReport, TranslationSyncEngine

BASE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")
CODE_RE = re.compile(r"^[0-9]+$")
PAIR_RE = re.compile(r"^\s*([^=:]*?)\s*[:=]\s*(.*?)\s*$")

# Codes that double as their own HTTP status; everything else maps to 500.
KNOWN_HTTP_STATUSES = frozenset(
    {400, 401, 403, 404, 405, 406, 409, 410, 412, 413, 415, 422, 426, 429, 502, 503, 504}
)


def http_status_for(code: int) -> int:
    return code if code in KNOWN_HTTP_STATUSES else 500


def parse_cases(csv: str) -> list[tuple[str, str]]:
    """``"NotFound=404, Forbidden:403"`` -> ``[("NotFound", "404"), ("Forbidden", "403")]``.

    Values are returned unvalidated; pairs without a separator yield an empty code.
    """
    pairs = []
    for chunk in csv.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        match = PAIR_RE.match(chunk)
        if match:
            pairs.append((match.group(1), match.group(2)))
        else:
            pairs.append((chunk, ""))
    return pairs


@dataclass(frozen=True)
class ParsedInput:
    """Validated generation request."""

    name: str
    cases: list[tuple[str, int]] = field(default_factory=list)

    def to_definition(self) -> CodeGroupDefinition:
        return CodeGroupDefinition(
            name=self.name,
            cases=[
                CaseDefinition(name=case_name, code=code, http_status=http_status_for(code))
                for case_name, code in self.cases
            ],
        )


def format_type_name(base: str, suffix: str = "RespCode") -> str:
    """``"main"`` -> ``"MainRespCode"``; already-suffixed names are kept."""
    if suffix and base.lower().endswith(suffix.lower()):
        base = base[: -len(suffix)]
    return base[:1].upper() + base[1:] + suffix


def validate(
    name: str | None,
    cases: list[tuple[str, str]],
    suffix: str = "RespCode",
) -> ParsedInput:
    """Validate raw generation input. Raises CaseValidationError listing every problem."""
    errors: list[str] = []

    base = (name or "").strip()
    if suffix and base.lower().endswith(suffix.lower()):
        base = base[: -len(suffix)]
    if not base:
        errors.append("Name cannot be empty.")
    elif not BASE_NAME_RE.match(base):
        errors.append("Invalid name. Use only letters/numbers, starting with a letter.")

    if not cases:
        errors.append("At least one case is required.")

    parsed: list[tuple[str, int]] = []
    seen: set[str] = set()
    for case_name, raw_code in cases:
        case_name = case_name.strip()
        raw_code = str(raw_code).strip()
        if not CASE_NAME_RE.match(case_name):
            errors.append(
                f"Invalid case name {case_name!r}. Use letters/numbers/underscore, starting with a letter."
            )
            continue
        if case_name in seen:
            errors.append(f"Duplicate case name {case_name!r}.")
            continue
        if not CODE_RE.match(raw_code):
            errors.append(f"Code for {case_name} must be a non-negative integer.")
            continue
        seen.add(case_name)
        parsed.append((case_name, int(raw_code)))

    if errors:
        raise CaseValidationError(errors)
    return ParsedInput(name=format_type_name(base, suffix), cases=parsed)


@dataclass
class GenerationResult:
    path: Path
    group_written: bool
    report: SyncReport


def generate(
    parsed: ParsedInput,
    catalog: DirectoryCaseCatalog,
    engine: TranslationSyncEngine,
    locales: list[str] | None = None,
    *,
    force: bool = False,
) -> GenerationResult:
    """Save the group definition (unless it exists and ``force`` is off) and seed translations.

    Translations are always merged, never overwritten.
    """
    definition = parsed.to_definition()
    written = catalog.save_group(definition, force=force)
    report = engine.sync(definition.to_group(), locales)
    return GenerationResult(path=catalog.path_for(definition.name), group_written=written, report=report)
