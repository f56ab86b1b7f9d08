"""Response code group definition files.

One JSON file per group, e.g. ``resp_codes/UserRespCode.json``::

    {
      "name": "UserRespCode",
      "cases": [
        {"name": "UserNotFound", "code": 3000, "http_status": 500}
      ]
    }
"""

from pydantic import BaseModel, Field, field_validator

from errorkit.models import CASE_NAME_RE, CodeGroup


class CaseDefinition(BaseModel):
    """A single case inside a group definition."""

    name: str
    code: int = Field(ge=0)
    http_status: int | None = Field(default=None, ge=100, le=599)
    message: str | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not CASE_NAME_RE.match(value):
            raise ValueError("must start with a letter and contain only letters, digits and underscores")
        return value


class CodeGroupDefinition(BaseModel):
    """Declarative form of a CodeGroup."""

    name: str
    cases: list[CaseDefinition]

    def to_group(self) -> CodeGroup:
        return CodeGroup.of(
            self.name,
            [(case.name, case.code, case.http_status) for case in self.cases],
            messages={case.name: case.message for case in self.cases if case.message},
        )
