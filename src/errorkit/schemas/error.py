"""Error response schemas.

Default wire contract of an error body::

    {"success": false, "data": null,
     "error": {"message": "...", "code": 1000},
     "meta": {"file": "...", "line": 12, "trace": [...]}}

``meta`` carries ``validation_errors`` (field -> first message) for validation
failures and the debug keys when debug output is visible; it is omitted when
it would be empty. Custom templates may reshape the body; these models
document (and test) the default one.
"""

from typing import Any

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Inner error object with a machine-readable code and human-readable message."""

    message: str
    code: int | str


class ErrorMeta(BaseModel):
    """Debug context (debug output only) and field validation errors."""

    file: str | None = None
    line: int | None = None
    trace: list[dict[str, Any]] | None = None
    validation_errors: dict[str, str] | None = None


class ErrorEnvelope(BaseModel):
    """Top-level error envelope rendered by the default template."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    meta: ErrorMeta | None = None
