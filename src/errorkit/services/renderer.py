"""Response body rendering from configurable templates.

A template is a nested dict/list tree whose string leaves are either literals
or one of the placeholders ``:success``, ``:data``, ``:message``, ``:code``,
``:meta``. Unknown strings are kept verbatim. A placeholder with no value
(``:meta`` with neither debug output nor validation errors) removes its node
instead of rendering ``null``.
"""

from typing import Any

from errorkit.config import Settings
from errorkit.models import NormalizedError
from errorkit.services import debug

META = ":meta"


class _Absent:
    """Marker for a placeholder without a value; its node is dropped."""

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


def minimal_body(message: str, code: int | str, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    """Fixed shape used when no usable template is configured."""
    body: dict[str, Any] = {
        "success": False,
        "data": None,
        "error": {"message": message, "code": code},
    }
    if meta is not None:
        body["meta"] = meta
    return body


def remove_meta(node: Any) -> Any:
    """Copy of ``node`` without ``:meta`` leaves; subtrees emptied by the removal go too."""
    if isinstance(node, dict):
        out: dict[str, Any] = {}
        for key, value in node.items():
            if value == META:
                continue
            if isinstance(value, (dict, list)):
                child = remove_meta(value)
                if child or not value:
                    out[key] = child
                continue
            out[key] = value
        return out
    if isinstance(node, list):
        out_list = []
        for value in node:
            if value == META:
                continue
            if isinstance(value, (dict, list)):
                child = remove_meta(value)
                if child or not value:
                    out_list.append(child)
                continue
            out_list.append(value)
        return out_list
    return node


def apply_template(node: Any, values: dict[str, Any]) -> Any:
    """Substitute placeholders recursively; ABSENT results are dropped from their parent."""
    if isinstance(node, dict):
        out: dict[str, Any] = {}
        for key, value in node.items():
            replaced = apply_template(value, values)
            if replaced is not ABSENT:
                out[key] = replaced
        return out
    if isinstance(node, list):
        return [item for item in (apply_template(value, values) for value in node) if item is not ABSENT]
    if isinstance(node, str) and node in values:
        return values[node]
    return node


class ResponseTemplateRenderer:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def render(self, error: NormalizedError, template_name: str | None = None) -> dict[str, Any]:
        """Build the response body for ``error`` from the named (or configured) template.

        Field validation errors always go under meta; debug context only when
        debug output is visible.
        """
        template_name = template_name or self.settings.response_template
        meta: dict[str, Any] = {}
        if debug.should_show_meta(self.settings) and error.debug is not None:
            meta.update(error.debug.as_dict())
        if error.validation_errors:
            meta["validation_errors"] = dict(error.validation_errors)

        template = self.settings.response_templates.get(template_name)
        if not isinstance(template, dict):
            return minimal_body(error.message, error.code, meta or None)

        if not meta:
            template = remove_meta(template)

        values = {
            ":success": False,
            ":data": None,
            ":message": error.message,
            ":code": error.code,
            META: meta or ABSENT,
        }
        return apply_template(template, values)
