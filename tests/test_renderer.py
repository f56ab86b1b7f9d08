from pathlib import Path

from errorkit.models import DebugContext, NormalizedError
from errorkit.services.renderer import ResponseTemplateRenderer, remove_meta
from tests.factories import make_settings

DEBUG = DebugContext(file="/app/orders.py", line=42, trace=[{"file": "/app/orders.py", "line": 42, "function": "lock"}])


def _error(debug: DebugContext | None = None, validation_errors: dict[str, str] | None = None) -> NormalizedError:
    return NormalizedError(
        message="Order is locked", code=4090, http_status=409, debug=debug, validation_errors=validation_errors
    )


def test_meta_key_absent_when_debug_hidden(tmp_path: Path) -> None:
    renderer = ResponseTemplateRenderer(make_settings(tmp_path))

    body = renderer.render(_error(DEBUG))

    assert "meta" not in body
    assert body == {"success": False, "data": None, "error": {"message": "Order is locked", "code": 4090}}


def test_meta_rendered_when_debug_visible(tmp_path: Path) -> None:
    renderer = ResponseTemplateRenderer(make_settings(tmp_path, app_debug=True))

    body = renderer.render(_error(DEBUG))

    assert body["meta"] == {"file": "/app/orders.py", "line": 42, "trace": DEBUG.trace}


def test_meta_dropped_when_visible_but_missing(tmp_path: Path) -> None:
    renderer = ResponseTemplateRenderer(make_settings(tmp_path, force_debug_meta=True))

    assert "meta" not in renderer.render(_error())


def test_custom_template_keeps_literals(tmp_path: Path) -> None:
    templates = {"api": {"ok": ":success", "status": "failed", "errors": [{"text": ":message", "id": ":code"}]}}
    renderer = ResponseTemplateRenderer(make_settings(tmp_path, response_templates=templates, response_template="api"))

    assert renderer.render(_error()) == {
        "ok": False,
        "status": "failed",
        "errors": [{"text": "Order is locked", "id": 4090}],
    }


def test_named_template_overrides_configured(tmp_path: Path) -> None:
    templates = {"default": {"message": ":message"}, "short": {"c": ":code"}}
    renderer = ResponseTemplateRenderer(make_settings(tmp_path, response_templates=templates))

    assert renderer.render(_error(), "short") == {"c": 4090}


def test_missing_template_falls_back_to_minimal_shape(tmp_path: Path) -> None:
    renderer = ResponseTemplateRenderer(make_settings(tmp_path, response_template="nope"))

    assert renderer.render(_error()) == {
        "success": False,
        "data": None,
        "error": {"message": "Order is locked", "code": 4090},
    }


def test_malformed_template_falls_back_with_meta(tmp_path: Path) -> None:
    renderer = ResponseTemplateRenderer(
        make_settings(tmp_path, response_templates={"default": "not a tree"}, app_debug=True)
    )

    body = renderer.render(_error(DEBUG))

    assert body["error"] == {"message": "Order is locked", "code": 4090}
    assert body["meta"]["line"] == 42


def test_remove_meta_prunes_emptied_subtrees() -> None:
    template = {
        "error": {"message": ":message"},
        "debug": {"info": ":meta"},
        "extra": [":meta"],
        "kept_empty": {},
    }

    assert remove_meta(template) == {"error": {"message": ":message"}, "kept_empty": {}}


def test_validation_errors_rendered_when_debug_hidden(tmp_path: Path) -> None:
    renderer = ResponseTemplateRenderer(make_settings(tmp_path))

    body = renderer.render(_error(DEBUG, validation_errors={"email": "required"}))

    assert body["meta"] == {"validation_errors": {"email": "required"}}


def test_validation_errors_merged_with_debug_meta(tmp_path: Path) -> None:
    renderer = ResponseTemplateRenderer(make_settings(tmp_path, app_debug=True))

    body = renderer.render(_error(DEBUG, validation_errors={"email": "required"}))

    assert body["meta"]["line"] == 42
    assert body["meta"]["validation_errors"] == {"email": "required"}


def test_validation_errors_in_minimal_shape(tmp_path: Path) -> None:
    renderer = ResponseTemplateRenderer(make_settings(tmp_path, response_template="nope"))

    body = renderer.render(_error(validation_errors={"email": "required"}))

    assert body["meta"] == {"validation_errors": {"email": "required"}}
