"""Application settings loaded from environment variables.

Settings are read once per process (see ``get_settings``) and then passed
explicitly to the engines that need them.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PATTERN = ":readable error occurred."

# Wire contract of the default error body.
DEFAULT_TEMPLATES: dict[str, Any] = {
    "default": {
        "success": ":success",
        "data": ":data",
        "error": {
            "message": ":message",
            "code": ":code",
        },
        "meta": ":meta",
    },
}


class Settings(BaseSettings):
    """errorkit settings.

    Every field can be overridden with an ``ERRORKIT_``-prefixed env var,
    e.g. ``ERRORKIT_DEFAULT_ERROR_CODE=-2``. Dict and list fields take JSON.
    """

    # Host framework debug flag; used when force_debug_meta is unset
    app_debug: bool = False
    # True/False forces debug meta on/off regardless of app_debug
    force_debug_meta: bool | None = None

    # Answer every request except /health with the 503 maintenance body
    maintenance_mode: bool = False

    default_error_code: int = -1
    validation_error_code: int = 1002

    response_template: str = "default"
    response_templates: dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_TEMPLATES))

    # "mapped": exception type table; "legacy": exception's carried code as HTTP status
    exception_status_mode: Literal["mapped", "legacy"] = "mapped"

    translation_driver: str = "file"
    translations_base_path: Path = Path("lang/errorkit")
    translations_layout: Literal["locale_first", "group_first", "locale_file"] = "locale_first"
    locales: list[str] = Field(default_factory=lambda: ["en"])
    fallback_locale: str = "en"
    message_patterns: dict[str, str] = Field(default_factory=lambda: {"en": DEFAULT_PATTERN})
    key_value_scope: str = "exceptions"

    # Where response code group definitions (*RespCode.json) live
    resp_codes_dir: Path = Path("resp_codes")
    group_suffix: str = "RespCode"

    model_config = SettingsConfigDict(
        env_prefix="ERRORKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first access."""
    return Settings()
