"""Settings validation for CORS origin lists."""

import json
from typing import Any

from pydantic.fields import FieldInfo
from pydantic_settings import EnvSettingsSource

_ORIGIN_SCHEMES = ("http://", "https://")


def _check_origin(origin: str) -> str:
    if origin != "*" and not origin.startswith(_ORIGIN_SCHEMES):
        raise ValueError(f"CORS origin must be '*' or start with http:// or https://, got {origin!r}")
    return origin.rstrip("/")


def parse_origin_list(value: str | list[str]) -> list[str]:
    """Normalize CORS origins given as a list, a JSON array or a comma-separated string.

    Trailing slashes are dropped since browsers never send them in the
    Origin header. An empty result is rejected.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON array: {e}") from e
            if not isinstance(decoded, list) or not all(isinstance(item, str) for item in decoded):
                raise ValueError("JSON value must be an array of strings")
            items = decoded
        else:
            items = text.split(",")
    else:
        items = value

    origins = [_check_origin(item.strip()) for item in items if item.strip()]
    if not origins:
        raise ValueError("At least one CORS origin is required")
    return origins


class OriginListEnvSettingsSource(EnvSettingsSource):
    """Hand ``cors_origins`` to its validator as the raw env string.

    pydantic-settings would otherwise JSON-decode list fields itself and
    choke on the comma-separated form.
    """

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name == "cors_origins" and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
