#!/usr/bin/env python3
"""Generate environment variable documentation from pydantic-settings."""

import sys
from pathlib import Path
from typing import Any, get_args, get_origin

from pydantic.fields import FieldInfo

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from berkshelf_api_installer.config.settings import (  # noqa: E402
    BerkshelfApiSettings,
    LoggingSettings,
    RbenvSettings,
    RunitSettings,
)

# Settings classes with their display name and env_prefix
SETTINGS_CLASSES: list[tuple[str, Any, str]] = [
    ("Server defaults", BerkshelfApiSettings, "BERKSHELF_API_"),
    ("rbenv", RbenvSettings, "RBENV_"),
    ("runit", RunitSettings, "RUNIT_"),
    ("Logging", LoggingSettings, ""),
]


def get_env_var_name(field_name: str, field_info: FieldInfo, env_prefix: str) -> str:
    """Determine the environment variable name for a field."""
    if field_info.validation_alias:
        alias = field_info.validation_alias
        if isinstance(alias, str):
            return alias
        return str(alias)
    return f"{env_prefix}{field_name.upper()}"


def get_type_string(annotation: Any) -> str:
    """Convert a type annotation to a readable string."""
    if annotation is None:
        return "string"

    origin = get_origin(annotation)
    if origin is dict:
        return "JSON object"
    if origin is not None and str(origin) == "typing.Literal":
        return f"enum: {', '.join(repr(a) for a in get_args(annotation))}"

    if annotation is str:
        return "string"
    if annotation is int:
        return "integer"
    if annotation is bool:
        return "boolean"

    return str(annotation).replace("typing.", "").replace("<class '", "").replace("'>", "")


def get_default_string(field_info: FieldInfo) -> str:
    """Format the default value for display."""
    if field_info.default_factory is not None:
        return f"`{field_info.default_factory()}`"
    default = field_info.default
    if default is None:
        return "-"
    if isinstance(default, bool):
        return f"`{str(default).lower()}`"
    return f"`{default}`"


def generate_env_docs(output_file: str = "docs/configuration_options.md") -> None:
    """Generate markdown documentation for environment variables."""
    lines: list[str] = [
        "# Environment Variables",
        "",
        "Auto-generated from `berkshelf_api_installer/config/settings.py`.",
        "Values can also be placed in a `.env` file in the working directory.",
        "",
    ]

    for category_name, settings_class, env_prefix in SETTINGS_CLASSES:
        lines.append(f"## {category_name}")
        lines.append("")
        lines.append("| Variable | Type | Default | Description |")
        lines.append("|----------|------|---------|-------------|")

        for field_name, field_info in settings_class.model_fields.items():
            env_var = get_env_var_name(field_name, field_info, env_prefix)
            type_str = get_type_string(field_info.annotation)
            default_str = get_default_string(field_info)
            description = field_info.description or "-"
            lines.append(f"| `{env_var}` | {type_str} | {default_str} | {description} |")

        lines.append("")

    output_path = project_root / output_file
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(lines))
    print(f"Environment variable documentation generated at: {output_file}")


if __name__ == "__main__":
    generate_env_docs()
