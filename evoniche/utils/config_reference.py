"""
Configuration schema for EvoNiche.

``configs/config_default.yaml`` is the single source of truth for every
tunable key: its type, default and description.  The loader derives its
defaults and key validation from it, and the CLI and SDK render it as
markdown or console reference tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

import yaml

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "configs" / "config_default.yaml"

Schema = Dict[str, Dict[str, "ConfigField"]]


@dataclass(frozen=True)
class ConfigField:
    """One documented configuration key."""

    section: str
    name: str
    type: str
    default: object
    description: str

    @property
    def default_repr(self) -> str:
        return "None" if self.default is None else repr(self.default)

    def as_dict(self) -> Dict[str, object]:
        return {
            "section": self.section,
            "key": self.name,
            "type": self.type,
            "default": self.default,
            "description": self.description,
        }

    def explain(self) -> str:
        description = self.description or "No description available."
        return f"{self.name} (section={self.section}, type={self.type}, default={self.default_repr}) -> {description}"


def _read_schema(path: Path = SCHEMA_PATH) -> Schema:
    if not path.exists():
        raise FileNotFoundError(f"Configuration schema file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return {
        section: {
            key: ConfigField(
                section=section,
                name=key,
                type=str(meta.get("type", "Any")),
                default=meta.get("default"),
                description=" ".join(str(meta.get("description", "")).split()),
            )
            for key, meta in entries.items()
        }
        for section, entries in raw.items()
    }


CONFIG_SCHEMA: Schema = _read_schema()


def sections(section: Optional[str] = None) -> Schema:
    """Return the whole schema, or only ``section`` (``KeyError`` if unknown)."""

    if not section:
        return CONFIG_SCHEMA
    if section not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config section '{section}'. Options: {list(CONFIG_SCHEMA)}")
    return {section: CONFIG_SCHEMA[section]}


def iter_fields(section: Optional[str] = None) -> Iterable[ConfigField]:
    for fields in sections(section).values():
        yield from fields.values()


def find_field(key: str) -> Optional[ConfigField]:
    """Look a key up by name across all sections; dashes and case are ignored."""

    normalized = key.strip().lower().replace("-", "_")
    if "." in normalized:
        section, _, name = normalized.partition(".")
        return CONFIG_SCHEMA.get(section, {}).get(name)
    return next((field for field in iter_fields() if field.name.lower() == normalized), None)


def defaults() -> Dict[str, Dict[str, object]]:
    """Default value of every key, grouped by section."""

    return {name: {key: field.default for key, field in fields.items()} for name, fields in CONFIG_SCHEMA.items()}


def as_dict(section: Optional[str] = None) -> Dict[str, Dict[str, Dict[str, object]]]:
    return {name: {key: field.as_dict() for key, field in fields.items()} for name, fields in sections(section).items()}


def to_markdown(section: Optional[str] = None) -> str:
    """Render the schema as one markdown table per section."""

    heading = "# EvoNiche Configuration Reference"
    if section:
        heading += f" - {section.title()}"
    lines = [heading, ""]
    for name, fields in sections(section).items():
        lines += [f"## {name.title()}", "", "| Key | Type | Default | Description |", "| --- | --- | --- | --- |"]
        for field in fields.values():
            description = field.description.replace("|", "\\|")
            lines.append(f"| `{field.name}` | `{field.type}` | `{field.default_repr}` | {description} |")
        lines.append("")
    return "\n".join(lines)


def write_markdown(path: Path, section: Optional[str] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_markdown(section=section), encoding="utf-8")
    return path


def to_console(section: Optional[str] = None) -> str:
    blocks = []
    for name, fields in sections(section).items():
        rows = [f"[{name.upper()}]"]
        rows += [f"  - {field.explain()}" for field in fields.values()]
        blocks.append("\n".join(rows))
    return "\n\n".join(blocks)


__all__ = [
    "CONFIG_SCHEMA",
    "ConfigField",
    "SCHEMA_PATH",
    "as_dict",
    "defaults",
    "find_field",
    "iter_fields",
    "sections",
    "to_console",
    "to_markdown",
    "write_markdown",
]
