"""Export configuration.

The configuration is loaded once (from an optional JSON settings file and
the command line) and passed explicitly to every component.
"""

import json
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path


class PrefixMode(Enum):
    """How page nesting is encoded in the output tree."""

    SUBFOLDER = "subfolder"
    PREFIX = "prefix"


class MediaScope(Enum):
    """Where media files are stored."""

    CENTRALIZED = "centralized"
    PER_FOLDER = "per-folder"


@dataclass(frozen=True)
class ExportConfig:
    """Options recognized by the exporter."""

    destination_root: Path | None = None
    target_notebook_filter: str | None = None
    prefix_mode: PrefixMode = PrefixMode.SUBFOLDER
    media_scope: MediaScope = MediaScope.CENTRALIZED
    converter_flavor: str = "gfm"
    include_timestamp_header: bool = True
    collapse_whitespace: bool = False
    strip_escapes: bool = True
    preserve_spaces_in_names: bool = False

    @classmethod
    def from_mapping(cls, data: dict) -> "ExportConfig":
        """Build a config from a plain mapping such as a parsed JSON file.

        Raises ValueError on unknown keys or invalid enum values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")

        values = dict(data)
        if "destination_root" in values:
            values["destination_root"] = Path(values["destination_root"])
        if "prefix_mode" in values:
            values["prefix_mode"] = PrefixMode(values["prefix_mode"])
        if "media_scope" in values:
            values["media_scope"] = MediaScope(values["media_scope"])
        return cls(**values)

    def with_overrides(self, **overrides) -> "ExportConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def load_settings_file(path: Path) -> ExportConfig:
    """Load an ExportConfig from a JSON settings file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return ExportConfig.from_mapping(data)
