"""Render settings: canvas size, styling switches, columns and paths.

Settings can come from a JSON or TOML file and from CLI arguments. CLI
arguments take precedence over file values.

Config file format (TOML)::

    # piecharter.toml
    width = 600
    height = 600
    background = "white"
    cutout = 0.0
    show_title = false
    output_dir = "./chart-images"
    id_column = "Filename"
    value_columns = ["Field1", "Field2", "Field3", "Field4", "Field5"]
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core.errors import SettingsError
from .core.models import MAX_SLICES
from .core.validator import DEFAULT_ID_COLUMN, DEFAULT_VALUE_COLUMNS, RowSchema
from .generators.label_layout import MAX_FONT_SIZE_PX

DEFAULT_OUTPUT_DIR = Path("chart-images")


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

class RenderSettings(BaseModel):
    """Everything a batch run needs to know besides the input file."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Canvas
    width: int = Field(default=600, gt=0)
    height: int = Field(default=600, gt=0)
    background: Optional[str] = "white"  # empty or None disables the fill
    border_width: float = Field(default=1.0, ge=0)
    cutout: float = Field(default=0.0, ge=0.0, lt=1.0)
    show_title: bool = False
    max_font_px: int = Field(default=MAX_FONT_SIZE_PX, ge=1)

    # Columns
    id_column: str = Field(default=DEFAULT_ID_COLUMN, min_length=1)
    value_columns: tuple[str, ...] = Field(
        default=DEFAULT_VALUE_COLUMNS, min_length=1, max_length=MAX_SLICES,
    )

    # Paths
    output_dir: Path = DEFAULT_OUTPUT_DIR

    @field_validator("value_columns")
    @classmethod
    def _unique_columns(cls, columns: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(columns)) != len(columns):
            raise ValueError("value columns must be unique")
        return columns

    @property
    def row_schema(self) -> RowSchema:
        return RowSchema(id_column=self.id_column, value_columns=self.value_columns)


# ---------------------------------------------------------------------------
# Loader: config file (JSON / TOML) + CLI overrides
# ---------------------------------------------------------------------------

def _read_config_file(path: Path) -> dict[str, Any]:
    if path.suffix not in (".toml", ".json"):
        raise SettingsError(
            f"Cannot parse config file {path}. Use .json or .toml format.",
            context={"path": str(path)},
        )

    try:
        raw = path.read_text(encoding="utf-8")
        data = tomllib.loads(raw) if path.suffix == ".toml" else json.loads(raw)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise SettingsError(
            f"Cannot parse config file {path}: {exc}", context={"path": str(path)}
        ) from exc

    if not isinstance(data, dict):
        raise SettingsError(
            f"Config file {path} must contain a table of settings, "
            f"got {type(data).__name__}",
            context={"path": str(path)},
        )
    return data


def load_settings(
    config_path: str | Path | None = None,
    **overrides: Any,
) -> RenderSettings:
    """Load settings from *config_path* and apply non-``None`` overrides.

    Parameters
    ----------
    config_path
        Path to a JSON or TOML config file, or *None* for defaults.
    overrides
        Field values from the command line. ``None`` means "not given".
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path).expanduser().resolve()
        if not path.exists():
            raise SettingsError(
                f"Config file not found: {path}", context={"path": str(path)}
            )
        data.update(_read_config_file(path))

    for key, value in overrides.items():
        if value is not None:
            data[key] = value

    try:
        return RenderSettings(**data)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings: {exc}", context={"fields": data}) from exc
