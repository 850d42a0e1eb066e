"""Turn raw CSV records into validated ``Sample`` objects.

A record is a plain ``dict[str, str]`` as produced by the row reader.
The validator picks the identifier column and up to five value columns
(fixed names, order-significant) and parses each value cell with
leading-number semantics:

- leading whitespace is skipped,
- the longest numeric prefix is used (``"12kg"`` → ``12.0``),
- empty, whitespace-only, non-numeric and non-finite cells are *absent*:
  they are dropped, never zero-filled.

A row is rejected (``InvalidRow``) when the identifier is empty or when
no value cell parsed. Validation is pure; logging rejected rows is the
caller's job.
"""

from __future__ import annotations

import math
import re
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import MAX_SLICES, InvalidRow, Sample

DEFAULT_ID_COLUMN = "Filename"
DEFAULT_VALUE_COLUMNS = ("Field1", "Field2", "Field3", "Field4", "Field5")

_LEADING_NUMBER_RE = re.compile(
    r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class RowSchema(BaseModel):
    """Column names the validator reads from each record."""
    model_config = ConfigDict(frozen=True)

    id_column: str = Field(default=DEFAULT_ID_COLUMN, min_length=1)
    value_columns: tuple[str, ...] = Field(
        default=DEFAULT_VALUE_COLUMNS, min_length=1, max_length=MAX_SLICES,
    )

    @field_validator("value_columns")
    @classmethod
    def _unique(cls, columns: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(columns)) != len(columns):
            raise ValueError("value columns must be unique")
        return columns


DEFAULT_SCHEMA = RowSchema()


# ---------------------------------------------------------------------------
# Cell parsing
# ---------------------------------------------------------------------------

def parse_number(text: Optional[str]) -> Optional[float]:
    """Parse the leading number of *text*, or return ``None`` when absent."""
    if not text:
        return None
    m = _LEADING_NUMBER_RE.match(text)
    if not m:
        return None
    try:
        value = float(m.group(1))
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class RowValidator:
    """Validate raw records against a ``RowSchema``."""

    def __init__(self, schema: RowSchema | None = None) -> None:
        self.schema = schema or DEFAULT_SCHEMA

    def validate(self, record: Mapping[str, Optional[str]]) -> Sample | InvalidRow:
        raw = dict(record)
        row_id = (record.get(self.schema.id_column) or "").strip()
        if not row_id:
            return InvalidRow(
                reason=f"missing identifier column {self.schema.id_column!r}",
                record=raw,
            )

        values = [
            v for v in (parse_number(record.get(col)) for col in self.schema.value_columns)
            if v is not None
        ]
        if not values:
            return InvalidRow(
                reason="need at least 1 valid value",
                record=raw,
            )

        return Sample(id=row_id, values=tuple(values))


def validate(
    record: Mapping[str, Optional[str]], schema: RowSchema | None = None,
) -> Sample | InvalidRow:
    """Module-level convenience wrapper around ``RowValidator.validate``."""
    return RowValidator(schema).validate(record)
