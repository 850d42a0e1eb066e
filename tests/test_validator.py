"""Tests for row validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from piecharter.core.models import InvalidRow, Sample
from piecharter.core.validator import (
    DEFAULT_VALUE_COLUMNS,
    RowSchema,
    RowValidator,
    parse_number,
    validate,
)


# ---------------------------------------------------------------------------
# parse_number
# ---------------------------------------------------------------------------

class TestParseNumber:
    def test_plain_integer(self):
        assert parse_number("42") == 42.0

    def test_plain_float(self):
        assert parse_number("3.14") == 3.14

    def test_leading_whitespace(self):
        assert parse_number("  7") == 7.0

    def test_trailing_text_ignored(self):
        assert parse_number("12kg") == 12.0

    def test_exponent(self):
        assert parse_number("1e3") == 1000.0

    def test_leading_dot(self):
        assert parse_number(".5") == 0.5

    def test_negative(self):
        assert parse_number("-10") == -10.0

    def test_empty_is_absent(self):
        assert parse_number("") is None
        assert parse_number(None) is None

    def test_whitespace_only_is_absent(self):
        assert parse_number("   ") is None

    def test_non_numeric_is_absent(self):
        assert parse_number("abc") is None

    def test_non_finite_is_absent(self):
        assert parse_number("inf") is None
        assert parse_number("nan") is None
        assert parse_number("Infinity") is None

    def test_overflow_is_absent(self):
        assert parse_number("1e999") is None


# ---------------------------------------------------------------------------
# RowValidator
# ---------------------------------------------------------------------------

class TestValidateAccepts:
    def test_three_values(self):
        result = validate({"Filename": "chart1", "Field1": "10", "Field2": "20", "Field3": "30"})
        assert isinstance(result, Sample)
        assert result.id == "chart1"
        assert result.values == (10.0, 20.0, 30.0)

    def test_unparsable_cells_dropped_not_zeroed(self):
        result = validate({"Filename": "x", "Field1": "abc", "Field2": "", "Field3": "15"})
        assert isinstance(result, Sample)
        assert result.values == (15.0,)

    def test_column_order_kept(self):
        record = {
            "Field5": "5", "Field3": "3", "Filename": "ord", "Field1": "1",
        }
        result = validate(record)
        assert result.values == (1.0, 3.0, 5.0)

    def test_all_five_columns(self):
        record = {"Filename": "full"}
        record.update({col: str(i + 1) for i, col in enumerate(DEFAULT_VALUE_COLUMNS)})
        result = validate(record)
        assert result.values == (1.0, 2.0, 3.0, 4.0, 5.0)

    def test_unknown_columns_ignored(self):
        result = validate({"Filename": "a", "Field1": "1", "Field6": "99", "Other": "7"})
        assert result.values == (1.0,)

    def test_identifier_is_stripped(self):
        result = validate({"Filename": "  padded ", "Field1": "1"})
        assert result.id == "padded"

    def test_zero_value_is_kept(self):
        result = validate({"Filename": "z", "Field1": "0"})
        assert result.values == (0.0,)


class TestValidateRejects:
    def test_empty_identifier(self):
        result = validate({"Filename": "", "Field1": "5"})
        assert isinstance(result, InvalidRow)
        assert "Filename" in result.reason

    def test_missing_identifier(self):
        result = validate({"Field1": "5"})
        assert isinstance(result, InvalidRow)

    def test_whitespace_identifier(self):
        assert isinstance(validate({"Filename": "   ", "Field1": "5"}), InvalidRow)

    def test_no_parseable_values(self):
        result = validate({"Filename": "x", "Field1": "abc", "Field2": "", "Field3": " "})
        assert isinstance(result, InvalidRow)
        assert result.reason == "need at least 1 valid value"

    def test_no_value_columns_at_all(self):
        assert isinstance(validate({"Filename": "x"}), InvalidRow)

    def test_original_record_kept(self):
        record = {"Filename": "", "Field1": "5"}
        result = validate(record)
        assert result.record == record


# ---------------------------------------------------------------------------
# RowSchema
# ---------------------------------------------------------------------------

class TestRowSchema:
    def test_custom_columns(self):
        schema = RowSchema(id_column="id", value_columns=("a", "b"))
        result = RowValidator(schema).validate({"id": "chart1", "a": "1", "b": "2"})
        assert isinstance(result, Sample)
        assert result.values == (1.0, 2.0)

    def test_more_than_five_columns_rejected(self):
        with pytest.raises(ValidationError):
            RowSchema(value_columns=("a", "b", "c", "d", "e", "f"))

    def test_empty_columns_rejected(self):
        with pytest.raises(ValidationError):
            RowSchema(value_columns=())

    def test_duplicate_columns_rejected(self):
        with pytest.raises(ValidationError):
            RowSchema(value_columns=("a", "a"))

    def test_default_schema(self):
        schema = RowSchema()
        assert schema.id_column == "Filename"
        assert schema.value_columns == ("Field1", "Field2", "Field3", "Field4", "Field5")
