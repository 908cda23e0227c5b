"""
Unit tests for coerce module.
"""

import pytest

from reaxmlfeed.utils.coerce import (
    as_list,
    coerce_boolean,
    coerce_float,
    coerce_int,
    coerce_string,
    extract_text,
    get_attribute,
    has_attribute,
    normalise_area_unit,
    squares_to_sqm,
)


class TestCoerceBoolean:
    """Tests for coerce_boolean function."""

    @pytest.mark.parametrize("value", ["yes", "YES", "Yes", " yes ", "1", "true", "TRUE", "True"])
    def test_truthy_forms(self, value):
        assert coerce_boolean(value) is True

    @pytest.mark.parametrize("value", ["no", "0", "false", "", "  ", "y", "on", "2", "maybe", None])
    def test_everything_else_is_false(self, value):
        assert coerce_boolean(value) is False

    def test_python_bool_passes_through(self):
        assert coerce_boolean(True) is True
        assert coerce_boolean(False) is False

    def test_numbers(self):
        assert coerce_boolean(1) is True
        assert coerce_boolean(0) is False


class TestCoerceInt:
    """Tests for coerce_int function."""

    def test_plain_integer(self):
        assert coerce_int("4") == 4

    def test_leading_digits(self):
        assert coerce_int("4.5") == 4
        assert coerce_int("12 cars") == 12

    def test_non_numeric(self):
        assert coerce_int("abc") is None

    def test_empty_and_none(self):
        assert coerce_int("") is None
        assert coerce_int(None) is None

    def test_float_input(self):
        assert coerce_int(3.9) == 3


class TestCoerceFloat:
    """Tests for coerce_float function."""

    def test_decimal(self):
        assert coerce_float("11.2") == 11.2

    def test_trailing_junk(self):
        assert coerce_float("11.2%") == 11.2

    def test_integer_string(self):
        assert coerce_float("500000") == 500000.0

    def test_negative(self):
        assert coerce_float("-1") == -1.0

    def test_non_numeric(self):
        assert coerce_float("POA") is None

    def test_empty_and_none(self):
        assert coerce_float("") is None
        assert coerce_float(None) is None

    def test_nan_rejected(self):
        assert coerce_float(float("nan")) is None


class TestCoerceString:
    """Tests for coerce_string function."""

    def test_trims(self):
        assert coerce_string("  Main Road ") == "Main Road"

    def test_blank_is_none(self):
        assert coerce_string("   ") is None
        assert coerce_string(None) is None


class TestAreaUnits:
    """Tests for area unit helpers."""

    def test_square_meter_variants(self):
        assert normalise_area_unit("squareMeter") == "sqm"
        assert normalise_area_unit("sqm") == "sqm"

    def test_known_units_kept(self):
        assert normalise_area_unit("square") == "square"
        assert normalise_area_unit("acre") == "acre"
        assert normalise_area_unit("hectare") == "hectare"

    def test_unknown_defaults_to_sqm(self):
        assert normalise_area_unit("furlong") == "sqm"
        assert normalise_area_unit(None) == "sqm"

    def test_squares_to_sqm(self):
        assert squares_to_sqm(60) == pytest.approx(557.4)
        assert squares_to_sqm(1) == 9.29


class TestNodeHelpers:
    """Tests for tree node helpers."""

    def test_extract_text_from_scalar(self):
        assert extract_text("500000") == "500000"

    def test_extract_text_from_dict(self):
        assert extract_text({"@display": "yes", "#text": "500000"}) == "500000"

    def test_extract_text_attribute_only(self):
        assert extract_text({"@value": "yes"}) is None

    def test_extract_text_none(self):
        assert extract_text(None) is None

    def test_get_attribute(self):
        node = {"@display": "no", "#text": "1"}
        assert get_attribute(node, "display") == "no"
        assert get_attribute(node, "tax") is None
        assert get_attribute("plain", "display") is None

    def test_has_attribute(self):
        assert has_attribute({"@display": "no"}, "display") is True
        assert has_attribute("plain", "display") is False

    def test_as_list(self):
        assert as_list(None) == []
        assert as_list("a") == ["a"]
        assert as_list(["a", "b"]) == ["a", "b"]
