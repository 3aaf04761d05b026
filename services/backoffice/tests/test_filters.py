"""Tests for typed filter predicates."""

from datetime import date, datetime, timezone
from decimal import Decimal
from fractions import Fraction

import pytest
from services.backoffice.search.fields import to_date, to_number
from services.backoffice.search.filters import (
    BooleanFilter,
    DateFilter,
    FilterType,
    NumberFilter,
    RangeFilter,
    RangeValue,
    SelectFilter,
    TextFilter,
    count_active_filters,
    make_filter,
    passes_filters,
)

SPECS = [
    TextFilter(key="nombre"),
    SelectFilter(key="estado"),
    BooleanFilter(key="certificado"),
    NumberFilter(key="capacidad"),
    DateFilter(key="fechaInicio"),
    RangeFilter(key="nota", min=1.0, max=7.0),
]

RECORD = {
    "nombre": "Juan Pérez",
    "estado": "activo",
    "certificado": True,
    "capacidad": 30,
    "fechaInicio": "2025-03-10T14:30:00",
    "nota": 5.5,
}


class TestFilterTypes:
    """Per-type comparison semantics."""

    @pytest.mark.parametrize(
        "filters,expected",
        [
            ({"nombre": "PÉREZ"}, True),
            ({"nombre": "soto"}, False),
            ({"estado": "activo"}, True),
            ({"estado": "Activo"}, False),
            ({"estado": ["inactivo", "activo"]}, True),
            ({"estado": ["inactivo"]}, False),
            ({"certificado": 1}, True),
            ({"certificado": False}, False),
            ({"capacidad": "30"}, True),
            ({"capacidad": 30.0}, True),
            ({"capacidad": 31}, False),
            ({"fechaInicio": "2025-03-10"}, True),
            ({"fechaInicio": date(2025, 3, 10)}, True),
            ({"fechaInicio": datetime(2025, 3, 10, 8, 0)}, True),
            ({"fechaInicio": "10-03-2025"}, True),
            ({"fechaInicio": "2025-03-11"}, False),
            ({"nota": {"min": 4.0, "max": 7.0}}, True),
            ({"nota": RangeValue(min=5.5, max=5.5)}, True),
            ({"nota": {"min": 1.0, "max": 3.9}}, False),
        ],
        ids=[
            "text_substring_case_insensitive",
            "text_no_match",
            "select_equal",
            "select_case_sensitive",
            "select_member",
            "select_not_member",
            "boolean_truthy",
            "boolean_mismatch",
            "number_from_string",
            "number_float",
            "number_mismatch",
            "date_same_day_iso",
            "date_object",
            "date_different_time",
            "date_chilean_format",
            "date_other_day",
            "range_inside",
            "range_inclusive_bounds",
            "range_outside",
        ],
    )
    def test_filter_semantics(self, filters, expected):
        assert passes_filters(RECORD, filters, SPECS) is expected


class TestPassesFilters:
    """Combination and permissive behavior."""

    def test_all_filters_must_pass(self):
        filters = {"estado": "activo", "nota": {"min": 6.0, "max": 7.0}}
        assert passes_filters(RECORD, filters, SPECS) is False

    @pytest.mark.parametrize("value", [None, ""], ids=["none", "empty_string"])
    def test_inactive_values_pass(self, value):
        assert passes_filters(RECORD, {"estado": value}, SPECS) is True

    def test_unknown_key_is_ignored(self):
        assert passes_filters(RECORD, {"sede": "Santiago"}, SPECS) is True

    @pytest.mark.parametrize(
        "value",
        [{"min": 1.0}, {"max": 3.0}, "4-7", 5, {"min": "bajo", "max": 7}],
        ids=["missing_max", "missing_min", "string", "number", "non_numeric_bound"],
    )
    def test_malformed_range_passes(self, value):
        assert passes_filters(RECORD, {"nota": value}, SPECS) is True

    def test_missing_record_values_do_not_match(self):
        record = {"nombre": None}
        assert passes_filters(record, {"nombre": "juan"}, SPECS) is False
        assert passes_filters(record, {"capacidad": 0}, SPECS) is False
        assert passes_filters(record, {"fechaInicio": "2025-03-10"}, SPECS) is False
        assert passes_filters(record, {"nota": {"min": 0, "max": 7}}, SPECS) is False

    def test_unparseable_filter_date_does_not_match(self):
        assert passes_filters(RECORD, {"fechaInicio": "mañana"}, SPECS) is False

    def test_epoch_millis_dates(self):
        millis = int(datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc).timestamp() * 1000)
        record = {"fechaInicio": millis}
        assert passes_filters(record, {"fechaInicio": "2025-03-10"}, SPECS) is True
        assert passes_filters(record, {"fechaInicio": "2025-03-11"}, SPECS) is False

    @pytest.mark.parametrize(
        "stored",
        ["10-03-2025", "10/03/2025", "2025-03-10T23:59:59-03:00", date(2025, 3, 10)],
        ids=["chilean_dash", "chilean_slash", "iso_with_offset", "date_object"],
    )
    def test_chilean_dates_in_records_and_filters(self, stored):
        record = {"fechaInicio": stored}
        assert passes_filters(record, {"fechaInicio": "10-03-2025"}, SPECS) is True
        assert passes_filters(record, {"fechaInicio": "11-03-2025"}, SPECS) is False

    def test_decimal_and_fraction_values_are_numeric(self):
        record = {"nota": Decimal("5.5"), "capacidad": Fraction(1, 2)}
        assert passes_filters(record, {"nota": RangeValue(min=4, max=7)}, SPECS) is True
        assert passes_filters(record, {"nota": {"min": 6, "max": 7}}, SPECS) is False
        assert passes_filters(record, {"capacidad": 0.5}, SPECS) is True
        assert passes_filters(record, {"capacidad": Decimal("0.5")}, SPECS) is True

    def test_does_not_mutate_inputs(self):
        record = dict(RECORD)
        filters = {"estado": ["activo"], "nota": {"min": 1, "max": 7}}
        passes_filters(record, filters, SPECS)
        assert record == RECORD
        assert filters == {"estado": ["activo"], "nota": {"min": 1, "max": 7}}


class TestFilterHelpers:

    def test_count_active_filters(self):
        assert count_active_filters({"a": "x", "b": None, "c": "", "d": 0, "e": False}) == 3

    def test_make_filter(self):
        spec = make_filter("nota", "range", min=1.0, max=7.0)
        assert isinstance(spec, RangeFilter)
        assert spec.type == FilterType.RANGE
        assert spec.min == 1.0

    def test_make_filter_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown filter type"):
            make_filter("nota", "fuzzy")

    def test_specs_are_immutable(self):
        spec = SelectFilter(key="estado")
        with pytest.raises(AttributeError):
            spec.key = "otro"


class TestCoercion:
    """Tests for value coercion used by filters."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10-03-2025", date(2025, 3, 10)),
            ("10/03/2025", date(2025, 3, 10)),
            ("2025-03-10", date(2025, 3, 10)),
            ("2025-03-10T08:15:00Z", date(2025, 3, 10)),
            ("2025-03-10T08:15:00.25+0300", date(2025, 3, 10)),
            ("10-03", None),
        ],
        ids=["chilean_dash", "chilean_slash", "iso_day", "iso_utc", "iso_fraction_offset", "no_year"],
    )
    def test_to_date(self, value, expected):
        assert to_date(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [(Decimal("4.5"), 4.5), (Fraction(3, 4), 0.75), (" 7 ", 7.0), ("siete", None), (None, None)],
        ids=["decimal", "fraction", "string", "not_numeric", "none"],
    )
    def test_to_number(self, value, expected):
        assert to_number(value) == expected
