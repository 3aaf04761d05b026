"""Tests for single-key sorting."""

from datetime import date, datetime
from decimal import Decimal
from fractions import Fraction

import pytest
from services.backoffice.search.sorting import (
    SortDirection,
    SortSpec,
    compare,
    compare_values,
    sort_records,
    toggle_sort,
)

ASC = SortDirection.ASC
DESC = SortDirection.DESC


class TestCompare:
    """Tests for the three-way comparator."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            (1, 2, -1),
            (2.5, 2.5, 0),
            (10, 9, 1),
            (datetime(2025, 1, 1), datetime(2025, 1, 2), -1),
            (date(2025, 5, 1), date(2025, 4, 30), 1),
            ("árbol", "Zanahoria", 1),
            ("ana", "ANA", 0),
            ("B", "a", 1),
            (None, None, 0),
            (None, 1, 1),
            (1, None, -1),
        ],
        ids=[
            "numbers_lt",
            "numbers_eq",
            "numbers_gt",
            "datetimes",
            "dates",
            "strings_codepoint",
            "strings_case_insensitive",
            "strings_lowercased",
            "both_none",
            "left_none",
            "right_none",
        ],
    )
    def test_compare_values(self, a, b, expected):
        assert compare_values(a, b) == expected

    def test_numbers_are_not_compared_as_strings(self):
        assert compare_values(9, 10) == -1

    def test_desc_negates(self):
        spec = SortSpec("nota", DESC)
        assert compare({"nota": 4.0}, {"nota": 6.0}, spec) == 1
        assert compare({"nota": 6.0}, {"nota": 4.0}, spec) == -1

    @pytest.mark.parametrize("direction", [ASC, DESC], ids=["asc", "desc"])
    def test_nulls_last_regardless_of_direction(self, direction):
        spec = SortSpec("nota", direction)
        assert compare({"nota": None}, {"nota": 1}, spec) == 1
        assert compare({"nota": 1}, {}, spec) == -1
        assert compare({}, {"nota": None}, spec) == 0


class TestSortRecords:
    """Tests for sorting whole collections."""

    def test_sorts_ascending(self):
        records = [{"n": "c"}, {"n": "A"}, {"n": "b"}]
        assert [r["n"] for r in sort_records(records, SortSpec("n"))] == ["A", "b", "c"]

    def test_sorts_descending_with_nulls_last(self):
        records = [{"n": 2}, {"n": None}, {"n": 3}, {"n": 1}]
        result = sort_records(records, SortSpec("n", DESC))
        assert [r["n"] for r in result] == [3, 2, 1, None]

    @pytest.mark.parametrize("direction", [ASC, DESC], ids=["asc", "desc"])
    def test_stable_for_equal_keys(self, direction):
        records = [
            {"id": 1, "estado": "activo"},
            {"id": 2, "estado": "inactivo"},
            {"id": 3, "estado": "ACTIVO"},
            {"id": 4, "estado": "activo"},
            {"id": 5, "estado": "inactivo"},
        ]
        result = sort_records(records, SortSpec("estado", direction))
        activos = [r["id"] for r in result if r["estado"].lower() == "activo"]
        inactivos = [r["id"] for r in result if r["estado"] == "inactivo"]
        assert activos == [1, 3, 4]
        assert inactivos == [2, 5]

    def test_decimal_values_sort_numerically(self):
        records = [{"id": 1, "n": Decimal("10")}, {"id": 2, "n": Decimal("9")}, {"id": 3, "n": Decimal("100")}]
        assert [r["id"] for r in sort_records(records, SortSpec("n"))] == [2, 1, 3]
        assert [r["id"] for r in sort_records(records, SortSpec("n", DESC))] == [3, 1, 2]

    def test_mixed_numeric_types_sort_numerically(self):
        records = [{"id": 1, "n": Decimal("2.5")}, {"id": 2, "n": 10}, {"id": 3, "n": Fraction(1, 2)}, {"id": 4, "n": 2.75}]
        assert [r["id"] for r in sort_records(records, SortSpec("n"))] == [3, 1, 4, 2]

    def test_returns_new_list(self):
        records = [{"n": 2}, {"n": 1}]
        result = sort_records(records, SortSpec("n"))
        assert result is not records
        assert records == [{"n": 2}, {"n": 1}]

    def test_without_sort_keeps_order(self):
        records = [{"n": 2}, {"n": 1}]
        assert sort_records(records, None) == records


class TestToggleSort:
    """Tests for column header toggling."""

    def test_new_key_starts_ascending(self):
        assert toggle_sort(None, "nombre") == SortSpec("nombre", ASC)
        assert toggle_sort(SortSpec("rut", DESC), "nombre") == SortSpec("nombre", ASC)

    def test_same_key_flips(self):
        first = toggle_sort(None, "nombre")
        second = toggle_sort(first, "nombre")
        third = toggle_sort(second, "nombre")
        assert second.direction == DESC
        assert third.direction == ASC


class TestSortSpecParse:

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("nombre", SortSpec("nombre", ASC)),
            ("fechaRegistro:desc", SortSpec("fechaRegistro", DESC)),
            ("nota:ASC", SortSpec("nota", ASC)),
        ],
    )
    def test_parse(self, value, expected):
        assert SortSpec.parse(value) == expected

    def test_parse_invalid_direction(self):
        with pytest.raises(ValueError, match="Invalid sort direction"):
            SortSpec.parse("nombre:up")
