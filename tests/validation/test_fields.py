"""Tests for the field-level validators."""

from __future__ import annotations

import pytest

from cdb_structure.core.enums import ViolationKind
from cdb_structure.validation.fields import (
    reference_bound,
    validate_component_selectors,
    validate_dataset_code,
    validate_extension,
    validate_feature_code,
    validate_latitude,
    validate_lod,
    validate_longitude,
    validate_name_length,
    validate_padded_number,
    validate_rref,
    validate_uref,
)


def _messages(violations):
    return [v.message for v in violations]


class TestTileLocation:
    @pytest.mark.parametrize("raw", ["N00", "N62", "S90", "N90"])
    def test_valid_latitude(self, raw):
        assert validate_latitude(raw) == []

    @pytest.mark.parametrize("raw", ["N91", "N99", "E45", "N6", "n62"])
    def test_invalid_latitude(self, raw):
        violations = validate_latitude(raw)
        assert _messages(violations) == [f"Invalid latitude ({raw})"]
        assert violations[0].kind == ViolationKind.FIELD

    @pytest.mark.parametrize("raw", ["E000", "W162", "W180", "E180"])
    def test_valid_longitude(self, raw):
        assert validate_longitude(raw) == []

    @pytest.mark.parametrize("raw", ["W181", "W999", "N162", "W16"])
    def test_invalid_longitude(self, raw):
        assert _messages(validate_longitude(raw)) == [f"Invalid longitude ({raw})"]


class TestDatasetCode:
    def test_known_code_is_valid(self, policy):
        assert validate_dataset_code("306", policy) == []
        assert validate_dataset_code("D306", policy) == []
        assert validate_dataset_code("001", policy) == []

    def test_unknown_code_echoes_literal(self, policy):
        assert _messages(validate_dataset_code("000", policy)) == ["Invalid code 000"]
        assert _messages(validate_dataset_code("999", policy)) == ["Invalid code 999"]


class TestPaddedNumber:
    @pytest.mark.parametrize("value", [0, 1, 7, 9, 10, 42, 99, 100, 306, 999])
    def test_padding_law(self, value):
        """A value is valid iff written as its zero-padded three-digit form."""
        padded = str(value).zfill(3)
        assert validate_padded_number(padded, "Component Selector 1") == []

        unpadded = str(value)
        if unpadded != padded:
            assert _messages(validate_padded_number(unpadded, "Component Selector 1")) == [
                f"Invalid padding on Component Selector 1 ({unpadded})"
            ]

    def test_over_padded(self):
        assert _messages(validate_padded_number("0042", "Component Selector 2")) == [
            "Invalid padding on Component Selector 2 (0042)"
        ]

    def test_out_of_range(self):
        assert _messages(validate_padded_number("1000", "Component Selector 1")) == [
            "Component Selector 1 out of range (1000)"
        ]

    @pytest.mark.parametrize("raw", ["", "abc", "0x1", "-01"])
    def test_number_format(self, raw):
        assert _messages(validate_padded_number(raw, "Feature Sub-Code")) == [
            f"Invalid Feature Sub-Code number format ({raw})"
        ]

    def test_at_most_one_violation(self):
        for raw in ["", "1", "01", "0001", "10000", "x"]:
            assert len(validate_padded_number(raw, "Component Selector 1")) <= 1


class TestComponentSelectors:
    def test_valid_pair(self, policy):
        assert validate_component_selectors("001", "001", "306", policy) == []

    def test_invalid_cs1_and_cs2(self, policy):
        violations = validate_component_selectors("000", "000", "306", policy)
        assert _messages(violations) == [
            "Invalid Component Selector 1 (000) for Dataset (306)",
            "Invalid Component Selector 2 (000) for CS1 (000) and Dataset (306)",
        ]
        assert all(v.kind == ViolationKind.CROSS_FIELD for v in violations)

    def test_cs2_depends_on_cs1(self, policy):
        assert validate_component_selectors("002", "002", "001", policy) == []
        assert _messages(validate_component_selectors("001", "005", "001", policy)) == [
            "Invalid Component Selector 2 (005) for CS1 (001) and Dataset (001)"
        ]

    def test_unknown_dataset_has_no_valid_selectors(self, policy):
        assert len(validate_component_selectors("001", "001", "999", policy)) == 2

    def test_malformed_selector_skips_semantics(self, policy):
        assert _messages(validate_component_selectors("1", "001", "306", policy)) == [
            "Invalid padding on Component Selector 1 (1)"
        ]


class TestLevelOfDetail:
    @pytest.mark.parametrize("raw", ["LC", "L00", "L07", "L23"])
    def test_valid_lod(self, raw):
        assert validate_lod(raw) == []

    @pytest.mark.parametrize("raw", ["L24", "L99", "L7", "LX", "C"])
    def test_invalid_lod(self, raw):
        assert _messages(validate_lod(raw)) == [f"Invalid LOD name: {raw}"]

    def test_coarsest_level_allows_only_zero(self):
        assert reference_bound("LC") == 0
        assert validate_uref("0", "LC") == []
        assert validate_rref("0", "LC") == []
        assert len(validate_uref("1", "LC")) == 1
        assert len(validate_rref("1", "LC")) == 1

    def test_bounds_double_per_level(self):
        assert reference_bound("L00") == 0
        assert reference_bound("L07") == 127
        bounds = [reference_bound(f"L{n:02d}") for n in range(24)]
        assert bounds == sorted(bounds)
        assert all(b == 2**n - 1 for n, b in enumerate(bounds))

    def test_reference_bound_rejects_invalid_lod(self):
        with pytest.raises(ValueError):
            reference_bound("L99")


class TestReferences:
    def test_within_bounds(self):
        assert validate_uref("38", "L07") == []
        assert validate_rref("127", "L07") == []

    def test_uref_out_of_bounds(self):
        violations = validate_uref("999", "L07")
        assert _messages(violations) == ["UREF value out of bounds: 999 (max 127 at L07)"]
        assert violations[0].kind == ViolationKind.CROSS_FIELD

    def test_rref_out_of_bounds(self):
        assert _messages(validate_rref("9999", "L07")) == [
            "RREF out of bounds for LOD: 9999 (max 127 at L07)"
        ]

    def test_leading_zero_is_a_padding_error(self):
        assert _messages(validate_uref("038", "L07")) == ["Invalid padding on UREF (038)"]

    def test_invalid_lod_skips_bounds(self):
        assert validate_uref("999", "L99") == []
        assert validate_rref("999", "L99") == []


class TestNamesAndExtensions:
    def test_feature_code_length(self):
        assert validate_feature_code("AL015") == []
        assert _messages(validate_feature_code("AL15")) == [
            "Feature Code should be 5 characters (AL15)"
        ]

    def test_name_length(self):
        assert validate_name_length("x" * 32, "Model name") == []
        assert len(validate_name_length("x" * 33, "Model name")) == 1

    def test_extension_messages(self):
        assert validate_extension("zip", ("zip",), "archive") == []
        assert _messages(validate_extension("7z", ("zip",), "archive")) == [
            "Invalid archive extension: 7z"
        ]
        assert _messages(validate_extension("txt", ("flt",))) == ["Invalid file extension: txt"]

    def test_extension_is_exact_match(self):
        assert len(validate_extension("ZIP", ("zip",), "archive")) == 1
