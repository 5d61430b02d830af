"""Tests for the grammar registry and dataset layouts."""

from __future__ import annotations

import pytest

from cdb_structure.core.enums import DatasetFamily
from cdb_structure.core.schemas import (
    GRAMMARS,
    LAYOUTS,
    entry_grammar_for,
    get_layouts,
    grammar_for,
)


@pytest.mark.parametrize("code", [306, "306", "D306", " 306 "])
def test_grammar_for_accepts_code_forms(code):
    assert grammar_for(code) is GRAMMARS["306"]


def test_grammar_for_pads_tile_codes():
    assert grammar_for(1) is GRAMMARS["001"]
    assert grammar_for("1") is GRAMMARS["001"]


def test_grammar_for_unknown_code():
    with pytest.raises(KeyError):
        grammar_for(999)
    with pytest.raises(KeyError):
        grammar_for("abc")


def test_alternation_grammars_share_one_pattern():
    assert grammar_for(603) is grammar_for(600)
    assert grammar_for(604) is grammar_for(601)
    assert grammar_for(401) is grammar_for(400)


def test_entry_grammar_only_for_archive_datasets():
    assert entry_grammar_for(306).key == "entry:306"
    with pytest.raises(KeyError):
        entry_grammar_for(500)


def test_separator_counts():
    assert grammar_for(500).separators == 5
    assert grammar_for(506).separators == 6
    assert grammar_for(306).separators == 6
    assert grammar_for(600).separators == 9
    assert grammar_for(606).separators == 10
    assert grammar_for(400).separators == 2
    assert grammar_for(504).separators is None
    assert entry_grammar_for(300).separators == 9
    assert entry_grammar_for(306).separators is None


def test_match_returns_read_only_fields():
    parsed = grammar_for(306).match("N62W162_D306_S001_T001_L07_U38_R102.zip")
    assert parsed["lat"] == "N62"
    assert parsed["uref"] == "38"
    assert parsed["ext"] == "zip"
    with pytest.raises(TypeError):
        parsed["lat"] = "S01"  # type: ignore[index]


def test_match_requires_full_match():
    assert grammar_for(306).match("xN62W162_D306_S001_T001_L07_U38_R102.zip") is None


def test_match_is_ascii_only():
    # Arabic-Indic digits are Unicode digits but not CDB digits
    assert grammar_for(306).match("N٦٢W162_D306_S001_T001_L07_U38_R102.zip") is None


def test_optional_groups_are_left_out():
    parsed = grammar_for(601).match("D601_S001_T001_M1A2_SEP.rgb")
    assert "tsc" not in parsed


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        GRAMMARS["999"] = GRAMMARS["306"]  # type: ignore[index]


def test_layouts():
    by_code = {layout.code: layout for layout in LAYOUTS}
    gs = by_code[306]
    assert gs.directory_name == "306_GSModelInteriorTexture"
    assert gs.family == DatasetFamily.TILES
    assert gs.roles == ("lod", "uref")
    assert gs.leaf == "archive"
    assert gs.entry_grammar is entry_grammar_for(306)

    assert by_code[1].leaf == "file"
    assert by_code[500].roles == ("category", "subcategory", "feature_type")
    assert by_code[506].roles[-1] == "lod"


def test_get_layouts_filters():
    gtmodel = get_layouts(families=[DatasetFamily.GTMODEL])
    assert gtmodel and all(layout.family == DatasetFamily.GTMODEL for layout in gtmodel)
    assert [layout.code for layout in get_layouts(datasets=[306, 1])] == [1, 306]
    assert get_layouts(datasets=[999]) == []
