"""Tests for the reference policy and its loaders."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from cdb_structure.reference.policy import ReferencePolicy, load_default_policy


def test_default_policy_knows_dataset_codes():
    policy = load_default_policy()
    assert policy.is_valid_code(306)
    assert policy.is_valid_code(1)
    assert not policy.is_valid_code(0)
    assert policy.dataset_name(306) == "GSModelInteriorTexture"
    assert policy.dataset_name(0) is None


def test_default_policy_component_selectors():
    policy = load_default_policy()
    assert policy.is_valid_cs1(306, "001")
    assert policy.is_valid_cs2(306, "001", "001")
    assert not policy.is_valid_cs1(306, "000")
    assert not policy.is_valid_cs2(306, "001", "000")
    assert policy.valid_cs1(601) == ["001", "005"]


def test_absent_code_means_invalid():
    policy = ReferencePolicy.from_mapping({"datasets": {306: "GSModelInteriorTexture"}})
    assert policy.is_valid_code(306)
    assert not policy.is_valid_cs1(306, "001")
    assert not policy.is_valid_cs2(306, "001", "001")


def test_from_yaml_normalizes_selectors(tmp_path: Path):
    path = tmp_path / "reference.yaml"
    path.write_text(
        "datasets:\n  306: GSModelInteriorTexture\ncomponent_selectors:\n  306:\n    1: [1, 2]\n",
        encoding="utf-8",
    )
    policy = ReferencePolicy.from_yaml(path)
    assert policy.source == path
    assert policy.is_valid_cs2(306, "001", "002")


def test_from_yaml_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        ReferencePolicy.from_yaml(tmp_path / "missing.yaml")


def test_from_yaml_malformed(tmp_path: Path):
    path = tmp_path / "reference.yaml"
    path.write_text("datasets: [\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ReferencePolicy.from_yaml(path)


def test_from_mapping_rejects_wrong_shape():
    with pytest.raises(ValueError):
        ReferencePolicy.from_mapping({"datasets": [306, 500]})
    with pytest.raises(ValueError):
        ReferencePolicy.from_mapping({"datasets": {"abc": "Bad"}})


def test_from_csv(tmp_path: Path):
    datasets_csv = tmp_path / "datasets.csv"
    datasets_csv.write_text("code,name\n306,GSModelInteriorTexture\n1,Elevation\n", encoding="utf-8")
    selectors_csv = tmp_path / "selectors.csv"
    selectors_csv.write_text(
        "code,cs1,cs2\n306,001,001\n306,001,002\n1,002,001\n", encoding="utf-8"
    )
    policy = ReferencePolicy.from_csv(datasets_csv, selectors_csv)
    assert policy.is_valid_code(1)
    assert policy.is_valid_cs2(306, "001", "002")
    assert policy.is_valid_cs2(1, "002", "001")
    assert not policy.is_valid_cs1(1, "001")


def test_from_csv_missing_columns(tmp_path: Path):
    datasets_csv = tmp_path / "datasets.csv"
    datasets_csv.write_text("code,name\n306,GSModelInteriorTexture\n", encoding="utf-8")
    selectors_csv = tmp_path / "selectors.csv"
    selectors_csv.write_text("code,cs1\n306,001\n", encoding="utf-8")
    with pytest.raises(ValueError, match="cs2"):
        ReferencePolicy.from_csv(datasets_csv, selectors_csv)


def test_from_csv_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        ReferencePolicy.from_csv(tmp_path / "a.csv", tmp_path / "b.csv")


def test_policy_is_immutable():
    policy = load_default_policy()
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.datasets = {}  # type: ignore[misc]
    with pytest.raises(TypeError):
        policy.datasets[999] = "New"  # type: ignore[index]
