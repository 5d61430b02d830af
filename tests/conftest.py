"""Shared pytest configuration and fixtures for CDB structure testing."""

from pathlib import Path

import pytest

from cdb_structure.reference.policy import ReferencePolicy, load_default_policy
from utils.cdb_builders import build_valid_cdb


@pytest.fixture(scope="session")
def policy() -> ReferencePolicy:
    """Bundled reference policy."""
    return load_default_policy()


@pytest.fixture
def cdb_root(tmp_path: Path) -> Path:
    """Empty CDB root directory."""
    root = tmp_path / "CDB"
    root.mkdir()
    return root


@pytest.fixture
def valid_cdb(cdb_root: Path) -> Path:
    """CDB root holding one conforming file for datasets 001, 306 and 500."""
    return build_valid_cdb(cdb_root)
