"""Every module of the package opens with a docstring."""

import importlib

import pytest

MODULES = [
    "cdb_structure",
    "cdb_structure.core.enums",
    "cdb_structure.core.schemas",
    "cdb_structure.reference",
    "cdb_structure.reference.policy",
    "cdb_structure.validation",
    "cdb_structure.validation.archives",
    "cdb_structure.validation.config",
    "cdb_structure.validation.fields",
    "cdb_structure.validation.filenames",
    "cdb_structure.validation.models",
    "cdb_structure.validation.registry",
    "cdb_structure.validation.runner",
    "cdb_structure.validation.walker",
    "cdb_structure.validation.checks",
    "cdb_structure.validation.checks._common",
    "cdb_structure.validation.checks.archive_entries",
    "cdb_structure.validation.checks.archive_structure",
    "cdb_structure.validation.checks.filenames",
    "cdb_structure.interfaces.cli.main",
]


@pytest.mark.parametrize("name", MODULES)
def test_module_docstring(name):
    module = importlib.import_module(name)
    assert module.__doc__ and module.__doc__.strip()
