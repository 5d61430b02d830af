"""CDB Structure Tools: naming and directory structure validation for CDB repositories.

The grammars live in `core.schemas`, the reference tables in `reference`,
and the checks in `validation`. The `cdb-structure` CLI drives them.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
