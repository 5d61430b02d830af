"""Reference policy: valid CDB dataset codes and component selectors."""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

import pandas as pd
import yaml

DEFAULT_REFERENCE_RESOURCE = "cdb_reference.yaml"


def _selector_text(value: Any) -> str:
    """Normalize a component selector from YAML/CSV to its 3-digit text."""
    if isinstance(value, int):
        return f"{value:03d}"
    text = str(value).strip()
    return f"{int(text):03d}" if text.isdigit() else text


@dataclass(frozen=True)
class ReferencePolicy:
    """Read-only lookup of valid dataset codes and component selectors.

    Absence of data for a code means "invalid", never "skip".
    """

    datasets: Mapping[int, str]
    selectors: Mapping[int, Mapping[str, FrozenSet[str]]] = field(default_factory=dict)
    source: Optional[Path] = None

    def is_valid_code(self, code: int) -> bool:
        return code in self.datasets

    def dataset_name(self, code: int) -> Optional[str]:
        return self.datasets.get(code)

    def valid_cs1(self, code: int) -> List[str]:
        return sorted(self.selectors.get(code, {}))

    def is_valid_cs1(self, code: int, cs1: str) -> bool:
        return cs1 in self.selectors.get(code, {})

    def is_valid_cs2(self, code: int, cs1: str, cs2: str) -> bool:
        return cs2 in self.selectors.get(code, {}).get(cs1, frozenset())

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], source: Optional[Path] = None) -> "ReferencePolicy":
        """Build a policy from the parsed YAML structure.

        Expected shape::

            datasets: {306: GSModelInteriorTexture, ...}
            component_selectors: {306: {"001": ["001"]}, ...}
        """
        raw_datasets = data.get("datasets") or {}
        raw_selectors = data.get("component_selectors") or {}
        if not isinstance(raw_datasets, dict) or not isinstance(raw_selectors, dict):
            raise ValueError("Reference data must map 'datasets' and 'component_selectors'")
        try:
            datasets = {int(code): str(name) for code, name in raw_datasets.items()}
            selectors = {
                int(code): MappingProxyType(
                    {
                        _selector_text(cs1): frozenset(_selector_text(v) for v in (cs2s or []))
                        for cs1, cs2s in (by_cs1 or {}).items()
                    }
                )
                for code, by_cs1 in raw_selectors.items()
            }
        except (TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"Malformed reference data: {e}") from e
        return cls(MappingProxyType(datasets), MappingProxyType(selectors), source)

    @classmethod
    def from_yaml(cls, path: Path) -> "ReferencePolicy":
        """Load a policy from a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Reference file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Failed to parse reference file {path}: {e}") from e
        return cls.from_mapping(data, source=path)

    @classmethod
    def from_csv(cls, datasets_csv: Path, selectors_csv: Path) -> "ReferencePolicy":
        """Load a policy from two CSV tables.

        ``datasets_csv`` has columns ``code,name``; ``selectors_csv`` has
        columns ``code,cs1,cs2`` with one row per valid combination.
        """
        for path in (datasets_csv, selectors_csv):
            if not path.exists():
                raise FileNotFoundError(f"Reference table not found: {path}")
        try:
            ds = pd.read_csv(datasets_csv, dtype=str, encoding="utf-8-sig")
            cs = pd.read_csv(selectors_csv, dtype=str, encoding="utf-8-sig")
        except (OSError, pd.errors.ParserError) as e:
            raise ValueError(f"Failed to read reference tables: {e}") from e

        missing = [c for c in ("code", "name") if c not in ds.columns]
        missing += [c for c in ("code", "cs1", "cs2") if c not in cs.columns]
        if missing:
            raise ValueError(f"Reference tables missing columns: {', '.join(missing)}")

        selectors: Dict[int, Dict[str, List[str]]] = {}
        for code, cs1, cs2 in cs[["code", "cs1", "cs2"]].dropna().itertuples(index=False):
            selectors.setdefault(int(code), {}).setdefault(cs1, []).append(cs2)
        data = {
            "datasets": dict(zip(ds["code"], ds["name"])),
            "component_selectors": selectors,
        }
        return cls.from_mapping(data, source=selectors_csv)


def load_default_policy() -> ReferencePolicy:
    """Load the reference tables bundled with the package."""
    resource = resources.files("cdb_structure.reference") / "data" / DEFAULT_REFERENCE_RESOURCE
    data = yaml.safe_load(resource.read_text(encoding="utf-8")) or {}
    return ReferencePolicy.from_mapping(data)
