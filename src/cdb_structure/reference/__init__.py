"""CDB reference tables: valid dataset codes and component selectors."""

from __future__ import annotations

from .policy import ReferencePolicy, load_default_policy

__all__ = ["ReferencePolicy", "load_default_policy"]
