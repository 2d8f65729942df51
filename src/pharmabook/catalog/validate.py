"""Data validation utilities"""
from __future__ import annotations

from typing import Iterable, List, Set

from .schemas import Catalog, RawCondition


def ensure_unique_slugs(rows: Iterable[RawCondition]) -> None:
    seen: Set[str] = set()
    for r in rows:
        if r.slug in seen:
            raise ValueError(f"Duplicate condition slug found: {r.slug}")
        seen.add(r.slug)


def orphan_conditions(catalog: Catalog) -> List[str]:
    """Condition ids whose owning system is missing from the systems list."""
    known = {s.id for s in catalog.systems}
    return [c.id for c in catalog.conditions if c.system not in known]
