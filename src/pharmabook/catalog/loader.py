"""Fetch both relations and build the catalog"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol

from .normalize import normalize_catalog
from .schemas import Catalog
from .validate import orphan_conditions

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    def fetch_systems(self) -> List[Dict[str, Any]]: ...

    def fetch_conditions(self) -> List[Dict[str, Any]]: ...


def load_catalog(source: CatalogSource) -> Catalog:
    """
    Query systems, then conditions, then normalize.

    A GatewayQueryError from either query propagates before anything is
    normalized, so callers never see a half-built catalog.
    """
    raw_systems = source.fetch_systems()
    raw_conditions = source.fetch_conditions()

    catalog = normalize_catalog(raw_systems, raw_conditions)

    orphans = orphan_conditions(catalog)
    if orphans:
        logger.warning(f"Conditions without an active system: {', '.join(orphans)}")
    logger.info(
        f"Catalog loaded: {len(catalog.systems)} systems, {len(catalog.conditions)} conditions"
    )
    return catalog
