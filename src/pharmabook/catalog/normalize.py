"""Shape raw query rows into the systems list, condition index and detail map"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Union

from .schemas import (
    Catalog,
    ConditionDetail,
    ConditionSummary,
    Medication,
    RawCondition,
    RawMedication,
    RawSystem,
    System,
)
from .validate import ensure_unique_slugs

RawRow = Union[Mapping[str, Any], RawSystem, RawCondition]


def _as_systems(rows: Iterable[RawRow]) -> List[RawSystem]:
    return [r if isinstance(r, RawSystem) else RawSystem.model_validate(r) for r in rows]


def _as_conditions(rows: Iterable[RawRow]) -> List[RawCondition]:
    return [r if isinstance(r, RawCondition) else RawCondition.model_validate(r) for r in rows]


def normalize_systems(systems: List[RawSystem], conditions: List[RawCondition]) -> List[System]:
    # plain scan per system; catalogs are small enough that no index is kept
    return [
        System(
            id=s.slug,
            name=s.name,
            icon=s.icon,
            color=s.color,
            count=sum(1 for c in conditions if c.system.slug == s.slug),
        )
        for s in systems
    ]


def summarize_conditions(conditions: List[RawCondition]) -> List[ConditionSummary]:
    return [
        ConditionSummary(
            id=c.slug,
            name=c.name,
            desc=c.short_description or "",
            system=c.system.slug,
        )
        for c in conditions
    ]


def _medication(m: RawMedication) -> Medication:
    return Medication(
        name=m.name,
        concentration=m.concentration,
        posology=m.posology,
        duration=m.duration,
        mip=bool(m.is_mip),
    )


def detail_conditions(conditions: List[RawCondition]) -> Dict[str, ConditionDetail]:
    out: Dict[str, ConditionDetail] = {}
    for c in conditions:
        out[c.slug] = ConditionDetail(
            system=c.system.name,
            name=c.name,
            definition=c.definition or "",
            causes=list(c.causes or []),
            objectives=list(c.objectives or []),
            symptoms=list(c.symptoms or []),
            alert_signs=list(c.alert_signs or []),
            referral_criteria=list(c.referral_criteria or []),
            medications=[_medication(m) for m in c.medications or []],
            non_pharmacological=list(c.non_pharmacological or []),
            general_guidance=list(c.general_guidance or []),
        )
    return out


def normalize_catalog(raw_systems: Iterable[RawRow], raw_conditions: Iterable[RawRow]) -> Catalog:
    """
    Build the view-ready catalog from one pair of query results.

    Pure: no I/O, and the same input always yields an equal catalog. Raises
    pydantic.ValidationError for rows missing required columns and ValueError
    for duplicate condition slugs.
    """
    systems = _as_systems(raw_systems)
    conditions = _as_conditions(raw_conditions)
    ensure_unique_slugs(conditions)

    return Catalog(
        systems=normalize_systems(systems, conditions),
        conditions=summarize_conditions(conditions),
        conditions_data=detail_conditions(conditions),
    )
