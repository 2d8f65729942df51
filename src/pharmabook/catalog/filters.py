"""Condition list filtering by system, tab, favorites and search term"""
from __future__ import annotations

from typing import AbstractSet, Dict, List, Literal, Optional, Sequence, get_args

from .schemas import ConditionSummary

Tab = Literal["all", "favorites", "most-consulted", "coming-soon"]

TABS: tuple[str, ...] = get_args(Tab)

# Labels used by the Portuguese front end
_TAB_ALIASES: Dict[str, str] = {
    "todas": "all",
    "favoritas": "favorites",
    "mais-consultadas": "most-consulted",
    "em-breve": "coming-soon",
}


def parse_tab(value: str) -> Tab:
    key = value.strip().lower()
    key = _TAB_ALIASES.get(key, key)
    if key not in TABS:
        raise ValueError(f"Unknown tab: {value!r} (expected one of {', '.join(TABS)})")
    return key  # type: ignore[return-value]


def matches_search(condition: ConditionSummary, term: str) -> bool:
    needle = term.strip().casefold()
    if not needle:
        return True
    return needle in condition.name.casefold() or needle in condition.desc.casefold()


def filter_conditions(
    conditions: Sequence[ConditionSummary],
    tab: Tab = "all",
    system_filter: Optional[str] = None,
    favorites: AbstractSet[str] = frozenset(),
    search_term: str = "",
) -> List[ConditionSummary]:
    """
    Narrow the condition index to what the list should show.

    Stages run in a fixed order (system, tab, search) and never reorder.
    "most-consulted" has no ranking yet and behaves like "all".
    """
    filtered = list(conditions)

    if system_filter:
        filtered = [c for c in filtered if c.system == system_filter]

    if tab == "favorites":
        filtered = [c for c in filtered if c.id in favorites]
    elif tab == "coming-soon":
        return []

    if search_term.strip():
        filtered = [c for c in filtered if matches_search(c, search_term)]

    return filtered
