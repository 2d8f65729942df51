"""View model for the catalog browser: current view, filters and notices"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Literal, Optional, Union

from pharmabook.catalog.filters import Tab, filter_conditions, parse_tab
from pharmabook.catalog.loader import CatalogSource, load_catalog
from pharmabook.catalog.schemas import Catalog, ConditionDetail, ConditionSummary
from pharmabook.errors import FavoritesWriteError, GatewayQueryError
from pharmabook.favorites.store import FavoritesStore
from pharmabook.gateway.schemas import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HomeView:
    kind: Literal["home"] = "home"


@dataclass(frozen=True)
class DetailView:
    condition_id: str
    kind: Literal["detail"] = "detail"


View = Union[HomeView, DetailView]


@dataclass(frozen=True)
class FilterState:
    tab: Tab = "all"
    system_filter: Optional[str] = None
    search_term: str = ""


@dataclass(frozen=True)
class Notice:
    level: Literal["error", "warning", "info"]
    message: str


@dataclass(frozen=True)
class EmptyState:
    icon: str
    title: str


LIST_TITLES = {
    "all": "All conditions",
    "favorites": "Favorite conditions",
    "most-consulted": "Most consulted",
    "coming-soon": "Coming soon",
}

LOAD_ERROR_MESSAGE = "Could not load data from the server. Check the credentials."


class CatalogBrowser:
    """
    Holds the loaded catalog and the user's navigation state.

    Everything except reload() and toggle_favorite() is a pure in-memory
    update. Failures are reported through `notice` instead of being raised.
    """

    def __init__(
        self,
        source: CatalogSource,
        favorites: FavoritesStore,
        session: Optional[Session] = None,
        require_session: bool = False,
    ):
        self.source = source
        self.favorites = favorites
        self.session = session
        self.require_session = require_session

        self.catalog = Catalog()
        self.view: View = HomeView()
        self.filters = FilterState()
        self.notice: Optional[Notice] = None
        self.loading = False

        self.favorites.load()

    # --- data ---
    def reload(self) -> bool:
        if self.require_session and self.session is None:
            logger.info("No session; skipping catalog load")
            return False

        self.loading = True
        try:
            catalog = load_catalog(self.source)
        except GatewayQueryError as e:
            logger.error(f"Catalog load failed: {e}")
            self.notice = Notice("error", f"{LOAD_ERROR_MESSAGE} ({e.message})")
            return False
        except ValueError as e:
            # pydantic ValidationError is a ValueError too
            logger.error(f"Catalog rows rejected: {e}")
            self.notice = Notice("error", f"{LOAD_ERROR_MESSAGE} (invalid catalog data)")
            return False
        finally:
            self.loading = False

        self.catalog = catalog
        return True

    def set_session(self, session: Optional[Session]) -> None:
        self.session = session
        if session is None:
            self.catalog = Catalog()
            self.view = HomeView()

    # --- navigation ---
    def select_system(self, system_id: Optional[str]) -> None:
        self.filters = replace(self.filters, system_filter=system_id, tab="all")

    def select_tab(self, tab: str) -> None:
        self.filters = replace(self.filters, tab=parse_tab(tab), system_filter=None)

    def set_search(self, term: str) -> None:
        self.filters = replace(self.filters, search_term=term)

    def open_condition(self, condition_id: str) -> None:
        self.view = DetailView(condition_id)

    def go_home(self) -> None:
        self.view = HomeView()

    def dismiss_notice(self) -> None:
        self.notice = None

    # --- derived ---
    def visible_conditions(self) -> List[ConditionSummary]:
        return filter_conditions(
            self.catalog.conditions,
            tab=self.filters.tab,
            system_filter=self.filters.system_filter,
            favorites=self.favorites.ids(),
            search_term=self.filters.search_term,
        )

    def current_detail(self) -> Optional[ConditionDetail]:
        if not isinstance(self.view, DetailView):
            return None
        return self.catalog.conditions_data.get(self.view.condition_id)

    def list_title(self) -> str:
        title = LIST_TITLES[self.filters.tab]
        if self.filters.tab in ("all", "favorites"):
            return f"{title} ({len(self.visible_conditions())})"
        return title

    def empty_state(self) -> Optional[EmptyState]:
        if self.visible_conditions():
            return None
        if self.filters.search_term.strip():
            return EmptyState("🔍", "No condition found")
        if self.filters.tab == "favorites":
            return EmptyState("📌", "No favorite conditions yet")
        if self.filters.tab == "coming-soon":
            return EmptyState("⭐", "In development")
        return EmptyState("", "No conditions")

    # --- favorites ---
    def is_favorite(self, condition_id: str) -> bool:
        return self.favorites.contains(condition_id)

    def favorites_count(self) -> int:
        return self.favorites.count()

    def toggle_favorite(self, condition_id: str) -> bool:
        try:
            return self.favorites.toggle(condition_id)
        except FavoritesWriteError as e:
            logger.warning(f"Favorite toggle for {condition_id} not saved: {e}")
            self.notice = Notice("warning", str(e))
            return self.favorites.contains(condition_id)
