"""FastAPI application serving the condition catalog."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from pharmabook.catalog.filters import filter_conditions, parse_tab
from pharmabook.catalog.schemas import ConditionSummary, System
from pharmabook.config import SETTINGS
from pharmabook.errors import FavoritesWriteError
from pharmabook.favorites.storage import JsonFileStorage
from pharmabook.favorites.store import KeyValueFavoritesStore
from pharmabook.gateway.client import SupabaseGateway
from pharmabook.logging_conf import setup_logging
from pharmabook.view.state import CatalogBrowser

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pharmabook API",
    description="Pharmaceutical prescription and indication reference",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_browser() -> CatalogBrowser:
    """Process-wide browser, loaded on first use."""
    browser = CatalogBrowser(
        SupabaseGateway(),
        KeyValueFavoritesStore(JsonFileStorage(SETTINGS.favorites_path)),
    )
    browser.reload()
    return browser


# === Response Models ===
class HealthResponse(BaseModel):
    status: str
    version: str
    data_available: bool
    error: Optional[str] = None


class ConditionListResponse(BaseModel):
    count: int
    conditions: List[ConditionSummary]


class FavoritesResponse(BaseModel):
    count: int
    favorites: List[str]


class ToggleResponse(BaseModel):
    condition_id: str
    favorite: bool
    count: int


# === Endpoints ===

@app.get("/health", response_model=HealthResponse)
async def health_check(browser: CatalogBrowser = Depends(get_browser)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version="1.0.0",
        data_available=bool(browser.catalog.conditions),
        error=browser.notice.message if browser.notice else None,
    )


@app.get("/systems", response_model=List[System])
async def list_systems(browser: CatalogBrowser = Depends(get_browser)):
    """Body systems with their condition counts."""
    return browser.catalog.systems


@app.get("/conditions", response_model=ConditionListResponse)
async def list_conditions(
    tab: str = "all",
    system: Optional[str] = None,
    q: str = "",
    browser: CatalogBrowser = Depends(get_browser),
):
    """
    List conditions.

    Args:
        tab: all, favorites, most-consulted or coming-soon
        system: Restrict to one system id
        q: Case-insensitive search on name and short description
    """
    try:
        active_tab = parse_tab(tab)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    conditions = filter_conditions(
        browser.catalog.conditions,
        tab=active_tab,
        system_filter=system,
        favorites=browser.favorites.ids(),
        search_term=q,
    )
    return ConditionListResponse(count=len(conditions), conditions=conditions)


@app.get("/conditions/{condition_id}")
async def get_condition(condition_id: str, browser: CatalogBrowser = Depends(get_browser)):
    """Full clinical record for one condition."""
    detail = browser.catalog.conditions_data.get(condition_id)
    if detail is None:
        raise HTTPException(status_code=404, detail=f"Condition not found: {condition_id}")
    return {
        "id": condition_id,
        "favorite": browser.is_favorite(condition_id),
        **detail.model_dump(by_alias=True),
    }


@app.get("/favorites", response_model=FavoritesResponse)
async def list_favorites(browser: CatalogBrowser = Depends(get_browser)):
    return FavoritesResponse(count=browser.favorites_count(), favorites=sorted(browser.favorites.ids()))


@app.post("/favorites/{condition_id}", response_model=ToggleResponse)
def toggle_favorite(condition_id: str, browser: CatalogBrowser = Depends(get_browser)):
    """Flip a condition in or out of the favorites set."""
    try:
        favorite = browser.favorites.toggle(condition_id)
    except FavoritesWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ToggleResponse(condition_id=condition_id, favorite=favorite, count=browser.favorites_count())


@app.post("/reload")
def reload_catalog(browser: CatalogBrowser = Depends(get_browser)):
    """Fetch the catalog again; the previous data is kept on failure."""
    browser.dismiss_notice()
    if not browser.reload():
        detail = browser.notice.message if browser.notice else "Catalog not loaded"
        raise HTTPException(status_code=502, detail=detail)
    return {
        "systems": len(browser.catalog.systems),
        "conditions": len(browser.catalog.conditions),
    }


if __name__ == "__main__":
    import uvicorn
    setup_logging(logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
