"""Tests for the HTTP API"""
import pytest
from fastapi.testclient import TestClient

from pharmabook.api.main import app, get_browser
from pharmabook.favorites.storage import MemoryStorage
from pharmabook.favorites.store import KeyValueFavoritesStore
from pharmabook.view.state import CatalogBrowser


@pytest.fixture
def browser(source, favorites):
    b = CatalogBrowser(source, favorites)
    b.reload()
    return b


@pytest.fixture
def client(browser):
    app.dependency_overrides[get_browser] = lambda: browser
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["data_available"] is True


def test_systems(client):
    body = client.get("/systems").json()
    assert [s["id"] for s in body] == ["respiratorio", "digestivo", "pele"]
    assert body[0]["count"] == 3


def test_conditions_filters(client):
    body = client.get("/conditions", params={"system": "respiratorio", "q": "asm"}).json()
    assert body["count"] == 2
    assert [c["id"] for c in body["conditions"]] == ["asma", "bronquite"]


def test_conditions_portuguese_tab(client):
    assert client.get("/conditions", params={"tab": "em-breve"}).json()["count"] == 0


def test_conditions_bad_tab(client):
    assert client.get("/conditions", params={"tab": "recent"}).status_code == 400


def test_condition_detail(client):
    body = client.get("/conditions/azia").json()
    assert body["system"] == "Digestivo"
    assert body["alertSigns"] == []
    assert body["medications"][0]["mip"] is True
    assert body["favorite"] is False


def test_condition_not_found(client):
    assert client.get("/conditions/gota").status_code == 404


def test_toggle_favorite(client):
    r = client.post("/favorites/asma")
    assert r.json() == {"condition_id": "asma", "favorite": True, "count": 1}
    assert client.get("/favorites").json() == {"count": 1, "favorites": ["asma"]}
    assert client.get("/conditions", params={"tab": "favorites"}).json()["count"] == 1


def test_reload_failure_keeps_data(client, source):
    source.fail_on = "systems"
    r = client.post("/reload")
    assert r.status_code == 502
    assert client.get("/systems").json()[0]["id"] == "respiratorio"
    assert client.get("/health").json()["error"] is not None


def test_reload(client):
    assert client.post("/reload").json() == {"systems": 3, "conditions": 4}


def test_toggle_keeps_load_error_visible(client, source):
    source.fail_on = "conditions"
    client.post("/reload")

    assert client.post("/favorites/asma").status_code == 200
    assert client.get("/health").json()["error"] is not None


def test_toggle_write_failure(source):
    class ReadOnlyStorage(MemoryStorage):
        def set_item(self, key, value):
            raise OSError("read-only")

    browser = CatalogBrowser(source, KeyValueFavoritesStore(ReadOnlyStorage()))
    browser.reload()
    app.dependency_overrides[get_browser] = lambda: browser
    try:
        r = TestClient(app).post("/favorites/asma")
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    assert "read-only" in r.json()["detail"]
    assert not browser.is_favorite("asma")
