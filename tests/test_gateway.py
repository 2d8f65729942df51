"""Tests for the data service client, using a mocked transport"""
import json

import httpx
import pytest

from pharmabook.catalog.loader import load_catalog
from pharmabook.errors import GatewayQueryError
from pharmabook.gateway.client import SupabaseGateway
from pharmabook.gateway.schemas import Profile


def make_gateway(handler, **kwargs) -> SupabaseGateway:
    return SupabaseGateway(
        base_url="https://example.supabase.co",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_fetch_systems_query(raw_systems):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["headers"] = request.headers
        return httpx.Response(200, json=raw_systems)

    rows = make_gateway(handler).fetch_systems()

    assert rows == raw_systems
    assert seen["url"].path == "/rest/v1/systems"
    assert seen["url"].params["active"] == "eq.true"
    assert seen["url"].params["order"] == "order_index"
    assert seen["headers"]["apikey"] == "anon-key"
    assert seen["headers"]["authorization"] == "Bearer anon-key"


def test_fetch_conditions_query_embeds_relations(raw_conditions):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json=raw_conditions)

    make_gateway(handler, access_token="user-token").fetch_conditions()

    params = seen["url"].params
    assert seen["url"].path == "/rest/v1/conditions"
    assert params["select"] == "*,systems(slug,name,icon),medications(*)"
    assert params["order"] == "name"
    assert params["active"] == "eq.true"


def test_access_token_is_sent():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == "Bearer user-token"
        return httpx.Response(200, json=[])

    make_gateway(handler, access_token="user-token").fetch_systems()


def test_http_error_becomes_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Invalid API key", "code": "PGRST301"})

    with pytest.raises(GatewayQueryError) as exc:
        make_gateway(handler).fetch_systems()
    assert exc.value.relation == "systems"
    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid API key"


def test_transport_error_becomes_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GatewayQueryError) as exc:
        make_gateway(handler).fetch_conditions()
    assert exc.value.relation == "conditions"
    assert exc.value.status_code is None


def test_non_list_body_is_rejected():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"rows": []})

    with pytest.raises(GatewayQueryError, match="Expected a list"):
        make_gateway(handler).fetch_systems()


def test_load_catalog_over_http(raw_systems, raw_conditions):
    order = []

    def handler(request: httpx.Request) -> httpx.Response:
        relation = request.url.path.rsplit("/", 1)[-1]
        order.append(relation)
        return httpx.Response(200, json=raw_systems if relation == "systems" else raw_conditions)

    catalog = load_catalog(make_gateway(handler))

    assert order == ["systems", "conditions"]
    assert len(catalog.conditions) == 4


def test_load_catalog_stops_on_first_failure():
    order = []

    def handler(request: httpx.Request) -> httpx.Response:
        order.append(request.url.path)
        return httpx.Response(500, text="internal error")

    with pytest.raises(GatewayQueryError) as exc:
        load_catalog(make_gateway(handler))
    assert exc.value.message == "internal error"
    assert order == ["/rest/v1/systems"]


def test_fetch_profile_absent():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["id"] == "eq.u1"
        return httpx.Response(200, json=[])

    assert make_gateway(handler).fetch_profile("u1") is None


def test_insert_profile_conflict_is_tolerated():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert json.loads(request.content)["plan"] == "free"
        return httpx.Response(409, json={"code": "23505", "message": "duplicate key"})

    profile = Profile(id="u1", slug="ana", display_name="Ana")
    assert make_gateway(handler).insert_profile(profile) == profile


def test_insert_profile_other_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"code": "42501", "message": "permission denied"})

    with pytest.raises(GatewayQueryError, match="permission denied"):
        make_gateway(handler).insert_profile(Profile(id="u1", slug="ana", display_name="Ana"))
