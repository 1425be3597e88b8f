"""Tests for the Apper record store client."""
import json

import httpx
import pytest

from app.core.exceptions import TransportError
from app.integrations.apper import ApperClient, ApperMode


@pytest.mark.asyncio
async def test_stub_mode_create_and_fetch(apper_client):
    """Stub mode should answer with the hosted store's envelopes."""
    assert apper_client.mode == ApperMode.STUB

    created = await apper_client.create_record("task30", {"records": [{"title": "Stub task"}]})
    assert created.success is True
    assert created.results[0].success is True
    assert created.results[0].data["Id"] == 1

    fetched = await apper_client.fetch_records("task30", {"fields": ["title"]})
    assert fetched.totalCount == 1
    assert fetched.data == [{"Id": 1, "title": "Stub task"}]


@pytest.mark.asyncio
async def test_stub_mode_reports_missing_records_per_record(apper_client):
    response = await apper_client.delete_record("task30", {"RecordIds": [404]})

    assert response.success is True
    assert response.results[0].success is False
    assert response.results[0].message == "Record does not exist"


@pytest.mark.asyncio
async def test_stub_mode_unsupported_operator_is_transport_error(apper_client):
    params = {"where": [{"fieldName": "title", "operator": "Regex", "values": ["x"]}]}
    await apper_client.create_record("task30", {"records": [{"title": "x"}]})

    with pytest.raises(TransportError):
        await apper_client.fetch_records("task30", params)


@pytest.mark.asyncio
async def test_live_mode_request_payload():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["headers"] = dict(request.headers)
        captured["json"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"success": True, "results": [{"success": True, "data": {"Id": 7, "title": "Live"}}]},
        )

    client = ApperClient(
        mode="live",
        base_url="https://store.example.com/v1/records/",
        project_id="proj-1",
        public_key="pk-123",
        transport=httpx.MockTransport(handler),
    )
    response = await client.create_record("task30", {"records": [{"title": "Live"}]})
    await client.aclose()

    assert response.results[0].data == {"Id": 7, "title": "Live"}
    assert captured["method"] == "POST"
    assert captured["url"] == "https://store.example.com/v1/records/task30/create"
    assert captured["headers"]["x-apper-project-id"] == "proj-1"
    assert captured["headers"]["authorization"] == "Bearer pk-123"
    assert captured["json"] == {"records": [{"title": "Live"}]}


@pytest.mark.asyncio
async def test_live_mode_routes_each_operation():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        if request.url.path.endswith("/fetch"):
            return httpx.Response(200, json={"data": [], "totalCount": 0})
        if "/get/" in request.url.path:
            return httpx.Response(200, json={"data": None})
        return httpx.Response(200, json={"success": True, "results": []})

    client = ApperClient(mode="live", base_url="https://store.example.com", transport=httpx.MockTransport(handler))
    await client.fetch_records("category2", {})
    await client.get_record_by_id("category2", 5, {})
    await client.update_record("category2", {"records": []})
    await client.delete_record("category2", {"RecordIds": []})
    await client.aclose()

    assert seen == [
        ("POST", "/category2/fetch"),
        ("POST", "/category2/get/5"),
        ("PUT", "/category2/update"),
        ("DELETE", "/category2/delete"),
    ]


@pytest.mark.asyncio
async def test_live_mode_http_error_raises_transport_error():
    client = ApperClient(
        mode="live",
        base_url="https://store.example.com",
        transport=httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable")),
    )

    with pytest.raises(TransportError) as exc_info:
        await client.fetch_records("task30", {})
    await client.aclose()

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_live_mode_connection_error_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ApperClient(mode="live", base_url="https://store.example.com", transport=httpx.MockTransport(handler))

    with pytest.raises(TransportError):
        await client.delete_record("task30", {"RecordIds": [1]})
    await client.aclose()


@pytest.mark.asyncio
async def test_live_mode_malformed_body_raises_transport_error():
    client = ApperClient(
        mode="live",
        base_url="https://store.example.com",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>")),
    )

    with pytest.raises(TransportError):
        await client.fetch_records("task30", {})
    await client.aclose()


@pytest.mark.asyncio
async def test_live_mode_without_base_url():
    client = ApperClient(mode="live", base_url="")

    with pytest.raises(TransportError):
        await client.fetch_records("task30", {})
