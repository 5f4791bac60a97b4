"""HTTP tests for listing, admin, and change-stream endpoints."""
from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from estate import main
from estate.main import app
from estate.routers.properties import _wait_for_change


@pytest.fixture
def client_app(local_store):
    app.state.property_store = local_store
    yield app
    del app.state.property_store


@pytest.mark.asyncio
async def test_public_listing_uses_camel_case(client_app) -> None:
    transport = ASGITransport(app=client_app)

    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/api/properties")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    first = body["items"][0]
    assert first["id"] == "sky-tower-penthouse"
    assert first["source"] == "initial"
    assert first["availabilityInfo"]["label"] == "Available now"
    assert first["rentPricePerYear"] == "AED 450,000"
    assert first["bedroomLabel"] == "4 Bedrooms + Maids"


@pytest.mark.asyncio
async def test_admin_create_update_hide_delete(client_app) -> None:
    transport = ASGITransport(app=client_app)

    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        created = await client.post(
            "/api/admin/properties",
            json={
                "id": "Creek Harbour Loft",
                "name": "Creek Harbour Loft",
                "bedrooms": 3,
                "availability": {"type": "date", "date": "2026-12-01"},
                "galleryImages": [{"url": "https://cdn.example.com/loft.jpg"}],
            },
        )
        assert created.status_code == 201
        assert created.json()["id"] == "creek-harbour-loft"
        assert created.json()["availabilityInfo"]["formattedDate"] == "Dec 1, 2026"

        duplicate = await client.post("/api/admin/properties", json={"id": "creek-harbour-loft", "name": "Again"})
        assert duplicate.status_code == 409

        updated = await client.put("/api/admin/properties/creek-harbour-loft", json={"name": "Loft", "sqft": 2100})
        assert updated.status_code == 200
        assert updated.json()["sqft"] == 2100
        assert updated.json()["bedrooms"] == 3

        hidden = await client.post("/api/admin/properties/creek-harbour-loft/visibility")
        assert hidden.json()["visible"] is False
        assert (await client.get("/api/properties/creek-harbour-loft")).status_code == 404

        admin_hidden = await client.get("/api/admin/properties", params={"visibility": "hidden"})
        assert [item["id"] for item in admin_hidden.json()["items"]] == ["creek-harbour-loft"]

        deleted = await client.delete("/api/admin/properties/creek-harbour-loft")
        assert deleted.status_code == 204
        assert (await client.get("/api/admin/properties/creek-harbour-loft")).status_code == 404


@pytest.mark.asyncio
async def test_invalid_visibility_filter_is_rejected(client_app) -> None:
    transport = ASGITransport(app=client_app)

    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/api/admin/properties", params={"visibility": "archived"})

    assert response.status_code == 422


def test_change_stream_pushes_updates(local_store, monkeypatch) -> None:
    monkeypatch.setattr(main, "build_property_store", lambda _settings: local_store)

    with TestClient(app) as client:
        with client.websocket_connect("/api/properties/changes") as ws:
            assert ws.receive_json() == {"type": "subscribed", "mode": "local"}

            response = client.post("/api/admin/properties", json={"id": "loft", "name": "Loft"})
            assert response.status_code == 201

            assert ws.receive_json() == {"type": "properties_updated"}


@pytest.mark.asyncio
async def test_burst_of_changes_collapses_into_one_notice() -> None:
    changed = asyncio.Event()
    connected = asyncio.create_task(asyncio.Event().wait())
    for _ in range(3):
        changed.set()

    assert await _wait_for_change(changed, connected) is True
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(_wait_for_change(changed, connected), timeout=0.05)

    changed.set()
    assert await _wait_for_change(changed, connected) is True
    connected.cancel()


@pytest.mark.asyncio
async def test_wait_for_change_stops_on_disconnect() -> None:
    changed = asyncio.Event()
    disconnected = asyncio.create_task(asyncio.sleep(0))

    assert await _wait_for_change(changed, disconnected) is False
