"""Public listing, admin, and change-stream endpoints."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Query, Request, WebSocket, status

from ..schemas import properties as properties_schema
from ..services import properties as properties_service
from ..services.property_store import PropertyStore

router = APIRouter()
admin_router = APIRouter()


def get_property_store(request: Request) -> PropertyStore:
    """FastAPI dependency returning the store built at startup."""

    return request.app.state.property_store


@router.get("", response_model=properties_schema.PropertyListResponse)
async def list_properties(
    store: PropertyStore = Depends(get_property_store),
) -> properties_schema.PropertyListResponse:
    """Return listings visible on the public site."""

    return properties_service.list_public(store)


@router.websocket("/changes")
async def property_changes(websocket: WebSocket) -> None:
    """Push a message whenever the merged listing view may have changed."""

    store: PropertyStore = websocket.app.state.property_store
    await websocket.accept()

    # Notices raised while a send is in flight collapse into one.
    changed = asyncio.Event()
    unsubscribe = store.subscribe(changed.set)
    receiver = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        await websocket.send_json({"type": "subscribed", "mode": store.mode})
        while await _wait_for_change(changed, receiver):
            await websocket.send_json({"type": "properties_updated"})
    finally:
        unsubscribe()
        receiver.cancel()


@router.get("/{property_id}", response_model=properties_schema.PropertyView)
async def get_property(
    property_id: str,
    store: PropertyStore = Depends(get_property_store),
) -> properties_schema.PropertyView:
    """Return one public listing."""

    return properties_service.get_public(store, property_id)


@admin_router.get("", response_model=properties_schema.PropertyListResponse)
async def admin_list_properties(
    visibility: properties_schema.VisibilityFilter = Query(default="all"),
    store: PropertyStore = Depends(get_property_store),
) -> properties_schema.PropertyListResponse:
    """Return every listing for the admin table."""

    return properties_service.list_admin(store, visibility)


@admin_router.get("/{property_id}", response_model=properties_schema.PropertyView)
async def admin_get_property(
    property_id: str,
    store: PropertyStore = Depends(get_property_store),
) -> properties_schema.PropertyView:
    return properties_service.get_admin(store, property_id)


@admin_router.post("", response_model=properties_schema.PropertyView, status_code=status.HTTP_201_CREATED)
async def admin_create_property(
    form: properties_schema.PropertyForm,
    store: PropertyStore = Depends(get_property_store),
) -> properties_schema.PropertyView:
    """Create a custom listing from the edit form."""

    return await properties_service.save_from_form(store, form)


@admin_router.put("/{property_id}", response_model=properties_schema.PropertyView)
async def admin_update_property(
    property_id: str,
    form: properties_schema.PropertyForm,
    store: PropertyStore = Depends(get_property_store),
) -> properties_schema.PropertyView:
    """Update a listing; editing a built-in one creates its custom override."""

    return await properties_service.save_from_form(store, form, existing_id=property_id)


@admin_router.post("/{property_id}/visibility", response_model=properties_schema.PropertyView)
async def admin_toggle_visibility(
    property_id: str,
    store: PropertyStore = Depends(get_property_store),
) -> properties_schema.PropertyView:
    return await properties_service.toggle_visibility(store, property_id)


@admin_router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def admin_delete_property(
    property_id: str,
    store: PropertyStore = Depends(get_property_store),
) -> None:
    """Delete a custom listing."""

    await properties_service.delete_property(store, property_id)


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


async def _wait_for_change(changed: asyncio.Event, disconnected: asyncio.Task[None]) -> bool:
    """Wait for the next change notice; False once the client has gone."""

    waiter = asyncio.create_task(changed.wait())
    try:
        done, _ = await asyncio.wait({waiter, disconnected}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
    if disconnected in done:
        return False
    changed.clear()
    return True
