"""
Catalog API routes: reload the remote catalogs and search them.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from brewdeck.catalog.state import CatalogState
from brewdeck.config import get_settings
from brewdeck.dependencies import get_catalog_state
from brewdeck.exceptions import BrewDeckException
from brewdeck.services.search import FilterResult, IncrementalFilter, filter_snapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])

DEFAULT_LIMIT = 50


def _counts(state: CatalogState) -> dict:
    snapshot = state.snapshot
    return {
        "formula_count": len(snapshot.formulae),
        "cask_count": len(snapshot.casks),
        "fetched_at": snapshot.fetched_at.isoformat() if snapshot.fetched_at else None,
    }


@router.post("/refresh")
async def refresh_catalog(state: CatalogState = Depends(get_catalog_state)):
    """Fetch both remote catalogs and replace the in-memory snapshot."""
    await state.reload()
    return _counts(state)


@router.get("")
async def search_catalog(
    q: str = Query("", max_length=200, description="Case-insensitive name filter"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=1000, description="Entries returned per catalog"),
    state: CatalogState = Depends(get_catalog_state),
):
    """
    Filter the catalogs once.

    Loads the catalogs on first use. Counts cover all matches; the entry
    lists are truncated to limit.
    """
    snapshot = await state.ensure_loaded()
    return filter_snapshot(snapshot, q).to_dict(limit)


@router.websocket("/search")
async def search_as_you_type(
    websocket: WebSocket,
    limit: int = DEFAULT_LIMIT,
    state: CatalogState = Depends(get_catalog_state),
):
    """
    Search-as-you-type over a WebSocket.

    Each text frame the client sends is a complete query that supersedes
    the previous one. The server replies with a JSON result only for
    queries that were not superseded before their pass completed.
    """
    await websocket.accept()

    try:
        await state.ensure_loaded()
    except BrewDeckException as e:
        await websocket.send_json({"error": e.error_code, "message": e.message})
        await websocket.close()
        return

    updates: asyncio.Queue[FilterResult] = asyncio.Queue()
    search = IncrementalFilter(
        lambda: state.snapshot,
        on_update=updates.put_nowait,
        batch_size=get_settings().filter_batch_size,
    )

    async def send_updates():
        while True:
            result = await updates.get()
            await websocket.send_json(result.to_dict(limit))

    sender = asyncio.create_task(send_updates())
    try:
        while True:
            query = await websocket.receive_text()
            search.set_query(query)
    except WebSocketDisconnect:
        logger.debug("Search client disconnected")
    finally:
        search.cancel()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
