"""
SSE streaming endpoint for install progress.
Streams coarse progress fractions while brew installs a package.
"""

import asyncio
import json
import logging
from typing import AsyncGenerator, Tuple

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from brewdeck.dependencies import get_synchronizer
from brewdeck.exceptions import BrewDeckException
from brewdeck.inventory.models import PackageKind
from brewdeck.services.synchronizer import InventorySynchronizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stream", tags=["stream"])

# Installs outlive a disconnected client; keep them referenced until done
_background_installs: set[asyncio.Task] = set()


async def sse_generator(events: AsyncGenerator[Tuple[str, dict], None]) -> AsyncGenerator[str, None]:
    """
    Convert async event generator to SSE format.

    Args:
        events: Async generator yielding (event_type, data) tuples

    Yields:
        SSE formatted strings
    """
    async for event_type, data in events:
        yield f"event: {event_type}\ndata: {json.dumps(data)}\n\n"


def _error_event(exc: BrewDeckException) -> Tuple[str, dict]:
    return ("error", {
        "error": exc.error_code,
        "message": exc.message,
        "details": exc.details,
    })


async def install_events(
    synchronizer: InventorySynchronizer,
    name: str,
    kind: PackageKind,
) -> AsyncGenerator[Tuple[str, dict], None]:
    """
    Generate SSE events for an install with progress.

    Progress callbacks only enqueue; this generator is the single consumer
    that turns them into events, in the order they were reported.

    Yields:
        ("progress", {"fraction": float}) for each reported fraction,
        then ("done", {...}) after the inventory refresh, or
        ("error", {...}) if the install or the refresh fails
    """
    progress: asyncio.Queue[float] = asyncio.Queue()
    install = asyncio.create_task(
        synchronizer.install_with_progress(name, kind, progress.put_nowait)
    )
    _background_installs.add(install)
    install.add_done_callback(_background_installs.discard)

    try:
        while not install.done():
            next_fraction = asyncio.create_task(progress.get())
            done, _ = await asyncio.wait(
                {next_fraction, install},
                return_when=asyncio.FIRST_COMPLETED,
            )
            if next_fraction in done:
                yield ("progress", {"fraction": next_fraction.result()})
            else:
                next_fraction.cancel()

        while not progress.empty():
            yield ("progress", {"fraction": progress.get_nowait()})
    finally:
        if not install.done():
            logger.warning(f"Client left during install of {name}; install continues")

    try:
        output = install.result()
    except BrewDeckException as e:
        yield _error_event(e)
        return

    try:
        packages = await synchronizer.refresh()
    except BrewDeckException as e:
        yield _error_event(e)
        return

    yield ("done", {
        "name": name,
        "kind": kind.value,
        "output": output,
        "installed_count": len(packages),
    })


@router.get("/install/{kind}/{name}")
async def stream_install(
    kind: PackageKind,
    name: str,
    synchronizer: InventorySynchronizer = Depends(get_synchronizer),
):
    """
    Install a package and stream progress via SSE.

    Fractions are hints derived from brew's output and may repeat or
    arrive out of order; 1.0 is only sent after brew succeeded. The
    inventory is refreshed before the done event.

    SSE Event Types:
    - progress: {"fraction": float}
    - done: {"name": str, "kind": str, "output": str, "installed_count": int}
    - error: {"error": str, "message": str, "details": dict}
    """
    logger.info(f"Streaming install of {kind.value} {name}")
    return StreamingResponse(
        sse_generator(install_events(synchronizer, name, kind)),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        }
    )
