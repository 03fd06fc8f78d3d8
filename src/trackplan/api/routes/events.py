"""Server-Sent Events (SSE) endpoint."""

import asyncio
from collections.abc import AsyncGenerator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from trackplan.api.dependencies import EventManagerDep

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/stream")
async def event_stream(event_manager: EventManagerDep) -> StreamingResponse:
    """Subscribe to Server-Sent Events stream.

    Emits state changes and alerts. A heartbeat is sent every 30 seconds to
    keep the connection alive.
    """
    subscriber = event_manager.subscribe()

    async def generate() -> AsyncGenerator[str, None]:
        try:
            while True:
                try:
                    # Wait for event with timeout for heartbeat
                    event = await asyncio.wait_for(
                        subscriber.queue.get(),
                        timeout=event_manager._heartbeat_interval,
                    )
                    yield event.to_sse()
                except TimeoutError:
                    yield event_manager.create_heartbeat_event().to_sse()
        except asyncio.CancelledError:
            # Client disconnected
            pass
        finally:
            event_manager.unsubscribe(subscriber.id)

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
