import asyncio
import json
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse

from services.auth_service import tokens
from services.realtime import feed

router = APIRouter(prefix="/realtime", tags=["realtime"])

KEEPALIVE_SECONDS = 15


def _sse(data: dict) -> str:
    return f"data: {json.dumps(data, ensure_ascii=False, default=str)}\n\n"


# ✅ [STREAM] EventSource cannot send headers, so the token comes as a query parameter
@router.get("/stream")
async def stream_changes(token: Optional[str] = Query(None)):
    if not token or tokens.resolve(token) is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    async def event_stream():
        async with feed.subscribe() as queue:
            yield _sse({"type": "start"})
            while True:
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield _sse(event)

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
