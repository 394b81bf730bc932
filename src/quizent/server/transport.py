"""Line transport: one JSON request in, one JSON response out."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Callable, Optional

from .handler import ServerHandler
from .protocol import RequestId, Response

logger = logging.getLogger(__name__)


def _request_id(msg) -> RequestId:
    if isinstance(msg, dict) and isinstance(msg.get("id"), (int, str)):
        return msg["id"]
    return 0


async def handle_line(handler: ServerHandler, line: str) -> Optional[str]:
    """Answer a single request line. Blank lines get no reply."""
    line = line.strip()
    if not line:
        return None

    try:
        msg = json.loads(line)
    except json.JSONDecodeError as e:
        return Response(error=f"Invalid JSON: {e}").to_json_line()

    req_id = _request_id(msg)
    try:
        result = await handler.dispatch(msg)
    except Exception as e:
        logger.error("Request %s failed: %s", req_id, e)
        return Response(id=req_id, error=str(e)).to_json_line()
    return Response(id=req_id, result=result).to_json_line()


async def serve(
    handler: ServerHandler,
    reader: asyncio.StreamReader,
    write: Callable[[str], None],
) -> int:
    """Answer requests until the reader hits EOF; returns the count handled."""
    handled = 0
    while True:
        line = await reader.readline()
        if not line:
            return handled
        reply = await handle_line(handler, line.decode("utf-8", errors="replace"))
        if reply is not None:
            write(reply)
            handled += 1
