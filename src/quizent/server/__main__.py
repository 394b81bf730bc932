"""Run the quiz server over stdin/stdout: ``python -m quizent.server``.

Logging goes to stderr so stdout carries only protocol lines.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from .handler import ServerHandler
from .transport import serve

logger = logging.getLogger("quizent.server")


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


async def main() -> None:
    handler = ServerHandler()
    reader = asyncio.StreamReader()
    await asyncio.get_running_loop().connect_read_pipe(
        lambda: asyncio.StreamReaderProtocol(reader), sys.stdin
    )
    logger.info("Serving %d quizzes", len(handler.bank.get_quizzes()))
    try:
        handled = await serve(handler, reader, _write_stdout)
    finally:
        await handler.recommender.aclose()
    logger.info("Input closed after %d requests", handled)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, stream=sys.stderr, format="%(levelname)s %(message)s")
    asyncio.run(main())
