"""Install runner: drives one agent session from prompt to idle."""

import asyncio
import time
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from .client import OpencodeClient
from .logging_config import get_logger
from .prompts import build_prompt, build_system_prompt, session_title
from .reconciler import StreamReconciler
from .render import TerminalWriter
from .server import AgentServer, start_server

logger = get_logger(__name__)

ServerFactory = Callable[[], AbstractAsyncContextManager[AgentServer]]
ClientFactory = Callable[[str], Any]


async def _cancel(task: asyncio.Task[None]) -> None:
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception:
        # The caller is already raising; keep its error
        logger.debug("Event stream task failed while cancelling", exc_info=True)


async def run_install(
    package: str,
    writer: TerminalWriter | None = None,
    *,
    server_factory: ServerFactory = start_server,
    client_factory: ClientFactory = OpencodeClient,
) -> None:
    """Ask the agent to install `package` and stream its work to the terminal.

    Raises ServerStartError or ApiError on collaborator failures; the server
    is closed before the error leaves this function.
    """
    if writer is None:
        writer = TerminalWriter()
    started = time.monotonic()

    try:
        async with server_factory() as server:
            writer.header(f"Server running at {server.url}")

            async with client_factory(server.url) as client:
                session = await client.create_session(session_title("install", package))
                logger.info("Session: %s", session.id)

                async with client.subscribe() as events:
                    reconciler = StreamReconciler(session.id, writer)
                    stream_task = asyncio.create_task(reconciler.run(events))
                    try:
                        await client.prompt_async(session.id, build_system_prompt(), build_prompt(package))
                    except BaseException:
                        await _cancel(stream_task)
                        raise
                    # The prompt call may return before or after the stream finishes
                    await stream_task

            writer.newline()
    except Exception as e:
        duration = time.monotonic() - started
        logger.error("Install of %s FAILED (%.1fs): %s: %s", package, duration, type(e).__name__, e)
        raise

    logger.info("Install of %s finished (%.1fs)", package, time.monotonic() - started)
