"""Agent server process management for `opencode serve`.

The server prints `opencode server listening on <url>` once it has bound a
port. Config is passed as JSON through OPENCODE_CONFIG_CONTENT so nothing is
written to disk.
"""

import asyncio
import json
import os
import shutil
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from . import config
from .errors import ServerStartError
from .logging_config import get_logger

logger = get_logger(__name__)

OPENCODE_COMMAND = ("opencode",)
LISTENING_PREFIX = "opencode server listening"
STOP_TIMEOUT = 5.0  # seconds between terminate and kill


def parse_listening_url(line: str) -> str | None:
    """Return the URL from a `... listening on <url>` line, else None."""
    if not line.startswith(LISTENING_PREFIX):
        return None
    _, sep, rest = line.partition(" on ")
    if not sep:
        return None
    url = rest.strip().split()[0] if rest.strip() else ""
    return url or None


class AgentServer:
    """A running `opencode serve` child process."""

    def __init__(self, proc: asyncio.subprocess.Process, url: str):
        self.proc = proc
        self.url = url
        self._drain_task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self.proc.returncode is None

    def start_draining(self) -> None:
        """Keep reading server output so the pipe never fills up."""
        self._drain_task = asyncio.create_task(self._drain())

    async def _drain(self) -> None:
        stdout = self.proc.stdout
        if stdout is None:
            return
        async for raw in stdout:
            logger.debug("[server] %s", raw.decode("utf-8", errors="replace").rstrip())

    async def close(self) -> None:
        """Terminate the process, killing it if it ignores SIGTERM."""
        if self._drain_task is not None:
            self._drain_task.cancel()
            try:
                await self._drain_task
            except asyncio.CancelledError:
                pass
            self._drain_task = None
        if not self.running:
            return
        try:
            self.proc.terminate()
            await asyncio.wait_for(self.proc.wait(), timeout=STOP_TIMEOUT)
        except ProcessLookupError:
            return
        except asyncio.TimeoutError:
            logger.warning("Server pid %d did not stop, killing", self.proc.pid)
            try:
                self.proc.kill()
            except ProcessLookupError:
                return
            await self.proc.wait()


async def _wait_for_url(proc: asyncio.subprocess.Process, output: list[str]) -> str:
    stdout = proc.stdout
    if stdout is None:
        raise ServerStartError("Failed to capture stdout from server process")
    async for raw in stdout:
        line = raw.decode("utf-8", errors="replace").rstrip()
        output.append(line)
        url = parse_listening_url(line)
        if url:
            return url
    await proc.wait()
    message = f"Server exited with code {proc.returncode}"
    if output:
        message += "\n" + "\n".join(output)
    raise ServerStartError(message)


async def spawn_server(
    hostname: str = config.HOSTNAME,
    port: int = config.PORT,
    server_config: dict[str, Any] | None = None,
    timeout: float = config.SERVER_START_TIMEOUT,
    command: Sequence[str] = OPENCODE_COMMAND,
) -> AgentServer:
    """Start the server and wait until it reports its URL."""
    if server_config is None:
        server_config = config.get_server_config()
    if shutil.which(command[0]) is None:
        raise ServerStartError(f"{command[0]} not found in PATH")

    env = {**os.environ, "OPENCODE_CONFIG_CONTENT": json.dumps(server_config)}
    proc = await asyncio.create_subprocess_exec(
        *command,
        "serve",
        f"--hostname={hostname}",
        f"--port={port}",
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        env=env,
    )

    output: list[str] = []
    try:
        url = await asyncio.wait_for(_wait_for_url(proc, output), timeout=timeout)
    except asyncio.TimeoutError:
        await AgentServer(proc, "").close()
        raise ServerStartError(f"Timed out after {timeout}s waiting for server to start") from None
    except BaseException:
        await AgentServer(proc, "").close()
        raise

    logger.info("Server pid %d listening on %s", proc.pid, url)
    server = AgentServer(proc, url)
    server.start_draining()
    return server


@asynccontextmanager
async def start_server(**kwargs: Any) -> AsyncIterator[AgentServer]:
    """Run the server for the duration of the block; always closed on exit."""
    server = await spawn_server(**kwargs)
    try:
        yield server
    finally:
        await server.close()
