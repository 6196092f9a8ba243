"""
Network reachability monitor.

Polls the Supabase Auth health endpoint and keeps an advisory "online" flag.
Callers use it to disable write affordances while offline; nothing in the
data layer enforces it.
"""

import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class ConnectivityMonitor:
    """
    Tracks whether the document backend is reachable.

    The flag starts optimistic (online) and is updated by check(), either
    on demand or from the background loop started with start().
    """

    HEALTH_PATH = "/auth/v1/health"

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        interval: float = 15.0,
        timeout: float = 5.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._interval = interval
        self._timeout = timeout
        self._online = True
        self._task: Optional[asyncio.Task] = None

    @property
    def is_online(self) -> bool:
        return self._online

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def check(self) -> bool:
        """Probe the backend once and update the flag."""
        if not self.is_configured:
            return self._online

        headers = {"apikey": self._api_key} if self._api_key else {}
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self._base_url}{self.HEALTH_PATH}",
                    headers=headers,
                    timeout=self._timeout,
                )
            online = response.status_code < 500
        except httpx.HTTPError as e:
            logger.debug(f"Connectivity probe failed: {e}")
            online = False

        if online != self._online:
            logger.info(f"Backend is now {'online' if online else 'offline'}")
        self._online = online
        return online

    async def _run(self) -> None:
        while True:
            await self.check()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start background polling on the running event loop."""
        if not self.is_configured or self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Stop background polling."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
