"""Key-value endpoint order state repository.

Talks to the board's state endpoint (``modules.state``): ``GET`` returns
the stored array, ``POST`` replaces it.  Each call opens its own
``aiohttp`` session; the board saves at human speed, so connection reuse
buys nothing here.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

import aiohttp
import structlog

from modules.orders.dtos import OrderRecord
from modules.orders.exceptions import StateLoadError, StateSaveError
from modules.orders.repositories.interfaces import IOrderStateRepository
from modules.orders.schema import dump_collection

logger = structlog.get_logger(__name__)


class HttpOrderStateRepository(IOrderStateRepository):
    """Order state kept behind a ``GET``/``POST`` JSON endpoint."""

    name = "http"

    def __init__(self, url: str, token: str = "", timeout: float = 10.0) -> None:
        self.url = url
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def load(self) -> Any:
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(self.url, headers=self._headers()) as response:
                    if response.status != 200:
                        raise StateLoadError(
                            f"Failed to load state: HTTP {response.status} {response.reason}"
                        )
                    return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise StateLoadError(f"Could not load state from {self.url}: {exc}") from exc

    async def save(self, orders: Sequence[OrderRecord]) -> None:
        document = dump_collection(orders)
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(
                    self.url, json=document, headers=self._headers()
                ) as response:
                    if response.status not in (200, 201, 204):
                        body = await response.text()
                        raise StateSaveError(
                            f"State endpoint answered HTTP {response.status}: {body[:200]}"
                        )
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise StateSaveError(f"Could not save state to {self.url}: {exc}") from exc
        logger.info("state.saved", backend=self.name, count=len(document))
