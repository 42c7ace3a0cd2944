"""GitHub Gist order state repository.

The collection lives as a single JSON file inside a Gist.  Loading reads
``files[<filename>].content`` from the Gist API; saving ``PATCH``es that
file's content.  Writes need a personal access token with the ``gist``
scope; reads of a public Gist work without one.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Sequence

import aiohttp
import structlog

from modules.orders.dtos import OrderRecord
from modules.orders.exceptions import StateLoadError, StateSaveError
from modules.orders.repositories.interfaces import IOrderStateRepository
from modules.orders.schema import dump_collection

logger = structlog.get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GistOrderStateRepository(IOrderStateRepository):
    """Order state stored in one file of a GitHub Gist."""

    name = "gist"

    def __init__(
        self,
        gist_id: str,
        token: str = "",
        filename: str = "appState.json",
        timeout: float = 10.0,
        api_url: str = GITHUB_API_URL,
    ) -> None:
        self.gist_id = gist_id
        self.filename = filename
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self.url = f"{api_url.rstrip('/')}/gists/{gist_id}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        return headers

    async def load(self) -> Any:
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(self.url, headers=self._headers()) as response:
                    if response.status != 200:
                        raise StateLoadError(
                            f"Failed to load Gist {self.gist_id}: HTTP {response.status}"
                        )
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise StateLoadError(f"Could not load Gist {self.gist_id}: {exc}") from exc

        try:
            content = payload["files"][self.filename]["content"]
        except (KeyError, TypeError):
            logger.info("state.gist_file_missing", gist_id=self.gist_id, filename=self.filename)
            return []
        try:
            return json.loads(content) if content.strip() else []
        except (AttributeError, json.JSONDecodeError) as exc:
            raise StateLoadError(
                f"Gist file {self.filename} does not hold valid JSON: {exc}"
            ) from exc

    async def save(self, orders: Sequence[OrderRecord]) -> None:
        document = dump_collection(orders)
        body = {
            "files": {
                self.filename: {
                    "content": json.dumps(document, indent=2, ensure_ascii=False)
                }
            }
        }
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.patch(
                    self.url, json=body, headers=self._headers()
                ) as response:
                    if response.status != 200:
                        text = await response.text()
                        raise StateSaveError(
                            f"Gist {self.gist_id} answered HTTP {response.status}: {text[:200]}"
                        )
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise StateSaveError(f"Could not save Gist {self.gist_id}: {exc}") from exc
        logger.info("state.saved", backend=self.name, count=len(document))
