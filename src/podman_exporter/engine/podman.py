# src/podman_exporter/engine/podman.py
"""
PodmanClient queries the libpod REST API for the container inventory and a
live statistics snapshot, and parses both into exporter models.
"""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from ..core.config import config
from ..core.exceptions import EngineError
from ..models.containers import ContainerRecord, InventoryEntry, StatsReport
from ..utils.http_client import get_async_http_client
from .base import BaseEngineClient

logger = logging.getLogger(__name__)


class PodmanClient(BaseEngineClient):
    """
    Talks to a Podman service over a unix socket or HTTP(S).

    One httpx.AsyncClient is kept for the lifetime of the instance so that
    connections are reused across scrapes; call ``close()`` on shutdown.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        api_version: Optional[str] = None,
        verify: Optional[bool] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.uri = uri or config.PODMAN_URI
        self.api_version = (api_version or config.PODMAN_API_VERSION).strip("/")
        verify_certs = config.PODMAN_VERIFY_CERTS if verify is None else verify
        self._client = client or get_async_http_client(self.uri, verify=verify_certs)

    def _path(self, endpoint: str) -> str:
        return f"/{self.api_version}/libpod/{endpoint}"

    async def _get_json(self, endpoint: str, params: dict, what: str) -> Any:
        """
        Internal helper to GET a libpod endpoint and decode its JSON body.

        Raises:
            EngineError: If the request fails, returns an error status, or the body is not JSON.
        """
        path = self._path(endpoint)
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise EngineError(f"{what}: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.debug("Raw response content from %s: %s", path, response.text[:500])
            raise EngineError(f"{what}: response is not valid JSON") from exc

    async def list_inventory(self) -> List[InventoryEntry]:
        """
        Fetches all containers (``all=true`` includes stopped ones).

        Records without an id or a name cannot be labelled and are skipped.
        """
        data = await self._get_json("containers/json", {"all": "true"}, "Containers request")
        if not isinstance(data, list):
            raise EngineError(f"Containers request: expected a JSON list, got {type(data).__name__}")

        entries: List[InventoryEntry] = []
        skipped = 0
        for item in data:
            try:
                record = ContainerRecord.model_validate(item)
            except ValidationError as exc:
                raise EngineError(f"Containers request: malformed container record: {exc}") from exc

            entry = record.to_entry()
            if entry is None:
                skipped += 1
                continue
            entries.append(entry)

        if skipped:
            logger.debug("Skipped %d container record(s) without an id or a name.", skipped)
        logger.debug("Listed %d container(s) from %s", len(entries), self.uri)
        return entries

    async def fetch_stats(self) -> StatsReport:
        """Fetches a single (non-streaming) stats snapshot for all containers."""
        data = await self._get_json("containers/stats", {"stream": "false"}, "Stats request")
        try:
            report = StatsReport.model_validate(data)
        except ValidationError as exc:
            raise EngineError(f"Stats request: malformed stats response: {exc}") from exc

        logger.debug(
            "Fetched %s stat sample(s) from %s",
            len(report.stats) if report.stats is not None else "no",
            self.uri,
        )
        return report

    def describe(self) -> str:
        return f"Podman API {self.uri} ({self.api_version})"

    async def close(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()
        logger.debug("PodmanClient HTTP client closed.")
