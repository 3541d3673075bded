"""Endpoint Fetcher — fetch-and-parse hook for remote JSON data.

Extension point only: no widget fetches from an endpoint on its own. The
registry calls this when a user explicitly imports from a URL.
"""

import logging

import httpx

from gridboard.core.config import settings
from gridboard.schemas.data_source import Row
from gridboard.services.file_ingestion import FileParseError, IngestionError, rows_from_json

logger = logging.getLogger(__name__)


class EndpointFetcher:
    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float | None = None):
        self._client = client
        self._timeout = timeout if timeout is not None else settings.fetch.fetch_timeout

    async def fetch_rows(self, endpoint: str) -> list[Row]:
        """GET the endpoint and normalise its JSON body into rows."""
        try:
            if self._client is not None:
                response = await self._client.get(endpoint, timeout=self._timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(endpoint, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.warning("Fetch from %s failed", endpoint, exc_info=True)
            raise IngestionError(f"Error fetching data: {exc}") from exc

        if not response.is_success:
            raise IngestionError(f"HTTP error! status: {response.status_code}")

        try:
            document = response.json()
        except ValueError as exc:
            raise FileParseError(f"Endpoint did not return JSON: {exc}") from exc
        return rows_from_json(document)
