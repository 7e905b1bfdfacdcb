"""
Fetches the formula and cask catalogs from the Homebrew JSON API.
"""

import asyncio
import logging
from typing import Optional, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from brewdeck.catalog.models import Cask, Formula
from brewdeck.config import (
    DEFAULT_CASK_CATALOG_URL,
    DEFAULT_FORMULA_CATALOG_URL,
    DEFAULT_HTTP_TIMEOUT,
)
from brewdeck.exceptions import DecodeException, TransportException

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FORMULA_LIST = TypeAdapter(list[Formula])
_CASK_LIST = TypeAdapter(list[Cask])


class CatalogFetcher:
    """
    Retrieves both remote catalogs concurrently.

    The call succeeds only if both retrievals succeed; there is no retry
    and no partial result.
    """

    def __init__(
        self,
        formula_url: str = DEFAULT_FORMULA_CATALOG_URL,
        cask_url: str = DEFAULT_CASK_CATALOG_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the catalog fetcher.

        Args:
            formula_url: Endpoint returning the formula list
            cask_url: Endpoint returning the cask list
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.formula_url = formula_url
        self.cask_url = cask_url
        self.timeout = timeout
        self.transport = transport

    async def _fetch(self, client: httpx.AsyncClient, url: str, adapter: TypeAdapter[list[T]]) -> list[T]:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportException(
                f"Failed to fetch {url}: {e}",
                details={"url": url},
            ) from e

        try:
            entries = adapter.validate_json(response.content)
        except ValidationError as e:
            raise DecodeException(
                f"Failed to decode catalog from {url}",
                details={"url": url, "errors": e.error_count()},
            ) from e

        logger.info(f"Fetched {len(entries)} catalog entries from {url}")
        return entries

    async def fetch_catalogs(self) -> tuple[list[Formula], list[Cask]]:
        """
        Fetch and decode both catalogs.

        Returns:
            (formulae, casks)

        Raises:
            TransportException: A request failed or returned a non-success status
            DecodeException: A payload was not a valid catalog
        """
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            results = await asyncio.gather(
                self._fetch(client, self.formula_url, _FORMULA_LIST),
                self._fetch(client, self.cask_url, _CASK_LIST),
                return_exceptions=True,
            )

        for result in results:
            if isinstance(result, BaseException):
                logger.error(f"Catalog fetch failed: {result}")
                raise result

        formulae, casks = results
        return formulae, casks
