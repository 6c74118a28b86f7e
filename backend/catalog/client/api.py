"""HTTP client for the product search endpoint."""

import asyncio
import logging
from typing import Optional

import httpx
from pydantic import TypeAdapter

from catalog.config import settings
from catalog.schemas.product import ProductOut

logger = logging.getLogger(__name__)

_page_adapter = TypeAdapter(list[ProductOut])


class ProductsClient:
    """Fetches pages from `GET /products/search`.

    Errors are not caught here: a non-2xx status raises
    `httpx.HTTPStatusError`, a body that is not a list of products raises
    `pydantic.ValidationError`, and transport failures raise the matching
    `httpx` exception.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        query: Optional[str] = None,
        fetch_delay: Optional[float] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.query = query
        if fetch_delay is None:
            fetch_delay = settings.client_fetch_delay_ms / 1000
        self.fetch_delay = fetch_delay
        if timeout is None:
            timeout = settings.client_timeout_seconds
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout,
            transport=transport,
        )

    async def search(
        self, cursor: int, limit: int, query: Optional[str] = None
    ) -> list[ProductOut]:
        params = {"from": cursor, "limit": limit}
        if query:
            params["query"] = query

        if self.fetch_delay:
            await asyncio.sleep(self.fetch_delay)

        response = await self._client.get("/products/search", params=params)
        response.raise_for_status()
        page = _page_adapter.validate_python(response.json())
        logger.debug(f"Fetched {len(page)} products at offset {cursor}")
        return page

    async def fetch_page(self, cursor: int, page_size: int) -> list[ProductOut]:
        """Loader fetch callable: one page at `cursor` using this client's query."""
        return await self.search(cursor, page_size, query=self.query)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ProductsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
