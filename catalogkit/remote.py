"""Async client for the remote catalog service."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx

from .config import ClientConfig
from .errors import RemoteSyncError, ResolutionError
from .models import Product, parse_products
from .network import build_api_url, normalise_base_url, product_path

logger = logging.getLogger(__name__)


class RemoteCatalog(Protocol):
    """CRUD boundary the mutator and session talk to."""

    async def list_products(self) -> list[Product]: ...

    async def create_product(self, product: Product) -> dict[str, Any]: ...

    async def update_product(self, product: Product) -> dict[str, Any]: ...

    async def delete_product(self, product_id: int) -> None: ...


def _payload(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class RemoteCatalogClient:
    """httpx-based implementation of :class:`RemoteCatalog`."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = normalise_base_url(base_url)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "RemoteCatalogClient":
        return cls(config.api_base_url, timeout=config.request_timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RemoteCatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, *, json: Any = None) -> dict[str, Any]:
        url = build_api_url(self.base_url, path)
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            raise RemoteSyncError(f"{method} {path} failed: {exc}") from exc

        payload = _payload(response)
        if response.status_code == 404:
            raise ResolutionError(payload.get("error") or "Product not found", status=404)
        if response.is_error:
            message = payload.get("error") or response.reason_phrase or "request failed"
            raise RemoteSyncError(str(message), status=response.status_code)
        return payload

    async def list_products(self) -> list[Product]:
        payload = await self._request("GET", product_path())
        records = payload.get("products")
        if not isinstance(records, list):
            raise RemoteSyncError("catalog response has no product list")
        return parse_products(r for r in records if isinstance(r, dict))

    async def get_product(self, product_id: int | str) -> Product:
        payload = await self._request("GET", product_path(product_id))
        return Product.model_validate(payload.get("product", payload))

    async def create_product(self, product: Product) -> dict[str, Any]:
        return await self._request("POST", product_path(), json=product.to_wire())

    async def update_product(self, product: Product) -> dict[str, Any]:
        return await self._request(
            "PUT", product_path(product.id), json=product.remote_update_body()
        )

    async def delete_product(self, product_id: int) -> None:
        await self._request("DELETE", product_path(product_id), json={"id": product_id})
