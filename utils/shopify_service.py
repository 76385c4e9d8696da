"""
Async client for the Shopify Admin REST API.
Covers the product listing and the product image endpoints used by the
image management screens.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from config.config import Config
from models.product_models import Product, ProductImage
from utils.errors import NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = "id,title,handle,tags,images,created_at"

# Products without a usable created_at go to the end of the list
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _created_at_key(product: Dict[str, Any]) -> datetime:
    value = product.get("created_at")
    if not value or not isinstance(value, str):
        return _OLDEST
    try:
        created_at = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return _OLDEST
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at


def sort_newest_first(products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Order raw Shopify products by created_at, most recent first (stable)."""
    return sorted(products, key=_created_at_key, reverse=True)


class ShopifyService:
    """Stateless wrapper around the Shopify product and image endpoints."""

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.base_url = config.shopify_base_url
        self.timeout = config.HTTP_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.config.SHOPIFY_ACCESS_TOKEN,
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Send a request to the Admin API and return the 2xx response.

        Raises:
            UpstreamError: On network failure or non-2xx status. The status
                code and the decoded body are attached when available.
        """
        url = f"{self.base_url}{path}"
        try:
            async with self._client() as client:
                response = await client.request(method, url, headers=self.headers, **kwargs)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            body = _safe_json(e.response)
            logger.error(f"Shopify {method} {path} failed ({e.response.status_code}): {e.response.text[:500]}")
            raise UpstreamError(
                f"Shopify respondeu {e.response.status_code}",
                status_code=e.response.status_code,
                payload=body,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to connect to Shopify ({method} {path}): {e}")
            raise UpstreamError(f"Falha de conexão com a Shopify: {e}") from e

    async def list_products(self) -> List[Product]:
        """
        Fetch every product with the fields the frontend needs.

        Returns:
            Products sorted by created_at descending, images defaulting to []
        """
        response = await self._request("GET", "/products.json", params={"fields": PRODUCT_FIELDS})
        raw_products = response.json().get("products") or []

        products = []
        for raw in sort_newest_first(raw_products):
            created_at = raw.get("created_at")
            products.append(Product(
                id=raw["id"],
                title=raw.get("title") or "",
                handle=raw.get("handle") or "",
                tags=raw.get("tags") or "",
                images=raw.get("images") or [],
                created_at=str(created_at) if created_at is not None else None,
            ))

        logger.info(f"Fetched {len(products)} products from Shopify")
        return products

    async def get_product_images(self, product_id: int) -> List[ProductImage]:
        """
        Fetch the image list of a single product.

        Raises:
            NotFoundError: If Shopify does not know the product
            UpstreamError: On any other failure
        """
        try:
            response = await self._request("GET", f"/products/{product_id}.json", params={"fields": "images"})
        except UpstreamError as e:
            if e.status_code == 404:
                raise NotFoundError(f"Produto {product_id} não encontrado.", status_code=404) from e
            raise

        product = response.json().get("product") or {}
        return [ProductImage(**image) for image in product.get("images") or []]

    async def download_image(self, src: str) -> bytes:
        """Download the raw bytes of an image from the Shopify CDN."""
        try:
            async with self._client() as client:
                response = await client.get(src, follow_redirects=True)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Image download failed ({e.response.status_code}): {src}")
            raise UpstreamError(
                f"Falha ao baixar a imagem ({e.response.status_code})",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Image download failed: {src}: {e}")
            raise UpstreamError(f"Falha ao baixar a imagem: {e}") from e

        logger.debug(f"Downloaded {len(response.content)} bytes from {src}")
        return response.content

    async def upload_image(self, product_id: int, image_base64: str) -> Dict[str, Any]:
        """
        Attach a base64 encoded image to a product.

        Returns:
            Shopify's response body, e.g. {"image": {"id": ..., "src": ...}}
        """
        payload = {"image": {"attachment": image_base64}}
        response = await self._request("POST", f"/products/{product_id}/images.json", json=payload)
        return response.json()

    async def reorder_image(self, product_id: int, image_id: int, position: int) -> Dict[str, Any]:
        """
        Move an image to a new position in the product's image list.
        Positions below 1 are sent as 1.

        Returns:
            Shopify's response body with the updated image
        """
        payload = {"image": {"id": image_id, "position": max(1, position)}}
        response = await self._request("PUT", f"/products/{product_id}/images/{image_id}.json", json=payload)
        return response.json()


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
