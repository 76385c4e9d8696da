"""
Pydantic models for the product listing.
Shapes follow the Shopify Admin REST API; only the fields the frontend
uses are declared, anything else on an image is passed through.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ProductImage(BaseModel):
    """Image attached to a Shopify product."""
    id: int
    src: str
    position: int = Field(1, description="1-based display order")

    # Keep product_id, alt, width, height... exactly as Shopify sent them
    model_config = ConfigDict(extra="allow")


class Product(BaseModel):
    """Product as returned by GET /api/produtos."""
    id: int
    title: str
    handle: str
    tags: str = ""
    images: List[ProductImage] = []
    created_at: Optional[str] = None
