"""
Products API routes - lists the Shopify catalogue for the image manager.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from models.image_models import ErrorResponse
from models.product_models import Product
from routes.dependencies import get_shopify_service
from utils.shopify_service import ShopifyService
import logging

logger = logging.getLogger(__name__)

# Create the router
router = APIRouter()


# --- ROUTES ---

@router.get("/produtos", response_model=List[Product], responses={500: {"model": ErrorResponse}})
async def get_products(shopify: ShopifyService = Depends(get_shopify_service)):
    """
    Get every product from Shopify, most recently created first.
    """
    try:
        return await shopify.list_products()

    except Exception as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro ao buscar produtos."
        )
