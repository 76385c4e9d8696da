"""
Product image routes - background replacement, upload and reordering.
All image data lives in Shopify; these endpoints only relay it.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool
from config.config import Config
from models.image_models import (
    EditRequest,
    ErrorResponse,
    ImagePositionUpdate,
    ImageUpload,
    RemoveBackgroundResponse
)
from routes.dependencies import (
    get_app_config,
    get_openai_service,
    get_retry_policy,
    get_shopify_service
)
from utils.errors import InvalidImageError, NotFoundError, ProxyError, UpstreamError
from utils.image_tools import build_white_mask, to_editable_source
from utils.openai_service import OpenAIImageService
from utils.retry import RetryPolicy
from utils.shopify_service import ShopifyService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _strip_data_uri(image_base64: str) -> str:
    # Remove o prefixo data URI (data:image/jpeg;base64,...)
    if "base64," in image_base64:
        return image_base64.split("base64,", 1)[1]
    return image_base64


@router.post(
    "/remove-bg/{productId}/{imageId}",
    response_model=RemoveBackgroundResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def remove_background(
    productId: int,
    imageId: int,
    config: Config = Depends(get_app_config),
    shopify: ShopifyService = Depends(get_shopify_service),
    image_editor: OpenAIImageService = Depends(get_openai_service),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
):
    """
    Replace the background of a product image with a studio white one.

    Path Parameters:
    - productId: Shopify product ID
    - imageId: ID of one of the product's images

    Returns the URL of the generated image; the product itself is not changed.
    """
    try:
        # 1) Locate the image on the product
        images = await shopify.get_product_images(productId)
        image = next((img for img in images if img.id == imageId), None)
        if image is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Imagem não encontrada."
            )

        # 2) Download and convert in memory
        raw_bytes = await shopify.download_image(image.src)
        source_png, width, height = await run_in_threadpool(
            to_editable_source, raw_bytes, config.MAX_SOURCE_WIDTH
        )
        mask_png = await run_in_threadpool(build_white_mask, width, height)

        edit_request = EditRequest(
            source_image=source_png,
            mask_image=mask_png,
            prompt=config.EDIT_PROMPT,
            variant_count=config.EDIT_VARIANT_COUNT,
            output_size=config.EDIT_OUTPUT_SIZE
        )

        # 3) Generate the new background, retrying 5xx answers
        new_image_url = await retry_policy.run(lambda: image_editor.edit_image(edit_request))

        logger.info(f"New background generated for image {imageId} of product {productId}")
        return RemoveBackgroundResponse(newImageUrl=new_image_url)

    except HTTPException:
        raise
    except NotFoundError as e:
        logger.warning(f"Product {productId} not found while removing background: {e}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Imagem não encontrada."
        )
    except InvalidImageError as e:
        logger.error(f"Could not decode image {imageId} of product {productId}: {e}")
        raise HTTPException(
            status_code=422,
            detail=e.message
        )
    except ProxyError as e:
        logger.error(f"Error generating new background for image {imageId}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message
        )
    except Exception as e:
        logger.exception(f"Unexpected error generating new background for image {imageId}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro ao gerar novo background."
        )


@router.post("/upload/{productId}")
async def upload_image(
    productId: int,
    body: ImageUpload,
    shopify: ShopifyService = Depends(get_shopify_service),
):
    """
    Attach a new base64 image to a product.
    Returns Shopify's created image as-is.
    """
    try:
        result = await shopify.upload_image(productId, _strip_data_uri(body.imageBase64))
        logger.info(f"Image uploaded to product {productId}")
        return result

    except Exception as e:
        logger.error(f"Error uploading image to product {productId}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro ao enviar imagem."
        )


@router.put("/imagem/{productId}/{imageId}")
async def reorder_image(
    productId: int,
    imageId: int,
    body: ImagePositionUpdate,
    shopify: ShopifyService = Depends(get_shopify_service),
):
    """
    Move an image inside the product's gallery.
    Positions lower than 1 are treated as 1. Shopify's status is mirrored on failure.
    """
    try:
        return await shopify.reorder_image(productId, imageId, body.position)

    except UpstreamError as e:
        logger.error(f"Error reordering image {imageId} of product {productId}: {e} {e.payload}")
        raise HTTPException(
            status_code=e.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro ao reordenar imagem."
        )
    except Exception as e:
        logger.error(f"Error reordering image {imageId} of product {productId}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro ao reordenar imagem."
        )
