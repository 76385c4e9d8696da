"""
Client for the OpenAI Images "edits" endpoint.
Sends a source PNG plus a mask and returns the URL of the generated image.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from config.config import Config
from models.image_models import EditRequest
from utils.errors import EditServiceError

logger = logging.getLogger(__name__)

GENERIC_EDIT_ERROR = "Erro ao gerar novo background."


def _error_message(response: httpx.Response) -> str:
    """Extract error.message from an OpenAI error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return GENERIC_EDIT_ERROR
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return GENERIC_EDIT_ERROR


class OpenAIImageService:
    """Bearer-authenticated wrapper around POST /images/edits."""

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = config.OPENAI_API_KEY
        self.edits_url = f"{config.OPENAI_BASE_URL.rstrip('/')}/images/edits"
        self.model = config.OPENAI_IMAGE_MODEL
        self.timeout = config.HTTP_TIMEOUT_SECONDS
        self.transport = transport

    async def edit_image(self, edit_request: EditRequest) -> str:
        """
        Submit an edit and return the first generated image URL.

        Raises:
            EditServiceError: With OpenAI's error message and HTTP status
                (status is None when the service could not be reached)
        """
        files = {
            "image": ("image.png", edit_request.source_image, "image/png"),
            "mask": ("mask.png", edit_request.mask_image, "image/png"),
        }
        data: Dict[str, Any] = {
            "prompt": edit_request.prompt,
            "n": str(edit_request.variant_count),
            "size": edit_request.output_size,
        }
        if self.model:
            data["model"] = self.model

        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.edits_url, headers=headers, data=data, files=files)
        except httpx.HTTPError as e:
            logger.error(f"OpenAI image edit request failed: {e}")
            raise EditServiceError(str(e) or GENERIC_EDIT_ERROR) from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"OpenAI image edit failed ({response.status_code}): {message}")
            raise EditServiceError(message, status_code=response.status_code)

        try:
            url = response.json()["data"][0]["url"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"OpenAI image edit returned no URL: {response.text[:500]}")
            raise EditServiceError("Resposta do serviço de edição sem URL de imagem.") from e

        if not url:
            raise EditServiceError("Resposta do serviço de edição sem URL de imagem.")

        logger.info("OpenAI image edit completed")
        return url
