from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional


class ImageUpload(BaseModel):
    """Imagem em base64 para anexar ao produto"""
    imageBase64: str = Field(..., min_length=1)  # Base64, with or without data URI prefix


class ImagePositionUpdate(BaseModel):
    """Nova posição da imagem na lista do produto"""
    position: int


class RemoveBackgroundResponse(BaseModel):
    newImageUrl: str


class ErrorResponse(BaseModel):
    erro: str
    detalhes: Optional[List[Any]] = None


class EditRequest(BaseModel):
    """Payload sent to the image edit service for one background replacement."""
    source_image: bytes
    mask_image: bytes
    prompt: str
    variant_count: int = Field(1, ge=1)
    output_size: str = "1024x1024"

    model_config = ConfigDict(frozen=True)
