"""
Application configuration loaded from environment variables.
Values are read once at startup and shared as an immutable object.
"""

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EDIT_PROMPT = (
    "Remova o background do calçado e gere um fundo branco sólido na cor e8ecea, "
    "iluminação suave de estúdio, sem objetos, sem sombras, clean, estilo e-commerce."
)

REQUIRED_VARIABLES = [
    "SHOPIFY_DOMAIN",
    "SHOPIFY_ACCESS_TOKEN",
    "SHOPIFY_API_VERSION",
    "OPENAI_API_KEY",
]


class Config(BaseModel):
    """Immutable settings for the Shopify and OpenAI collaborators."""

    # Shopify
    SHOPIFY_DOMAIN: str
    SHOPIFY_ACCESS_TOKEN: str
    SHOPIFY_API_VERSION: str

    # OpenAI image edits
    OPENAI_API_KEY: str
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_IMAGE_MODEL: Optional[str] = None
    EDIT_PROMPT: str = DEFAULT_EDIT_PROMPT
    EDIT_OUTPUT_SIZE: str = "1024x1024"
    EDIT_VARIANT_COUNT: int = Field(1, ge=1)
    MAX_SOURCE_WIDTH: int = Field(2048, ge=1)

    # Retry for the image edit call
    RETRY_MAX_ATTEMPTS: int = Field(3, ge=1)
    RETRY_BACKOFF_SECONDS: float = Field(1.0, ge=0)

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    HTTP_TIMEOUT_SECONDS: float = 60.0
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(frozen=True)

    @property
    def shopify_base_url(self) -> str:
        return f"https://{self.SHOPIFY_DOMAIN}/admin/api/{self.SHOPIFY_API_VERSION}"


def load_config(environ: Optional[dict] = None) -> Config:
    """
    Build a Config from a mapping of environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Validated, frozen Config

    Raises:
        ValueError: If a required variable is missing
    """
    if environ is None:
        environ = os.environ

    missing_vars = [var for var in REQUIRED_VARIABLES if not environ.get(var)]
    if missing_vars:
        raise ValueError(f"Missing environment variables: {', '.join(missing_vars)}")

    values = {name: environ[name] for name in Config.model_fields if environ.get(name)}

    # Comma separated list, e.g. "http://localhost:5173,https://admin.example.com"
    if "CORS_ORIGINS" in values:
        values["CORS_ORIGINS"] = [
            origin.strip() for origin in values["CORS_ORIGINS"].split(",") if origin.strip()
        ]

    return Config(**values)


@lru_cache
def get_config() -> Config:
    """Load .env once and return the process-wide configuration."""
    load_dotenv()
    return load_config()
