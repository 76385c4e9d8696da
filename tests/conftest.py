import os
from io import BytesIO

import httpx
import pytest
from PIL import Image

# Mock environment variables before main is imported
os.environ.setdefault("SHOPIFY_DOMAIN", "loja-teste.myshopify.com")
os.environ.setdefault("SHOPIFY_ACCESS_TOKEN", "shpat_test_token")
os.environ.setdefault("SHOPIFY_API_VERSION", "2024-01")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

from config.config import Config, load_config

SHOPIFY_ENV = {
    "SHOPIFY_DOMAIN": "loja-teste.myshopify.com",
    "SHOPIFY_ACCESS_TOKEN": "shpat_test_token",
    "SHOPIFY_API_VERSION": "2024-01",
    "OPENAI_API_KEY": "sk-test",
}

SHOPIFY_BASE = "/admin/api/2024-01"


def make_image_bytes(size=(64, 48), mode="RGB", fmt="JPEG", color=(200, 30, 30)) -> bytes:
    if mode == "RGBA" and len(color) == 3:
        color = color + (128,)
    img = Image.new(mode, size, color)
    out = BytesIO()
    img.save(out, format=fmt)
    return out.getvalue()


@pytest.fixture
def config() -> Config:
    return load_config(dict(SHOPIFY_ENV))


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


@pytest.fixture
def recording_transport():
    return RecordingTransport
