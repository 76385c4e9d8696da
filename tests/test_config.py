import pytest
from pydantic import ValidationError

from config.config import DEFAULT_EDIT_PROMPT, load_config
from conftest import SHOPIFY_ENV


def test_missing_required_variables():
    env = dict(SHOPIFY_ENV)
    del env["SHOPIFY_ACCESS_TOKEN"]
    del env["OPENAI_API_KEY"]

    with pytest.raises(ValueError) as exc_info:
        load_config(env)

    message = str(exc_info.value)
    assert "SHOPIFY_ACCESS_TOKEN" in message
    assert "OPENAI_API_KEY" in message
    assert "SHOPIFY_DOMAIN" not in message


def test_defaults():
    config = load_config(dict(SHOPIFY_ENV))

    assert config.PORT == 4000
    assert config.EDIT_PROMPT == DEFAULT_EDIT_PROMPT
    assert config.EDIT_OUTPUT_SIZE == "1024x1024"
    assert config.EDIT_VARIANT_COUNT == 1
    assert config.MAX_SOURCE_WIDTH == 2048
    assert config.RETRY_MAX_ATTEMPTS == 3
    assert config.RETRY_BACKOFF_SECONDS == 1.0
    assert config.CORS_ORIGINS == ["*"]
    assert config.OPENAI_IMAGE_MODEL is None
    assert config.shopify_base_url == "https://loja-teste.myshopify.com/admin/api/2024-01"


def test_overrides_are_parsed():
    env = dict(SHOPIFY_ENV)
    env.update({
        "PORT": "8080",
        "RETRY_BACKOFF_SECONDS": "0.5",
        "EDIT_OUTPUT_SIZE": "512x512",
        "CORS_ORIGINS": "http://localhost:5173, https://admin.example.com",
    })

    config = load_config(env)

    assert config.PORT == 8080
    assert config.RETRY_BACKOFF_SECONDS == 0.5
    assert config.EDIT_OUTPUT_SIZE == "512x512"
    assert config.CORS_ORIGINS == ["http://localhost:5173", "https://admin.example.com"]


def test_config_is_immutable(config):
    with pytest.raises(ValidationError):
        config.PORT = 9000
