"""
FastAPI dependencies exposing the collaborators created at startup.
"""

from fastapi import Request

from config.config import Config
from utils.openai_service import OpenAIImageService
from utils.retry import RetryPolicy
from utils.shopify_service import ShopifyService


def get_app_config(request: Request) -> Config:
    return request.app.state.config


def get_shopify_service(request: Request) -> ShopifyService:
    return request.app.state.shopify_service


def get_openai_service(request: Request) -> OpenAIImageService:
    return request.app.state.openai_service


def get_retry_policy(request: Request) -> RetryPolicy:
    return request.app.state.retry_policy
