"""
Main FastAPI application for the Shopify image manager backend.
Wires configuration, upstream clients and routes.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import logging

from routes import products, images
from config.config import Config, get_config
from utils.openai_service import OpenAIImageService
from utils.retry import RetryPolicy, linear_backoff
from utils.shopify_service import ShopifyService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.
    Handles startup and shutdown events.
    """
    config: Config = app.state.config
    logger.info(
        f"Starting up image manager API for {config.SHOPIFY_DOMAIN} "
        f"(Shopify API {config.SHOPIFY_API_VERSION})..."
    )

    yield

    logger.info("Shutting down image manager API...")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as {"erro": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"erro": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"erro": "Requisição inválida.", "detalhes": jsonable_encoder(exc.errors())}
    )


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings to use; read from the environment when omitted
    """
    if config is None:
        config = get_config()

    logging.getLogger().setLevel(config.LOG_LEVEL.upper())

    app = FastAPI(
        title="Shopify Image Manager API",
        description="Proxy between the image manager frontend, Shopify and OpenAI image edits",
        version="1.0.0",
        lifespan=lifespan
    )

    # Collaborators shared by the routes (all stateless)
    app.state.config = config
    app.state.shopify_service = ShopifyService(config)
    app.state.openai_service = OpenAIImageService(config)
    app.state.retry_policy = RetryPolicy(
        max_attempts=config.RETRY_MAX_ATTEMPTS,
        backoff=linear_backoff(config.RETRY_BACKOFF_SECONDS)
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.CORS_ORIGINS),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(products.router, prefix="/api", tags=["Produtos"])
    app.include_router(images.router, prefix="/api", tags=["Imagens"])

    @app.get("/")
    async def home():
        """Root endpoint - health check."""
        return {
            "message": "API de imagens Shopify funcionando corretamente",
            "version": "1.0.0",
            "status": "online"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "shopify_configured": bool(config.SHOPIFY_DOMAIN and config.SHOPIFY_ACCESS_TOKEN),
            "openai_configured": bool(config.OPENAI_API_KEY)
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    config = get_config()
    logger.info(f"Backend em http://localhost:{config.PORT}")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
