"""
QuickSell - Backend API
Point of sale, inventory and sales analytics
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from quicksell.api import analytics, pos, products, sales
from quicksell.api.dependencies import build_container, get_container
from quicksell.core.config import Settings, settings as default_settings
from quicksell.core.exceptions import QuickSellError
from quicksell.repositories.base import CatalogRepository, SaleRepository

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def create_app(
    settings: Settings = None,
    catalog: CatalogRepository = None,
    sales_repository: SaleRepository = None,
) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Application settings (defaults to the environment)
        catalog, sales_repository: Explicit stores; when omitted the backend
            is selected from settings here

    Raises:
        ValueError: Storage settings are invalid (unknown STORAGE_BACKEND,
            or remote storage without SERVER_URL)
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)
    container = build_container(settings, catalog, sales_repository)

    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        debug=settings.API_DEBUG,
    )
    app.state.settings = settings
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    @app.exception_handler(QuickSellError)
    async def quicksell_error_handler(request: Request, exc: QuickSellError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Include API routers
    app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
    app.include_router(sales.router, prefix="/api/v1/sales", tags=["Sales"])
    app.include_router(pos.router, prefix="/api/v1/pos", tags=["Point of Sale"])
    app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["Analytics"])

    @app.get("/")
    async def root():
        """Root endpoint - API status"""
        return {
            "message": "QuickSell API",
            "status": "online",
            "version": settings.API_VERSION,
        }

    @app.get("/health")
    async def health(request: Request):
        """Health check - reports which storage backend is active"""
        container = get_container(request)
        try:
            container.catalog_repository.list_products()
            storage_status = "connected"
            storage_error = None
        except QuickSellError as e:
            storage_status = "unavailable"
            storage_error = e.message

        return {
            "status": "healthy" if storage_status == "connected" else "degraded",
            "service": "quicksell-api",
            "version": settings.API_VERSION,
            "storage": {
                "backend": container.catalog_repository.backend,
                "status": storage_status,
                "error": storage_error,
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
