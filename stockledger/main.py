import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from stockledger.config.database import Database
from stockledger.config.settings import settings
from stockledger.core.error_handlers import setup_error_handlers
from stockledger.core.logging import setup_logging
from stockledger.core.middleware import setup_middleware
from stockledger.api.v1.router import api_router

logger = logging.getLogger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Construir la aplicación.

    Sin `database`, el cliente de almacenamiento se crea al arrancar
    con settings.database_url y se libera al apagar.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        owns_database = database is None
        db = database or Database()
        db.create_all()
        app.state.database = db
        logger.info(f"{settings.app_name} starting - version: {settings.version}")
        logger.info(f"Environment: {'Development' if settings.debug else 'Production'}")

        yield

        # Shutdown
        if owns_database:
            db.dispose()
        logger.info(f"{settings.app_name} shutting down")

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Inventario por usuario, ventas con descuento atómico de stock y reportes",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )

    # Setup middleware
    setup_middleware(app)
    setup_error_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api/v1")

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "message": f"{settings.app_name}",
            "version": settings.version,
            "status": "running",
            "docs": "/docs" if settings.debug else "Disabled in production",
            "api": "/api/v1"
        }

    return app


setup_logging()
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "stockledger.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
