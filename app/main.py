import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from app.config.database import Database
from app.config.settings import Settings, get_settings
from app.core.exceptions import setup_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import setup_middleware
from app.modules.notifications import NotificationService
from app.api.v1.router import api_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Construir la aplicación. Los tests pasan su propia configuración
    (SQLite en memoria).
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"{settings.app_name} {settings.version} iniciando")
        logger.info(f"Entorno: {'Development' if settings.debug else 'Production'}")

        database = Database(settings.database_url, echo=settings.debug)
        if settings.create_tables_on_startup:
            database.create_all()
        app.state.db = database
        app.state.notifications = NotificationService()

        yield

        # Shutdown
        logger.info(f"{settings.app_name} apagándose")
        database.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Gestión de boutique: catálogo, agenda, ventas con cuotas y cuentas por cobrar",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    # Setup middleware
    setup_middleware(app, settings)
    setup_exception_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api/v1")

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "message": "Boutique API",
            "version": settings.version,
            "status": "running",
            "docs": "/docs" if settings.debug else "Disabled in production",
            "api": "/api/v1"
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
