from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App Info
    app_name: str = "Boutique API"
    version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./boutique.db"
    create_tables_on_startup: bool = True

    # Logging
    log_level: str = "INFO"

    # CORS
    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Orígenes permitidos para el frontend"
    )

    # Ventas
    default_currency: str = Field(default="BRL", description="Moneda usada en las descripciones de cuotas")

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Instancia única de configuración leída del entorno"""
    return Settings()
