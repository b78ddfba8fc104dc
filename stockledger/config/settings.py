from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # App Info
    app_name: str = "StockLedger API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = Field(
        default="sqlite:///./stockledger.db",
        description="URL de conexión SQLAlchemy (PostgreSQL en producción)"
    )

    # Inventario
    low_stock_threshold: int = Field(
        default=5,
        ge=1,
        description="Productos con stock por debajo de este valor se consideran en stock bajo"
    )

    # CORS
    allowed_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
