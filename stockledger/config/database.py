from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .settings import settings

# Base class for models
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Crear engine según el backend configurado"""
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": 30}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
            # Una sola conexión compartida para que la BD en memoria sobreviva
            return create_engine(
                database_url,
                connect_args=connect_args,
                poolclass=StaticPool,
                echo=echo
            )
        return create_engine(database_url, connect_args=connect_args, echo=echo)

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        echo=echo
    )


class Database:
    """
    Cliente de almacenamiento con ciclo de vida explícito.

    Se crea una vez al arrancar el proceso, se inyecta en la aplicación
    y se libera con dispose() al apagar.
    """

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None):
        self.database_url = database_url or settings.database_url
        self.engine = build_engine(
            self.database_url,
            echo=settings.debug if echo is None else echo
        )
        # Session factory
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Crear tablas que no existan"""
        # Registra los modelos en Base.metadata
        from stockledger.shared.database import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        from stockledger.shared.database import models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


# Database dependency
def get_db(request: Request) -> Iterator[Session]:
    """Database dependency for FastAPI"""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
