from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base class for models
Base = declarative_base()


class Database:
    """
    Conexión configurada una sola vez por aplicación.

    El engine y la fábrica de sesiones viven aquí; la app la crea en el
    lifespan, la guarda en ``app.state.db`` y la libera al apagarse.
    """

    def __init__(self, url: str, echo: bool = False):
        engine_kwargs = {"echo": echo}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True
            engine_kwargs["pool_recycle"] = 300

        self.url = url
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        # Models must be imported so their tables are registered on Base
        from app.shared.database import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()


# Database dependency
def get_db(request: Request) -> Generator[Session, None, None]:
    """Database dependency for FastAPI"""
    database: Optional[Database] = getattr(request.app.state, "db", None)
    if database is None:
        raise RuntimeError("Database not initialized; app lifespan did not run")

    db = database.session()
    try:
        yield db
    finally:
        db.close()
