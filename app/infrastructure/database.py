"""Database engine, session factory and declarative base."""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.schema import CreateSchema

from app.config import get_settings

settings = get_settings()

# Named schema groupings, one per bounded context
AUTH_SCHEMA = "auth"
ORDERS_SCHEMA = "orders"
PRODUCT_SCHEMA = "product"
TABLES_SCHEMA = "tables"
SCHEMAS = (AUTH_SCHEMA, ORDERS_SCHEMA, PRODUCT_SCHEMA, TABLES_SCHEMA)

Base = declarative_base()


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine for ``url``.

    SQLite has no schemas, so every schema name is translated to the default
    one there; in-memory SQLite shares a single connection.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs.setdefault("poolclass", StaticPool)
        engine = create_engine(url, **kwargs)
        return engine.execution_options(schema_translate_map={name: None for name in SCHEMAS})
    return create_engine(url, pool_pre_ping=True, **kwargs)


def init_db(bind: Engine) -> None:
    """Create schemas (where supported) and all tables."""
    # Import all models so SQLAlchemy knows about them
    from app.domain.models import assignment, credential, order_item, session  # noqa: F401

    with bind.begin() as conn:
        if conn.dialect.name == "postgresql":
            for name in SCHEMAS:
                conn.execute(CreateSchema(name, if_not_exists=True))
        Base.metadata.create_all(bind=conn)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
