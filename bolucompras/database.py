# bolucompras/database.py
"""SQLAlchemy setup and the products table."""
from datetime import datetime, timezone
from typing import Iterator

from fastapi import Request
from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductRow(Base):
    __tablename__ = "products"

    # surrogate key, only used to break ties between rows created in the same instant
    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True, index=True)

    name = Column(String, nullable=False)
    name_normalized = Column(String, nullable=False, index=True)

    precio = Column(Float, nullable=True)
    cantidad_predeterminada = Column(Integer, nullable=False, default=1)
    quantity = Column(Integer, nullable=False, default=1)
    categoria = Column(String, nullable=False, default="General")
    prioridad = Column(Integer, nullable=False, default=1)
    purchased = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<ProductRow id={self.id!r} name={self.name!r}>"


def make_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            # one shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
