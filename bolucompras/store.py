# bolucompras/store.py
"""Product store: every read and write of the products table goes through here.

The store speaks plain dicts (the same shape the API returns) and raises the
errors from ``bolucompras.errors``; HTTP concerns stay in ``main``.
"""
import logging
import re
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import ProductRow
from .errors import ConflictError, InvalidIdError, NotFoundError, PersistenceError, ValidationError
from .matching import normalize_name
from .models import PatchableField, ProductIn

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def new_product_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(product_id: str) -> bool:
    return bool(_ID_RE.match(product_id or ""))


def _iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        # SQLite hands back naive datetimes; they were written as UTC
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def product_dict(row: ProductRow) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "precio": row.precio,
        "cantidad_predeterminada": row.cantidad_predeterminada,
        "quantity": row.quantity,
        "categoria": row.categoria,
        "prioridad": row.prioridad,
        "purchased": row.purchased,
        "createdAt": _iso(row.created_at),
        "updatedAt": _iso(row.updated_at),
    }


class ProductStore:
    def __init__(self, db: Session):
        self.db = db

    # ---------------------------
    # Reads
    # ---------------------------
    @contextmanager
    def _reading(self, what: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("%s failed: %s", what, e)
            raise PersistenceError(str(e)) from e

    def list_page(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        if page < 1 or limit < 1:
            raise ValidationError("page y limit deben ser mayores o iguales a 1")
        offset = (page - 1) * limit
        rows: List[ProductRow] = []
        with self._reading("Listing products"):
            total = self.db.query(ProductRow).count()
            # past the last page; huge offsets would not fit an SQL integer anyway
            if offset < total:
                rows = (
                    self.db.query(ProductRow)
                    .order_by(ProductRow.created_at.desc(), ProductRow.pk.desc())
                    .offset(offset)
                    .limit(min(limit, total - offset))
                    .all()
                )
        return {
            "data": [product_dict(r) for r in rows],
            "page": page,
            "totalPages": -(-total // limit),
            "total": total,
        }

    def all(self) -> List[Dict[str, Any]]:
        with self._reading("Listing products"):
            rows = self.db.query(ProductRow).order_by(ProductRow.created_at.desc(), ProductRow.pk.desc()).all()
        return [product_dict(r) for r in rows]

    def get(self, product_id: str) -> Dict[str, Any]:
        return product_dict(self._get_row(product_id))

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        with self._reading("Looking up product by name"):
            row = (
                self.db.query(ProductRow)
                .filter(ProductRow.name_normalized == normalize_name(name))
                .order_by(ProductRow.pk.asc())
                .first()
            )
        return product_dict(row) if row else None

    def _get_row(self, product_id: str) -> ProductRow:
        if not is_valid_id(product_id):
            raise InvalidIdError(product_id)
        with self._reading(f"Loading product {product_id}"):
            row = self.db.query(ProductRow).filter(ProductRow.id == product_id).first()
        if not row:
            raise NotFoundError()
        return row

    # ---------------------------
    # Writes
    # ---------------------------
    def create(self, payload: ProductIn, force: bool = False) -> Dict[str, Any]:
        name = (payload.name or "").strip()
        if not name:
            raise ValidationError("El campo 'name' es obligatorio y no puede estar vacío.")

        # read-then-write, two requests racing on the same name can both get through
        if not force:
            existing = self.find_by_name(name)
            if existing:
                raise ConflictError(existing)

        row = ProductRow(
            id=new_product_id(),
            name=name,
            name_normalized=normalize_name(name),
            quantity=payload.quantity,
            purchased=payload.purchased,
            categoria=payload.categoria or "General",
            prioridad=payload.prioridad,
            precio=payload.precio,
            cantidad_predeterminada=payload.cantidad_predeterminada,
        )
        self._commit(row, add=True)
        logger.info("Created product %s (%r)%s", row.id, row.name, " [forced]" if force else "")
        return product_dict(row)

    def update(self, product_id: str, changes: Dict[PatchableField, Any]) -> Dict[str, Any]:
        row = self._get_row(product_id)
        for field, value in changes.items():
            setattr(row, PatchableField(field).value, value)
        if changes:
            self._commit(row)
            logger.info("Updated product %s: %s", row.id, {f.value: v for f, v in changes.items()})
        return product_dict(row)

    def delete(self, product_id: str) -> None:
        row = self._get_row(product_id)
        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Deleting product %s failed: %s", product_id, e)
            raise PersistenceError(str(e)) from e
        logger.info("Deleted product %s", product_id)

    def clear(self) -> int:
        try:
            n = self.db.query(ProductRow).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(str(e)) from e
        logger.info("Removed %d products", n)
        return n

    def _commit(self, row: ProductRow, add: bool = False) -> None:
        try:
            if add:
                self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Saving product failed: %s", e)
            raise PersistenceError(str(e)) from e
