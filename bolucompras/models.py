# bolucompras/models.py
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

MIN_PRIORITY = 1
MAX_PRIORITY = 5


class PatchableField(str, Enum):
    """The only product fields a PATCH may change."""

    QUANTITY = "quantity"
    PURCHASED = "purchased"
    CATEGORIA = "categoria"
    PRIORIDAD = "prioridad"


# ---------------------------
# Request bodies
# ---------------------------
class ProductIn(BaseModel):
    name: Optional[str] = None
    quantity: int = Field(default=1, ge=0)
    purchased: bool = False
    categoria: str = "General"
    prioridad: int = Field(default=MIN_PRIORITY, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    precio: Optional[float] = None
    cantidad_predeterminada: int = 1


class ProductPatch(BaseModel):
    # unknown keys are dropped, not rejected
    model_config = ConfigDict(extra="ignore")

    quantity: Optional[int] = Field(default=None, ge=0)
    purchased: Optional[bool] = None
    categoria: Optional[str] = None
    prioridad: Optional[int] = Field(default=None, ge=MIN_PRIORITY, le=MAX_PRIORITY)

    def changes(self) -> Dict[PatchableField, Any]:
        sent = self.model_dump(exclude_unset=True)
        return {PatchableField(k): v for k, v in sent.items() if v is not None}


# ---------------------------
# Responses
# ---------------------------
class Product(BaseModel):
    id: str
    name: str
    precio: Optional[float] = None
    cantidad_predeterminada: int = 1
    quantity: int = 1
    categoria: str = "General"
    prioridad: int = MIN_PRIORITY
    purchased: bool = False
    createdAt: str
    updatedAt: str


class ProductPage(BaseModel):
    data: List[Product]
    page: int
    totalPages: int
    total: int
