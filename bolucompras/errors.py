# bolucompras/errors.py
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class BolucomprasError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(BolucomprasError):
    """Empty or out-of-range input."""


class InvalidIdError(BolucomprasError):
    def __init__(self, product_id: str):
        super().__init__(f"Id de producto inválido: {product_id!r}")
        self.product_id = product_id


class ConflictError(BolucomprasError):
    """A product with the same normalized name already exists.

    The existing record travels with the error so the client can offer to
    increment or edit it instead.
    """

    def __init__(self, product: Dict[str, Any], message: str = "Producto ya existe"):
        super().__init__(message)
        self.product = product

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message, "exists": True, "product": self.product}


class NotFoundError(BolucomprasError):
    status_code = 404

    def __init__(self, message: str = "Producto no encontrado"):
        super().__init__(message)


class PersistenceError(BolucomprasError):
    status_code = 500


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Datos inválidos"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BolucomprasError)
    async def _bolucompras_error(request: Request, exc: BolucomprasError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _first_error_message(exc)})
