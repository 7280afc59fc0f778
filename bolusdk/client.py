# bolusdk/client.py
import logging
from typing import Any, Dict, Iterator, Optional

import httpx
import requests

from bolucompras.models import PatchableField

logger = logging.getLogger(__name__)


# ---------------------------
# Errors
# ---------------------------
class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}


class ValidationApiError(ApiError):
    pass


class ConflictApiError(ApiError):
    """The server refused a create because the name already exists."""

    @property
    def product(self) -> Dict[str, Any]:
        return self.payload.get("product") or {}


class NotFoundApiError(ApiError):
    pass


class ServerApiError(ApiError):
    pass


class ApiUnavailableError(ApiError):
    pass


class RequestInFlightError(ApiError):
    """A mutation was refused because another one has not finished yet."""


def _body(resp: Any) -> Dict[str, Any]:
    try:
        data = resp.json()
    except ValueError:
        return {"message": resp.text or f"HTTP {resp.status_code}"}
    return data if isinstance(data, dict) else {"data": data}


def _check(resp: Any) -> Any:
    """Return the decoded body of a 2xx response, raise the matching ApiError otherwise."""
    if resp.status_code < 400:
        try:
            return resp.json()
        except ValueError:
            logger.warning("API answered %s without a JSON body", resp.status_code)
            raise ServerApiError("Respuesta inválida del servidor", status_code=resp.status_code) from None
    body = _body(resp)
    message = body.get("message") or body.get("detail") or f"HTTP {resp.status_code}"
    if resp.status_code == 404:
        cls = NotFoundApiError
    elif resp.status_code >= 500:
        cls = ServerApiError
    elif body.get("exists"):
        cls = ConflictApiError
    else:
        cls = ValidationApiError
    logger.warning("API error %s: %s", resp.status_code, message)
    raise cls(str(message), status_code=resp.status_code, payload=body)


def patch_payload(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only patchable fields; anything else is a programming error."""
    payload = {}
    for key, value in fields.items():
        try:
            field = PatchableField(key)
        except ValueError:
            raise ValueError(f"{key!r} cannot be patched") from None
        if value is not None:
            payload[field.value] = value
    return payload


class ShoppingListClient:
    """Thin wrapper over the products API.

    ``session`` can be any object with requests-style ``get/post/patch/delete``
    methods; tests pass FastAPI's ``TestClient`` here.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:9002",
        timeout: int = 10,
        session: Any = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self._async_transport = async_transport

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            resp = getattr(self.session, method)(self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiUnavailableError(f"Could not reach {self.base_url}: {e}") from e
        except httpx.TransportError as e:
            raise ApiUnavailableError(f"Could not reach {self.base_url}: {e}") from e
        return _check(resp)

    def reset(self):
        return self._request("post", "/reset")

    # Products
    def list_products(self, page: int = 1, limit: Optional[int] = None) -> Dict[str, Any]:
        params = {"page": page}
        if limit is not None:
            params["limit"] = limit
        return self._request("get", "/api/products", params=params)

    def iter_products(self, limit: int = 50) -> Iterator[Dict[str, Any]]:
        page = 1
        while True:
            result = self.list_products(page=page, limit=limit)
            yield from result["data"]
            if page >= result["totalPages"]:
                return
            page += 1

    def get_product(self, product_id: str) -> Dict[str, Any]:
        return self._request("get", f"/api/products/{product_id}")

    def add_product(
        self,
        name: str,
        categoria: str = "General",
        prioridad: int = 1,
        quantity: Optional[int] = None,
        precio: Optional[float] = None,
        cantidad_predeterminada: Optional[int] = None,
        force: bool = False,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name, "categoria": categoria, "prioridad": prioridad}
        if quantity is not None:
            payload["quantity"] = quantity
        if precio is not None:
            payload["precio"] = precio
        if cantidad_predeterminada is not None:
            payload["cantidad_predeterminada"] = cantidad_predeterminada
        params = {"force": "true"} if force else None
        return self._request("post", "/api/products", json=payload, params=params)

    def update_product(self, product_id: str, **fields) -> Dict[str, Any]:
        return self._request("patch", f"/api/products/{product_id}", json=patch_payload(fields))

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        return self._request("delete", f"/api/products/{product_id}")

    # Async update (used to show concurrent read-modify-write)
    async def update_product_async(self, product_id: str, **fields) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._async_transport) as client:
            try:
                r = await client.patch(self._url(f"/api/products/{product_id}"), json=patch_payload(fields))
            except httpx.TransportError as e:
                raise ApiUnavailableError(f"Could not reach {self.base_url}: {e}") from e
            return _check(r)
