# bolusdk/controller.py
import logging
from typing import Any, Callable, Dict, Optional

from .client import ApiError, RequestInFlightError, ShoppingListClient
from .state import (
    AppState,
    FetchStarted,
    PageLoaded,
    ProductStaged,
    RequestFailed,
    RequestFinished,
    RequestStarted,
    StageCleared,
    reduce,
)

logger = logging.getLogger(__name__)

Notifier = Callable[[str, bool], None]


def _log_notifier(message: str, is_error: bool) -> None:
    if is_error:
        logger.warning(message)
    else:
        logger.info(message)


class PageController:
    """Owns the visible page of products and runs every mutation through the API.

    Mutations are pessimistic: nothing local changes until the server has
    confirmed, then the current page is fetched again. While one request is in
    flight, further mutations are refused.
    """

    def __init__(self, client: ShoppingListClient, page_size: Optional[int] = None, notify: Optional[Notifier] = None):
        self.client = client
        self.page_size = page_size
        self.notify = notify or _log_notifier
        self.state = AppState()

    def dispatch(self, action: Any) -> AppState:
        self.state = reduce(self.state, action)
        return self.state

    @property
    def products(self):
        return self.state.products

    # ---------------------------
    # Loading / pagination
    # ---------------------------
    def mount(self) -> bool:
        return self.load_page(1)

    def load_page(self, page: int) -> bool:
        self.dispatch(FetchStarted())
        try:
            result = self.client.list_products(page=page, limit=self.page_size)
        except ApiError as e:
            self._fail(f"No se pudo cargar la lista: {e.message}")
            return False
        self.dispatch(
            PageLoaded(
                products=tuple(result["data"]),
                page=result["page"],
                total_pages=result["totalPages"],
                total=result["total"],
            )
        )
        return True

    def refresh(self) -> bool:
        if not self.load_page(self.state.page):
            return False
        # the page we were on may have emptied (last item deleted)
        if not self.state.products and self.state.page > 1:
            return self.load_page(max(1, min(self.state.page - 1, self.state.total_pages)))
        return True

    def next_page(self) -> bool:
        if not self.state.has_next:
            return False
        return self.load_page(self.state.page + 1)

    def previous_page(self) -> bool:
        if not self.state.has_previous:
            return False
        return self.load_page(self.state.page - 1)

    # ---------------------------
    # Mutations
    # ---------------------------
    def _run(self, call: Callable[[], Any], success_msg: Optional[str] = None) -> Any:
        if self.state.busy:
            message = "Espera a que termine la operación en curso."
            self.notify(message, True)
            raise RequestInFlightError(message)
        self.dispatch(RequestStarted())
        try:
            result = call()
        except ApiError as e:
            self._fail(e.message)
            raise
        finally:
            if self.state.busy:
                self.dispatch(RequestFinished())
        if self.refresh() and success_msg:
            self.notify(success_msg, False)
        return result

    def _fail(self, message: str) -> None:
        self.dispatch(RequestFailed(message))
        self.notify(message, True)

    def _guarded(self, call: Callable[[], Any], success_msg: Optional[str] = None) -> Optional[Any]:
        """Like ``_run`` but API errors end as a notification instead of an exception."""
        try:
            return self._run(call, success_msg)
        except ApiError:
            return None

    def create(self, name: str, categoria: str = "General", prioridad: int = 1, force: bool = False) -> Dict[str, Any]:
        """Create a product; raises ``ApiError`` so callers can route conflicts."""
        return self._run(
            lambda: self.client.add_product(name, categoria=categoria, prioridad=prioridad, force=force),
            success_msg=f'Producto "{name}" agregado.',
        )

    def update(self, product_id: str, **fields) -> Dict[str, Any]:
        """Patch a product; raises ``ApiError``."""
        return self._run(lambda: self.client.update_product(product_id, **fields))

    def increase_quantity(self, product_id: str) -> Optional[Dict[str, Any]]:
        product = self.state.find(product_id)
        if product is None:
            return None
        return self._guarded(lambda: self.client.update_product(product_id, quantity=product["quantity"] + 1))

    def decrease_quantity(self, product_id: str) -> Optional[Dict[str, Any]]:
        product = self.state.find(product_id)
        if product is None or product["quantity"] <= 0:
            return None
        new_quantity = max(0, product["quantity"] - 1)
        return self._guarded(lambda: self.client.update_product(product_id, quantity=new_quantity))

    def toggle_purchased(self, product_id: str) -> Optional[Dict[str, Any]]:
        product = self.state.find(product_id)
        if product is None:
            return None
        return self._guarded(lambda: self.client.update_product(product_id, purchased=not product["purchased"]))

    def delete(self, product_id: str) -> bool:
        product = self.state.find(product_id)
        name = product["name"] if product else product_id
        result = self._guarded(lambda: self.client.delete_product(product_id), success_msg=f'Producto "{name}" eliminado.')
        return result is not None

    # ---------------------------
    # Staged product (duplicate review)
    # ---------------------------
    def stage(self, product: Dict[str, Any]) -> None:
        self.dispatch(ProductStaged(product))

    def clear_stage(self) -> None:
        self.dispatch(StageCleared())
