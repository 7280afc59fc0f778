# bolusdk/state.py
"""Application state for the shopping-list UI.

State is a frozen dataclass. The only way to change it is to ``reduce`` it
with one of the actions below; the controller keeps the current value.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class AppState:
    products: Tuple[Dict[str, Any], ...] = ()
    page: int = 1
    total_pages: int = 0
    total: int = 0
    fetching: bool = False
    busy: bool = False
    staged: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def find(self, product_id: str) -> Optional[Dict[str, Any]]:
        for p in self.products:
            if p.get("id") == product_id:
                return p
        return None


# ---------------------------
# Actions
# ---------------------------
@dataclass(frozen=True)
class FetchStarted:
    pass


@dataclass(frozen=True)
class PageLoaded:
    products: Tuple[Dict[str, Any], ...]
    page: int
    total_pages: int
    total: int


@dataclass(frozen=True)
class RequestStarted:
    pass


@dataclass(frozen=True)
class RequestFinished:
    pass


@dataclass(frozen=True)
class RequestFailed:
    message: str


@dataclass(frozen=True)
class ProductStaged:
    product: Dict[str, Any]


@dataclass(frozen=True)
class StageCleared:
    pass


def reduce(state: AppState, action: Any) -> AppState:
    if isinstance(action, FetchStarted):
        return replace(state, fetching=True)
    if isinstance(action, PageLoaded):
        return replace(
            state,
            products=tuple(action.products),
            page=action.page,
            total_pages=action.total_pages,
            total=action.total,
            fetching=False,
            error=None,
        )
    if isinstance(action, RequestStarted):
        return replace(state, busy=True, error=None)
    if isinstance(action, RequestFinished):
        return replace(state, busy=False)
    if isinstance(action, RequestFailed):
        return replace(state, busy=False, fetching=False, error=action.message)
    if isinstance(action, ProductStaged):
        return replace(state, staged=dict(action.product))
    if isinstance(action, StageCleared):
        return replace(state, staged=None)
    raise TypeError(f"Unknown action: {action!r}")
