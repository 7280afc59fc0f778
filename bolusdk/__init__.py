"""Client side of Bolucompras: API client, page controller and add-form workflow."""

from .client import (  # noqa: F401
    ApiError,
    ApiUnavailableError,
    ConflictApiError,
    NotFoundApiError,
    RequestInFlightError,
    ServerApiError,
    ShoppingListClient,
    ValidationApiError,
)
from .controller import PageController  # noqa: F401
from .state import AppState  # noqa: F401
from .workflow import DuplicateResolver, Stage, WorkflowError  # noqa: F401

__all__ = [
    "ApiError",
    "ApiUnavailableError",
    "ConflictApiError",
    "NotFoundApiError",
    "RequestInFlightError",
    "ServerApiError",
    "ShoppingListClient",
    "ValidationApiError",
    "PageController",
    "AppState",
    "DuplicateResolver",
    "Stage",
    "WorkflowError",
]
