# bolusdk/workflow.py
"""Add-product form logic: suggestions while typing and duplicate resolution.

    IDLE -> TYPING -> REVIEWING -> INCREMENTING | EDITING | FORCE_ADDING | CANCELLED -> IDLE

A submit with a brand-new name goes straight from TYPING back to IDLE after
the product is created. REVIEWING is reached when the name matches a loaded
product, when the user picks a suggestion, or when the server answers a create
with a conflict (the duplicate sits on another page).
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from bolucompras.matching import find_exact, suggest

from .client import ApiError, ConflictApiError
from .controller import PageController

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"
DEFAULT_PRIORITY = 1


class Stage(str, Enum):
    IDLE = "idle"
    TYPING = "typing"
    REVIEWING = "reviewing"
    INCREMENTING = "incrementing"
    EDITING = "editing"
    FORCE_ADDING = "force_adding"
    CANCELLED = "cancelled"


class WorkflowError(RuntimeError):
    pass


class DuplicateResolver:
    def __init__(self, controller: PageController, suggestion_limit: int = 5):
        self.controller = controller
        self.suggestion_limit = suggestion_limit
        self.stage = Stage.IDLE
        self.name = ""
        self.categoria = DEFAULT_CATEGORY
        self.prioridad = DEFAULT_PRIORITY
        self.suggestions: List[Dict[str, Any]] = []
        self.last_result: Optional[Dict[str, Any]] = None

    @property
    def staged(self) -> Optional[Dict[str, Any]]:
        return self.controller.state.staged

    def _require(self, *stages: Stage) -> None:
        if self.stage not in stages:
            allowed = ", ".join(s.value for s in stages)
            raise WorkflowError(f"cannot do that while {self.stage.value} (needs {allowed})")

    def _reset_form(self) -> None:
        self.name = ""
        self.categoria = DEFAULT_CATEGORY
        self.prioridad = DEFAULT_PRIORITY
        self.suggestions = []

    def _finish(self) -> Stage:
        self.controller.clear_stage()
        self._reset_form()
        self.stage = Stage.IDLE
        return self.stage

    def _review(self, product: Dict[str, Any]) -> Stage:
        self.controller.stage(product)
        self.suggestions = []
        self.stage = Stage.REVIEWING
        return self.stage

    # ---------------------------
    # Form input
    # ---------------------------
    def set_name(self, text: str) -> List[Dict[str, Any]]:
        self._require(Stage.IDLE, Stage.TYPING)
        self.name = text
        if not text.strip():
            self.suggestions = []
            self.stage = Stage.IDLE
            return self.suggestions
        self.suggestions = suggest(text, self.controller.products, limit=self.suggestion_limit)
        self.stage = Stage.TYPING
        return self.suggestions

    def pick(self, product: Dict[str, Any]) -> Stage:
        self._require(Stage.IDLE, Stage.TYPING)
        self.name = product.get("name", "")
        return self._review(product)

    def submit(self, categoria: Optional[str] = None, prioridad: Optional[int] = None) -> Stage:
        self._require(Stage.IDLE, Stage.TYPING)
        if categoria is not None:
            self.categoria = categoria
        if prioridad is not None:
            self.prioridad = prioridad

        name = self.name.strip()
        if not name:
            self.controller.notify("Por favor, ingresa un nombre de producto.", True)
            return self.stage

        existing = find_exact(name, self.controller.products)
        if existing is not None:
            return self._review(existing)

        try:
            created = self.controller.create(name, categoria=self.categoria, prioridad=self.prioridad)
        except ConflictApiError as e:
            logger.info("Server reported %r as duplicate", name)
            return self._review(e.product)
        except ApiError:
            return self.stage
        self.last_result = created
        return self._finish()

    # ---------------------------
    # Review choices
    # ---------------------------
    def increment(self) -> Stage:
        self._require(Stage.REVIEWING)
        product = self.staged
        self.stage = Stage.INCREMENTING
        return self._apply(lambda: self.controller.update(product["id"], quantity=product["quantity"] + 1))

    def edit(self, categoria: str, prioridad: int) -> Stage:
        self._require(Stage.REVIEWING)
        product = self.staged
        self.stage = Stage.EDITING
        return self._apply(lambda: self.controller.update(product["id"], categoria=categoria, prioridad=prioridad))

    def force_add(self) -> Stage:
        self._require(Stage.REVIEWING)
        product = self.staged
        name = self.name.strip() or product["name"]
        self.stage = Stage.FORCE_ADDING
        return self._apply(
            lambda: self.controller.create(name, categoria=self.categoria, prioridad=self.prioridad, force=True)
        )

    def cancel(self) -> Stage:
        self._require(Stage.TYPING, Stage.REVIEWING)
        self.stage = Stage.CANCELLED
        return self._finish()

    def _apply(self, call) -> Stage:
        try:
            result = call()
        except ApiError:
            # staged product stays, the user can retry or cancel
            self.stage = Stage.REVIEWING
            return self.stage
        self.last_result = result
        return self._finish()
