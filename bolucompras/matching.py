# bolucompras/matching.py
"""Name matching shared by the API's duplicate gate and the add-product form.

Two tests live here:

* ``is_same_name`` is strict equality of normalized names. The API uses it to
  refuse duplicates and the form uses it to decide when to open the review
  dialog.
* ``suggest`` is the permissive four-way test used while the user types. Short
  inputs will match a lot of products; that is expected.
"""
import unicodedata
from typing import Any, Dict, Iterable, List, Optional

CATEGORIES = (
    "General",
    "Alimentos",
    "Lácteos",
    "Ropa",
    "Bebidas",
    "Frutas y Verduras",
    "Panadería",
    "Congelados",
    "Cereales y Granos",
    "Condimentos y Salsas",
    "Productos de Despensa",
    "Mascotas",
    "Cuidado Personal",
    "Otros",
)

STAR = "⭐"


def normalize_name(name: Optional[str]) -> str:
    """Lower-case, strip diacritics and trim."""
    if not name:
        return ""
    decomposed = unicodedata.normalize("NFD", name)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return stripped.lower().strip()


def is_same_name(a: Optional[str], b: Optional[str]) -> bool:
    na = normalize_name(a)
    return bool(na) and na == normalize_name(b)


def matches(candidate: str, stored: str) -> bool:
    c = normalize_name(candidate)
    s = normalize_name(stored)
    if not c or not s:
        return False
    return c in s or s in c or s.startswith(c) or s.endswith(c)


def suggest(candidate: str, products: Iterable[Dict[str, Any]], limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Products whose name loosely matches ``candidate``, exact matches first."""
    found = [p for p in products if matches(candidate, p.get("name", ""))]
    found.sort(key=lambda p: not is_same_name(candidate, p.get("name")))
    if limit is not None:
        found = found[:limit]
    return found


def find_exact(candidate: str, products: Iterable[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    for p in products:
        if is_same_name(candidate, p.get("name")):
            return p
    return None


def render_stars(prioridad: int) -> str:
    return STAR * max(0, int(prioridad))
