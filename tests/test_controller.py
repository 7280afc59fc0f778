# tests/test_controller.py
import uuid

import httpx
import pytest

from bolusdk import ApiUnavailableError, ConflictApiError, NotFoundApiError, RequestInFlightError, ServerApiError
from bolusdk.client import _check
from bolusdk.state import AppState, PageLoaded, RequestFailed, RequestStarted, reduce


def names(controller):
    return [p["name"] for p in controller.products]


def test_mount_loads_first_page(controller, add):
    for n in ("a", "b", "c", "d"):
        add(n)
    assert controller.mount()
    state = controller.state
    assert state.page == 1
    assert state.total == 4
    assert state.total_pages == 2
    assert names(controller) == ["d", "c", "b"]
    assert not state.has_previous
    assert state.has_next


def test_pagination_stops_at_both_ends(controller, add):
    for n in ("a", "b", "c", "d"):
        add(n)
    controller.mount()
    assert controller.previous_page() is False
    assert controller.next_page() is True
    assert controller.state.page == 2
    assert names(controller) == ["a"]
    assert controller.next_page() is False
    assert controller.previous_page() is True
    assert controller.state.page == 1


def test_increase_and_decrease_quantity(controller, add):
    p = add("Leche")
    controller.mount()
    controller.increase_quantity(p["id"])
    assert controller.state.find(p["id"])["quantity"] == 2
    controller.decrease_quantity(p["id"])
    controller.decrease_quantity(p["id"])
    assert controller.state.find(p["id"])["quantity"] == 0


def test_decrease_is_clamped_at_zero(controller, add, client):
    p = add("Pan", quantity=0)
    controller.mount()
    assert controller.decrease_quantity(p["id"]) is None
    assert client.get(f"/api/products/{p['id']}").json()["quantity"] == 0


def test_toggle_purchased_round_trip(controller, add):
    p = add("Huevos")
    controller.mount()
    controller.toggle_purchased(p["id"])
    assert controller.state.find(p["id"])["purchased"] is True
    controller.toggle_purchased(p["id"])
    assert controller.state.find(p["id"])["purchased"] is False


def test_delete_last_item_of_page_steps_back(controller, add, notes):
    for n in ("a", "b", "c", "d"):
        add(n)
    controller.mount()
    controller.next_page()
    only = controller.products[0]
    assert controller.delete(only["id"]) is True
    assert controller.state.page == 1
    assert controller.state.total_pages == 1
    assert names(controller) == ["d", "c", "b"]
    assert notes[-1] == ('Producto "a" eliminado.', False)


def test_api_error_becomes_notification(controller, add, notes):
    add("x")
    controller.mount()
    missing = uuid.uuid4().hex
    assert controller.delete(missing) is False
    assert controller.state.error == "Producto no encontrado"
    assert controller.state.busy is False
    assert notes[-1] == ("Producto no encontrado", True)


def test_create_conflict_is_raised_for_callers(controller, add):
    add("Sal")
    controller.mount()
    with pytest.raises(ConflictApiError) as excinfo:
        controller.create("sal")
    assert excinfo.value.product["name"] == "Sal"


def test_update_unknown_product_raises(controller):
    controller.mount()
    with pytest.raises(NotFoundApiError):
        controller.update(uuid.uuid4().hex, quantity=3)


def test_busy_state_refuses_mutations(controller, add, client, notes):
    p = add("Agua")
    controller.mount()
    controller.dispatch(RequestStarted())
    assert controller.increase_quantity(p["id"]) is None
    assert client.get(f"/api/products/{p['id']}").json()["quantity"] == 1
    assert notes[-1][1] is True
    with pytest.raises(RequestInFlightError):
        controller.update(p["id"], quantity=5)


def test_unexpected_error_does_not_leave_controller_busy(controller, add, monkeypatch):
    p = add("Agua")
    controller.mount()

    def broken(product_id, **fields):
        raise RuntimeError("boom")

    monkeypatch.setattr(controller.client, "update_product", broken)
    with pytest.raises(RuntimeError):
        controller.increase_quantity(p["id"])
    assert controller.state.busy is False

    monkeypatch.undo()
    controller.increase_quantity(p["id"])
    assert controller.state.find(p["id"])["quantity"] == 2


def test_success_is_announced_only_after_refetch(controller, notes, monkeypatch):
    controller.mount()

    def offline(page=1, limit=None):
        raise ApiUnavailableError("sin conexión")

    monkeypatch.setattr(controller.client, "list_products", offline)
    created = controller.create("Pan")
    assert created["name"] == "Pan"
    assert notes == [("No se pudo cargar la lista: sin conexión", True)]


def test_non_json_success_body_is_a_server_error():
    with pytest.raises(ServerApiError):
        _check(httpx.Response(200, text="<html>oops</html>"))


def test_reducer_is_pure():
    start = AppState()
    loaded = reduce(start, PageLoaded(products=({"id": "1"},), page=1, total_pages=1, total=1))
    assert start.products == ()
    assert loaded.products == ({"id": "1"},)
    failed = reduce(loaded, RequestFailed("boom"))
    assert failed.error == "boom"
    assert failed.products == loaded.products
    with pytest.raises(TypeError):
        reduce(start, object())
