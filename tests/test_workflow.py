# tests/test_workflow.py
import pytest

from bolusdk import DuplicateResolver, Stage, WorkflowError
from bolusdk.state import RequestStarted


@pytest.fixture
def resolver(controller):
    controller.mount()
    return DuplicateResolver(controller)


def listing(client):
    return client.get("/api/products", params={"limit": 100}).json()["data"]


def test_typing_shows_suggestions(resolver, controller, add):
    add("Pan integral")
    add("Leche")
    controller.refresh()
    found = resolver.set_name("pan")
    assert resolver.stage == Stage.TYPING
    assert [p["name"] for p in found] == ["Pan integral"]


def test_blank_input_goes_back_to_idle(resolver):
    resolver.set_name("pa")
    assert resolver.stage == Stage.TYPING
    assert resolver.set_name("   ") == []
    assert resolver.stage == Stage.IDLE


def test_submit_new_name_creates_and_resets_form(resolver, controller, client):
    resolver.set_name("Milk")
    assert resolver.submit(categoria="Lácteos", prioridad=3) == Stage.IDLE
    assert resolver.last_result["name"] == "Milk"
    assert resolver.name == ""
    assert resolver.categoria == "General"
    assert resolver.prioridad == 1

    data = listing(client)
    assert [(p["name"], p["prioridad"], p["quantity"]) for p in data] == [("Milk", 3, 1)]
    assert controller.products[0]["name"] == "Milk"


def test_submit_blank_name_notifies(resolver, notes, client):
    assert resolver.submit() == Stage.IDLE
    assert notes[-1][1] is True
    assert listing(client) == []


def test_exact_match_opens_review_and_increment(resolver, controller, add, client):
    p = add("Jamón")
    controller.refresh()
    resolver.set_name("  jamon ")
    assert resolver.submit() == Stage.REVIEWING
    assert resolver.staged["id"] == p["id"]

    assert resolver.increment() == Stage.IDLE
    assert resolver.staged is None
    assert controller.state.find(p["id"])["quantity"] == 2
    assert len(listing(client)) == 1


def test_edit_changes_category_and_priority_only(resolver, controller, add, client):
    p = add("Queso", quantity=2)
    controller.refresh()
    resolver.set_name("queso")
    resolver.submit()
    assert resolver.edit("Lácteos", 4) == Stage.IDLE
    saved = client.get(f"/api/products/{p['id']}").json()
    assert saved["categoria"] == "Lácteos"
    assert saved["prioridad"] == 4
    assert saved["quantity"] == 2


def test_force_add_creates_second_record(resolver, controller, add, client):
    add("Pan")
    controller.refresh()
    resolver.set_name("Pan")
    resolver.submit(categoria="Panadería", prioridad=2)
    assert resolver.force_add() == Stage.IDLE
    data = listing(client)
    assert [p["name"] for p in data] == ["Pan", "Pan"]
    assert data[0]["categoria"] == "Panadería"


def test_cancel_makes_no_changes(resolver, controller, add, client):
    p = add("Arroz")
    controller.refresh()
    resolver.set_name("arroz")
    resolver.submit()
    assert resolver.cancel() == Stage.IDLE
    assert resolver.staged is None
    assert client.get(f"/api/products/{p['id']}").json()["quantity"] == 1
    assert len(listing(client)) == 1


def test_picking_a_suggestion_reviews_it(resolver, controller, add):
    p = add("Pan integral")
    controller.refresh()
    found = resolver.set_name("pan")
    assert resolver.pick(found[0]) == Stage.REVIEWING
    assert resolver.staged["id"] == p["id"]


def test_duplicate_on_another_page_comes_back_from_server(resolver, controller, add, client):
    oldest = add("Fideos")
    for n in ("a", "b", "c"):
        add(n)
    controller.refresh()
    assert "Fideos" not in [p["name"] for p in controller.products]

    resolver.set_name("fideos")
    assert resolver.submit() == Stage.REVIEWING
    assert resolver.staged["id"] == oldest["id"]
    assert len(listing(client)) == 4


def test_failed_increment_keeps_product_staged(resolver, controller, add, client, notes):
    p = add("Café")
    controller.refresh()
    resolver.set_name("cafe")
    resolver.submit()
    client.delete(f"/api/products/{p['id']}")

    assert resolver.increment() == Stage.REVIEWING
    assert resolver.staged["id"] == p["id"]
    assert notes[-1] == ("Producto no encontrado", True)
    assert resolver.cancel() == Stage.IDLE


def test_invalid_transitions(resolver):
    with pytest.raises(WorkflowError):
        resolver.increment()
    with pytest.raises(WorkflowError):
        resolver.cancel()
    resolver.set_name("x")
    with pytest.raises(WorkflowError):
        resolver.force_add()


def test_refused_submit_keeps_the_form(resolver, controller, client, notes):
    controller.dispatch(RequestStarted())
    resolver.set_name("Pan")
    assert resolver.submit() == Stage.TYPING
    assert resolver.name == "Pan"
    assert notes[-1][1] is True
    assert listing(client) == []


def test_refused_increment_stays_in_review(resolver, controller, add, client):
    p = add("Leche")
    controller.refresh()
    resolver.pick(p)
    controller.dispatch(RequestStarted())
    assert resolver.increment() == Stage.REVIEWING
    assert resolver.staged["id"] == p["id"]
    assert client.get(f"/api/products/{p['id']}").json()["quantity"] == 1
