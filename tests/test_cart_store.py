from __future__ import annotations

import threading

from app.domain.cart import CartLineItem
from app.services.cart_store import CartStore


def test_commands_report_whether_state_changed(store, hdmi) -> None:
    hdmi["stock"] = 1

    assert store.add(hdmi) is True
    assert store.add(hdmi) is False
    assert store.remove("404") is False
    assert store.set_quantity("7", 1) is False
    assert store.remove("7") is True
    assert store.clear() is False


def test_listeners_receive_previous_and_current(store, hdmi) -> None:
    calls = []
    store.subscribe(lambda previous, current: calls.append((previous, current)))

    store.add(hdmi)
    store.open()

    assert len(calls) == 2
    previous, current = calls[0]
    assert previous.items == ()
    assert current.items[0].id == "7"
    assert calls[1][1].is_open is True


def test_listeners_not_called_for_noop(store) -> None:
    calls = []
    store.subscribe(lambda previous, current: calls.append(current))

    store.remove("missing")
    store.close()

    assert calls == []


def test_unsubscribe_stops_notifications(store, hdmi) -> None:
    calls = []
    unsubscribe = store.subscribe(lambda previous, current: calls.append(current))

    store.add(hdmi)
    unsubscribe()
    store.add(hdmi)

    assert len(calls) == 1


def test_failing_listener_does_not_break_mutation(store, hdmi, caplog) -> None:
    seen = []

    def _boom(previous, current):
        raise RuntimeError("presenter crashed")

    store.subscribe(_boom)
    store.subscribe(lambda previous, current: seen.append(current.total_items))

    assert store.add(hdmi) is True
    assert store.state.total_items == 1
    assert seen == [1]
    assert "presenter crashed" in caplog.text


def test_load_replaces_items(store, hdmi) -> None:
    store.add(hdmi)
    items = [CartLineItem(id="2", name="Tinta", price=12.0, quantity=2, stock=3)]

    store.load(items)

    assert [item.id for item in store.state.items] == ["2"]
    assert store.state.total_amount == 24


def test_state_items_are_immutable(store, hdmi) -> None:
    store.add(hdmi)

    assert isinstance(store.state.items, tuple)


def test_concurrent_adds_are_serialised() -> None:
    store = CartStore()
    product = {"id": 1, "name": "Resma", "price": 2.5, "stock": 10_000}
    threads = [
        threading.Thread(target=lambda: [store.add(product) for _ in range(250)])
        for _ in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.state.items[0].quantity == 2000
    assert store.state.total_items == 2000
    assert store.state.total_amount == 5000
