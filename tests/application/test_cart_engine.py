"""Integration tests for the CartEngine.

Uses the storage-backed repository over an in-memory FakeStorage.
"""

import json

import pytest

from storefront.application.cart_engine import CartEngine
from storefront.application.checkout_draft import CHECKOUT_DRAFT_KEY
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import ProductRef
from storefront.domain.model.value_objects import Money
from storefront.domain.service.clock import HOUR_MS
from storefront.infrastructure.persistence.storage_cart_repository import (
    CART_EXPIRES_KEY,
    CART_ITEMS_KEY,
    StorageCartRepository,
)
from tests.fakes import FakeClock, FakeStorage

P1 = {"id": "p1", "nombre": "Mate", "precio": 1000, "imagen": "mate.jpg"}
P2 = {"id": "p2", "nombre": "Bombilla", "precio": 2000, "imagen": ""}


def _setup(
    storage: FakeStorage | None = None,
    clock: FakeClock | None = None,
    clamp_on_add: bool = False,
) -> tuple[CartEngine, FakeStorage, FakeClock]:
    storage = storage if storage is not None else FakeStorage()
    clock = clock or FakeClock()
    repository = StorageCartRepository(storage, clock=clock)
    return CartEngine(repository, clock=clock, clamp_on_add=clamp_on_add), storage, clock


class TestAddProduct:

    def test_add_twice_gives_quantity_two(self):
        engine, _, _ = _setup()
        engine.add_product(P1)
        engine.add_product(P1)
        assert engine.quantity_of("p1") == 2
        assert len(engine.snapshot()) == 1

    def test_subtotal_and_count(self):
        engine, _, _ = _setup()
        engine.add_product(P1)
        engine.add_product(P2)
        engine.add_product(P2)
        assert engine.subtotal() == Money(5000)
        assert engine.total_item_count() == 3

    def test_accepts_product_ref(self):
        engine, _, _ = _setup()
        assert engine.add_product(ProductRef(id="p9", name="Termo", price=Money(25000)))
        assert engine.contains("p9")

    def test_missing_id_is_refused(self):
        engine, storage, _ = _setup()
        assert engine.add_product({"nombre": "Ghost", "precio": 100}) is False
        assert engine.is_empty()
        assert CART_ITEMS_KEY not in storage.data

    @pytest.mark.parametrize("price", [1000.5, -10, "gratis", None, float("inf")])
    def test_unusable_price_is_refused(self, price):
        engine, storage, _ = _setup()
        assert engine.add_product({"id": "p1", "name": "Mate", "price": price}) is False
        assert engine.is_empty()
        assert CART_ITEMS_KEY not in storage.data

    def test_add_does_not_clamp_by_default(self):
        engine, _, _ = _setup()
        engine.add_product(P1)
        engine.set_quantity("p1", 99)
        engine.add_product(P1)
        assert engine.quantity_of("p1") == 100

    def test_add_clamps_when_configured(self):
        engine, _, _ = _setup(clamp_on_add=True)
        engine.add_product(P1)
        engine.set_quantity("p1", 99)
        engine.add_product(P1)
        assert engine.quantity_of("p1") == 99


class TestQuantities:

    def test_set_zero_equals_remove(self):
        engine, storage, _ = _setup()
        engine.add_product(P1)
        engine.add_product(P2)
        assert engine.set_quantity("p1", 0)
        assert not engine.contains("p1")
        assert [r["id"] for r in json.loads(storage.data[CART_ITEMS_KEY])] == ["p2"]

    def test_set_quantity_clamps(self):
        engine, _, _ = _setup()
        engine.add_product(P1)
        engine.set_quantity("p1", 250)
        assert engine.quantity_of("p1") == 99

    def test_unknown_product_is_false(self):
        engine, _, _ = _setup()
        assert not engine.set_quantity("nope", 2)
        assert not engine.increment("nope")
        assert not engine.decrement("nope")
        assert not engine.remove_product("nope")

    def test_decrement_last_unit_removes(self):
        engine, _, _ = _setup()
        engine.add_product(P1)
        engine.decrement("p1")
        assert engine.is_empty()

    def test_increment(self):
        engine, _, _ = _setup()
        engine.add_product(P1)
        engine.increment("p1")
        assert engine.quantity_of("p1") == 2


class TestListeners:

    def test_notified_after_every_mutation(self):
        engine, _, _ = _setup()
        seen = []
        engine.subscribe(lambda summary: seen.append((summary.item_count, summary.subtotal)))
        engine.add_product(P1)
        engine.add_product(P2)
        engine.remove_product("p1")
        engine.clear()
        assert seen == [(1, 1000), (2, 3000), (1, 2000), (0, 0)]

    def test_not_notified_when_nothing_changed(self):
        engine, _, _ = _setup()
        seen = []
        engine.subscribe(seen.append)
        engine.remove_product("nope")
        assert seen == []

    def test_unsubscribe(self):
        engine, _, _ = _setup()
        seen = []
        unsubscribe = engine.subscribe(seen.append)
        unsubscribe()
        engine.add_product(P1)
        assert seen == []

    def test_failing_listener_does_not_block_others(self):
        engine, _, _ = _setup()
        seen = []

        def broken(summary):
            raise RuntimeError("boom")

        engine.subscribe(broken)
        engine.subscribe(seen.append)
        engine.add_product(P1)
        assert len(seen) == 1
        assert engine.quantity_of("p1") == 1

    def test_listener_sees_state_already_persisted(self):
        engine, storage, _ = _setup()
        stored = []
        engine.subscribe(lambda _: stored.append(storage.data.get(CART_ITEMS_KEY)))
        engine.add_product(P1)
        assert json.loads(stored[0])[0]["id"] == "p1"


class TestPersistence:

    def test_new_engine_sees_saved_cart(self):
        engine, storage, clock = _setup()
        engine.add_product(P1)
        engine.add_product(P2)
        engine.add_product(P2)

        reloaded, _, _ = _setup(storage=storage, clock=clock)
        assert [(i.id, i.quantity) for i in reloaded.snapshot()] == [("p1", 1), ("p2", 2)]
        assert reloaded.subtotal() == Money(5000)

    def test_mutation_pushes_expiration_forward(self):
        engine, storage, clock = _setup()
        engine.add_product(P1)
        first = int(storage.data[CART_EXPIRES_KEY])
        clock.advance(HOUR_MS)
        engine.increment("p1")
        assert int(storage.data[CART_EXPIRES_KEY]) == first + HOUR_MS

    def test_clear_removes_keys(self):
        engine, storage, _ = _setup()
        engine.add_product(P1)
        engine.clear()
        assert CART_ITEMS_KEY not in storage.data
        assert CART_EXPIRES_KEY not in storage.data

    def test_write_failure_keeps_memory_state(self):
        engine, storage, _ = _setup()
        storage.fail_writes = True
        assert engine.add_product(P1)
        assert engine.quantity_of("p1") == 1

    def test_snapshot_is_detached(self):
        engine, _, _ = _setup()
        engine.add_product(P1)
        engine.snapshot()[0].quantity = 50
        assert engine.quantity_of("p1") == 1


class TestExpiration:

    def test_expired_cart_loads_empty(self):
        engine, storage, clock = _setup()
        engine.add_product(P1)
        clock.advance(24 * HOUR_MS + 1)

        reloaded, _, _ = _setup(storage=storage, clock=clock)
        assert reloaded.is_empty()
        assert CART_ITEMS_KEY not in storage.data

    def test_check_expiration_clears_live_engine(self):
        engine, _, clock = _setup()
        engine.add_product(P1)
        seen = []
        engine.subscribe(seen.append)
        clock.advance(24 * HOUR_MS + 1)
        assert engine.check_expiration()
        assert engine.is_empty()
        assert seen[-1].is_empty

    def test_check_expiration_within_ttl(self):
        engine, _, clock = _setup()
        engine.add_product(P1)
        clock.advance(23 * HOUR_MS)
        assert not engine.check_expiration()
        assert engine.contains("p1")


class TestPrepareCheckout:

    def test_writes_draft_with_shipping(self):
        engine, storage, _ = _setup()
        engine.add_product(P1)
        draft = engine.prepare_checkout(storage)
        record = json.loads(storage.data[CHECKOUT_DRAFT_KEY])
        assert record["subtotal"] == 1000
        assert record["envio"] == 5000
        assert record["total"] == 6000
        assert draft.items[0].id == "p1"

    def test_free_shipping_over_threshold(self):
        engine, storage, _ = _setup()
        engine.add_product({"id": "x", "nombre": "Termo", "precio": 50000})
        draft = engine.prepare_checkout(storage)
        assert draft.totals.shipping == Money.zero()

    def test_empty_cart_refused(self):
        engine, storage, _ = _setup()
        with pytest.raises(ValidationError, match="cart is empty"):
            engine.prepare_checkout(storage)
        assert CHECKOUT_DRAFT_KEY not in storage.data
