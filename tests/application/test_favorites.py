"""Tests for the FavoritesList application service."""

import pytest

from storefront.application.cart_engine import CartEngine
from storefront.application.favorites import FavoritesList
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import ProductRef
from storefront.domain.model.value_objects import Money
from storefront.domain.service.clock import DAY_MS
from storefront.infrastructure.persistence.storage_cart_repository import (
    FAVORITES_EXPIRES_KEY,
    FAVORITES_ITEMS_KEY,
    FAVORITES_TTL_MS,
    StorageCartRepository,
)
from tests.fakes import FakeClock, FakeStorage

TERMO = ProductRef(id="t1", name="Termo", price=Money(25000), image="termo.jpg")


def _favorites(storage: FakeStorage, clock: FakeClock) -> FavoritesList:
    repository = StorageCartRepository(
        storage,
        items_key=FAVORITES_ITEMS_KEY,
        expires_key=FAVORITES_EXPIRES_KEY,
        ttl_ms=FAVORITES_TTL_MS,
        clock=clock,
    )
    return FavoritesList(repository, clock)


class TestFavoritesList:

    def test_add_and_contains(self):
        favorites = _favorites(FakeStorage(), FakeClock())
        assert favorites.add(TERMO, category="termos")
        assert favorites.contains("t1")
        assert favorites.count() == 1

    def test_duplicate_add_is_false(self):
        favorites = _favorites(FakeStorage(), FakeClock())
        favorites.add(TERMO)
        assert not favorites.add(TERMO)
        assert favorites.count() == 1

    def test_toggle(self):
        favorites = _favorites(FakeStorage(), FakeClock())
        assert favorites.toggle(TERMO)
        assert not favorites.toggle(TERMO)
        assert not favorites.contains("t1")

    def test_persists_across_instances(self):
        storage, clock = FakeStorage(), FakeClock()
        _favorites(storage, clock).add(TERMO, category="termos")
        reloaded = _favorites(storage, clock)
        assert [f.category for f in reloaded.items()] == ["termos"]

    def test_survives_a_day_but_not_a_month(self):
        storage, clock = FakeStorage(), FakeClock()
        _favorites(storage, clock).add(TERMO)
        clock.advance(2 * DAY_MS)
        assert _favorites(storage, clock).contains("t1")
        clock.advance(FAVORITES_TTL_MS)
        assert not _favorites(storage, clock).contains("t1")

    def test_clear(self):
        storage, clock = FakeStorage(), FakeClock()
        favorites = _favorites(storage, clock)
        favorites.add(TERMO)
        favorites.clear()
        assert favorites.count() == 0
        assert FAVORITES_ITEMS_KEY not in storage.data


class TestMoveToCart:

    def test_adds_to_cart_and_keeps_favorite(self):
        storage, clock = FakeStorage(), FakeClock()
        favorites = _favorites(storage, clock)
        favorites.add(TERMO)
        engine = CartEngine(StorageCartRepository(storage, clock=clock), clock=clock)

        assert favorites.move_to_cart("t1", engine)
        assert engine.quantity_of("t1") == 1
        assert engine.subtotal() == Money(25000)
        assert favorites.contains("t1")

    def test_unknown_favorite(self):
        storage, clock = FakeStorage(), FakeClock()
        engine = CartEngine(StorageCartRepository(storage, clock=clock), clock=clock)
        with pytest.raises(EntityNotFoundError, match="not a favorite"):
            _favorites(storage, clock).move_to_cart("nope", engine)
