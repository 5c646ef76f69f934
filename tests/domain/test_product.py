"""Unit tests for the Product aggregate and favorites."""

import pytest

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.cart import ProductRef
from storefront.domain.model.favorites import Favorites
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money


def _product(stock: int = 5) -> Product:
    return Product(id="1", name="Termo", price=Money(25000), stock=stock)


class TestProductStock:

    def test_decrement(self):
        p = _product()
        p.decrement_stock(2)
        assert p.stock == 3

    def test_decrement_beyond_stock(self):
        p = _product(stock=1)
        with pytest.raises(InsufficientStockError, match="Insufficient stock for Termo") as exc:
            p.decrement_stock(2)
        assert exc.value.available == 1
        assert p.stock == 1

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _product().set_stock(-1)

    def test_has_stock(self):
        assert _product(3).has_stock(3)
        assert not _product(3).has_stock(4)


class TestProductPrice:

    def test_update_price(self):
        p = _product()
        p.update_price(Money(30000))
        assert p.price == Money(30000)

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            _product().update_price(Money(0))

    def test_as_ref(self):
        assert _product().as_ref() == ProductRef(id="1", name="Termo", price=Money(25000))


class TestFavorites:

    def test_add_is_unique(self):
        favorites = Favorites()
        ref = _product().as_ref()
        assert favorites.add(ref, now=1, category="mates")
        assert not favorites.add(ref, now=2)
        assert len(favorites.items) == 1
        assert favorites.items[0].category == "mates"

    def test_records_round_trip(self):
        favorites = Favorites()
        favorites.add(_product().as_ref(), now=1, category="mates")
        restored = Favorites.from_records(favorites.to_records())
        assert restored.to_records() == favorites.to_records()
        assert restored.to_records()[0]["categoria"] == "mates"

    def test_as_product(self):
        favorites = Favorites()
        favorites.add(_product().as_ref(), now=1)
        assert favorites.find("1").as_product() == _product().as_ref()
