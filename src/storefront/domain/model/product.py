"""Product aggregate.

Products live in the catalog, independently of carts and sales.  Each
product carries its own stock count; the Sales Service decrements it
when a sale is accepted.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.cart import ProductRef
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Invariant: ``stock`` is never negative.
    """

    id: str
    name: str
    price: Money
    stock: int = 0
    image: str = ""
    category: str = ""
    featured: bool = False

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        Carts and sales keep the price they captured when the product
        was added, so this affects only future additions.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock cannot be negative")
        self.stock = quantity

    def has_stock(self, quantity: int) -> bool:
        return self.stock >= quantity

    def decrement_stock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Stock decrement must be positive")
        if quantity > self.stock:
            raise InsufficientStockError(self.name, quantity, self.stock)
        self.stock -= quantity

    def as_ref(self) -> ProductRef:
        return ProductRef(id=self.id, name=self.name, price=self.price, image=self.image)
