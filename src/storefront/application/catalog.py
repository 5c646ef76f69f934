"""Application services: catalog maintenance for the local backend."""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        stock: int = 0,
        product_id: str | None = None,
        image: str = "",
        category: str = "",
        featured: bool = False,
    ) -> Product:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if stock < 0:
            raise ValidationError("Stock cannot be negative")

        if product_id:
            if self._product_repo.get_by_id(product_id) is not None:
                raise ValidationError(f"Product '{product_id}' already exists")
        else:
            # Auto-assign the next numeric ID
            numeric = [int(p.id) for p in self._product_repo.list_all() if p.id.isdigit()]
            product_id = str(max(numeric) + 1) if numeric else "1"

        product = Product(
            id=product_id,
            name=name.strip(),
            price=Money.of(price),
            stock=stock,
            image=image,
            category=category,
            featured=featured,
        )
        if product.price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self._product_repo.save(product)
        return product


class SetStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, quantity: int) -> Product:
        """Set the stock level for a product."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        product.set_stock(quantity)
        self._product_repo.save(product)
        return product


class UpdatePriceHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, new_price: str) -> Product:
        """Update a product's price.

        Carts keep the price captured when the product was added, and
        stored sales keep theirs.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        product.update_price(Money.of(new_price))
        self._product_repo.save(product)
        return product
