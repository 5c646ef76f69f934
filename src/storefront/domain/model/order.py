"""Order aggregate — a cart snapshot plus customer and payment data.

The Order is what checkout hands to the Sales Service.  Its totals are
computed once, from the cart snapshot, and never recomputed afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import LineItem
from storefront.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
FREE_SHIPPING_THRESHOLD = Money(50000)
SHIPPING_FEE = Money(5000)

PAYMENT_METHODS = (
    "credit-card",
    "debit-card",
    "prepaid-card",
    "paypal",
    "apple-pay",
    "google-pay",
    "bank-transfer",
    "bnpl",
    "cash-on-delivery",
)
CARD_PAYMENT_METHODS = ("credit-card", "debit-card", "prepaid-card")


class OrderStatus(Enum):
    PENDING = "pendiente"
    PROCESSING = "procesando"
    COMPLETED = "completado"
    CANCELLED = "cancelado"
    REFUNDED = "reembolsado"


class PaymentStatus(Enum):
    PENDING = "pendiente"
    APPROVED = "aprobado"
    REJECTED = "rechazado"
    CANCELLED = "cancelado"


@dataclass(frozen=True)
class Address:

    street: str
    city: str
    state: str
    zip_code: str


@dataclass(frozen=True)
class Customer:

    first_name: str
    last_name: str
    email: str
    phone: str
    address: Address

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @staticmethod
    def from_form(form: Mapping[str, str]) -> Customer:
        """Build from the shipping form field names."""
        return Customer(
            first_name=form.get("firstName", "").strip(),
            last_name=form.get("lastName", "").strip(),
            email=form.get("email", "").strip(),
            phone=form.get("phone", "").strip(),
            address=Address(
                street=form.get("street", "").strip(),
                city=form.get("city", "").strip(),
                state=form.get("state", "").strip(),
                zip_code=form.get("zipCode", "").strip(),
            ),
        )


@dataclass(frozen=True)
class OrderLine:
    """A line item frozen at checkout time (price snapshot)."""

    product_id: str
    product_name: str
    unit_price: Money
    quantity: int

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity

    @staticmethod
    def from_line_item(item: LineItem) -> OrderLine:
        return OrderLine(
            product_id=item.id,
            product_name=item.name,
            unit_price=item.unit_price,
            quantity=item.quantity,
        )


@dataclass(frozen=True)
class OrderTotals:
    """Invariant: ``total == subtotal + shipping``."""

    subtotal: Money
    shipping: Money
    total: Money

    def __post_init__(self) -> None:
        if self.total != self.subtotal + self.shipping:
            raise ValidationError(
                f"Order total {self.total} does not match "
                f"subtotal {self.subtotal} + shipping {self.shipping}"
            )

    @staticmethod
    def for_subtotal(
        subtotal: Money,
        free_shipping_threshold: Money = FREE_SHIPPING_THRESHOLD,
        shipping_fee: Money = SHIPPING_FEE,
    ) -> OrderTotals:
        """Shipping is free from the threshold up, a flat fee below it."""
        shipping = Money.zero() if subtotal >= free_shipping_threshold else shipping_fee
        return OrderTotals(subtotal=subtotal, shipping=shipping, total=subtotal + shipping)


@dataclass
class PaymentInfo:

    method: str
    status: PaymentStatus = PaymentStatus.PENDING
    reference: str | None = None
    paid_at: datetime | None = None


@dataclass
class Order:
    """Aggregate root for a checkout order (a Sale, once accepted).

    Use ``Order.create()`` for new orders — it enforces all business
    rules.  ``from_payload`` reconstitutes stored sales without
    re-validating.
    """

    order_number: str
    customer: Customer
    lines: list[OrderLine]
    totals: OrderTotals
    payment: PaymentInfo
    status: OrderStatus = OrderStatus.PENDING
    channel: str = "web"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer: Customer,
        items: list[LineItem],
        payment_method: str,
        created_at: datetime | None = None,
        free_shipping_threshold: Money = FREE_SHIPPING_THRESHOLD,
        shipping_fee: Money = SHIPPING_FEE,
    ) -> Order:
        if not order_number:
            raise ValidationError("Order number is required")
        if not items:
            raise ValidationError("Order must contain at least one item")
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(f"Unknown payment method '{payment_method}'")

        lines = [OrderLine.from_line_item(item) for item in items]
        subtotal = Money.zero()
        for line in lines:
            subtotal = subtotal + line.subtotal

        return Order(
            order_number=order_number,
            customer=customer,
            lines=lines,
            totals=OrderTotals.for_subtotal(subtotal, free_shipping_threshold, shipping_fee),
            payment=PaymentInfo(method=payment_method),
            created_at=created_at or datetime.now(timezone.utc),
        )

    # --- State transitions ----------------------------------------------------

    def mark_paid(self, reference: str, paid_at: datetime | None = None) -> None:
        """Transition PENDING -> COMPLETED once the payment was approved."""
        if self.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Cannot mark order paid — current status is {self.status.value}, "
                f"expected {OrderStatus.PENDING.value}"
            )
        self.payment.status = PaymentStatus.APPROVED
        self.payment.reference = reference
        self.payment.paid_at = paid_at or self.created_at
        self.status = OrderStatus.COMPLETED

    # --- Computed properties --------------------------------------------------

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    # --- Wire format ----------------------------------------------------------

    def to_payload(self) -> dict:
        """The sale document the Sales Service accepts."""
        paid_at = self.payment.paid_at or self.created_at
        return {
            "numeroOrden": self.order_number,
            "cliente": {
                "nombre": self.customer.full_name,
                "email": self.customer.email,
                "telefono": self.customer.phone,
                "direccion": {
                    "calle": self.customer.address.street,
                    "ciudad": self.customer.address.city,
                    "provincia": self.customer.address.state,
                    "codigoPostal": self.customer.address.zip_code,
                },
            },
            "productos": [
                {
                    "id": line.product_id,
                    "nombre": line.product_name,
                    "precio": line.unit_price.amount,
                    "cantidad": line.quantity,
                    "subtotal": line.subtotal.amount,
                }
                for line in self.lines
            ],
            "totales": {
                "subtotal": self.totals.subtotal.amount,
                "envio": self.totals.shipping.amount,
                "total": self.totals.total.amount,
            },
            "pago": {
                "metodo": self.payment.method,
                "estado": self.payment.status.value,
                "fecha": paid_at.isoformat(),
                "referencia": self.payment.reference,
            },
            "estado": self.status.value,
            "canal": self.channel,
            "fechaCreacion": self.created_at.isoformat(),
        }

    @staticmethod
    def from_payload(raw: Mapping[str, Any]) -> Order:
        cliente = raw["cliente"]
        direccion = cliente.get("direccion") or {}
        first_name, _, last_name = cliente.get("nombre", "").partition(" ")
        pago = raw["pago"]
        totales = raw["totales"]
        created_at = _parse_datetime(raw.get("fechaCreacion"))
        return Order(
            order_number=raw["numeroOrden"],
            customer=Customer(
                first_name=first_name,
                last_name=last_name,
                email=cliente.get("email", ""),
                phone=cliente.get("telefono", ""),
                address=Address(
                    street=direccion.get("calle", ""),
                    city=direccion.get("ciudad", ""),
                    state=direccion.get("provincia", ""),
                    zip_code=direccion.get("codigoPostal", ""),
                ),
            ),
            lines=[
                OrderLine(
                    product_id=str(p["id"]),
                    product_name=p.get("nombre", ""),
                    unit_price=Money.of(p["precio"]),
                    quantity=int(p["cantidad"]),
                )
                for p in raw["productos"]
            ],
            totals=OrderTotals(
                subtotal=Money.of(totales["subtotal"]),
                shipping=Money.of(totales.get("envio", 0)),
                total=Money.of(totales["total"]),
            ),
            payment=PaymentInfo(
                method=pago["metodo"],
                status=PaymentStatus(pago.get("estado", PaymentStatus.PENDING.value)),
                reference=pago.get("referencia"),
                paid_at=_parse_datetime(pago.get("fecha")),
            ),
            status=OrderStatus(raw.get("estado", OrderStatus.PENDING.value)),
            channel=raw.get("canal", "web"),
            created_at=created_at or datetime.now(timezone.utc),
        )


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    # Browsers write a trailing "Z"; fromisoformat wants an offset on 3.10.
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
