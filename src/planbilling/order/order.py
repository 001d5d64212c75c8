"""Order builder — payment order requests assembled from pending invoices.

An Order is transient: it is built on demand and handed to the payment
gateway, never persisted by the billing domain.
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog

from planbilling.gateway import get_gateway
from planbilling.gateway.port import OrderResult, PaymentGateway
from planbilling.invoice.ledger import pending_invoices
from planbilling.shared.money import to_currency, to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderItem:
    id: str | int
    price: Decimal

    def to_dict(self) -> dict:
        return {"id": self.id, "price": str(to_currency(self.price))}


@dataclass(frozen=True)
class Order:
    id: str | int
    items: tuple[OrderItem, ...]

    def total(self) -> Decimal:
        return sum((item.price for item in self.items), Decimal("0"))

    def to_dict(self) -> dict:
        """The ``{id, items: [{id, price}]}`` structure consumed by payment gateways."""
        return {"id": self.id, "items": [item.to_dict() for item in self.items]}


def _as_item(item) -> OrderItem:
    if isinstance(item, OrderItem):
        return item
    return OrderItem(id=item["id"], price=to_decimal(item["price"], "price"))


def create_order(plan, order_id=None, items=None) -> Order:
    """Build the payment order for ``plan``.

    By default the order carries the plan's identifier and one item per
    pending invoice. ``order_id`` and ``items`` each replace only their own
    default.
    """
    if items is None:
        order_items = tuple(
            OrderItem(id=str(invoice.id), price=invoice.amount_due()) for invoice in pending_invoices(plan)
        )
    else:
        order_items = tuple(_as_item(item) for item in items)

    return Order(
        id=str(plan.id) if order_id is None else order_id,
        items=order_items,
    )


def place_order(plan, gateway: PaymentGateway | None = None, order_id=None, items=None) -> OrderResult:
    """Build the order for ``plan`` and hand it to the payment gateway."""
    order = create_order(plan, order_id=order_id, items=items)
    gateway = gateway or get_gateway()
    result = gateway.create_order(order)

    if result.success:
        logger.info(
            "Order handed to payment gateway",
            plan_id=str(plan.id),
            order_id=str(order.id),
            item_count=len(order.items),
            gateway_order_id=result.gateway_order_id,
        )
    else:
        logger.warning(
            "Payment gateway rejected order",
            plan_id=str(plan.id),
            order_id=str(order.id),
            reason=result.failure_reason,
        )
    return result
