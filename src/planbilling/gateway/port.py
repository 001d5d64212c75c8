"""Payment gateway port (abstract interface).

The gateway receives the order request assembled by the billing domain and is
responsible for creating the remote payment order and settling it. Adapters
implement this contract; domain code never talks to a payment provider
directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from planbilling.order.order import Order


@dataclass(frozen=True)
class OrderResult:
    """Result of handing an order to the payment gateway."""

    success: bool
    gateway_order_id: str | None = None
    payment_url: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_order(self, order: "Order") -> OrderResult:
        """Create a remote payment order for ``order``."""
        ...
