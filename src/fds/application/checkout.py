"""Application service: Checkout use case.

Turns a (possibly multi-restaurant) cart into one order per restaurant.

Uses a two-phase approach so a bad item in one restaurant's partition
does not leave the customer with a half-placed checkout:
  Phase 1 — split, price every partition against the catalog and build
            each Order (all aggregate rules). Fails fast before any write.
  Phase 2 — persist and announce each order in its own transaction.
"""

from __future__ import annotations

import logging

from fds.application.create_order import CreateOrderHandler
from fds.application.dto import CartLineSpec, OrderDTO
from fds.domain.model.cart import CartLine
from fds.domain.model.order import DEFAULT_PAYMENT_METHOD
from fds.domain.model.value_objects import Money, Quantity
from fds.domain.service.checkout_splitter import split_cart

logger = logging.getLogger(__name__)


class CheckoutHandler:

    def __init__(self, create_order: CreateOrderHandler) -> None:
        self._create_order = create_order

    def handle(
        self,
        customer_id: str,
        cart: list[CartLineSpec],
        delivery_address: str,
        customer_phone: str = "",
        payment_method: str = DEFAULT_PAYMENT_METHOD,
    ) -> list[OrderDTO]:
        requests = split_cart(self._to_cart_line(spec) for spec in cart)

        # Phase 1: build and validate every order before creating anything
        orders = [
            self._create_order.build_order(
                customer_id=customer_id,
                request=request,
                delivery_address=delivery_address,
                customer_phone=customer_phone,
                payment_method=payment_method,
            )
            for request in requests
        ]

        # Phase 2: one transaction per partition
        created = [self._create_order.place(order) for order in orders]
        logger.info(
            "Checkout for customer %s produced %d order(s): %s",
            customer_id,
            len(created),
            ", ".join(f"#{dto.id}" for dto in created),
        )
        return created

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_cart_line(spec: CartLineSpec) -> CartLine:
        return CartLine(
            restaurant_id=spec.restaurant_id,
            menu_item_id=spec.menu_item_id,
            quantity=Quantity(spec.quantity),
            unit_price=Money(spec.price),
            name=spec.name,
            image=spec.image,
        )
