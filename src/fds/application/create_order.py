"""Application service: Create Order use case.

Orchestrates the flow between the catalog, the order store and the event
publisher for a single restaurant's partition of a cart.
"""

from __future__ import annotations

import logging

from fds.application.dto import OrderDTO, to_order_dto
from fds.application.publishing import publish_after_commit
from fds.domain.exceptions import EntityNotFoundError, ItemUnavailableError
from fds.domain.model.cart import OrderRequest
from fds.domain.model.events import OrderCreated
from fds.domain.model.order import DEFAULT_PAYMENT_METHOD, Order, OrderItem
from fds.domain.repository.catalog_reader import CatalogReader
from fds.domain.repository.event_publisher import EventPublisher
from fds.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog: CatalogReader,
        publisher: EventPublisher | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._catalog = catalog
        self._publisher = publisher

    def handle(
        self,
        customer_id: str,
        request: OrderRequest,
        delivery_address: str,
        customer_phone: str = "",
        payment_method: str = DEFAULT_PAYMENT_METHOD,
    ) -> OrderDTO:
        """Create a pending order for one restaurant.

        Steps:
        1. Price every line from the catalog (fail the whole request if
           any item is gone, unavailable or from another restaurant).
        2. Let the Order aggregate validate all business rules.
        3. Persist order and items atomically.
        4. Announce the new order, then return a DTO.
        """
        order = self.build_order(
            customer_id, request, delivery_address, customer_phone, payment_method
        )
        return self.place(order)

    def build_order(
        self,
        customer_id: str,
        request: OrderRequest,
        delivery_address: str,
        customer_phone: str = "",
        payment_method: str = DEFAULT_PAYMENT_METHOD,
    ) -> Order:
        """Steps 1 and 2: a fully validated, unsaved Order."""
        items = self.price_request(request)

        order = Order.create(
            customer_id=customer_id,
            restaurant_id=request.restaurant_id,
            items=items,
            delivery_address=delivery_address,
            customer_phone=customer_phone,
            payment_method=payment_method,
        )
        if order.total != request.total:
            logger.info(
                "Cart total %s for restaurant %s differs from catalog total %s; "
                "using catalog prices",
                request.total,
                request.restaurant_id,
                order.total,
            )
        return order

    def place(self, order: Order) -> OrderDTO:
        """Steps 3 and 4 for an Order from ``build_order``."""
        order_id = self._order_repo.add(order)
        logger.info(
            "Created order #%s for customer %s at restaurant %s (total %s)",
            order_id,
            order.customer_id,
            order.restaurant_id,
            order.total,
        )

        publish_after_commit(
            self._publisher,
            OrderCreated(
                order_id=order_id,
                restaurant_id=order.restaurant_id,
                customer_id=order.customer_id,
                total=order.total,
                timestamp=order.created_at,
            ),
        )
        return to_order_dto(order)

    def price_request(self, request: OrderRequest) -> list[OrderItem]:
        """Build line items at *current* catalog prices (snapshot).

        Every line is checked before failing so the error names all the
        offending items at once.
        """
        items: list[OrderItem] = []
        unavailable: list[str] = []

        for position, line in enumerate(request.lines, start=1):
            try:
                entry = self._catalog.lookup(line.menu_item_id)
            except EntityNotFoundError:
                unavailable.append(line.menu_item_id)
                continue

            if not entry.available or entry.restaurant_id != request.restaurant_id:
                unavailable.append(line.menu_item_id)
                continue

            items.append(
                OrderItem(
                    position=position,
                    menu_item_id=entry.menu_item_id,
                    name=entry.name or line.name,
                    quantity=line.quantity,
                    unit_price=entry.price,  # <-- price snapshot
                )
            )

        if unavailable:
            raise ItemUnavailableError(
                unavailable,
                reason=f"restaurant {request.restaurant_id}",
            )
        return items
