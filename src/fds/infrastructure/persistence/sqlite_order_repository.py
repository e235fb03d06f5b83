"""SQLite-backed implementation of OrderRepository.

Each call opens its own connection, so concurrent requests (threads or
processes) share nothing but the database file. Writes run inside
``BEGIN IMMEDIATE`` transactions: the order row and its item rows commit
together, and status changes are single conditional UPDATEs whose WHERE
clause re-checks the expected prior state.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from fds.domain.exceptions import StoreUnavailableError
from fds.domain.model.order import Order, OrderItem, OrderStatus
from fds.domain.model.value_objects import Money, Quantity
from fds.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

_STATUSES = ", ".join(f"'{s.value}'" for s in OrderStatus)

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS orders (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    customer_id      TEXT    NOT NULL,
    restaurant_id    TEXT    NOT NULL,
    status           TEXT    NOT NULL CHECK (status IN ({_STATUSES})),
    total            INTEGER NOT NULL CHECK (total >= 0),
    currency         TEXT    NOT NULL,
    delivery_address TEXT    NOT NULL CHECK (length(delivery_address) > 0),
    customer_phone   TEXT    NOT NULL DEFAULT '',
    agent_id         TEXT,
    payment_method   TEXT    NOT NULL DEFAULT 'cash',
    payment_status   TEXT    NOT NULL DEFAULT 'pending',
    created_at       TEXT    NOT NULL,
    updated_at       TEXT    NOT NULL
);

CREATE TABLE IF NOT EXISTS order_items (
    order_id     INTEGER NOT NULL REFERENCES orders (id),
    position     INTEGER NOT NULL,
    menu_item_id TEXT    NOT NULL,
    name         TEXT    NOT NULL,
    quantity     INTEGER NOT NULL CHECK (quantity > 0),
    unit_price   INTEGER NOT NULL CHECK (unit_price >= 0),
    PRIMARY KEY (order_id, position)
);

CREATE INDEX IF NOT EXISTS idx_orders_customer   ON orders (customer_id);
CREATE INDEX IF NOT EXISTS idx_orders_restaurant ON orders (restaurant_id);
CREATE INDEX IF NOT EXISTS idx_orders_agent      ON orders (agent_id);
CREATE INDEX IF NOT EXISTS idx_orders_status     ON orders (status, created_at);
"""

_ORDER_COLUMNS = (
    "id, customer_id, restaurant_id, status, currency, delivery_address, "
    "customer_phone, agent_id, payment_method, payment_status, created_at, updated_at"
)


class SqliteOrderRepository(OrderRepository):

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._ensure_schema()

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> int:
        with self._transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO orders (customer_id, restaurant_id, status, total, "
                "currency, delivery_address, customer_phone, agent_id, "
                "payment_method, payment_status, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    order.customer_id,
                    order.restaurant_id,
                    order.status.value,
                    order.total.amount,
                    order.total.currency,
                    order.delivery_address,
                    order.customer_phone,
                    order.agent_id,
                    order.payment_method,
                    order.payment_status,
                    order.created_at.isoformat(),
                    order.updated_at.isoformat(),
                ),
            )
            order_id = int(cursor.lastrowid)
            self._insert_items(conn, order_id, order.items)

        order.id = order_id
        return order_id

    def update_status(
        self,
        order_id: int,
        expected_status: OrderStatus,
        expected_agent_null: bool,
        new_status: OrderStatus,
        new_agent_id: str | None,
        updated_at: datetime,
    ) -> bool:
        agent_guard = "agent_id IS NULL" if expected_agent_null else "agent_id IS NOT NULL"
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE orders "
                "SET status = ?, agent_id = COALESCE(?, agent_id), updated_at = ? "
                f"WHERE id = ? AND status = ? AND {agent_guard}",
                (
                    new_status.value,
                    new_agent_id,
                    updated_at.isoformat(),
                    order_id,
                    expected_status.value,
                ),
            )
            return cursor.rowcount == 1

    def get_by_id(self, order_id: int) -> Order | None:
        found = self._select("WHERE id = ?", (order_id,), "")
        return found[0] if found else None

    def list_by_customer(self, customer_id: str) -> list[Order]:
        return self._select(
            "WHERE customer_id = ?", (customer_id,), "ORDER BY created_at DESC, id DESC"
        )

    def list_by_restaurant(self, restaurant_id: str) -> list[Order]:
        return self._select(
            "WHERE restaurant_id = ?", (restaurant_id,), "ORDER BY created_at DESC, id DESC"
        )

    def list_claimable(self) -> list[Order]:
        return self._select(
            "WHERE status = ? AND agent_id IS NULL",
            (OrderStatus.READY.value,),
            "ORDER BY created_at ASC, id ASC",
        )

    def list_by_agent(self, agent_id: str) -> list[Order]:
        return self._select(
            "WHERE agent_id = ?", (agent_id,), "ORDER BY created_at DESC, id DESC"
        )

    # --- Write helpers --------------------------------------------------------

    def _insert_items(
        self, conn: sqlite3.Connection, order_id: int, items: Sequence[OrderItem]
    ) -> None:
        conn.executemany(
            "INSERT INTO order_items (order_id, position, menu_item_id, name, "
            "quantity, unit_price) VALUES (?, ?, ?, ?, ?, ?)",
            [
                (
                    order_id,
                    item.position,
                    item.menu_item_id,
                    item.name,
                    item.quantity.value,
                    item.unit_price.amount,
                )
                for item in items
            ],
        )

    # --- Read helpers ---------------------------------------------------------

    def _select(self, where: str, params: tuple, order_by: str) -> list[Order]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"SELECT {_ORDER_COLUMNS} FROM orders {where} {order_by}", params
                ).fetchall()
                return [self._to_domain(conn, row) for row in rows]
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Order store unavailable: {exc}") from exc

    @staticmethod
    def _to_domain(conn: sqlite3.Connection, row: sqlite3.Row) -> Order:
        item_rows = conn.execute(
            "SELECT position, menu_item_id, name, quantity, unit_price "
            "FROM order_items WHERE order_id = ? ORDER BY position",
            (row["id"],),
        ).fetchall()
        items = [
            OrderItem(
                position=i["position"],
                menu_item_id=i["menu_item_id"],
                name=i["name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(i["unit_price"], row["currency"]),
            )
            for i in item_rows
        ]
        return Order(
            id=row["id"],
            customer_id=row["customer_id"],
            restaurant_id=row["restaurant_id"],
            items=items,
            delivery_address=row["delivery_address"],
            customer_phone=row["customer_phone"],
            status=OrderStatus(row["status"]),
            agent_id=row["agent_id"],
            payment_method=row["payment_method"],
            payment_status=row["payment_status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # --- Connection helpers ---------------------------------------------------

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(
                self._db_path, timeout=self._timeout, isolation_level=None
            )
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Cannot open order store: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._connect() as conn:
            try:
                conn.execute("BEGIN IMMEDIATE")
                yield conn
                conn.execute("COMMIT")
            except sqlite3.Error as exc:
                self._rollback(conn)
                logger.warning("Order store transaction rolled back: %s", exc)
                raise StoreUnavailableError(f"Order store unavailable: {exc}") from exc
            except BaseException:
                self._rollback(conn)
                raise

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        # Closing the connection discards the transaction if ROLLBACK fails
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as exc:
            logger.warning("Order store rollback failed: %s", exc)

    def _ensure_schema(self) -> None:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as conn:
                conn.executescript(SCHEMA)
        except (OSError, sqlite3.Error) as exc:
            raise StoreUnavailableError(f"Cannot initialise order store: {exc}") from exc
