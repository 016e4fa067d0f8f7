"""Order repository for database operations"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from models.order import Order as OrderModel, OrderLine as OrderLineModel
from domain.orders.order import Order, OrderLine
from domain.orders.ports import OrderRepository
from domain.orders.status import OrderStatus, PaymentMethod, PaymentStatus


class OrderNotPersisted(LookupError):
    """Raised when updating an order that was never created."""


class SqlOrderRepository(OrderRepository):
    """Repository for customer_order / customer_order_line rows.

    Maps the Order aggregate to a header row plus one row per line. Lines are
    rewritten on update; line ids are kept so unchanged lines keep their rows.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create(self, order: Order) -> Order:
        db_order = OrderModel(
            id=order.order_id,
            customer_id=order.customer_id,
            status=order.status.value,
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            created_at=order.created_at,
            updated_at=order.updated_at,
            lines=self._line_rows(order)
        )

        # Savepoint: a failed insert leaves the request transaction usable
        # for the stock release that follows it
        with self.db.begin_nested():
            self.db.add(db_order)
            self.db.flush()

        return self._to_domain(db_order)

    def update(self, order: Order) -> Order:
        """Persist status and line changes.

        Raises:
            OrderNotPersisted: If the order has no row
        """
        db_order = self._load(order.order_id)
        if db_order is None:
            raise OrderNotPersisted(f"Order not found: {order.order_id}")

        db_order.status = order.status.value
        db_order.payment_status = order.payment_status.value
        db_order.updated_at = order.updated_at

        existing = {line.id: line for line in db_order.lines}
        rows = []
        for line_no, line in enumerate(order.lines, start=1):
            row = existing.get(line.line_id)
            if row is None:
                row = OrderLineModel(id=line.line_id, product_id=line.product_id)
            row.line_no = line_no
            row.quantity = line.quantity
            row.unit_price = line.unit_price
            rows.append(row)
        db_order.lines = rows

        self.db.flush()
        return self._to_domain(db_order)

    def find_by_id(self, order_id: str) -> Optional[Order]:
        db_order = self._load(order_id)
        return self._to_domain(db_order) if db_order else None

    def find_by_customer(
        self,
        customer_id: str,
        limit: int = 50,
        offset: int = 0
    ) -> list[Order]:
        query = (
            select(OrderModel)
            .where(OrderModel.customer_id == customer_id)
            .options(selectinload(OrderModel.lines))
            .order_by(OrderModel.created_at.desc(), OrderModel.id)
            .limit(limit)
            .offset(offset)
        )
        return [self._to_domain(row) for row in self.db.execute(query).scalars()]

    def _load(self, order_id: str) -> Optional[OrderModel]:
        query = (
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(selectinload(OrderModel.lines))
        )
        return self.db.execute(query).scalar_one_or_none()

    @staticmethod
    def _line_rows(order: Order) -> list[OrderLineModel]:
        return [
            OrderLineModel(
                id=line.line_id,
                line_no=line_no,
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.unit_price
            )
            for line_no, line in enumerate(order.lines, start=1)
        ]

    @staticmethod
    def _to_domain(db_order: OrderModel) -> Order:
        return Order(
            order_id=db_order.id,
            customer_id=db_order.customer_id,
            lines=[
                OrderLine(
                    line_id=row.id,
                    product_id=row.product_id,
                    quantity=row.quantity,
                    unit_price=Decimal(row.unit_price)
                )
                for row in db_order.lines
            ],
            payment_method=PaymentMethod(db_order.payment_method),
            status=OrderStatus(db_order.status),
            payment_status=PaymentStatus(db_order.payment_status),
            created_at=db_order.created_at,
            updated_at=db_order.updated_at,
        )
