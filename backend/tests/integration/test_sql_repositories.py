"""Integration tests for the SQLAlchemy repositories (SQLite in-memory)"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from domain.catalog.models import ProductStatus, ProductType
from domain.orders import OrderStatus, PaymentMethod, PaymentStatus, new_order, new_order_line
from domain.payments import PixPaymentStrategy
from domain.validation import ValidationChain
from infrastructure.repositories import (
    OrderNotPersisted,
    SqlCustomerRepository,
    SqlOrderRepository,
    SqlProductRepository,
)
from orders.pipeline import OrderPipeline
from orders.results import CreateOrderRequest, OrderErrorCode, OrderLineRequest


def make_order(customer_id="cust_1", now=None, lines=(("prod_mouse", 2, "50.00"),)):
    return new_order(
        customer_id,
        [new_order_line(pid, qty, price) for pid, qty, price in lines],
        PaymentMethod.PIX,
        now=now,
    )


class TestSqlProductRepository:

    def test_find_by_ids_skips_unknown(self, db_session):
        repo = SqlProductRepository(db_session)
        found = repo.find_by_ids(["prod_mouse", "ghost", "prod_course"])
        assert sorted(p.id for p in found) == ["prod_course", "prod_mouse"]

    def test_maps_columns_to_domain(self, db_session):
        course = SqlProductRepository(db_session).find_by_id("prod_course")
        assert course.price == Decimal("200.00")
        assert course.product_type == ProductType.DIGITAL
        assert course.status == ProductStatus.ACTIVE

        mouse = SqlProductRepository(db_session).find_by_id("prod_mouse")
        assert mouse.product_type is None

    def test_reserve_decrements(self, db_session):
        repo = SqlProductRepository(db_session)
        assert repo.reserve_stock("prod_mouse", 4) is True
        assert repo.find_by_id("prod_mouse").stock == 6

    def test_reserve_refuses_to_go_negative(self, db_session):
        repo = SqlProductRepository(db_session)
        assert repo.reserve_stock("prod_keyboard", 2) is False
        assert repo.find_by_id("prod_keyboard").stock == 1

    def test_reserve_unknown_product(self, db_session):
        assert SqlProductRepository(db_session).reserve_stock("ghost", 1) is False

    def test_last_unit_and_release_toggle_status(self, db_session):
        repo = SqlProductRepository(db_session)
        assert repo.reserve_stock("prod_keyboard", 1) is True
        keyboard = repo.find_by_id("prod_keyboard")
        assert keyboard.stock == 0
        assert keyboard.status == ProductStatus.OUT_OF_STOCK
        assert repo.reserve_stock("prod_keyboard", 1) is False

        repo.release_stock("prod_keyboard", 1)
        keyboard = repo.find_by_id("prod_keyboard")
        assert keyboard.stock == 1
        assert keyboard.status == ProductStatus.ACTIVE


class TestSqlCustomerRepository:

    def test_find_by_id(self, db_session):
        repo = SqlCustomerRepository(db_session)
        assert repo.find_by_id("cust_1").email == "maria@example.com"
        assert repo.find_by_id("nobody") is None


class TestSqlOrderRepository:

    def test_create_and_find(self, db_session):
        repo = SqlOrderRepository(db_session)
        order = make_order(lines=(("prod_mouse", 2, "50.00"), ("prod_keyboard", 1, "150.00")))
        repo.create(order)
        db_session.commit()

        stored = repo.find_by_id(order.order_id)
        assert stored.customer_id == "cust_1"
        assert stored.status == OrderStatus.PENDING
        assert stored.payment_method == PaymentMethod.PIX
        assert [line.product_id for line in stored.lines] == ["prod_mouse", "prod_keyboard"]
        assert stored.total == Decimal("250.00")
        assert stored.created_at.tzinfo is not None

    def test_find_missing(self, db_session):
        assert SqlOrderRepository(db_session).find_by_id("order_missing") is None

    def test_update_status_and_lines(self, db_session):
        repo = SqlOrderRepository(db_session)
        order = make_order()
        repo.create(order)

        order.add_item("prod_keyboard", 1, "150.00")
        order.update_item_quantity("prod_mouse", 1)
        order.complete_payment()
        order.confirm()
        repo.update(order)
        db_session.commit()

        stored = repo.find_by_id(order.order_id)
        assert stored.status == OrderStatus.CONFIRMED
        assert stored.payment_status == PaymentStatus.COMPLETED
        assert [(line.product_id, line.quantity) for line in stored.lines] == [
            ("prod_mouse", 1), ("prod_keyboard", 1)
        ]
        assert stored.lines[0].line_id == order.lines[0].line_id

    def test_update_unknown_order(self, db_session):
        with pytest.raises(OrderNotPersisted):
            SqlOrderRepository(db_session).update(make_order())

    def test_find_by_customer_newest_first(self, db_session):
        repo = SqlOrderRepository(db_session)
        start = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        created = [make_order(now=start + timedelta(hours=i)) for i in range(3)]
        for order in created:
            repo.create(order)
        db_session.commit()

        listed = repo.find_by_customer("cust_1")
        assert [o.order_id for o in listed] == [o.order_id for o in reversed(created)]

        page = repo.find_by_customer("cust_1", limit=1, offset=1)
        assert [o.order_id for o in page] == [created[1].order_id]
        assert repo.find_by_customer("someone_else") == []


class TestPipelineOnSql:

    def test_order_is_stored_and_stock_reserved(self, db_session, registry, settings, fixed_clock):
        pipeline = OrderPipeline(
            orders=SqlOrderRepository(db_session),
            products=SqlProductRepository(db_session),
            customers=SqlCustomerRepository(db_session),
            payments=registry,
            validation_chain=ValidationChain.complete(settings, clock=fixed_clock),
            settings=settings,
        )
        outcome = pipeline.create_order(CreateOrderRequest(
            customer_id="cust_1",
            lines=[OrderLineRequest("prod_mouse", 3), OrderLineRequest("prod_course", 1)],
            payment_method=PaymentMethod.PIX,
            payment_data={"pix_key": "maria@example.com", "user_document": "12345678901"},
        ))
        db_session.commit()

        assert outcome.success
        assert outcome.order.total == Decimal("350.00")
        assert SqlOrderRepository(db_session).find_by_id(outcome.order.order_id) is not None

        products = SqlProductRepository(db_session)
        assert products.find_by_id("prod_mouse").stock == 7
        assert products.find_by_id("prod_course").stock == 5

    def test_second_order_for_last_unit_fails_validation(self, db_session, registry, settings, fixed_clock):
        pipeline = OrderPipeline(
            orders=SqlOrderRepository(db_session),
            products=SqlProductRepository(db_session),
            customers=SqlCustomerRepository(db_session),
            payments=registry,
            validation_chain=ValidationChain.complete(settings, clock=fixed_clock),
            settings=settings,
        )
        req = CreateOrderRequest(
            customer_id="cust_1",
            lines=[OrderLineRequest("prod_keyboard", 1)],
            payment_method="BOLETO",
            payment_data={
                "user_document": "12345678901",
                "user_name": "Maria Silva",
                "user_address": "Rua A, 1",
            },
        )
        assert pipeline.create_order(req).success
        second = pipeline.create_order(req)
        assert second.error_code == OrderErrorCode.PRODUCT_UNAVAILABLE

    def test_failed_insert_voids_payment_and_restores_stock(
        self, db_session, session_factory, registry, settings, fixed_clock
    ):
        """A duplicate order row fails the insert after payment and stock reservation."""
        other = session_factory()
        SqlOrderRepository(other).create(new_order(
            "cust_1", [new_order_line("prod_course", 1, "200.00")], PaymentMethod.PIX, order_id="order_dup"
        ))
        other.commit()
        other.close()

        pipeline = OrderPipeline(
            orders=SqlOrderRepository(db_session),
            products=SqlProductRepository(db_session),
            customers=SqlCustomerRepository(db_session),
            payments=registry,
            validation_chain=ValidationChain.complete(settings, clock=fixed_clock),
            settings=settings,
        )
        void = patch.object(PixPaymentStrategy, "void", autospec=True, side_effect=PixPaymentStrategy.void)
        with void as voided, patch("domain.orders.order.generate_order_id", return_value="order_dup"):
            with pytest.raises(IntegrityError):
                pipeline.create_order(CreateOrderRequest(
                    customer_id="cust_1",
                    lines=[OrderLineRequest("prod_mouse", 3)],
                    payment_method=PaymentMethod.PIX,
                    payment_data={"pix_key": "maria@example.com", "user_document": "12345678901"},
                ))

        voided.assert_called_once()
        assert SqlProductRepository(db_session).find_by_id("prod_mouse").stock == 10
        assert [o.order_id for o in SqlOrderRepository(db_session).find_by_customer("cust_1")] == ["order_dup"]
