"""Unit tests for the stock, payment, customer and business rule handlers"""

from datetime import datetime
from decimal import Decimal

import pytest

from domain.catalog.models import Customer, CustomerMeta, Product, ProductType
from domain.orders import Order, PaymentMethod, new_order, new_order_line
from domain.validation import (
    BusinessRulesValidationHandler,
    CustomerValidationHandler,
    PaymentValidationHandler,
    StockValidationHandler,
    ValidationContext,
)


CUSTOMER = Customer(id="cust_1", name="Maria Silva", email="maria@example.com")


def build_context(lines, products, method=PaymentMethod.PIX, types=None, customer=CUSTOMER, meta=None):
    order = new_order(
        customer.id,
        [new_order_line(pid, qty, price) for pid, qty, price in lines],
        method,
    )
    assert isinstance(order, Order)
    return ValidationContext(
        order=order,
        customer=customer,
        products=products,
        product_types=types or {},
        customer_meta=meta,
    )


def product(pid="p1", name="Wireless Mouse", price="50.00", stock=10):
    return Product(id=pid, name=name, price=Decimal(price), stock=stock)


class TestStockValidation:

    def test_sufficient_stock(self, settings):
        ctx = build_context([("p1", 2, "50.00")], [product(stock=10)])
        result = StockValidationHandler(settings).validate(ctx)
        assert result.is_valid is True
        assert result.warnings == []
        assert result.metadata["stock_validation"]["p1"] == {
            "available": 10, "requested": 2, "type": "PHYSICAL"
        }

    def test_insufficient_physical_stock(self, settings):
        ctx = build_context([("p1", 5, "50.00")], [product(stock=3)])
        result = StockValidationHandler(settings).validate(ctx)
        assert result.is_valid is False
        assert result.errors == ["Insufficient stock for Wireless Mouse. Available: 3, requested: 5"]

    def test_low_stock_warns(self, settings):
        ctx = build_context([("p1", 3, "50.00")], [product(stock=5)])
        result = StockValidationHandler(settings).validate(ctx)
        assert result.is_valid is True
        assert result.warnings == ["Low stock for Wireless Mouse"]

    def test_missing_product(self, settings):
        ctx = build_context([("ghost", 1, "10.00")], [])
        result = StockValidationHandler(settings).validate(ctx)
        assert result.errors == ["Product ghost not found"]

    def test_digital_uses_capacity_sentinel(self, settings):
        ctx = build_context(
            [("p1", 50, "20.00")],
            [product(name="Python Course", stock=1)],
            types={"p1": ProductType.DIGITAL},
        )
        result = StockValidationHandler(settings).validate(ctx)
        assert result.is_valid is True
        assert result.warnings == []
        assert result.metadata["stock_validation"]["p1"]["available"] == settings.DIGITAL_STOCK_CAPACITY

    def test_service_without_slots(self, settings):
        ctx = build_context(
            [("p1", 3, "300.00")],
            [product(name="Consultoria", stock=2)],
            types={"p1": ProductType.SERVICE},
        )
        result = StockValidationHandler(settings).validate(ctx)
        assert result.errors == ["Service Consultoria does not have enough available slots"]


class TestPaymentValidation:

    def test_below_minimum_order_value(self, settings):
        ctx = build_context([("p1", 1, "5.00")], [product(price="5.00")])
        result = PaymentValidationHandler(settings).validate(ctx)
        assert result.is_valid is False
        assert result.errors == [
            "Order total 5.00 is below the minimum order value of 10.00"
        ]

    def test_valid_payment_metadata(self, settings):
        ctx = build_context([("p1", 2, "50.00")], [product()])
        result = PaymentValidationHandler(settings).validate(ctx)
        assert result.is_valid is True
        assert result.metadata["payment_validation"]["method"] == "PIX"
        assert result.metadata["payment_validation"]["amount"] == Decimal("100.00")

    def test_high_value_credit_card_warns(self, settings):
        ctx = build_context([("p1", 1, "6000.00")], [product(price="6000.00")], method=PaymentMethod.CREDIT_CARD)
        result = PaymentValidationHandler(settings).validate(ctx)
        assert result.is_valid is True
        assert len(result.warnings) == 1
        assert "credit card" in result.warnings[0]

    def test_high_value_boleto_warns(self, settings):
        ctx = build_context([("p1", 1, "1500.00")], [product(price="1500.00")], method=PaymentMethod.BOLETO)
        result = PaymentValidationHandler(settings).validate(ctx)
        assert result.is_valid is True
        assert len(result.warnings) == 1
        assert "Boletos above 1000.00" in result.warnings[0]


class TestCustomerValidation:

    def test_valid_customer(self, settings):
        ctx = build_context([("p1", 1, "50.00")], [product()])
        result = CustomerValidationHandler(settings).validate(ctx)
        assert result.is_valid is True
        assert result.metadata["customer_validation"] == {
            "customer_id": "cust_1", "email": "maria@example.com", "is_vip": False
        }

    def test_invalid_email_and_short_name(self, settings):
        ctx = build_context(
            [("p1", 1, "50.00")],
            [product()],
            customer=Customer(id="cust_2", name="M", email="not-an-email"),
        )
        result = CustomerValidationHandler(settings).validate(ctx)
        assert result.errors == [
            "Customer email is invalid",
            "Customer name must have at least 2 characters",
        ]

    def test_email_with_trailing_newline_is_invalid(self, settings):
        ctx = build_context(
            [("p1", 1, "50.00")],
            [product()],
            customer=Customer(id="cust_2", name="Maria", email="maria@example.com\n"),
        )
        assert CustomerValidationHandler(settings).validate(ctx).errors == ["Customer email is invalid"]

    def test_credit_limit_applies_to_credit_card(self, settings):
        meta = CustomerMeta(credit_limit=Decimal("80.00"))
        card = build_context([("p1", 2, "50.00")], [product()], method=PaymentMethod.CREDIT_CARD, meta=meta)
        pix = build_context([("p1", 2, "50.00")], [product()], method=PaymentMethod.PIX, meta=meta)

        assert CustomerValidationHandler(settings).validate(card).errors == [
            "Order total exceeds credit limit of 80.00"
        ]
        assert CustomerValidationHandler(settings).validate(pix).is_valid is True

    def test_delivery_region(self, settings):
        handler = CustomerValidationHandler(settings)
        served = build_context([("p1", 1, "50.00")], [product()], meta=CustomerMeta(delivery_region="SP"))
        remote = build_context([("p1", 1, "50.00")], [product()], meta=CustomerMeta(delivery_region="AM"))
        assert handler.validate(served).is_valid is True
        assert handler.validate(remote).errors == ["Delivery region not served: AM"]

    def test_vip_warns(self, settings):
        ctx = build_context([("p1", 1, "50.00")], [product()], meta=CustomerMeta(is_vip=True))
        result = CustomerValidationHandler(settings).validate(ctx)
        assert result.is_valid is True
        assert len(result.warnings) == 1
        assert result.metadata["customer_validation"]["is_vip"] is True


class TestBusinessRulesValidation:

    @staticmethod
    def handler(settings, hour=10):
        return BusinessRulesValidationHandler(settings, clock=lambda: datetime(2026, 3, 10, hour))

    def test_too_many_lines(self, settings):
        lines = [(f"p{i}", 1, "10.00") for i in range(settings.MAX_ORDER_LINES + 1)]
        products = [product(pid, price="10.00") for pid, _, _ in lines]
        result = self.handler(settings).validate(build_context(lines, products))
        assert result.errors == [f"Maximum of {settings.MAX_ORDER_LINES} items per order"]

    def test_duplicate_product_lines(self, settings):
        ctx = build_context([("p1", 1, "50.00")], [product()])
        ctx.order = Order(
            order_id="order_dup",
            customer_id="cust_1",
            lines=[*ctx.order.lines, new_order_line("p1", 1, "50.00")],
            payment_method=PaymentMethod.PIX,
        )
        result = self.handler(settings).validate(ctx)
        assert result.errors == ["The same product cannot be added more than once: p1"]

    def test_mixed_physical_and_digital_warns(self, settings):
        ctx = build_context(
            [("p1", 1, "50.00"), ("p2", 1, "20.00")],
            [product(), product("p2", name="Python Course", price="20.00")],
            types={"p1": ProductType.PHYSICAL, "p2": ProductType.DIGITAL},
        )
        result = self.handler(settings).validate(ctx)
        assert result.is_valid is True
        assert len(result.warnings) == 1
        assert result.metadata["business_rules_validation"]["product_types"] == ["DIGITAL", "PHYSICAL"]

    def test_services_with_products_warns(self, settings):
        ctx = build_context(
            [("p1", 1, "50.00"), ("p2", 1, "300.00")],
            [product(), product("p2", name="Consultoria", price="300.00")],
            types={"p1": ProductType.PHYSICAL, "p2": ProductType.SERVICE},
        )
        result = self.handler(settings).validate(ctx)
        assert result.warnings == ["Order contains services and products - check scheduling"]

    @pytest.mark.parametrize("hour, expected", [(8, False), (9, True), (18, True), (19, False)])
    def test_business_hours_bounds_are_inclusive(self, settings, hour, expected):
        assert self.handler(settings).is_business_hours(datetime(2026, 3, 10, hour)) is expected

    def test_high_value_after_hours_warns(self, settings):
        ctx = build_context([("p1", 1, "1500.00")], [product(price="1500.00")])
        night = self.handler(settings, hour=22).validate(ctx)
        day = self.handler(settings, hour=11).validate(ctx)
        assert night.warnings == ["High-value order outside business hours - processing may be delayed"]
        assert night.metadata["business_rules_validation"]["is_business_hours"] is False
        assert day.warnings == []
