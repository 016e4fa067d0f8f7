"""Unit tests for request context binding and structured log output"""

import json
import logging
from contextvars import copy_context

from observability.logging_config import JSONFormatter, RequestIDFilter
from observability.middleware import ids_from_request
from observability.request_id import bind_order_context, get_order_context, set_request_id


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("orders.pipeline", logging.INFO, __file__, 1, "Order created", None, None)
    for name, value in extra.items():
        setattr(record, name, value)
    return record


def format_in_request(record: logging.LogRecord, **ids) -> dict:
    def run():
        set_request_id("req-1")
        bind_order_context(**ids)
        RequestIDFilter().filter(record)
        return json.loads(JSONFormatter().format(record))
    return copy_context().run(run)


class TestIdsFromRequest:

    def test_order_path(self):
        assert ids_from_request("/orders/order_1") == {"order_id": "order_1"}

    def test_status_path_with_customer_query(self):
        assert ids_from_request("/orders/order_1/status", "cust_1") == {
            "order_id": "order_1",
            "customer_id": "cust_1",
        }

    def test_customer_orders_path(self):
        assert ids_from_request("/customers/cust_9/orders") == {"customer_id": "cust_9"}

    def test_create_and_unrelated_paths(self):
        assert ids_from_request("/orders") == {}
        assert ids_from_request("/health") == {}


class TestLogRecordContext:

    def test_bound_ids_reach_json_output(self):
        payload = format_in_request(make_record(), order_id="order_1", customer_id="cust_1")

        assert payload["request_id"] == "req-1"
        assert payload["order_id"] == "order_1"
        assert payload["customer_id"] == "cust_1"

    def test_explicit_extra_wins(self):
        payload = format_in_request(make_record(order_id="order_2"), order_id="order_1")
        assert payload["order_id"] == "order_2"

    def test_unbound_ids_are_omitted(self):
        payload = format_in_request(make_record())
        assert "order_id" not in payload
        assert "customer_id" not in payload

    def test_binding_is_partial(self):
        def run():
            bind_order_context(customer_id="cust_1")
            bind_order_context(order_id="order_1")
            return get_order_context()

        assert copy_context().run(run) == {"order_id": "order_1", "customer_id": "cust_1"}
