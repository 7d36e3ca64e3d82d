import json
import logging

from pythonjsonlogger.json import JsonFormatter

from core.logging import ContextFilter, bind_payment_id, payment_id_ctx, request_id_ctx


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("payments", logging.INFO, __file__, 1, "Payment created", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_filter_adds_correlation_fields():
    request_token = request_id_ctx.set("req-1")
    payment_token = payment_id_ctx.set("pay_ctx")
    try:
        record = _record()
        ContextFilter("meal-orders-api").filter(record)
    finally:
        request_id_ctx.reset(request_token)
        payment_id_ctx.reset(payment_token)

    assert record.service_name == "meal-orders-api"
    assert record.request_id == "req-1"
    assert record.payment_id == "pay_ctx"


def test_explicit_payment_id_wins_over_context():
    token = payment_id_ctx.set("pay_ctx")
    try:
        record = _record(payment_id="pay_extra")
        ContextFilter("meal-orders-api").filter(record)
    finally:
        payment_id_ctx.reset(token)

    assert record.payment_id == "pay_extra"


def test_records_render_as_json():
    record = _record(order_id="GK_1")
    ContextFilter("meal-orders-api").filter(record)

    rendered = json.loads(JsonFormatter("%(levelname)s %(service_name)s %(message)s").format(record))

    assert rendered["message"] == "Payment created"
    assert rendered["service_name"] == "meal-orders-api"
    assert rendered["order_id"] == "GK_1"


def test_bind_payment_id_scopes_the_context():
    with bind_payment_id("pay_bound"):
        record = _record()
        ContextFilter("meal-orders-api").filter(record)

    assert record.payment_id == "pay_bound"
    assert payment_id_ctx.get() == ""
