"""Every write to an order's payment or fulfillment state goes through the order row lock."""
import pytest

from payrecon.model import FulfillmentStatus, PaymentStatus
from payrecon.services import fulfillment, orders, payments, receipts


@pytest.fixture
def events(monkeypatch):
    seen = []
    real_lock = orders.lock_order
    real_sum = payments.total_confirmed
    real_enter = fulfillment.enter

    def lock(order_number):
        seen.append(("lock", order_number))
        return real_lock(order_number)

    def total(order_number):
        seen.append(("sum", order_number))
        return real_sum(order_number)

    def enter(order, target, now=None):
        seen.append(("enter", order.order_number))
        return real_enter(order, target, now)

    for module in (receipts, payments, fulfillment):
        monkeypatch.setattr(module, "lock_order", lock)
    monkeypatch.setattr(payments, "total_confirmed", total)
    monkeypatch.setattr(fulfillment, "enter", enter)
    return seen


def test_confirm_locks_before_summing(make_order, make_receipt, events):
    make_order("100", total=50000)
    first = make_receipt("100", 20000)
    second = make_receipt("100", 30000)

    receipts.confirm_receipt(first.id)
    _, summary = receipts.confirm_receipt(second.id)

    assert events == [
        ("lock", "100"), ("sum", "100"),
        ("lock", "100"), ("sum", "100"), ("enter", "100"),
    ]
    assert summary.paid == 50000
    assert summary.status == PaymentStatus.CONFIRMED_TOTAL


def test_reject_takes_order_lock(make_order, make_receipt, events):
    make_order("100")
    r = make_receipt("100", 20000)

    receipts.reject_receipt(r.id)

    assert events == [("lock", "100")]


def test_cash_payment_locks_before_summing(make_order, events):
    make_order("100", total=50000)

    payments.register_cash_payment("100", 10000)

    assert events[:2] == [("lock", "100"), ("sum", "100")]


def test_fulfillment_transition_locks_before_entering(make_order, events):
    order = make_order("100")

    fulfillment.transition("100", "packed")

    assert events == [("lock", "100"), ("enter", "100")]
    assert order.fulfillment_status == FulfillmentStatus.PACKED


def test_confirm_recomputes_from_rows_not_stale_order(make_order, make_receipt):
    order = make_order("100", total=50000)
    first = make_receipt("100", 20000)
    second = make_receipt("100", 30000)
    receipts.confirm_receipt(first.id)
    # a stale in-memory copy from before the first confirmation
    order.amount_paid = 0

    _, summary = receipts.confirm_receipt(second.id)

    assert summary.paid == 50000
    assert order.amount_paid == 50000
