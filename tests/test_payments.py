import pytest

from payrecon.errors import NotFoundError, ValidationError
from payrecon.model import FulfillmentStatus, PaymentStatus, ReceiptStatus
from payrecon.services import payments
from payrecon.services.receipts import confirm_receipt


@pytest.mark.parametrize("total,paid,expected", [
    (50000, 0, PaymentStatus.PENDING),
    (50000, 20000, PaymentStatus.CONFIRMED_PARTIAL),
    (50000, 48999, PaymentStatus.CONFIRMED_PARTIAL),
    (50000, 49000, PaymentStatus.CONFIRMED_TOTAL),
    (50000, 50000, PaymentStatus.CONFIRMED_TOTAL),
    (50000, 51000, PaymentStatus.CONFIRMED_TOTAL),
    (50000, 51001, PaymentStatus.CREDIT),
])
def test_resolve_tolerance_band(total, paid, expected):
    assert payments.resolve(total, paid) == expected


def test_resolve_tolerance_can_be_tightened():
    assert payments.resolve(50000, 49500, tolerance=0) == PaymentStatus.CONFIRMED_PARTIAL
    assert payments.resolve(50000, 50001, tolerance=0) == PaymentStatus.CREDIT


def test_total_confirmed_counts_only_confirmed_receipts_and_all_cash(make_order, make_receipt):
    make_order("200", total=90000)
    make_receipt("200", 10000, status=ReceiptStatus.CONFIRMED)
    make_receipt("200", 20000, status=ReceiptStatus.PENDING)
    make_receipt("200", 40000, status=ReceiptStatus.REJECTED)
    payments.register_cash_payment("200", 5000)

    assert payments.total_confirmed("200") == 15000
    assert payments.pending_total("200") == 20000


def test_cash_and_receipt_combine_into_partial_payment(make_order, make_receipt):
    make_order("300", total=30000)
    _, summary = payments.register_cash_payment("300", 15000, recorded_by="caja")
    assert summary.status == PaymentStatus.CONFIRMED_PARTIAL

    r = make_receipt("300", 10000)
    _, summary = confirm_receipt(r.id)

    assert summary.paid == 25000
    assert summary.balance == 5000
    assert summary.status == PaymentStatus.CONFIRMED_PARTIAL


def test_balance_matches_total_minus_paid_after_each_recompute(make_order, make_receipt):
    order = make_order("301", total=30000)
    for amount in (5000, 7000):
        payments.register_cash_payment("301", amount)
        assert order.balance == order.total_amount - order.amount_paid
    r = make_receipt("301", 20000)
    confirm_receipt(r.id)
    assert order.amount_paid == 32000
    assert order.balance == -2000
    assert order.payment_status == PaymentStatus.CREDIT


def test_full_cash_payment_moves_order_to_ready_to_print(make_order):
    order = make_order("400", total=30000)
    payment, summary = payments.register_cash_payment("400", "29500", note="pagó en local")

    assert payment.amount == 29500
    assert payment.recorded_by == "system"
    assert summary.status == PaymentStatus.CONFIRMED_TOTAL
    assert order.fulfillment_status == FulfillmentStatus.READY_TO_PRINT
    assert order.printed_at is not None


@pytest.mark.parametrize("amount", [0, -100, "abc", None])
def test_cash_payment_requires_positive_amount(make_order, amount):
    make_order("500")
    with pytest.raises(ValidationError):
        payments.register_cash_payment("500", amount)


def test_cash_payment_for_unknown_order(app):
    with pytest.raises(NotFoundError):
        payments.register_cash_payment("nope", 1000)


def test_payment_history_merges_both_channels_newest_first(make_order, make_receipt):
    make_order("600", total=30000)
    make_receipt("600", 10000)
    payments.register_cash_payment("600", 5000)

    history = payments.payment_history("600")

    assert {p["kind"] for p in history["payments"]} == {"transfer", "cash"}
    stamps = [p["created_at"] for p in history["payments"]]
    assert stamps == sorted(stamps, reverse=True)
    assert history["order"]["money"]["paid"] == 5000
