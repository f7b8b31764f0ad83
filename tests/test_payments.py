"""External payment confirmation state."""
from storefront.services.payment_service import PaymentService


def test_unknown_payment_is_not_confirmed(db):
    payments = PaymentService(db)
    assert payments.is_confirmed("PAY-1") is False
    assert payments.is_confirmed(None) is False
    assert payments.is_confirmed("") is False


def test_confirm_once(db):
    payments = PaymentService(db)

    assert payments.confirm("PAY-1") is True
    assert payments.confirm("PAY-1") is False
    assert payments.is_confirmed("PAY-1") is True


def test_capture_callback(db):
    payments = PaymentService(db)

    assert payments.record_capture("PAY-2", "PENDING") is False
    assert payments.record_capture("PAY-2", "completed") is True
    # a later non-completed report never reverts it
    assert payments.record_capture("PAY-2", "DECLINED") is True
