from orders.payments import compute_signature, verify_payment_signature


def test_valid_signature_is_accepted(settings):
    settings.PAYMENT_KEY_SECRET = "s3cret"
    signature = compute_signature("order_1", "pay_1", "s3cret")

    assert verify_payment_signature("order_1", "pay_1", signature) is True


def test_signature_is_bound_to_both_ids(settings):
    settings.PAYMENT_KEY_SECRET = "s3cret"
    signature = compute_signature("order_1", "pay_1", "s3cret")

    assert verify_payment_signature("order_1", "pay_2", signature) is False
    assert verify_payment_signature("order_2", "pay_1", signature) is False
    assert verify_payment_signature("order_1", "pay_1", signature.upper()) is False
    assert verify_payment_signature("order_1", "pay_1", "") is False


def test_missing_secret_fails_closed(settings):
    settings.PAYMENT_KEY_SECRET = ""
    signature = compute_signature("order_1", "pay_1", "")

    assert verify_payment_signature("order_1", "pay_1", signature) is False
