import json
import logging
import sys

from config.logging import JsonFormatter, SamplingFilter


def _record(msg, level=logging.INFO, **extra):
    record = logging.LogRecord("storefront.orders", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extras():
    record = _record("order.created", event="order.created", order_id=7, total=12345)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "order.created"
    assert payload["level"] == "INFO"
    assert payload["name"] == "storefront.orders"
    assert payload["event"] == "order.created"
    assert payload["order_id"] == 7
    assert payload["time"].endswith("Z")


def test_json_formatter_stringifies_unserializable_extras():
    record = _record("cart.merged", owner=object())

    payload = json.loads(JsonFormatter().format(record))

    assert isinstance(payload["owner"], str)


def test_sampling_filter_never_drops_allowed_events():
    f = SamplingFilter(rate=0.0, levels=["INFO"], allow_events=["order.status_changed"])

    assert f.filter(_record("order.status_changed")) is True
    assert f.filter(_record("notification.sent")) is False


def test_sampling_filter_ignores_other_levels():
    f = SamplingFilter(rate=0.0, levels=["INFO"])

    assert f.filter(_record("notification.failed", level=logging.ERROR)) is True


def test_sampling_filter_bad_rate_falls_back_to_keep_all():
    f = SamplingFilter(rate="not-a-number")

    assert f.filter(_record("order.created")) is True


def test_sampling_filter_matches_event_extra():
    f = SamplingFilter(rate=0.0, allow_events=["order.created"])

    assert f.filter(_record("Order placed", event="order.created")) is True
    assert f.filter(_record("Order placed", event="cart.item_added")) is False


def test_json_formatter_keeps_base_keys_and_renders_exceptions():
    try:
        raise RuntimeError("smtp down")
    except RuntimeError:
        record = logging.LogRecord(
            "storefront.orders", logging.ERROR, __file__, 1, "notification.failed", None, sys.exc_info()
        )
    record.level = "spoofed"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "ERROR"
    assert "RuntimeError: smtp down" in payload["exc_info"]
