from core.logging_config import mask_client_ip


def test_client_ip_is_masked_in_logged_urls():
    event = {
        "event": "transport_error",
        "url": "https://www.targetpay.com/ideal/start?rtlo=1&amount=100&userip=203.0.113.9&country=49",
        "request_url": "https://www.targetpay.com/mrcash/start?rtlo=1&userip=2001%3Adb8%3A%3A1",
        "remote_addr": "89.184.168.65",
    }
    masked = mask_client_ip(None, "info", event)
    assert masked["url"] == "https://www.targetpay.com/ideal/start?rtlo=1&amount=100&userip=***&country=49"
    assert masked["request_url"] == "https://www.targetpay.com/mrcash/start?rtlo=1&userip=***"
    assert masked["remote_addr"] == "89.184.168.65"


def test_events_without_urls_are_untouched():
    event = {"event": "push_accepted", "transaction_id": "1"}
    assert mask_client_ip(None, "info", dict(event)) == event
