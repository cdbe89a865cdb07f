from urllib.parse import parse_qsl, urlsplit

import pytest

from application.dtos.payments import CheckTransaction, StartTransaction
from application.services.payment_service import PaymentService
from domain.common.exceptions import UnsupportedCountry
from domain.payment.issuers import KNOWN_ISSUERS


def test_start_transaction_applies_fields_in_order(stub_transport):
    transport = stub_transport("000000 5555|https://bank.example/pay")
    svc = PaymentService(transport=transport, issuers=KNOWN_ISSUERS)

    outcome = svc.start_transaction(
        StartTransaction(
            method="ideal",
            issuer_id="0721",
            amount="1250",
            description="Order 42",
            return_url="https://shop.example/return",
            report_url="https://shop.example/report",
            remote_addr="198.51.100.7",
        )
    )

    assert outcome.started is True
    assert outcome.state == "started"
    assert outcome.method == "ideal"
    assert outcome.transaction_id == "5555"
    assert outcome.redirect_url == "https://bank.example/pay"
    assert outcome.request_url == transport.calls[0]
    keys = [key for key, _ in parse_qsl(urlsplit(transport.calls[0]).query)]
    assert keys == ["rtlo", "bank", "amount", "description", "returnurl", "reporturl", "userip"]


def test_start_transaction_reports_gateway_failure(stub_transport):
    svc = PaymentService(transport=stub_transport("TP0013 Invalid return URL"))
    outcome = svc.start_transaction(
        StartTransaction(method="paysafecard", rtlo=1234, amount=500, return_url="https://shop.example/return")
    )
    assert outcome.started is False
    assert outcome.state == "failed"
    assert outcome.response == "TP0013 Invalid return URL"
    assert outcome.transaction_id is None
    assert "rtlo=1234" in outcome.request_url


def test_configuration_errors_are_raised(stub_transport):
    transport = stub_transport()
    svc = PaymentService(transport=transport)
    with pytest.raises(UnsupportedCountry):
        svc.start_transaction(
            StartTransaction(method="sofort_banking", country="NL", amount=500, return_url="https://shop.example/r")
        )
    assert transport.calls == []


def test_check_transaction(stub_transport):
    transport = stub_transport("000000 OK")
    svc = PaymentService(transport=transport)
    outcome = svc.check_transaction(CheckTransaction(endpoint="mrcash", transaction_id="777", test=True))

    assert outcome.request_succeeded is True
    assert outcome.response == "000000 OK"
    assert outcome.request_url == "https://www.targetpay.com/mrcash/check?rtlo=69391&trxid=777&once=1&test=1"
    assert outcome.classify(lambda text: text == "000000 OK") is True


def test_handle_push_notifies_listener_only_when_accepted():
    received = []
    svc = PaymentService(on_push=received.append)

    accepted = svc.handle_push(body={"trxid": "9", "status": "Success"}, remote_addr="89.184.168.10")
    rejected = svc.handle_push(body={"trxid": "9", "status": "Success"}, remote_addr="203.0.113.1")

    assert accepted.response.status_code == 200
    assert rejected.response.status_code == 404
    assert len(received) == 1
    assert received[0].transaction_id == "9"
    assert received[0].is_success() is True
