import pytest

from application.ports.transport import TransportResponse
from domain.common.exceptions import MissingAccountCode, UnknownCheckEndpoint
from domain.payment.profiles import PaymentMethod
from infrastructure.external.payments import create_verification
from infrastructure.external.payments.exceptions import TransportFailure
from infrastructure.external.payments.verification import VerificationClient, resolve_check_endpoint


@pytest.mark.parametrize(
    "endpoint, expected",
    [
        (PaymentMethod.IDEAL, "https://www.targetpay.com/ideal/check"),
        ("iDEAL", "https://www.targetpay.com/ideal/check"),
        ("Bancontact_Mister_Cash", "https://www.targetpay.com/mrcash/check"),
        ("mr_cash", "https://www.targetpay.com/mrcash/check"),
        ("wallie_card", "https://www.targetpay.com/paysafecard/check"),
        ("DIRECT_EBANKING", "https://www.targetpay.com/directebanking/check"),
        ("https://example.test/check?", "https://example.test/check"),
    ],
)
def test_resolve_check_endpoint(endpoint, expected):
    assert resolve_check_endpoint(endpoint) == expected


def test_unknown_endpoint_is_rejected():
    with pytest.raises(UnknownCheckEndpoint):
        resolve_check_endpoint("bitcoin")


def test_request_url_serialization(stub_transport):
    client = VerificationClient("ideal", 69391, "123456", transport=stub_transport())
    assert client.request_url == "https://www.targetpay.com/ideal/check?rtlo=69391&trxid=123456&once=1&test=0"

    client.set_once(False)
    client.set_test(True)
    assert client.request_url == "https://www.targetpay.com/ideal/check?rtlo=69391&trxid=123456&once=0&test=1"


def test_request_url_without_transaction_id(stub_transport):
    client = VerificationClient(PaymentMethod.MISTER_CASH, "69391", transport=stub_transport())
    assert client.request_url == "https://www.targetpay.com/mrcash/check?rtlo=69391&once=1&test=0"


@pytest.mark.parametrize(
    "once, expected",
    [(True, True), (False, False), (None, False), (0, False), ("0", False), ("0.0", False), (1, True), ("yes", True)],
)
def test_once_coercion(stub_transport, once, expected):
    client = VerificationClient("ideal", 69391, once=once, transport=stub_transport())
    assert client.once is expected


@pytest.mark.parametrize(
    "test, expected",
    [(True, True), (False, False), (None, False), (1, True), ("1", True), ("1.0", True), (2, False), ("yes", False)],
)
def test_test_mode_coercion(stub_transport, test, expected):
    client = VerificationClient("ideal", 69391, test=test, transport=stub_transport())
    assert client.test is expected


def test_rtlo_is_required(stub_transport):
    with pytest.raises(MissingAccountCode):
        VerificationClient("ideal", None, transport=stub_transport())


def test_validate_keeps_the_raw_response(stub_transport):
    transport = stub_transport("  000000 OK\n")
    client = VerificationClient("ideal", 69391, "123456", transport=transport)

    assert client.response is None
    assert client.validate() is True
    assert client.response == "000000 OK"
    assert transport.calls == [client.request_url]

    outcome = client.outcome
    assert outcome.request_succeeded is True
    assert outcome.classify(lambda text: text.startswith("000000")) is True


def test_gateway_error_still_counts_as_answered(stub_transport):
    transport = stub_transport(TransportResponse(status_code=200, text="TP0022 No transaction found with this ID."))
    client = VerificationClient("ideal", 69391, transport=transport)
    assert client.pull() is True
    assert client.response == "TP0022 No transaction found with this ID."


def test_transport_failure_is_reported(stub_transport):
    failure = TransportFailure("timed out", url="https://www.targetpay.com", transport_code="ReadTimeout")
    client = VerificationClient("ideal", 69391, "123456", transport=stub_transport(failure))

    assert client.validate() is False
    assert client.response == "ReadTimeout timed out"
    assert client.outcome.request_succeeded is False
    assert client.outcome.classify(lambda text: True) is None


@pytest.mark.parametrize(
    "query, expected",
    [
        ({"trxid": "123456"}, "123456"),
        ({"trxid": " <b>123456</b> "}, "123456"),
        ({"trxid": "12a"}, None),
        ({"trxid": ""}, None),
        ({}, None),
    ],
)
def test_from_return_query(stub_transport, query, expected):
    client = VerificationClient.from_return_query("ideal", 69391, query, transport=stub_transport())
    assert client.transaction_id == expected


def test_factory_uses_configured_defaults(stub_transport):
    client = create_verification("ideal", trxid="1", transport=stub_transport())
    assert client.rtlo == 69391
    assert client.test is False
