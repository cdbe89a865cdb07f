import pytest

from infrastructure.external.payments.exceptions import TrustFailure
from infrastructure.external.payments.push import InboundMessage, InboundMessageValidator


TRUSTED = "89.184.168.65"


def test_trusted_post_is_accepted():
    validator = InboundMessageValidator(
        query={"trxid": "123456"},
        body={"status": "Success", "rtlo": "69391"},
        remote_addr=TRUSTED,
        method="POST",
    )
    assert validator.accepted is True
    assert validator.trust_failure is None
    assert validator.transaction_id == "123456"
    assert validator.status == "Success"
    assert validator.is_success() is True
    assert validator.get("RTLO") == "69391"

    response = validator.response
    assert response.status_code == 200
    assert response.body == "OK"
    assert response.headers["Content-Type"] == "text/plain; charset=UTF-8"
    assert response.headers["Pragma"] == "no-cache"
    assert "no-store" in response.headers["Cache-Control"]
    assert response.status_line == "HTTP/1.1 200 OK"


def test_second_trusted_range_is_accepted():
    validator = InboundMessageValidator(body={"status": "Success"}, remote_addr="78.152.58.2", method="post")
    assert validator.accepted is True


@pytest.mark.parametrize("method", ["GET", "HEAD", "PUT", "DELETE"])
def test_trusted_non_post_gets_405(method):
    validator = InboundMessageValidator(query={"status": "Success"}, remote_addr=TRUSTED, method=method)
    assert validator.accepted is False
    assert validator.message is None
    assert validator.response.status_code == 405
    assert validator.response.headers["Allow"] == "POST"
    assert validator.response.body == ""
    assert isinstance(validator.trust_failure, TrustFailure)
    assert validator.trust_failure.method == method


@pytest.mark.parametrize(
    "remote_addr, method",
    [("1.2.3.4", "GET"), ("1.2.3.4", "POST"), (None, "POST"), ("", "POST"), ("10.89.184.168", "POST")],
)
def test_untrusted_client_gets_404(remote_addr, method):
    validator = InboundMessageValidator(body={"status": "Success"}, remote_addr=remote_addr, method=method)
    assert validator.accepted is False
    assert validator.is_success() is False
    assert validator.status is None
    assert validator.response.status_code == 404
    assert validator.response.reason == "Not Found"
    assert "Allow" not in validator.response.headers
    assert validator.trust_failure.remote_addr == remote_addr


def test_prefixes_are_matched_as_plain_strings():
    # 89.184.1680 is no address, but it starts with a trusted prefix
    validator = InboundMessageValidator(body={"status": "Success"}, remote_addr="89.184.1680", method="POST")
    assert validator.accepted is True


def test_trusted_prefixes_can_be_overridden():
    validator = InboundMessageValidator(
        body={"status": "Success"},
        remote_addr="192.0.2.10",
        method="POST",
        trusted_prefixes=["192.0.2."],
    )
    assert validator.accepted is True
    rejected = InboundMessageValidator(
        body={"status": "Success"},
        remote_addr=TRUSTED,
        method="POST",
        trusted_prefixes=["192.0.2."],
    )
    assert rejected.response.status_code == 404


def test_http_10_requests_get_an_http_10_status_line():
    validator = InboundMessageValidator(remote_addr="1.2.3.4", method="GET", protocol="HTTP/1.0")
    assert validator.response.status_line == "HTTP/1.0 404 Not Found"
    trusted = InboundMessageValidator(remote_addr=TRUSTED, method="GET", protocol="http/1.0")
    assert trusted.response.status_line == "HTTP/1.0 405 Method Not Allowed"


def test_body_overrides_query_and_empty_values_are_dropped():
    message = InboundMessage.merge(
        query={"status": "Open", "trxid": "111", "a+b": "x", "empty": ""},
        body={"Status": "Success", "trxid": "", "zero": "0", "list": ["first", "second"]},
    )
    assert message.status == "Success"
    assert message.transaction_id == "111"
    assert message["a b"] == "x"
    assert "empty" not in message
    assert message["zero"] == "0"
    assert message["LIST"] == "first"
    assert len(message) == 5


@pytest.mark.parametrize(
    "status, expected",
    [
        ("Success", True),
        ("SUCCESS", True),
        ("success", True),
        ("000000 OK", True),
        ("000000 OK Transaction paid", True),
        ("000000 ok", False),
        ("Cancelled", False),
        ("TP0010 Transaction has not been completed, try again later", False),
        (" Success", False),
    ],
)
def test_is_success(status, expected):
    assert InboundMessage({"status": status}).is_success() is expected


def test_message_without_status_is_not_successful():
    assert InboundMessage({"trxid": "1"}).is_success() is False
