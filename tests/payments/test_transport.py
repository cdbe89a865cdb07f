import httpx
import pytest

from application.ports.transport import HttpTransport
from infrastructure.external.payments.base import HttpxTransport
from infrastructure.external.payments.exceptions import TransportFailure


def _mock_clients(monkeypatch, handler):
    real_client = httpx.Client
    monkeypatch.setattr(httpx, "Client", lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs))


def test_transport_satisfies_the_port():
    assert isinstance(HttpxTransport(), HttpTransport)


def test_timeouts_come_from_settings():
    timeouts = HttpxTransport().timeouts
    assert timeouts.connect == 5.0
    assert timeouts.read == 10.0


def test_get_returns_any_http_response(monkeypatch):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(500, text="TP9999 Internal error")

    _mock_clients(monkeypatch, handler)
    response = HttpxTransport().get("https://www.targetpay.com/ideal/start?rtlo=1")

    assert response.status_code == 500
    assert response.text == "TP9999 Internal error"
    assert seen[0].method == "GET"
    assert seen[0].headers["User-Agent"].startswith("targetpay-client")


def test_connection_errors_become_transport_failures(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    _mock_clients(monkeypatch, handler)
    with pytest.raises(TransportFailure) as exc_info:
        HttpxTransport().get("https://www.targetpay.com/ideal/start")

    failure = exc_info.value
    assert failure.transport_code == "ConnectError"
    assert failure.diagnostic == "ConnectError Connection refused"
    assert failure.details["url"] == "https://www.targetpay.com/ideal/start"


def test_timeouts_become_transport_failures(monkeypatch):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    _mock_clients(monkeypatch, handler)
    with pytest.raises(TransportFailure) as exc_info:
        HttpxTransport().get("https://www.targetpay.com/ideal/check")
    assert exc_info.value.transport_code == "ReadTimeout"


def test_retry_is_bounded(monkeypatch):
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) < 3:
            raise httpx.ConnectError("Connection reset", request=request)
        return httpx.Response(200, text="000000 OK")

    _mock_clients(monkeypatch, handler)
    transport = HttpxTransport(retry={"max": 2, "base": 0.01})
    assert transport.get("https://www.targetpay.com/ideal/check").text == "000000 OK"
    assert len(attempts) == 3

    attempts.clear()
    with pytest.raises(TransportFailure):
        HttpxTransport(retry={"max": 1, "base": 0.01}).get("https://www.targetpay.com/ideal/check")
    assert len(attempts) == 2


def test_no_retry_by_default(monkeypatch):
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("Connection refused", request=request)

    _mock_clients(monkeypatch, handler)
    with pytest.raises(TransportFailure):
        HttpxTransport().get("https://www.targetpay.com/ideal/check")
    assert len(attempts) == 1
