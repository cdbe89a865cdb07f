"""Pytest bootstrap configuration.

Pin the settings the tests depend on before application modules are
imported, and provide a scripted transport so no test touches the network.
"""
import os

os.environ.setdefault("TARGETPAY__RTLO", "69391")
os.environ.setdefault("TARGETPAY__TEST_MODE", "false")

import pytest

from application.ports.transport import TransportResponse


class StubTransport:
    """Replays scripted responses; an exception in the script is raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url):
        self.calls.append(url)
        if not self.responses:
            raise AssertionError(f"unexpected request: {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, TransportResponse):
            return item
        return TransportResponse(status_code=200, text=item)


@pytest.fixture
def stub_transport():
    return StubTransport
