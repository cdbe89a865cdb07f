"""
iDEAL issuer list loader.

TargetPay publishes the selectable issuers as HTML, XML and two JavaScript
variants; the XML form is used here::

    <issuers><issuer id="0031">ABN Amro</issuer>...</issuers>

The list feeds the issuer allow-list, so DOCTYPE declarations are refused
and entities are never resolved.
"""
from __future__ import annotations

from lxml import etree

from application.ports.transport import HttpTransport
from core.logging_config import get_logger
from domain.payment.profiles import ISSUER_LIST_URL
from infrastructure.external.payments.exceptions import ProtocolError, TransportFailure


logger = get_logger(__name__)


def parse_issuers(xml_text: str | bytes) -> dict[str, str]:
    """Map issuer id to display name for every ``<issuer>`` element."""
    content = xml_text.encode("utf-8") if isinstance(xml_text, str) else xml_text
    if b"<!doctype" in content.lower():
        raise ProtocolError("DOCTYPE declarations are not allowed in the issuer list", response=str(xml_text))

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise ProtocolError(f"Malformed issuer list: {exc}", response=str(xml_text)) from exc

    issuers: dict[str, str] = {}
    for element in root.iter("issuer"):
        issuers[element.get("id", "")] = "".join(element.itertext()).strip()
    return issuers


class IssuerLoader:
    def __init__(self, transport: HttpTransport, url: str = ISSUER_LIST_URL) -> None:
        self.transport = transport
        self.url = url

    def load(self) -> dict[str, str]:
        response = self.transport.get(self.url)
        if not 200 <= response.status_code < 300:
            raise TransportFailure(
                f"Issuer list request failed with status {response.status_code}",
                url=self.url,
                transport_code=str(response.status_code),
            )
        issuers = parse_issuers(response.text)
        logger.info("issuers_loaded", count=len(issuers))
        return issuers
