"""
TargetPay transaction lifecycle.

A lifecycle instance owns one ``TransactionRequest`` and drives it through
``CONFIGURING -> STARTED`` or ``CONFIGURING -> FAILED``. Both end states are
terminal: starting a started transaction is a no-op that succeeds, starting a
failed one is a no-op that fails. Retrying means building a new lifecycle.

Start response grammar::

    000000 <trxid>|<redirect url>     success
    <code> <message>                  anything else is a failure
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from application.ports.transport import HttpTransport
from core.logging_config import get_logger
from domain.common.exceptions import UnknownIssuer
from domain.payment.entity import (
    CLIENT_IP,
    TransactionRequest,
    TransactionResult,
    TransactionState,
)
from domain.payment.issuers import KNOWN_ISSUERS
from domain.payment.profiles import PaymentMethod, PaymentMethodProfile, get_profile
from infrastructure.external.payments.base import HttpxTransport
from infrastructure.external.payments.exceptions import ProtocolError, TransportFailure
from infrastructure.external.payments.issuers import IssuerLoader
from shared.codes.payment_codes import GATEWAY_OK


logger = get_logger(__name__)


def split_start_response(text: str) -> tuple[str, str]:
    """Split ``<code> <payload>`` on the first space."""
    parts = text.split(" ", 1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ProtocolError("Start response is not '<code> <payload>'", response=text)
    return parts[0], parts[1]


def parse_start_payload(payload: str) -> tuple[str, str]:
    """Return ``(transaction_id, redirect_url)`` from ``<trxid>|<url>``."""
    segments = payload.split("|")
    if len(segments) < 2 or not segments[0].strip() or not segments[1].strip():
        raise ProtocolError("Start payload is not '<trxid>|<redirect url>'", response=payload)
    return segments[0].strip(), segments[1].strip()


class TransactionLifecycle:
    """
    Configure and start one TargetPay payment transaction.

    Args:
        method: payment method tag, alias or profile
        rtlo: sub-account layout code
        transport: HTTP transport; defaults to ``HttpxTransport``
        remote_addr: address of the paying client, used when no client IP is set
        issuers: externally cached iDEAL issuer list, skips the lazy load
    """

    def __init__(
        self,
        method: PaymentMethod | PaymentMethodProfile | str,
        rtlo: Any,
        *,
        transport: Optional[HttpTransport] = None,
        remote_addr: Optional[str] = None,
        issuers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.profile = method if isinstance(method, PaymentMethodProfile) else get_profile(method)
        self.request = TransactionRequest(self.profile, rtlo, remote_addr=remote_addr)
        self.transport = transport or HttpxTransport()
        self.state = TransactionState.CONFIGURING
        self.result: Optional[TransactionResult] = None
        self.response: Optional[str] = None
        self._issuers: Optional[dict[str, str]] = dict(issuers) if issuers is not None else None

    # Issuers

    def get_issuers(self) -> Mapping[str, str]:
        """Selectable issuers, loaded from the gateway on first access.

        Raises ``TransportFailure`` when the list cannot be fetched. The known
        issuer list is never substituted here; see ``use_known_issuers``.
        """
        if not self.profile.requires_issuer:
            return {}
        if self._issuers is None:
            self._issuers = IssuerLoader(self.transport, self.profile.issuer_list_url).load()
        return self._issuers

    def use_known_issuers(self) -> None:
        """Replace the issuer list with the last known good list."""
        self._issuers = dict(KNOWN_ISSUERS)

    def is_issuer(self, issuer_id: Any) -> bool:
        try:
            self.request.validator.issuer(issuer_id, self.get_issuers())
        except UnknownIssuer:
            return False
        return True

    # Configuration

    def set_amount(self, amount: Any) -> None:
        self.request.set_amount(amount)

    def set_currency(self, currency: Any = "EUR") -> None:
        self.request.set_currency(currency)

    def set_description(self, description: Any) -> None:
        self.request.set_description(description)

    def set_locale(self, locale: Any) -> None:
        self.request.set_locale(locale)

    def set_return_url(self, url: Any) -> None:
        self.request.set_return_url(url)

    def set_report_url(self, url: Any) -> None:
        self.request.set_report_url(url)

    def set_client_ip(self, ip: Optional[str] = None) -> None:
        self.request.set_client_ip(ip)

    def set_issuer(self, issuer_id: Any) -> None:
        self.request.set_issuer(issuer_id, self.get_issuers())

    def set_country(self, country: Any) -> None:
        self.request.set_country(country)

    # Results

    @property
    def request_url(self) -> str:
        return self.request.url()

    @property
    def transaction_id(self) -> Optional[str]:
        return self.result.transaction_id if self.result else None

    @property
    def redirect_url(self) -> Optional[str]:
        return self.result.redirect_url if self.result else None

    @property
    def is_started(self) -> bool:
        return self.state is TransactionState.STARTED

    def start(self) -> bool:
        """
        Start the transaction.

        Validation errors are raised before any network call and leave the
        lifecycle in ``CONFIGURING``. Transport and gateway failures are
        reported as ``False`` with the diagnostic text in ``response``.
        """
        if self.state is TransactionState.STARTED:
            return True
        if self.state is TransactionState.FAILED:
            logger.info("transaction_start_skipped", method=self.profile.method.value, state=self.state.value)
            return False

        if not self.request.is_set(CLIENT_IP) and self.request.remote_addr:
            self.request.set_client_ip()
        self.request.ensure_ready()

        logger.info(
            "transaction_start_request",
            method=self.profile.method.value,
            rtlo=self.request.rtlo,
            amount=self.request.amount,
            currency=self.request.currency,
        )
        try:
            response = self.transport.get(self.request.url())
        except TransportFailure as exc:
            return self._fail(exc.diagnostic, reason="transport_failure")

        text = response.text.strip()
        try:
            code, payload = split_start_response(text)
            if code != GATEWAY_OK:
                return self._fail(text, reason="gateway_error", gateway_code=code)
            transaction_id, redirect_url = parse_start_payload(payload)
        except ProtocolError as exc:
            return self._fail(text, reason="protocol_error", error=exc.message)

        self.result = TransactionResult(
            transaction_id=transaction_id,
            redirect_url=redirect_url,
            raw_response=text,
        )
        self.response = text
        self.state = TransactionState.STARTED
        logger.info(
            "transaction_started",
            method=self.profile.method.value,
            transaction_id=transaction_id,
        )
        return True

    def _fail(self, diagnostic: str, *, reason: str, **context: Any) -> bool:
        self.response = diagnostic
        self.state = TransactionState.FAILED
        logger.warning(
            "transaction_start_failed",
            method=self.profile.method.value,
            reason=reason,
            response=diagnostic,
            **context,
        )
        return False
