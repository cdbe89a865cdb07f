"""
Application service orchestrating TargetPay use-cases.

The transport is injected from the composition root (API/tasks); when none
is given each client falls back to the default httpx transport. The service
holds no transaction state of its own: persisting lifecycles, issuer lists
or push results is the caller's job.
"""
from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from application.dtos.payments import (
    CheckTransaction,
    StartTransaction,
    TransactionOutcome,
    VerificationOutcome,
)
from application.ports.transport import HttpTransport
from core.logging_config import get_logger
from infrastructure.external.payments import create_transaction, create_verification
from infrastructure.external.payments.lifecycle import TransactionLifecycle
from infrastructure.external.payments.push import InboundMessage, InboundMessageValidator


logger = get_logger(__name__)

PushListener = Callable[[InboundMessage], None]


class PaymentService:
    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        *,
        issuers: Optional[Mapping[str, str]] = None,
        on_push: Optional[PushListener] = None,
    ) -> None:
        self.transport = transport
        self.issuers = issuers
        self.on_push = on_push

    def configure_transaction(self, cmd: StartTransaction) -> TransactionLifecycle:
        """Build a lifecycle and apply every supplied field in declaration order."""
        lifecycle = create_transaction(
            cmd.method,
            cmd.rtlo,
            transport=self.transport,
            remote_addr=cmd.remote_addr,
            issuers=self.issuers,
        )
        if cmd.issuer_id is not None:
            lifecycle.set_issuer(cmd.issuer_id)
        if cmd.country is not None:
            lifecycle.set_country(cmd.country)
        lifecycle.set_amount(cmd.amount)
        if cmd.currency is not None:
            lifecycle.set_currency(cmd.currency)
        if cmd.description is not None:
            lifecycle.set_description(cmd.description)
        if cmd.locale is not None:
            lifecycle.set_locale(cmd.locale)
        lifecycle.set_return_url(cmd.return_url)
        if cmd.report_url is not None:
            lifecycle.set_report_url(cmd.report_url)
        if cmd.client_ip is not None:
            lifecycle.set_client_ip(cmd.client_ip)
        return lifecycle

    def start_transaction(self, cmd: StartTransaction) -> TransactionOutcome:
        lifecycle = self.configure_transaction(cmd)
        started = lifecycle.start()
        outcome = TransactionOutcome(
            started=started,
            method=lifecycle.profile.method.value,
            state=lifecycle.state.value,
            transaction_id=lifecycle.transaction_id,
            redirect_url=lifecycle.redirect_url,
            response=lifecycle.response,
            request_url=lifecycle.request_url,
        )
        logger.info(
            "payment_start_response",
            method=outcome.method,
            started=outcome.started,
            transaction_id=outcome.transaction_id,
        )
        return outcome

    def check_transaction(self, cmd: CheckTransaction) -> VerificationOutcome:
        """Pull the transaction status.

        The outcome only says whether the gateway answered; use
        ``VerificationOutcome.classify`` with a method-specific classifier to
        interpret the response.
        """
        kwargs: dict[str, Any] = {"once": cmd.once, "transport": self.transport}
        if cmd.test is not None:
            kwargs["test"] = cmd.test
        client = create_verification(cmd.endpoint, cmd.rtlo, cmd.transaction_id, **kwargs)
        client.validate()
        outcome = client.outcome
        logger.info(
            "payment_check_response",
            endpoint=client.endpoint,
            transaction_id=cmd.transaction_id,
            request_succeeded=outcome.request_succeeded,
        )
        return outcome

    def handle_push(
        self,
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        remote_addr: Optional[str] = None,
        method: str = "POST",
        protocol: str = "HTTP/1.1",
    ) -> InboundMessageValidator:
        validator = InboundMessageValidator(
            query=query,
            body=body,
            remote_addr=remote_addr,
            method=method,
            protocol=protocol,
        )
        if validator.accepted and self.on_push is not None:
            self.on_push(validator.message)
        return validator
