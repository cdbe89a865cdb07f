"""
Factory for TargetPay clients.
"""
from __future__ import annotations

from typing import Any, Optional

from core.settings import payment_settings
from application.ports.transport import HttpTransport


def get_transport() -> HttpTransport:
    from .base import HttpxTransport
    return HttpxTransport()


def create_transaction(method: Any, rtlo: Optional[Any] = None, **kwargs: Any):
    """Lifecycle for ``method``; ``rtlo`` falls back to ``TARGETPAY__RTLO``."""
    from .lifecycle import TransactionLifecycle
    if rtlo is None:
        rtlo = payment_settings.rtlo
    return TransactionLifecycle(method, rtlo, **kwargs)


def create_verification(endpoint: Any, rtlo: Optional[Any] = None, trxid: Optional[str] = None, **kwargs: Any):
    """Pull client for ``endpoint``; ``test`` defaults to ``TARGETPAY__TEST_MODE``."""
    from .verification import VerificationClient
    if rtlo is None:
        rtlo = payment_settings.rtlo
    kwargs.setdefault("test", payment_settings.test_mode)
    return VerificationClient(endpoint, rtlo, trxid, **kwargs)
