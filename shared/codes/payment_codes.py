"""
Payment specific codes and TargetPay gateway error identifiers.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    # Generic success
    SUCCESS = 0

    # Gateway/Network errors (6xxxx)
    TRANSPORT_FAILURE = 60000
    PROTOCOL_ERROR = 60001
    TRUST_FAILURE = 60002


# Response code the gateway prefixes to every successful start response.
GATEWAY_OK = "000000"

# TargetPay error identifiers reused for local validation failures.
TP_NO_LAYOUT_CODE = "TP0001"
TP_AMOUNT_TOO_LOW = "TP0002"
TP_AMOUNT_TOO_HIGH = "TP0003"
TP_COUNTRY_NOT_SUPPORTED = "TP0008"
