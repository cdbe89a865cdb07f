"""
Business codes shared by the domain and infrastructure layers.

Parameter codes live here; TargetPay round-trip codes are kept under
`shared.codes.payment_codes`.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """Status codes carried by ``BusinessException``."""

    SUCCESS = 0

    # Parameter errors (1xxxx)
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003


__all__ = ["BusinessCode"]
