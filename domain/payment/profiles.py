"""
Payment method profiles.

One immutable profile per supported TargetPay payment method. A transaction
lifecycle is parameterized by a profile instead of being subclassed per
method; adding a method means adding a profile.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

# Base bounds: the iDEAL minimum (EUR 0.84) and the Mister Cash and
# DIRECTebanking maximum (EUR 5,000.00).
DEFAULT_MINIMUM_AMOUNT = 84
DEFAULT_MAXIMUM_AMOUNT = 500000

ISSUER_LIST_URL = "https://www.targetpay.com/ideal/getissuers.php?format=xml"


class PaymentMethod(str, Enum):
    """Supported payment method tags"""
    IDEAL = "ideal"
    MISTER_CASH = "mister_cash"
    PAYSAFECARD = "paysafecard"
    SOFORT_BANKING = "sofort_banking"


# ISO 3166-1 alpha-2, alpha-3 and numeric codes (plus the bare dialling code)
# mapped to the country value the gateway expects.
SOFORT_COUNTRIES: Mapping[str, int] = MappingProxyType({
    "32": 32, "BE": 32, "BEL": 32, "056": 32,  # Belgium
    "41": 41, "CH": 41, "CHE": 41, "756": 41,  # Switzerland
    "43": 43, "AT": 43, "AUT": 43, "040": 43,  # Austria
    "49": 49, "DE": 49, "DEU": 49, "276": 49,  # Germany
})


@dataclass(frozen=True)
class PaymentMethodProfile:
    method: PaymentMethod
    label: str
    start_url: str
    check_url: str
    min_amount: int = DEFAULT_MINIMUM_AMOUNT
    max_amount: int = DEFAULT_MAXIMUM_AMOUNT
    # Wire fields that must be present before a transaction can start
    required_fields: tuple[str, ...] = ()
    issuer_list_url: Optional[str] = None
    countries: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    @property
    def requires_issuer(self) -> bool:
        return self.issuer_list_url is not None

    @property
    def supports_country(self) -> bool:
        return bool(self.countries)

    def accepts_amount(self, amount: int) -> bool:
        return self.min_amount <= amount <= self.max_amount


PROFILES: Mapping[PaymentMethod, PaymentMethodProfile] = MappingProxyType({
    PaymentMethod.IDEAL: PaymentMethodProfile(
        method=PaymentMethod.IDEAL,
        label="iDEAL",
        start_url="https://www.targetpay.com/ideal/start",
        check_url="https://www.targetpay.com/ideal/check",
        min_amount=84,
        max_amount=1000000,
        required_fields=("bank",),
        issuer_list_url=ISSUER_LIST_URL,
    ),
    PaymentMethod.MISTER_CASH: PaymentMethodProfile(
        method=PaymentMethod.MISTER_CASH,
        label="Bancontact/Mister Cash",
        start_url="https://www.targetpay.com/mrcash/start",
        check_url="https://www.targetpay.com/mrcash/check",
        min_amount=49,
        max_amount=500000,
    ),
    PaymentMethod.PAYSAFECARD: PaymentMethodProfile(
        method=PaymentMethod.PAYSAFECARD,
        label="Paysafecard",
        start_url="https://www.targetpay.com/paysafecard/start",
        check_url="https://www.targetpay.com/paysafecard/check",
        min_amount=10,
        max_amount=15000,
    ),
    # TargetPay serves SOFORT Banking from its /directebanking/ directory
    PaymentMethod.SOFORT_BANKING: PaymentMethodProfile(
        method=PaymentMethod.SOFORT_BANKING,
        label="SOFORT Banking",
        start_url="https://www.targetpay.com/directebanking/start",
        check_url="https://www.targetpay.com/directebanking/check",
        min_amount=49,
        max_amount=500000,
        countries=SOFORT_COUNTRIES,
    ),
})


# Method names and their (discouraged but supported) aliases, lower-cased.
CHECK_ALIASES: Mapping[str, PaymentMethod] = MappingProxyType({
    "ideal": PaymentMethod.IDEAL,
    "mister_cash": PaymentMethod.MISTER_CASH,
    "bancontact_mister_cash": PaymentMethod.MISTER_CASH,
    "mistercash": PaymentMethod.MISTER_CASH,
    "mr_cash": PaymentMethod.MISTER_CASH,
    "mrcash": PaymentMethod.MISTER_CASH,
    "paysafecard": PaymentMethod.PAYSAFECARD,
    "wallie": PaymentMethod.PAYSAFECARD,
    "wallie_card": PaymentMethod.PAYSAFECARD,
    "sofort_banking": PaymentMethod.SOFORT_BANKING,
    "direct_ebanking": PaymentMethod.SOFORT_BANKING,
    "directebanking": PaymentMethod.SOFORT_BANKING,
    "sofortbanking": PaymentMethod.SOFORT_BANKING,
    "sofortuberweisung": PaymentMethod.SOFORT_BANKING,
})


def get_profile(method: PaymentMethod | str) -> PaymentMethodProfile:
    """Resolve a profile from a method tag or any of its aliases."""
    if isinstance(method, PaymentMethod):
        return PROFILES[method]
    key = str(method).strip().lower()
    if key not in CHECK_ALIASES:
        raise ValueError(f"Unsupported payment method: {method}")
    return PROFILES[CHECK_ALIASES[key]]
