"""
iDEAL issuers.

The issuer list offered to a customer SHOULD be the one loaded from the
gateway, and a selected issuer MUST be one of the previously offered ones.
``KNOWN_ISSUERS`` is the last known good list; callers may fall back to it
when the gateway list cannot be loaded.
"""
from types import MappingProxyType

KNOWN_ISSUERS = MappingProxyType({
    "0031": "ABN Amro",
    "0761": "ASN Bank",
    "0091": "Friesland Bank",
    "0721": "ING",
    "0801": "Knab",
    "0021": "Rabobank",
    "0771": "RegioBank",
    "0751": "SNS Bank",
    "0511": "Triodos Bank",
    "0161": "Van Lanschot Bankiers",
})
