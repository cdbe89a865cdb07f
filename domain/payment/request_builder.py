"""
Canonical outbound request URLs.
"""
from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote_plus


class RequestBuilder:
    """Builds ``<base>?k1=v1&k2=v2`` with fields in insertion order."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("?")

    def query(self, fields: Mapping[str, Any]) -> str:
        return "&".join(f"{key}={quote_plus(str(value))}" for key, value in fields.items())

    def build(self, fields: Mapping[str, Any]) -> str:
        return f"{self.base_url}?{self.query(fields)}"
