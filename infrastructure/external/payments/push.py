"""
TargetPay push (report URL) deliveries.

The report URL must only ever be called by TargetPay. A delivery is accepted
when it is a POST from one of the gateway's address ranges; anything else is
answered with a generic 404 so the endpoint does not reveal itself, except a
non-POST request from the gateway, which gets a 405. Rejections are recorded
as ``TrustFailure`` and logged, never raised.

Address ranges are matched as literal string prefixes (``89.184.168`` and
``78.152.58``), exactly as TargetPay documents them.
"""
from __future__ import annotations

from email.utils import formatdate
from typing import Any, Iterator, Mapping, Optional, Sequence
from urllib.parse import unquote_plus

from application.dtos.payments import PushResponse
from core.logging_config import get_logger
from core.settings import payment_settings
from infrastructure.external.payments.exceptions import TrustFailure


logger = get_logger(__name__)

STATUS_FIELD = "status"
TRANSACTION_ID_FIELD = "trxid"


def _string_value(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, str) and value != "":
        return value
    return None


class InboundMessage(Mapping[str, str]):
    """Read-only, case-insensitive view of the fields of one push delivery."""

    def __init__(self, data: Mapping[str, str]) -> None:
        self._data = {key.lower(): value for key, value in data.items()}

    @classmethod
    def merge(
        cls,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> "InboundMessage":
        """Merge query and body parameters; body values win, empty values are dropped."""
        data: dict[str, str] = {}
        for key, value in (query or {}).items():
            value = _string_value(value)
            if value is not None:
                data[unquote_plus(key).lower()] = value
        for key, value in (body or {}).items():
            value = _string_value(value)
            if value is not None:
                data[key.lower()] = value
        return cls(data)

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"InboundMessage({self._data!r})"

    @property
    def status(self) -> Optional[str]:
        return self._data.get(STATUS_FIELD)

    @property
    def transaction_id(self) -> Optional[str]:
        return self._data.get(TRANSACTION_ID_FIELD)

    def is_success(self) -> bool:
        """True for status ``Success`` (any case) or a status starting with ``000000 OK``."""
        status = self.status
        if not isinstance(status, str):
            return False
        return status.lower() == "success" or status[:9] == "000000 OK"


def _no_cache_headers() -> dict[str, str]:
    return {
        "Cache-Control": "no-store, no-cache, must-revalidate, post-check=0, pre-check=0",
        "Pragma": "no-cache",
        "Last-Modified": formatdate(usegmt=True),
    }


class InboundMessageValidator:
    """
    Authenticate and parse one push delivery.

    All request data is passed in explicitly. The verdict is computed on
    construction: ``response`` holds what to write back, ``message`` the
    parsed fields (``None`` when rejected) and ``trust_failure`` the reason a
    delivery was rejected.
    """

    def __init__(
        self,
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        remote_addr: Optional[str] = None,
        method: str = "GET",
        protocol: str = "HTTP/1.1",
        trusted_prefixes: Optional[Sequence[str]] = None,
    ) -> None:
        if trusted_prefixes is None:
            trusted_prefixes = payment_settings.webhook.trusted_prefixes
        self.trusted_prefixes = tuple(trusted_prefixes)
        self.remote_addr = remote_addr
        self.method = (method or "").strip().upper()
        self.protocol = "HTTP/1.0" if (protocol or "").strip().upper() == "HTTP/1.0" else "HTTP/1.1"
        self.message: Optional[InboundMessage] = None
        self.trust_failure: Optional[TrustFailure] = None

        if self.method != "POST":
            if self.is_trusted_client():
                self.response = self._reject(
                    "Push delivery must be a POST request", 405, "Method Not Allowed", {"Allow": "POST"}
                )
            else:
                self.response = self._reject("Push delivery from untrusted client", 404, "Not Found")
        elif not self.is_trusted_client():
            self.response = self._reject("Push delivery from untrusted client", 404, "Not Found")
        else:
            self.message = InboundMessage.merge(query, body)
            self.response = PushResponse(
                status_code=200,
                reason="OK",
                protocol=self.protocol,
                headers={**_no_cache_headers(), "Content-Type": "text/plain; charset=UTF-8"},
                body="OK",
            )
            logger.info(
                "push_accepted",
                remote_addr=self.remote_addr,
                transaction_id=self.message.transaction_id,
                status=self.message.status,
            )

    def is_trusted_client(self) -> bool:
        if not self.remote_addr:
            return False
        return any(self.remote_addr.startswith(prefix) for prefix in self.trusted_prefixes)

    def _reject(self, message: str, status_code: int, reason: str, headers: Optional[dict] = None) -> PushResponse:
        self.trust_failure = TrustFailure(message, remote_addr=self.remote_addr, method=self.method)
        logger.warning(
            "push_rejected",
            remote_addr=self.remote_addr,
            method=self.method,
            status_code=status_code,
            reason=message,
        )
        return PushResponse(
            status_code=status_code,
            reason=reason,
            protocol=self.protocol,
            headers={**_no_cache_headers(), **(headers or {})},
        )

    @property
    def accepted(self) -> bool:
        return self.message is not None

    @property
    def status(self) -> Optional[str]:
        return self.message.status if self.message else None

    @property
    def transaction_id(self) -> Optional[str]:
        return self.message.transaction_id if self.message else None

    def get(self, name: str) -> Optional[str]:
        return self.message.get(name) if self.message else None

    def is_success(self) -> bool:
        return self.message.is_success() if self.message else False
