"""
Default HTTP transport for TargetPay calls: httpx, optional retry, logging.

Every call opens a fresh client so no connection is reused between
requests. Retry is bounded by settings and off unless configured.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from application.ports.transport import TransportResponse
from core.logging_config import get_logger
from core.settings import payment_settings
from infrastructure.external.payments.exceptions import TransportFailure


logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "Accept": "text/plain, text/xml, */*",
    "User-Agent": "targetpay-client/0.1",
}


class HttpxTransport:
    provider: str = "targetpay"

    def __init__(
        self,
        *,
        timeouts: Optional[dict[str, float]] = None,
        retry: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self._timeouts_cfg = timeouts or payment_settings.timeouts.model_dump()
        self._retry_cfg = retry or {
            "max": payment_settings.retry.max,
            "base": payment_settings.retry.base_backoff,
        }
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}

    @property
    def timeouts(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self._timeouts_cfg["connect"],
            read=self._timeouts_cfg["read"],
            write=self._timeouts_cfg["write"],
            timeout=self._timeouts_cfg["total"],
        )

    def _send(self, url: str) -> TransportResponse:
        with httpx.Client(timeout=self.timeouts, headers=self.headers) as client:
            response = client.get(url)
        return TransportResponse(status_code=response.status_code, text=response.text)

    def _log_retry(self, state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        logger.warning(
            "transport_retry",
            provider=self.provider,
            attempt=state.attempt_number,
            error=str(exc),
        )

    def get(self, url: str) -> TransportResponse:
        retrying = Retrying(
            stop=stop_after_attempt(int(self._retry_cfg["max"]) + 1),
            wait=wait_exponential(multiplier=self._retry_cfg["base"], min=0.1, max=2.0),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    response = self._send(url)
        except httpx.TimeoutException as exc:
            logger.error("transport_timeout", provider=self.provider, url=url, error=str(exc))
            raise TransportFailure(
                str(exc) or "Request timed out", url=url, transport_code=type(exc).__name__
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("transport_error", provider=self.provider, url=url, error=str(exc))
            raise TransportFailure(
                str(exc) or type(exc).__name__, url=url, transport_code=type(exc).__name__
            ) from exc

        logger.debug("transport_response", provider=self.provider, url=url, status_code=response.status_code)
        return response
