"""
Payments API routes.

Exposes the TargetPay report URL. Keep this thin: the trust checks and the
parsing live in the push validator, this route only adapts the HTTP request.
"""
from __future__ import annotations

from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from api.dependencies import get_payment_service
from application.services.payment_service import PaymentService


router = APIRouter(prefix="/payments", tags=["Payments"])

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@router.api_route(
    "/push",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def payments_push(request: Request, service: PaymentService = Depends(get_payment_service)):
    body: dict[str, str] = {}
    ct = (request.headers.get("content-type") or "").lower()
    if request.method == "POST" and (not ct or FORM_CONTENT_TYPE in ct):
        raw_body = await request.body()
        body = dict(parse_qsl(raw_body.decode("utf-8", errors="replace"), keep_blank_values=True))

    validator = service.handle_push(
        query=dict(request.query_params),
        body=body,
        remote_addr=request.client.host if request.client else None,
        method=request.method,
        protocol=f"HTTP/{request.scope.get('http_version', '1.1')}",
    )
    response = validator.response
    return PlainTextResponse(
        content=response.body,
        status_code=response.status_code,
        headers=response.headers,
    )
