"""
API dependencies.
"""
from application.services.payment_service import PaymentService
from infrastructure.external.payments import get_transport


def get_payment_service() -> PaymentService:
    return PaymentService(transport=get_transport())
