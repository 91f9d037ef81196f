from __future__ import annotations

import logging

from consult_scheduling.application.ports.payment_gateway import PaymentGatewayPort
from consult_scheduling.domain.entities.payment import PaymentConfirmation


class MockPaymentGateway(PaymentGatewayPort):
    """Accepts any non-empty reference except those registered as declined."""

    def __init__(self, declined_references: set[str] | None = None) -> None:
        self._declined = set(declined_references or ())
        self._logger = logging.getLogger(__name__)

    def decline(self, reference: str) -> None:
        self._declined.add(reference)

    def verify_payment(self, reference: str, expected_amount: float) -> PaymentConfirmation:
        succeeded = bool(reference and reference.strip()) and reference not in self._declined
        self._logger.info(
            "Mock payment verified",
            extra={"reason": reference, "status": "success" if succeeded else "failed"},
        )
        return PaymentConfirmation(
            reference=reference,
            amount=expected_amount,
            succeeded=succeeded,
            method="Mock",
        )
