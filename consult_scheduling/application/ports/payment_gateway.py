from __future__ import annotations

from abc import ABC, abstractmethod

from consult_scheduling.domain.entities.payment import PaymentConfirmation


class PaymentGatewayPort(ABC):
    @abstractmethod
    def verify_payment(self, reference: str, expected_amount: float) -> PaymentConfirmation:
        """Ask the gateway whether the payment identified by `reference` went through."""
        raise NotImplementedError
