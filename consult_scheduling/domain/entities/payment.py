from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentConfirmation:
    reference: str
    amount: float
    succeeded: bool
    method: str = "System"
