class SchedulingError(RuntimeError):
    """Base class for errors raised or returned by the scheduling engine."""

    code = "scheduling_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = str(self)


class InvalidWindowError(SchedulingError):
    """Working-hours window has start >= end, a malformed time, or overlaps another window."""

    code = "invalid_window"


class SlotUnavailableError(SchedulingError):
    """The chosen slot is no longer free."""

    code = "slot_unavailable"


class HoldExpiredError(SchedulingError):
    """The hold's TTL elapsed before payment was confirmed."""

    code = "hold_expired"


class ValidationError(SchedulingError):
    """Required booking data is missing or malformed."""

    code = "validation_error"


class PaymentNotConfirmedError(SchedulingError):
    """Payment was not confirmed by the gateway."""

    code = "payment_not_confirmed"


class InvalidTransitionError(SchedulingError):
    """The hold cannot make this transition from its current state."""

    code = "invalid_transition"


class NotFoundError(SchedulingError):
    """Requested appointment, hold or schedule does not exist."""

    code = "not_found"
