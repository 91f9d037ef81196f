from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from consult_scheduling.application.exceptions import (
    HoldExpiredError,
    InvalidTransitionError,
    InvalidWindowError,
    NotFoundError,
    PaymentNotConfirmedError,
    SchedulingError,
    SlotUnavailableError,
    ValidationError,
)

_STATUS_CODES: dict[type[SchedulingError], int] = {
    ValidationError: 422,
    InvalidWindowError: 400,
    SlotUnavailableError: 409,
    InvalidTransitionError: 409,
    PaymentNotConfirmedError: 402,
    HoldExpiredError: 410,
    NotFoundError: 404,
}


def to_http_exception(error: SchedulingError, **extra: Any) -> HTTPException:
    status_code = next(
        (code for error_type, code in _STATUS_CODES.items() if isinstance(error, error_type)),
        400,
    )
    detail: dict[str, Any] = {"code": error.code, "message": error.message}
    detail.update({key: value for key, value in extra.items() if value is not None})
    return HTTPException(status_code=status_code, detail=detail)
