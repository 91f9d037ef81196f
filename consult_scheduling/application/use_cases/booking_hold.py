from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta

from consult_scheduling.application.exceptions import (
    HoldExpiredError,
    InvalidTransitionError,
    NotFoundError,
    PaymentNotConfirmedError,
    SchedulingError,
    SlotUnavailableError,
    ValidationError,
)
from consult_scheduling.application.ports.appointment_store import AppointmentStorePort
from consult_scheduling.application.ports.clock import ClockPort
from consult_scheduling.application.ports.hold_store import HoldStorePort
from consult_scheduling.application.ports.payment_gateway import PaymentGatewayPort
from consult_scheduling.application.use_cases.availability import ActorRole, SlotAvailabilityUseCase
from consult_scheduling.application.utils.conflicts import has_conflict
from consult_scheduling.domain.entities.appointment import Appointment, AppointmentStatus
from consult_scheduling.domain.entities.booking_hold import (
    BookingRequest,
    Cancelled,
    Confirmed,
    Draft,
    Expired,
    Held,
    HoldState,
    PreChecked,
    StoredHold,
)
from consult_scheduling.domain.entities.time_slot import TimeSlot


@dataclass(frozen=True)
class Transition:
    state: HoldState
    error: SchedulingError | None = None
    # Fresh slot list handed back when a pre-check finds the slot taken.
    available_slots: list[str] | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BookingHoldUseCase:
    """
    Drives a booking through Draft -> PreChecked -> Held -> Confirmed | Expired | Cancelled.

    Transitions never raise for business outcomes: they return the resulting state and,
    when the requested move did not happen as asked, the error describing why.
    Unknown hold ids raise NotFoundError.
    """

    def __init__(
        self,
        availability: SlotAvailabilityUseCase,
        appointments: AppointmentStorePort,
        holds: HoldStorePort,
        payments: PaymentGatewayPort,
        clock: ClockPort,
        hold_ttl_minutes: int = 10,
    ) -> None:
        self._availability = availability
        self._appointments = appointments
        self._holds = holds
        self._payments = payments
        self._clock = clock
        self._hold_ttl = timedelta(minutes=hold_ttl_minutes)
        self._logger = logging.getLogger(__name__)

    def start(self, request: BookingRequest) -> Draft:
        return Draft(hold_id=uuid.uuid4().hex, request=request)

    def submit(self, draft: HoldState) -> Transition:
        if not isinstance(draft, Draft):
            return Transition(draft, InvalidTransitionError(f"Cannot submit a {draft.status.value} hold"))

        try:
            slot = self._validate_request(draft.request)
        except ValidationError as e:
            return Transition(draft, e)

        request = draft.request
        fresh = self._availability.resolve_for_actor(
            ActorRole.CLIENT,
            request.client_id,
            request.consultant_id,
            request.day,
            request.duration_minutes,
        )
        if slot not in fresh:
            self._logger.info(
                "Slot no longer available at pre-check",
                extra={
                    "hold_id": draft.hold_id,
                    "consultant_id": request.consultant_id,
                    "client_id": request.client_id,
                    "reason": slot.label,
                },
            )
            return Transition(
                draft,
                SlotUnavailableError(f"Slot {slot.label} is no longer available"),
                available_slots=[s.label for s in fresh],
            )

        return Transition(PreChecked(hold_id=draft.hold_id, request=request, slot=slot))

    def hold(self, prechecked: HoldState) -> Transition:
        if not isinstance(prechecked, PreChecked):
            return Transition(prechecked, InvalidTransitionError(f"Cannot hold a {prechecked.status.value} booking"))

        held = Held(
            hold_id=prechecked.hold_id,
            request=prechecked.request,
            slot=prechecked.slot,
            expires_at=self._clock.now() + self._hold_ttl,
        )
        self._holds.save(held)
        self._logger.info(
            "Slot held",
            extra={
                "hold_id": held.hold_id,
                "consultant_id": held.request.consultant_id,
                "client_id": held.request.client_id,
                "reason": f"{held.slot.start.isoformat()} until {held.expires_at.isoformat()}",
            },
        )
        return Transition(held)

    def place_hold(self, request: BookingRequest) -> Transition:
        """Submit a fresh draft and, when the pre-check passes, reserve the slot."""
        transition = self.submit(self.start(request))
        if not transition.ok:
            return transition
        return self.hold(transition.state)

    def get(self, hold_id: str) -> StoredHold:
        """Current state of a stored hold; an elapsed Held hold is observed as Expired."""
        hold = self._load(hold_id)
        if isinstance(hold, Held) and not hold.is_active(self._clock.now()):
            return self._expire_if_elapsed(hold_id)
        return hold

    def confirm(self, hold_id: str, payment_reference: str) -> Transition:
        hold = self._load(hold_id)
        rejected = self._reject_confirm(hold)
        if rejected is not None:
            return rejected

        payment = self._payments.verify_payment(payment_reference, hold.request.fee)
        if not payment.succeeded:
            self._logger.warning(
                "Payment not confirmed",
                extra={"hold_id": hold_id, "reason": payment_reference},
            )
            return Transition(hold, PaymentNotConfirmedError())

        with self._appointments.write_lock():
            # the hold may have moved on while the gateway was being asked
            hold = self._load(hold_id)
            rejected = self._reject_confirm(hold)
            if rejected is not None:
                return rejected

            now = self._clock.now()
            request = hold.request
            consultant_busy = [
                a for a in self._appointments.list_for_consultant(request.consultant_id)
                if not a.is_cancelled
            ]
            client_busy = [
                a for a in self._appointments.list_for_client(request.client_id) if a.is_upcoming
            ]
            if (
                has_conflict(hold.slot, consultant_busy)
                or has_conflict(hold.slot, client_busy)
                or self._availability.day_is_full(request.consultant_id, request.day)
            ):
                expired = self._expire(hold, cause="conflict")
                self._logger.warning(
                    "Commit-time conflict, hold released",
                    extra={
                        "hold_id": hold_id,
                        "consultant_id": request.consultant_id,
                        "client_id": request.client_id,
                        "reason": f"payment {payment.reference} needs refund",
                    },
                )
                return Transition(expired, SlotUnavailableError(f"Slot {hold.slot.label} was booked by someone else"))

            appointment = self._appointments.add(
                Appointment(
                    id=uuid.uuid4().hex,
                    consultant_id=request.consultant_id,
                    client_id=request.client_id,
                    start_at=hold.slot.start,
                    end_at=hold.slot.end,
                    status=AppointmentStatus.UPCOMING,
                    reason=request.reason,
                    notes=request.notes,
                    fee=request.fee,
                    category=request.category,
                    session=request.session,
                    payment=payment,
                    created_at=now,
                    updated_at=now,
                )
            )
            confirmed = Confirmed(
                hold_id=hold.hold_id,
                request=request,
                slot=hold.slot,
                appointment_id=appointment.id,
                confirmed_at=now,
            )
            self._holds.save(confirmed)
            self._logger.info(
                "Booking confirmed",
                extra={"hold_id": hold_id, "appointment_id": appointment.id, "consultant_id": request.consultant_id},
            )
            return Transition(confirmed)

    def cancel(self, hold_id: str) -> Transition:
        with self._appointments.write_lock():
            hold = self._load(hold_id)
            if not isinstance(hold, Held):
                return Transition(hold, InvalidTransitionError(f"Cannot cancel a {hold.status.value} hold"))
            now = self._clock.now()
            if not hold.is_active(now):
                return Transition(self._expire(hold, cause="ttl"), HoldExpiredError())

            cancelled = Cancelled(hold_id=hold.hold_id, request=hold.request, slot=hold.slot, cancelled_at=now)
            self._holds.save(cancelled)
            self._logger.info("Hold cancelled", extra={"hold_id": hold_id, "status": cancelled.status.value})
            return Transition(cancelled)

    def expire_stale_holds(self) -> int:
        """Move every elapsed Held hold to Expired. Returns how many were released."""
        now = self._clock.now()
        expired_count = 0
        with self._appointments.write_lock():
            for hold in self._holds.list_all():
                if isinstance(hold, Held) and not hold.is_active(now):
                    self._expire(hold, cause="ttl")
                    expired_count += 1
        if expired_count:
            self._logger.info("Expired stale holds", extra={"reason": f"{expired_count} released"})
        return expired_count

    def _reject_confirm(self, hold: StoredHold) -> Transition | None:
        if isinstance(hold, Held) and not hold.is_active(self._clock.now()):
            hold = self._expire_if_elapsed(hold.hold_id)
        if isinstance(hold, Expired) and hold.cause == "ttl":
            return Transition(hold, HoldExpiredError())
        if not isinstance(hold, Held):
            return Transition(hold, InvalidTransitionError(f"Cannot confirm a {hold.status.value} hold"))
        return None

    def _expire_if_elapsed(self, hold_id: str) -> StoredHold:
        """Re-read under the lock so a confirm that committed meanwhile is never overwritten."""
        with self._appointments.write_lock():
            hold = self._load(hold_id)
            if isinstance(hold, Held) and not hold.is_active(self._clock.now()):
                return self._expire(hold, cause="ttl")
            return hold

    def _load(self, hold_id: str) -> StoredHold:
        hold = self._holds.get(hold_id)
        if hold is None:
            raise NotFoundError(f"Hold {hold_id} not found")
        return hold

    def _expire(self, hold: Held, cause: str) -> Expired:
        expired = Expired(
            hold_id=hold.hold_id,
            request=hold.request,
            slot=hold.slot,
            expired_at=self._clock.now(),
            cause=cause,
        )
        self._holds.save(expired)
        self._logger.info("Hold expired", extra={"hold_id": hold.hold_id, "reason": cause})
        return expired

    def _validate_request(self, request: BookingRequest) -> TimeSlot:
        missing = [
            name
            for name, value in (
                ("client", request.client_id),
                ("consultant", request.consultant_id),
                ("date", request.day),
                ("time", request.slot_label),
            )
            if not value
        ]
        if missing:
            raise ValidationError(f"Missing {', '.join(missing)}")

        try:
            slot = TimeSlot.from_label(request.day, request.slot_label)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if request.day < self._clock.today():
            raise ValidationError("Cannot book in the past")
        return slot
