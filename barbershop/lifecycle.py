# barbershop/lifecycle.py

"""Appointment state machine.

    scheduled -> confirmed | cancelled | completed
    confirmed -> cancelled | completed
    cancelled, completed: terminal

Every operation takes the acting principal explicitly. Business rule
violations raise the errors in ``barbershop.errors``; notification failures
are logged and never fail the operation.
"""

import logging
from datetime import date as Date
from typing import List, Optional

from barbershop.availability import is_available
from barbershop.core import compute_end_time, ends_after_midnight, normalize_time
from barbershop.errors import (
    AlreadyRated,
    InvalidRange,
    InvalidState,
    NotFound,
    SlotUnavailable,
    StorageError,
    Unauthorized,
    ValidationError,
)
from barbershop.models import Appointment, utcnow
from barbershop.notifications import Notifier
from barbershop.ratings import record_review
from barbershop.schemas import (
    AppointmentStatus,
    NotificationChannel,
    NotificationType,
    PaymentMethod,
    PaymentStatus,
    RelatedEntity,
    RelatedKind,
    UserRole,
)
from barbershop.store import AppointmentStore

logger = logging.getLogger(__name__)

TRANSITIONS = {
    AppointmentStatus.scheduled: {
        AppointmentStatus.confirmed,
        AppointmentStatus.cancelled,
        AppointmentStatus.completed,
    },
    AppointmentStatus.confirmed: {AppointmentStatus.cancelled, AppointmentStatus.completed},
    AppointmentStatus.cancelled: set(),
    AppointmentStatus.completed: set(),
}

TERMINAL = {AppointmentStatus.cancelled, AppointmentStatus.completed}

SCHEDULE_FIELDS = ("barber_id", "service_id", "date", "start_time")
UPDATABLE_FIELDS = SCHEDULE_FIELDS + ("payment_method", "notes")

SLOT_TAKEN = "Time slot not available for this barber"


def transition(appt: Appointment, target: AppointmentStatus):
    current = AppointmentStatus(appt.status)
    if target not in TRANSITIONS[current]:
        raise InvalidState(
            f"Cannot change appointment {appt.id} from {current.value} to {target.value}"
        )
    appt.status = target.value


class AppointmentLifecycle:
    def __init__(self, store: AppointmentStore, notifier: Notifier):
        self.store = store
        self.notifier = notifier

    # --- helpers ---

    def _get(self, appointment_id: int) -> Appointment:
        appt = self.store.get_appointment(appointment_id)
        if appt is None:
            raise NotFound(f"Appointment not found with id {appointment_id}")
        return appt

    def _get_service(self, service_id: int):
        service = self.store.get_service(service_id)
        if service is None or not service.is_active:
            raise NotFound(f"Service not found with id {service_id}")
        return service

    def _get_barber(self, barber_id: int):
        barber = self.store.get_barber(barber_id)
        if barber is None or not barber.is_active:
            raise NotFound(f"Barber not found with id {barber_id}")
        return barber

    @staticmethod
    def _end_time(start_time: str, duration: int) -> str:
        if ends_after_midnight(start_time, duration):
            raise InvalidRange(f"Appointment starting at {start_time} would run past midnight")
        return compute_end_time(start_time, duration)

    def _barber_user_id(self, appt: Appointment) -> Optional[int]:
        barber = self.store.get_barber(appt.barber_id)
        return barber.user_id if barber else None

    def _is_participant(self, appt: Appointment, requester_id: int, requester_role) -> bool:
        if UserRole(requester_role) == UserRole.admin:
            return True
        if appt.client_id == requester_id:
            return True
        return self._barber_user_id(appt) == requester_id

    def _notify(self, recipient_id, channel, title, message, kind, appt) -> bool:
        try:
            return self.notifier.send(
                recipient_id,
                channel,
                title,
                message,
                kind=kind,
                related=RelatedEntity(kind=RelatedKind.appointment, id=appt.id),
            )
        except Exception:
            logger.exception("Notification '%s' for appointment %s failed", title, appt.id)
            return False

    # --- reads ---

    def get(self, appointment_id: int, requester_id: int, requester_role) -> Appointment:
        appt = self._get(appointment_id)
        if not self._is_participant(appt, requester_id, requester_role):
            raise Unauthorized("Not authorized to access this appointment")
        return appt

    def list_for(
        self,
        requester_id: int,
        requester_role,
        status: Optional[AppointmentStatus] = None,
        on_date: Optional[Date] = None,
    ) -> List[Appointment]:
        statuses = [AppointmentStatus(status).value] if status is not None else None
        role = UserRole(requester_role)
        if role == UserRole.client:
            return self.store.list_appointments(client_id=requester_id, on_date=on_date, statuses=statuses)
        if role == UserRole.barber:
            barber = self.store.get_barber_by_user(requester_id)
            if barber is None:
                raise NotFound("Barber profile not found")
            return self.store.list_appointments(barber_id=barber.id, on_date=on_date, statuses=statuses)
        return self.store.list_appointments(on_date=on_date, statuses=statuses)

    # --- operations ---

    def create(
        self,
        client_id: int,
        barber_id: int,
        service_id: int,
        on_date: Date,
        start_time: str,
        payment_method: Optional[PaymentMethod] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        # 1) Resolve service and barber
        service = self._get_service(service_id)
        barber = self._get_barber(barber_id)

        # 2) Interval and price snapshot
        start_time = normalize_time(start_time)
        end_time = self._end_time(start_time, service.duration)

        # 3) Reject overlaps with the barber's live appointments
        if not is_available(self.store, barber_id, on_date, start_time, end_time):
            raise SlotUnavailable(SLOT_TAKEN)

        # 4) Persist
        appt = self.store.add_appointment(
            Appointment(
                client_id=client_id,
                barber_id=barber_id,
                barbershop_id=barber.barbershop_id,
                service_id=service_id,
                date=on_date,
                start_time=start_time,
                end_time=end_time,
                status=AppointmentStatus.scheduled.value,
                total_price=service.price,
                payment_status=PaymentStatus.pending.value,
                payment_method=PaymentMethod(payment_method or PaymentMethod.cash).value,
                notes=notes,
            )
        )
        appointment_id = appt.id
        logger.info("Appointment %s booked: barber %s on %s %s-%s", appt.id, barber_id, on_date, start_time, end_time)

        # 5) Confirmation notice
        sent = self._notify(
            client_id,
            NotificationChannel.email,
            "Appointment booked",
            f"Your appointment is booked for {on_date} at {start_time}. Service: {service.name}.",
            NotificationType.appointment_confirmation,
            appt,
        )
        if sent:
            appt.confirmation_sent = True
            try:
                appt = self.store.save_appointment(appt)
            except StorageError:
                # the booking itself is already committed
                logger.exception("Could not record confirmation for appointment %s", appointment_id)
                appt = self._get(appointment_id)
        return appt

    def update(self, appointment_id: int, requester_id: int, requester_role, patch: dict) -> Appointment:
        appt = self._get(appointment_id)

        if not self._is_participant(appt, requester_id, requester_role):
            raise Unauthorized("Not authorized to update this appointment")

        if AppointmentStatus(appt.status) in TERMINAL:
            raise InvalidState("Cannot modify a completed or cancelled appointment")

        unknown = set(patch) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        # null scheduling fields mean "leave as is"
        changes = {k: v for k, v in patch.items() if v is not None or k == "notes"}

        if any(field in changes for field in SCHEDULE_FIELDS):
            barber_id = changes.get("barber_id", appt.barber_id)
            on_date = changes.get("date", appt.date)
            start_time = normalize_time(changes.get("start_time", appt.start_time))
            service = self._get_service(changes.get("service_id", appt.service_id))
            barber = self._get_barber(barber_id)
            end_time = self._end_time(start_time, service.duration)

            if not is_available(self.store, barber_id, on_date, start_time, end_time,
                                exclude_appointment_id=appt.id):
                raise SlotUnavailable(SLOT_TAKEN)

            appt.barber_id = barber_id
            appt.barbershop_id = barber.barbershop_id
            appt.date = on_date
            appt.start_time = start_time
            appt.end_time = end_time
            if "service_id" in changes:
                appt.service_id = service.id
                appt.total_price = service.price

        if "payment_method" in changes:
            appt.payment_method = PaymentMethod(changes["payment_method"]).value
        if "notes" in changes:
            appt.notes = changes["notes"]

        appt = self.store.save_appointment(appt)

        self._notify(
            appt.client_id,
            NotificationChannel.email,
            "Appointment updated",
            f"Your appointment was updated to {appt.date} at {appt.start_time}.",
            NotificationType.appointment_update,
            appt,
        )
        return appt

    def cancel(self, appointment_id: int, requester_id: int, requester_role) -> Appointment:
        appt = self._get(appointment_id)

        if not self._is_participant(appt, requester_id, requester_role):
            raise Unauthorized("Not authorized to cancel this appointment")

        transition(appt, AppointmentStatus.cancelled)
        appt = self.store.save_appointment(appt)
        logger.info("Appointment %s cancelled by user %s", appt.id, requester_id)

        if appt.client_id == requester_id:
            recipient = self._barber_user_id(appt)
            message = f"The appointment on {appt.date} at {appt.start_time} was cancelled by the client."
        else:
            recipient = appt.client_id
            message = f"Your appointment on {appt.date} at {appt.start_time} was cancelled by the barbershop."

        if recipient is not None:
            self._notify(
                recipient,
                NotificationChannel.email,
                "Appointment cancelled",
                message,
                NotificationType.appointment_cancellation,
                appt,
            )
        return appt

    def confirm(self, appointment_id: int, acting_barber_id: int) -> Appointment:
        appt = self._get(appointment_id)
        if appt.barber_id != acting_barber_id:
            raise Unauthorized("Not authorized to confirm this appointment")

        transition(appt, AppointmentStatus.confirmed)
        appt = self.store.save_appointment(appt)

        message = f"Your appointment on {appt.date} at {appt.start_time} was confirmed by the barber."
        for channel in (NotificationChannel.email, NotificationChannel.sms):
            self._notify(
                appt.client_id,
                channel,
                "Appointment confirmed by the barber",
                message,
                NotificationType.appointment_confirmation,
                appt,
            )
        return appt

    def complete(
        self,
        appointment_id: int,
        acting_barber_id: int,
        payment_status: Optional[PaymentStatus] = None,
        payment_method: Optional[PaymentMethod] = None,
    ) -> Appointment:
        appt = self._get(appointment_id)
        if appt.barber_id != acting_barber_id:
            raise Unauthorized("Not authorized to complete this appointment")

        transition(appt, AppointmentStatus.completed)
        appt.payment_status = PaymentStatus(payment_status or PaymentStatus.paid).value
        if payment_method is not None:
            appt.payment_method = PaymentMethod(payment_method).value
        appt = self.store.save_appointment(appt)

        self._notify(
            appt.client_id,
            NotificationChannel.email,
            "Appointment completed",
            f"Your appointment on {appt.date} at {appt.start_time} is complete. Thank you!",
            NotificationType.appointment_completed,
            appt,
        )
        self._notify(
            appt.client_id,
            NotificationChannel.email,
            "How was your visit?",
            "Your appointment is complete. Would you like to rate the service you received?",
            NotificationType.review_request,
            appt,
        )
        return appt

    def rate(self, appointment_id: int, client_id: int, score: int, comment: Optional[str] = None) -> Appointment:
        appt = self._get(appointment_id)
        if appt.client_id != client_id:
            raise Unauthorized("Not authorized to rate this appointment")

        if AppointmentStatus(appt.status) != AppointmentStatus.completed:
            raise InvalidState("Only completed appointments can be rated")

        if isinstance(score, bool) or not isinstance(score, int) or not 1 <= score <= 5:
            raise ValidationError("Please provide a rating between 1 and 5")

        if appt.rating_score is not None:
            raise AlreadyRated("This appointment has already been rated")

        comment = comment or ""
        barber_id = appt.barber_id
        # rating, review and barber average commit together or not at all
        with self.store.transaction():
            if not self.store.claim_rating(appt.id, score, comment, utcnow()):
                raise AlreadyRated("This appointment has already been rated")
            record_review(self.store, barber_id, client_id, score, comment, appointment_id=appointment_id)
        return self._get(appointment_id)
