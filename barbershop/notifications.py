# barbershop/notifications.py
"""Notification records and (stubbed) delivery channels"""
import logging
from datetime import date as Date
from typing import Dict, Optional, Protocol

from barbershop.models import Notification, User, utcnow
from barbershop.schemas import (
    AppointmentStatus,
    NotificationChannel,
    NotificationType,
    RelatedEntity,
    RelatedKind,
)
from barbershop.store import AppointmentStore

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    pass


class Notifier(Protocol):
    def send(
        self,
        recipient_id: int,
        channel: NotificationChannel,
        title: str,
        message: str,
        *,
        kind: NotificationType = NotificationType.system_message,
        related: Optional[RelatedEntity] = None,
    ) -> bool: ...


class EmailSender:
    """Logs instead of talking to an SMTP server."""

    def deliver(self, recipient: User, title: str, message: str):
        if not recipient.email:
            raise DeliveryError(f"User {recipient.id} has no email address")
        logger.info("Email to %s | %s | %s", recipient.email, title, message)


class SmsSender:
    """Logs instead of talking to an SMS gateway."""

    def deliver(self, recipient: User, title: str, message: str):
        if not recipient.phone:
            raise DeliveryError(f"User {recipient.id} has no phone number")
        logger.info("SMS to %s | %s", recipient.phone, message)


class NotificationService:
    """Stores one notification row per send and hands it to the channel's sender.

    ``in_app`` has no sender: the stored row is the delivery.
    """

    def __init__(self, store: AppointmentStore, senders: Optional[Dict[NotificationChannel, object]] = None):
        self.store = store
        if senders is None:
            senders = {
                NotificationChannel.email: EmailSender(),
                NotificationChannel.sms: SmsSender(),
            }
        self.senders = senders

    def send(
        self,
        recipient_id,
        channel,
        title,
        message,
        *,
        kind=NotificationType.system_message,
        related=None,
    ) -> bool:
        recipient = self.store.get_user(recipient_id)
        if recipient is None:
            logger.warning("Notification '%s' dropped: user %s not found", title, recipient_id)
            return False

        channel = NotificationChannel(channel)
        note = self.store.add_notification(
            Notification(
                recipient_id=recipient_id,
                type=NotificationType(kind).value,
                title=title,
                message=message,
                channel=channel.value,
                related_kind=related.kind.value if related else None,
                related_id=related.id if related else None,
            )
        )

        sender = self.senders.get(channel)
        try:
            if sender is not None:
                sender.deliver(recipient, title, message)
            note.sent = True
            note.sent_at = utcnow()
        except DeliveryError as e:
            note.error = str(e)
            logger.warning("Notification %s not delivered via %s: %s", note.id, channel.value, e)

        self.store.save_notification(note)
        return note.sent


def send_appointment_reminders(store: AppointmentStore, notifier: Notifier, day: Date) -> int:
    """Send email + SMS reminders for every live appointment on ``day``.

    Each appointment's ``reminder_sent`` flag is claimed before sending, so
    concurrent sweeps never remind the same client twice.
    """
    due = store.list_appointments(
        on_date=day,
        statuses=[AppointmentStatus.scheduled.value, AppointmentStatus.confirmed.value],
    )

    reminders_sent = 0
    for appt in due:
        if appt.reminder_sent:
            continue
        if not store.claim_reminder(appt.id):
            continue

        related = RelatedEntity(kind=RelatedKind.appointment, id=appt.id)
        title = "Appointment reminder"
        try:
            notifier.send(
                appt.client_id,
                NotificationChannel.email,
                title,
                f"Reminder: you have an appointment on {appt.date} at {appt.start_time}.",
                kind=NotificationType.appointment_reminder,
                related=related,
            )
            notifier.send(
                appt.client_id,
                NotificationChannel.sms,
                title,
                f"Reminder: appointment {appt.date} {appt.start_time}.",
                kind=NotificationType.appointment_reminder,
                related=related,
            )
            reminders_sent += 1
        except Exception:
            # Keep sweeping; the flag stays claimed so this one is not retried.
            logger.exception("Failed to send reminder for appointment %s", appt.id)

    logger.info("Reminder sweep for %s: %d sent", day, reminders_sent)
    return reminders_sent
