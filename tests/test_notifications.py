# tests/test_notifications.py

from datetime import timedelta

from barbershop.models import Notification
from barbershop.notifications import NotificationService, send_appointment_reminders
from barbershop.schemas import NotificationChannel, NotificationType, RelatedEntity, RelatedKind
from sqlmodel import select

from conftest import DAY, insert_appointment as book


def test_email_delivery_is_recorded(store, shop, session):
    service = NotificationService(store)
    ok = service.send(
        shop.client.id,
        NotificationChannel.email,
        "Hello",
        "Your appointment is booked",
        kind=NotificationType.appointment_confirmation,
        related=RelatedEntity(kind=RelatedKind.appointment, id=42),
    )

    assert ok is True
    note = session.exec(select(Notification)).one()
    assert note.sent is True
    assert note.sent_at is not None
    assert note.channel == "email"
    assert note.type == "appointment_confirmation"
    assert (note.related_kind, note.related_id) == ("appointment", 42)


def test_sms_without_phone_fails_but_is_recorded(store, shop, session):
    ok = NotificationService(store).send(shop.other_client.id, NotificationChannel.sms, "Hi", "msg")

    assert ok is False
    note = session.exec(select(Notification)).one()
    assert note.sent is False
    assert "phone" in note.error


def test_in_app_needs_no_sender(store, shop):
    assert NotificationService(store).send(shop.other_client.id, "in_app", "Hi", "msg") is True


def test_unknown_recipient_is_dropped(store, shop, session):
    assert NotificationService(store).send(9999, NotificationChannel.email, "Hi", "msg") is False
    assert session.exec(select(Notification)).all() == []


def test_inbox_and_mark_all_read(store, shop):
    service = NotificationService(store)
    service.send(shop.client.id, "in_app", "One", "1")
    service.send(shop.client.id, "in_app", "Two", "2")

    assert len(store.list_notifications(shop.client.id, unread_only=True)) == 2
    assert store.mark_all_read(shop.client.id) == 2
    assert store.list_notifications(shop.client.id, unread_only=True) == []
    assert len(store.list_notifications(shop.client.id)) == 2


def test_reminder_sweep_sends_once(store, shop, notifier):
    book(store, shop, "09:00", "09:30")
    book(store, shop, "09:30", "10:00", status="confirmed")
    book(store, shop, "10:00", "10:30", status="cancelled")
    book(store, shop, "10:30", "11:00", status="completed")
    book(store, shop, "09:00", "09:30", on_date=DAY + timedelta(days=1))

    assert send_appointment_reminders(store, notifier, DAY) == 2
    assert [n.channel for n in notifier.sent] == [
        NotificationChannel.email, NotificationChannel.sms,
        NotificationChannel.email, NotificationChannel.sms,
    ]
    assert all(n.kind == NotificationType.appointment_reminder for n in notifier.sent)

    assert send_appointment_reminders(store, notifier, DAY) == 0
    assert len(notifier.sent) == 4


def test_reminder_flag_is_claimed_once(store, shop):
    appt = book(store, shop, "09:00", "09:30")
    assert store.claim_reminder(appt.id) is True
    assert store.claim_reminder(appt.id) is False
    assert store.get_appointment(appt.id).reminder_sent is True
