# barbershop/routers/notifications_routes.py

from datetime import date as Date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from barbershop.auth import get_current_user
from barbershop.deps import get_notifier, get_store, require_role
from barbershop.models import utcnow
from barbershop.notifications import NotificationService, send_appointment_reminders
from barbershop.schemas import NotificationPublic, Principal, ReminderSweepResult, UserRole
from barbershop.store import SQLStore

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get("", response_model=List[NotificationPublic])
def list_my_notifications(
    unread_only: bool = False,
    store: SQLStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    notes = store.list_notifications(current_user.id, unread_only=unread_only)
    return [NotificationPublic.from_model(n) for n in notes]


@router.patch("/read-all")
def mark_all_read(
    store: SQLStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    return {"updated": store.mark_all_read(current_user.id)}


@router.patch("/{notification_id}/read", response_model=NotificationPublic)
def mark_read(
    notification_id: int,
    store: SQLStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    note = store.get_notification(notification_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    if note.recipient_id != current_user.id:
        raise HTTPException(status_code=403, detail="Forbidden")

    note.is_read = True
    note = store.save_notification(note)
    return NotificationPublic.from_model(note)


@router.post("/reminders", response_model=ReminderSweepResult)
def run_reminder_sweep(
    day: Optional[Date] = None,
    store: SQLStore = Depends(get_store),
    notifier: NotificationService = Depends(get_notifier),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    # default: tomorrow's appointments
    day = day or (utcnow().date() + timedelta(days=1))
    sent = send_appointment_reminders(store, notifier, day)
    return {"day": day, "reminders_sent": sent}
