# barbershop/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session

from barbershop.db import get_session
from barbershop.lifecycle import AppointmentLifecycle
from barbershop.notifications import NotificationService
from barbershop.schemas import Principal
from barbershop.store import SQLStore


def require_role(user: Principal, *roles: str):
    if user.role not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_store(session: Session = Depends(get_session)) -> SQLStore:
    return SQLStore(session)


def get_notifier(store: SQLStore = Depends(get_store)) -> NotificationService:
    return NotificationService(store)


def get_lifecycle(
    store: SQLStore = Depends(get_store),
    notifier: NotificationService = Depends(get_notifier),
) -> AppointmentLifecycle:
    return AppointmentLifecycle(store, notifier)


def current_barber_id(user: Principal, store: SQLStore) -> int:
    barber = store.get_barber_by_user(user.id)
    if barber is None:
        raise HTTPException(status_code=404, detail="Barber profile not found")
    return barber.id
