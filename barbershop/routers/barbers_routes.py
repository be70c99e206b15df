# barbershop/routers/barbers_routes.py

from datetime import date as Date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbershop.auth import get_current_user
from barbershop.availability import available_slots
from barbershop.config import get_settings
from barbershop.core import normalize_time, parse_hhmm
from barbershop.db import get_session
from barbershop.deps import current_barber_id, get_store, require_role
from barbershop.models import Barber, User
from barbershop.schemas import (
    AvailabilityResponse,
    BarberCreate,
    BarberPublic,
    BarberUpdate,
    Principal,
    ReviewPublic,
    UserRole,
    WorkingHours,
)
from barbershop.store import SQLStore

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


def _barber_public(barber: Barber, store: SQLStore) -> BarberPublic:
    return BarberPublic(
        id=barber.id,
        user_id=barber.user_id,
        barbershop_id=barber.barbershop_id,
        specialties=barber.specialties,
        working_hours=barber.working_hours,
        rating=barber.rating,
        is_active=barber.is_active,
        reviews=[ReviewPublic.model_validate(r) for r in store.list_reviews(barber.id)],
    )


def _get_or_404(store: SQLStore, barber_id: int) -> Barber:
    barber = store.get_barber(barber_id)
    if barber is None:
        raise HTTPException(status_code=404, detail="Barber Not Found")
    return barber


@router.post("", response_model=BarberPublic, status_code=201)
def create_barber(
    payload: BarberCreate,
    session: Session = Depends(get_session),
    store: SQLStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.barber.value, UserRole.admin.value)

    # Barbers create their own profile; admins may create one for any barber user
    user_id = current_user.id
    if payload.user_id is not None and payload.user_id != user_id:
        require_role(current_user, UserRole.admin.value)
        user_id = payload.user_id

    user = session.get(User, user_id)
    if user is None or user.role != UserRole.barber.value:
        raise HTTPException(status_code=422, detail="Barber profiles belong to users with the barber role")

    if store.get_barber_by_user(user_id) is not None:
        raise HTTPException(status_code=409, detail="Barber profile already exists")

    barber = store.save_barber(
        Barber(
            user_id=user_id,
            barbershop_id=payload.barbershop_id,
            specialties=payload.specialties,
        )
    )
    return _barber_public(barber, store)


@router.get("", response_model=List[BarberPublic])
def list_barbers(
    barbershop_id: Optional[int] = None,
    specialty: Optional[str] = None,
    store: SQLStore = Depends(get_store),
):
    barbers = store.list_barbers(barbershop_id=barbershop_id, specialty=specialty)
    return [_barber_public(b, store) for b in barbers]


@router.get("/barbershop/{barbershop_id}", response_model=List[BarberPublic])
def list_barbershop_barbers(barbershop_id: int, store: SQLStore = Depends(get_store)):
    return [_barber_public(b, store) for b in store.list_barbers(barbershop_id=barbershop_id)]


@router.get("/{barber_id}", response_model=BarberPublic)
def get_barber(barber_id: int, store: SQLStore = Depends(get_store)):
    return _barber_public(_get_or_404(store, barber_id), store)


@router.put("/{barber_id}", response_model=BarberPublic)
def update_barber(
    barber_id: int,
    payload: BarberUpdate,
    store: SQLStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.barber.value, UserRole.admin.value)

    barber = _get_or_404(store, barber_id)
    is_admin = current_user.role == UserRole.admin
    if not is_admin and barber.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Forbidden")

    if payload.specialties is not None:
        barber.specialties = list(payload.specialties)
    if payload.barbershop_id is not None and payload.barbershop_id != barber.barbershop_id:
        # moving a barber between shops is an admin decision
        require_role(current_user, UserRole.admin.value)
        barber.barbershop_id = payload.barbershop_id

    return _barber_public(store.save_barber(barber), store)


@router.delete("/{barber_id}", response_model=BarberPublic)
def deactivate_barber(
    barber_id: int,
    store: SQLStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    # soft delete: appointments and reviews still point at the profile
    barber = _get_or_404(store, barber_id)
    barber.is_active = False
    return _barber_public(store.save_barber(barber), store)


@router.put("/me/working-hours", response_model=BarberPublic)
def set_working_hours(
    hours: WorkingHours,
    store: SQLStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.barber.value)

    days = [d.day for d in hours.days]
    if len(days) != len(set(days)):
        raise HTTPException(status_code=422, detail="working hours cannot contain duplicate days")

    normalized = []
    for d in hours.days:
        start, end = normalize_time(d.start), normalize_time(d.end)
        if parse_hhmm(start) >= parse_hhmm(end):
            raise HTTPException(status_code=422, detail="start cannot be greater than end")
        normalized.append({"day": d.day, "start": start, "end": end, "is_available": d.is_available})

    barber = store.get_barber(current_barber_id(current_user, store))
    # new list so the JSON column is flagged dirty
    barber.working_hours = sorted(normalized, key=lambda d: d["day"])
    barber = store.save_barber(barber)
    return _barber_public(barber, store)


@router.get("/{barber_id}/availability", response_model=AvailabilityResponse)
def barber_availability(
    barber_id: int,
    date: Date,
    service_id: Optional[int] = None,
    store: SQLStore = Depends(get_store),
):
    duration = None
    if service_id is not None:
        service = store.get_service(service_id)
        if service is None:
            raise HTTPException(status_code=404, detail="Service Not Found")
        duration = service.duration

    slots = available_slots(
        store,
        barber_id,
        date,
        step_minutes=get_settings().SLOT_MINUTES,
        duration_minutes=duration,
    )
    return {"barber_id": barber_id, "date": date, "available_starts": slots}
