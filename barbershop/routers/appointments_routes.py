# barbershop/routers/appointments_routes.py

from datetime import date as Date
from typing import List, Optional

from fastapi import APIRouter, Depends

from barbershop.auth import get_current_user
from barbershop.deps import current_barber_id, get_lifecycle, get_store, require_role
from barbershop.lifecycle import AppointmentLifecycle
from barbershop.schemas import (
    AppointmentComplete,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentRate,
    AppointmentStatus,
    AppointmentUpdate,
    Principal,
    UserRole,
)
from barbershop.store import SQLStore

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.client.value)  # only clients book

    created = lifecycle.create(
        client_id=current_user.id,
        barber_id=appt.barber_id,
        service_id=appt.service_id,
        on_date=appt.date,
        start_time=appt.start_time,
        payment_method=appt.payment_method,
        notes=appt.notes,
    )
    return AppointmentPublic.from_model(created)


@router.get("", response_model=List[AppointmentPublic])
def list_appointments(
    status: Optional[AppointmentStatus] = None,
    on_date: Optional[Date] = None,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    current_user: Principal = Depends(get_current_user),
):
    appts = lifecycle.list_for(current_user.id, current_user.role, status=status, on_date=on_date)
    return [AppointmentPublic.from_model(a) for a in appts]


@router.get("/{appt_id}", response_model=AppointmentPublic)
def get_appointment(
    appt_id: int,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    current_user: Principal = Depends(get_current_user),
):
    appt = lifecycle.get(appt_id, current_user.id, current_user.role)
    return AppointmentPublic.from_model(appt)


@router.patch("/{appt_id}", response_model=AppointmentPublic)
def update_appointment(
    appt_id: int,
    patch: AppointmentUpdate,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    current_user: Principal = Depends(get_current_user),
):
    appt = lifecycle.update(
        appt_id,
        current_user.id,
        current_user.role,
        patch.model_dump(exclude_unset=True),
    )
    return AppointmentPublic.from_model(appt)


@router.patch("/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    current_user: Principal = Depends(get_current_user),
):
    appt = lifecycle.cancel(appt_id, current_user.id, current_user.role)
    return AppointmentPublic.from_model(appt)


@router.patch("/{appt_id}/confirm", response_model=AppointmentPublic)
def confirm_appointment(
    appt_id: int,
    store: SQLStore = Depends(get_store),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.barber.value)
    appt = lifecycle.confirm(appt_id, current_barber_id(current_user, store))
    return AppointmentPublic.from_model(appt)


@router.patch("/{appt_id}/complete", response_model=AppointmentPublic)
def complete_appointment(
    appt_id: int,
    payment: Optional[AppointmentComplete] = None,
    store: SQLStore = Depends(get_store),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.barber.value)
    payment = payment or AppointmentComplete()
    appt = lifecycle.complete(
        appt_id,
        current_barber_id(current_user, store),
        payment_status=payment.payment_status,
        payment_method=payment.payment_method,
    )
    return AppointmentPublic.from_model(appt)


@router.patch("/{appt_id}/rate", response_model=AppointmentPublic)
def rate_appointment(
    appt_id: int,
    rating: AppointmentRate,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.client.value)
    appt = lifecycle.rate(appt_id, current_user.id, rating.score, rating.comment)
    return AppointmentPublic.from_model(appt)
