# barbershop/routers/services_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import Service
from barbershop.schemas import Principal, ServiceCreate, ServicePublic, ServiceUpdate, UserRole

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


def _get_or_404(session: Session, service_id: int) -> Service:
    service = session.get(Service, service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service Not Found")
    return service


def _active_services(session: Session, barbershop_id: Optional[int] = None, category: Optional[str] = None):
    stmt = select(Service).where(Service.is_active == True)  # noqa: E712
    if barbershop_id is not None:
        stmt = stmt.where(Service.barbershop_id == barbershop_id)
    if category is not None:
        stmt = stmt.where(Service.category == category)
    return session.exec(stmt.order_by(Service.name)).all()


@router.post("", response_model=ServicePublic, status_code=201)
def create_service(
    payload: ServiceCreate,
    session: Session = Depends(get_session),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    service = Service(**payload.model_dump())
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@router.get("", response_model=List[ServicePublic])
def list_services(
    barbershop_id: Optional[int] = None,
    category: Optional[str] = None,
    session: Session = Depends(get_session),
):
    return _active_services(session, barbershop_id, category)


@router.get("/barbershop/{barbershop_id}", response_model=List[ServicePublic])
def list_barbershop_services(barbershop_id: int, session: Session = Depends(get_session)):
    return _active_services(session, barbershop_id)


@router.get("/{service_id}", response_model=ServicePublic)
def get_service(service_id: int, session: Session = Depends(get_session)):
    return _get_or_404(session, service_id)


@router.put("/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    session: Session = Depends(get_session),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    service = _get_or_404(session, service_id)
    # booked appointments keep the price they were made at
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(service, field, value)

    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@router.delete("/{service_id}", response_model=ServicePublic)
def deactivate_service(
    service_id: int,
    session: Session = Depends(get_session),
    current_user: Principal = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    # soft delete: past appointments still reference the row
    service = _get_or_404(session, service_id)
    service.is_active = False
    session.add(service)
    session.commit()
    session.refresh(service)
    return service
