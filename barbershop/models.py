# barbershop/models.py

from typing import Optional, List
from datetime import datetime, date as Date, timezone
from decimal import Decimal

from sqlalchemy import Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: str = ""
    phone: Optional[str] = None
    password_hash: str
    role: str  # client, barber or admin


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True, unique=True)
    barbershop_id: int = Field(index=True)
    specialties: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    # [{"day": 0..6 (0=Mon), "start": "HH:MM", "end": "HH:MM", "is_available": bool}]
    working_hours: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    rating: float = 0.0
    is_active: bool = True


class Review(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    client_id: int = Field(foreign_key="user.id")
    appointment_id: Optional[int] = Field(default=None, foreign_key="appointment.id")
    text: str = ""
    score: int
    created_at: datetime = Field(default_factory=utcnow)


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    barbershop_id: int = Field(index=True)
    name: str
    description: str = ""
    price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    duration: int  # minutes
    category: str = "haircut"
    is_active: bool = True


class Appointment(SQLModel, table=True):
    # Backstop for the check-then-insert race: two live bookings can never
    # share a barber/date/start, whatever the availability pre-check saw.
    __table_args__ = (
        Index(
            "uq_active_barber_slot",
            "barber_id", "date", "start_time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    client_id: int = Field(foreign_key="user.id", index=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    barbershop_id: int
    service_id: int = Field(foreign_key="service.id")

    date: Date = Field(index=True)
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    status: str = "scheduled"

    total_price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    payment_status: str = "pending"
    payment_method: str = "cash"
    notes: Optional[str] = None

    rating_score: Optional[int] = None
    rating_comment: Optional[str] = None
    rated_at: Optional[datetime] = None

    reminder_sent: bool = False
    confirmation_sent: bool = False

    created_at: datetime = Field(default_factory=utcnow)


class Notification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    recipient_id: int = Field(foreign_key="user.id", index=True)
    type: str
    title: str
    message: str
    channel: str  # email, sms or in_app
    related_kind: Optional[str] = None  # appointment, barbershop or service
    related_id: Optional[int] = None
    sent: bool = False
    error: Optional[str] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    sent_at: Optional[datetime] = None
