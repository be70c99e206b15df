# barbershop/schemas.py

from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from datetime import datetime, date as Date
from decimal import Decimal
from typing import List, Optional


class UserRole(str, Enum):
    client = "client"
    barber = "barber"
    admin = "admin"


class AppointmentStatus(str, Enum):
    scheduled = "scheduled"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    refunded = "refunded"


class PaymentMethod(str, Enum):
    cash = "cash"
    card = "card"
    pix = "pix"
    other = "other"


class NotificationChannel(str, Enum):
    email = "email"
    sms = "sms"
    in_app = "in_app"


class NotificationType(str, Enum):
    appointment_confirmation = "appointment_confirmation"
    appointment_update = "appointment_update"
    appointment_cancellation = "appointment_cancellation"
    appointment_completed = "appointment_completed"
    appointment_reminder = "appointment_reminder"
    review_request = "review_request"
    system_message = "system_message"


class RelatedKind(str, Enum):
    appointment = "appointment"
    barbershop = "barbershop"
    service = "service"


class RelatedEntity(BaseModel):
    kind: RelatedKind
    id: int


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class Principal(BaseModel):
    """Who is acting on a request, as carried in the access token."""

    id: int
    role: UserRole


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: UserRole
    name: str = ""
    phone: Optional[str] = None


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    role: UserRole
    name: str = ""
    phone: Optional[str] = None


class WorkingDay(BaseModel):
    day: int = Field(ge=0, le=6)  # 0=Mon, 1=Tues....
    start: str
    end: str
    is_available: bool = True


class WorkingHours(BaseModel):
    days: List[WorkingDay]


class BarberCreate(BaseModel):
    barbershop_id: int
    specialties: List[str] = []
    user_id: Optional[int] = None  # admins may create a profile for another user


class BarberUpdate(BaseModel):
    specialties: Optional[List[str]] = None
    barbershop_id: Optional[int] = None  # admin only


class ReviewPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    client_id: int
    text: str
    score: int
    created_at: datetime


class BarberPublic(BaseModel):
    id: int
    user_id: int
    barbershop_id: int
    specialties: List[str]
    working_hours: List[WorkingDay]
    rating: float
    is_active: bool
    reviews: List[ReviewPublic] = []


class ServiceCreate(BaseModel):
    barbershop_id: int
    name: str
    description: str = ""
    price: Decimal = Field(ge=0)
    duration: int = Field(gt=0)
    category: str = "haircut"


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, gt=0)
    category: Optional[str] = None
    is_active: Optional[bool] = None


class ServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    barbershop_id: int
    name: str
    description: str
    price: Decimal
    duration: int
    category: str
    is_active: bool


class AppointmentCreate(BaseModel):
    barber_id: int
    service_id: int
    date: Date
    start_time: str
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


class AppointmentUpdate(BaseModel):
    barber_id: Optional[int] = None
    service_id: Optional[int] = None
    date: Optional[Date] = None
    start_time: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


class AppointmentComplete(BaseModel):
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None


class AppointmentRate(BaseModel):
    score: int
    comment: Optional[str] = None


class RatingPublic(BaseModel):
    score: int
    comment: str = ""
    created_at: Optional[datetime] = None


class NotificationsStatus(BaseModel):
    reminder_sent: bool
    confirmation_sent: bool


class AppointmentPublic(BaseModel):
    id: int
    client_id: int
    barber_id: int
    barbershop_id: int
    service_id: int
    date: Date
    start_time: str
    end_time: str
    status: AppointmentStatus
    total_price: Decimal
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    notes: Optional[str] = None
    rating: Optional[RatingPublic] = None
    notifications_status: NotificationsStatus
    created_at: datetime

    @classmethod
    def from_model(cls, appt) -> "AppointmentPublic":
        rating = None
        if appt.rating_score is not None:
            rating = RatingPublic(
                score=appt.rating_score,
                comment=appt.rating_comment or "",
                created_at=appt.rated_at,
            )
        return cls(
            id=appt.id,
            client_id=appt.client_id,
            barber_id=appt.barber_id,
            barbershop_id=appt.barbershop_id,
            service_id=appt.service_id,
            date=appt.date,
            start_time=appt.start_time,
            end_time=appt.end_time,
            status=appt.status,
            total_price=appt.total_price,
            payment_status=appt.payment_status,
            payment_method=appt.payment_method,
            notes=appt.notes,
            rating=rating,
            notifications_status=NotificationsStatus(
                reminder_sent=appt.reminder_sent,
                confirmation_sent=appt.confirmation_sent,
            ),
            created_at=appt.created_at,
        )


class AvailabilityResponse(BaseModel):
    barber_id: int
    date: Date
    available_starts: List[str]


class NotificationPublic(BaseModel):
    id: int
    type: NotificationType
    title: str
    message: str
    channel: NotificationChannel
    related_entity: Optional[RelatedEntity] = None
    sent: bool
    error: Optional[str] = None
    is_read: bool
    created_at: datetime

    @classmethod
    def from_model(cls, note) -> "NotificationPublic":
        related = None
        if note.related_kind is not None and note.related_id is not None:
            related = RelatedEntity(kind=note.related_kind, id=note.related_id)
        return cls(
            id=note.id,
            type=note.type,
            title=note.title,
            message=note.message,
            channel=note.channel,
            related_entity=related,
            sent=note.sent,
            error=note.error,
            is_read=note.is_read,
            created_at=note.created_at,
        )


class ReminderSweepResult(BaseModel):
    day: Date
    reminders_sent: int
