# barbershop/store.py

"""Persistence capability used by the scheduling core.

The lifecycle, availability and rating code only talk to an
``AppointmentStore``; ``SQLStore`` is the SQLModel-backed implementation
the HTTP layer hands them. Database faults surface as ``StorageError``.
"""

import functools
import logging
from contextlib import contextmanager
from datetime import date as Date, datetime
from typing import ContextManager, Iterable, List, Optional, Protocol

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from barbershop.errors import SlotUnavailable, StorageError
from barbershop.models import Appointment, Barber, Notification, Review, Service, User

logger = logging.getLogger(__name__)


class AppointmentStore(Protocol):
    def transaction(self) -> ContextManager[None]: ...

    def get_user(self, user_id: int) -> Optional[User]: ...

    def get_barber(self, barber_id: int) -> Optional[Barber]: ...

    def get_barber_by_user(self, user_id: int) -> Optional[Barber]: ...

    def list_barbers(
        self, *, barbershop_id: Optional[int] = None, specialty: Optional[str] = None
    ) -> List[Barber]: ...

    def get_service(self, service_id: int) -> Optional[Service]: ...

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]: ...

    def list_appointments(
        self,
        *,
        barber_id: Optional[int] = None,
        client_id: Optional[int] = None,
        on_date: Optional[Date] = None,
        statuses: Optional[Iterable[str]] = None,
        exclude_status: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> List[Appointment]: ...

    def add_appointment(self, appointment: Appointment) -> Appointment: ...

    def save_appointment(self, appointment: Appointment) -> Appointment: ...

    def claim_rating(self, appointment_id: int, score: int, comment: str, rated_at: datetime) -> bool: ...

    def claim_reminder(self, appointment_id: int) -> bool: ...

    def rated_scores(self, barber_id: int) -> List[int]: ...

    def add_review(self, review: Review) -> Review: ...

    def list_reviews(self, barber_id: int) -> List[Review]: ...

    def save_barber(self, barber: Barber) -> Barber: ...

    def add_notification(self, notification: Notification) -> Notification: ...

    def save_notification(self, notification: Notification) -> Notification: ...

    def get_notification(self, notification_id: int) -> Optional[Notification]: ...

    def list_notifications(self, recipient_id: int, unread_only: bool = False) -> List[Notification]: ...

    def mark_all_read(self, recipient_id: int) -> int: ...


def _reads(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Read failed in %s", method.__name__)
            raise StorageError("Database error") from exc
    return wrapper


class SQLStore:
    def __init__(self, session: Session):
        self.session = session
        self._in_transaction = False

    @contextmanager
    def transaction(self):
        """Group several writes into one commit; any error rolls all of them back."""
        if self._in_transaction:
            yield
            return

        self._in_transaction = True
        try:
            yield
        except Exception:
            self.session.rollback()
            raise
        finally:
            self._in_transaction = False

        with self._writing():
            pass

    @contextmanager
    def _writing(self, conflict_detail: Optional[str] = None):
        try:
            yield
            # inside transaction() only flush; the outer block commits
            if self._in_transaction:
                self.session.flush()
            else:
                self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if conflict_detail is not None:
                raise SlotUnavailable(conflict_detail) from exc
            logger.exception("Integrity error on write")
            raise StorageError("Database constraint violated") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Write failed")
            raise StorageError("Database error") from exc

    def _persist(self, obj, conflict_detail: Optional[str] = None):
        with self._writing(conflict_detail):
            self.session.add(obj)
        self.session.refresh(obj)
        return obj

    # --- users / barbers / services ---

    @_reads
    def get_user(self, user_id):
        return self.session.get(User, user_id)

    @_reads
    def get_barber(self, barber_id):
        return self.session.get(Barber, barber_id)

    @_reads
    def get_barber_by_user(self, user_id):
        return self.session.exec(
            select(Barber).where(Barber.user_id == user_id)
        ).first()

    @_reads
    def list_barbers(self, *, barbershop_id=None, specialty=None):
        """Active barbers, optionally limited to one barbershop or specialty."""
        stmt = select(Barber).where(col(Barber.is_active).is_(True))
        if barbershop_id is not None:
            stmt = stmt.where(Barber.barbershop_id == barbershop_id)
        barbers = self.session.exec(stmt.order_by(Barber.id)).all()
        # specialties is a JSON list; containment is checked here so sqlite and postgres agree
        if specialty is not None:
            barbers = [b for b in barbers if specialty in (b.specialties or [])]
        return list(barbers)

    @_reads
    def get_service(self, service_id):
        return self.session.get(Service, service_id)

    def save_barber(self, barber):
        return self._persist(barber)

    # --- appointments ---

    @_reads
    def get_appointment(self, appointment_id):
        return self.session.get(Appointment, appointment_id)

    @_reads
    def list_appointments(
        self,
        *,
        barber_id=None,
        client_id=None,
        on_date=None,
        statuses=None,
        exclude_status=None,
        exclude_id=None,
    ):
        stmt = select(Appointment)
        if barber_id is not None:
            stmt = stmt.where(Appointment.barber_id == barber_id)
        if client_id is not None:
            stmt = stmt.where(Appointment.client_id == client_id)
        if on_date is not None:
            stmt = stmt.where(Appointment.date == on_date)
        if statuses is not None:
            stmt = stmt.where(col(Appointment.status).in_(list(statuses)))
        if exclude_status is not None:
            stmt = stmt.where(Appointment.status != exclude_status)
        if exclude_id is not None:
            stmt = stmt.where(Appointment.id != exclude_id)

        stmt = stmt.order_by(Appointment.date, Appointment.start_time)
        return list(self.session.exec(stmt).all())

    def add_appointment(self, appointment):
        return self._persist(appointment, conflict_detail="Time slot not available for this barber")

    def save_appointment(self, appointment):
        return self._persist(appointment, conflict_detail="Time slot not available for this barber")

    def claim_rating(self, appointment_id, score, comment, rated_at):
        stmt = (
            update(Appointment)
            .where(col(Appointment.id) == appointment_id)
            .where(col(Appointment.rating_score).is_(None))
            .values(rating_score=score, rating_comment=comment, rated_at=rated_at)
        )
        with self._writing():
            result = self.session.execute(stmt)
        return result.rowcount == 1

    def claim_reminder(self, appointment_id):
        stmt = (
            update(Appointment)
            .where(col(Appointment.id) == appointment_id)
            .where(col(Appointment.reminder_sent).is_(False))
            .values(reminder_sent=True)
        )
        with self._writing():
            result = self.session.execute(stmt)
        return result.rowcount == 1

    @_reads
    def rated_scores(self, barber_id):
        return list(self.session.exec(
            select(Appointment.rating_score)
            .where(Appointment.barber_id == barber_id)
            .where(Appointment.status == "completed")
            .where(col(Appointment.rating_score).is_not(None))
        ).all())

    # --- reviews ---

    def add_review(self, review):
        return self._persist(review)

    @_reads
    def list_reviews(self, barber_id):
        return list(self.session.exec(
            select(Review).where(Review.barber_id == barber_id).order_by(Review.id)
        ).all())

    # --- notifications ---

    def add_notification(self, notification):
        return self._persist(notification)

    def save_notification(self, notification):
        return self._persist(notification)

    @_reads
    def get_notification(self, notification_id):
        return self.session.get(Notification, notification_id)

    @_reads
    def list_notifications(self, recipient_id, unread_only=False):
        stmt = select(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            stmt = stmt.where(col(Notification.is_read).is_(False))
        stmt = stmt.order_by(col(Notification.created_at).desc(), col(Notification.id).desc())
        return list(self.session.exec(stmt).all())

    def mark_all_read(self, recipient_id):
        stmt = (
            update(Notification)
            .where(col(Notification.recipient_id) == recipient_id)
            .where(col(Notification.is_read).is_(False))
            .values(is_read=True)
        )
        with self._writing():
            result = self.session.execute(stmt)
        return result.rowcount
