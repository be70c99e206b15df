# tests/conftest.py

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from barbershop.db import get_session
from barbershop.lifecycle import AppointmentLifecycle
from barbershop.main import app
from barbershop.models import Appointment, Barber, Service, User
from barbershop.schemas import NotificationChannel, NotificationType
from barbershop.store import SQLStore

# A Monday far enough ahead that nothing in the suite depends on "today"
DAY = date(2030, 1, 7)


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send(self, recipient_id, channel, title, message, *,
             kind=NotificationType.system_message, related=None):
        self.sent.append(SimpleNamespace(
            recipient_id=recipient_id,
            channel=NotificationChannel(channel),
            title=title,
            message=message,
            kind=NotificationType(kind),
            related=related,
        ))
        return True


class FailingNotifier:
    def __init__(self):
        self.calls = 0

    def send(self, *args, **kwargs):
        self.calls += 1
        raise RuntimeError("smtp down")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session):
    return SQLStore(session)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def lifecycle(store, notifier):
    return AppointmentLifecycle(store, notifier)


@pytest.fixture
def shop(session):
    client = User(email="client@example.com", name="Carla", phone="+5511999990001",
                  password_hash="x", role="client")
    other_client = User(email="other@example.com", name="Otto", password_hash="x", role="client")
    barber_user = User(email="barber@example.com", name="Bruno", phone="+5511999990002",
                       password_hash="x", role="barber")
    second_barber_user = User(email="barber2@example.com", name="Beto", password_hash="x", role="barber")
    admin = User(email="admin@example.com", name="Ana", password_hash="x", role="admin")
    session.add_all([client, other_client, barber_user, second_barber_user, admin])
    session.commit()

    working_hours = [{"day": DAY.weekday(), "start": "09:00", "end": "11:00", "is_available": True}]
    barber = Barber(user_id=barber_user.id, barbershop_id=1, working_hours=working_hours)
    second_barber = Barber(user_id=second_barber_user.id, barbershop_id=2, working_hours=working_hours)
    haircut = Service(barbershop_id=1, name="Haircut", price=Decimal("25.00"), duration=30)
    combo = Service(barbershop_id=1, name="Cut and beard", price=Decimal("40.00"), duration=45)
    session.add_all([barber, second_barber, haircut, combo])
    session.commit()

    return SimpleNamespace(
        client=client,
        other_client=other_client,
        barber_user=barber_user,
        second_barber_user=second_barber_user,
        admin=admin,
        barber=barber,
        second_barber=second_barber,
        haircut=haircut,
        combo=combo,
    )


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    # no context manager: the lifespan would create tables in the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


def insert_appointment(store, shop, start, end, *, barber=None, on_date=DAY, status="scheduled"):
    """Write an appointment straight to the store, bypassing the lifecycle."""
    barber = barber or shop.barber
    return store.add_appointment(Appointment(
        client_id=shop.client.id,
        barber_id=barber.id,
        barbershop_id=barber.barbershop_id,
        service_id=shop.haircut.id,
        date=on_date,
        start_time=start,
        end_time=end,
        status=status,
        total_price=Decimal("25.00"),
    ))
