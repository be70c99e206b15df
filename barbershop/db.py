# barbershop/db.py

from sqlmodel import SQLModel, create_engine, Session

from barbershop.config import get_settings

settings = get_settings()

# SQLite needs check_same_thread off to share connections with FastAPI's threadpool
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    connect_args=connect_args,
)


def init_db(bind=None):
    # importing models registers the tables on SQLModel.metadata
    from barbershop import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
