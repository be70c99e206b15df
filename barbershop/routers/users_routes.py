# barbershop/routers/users_routes.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from barbershop.auth import authenticate, get_current_user, hash_password, issue_token
from barbershop.db import get_session
from barbershop.models import User
from barbershop.schemas import Principal, Token, UserCreate, UserPublic, UserRole

router = APIRouter(
    tags=["users"],
)


@router.post("/auth/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    # OAuth2 form field is "username"; we log in by email
    user = authenticate(session, form_data.username, form_data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return Token(access_token=issue_token(user))


@router.get("/me", response_model=UserPublic)
def me(
    current_user: Principal = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return session.get(User, current_user.id)


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    # Admins are provisioned out of band
    if user.role == UserRole.admin:
        raise HTTPException(status_code=403, detail="Cannot self-register as admin")

    existing = session.exec(
        select(User).where(User.email == user.email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    db_user = User(
        email=user.email,
        name=user.name,
        phone=user.phone,
        password_hash=hash_password(user.password),
        role=user.role.value,
    )
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user
