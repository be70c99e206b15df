#!/usr/bin/env python3
"""
Bootstrap script to create an admin user.
Admins cannot self-register through the API; run this once per admin.

Usage:
    python -m barbershop.scripts.create_admin
"""
from getpass import getpass

from sqlmodel import Session, select

from barbershop.auth import hash_password
from barbershop.db import engine, init_db
from barbershop.models import User
from barbershop.schemas import UserRole


def create_admin(session: Session, email: str, password: str, name: str = "") -> User:
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters")

    existing = session.exec(select(User).where(User.email == email)).first()
    if existing is not None:
        raise ValueError(f"User with email {email} already exists")

    user = User(
        email=email,
        name=name,
        password_hash=hash_password(password),
        role=UserRole.admin.value,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def main():
    init_db()
    email = input("Email: ").strip()
    password = getpass("Password (min 8 chars): ").strip()
    name = input("Full name: ").strip()

    with Session(engine) as session:
        try:
            user = create_admin(session, email, password, name)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
    print(f"Admin created: {user.email} (ID: {user.id})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
