"""
Authentication service — credential validation, self-registration, password reset.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from boardctrl.core.exceptions import (
    AuthenticationError,
    InvalidInputError,
)
from boardctrl.core.security import verify_password
from boardctrl.models.users import User
from boardctrl.services.repository import UserRepository

logger = logging.getLogger("boardctrl.auth")


def validate_credentials(db: Session, name: str, password: str) -> User:
    """
    Return the user whose name and password match, with its role loaded.

    Unknown names and wrong passwords fail identically. A verified user
    without a role is a bad request, not an authentication failure.
    """
    user = UserRepository(db).get_by_name(name)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %r", name)
        raise AuthenticationError("Invalid credentials")
    if user.role is None:
        raise InvalidInputError("User has no role assigned", field="role_id")
    return user


def register(db: Session, name: str, password: str, email: str, role_id: int) -> User:
    """Create an active user; the new principal is recorded as its own creator."""
    user = UserRepository(db).create(
        {
            "name": name,
            "password": password,
            "email": email,
            "role_id": role_id,
            "status": True,
        },
        actor=name,
    )
    logger.info("Registered user %r with role %s", user.name, user.role_id)
    return user


def apply_password(db: Session, name: str, new_password: str) -> User:
    user = UserRepository(db).apply_password(name, new_password)
    logger.info("Password changed for %r", name)
    return user
