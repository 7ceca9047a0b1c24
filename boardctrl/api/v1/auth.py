"""
Auth router — login, self-registration and password reset.
None of these endpoints require a token.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from boardctrl.core.security import TokenService, get_token_service
from boardctrl.database import get_db
from boardctrl.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("boardctrl.auth")


# ── Request / Response schemas ────────────────────────────────────────────────


class LoginRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=255)


class LoginResponse(BaseModel):
    message: str = "Login successful."
    token: str
    user_name: str


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    role_id: int


class RegisterResponse(BaseModel):
    message: str = "User registered successfully."
    user_name: str


class ApplyPasswordRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    new_password: str = Field(..., min_length=1, max_length=255)


class MessageResponse(BaseModel):
    message: str


# ── Endpoints ─────────────────────────────────────────────────────────────────


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Authenticate with name + password.
    Returns a signed token carrying the user's name and role.
    """
    user = auth_service.validate_credentials(db, body.name, body.password)
    token = tokens.issue(user.name, user.role.name)
    logger.info("User %r logged in with role %r", user.name, user.role.name)
    return LoginResponse(token=token, user_name=user.name)


@router.post("/register", response_model=RegisterResponse)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account. Name and email must both be unused."""
    user = auth_service.register(
        db, body.name, body.password, str(body.email), body.role_id
    )
    return RegisterResponse(user_name=user.name)


@router.post("/apply-password", response_model=MessageResponse)
def apply_password(body: ApplyPasswordRequest, db: Session = Depends(get_db)):
    auth_service.apply_password(db, body.name, body.new_password)
    return MessageResponse(message="Password updated successfully.")
