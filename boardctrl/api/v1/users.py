"""
BoardCtrl — API v1: Users (administration)
Every operation here requires the Admin role.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from boardctrl.api.schemas import PageOut, UserOut, page_of
from boardctrl.core.security import Principal, require_roles
from boardctrl.database import get_db
from boardctrl.services.rbac import ADMIN_ONLY
from boardctrl.services.repository import UserRepository

router = APIRouter(prefix="/users", tags=["users"])


class UserUpdateRequest(BaseModel):
    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role_id: int
    status: bool = True


class UserCreateRequest(UserUpdateRequest):
    password: str = Field(..., min_length=1, max_length=255)


def _values(req: UserUpdateRequest) -> dict:
    values = req.model_dump(exclude={"id"})
    values["email"] = str(req.email)
    return values


@router.get(
    "/",
    response_model=PageOut[UserOut],
    dependencies=[Depends(require_roles(ADMIN_ONLY))],
)
def list_users(
    page: int = Query(1),
    page_size: int = Query(5, alias="pagesize"),
    db: Session = Depends(get_db),
):
    return page_of(UserOut, UserRepository(db).list(page, page_size))


@router.get(
    "/{user_id}",
    response_model=UserOut,
    dependencies=[Depends(require_roles(ADMIN_ONLY))],
)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserOut.model_validate(UserRepository(db).get(user_id))


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    req: UserCreateRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    repo = UserRepository(db)
    user = repo.create(_values(req), actor=principal.name)
    response.headers["Location"] = str(request.url_for("get_user", user_id=user.id))
    return UserOut.model_validate(repo.get(user.id))


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_user(
    user_id: int,
    req: UserUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    """Replace name, email, role and status. Passwords change only via apply-password."""
    UserRepository(db).update(user_id, req.id, _values(req), actor=principal.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def toggle_user_status(
    user_id: int,
    activate: Optional[bool] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    UserRepository(db).toggle_status(user_id, principal.name, activate)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    UserRepository(db).delete(user_id, principal.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
