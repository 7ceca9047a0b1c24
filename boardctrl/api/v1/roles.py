"""
BoardCtrl — API v1: Roles
Every operation here requires the Admin role.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from boardctrl.api.schemas import PageOut, RoleDetailOut, RoleOut, page_of
from boardctrl.core.security import Principal, require_roles
from boardctrl.database import get_db
from boardctrl.services.rbac import ADMIN_ONLY
from boardctrl.services.repository import RoleRepository

router = APIRouter(prefix="/roles", tags=["roles"])


class RoleRequest(BaseModel):
    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)
    status: bool = True


@router.get(
    "/",
    response_model=PageOut[RoleOut],
    dependencies=[Depends(require_roles(ADMIN_ONLY))],
)
def list_roles(
    page: int = Query(1),
    page_size: int = Query(5, alias="pagesize"),
    db: Session = Depends(get_db),
):
    return page_of(RoleOut, RoleRepository(db).list(page, page_size))


@router.get(
    "/{role_id}",
    response_model=RoleDetailOut,
    dependencies=[Depends(require_roles(ADMIN_ONLY))],
)
def get_role(role_id: int, db: Session = Depends(get_db)):
    """Role with the users assigned to it."""
    return RoleDetailOut.model_validate(RoleRepository(db).get(role_id))


@router.post("/", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(
    req: RoleRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    role = RoleRepository(db).create(req.model_dump(exclude={"id"}), actor=principal.name)
    response.headers["Location"] = str(request.url_for("get_role", role_id=role.id))
    return RoleOut.model_validate(role)


@router.put("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_role(
    role_id: int,
    req: RoleRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    RoleRepository(db).update(
        role_id, req.id, req.model_dump(exclude={"id"}), actor=principal.name
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{role_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def toggle_role_status(
    role_id: int,
    activate: Optional[bool] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    RoleRepository(db).toggle_status(role_id, principal.name, activate)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
