"""
BoardCtrl — API v1: Categories
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from boardctrl.api.schemas import CategoryOut, PageOut, page_of
from boardctrl.core.security import Principal, require_roles
from boardctrl.database import get_db
from boardctrl.services.rbac import ADMIN_ONLY, READERS
from boardctrl.services.repository import CategoryRepository

router = APIRouter(prefix="/categories", tags=["categories"])


class CategoryRequest(BaseModel):
    id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    status: bool = True


@router.get(
    "/",
    response_model=PageOut[CategoryOut],
    dependencies=[Depends(require_roles(READERS))],
)
def list_categories(
    page: int = Query(1),
    page_size: int = Query(5, alias="pagesize"),
    db: Session = Depends(get_db),
):
    return page_of(CategoryOut, CategoryRepository(db).list(page, page_size))


@router.get(
    "/{category_id}",
    response_model=CategoryOut,
    dependencies=[Depends(require_roles(READERS))],
)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return CategoryOut.model_validate(CategoryRepository(db).get(category_id))


@router.post("/", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    req: CategoryRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    category = CategoryRepository(db).create(
        req.model_dump(exclude={"id"}), actor=principal.name
    )
    response.headers["Location"] = str(
        request.url_for("get_category", category_id=category.id)
    )
    return CategoryOut.model_validate(category)


@router.put("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_category(
    category_id: int,
    req: CategoryRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    CategoryRepository(db).update(
        category_id, req.id, req.model_dump(exclude={"id"}), actor=principal.name
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{category_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def toggle_category_status(
    category_id: int,
    activate: Optional[bool] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    CategoryRepository(db).toggle_status(category_id, principal.name, activate)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    """Hard delete. Boards and their slides are removed with the category."""
    CategoryRepository(db).delete(category_id, principal.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
