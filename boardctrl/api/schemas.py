"""
BoardCtrl — Response shapes shared across routers.

Entities are projected onto these models with ``from_attributes``; anything
not declared here (password hashes, row versions) never leaves the API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict

from boardctrl.services.repository import Page

T = TypeVar("T")


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class AuditOut(ORMModel):
    created_by: Optional[str] = None
    created_date: Optional[datetime] = None
    edited_by: Optional[str] = None
    edited_date: Optional[datetime] = None


# ── Nested references ─────────────────────────────────────────────────────────


class CategoryRef(ORMModel):
    id: int
    title: str


class BoardRef(ORMModel):
    id: int
    title: str
    description: Optional[str] = None
    status: bool
    category: Optional[CategoryRef] = None


class RoleRef(ORMModel):
    id: int
    name: str


class UserRef(ORMModel):
    id: int
    name: str
    role_id: Optional[int] = None


# ── Resources ─────────────────────────────────────────────────────────────────


class CategoryOut(AuditOut):
    id: int
    title: str
    status: bool


class BoardOut(AuditOut):
    id: int
    title: str
    description: Optional[str] = None
    status: bool
    category_id: int
    category: Optional[CategoryRef] = None


class SlideOut(AuditOut):
    id: int
    title: str
    url: Optional[str] = None
    time: int
    status: bool
    board_id: int
    board: Optional[BoardRef] = None


class UserOut(AuditOut):
    id: int
    name: str
    email: str
    status: bool
    role_id: Optional[int] = None
    role: Optional[RoleRef] = None


class RoleOut(AuditOut):
    id: int
    name: str
    status: bool


class RoleDetailOut(RoleOut):
    users: List[UserRef] = []


# ── Paging ────────────────────────────────────────────────────────────────────


class PageOut(BaseModel, Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total_records: int
    total_pages: int


def page_of(schema: Type[BaseModel], page: Page) -> PageOut:
    """Project a repository page onto ``PageOut[schema]``."""
    return PageOut[schema](
        items=[schema.model_validate(item) for item in page.items],
        page=page.page,
        page_size=page.page_size,
        total_records=page.total_records,
        total_pages=page.total_pages,
    )


class BoardsByCategoryOut(BaseModel):
    category: CategoryRef
    boards: PageOut[BoardOut]


class SlidesByBoardOut(BaseModel):
    board: BoardRef
    slides: PageOut[SlideOut]
