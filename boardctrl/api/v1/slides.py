"""
BoardCtrl — API v1: Slides
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from boardctrl.api.schemas import (
    BoardRef,
    PageOut,
    SlideOut,
    SlidesByBoardOut,
    page_of,
)
from boardctrl.core.security import Principal, require_roles
from boardctrl.database import get_db
from boardctrl.services.rbac import ADMIN_ONLY, READERS
from boardctrl.services.repository import SlideRepository

router = APIRouter(prefix="/slides", tags=["slides"])


class SlideRequest(BaseModel):
    id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    url: Optional[str] = Field(None, max_length=2048)
    time: int = Field(0, ge=0, description="Display duration in seconds")
    status: bool = True
    board_id: int


@router.get(
    "/",
    response_model=PageOut[SlideOut],
    dependencies=[Depends(require_roles(READERS))],
)
def list_slides(
    page: int = Query(1),
    page_size: int = Query(5, alias="pagesize"),
    db: Session = Depends(get_db),
):
    return page_of(SlideOut, SlideRepository(db).list(page, page_size))


@router.get(
    "/by-board/{board_id}",
    response_model=SlidesByBoardOut,
    dependencies=[Depends(require_roles(READERS))],
)
def list_slides_by_board(
    board_id: int,
    page: int = Query(1),
    page_size: int = Query(5, alias="pagesize"),
    db: Session = Depends(get_db),
):
    board, slides = SlideRepository(db).list_by_board(board_id, page, page_size)
    return SlidesByBoardOut(
        board=BoardRef.model_validate(board),
        slides=page_of(SlideOut, slides),
    )


@router.get(
    "/{slide_id}",
    response_model=SlideOut,
    dependencies=[Depends(require_roles(READERS))],
)
def get_slide(slide_id: int, db: Session = Depends(get_db)):
    return SlideOut.model_validate(SlideRepository(db).get(slide_id))


@router.post("/", response_model=SlideOut, status_code=status.HTTP_201_CREATED)
def create_slide(
    req: SlideRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    repo = SlideRepository(db)
    slide = repo.create(req.model_dump(exclude={"id"}), actor=principal.name)
    response.headers["Location"] = str(request.url_for("get_slide", slide_id=slide.id))
    return SlideOut.model_validate(repo.get(slide.id))


@router.put("/{slide_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_slide(
    slide_id: int,
    req: SlideRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    SlideRepository(db).update(
        slide_id, req.id, req.model_dump(exclude={"id"}), actor=principal.name
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{slide_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def toggle_slide_status(
    slide_id: int,
    activate: Optional[bool] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    SlideRepository(db).toggle_status(slide_id, principal.name, activate)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
