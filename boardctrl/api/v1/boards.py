"""
BoardCtrl — API v1: Boards
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from boardctrl.api.schemas import (
    BoardOut,
    BoardsByCategoryOut,
    CategoryRef,
    PageOut,
    page_of,
)
from boardctrl.core.security import Principal, require_roles
from boardctrl.database import get_db
from boardctrl.services.rbac import ADMIN_ONLY, READERS
from boardctrl.services.repository import BoardRepository

router = APIRouter(prefix="/boards", tags=["boards"])


class BoardRequest(BaseModel):
    id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: bool = True
    category_id: int


@router.get(
    "/",
    response_model=PageOut[BoardOut],
    dependencies=[Depends(require_roles(READERS))],
)
def list_boards(
    page: int = Query(1),
    page_size: int = Query(5, alias="pagesize"),
    db: Session = Depends(get_db),
):
    return page_of(BoardOut, BoardRepository(db).list(page, page_size))


@router.get(
    "/by-category/{category_id}",
    response_model=BoardsByCategoryOut,
    dependencies=[Depends(require_roles(READERS))],
)
def list_boards_by_category(
    category_id: int,
    page: int = Query(1),
    page_size: int = Query(5, alias="pagesize"),
    db: Session = Depends(get_db),
):
    category, boards = BoardRepository(db).list_by_category(category_id, page, page_size)
    return BoardsByCategoryOut(
        category=CategoryRef.model_validate(category),
        boards=page_of(BoardOut, boards),
    )


@router.get(
    "/{board_id}",
    response_model=BoardOut,
    dependencies=[Depends(require_roles(READERS))],
)
def get_board(board_id: int, db: Session = Depends(get_db)):
    return BoardOut.model_validate(BoardRepository(db).get(board_id))


@router.post("/", response_model=BoardOut, status_code=status.HTTP_201_CREATED)
def create_board(
    req: BoardRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    repo = BoardRepository(db)
    board = repo.create(req.model_dump(exclude={"id"}), actor=principal.name)
    response.headers["Location"] = str(request.url_for("get_board", board_id=board.id))
    return BoardOut.model_validate(repo.get(board.id))


@router.put("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_board(
    board_id: int,
    req: BoardRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    BoardRepository(db).update(
        board_id, req.id, req.model_dump(exclude={"id"}), actor=principal.name
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{board_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def toggle_board_status(
    board_id: int,
    activate: Optional[bool] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles(ADMIN_ONLY)),
):
    BoardRepository(db).toggle_status(board_id, principal.name, activate)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
