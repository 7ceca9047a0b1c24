"""
BoardCtrl — Generic paginated resource repository.

One implementation of list / get / create / update / toggle-status (and, where
allowed, hard delete) shared by every entity. Each entity gets a small
subclass naming its model, its mutable fields, how its relations are loaded,
and which references must exist before a write.

Every write takes the acting principal's name explicitly and stamps the audit
columns from it; nothing is read from the request context.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.orm.exc import StaleDataError

from boardctrl.core.exceptions import (
    ConcurrencyConflictError,
    ConflictError,
    IdMismatchError,
    InvalidInputError,
    ResourceNotFoundError,
)
from boardctrl.core.security import hash_password
from boardctrl.models.audit import utcnow
from boardctrl.models.boards import Board, Category, Slide
from boardctrl.models.users import Role, User

logger = logging.getLogger("boardctrl.repository")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 1000

ModelT = TypeVar("ModelT")


@dataclass
class Page(Generic[ModelT]):
    items: List[ModelT]
    page: int
    page_size: int
    total_records: int
    total_pages: int


def validate_paging(page: int, page_size: int) -> None:
    if page_size < 1:
        raise InvalidInputError("Page size must be greater than zero", field="pagesize")
    if page_size > MAX_PAGE_SIZE:
        raise InvalidInputError(
            f"Page size must not exceed {MAX_PAGE_SIZE}", field="pagesize"
        )
    if page < 1:
        raise InvalidInputError("Page must be 1 or greater", field="page")


def resolve_page(page: int, page_size: int, total_records: int) -> Tuple[int, int]:
    """
    Validate paging input and return ``(page, total_pages)``.

    A page past the end is clamped to the last page rather than rejected.
    """
    validate_paging(page, page_size)
    total_pages = math.ceil(total_records / page_size)
    if page > total_pages > 0:
        page = total_pages
    return page, total_pages


class ResourceRepository(Generic[ModelT]):
    """Paginated CRUD with audit stamping and status toggling for one model."""

    model: Type[ModelT]
    label: str = "Resource"
    mutable_fields: Tuple[str, ...] = ()
    # Written on create only, never by update
    create_only_fields: Tuple[str, ...] = ()

    def __init__(self, db: Session) -> None:
        self.db = db

    # ── Hooks ─────────────────────────────────────────────────────────────────

    def load_options(self) -> Sequence[Any]:
        """Relations eagerly loaded alongside each record."""
        return ()

    def check_references(
        self, values: Dict[str, Any], existing: Optional[ModelT] = None
    ) -> None:
        """Raise if ``values`` point at missing parents or collide with unique fields."""

    # ── Reads ─────────────────────────────────────────────────────────────────

    def list(
        self,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
        **filters: Any,
    ) -> Page[ModelT]:
        validate_paging(page, page_size)
        conditions = [getattr(self.model, key) == value for key, value in filters.items()]

        total = self.db.scalar(
            select(func.count()).select_from(self.model).where(*conditions)
        )
        if not total:
            raise ResourceNotFoundError(self.label)

        page, total_pages = resolve_page(page, page_size, total)
        stmt = (
            select(self.model)
            .options(*self.load_options())
            .where(*conditions)
            .order_by(self.model.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        items = list(self.db.scalars(stmt).unique())
        return Page(
            items=items,
            page=page,
            page_size=page_size,
            total_records=total,
            total_pages=total_pages,
        )

    def get(self, entity_id: int) -> ModelT:
        stmt = (
            select(self.model)
            .options(*self.load_options())
            .where(self.model.id == entity_id)
        )
        entity = self.db.scalars(stmt).unique().first()
        if entity is None:
            raise ResourceNotFoundError(self.label, entity_id)
        return entity

    def exists(self, entity_id: int) -> bool:
        return (
            self.db.scalar(select(self.model.id).where(self.model.id == entity_id))
            is not None
        )

    # ── Writes ────────────────────────────────────────────────────────────────

    def create(self, values: Dict[str, Any], actor: str) -> ModelT:
        self.check_references(values)
        allowed = self.mutable_fields + self.create_only_fields
        entity = self.model(**{k: v for k, v in values.items() if k in allowed})
        entity.created_by = actor
        entity.created_date = utcnow()

        self.db.add(entity)
        self._commit()
        self.db.refresh(entity)
        logger.info("%s %s created by %s", self.label, entity.id, actor)
        return entity

    def update(
        self,
        entity_id: int,
        body_id: Optional[int],
        values: Dict[str, Any],
        actor: str,
    ) -> ModelT:
        if body_id != entity_id:
            raise IdMismatchError(entity_id, body_id)

        entity = self.get(entity_id)
        self.check_references(values, existing=entity)
        for field in self.mutable_fields:
            if field in values:
                setattr(entity, field, values[field])
        self._stamp_edit(entity, actor)
        self._save_existing(entity_id)
        logger.info("%s %s updated by %s", self.label, entity_id, actor)
        return entity

    def toggle_status(
        self, entity_id: int, actor: str, activate: Optional[bool] = None
    ) -> ModelT:
        """Set status to ``activate`` when given, otherwise flip it."""
        entity = self.get(entity_id)
        entity.status = (not entity.status) if activate is None else activate
        self._stamp_edit(entity, actor)
        self._save_existing(entity_id)
        logger.info(
            "%s %s status set to %s by %s", self.label, entity_id, entity.status, actor
        )
        return entity

    # ── Internals ─────────────────────────────────────────────────────────────

    @staticmethod
    def _stamp_edit(entity: Any, actor: str) -> None:
        entity.edited_by = actor
        entity.edited_date = utcnow()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(
                f"{self.label} conflicts with an existing record"
            ) from exc

    def _save_existing(self, entity_id: int) -> None:
        """Commit a change to a loaded record, classifying a lost race once."""
        try:
            self._commit()
        except StaleDataError as exc:
            self.db.rollback()
            if not self.exists(entity_id):
                raise ResourceNotFoundError(self.label, entity_id) from exc
            logger.error("Concurrent modification of %s %s", self.label, entity_id)
            raise ConcurrencyConflictError(self.label, entity_id) from exc


class HardDeleteMixin:
    """Irreversible removal; dependent rows go with it via ON DELETE CASCADE."""

    def delete(self, entity_id: int, actor: str) -> None:
        entity = self.get(entity_id)
        self.db.delete(entity)
        self._save_existing(entity_id)
        logger.warning("%s %s deleted by %s", self.label, entity_id, actor)


# ─── Per-entity repositories ──────────────────────────────────────────────────


class CategoryRepository(HardDeleteMixin, ResourceRepository[Category]):
    model = Category
    label = "Category"
    mutable_fields = ("title", "status")


class BoardRepository(ResourceRepository[Board]):
    model = Board
    label = "Board"
    mutable_fields = ("title", "description", "status", "category_id")

    def load_options(self):
        return (joinedload(Board.category),)

    def check_references(self, values, existing=None):
        category_id = values.get("category_id")
        if category_id is None or self.db.get(Category, category_id) is None:
            raise InvalidInputError(
                f"Category {category_id} does not exist", field="category_id"
            )

    def list_by_category(
        self,
        category_id: int,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Tuple[Category, Page[Board]]:
        category = self.db.get(Category, category_id)
        if category is None:
            raise ResourceNotFoundError("Category", category_id)
        return category, self.list(page, page_size, category_id=category_id)


class SlideRepository(ResourceRepository[Slide]):
    model = Slide
    label = "Slide"
    mutable_fields = ("title", "url", "time", "status", "board_id")

    def load_options(self):
        return (joinedload(Slide.board).joinedload(Board.category),)

    def check_references(self, values, existing=None):
        board_id = values.get("board_id")
        if board_id is None or self.db.get(Board, board_id) is None:
            raise InvalidInputError(f"Board {board_id} does not exist", field="board_id")

    def list_by_board(
        self,
        board_id: int,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Tuple[Board, Page[Slide]]:
        board = self.db.get(Board, board_id)
        if board is None:
            raise ResourceNotFoundError("Board", board_id)
        return board, self.list(page, page_size, board_id=board_id)


class RoleRepository(ResourceRepository[Role]):
    model = Role
    label = "Role"
    mutable_fields = ("name", "status")

    def load_options(self):
        return (selectinload(Role.users),)

    def check_references(self, values, existing=None):
        stmt = select(Role.id).where(Role.name == values.get("name"))
        if existing is not None:
            stmt = stmt.where(Role.id != existing.id)
        if self.db.scalar(stmt) is not None:
            raise ConflictError("A role with this name already exists", field="name")


class UserRepository(HardDeleteMixin, ResourceRepository[User]):
    model = User
    label = "User"
    mutable_fields = ("name", "email", "role_id", "status")
    create_only_fields = ("password_hash",)

    def load_options(self):
        return (joinedload(User.role),)

    def check_references(self, values, existing=None):
        role_id = values.get("role_id")
        if role_id is None or self.db.get(Role, role_id) is None:
            raise InvalidInputError(f"Role {role_id} does not exist", field="role_id")

        for field in ("name", "email"):
            column = getattr(User, field)
            stmt = select(User.id).where(column == values.get(field))
            if existing is not None:
                stmt = stmt.where(User.id != existing.id)
            if self.db.scalar(stmt) is not None:
                raise ConflictError(f"A user with this {field} already exists", field=field)

    def create(self, values: Dict[str, Any], actor: str) -> User:
        values = dict(values)
        values["password_hash"] = hash_password(values.pop("password", None))
        return super().create(values, actor)

    def apply_password(self, name: str, new_password: str) -> User:
        """Replace the named user's password hash; the user is stamped as editor."""
        user = self.get_by_name(name)
        if user is None:
            raise ResourceNotFoundError(self.label, name)

        user_id = user.id
        user.password_hash = hash_password(new_password)
        self._stamp_edit(user, name)
        self._save_existing(user_id)
        return user

    def get_by_name(self, name: str) -> Optional[User]:
        stmt = select(User).options(*self.load_options()).where(User.name == name)
        return self.db.scalars(stmt).unique().first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.scalar(select(User).where(User.email == email))
