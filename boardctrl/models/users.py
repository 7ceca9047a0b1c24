"""
Principal and role models for authentication.
boardctrl/models/users.py
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boardctrl.database import Base
from boardctrl.models.audit import AuditMixin


class Role(AuditMixin, Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # Back-reference only, no ORM cascade
    users: Mapped[List["User"]] = relationship(
        "User", back_populates="role", passive_deletes=True
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self):
        return f"<Role(id={self.id}, name={self.name})>"


class User(AuditMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    role_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=True
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    role: Mapped[Optional["Role"]] = relationship("Role", back_populates="users")

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self):
        return f"<User(id={self.id}, name={self.name}, role_id={self.role_id})>"
