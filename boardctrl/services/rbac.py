"""
BoardCtrl — RBAC (Role-Based Access Control) Service
"""

from __future__ import annotations

from typing import AbstractSet, FrozenSet

from boardctrl.core.exceptions import PermissionDeniedError

# ─── Roles ────────────────────────────────────────────────────────────────────

ADMIN = "Admin"
USER = "User"

# Allowed-role sets attached to each operation at registration time
ADMIN_ONLY: FrozenSet[str] = frozenset({ADMIN})
READERS: FrozenSet[str] = frozenset({ADMIN, USER})


class RoleGate:
    """Checks whether a role claim belongs to an operation's allowed-role set."""

    def check(self, role: str, allowed: AbstractSet[str], operation: str = "") -> bool:
        """
        Return True if the role is allowed.
        Raise PermissionDeniedError otherwise.

        Matching is exact and case-sensitive; an empty allowed set denies everyone.
        """
        if role not in allowed:
            raise PermissionDeniedError(role, operation)
        return True

    def is_allowed(self, role: str, allowed: AbstractSet[str]) -> bool:
        """Non-raising version of check(). Returns True/False."""
        try:
            return self.check(role, allowed)
        except PermissionDeniedError:
            return False
