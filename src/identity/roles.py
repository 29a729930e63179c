"""Roles and role sets.

Roles are persisted as a JSON list of role names (``["ROLE_ADMIN"]``).
``RoleSet`` turns that stored list into a closed, immutable set: unknown
names are dropped and every authenticated identity holds ``ROLE_USER``.
"""

import json
from enum import Enum


class Role(Enum):
    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"


class RoleSet(frozenset):
    """Immutable set of :class:`Role` members."""

    def __new__(cls, roles=()):
        return super().__new__(cls, (Role(role) for role in roles))

    @classmethod
    def parse(cls, raw) -> "RoleSet":
        """Build a role set from a stored value (JSON text, list of names, or None)."""
        if raw is None or raw == "":
            names = []
        elif isinstance(raw, str):
            try:
                names = json.loads(raw)
            except json.JSONDecodeError:
                names = []
        else:
            names = list(raw)

        if not isinstance(names, list):
            names = []

        known = {role.value for role in Role}
        return cls([Role.USER, *(name for name in names if isinstance(name, str) and name in known)])

    def to_json(self) -> str:
        return json.dumps(sorted(role.value for role in self))

    def names(self) -> list[str]:
        return sorted(role.value for role in self)
