"""User accounts and the repository that reads them."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from identity.domain import identity
from identity.roles import Role, RoleSet


def utcnow() -> datetime:
    return datetime.now(UTC)


@identity.aggregate(schema_name="users")
class User:
    email: String(required=True, max_length=254, unique=True)
    name: String(required=True, max_length=255)
    password_hash: String(required=True, max_length=255, sanitize=False)
    roles: String(max_length=255, default='["ROLE_USER"]', sanitize=False)
    is_active: Boolean(default=True)
    created_at: DateTime(default=utcnow)

    @property
    def role_set(self) -> RoleSet:
        return RoleSet.parse(self.roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.role_set


@identity.repository(part_of=User)
class UserRepository:
    def find(self, user_id) -> User | None:
        return self.get_or_none(str(user_id))

    def find_by_email(self, email: str) -> User | None:
        return self.query.filter(email__iexact=email.strip().lower()).all().first
