"""AuthContext: who is making the current request.

Rebuilt for every request from session state; never stored globally.
"""

from dataclasses import dataclass, field

import structlog

from identity.roles import Role, RoleSet

logger = structlog.get_logger(__name__)

SESSION_USER_KEY = "user_id"
SESSION_ROLES_KEY = "user_roles"


@dataclass(frozen=True)
class AuthContext:
    user_id: str | None = None
    roles: RoleSet = field(default_factory=RoleSet)

    @classmethod
    def anonymous(cls) -> "AuthContext":
        return cls()

    @classmethod
    def for_user(cls, user_id, roles=()) -> "AuthContext":
        return cls(user_id=str(user_id), roles=RoleSet.parse(list(_role_names(roles))))

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def is_owner(self, owner_id) -> bool:
        return self.is_authenticated and owner_id is not None and str(owner_id) == self.user_id

    def has_role(self, role: Role) -> bool:
        return self.is_authenticated and role in self.roles


def _role_names(roles):
    for role in roles:
        yield role.value if isinstance(role, Role) else role


def resolve_auth_context(session, users=None) -> AuthContext:
    """Build the AuthContext for a request.

    With a ``users`` repository the user row is re-read so that deactivation
    and role changes apply from the very next request; a missing or inactive
    user yields an anonymous context.
    """
    user_id = session.get(SESSION_USER_KEY)
    if user_id is None:
        return AuthContext.anonymous()

    if users is None:
        return AuthContext.for_user(user_id, session.get(SESSION_ROLES_KEY) or [])

    user = users.find(user_id)
    if user is None or not user.is_active:
        logger.info("Session refers to an unavailable user", user_id=user_id)
        return AuthContext.anonymous()

    return AuthContext.for_user(user.id, user.role_set)
