"""AuthorizationGuard: the allow/deny decisions gating order data and admin actions.

Every check is a pure function of the AuthContext and its arguments. A failed
check raises ``Unauthenticated`` (no identity) or ``Forbidden`` (identity
without the right); turning those into a login redirect or an access-denied
response is the caller's business.
"""

from identity.context import AuthContext
from identity.roles import Role
from shared.exceptions import Forbidden, Unauthenticated


def require_authenticated(ctx: AuthContext) -> None:
    if not ctx.is_authenticated:
        raise Unauthenticated()


def require_role(ctx: AuthContext, role: Role) -> None:
    require_authenticated(ctx)
    if not ctx.has_role(role):
        raise Forbidden()


def require_owner_or_role(ctx: AuthContext, resource_owner_id, role: Role) -> None:
    """Allow the resource owner, or anyone holding ``role``.

    A resource without an owner (guest order) can only be reached through
    ``role``.
    """
    require_authenticated(ctx)
    if ctx.is_owner(resource_owner_id) or ctx.has_role(role):
        return
    raise Forbidden()


def require_admin(ctx: AuthContext) -> None:
    require_role(ctx, Role.ADMIN)
