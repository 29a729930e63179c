"""Credential checks and session login/logout.

Only the pass/fail contract of password checking matters to the rest of the
storefront; hashing is delegated to passlib.
"""

import structlog
from passlib.context import CryptContext
from protean.exceptions import ValidationError

from identity.context import SESSION_ROLES_KEY, SESSION_USER_KEY
from identity.domain import identity
from identity.roles import Role, RoleSet
from identity.user import User
from shared.validation import is_valid_email

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised or malformed hash
        return False


def register_user(email: str, name: str, password: str, roles=(Role.USER,)) -> User:
    user = User(
        email=email.strip().lower(),
        name=name.strip(),
        password_hash=hash_password(password),
        roles=RoleSet(roles).to_json(),
        is_active=True,
    )
    identity.repository_for(User).add(user)
    return user


def sign_up(name: str, email: str, password: str, password_confirm: str) -> User:
    """Validate a registration form and create a plain ``ROLE_USER`` account."""
    name = (name or "").strip()
    email = (email or "").strip()
    errors: dict[str, list[str]] = {}

    if not name:
        errors["name"] = ["Name is required"]
    if not email:
        errors["email"] = ["Email is required"]
    elif not is_valid_email(email):
        errors["email"] = ["Please enter a valid email address"]
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors["password"] = [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]
    if password != password_confirm:
        errors["password_confirm"] = ["Passwords do not match"]

    if "email" not in errors and identity.repository_for(User).find_by_email(email) is not None:
        errors["email"] = ["This email is already registered"]

    if errors:
        raise ValidationError(errors)

    user = register_user(email, name, password)
    logger.info("User registered", user_id=user.id)
    return user


def authenticate(email: str, password: str) -> User | None:
    """Return the user when the credentials match an active account."""
    user = identity.repository_for(User).find_by_email(email or "")
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def login(store, session, user: User) -> None:
    """Bind ``user`` to the session under a fresh session id.

    Everything else in the session, such as the cart, is carried over.
    """
    store.regenerate(session)
    session[SESSION_USER_KEY] = user.id
    session[SESSION_ROLES_KEY] = user.role_set.names()
    store.save(session)
    logger.info("User logged in", user_id=user.id)


def logout(store, session) -> None:
    user_id = session.get(SESSION_USER_KEY)
    store.destroy(session)
    logger.info("User logged out", user_id=user_id)
