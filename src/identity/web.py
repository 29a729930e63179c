"""FastAPI dependencies that load the visitor's session and AuthContext."""

from collections.abc import Iterator

from fastapi import Depends, Request, Response

from identity.context import AuthContext, resolve_auth_context
from identity.domain import identity
from identity.session import Session, get_session_store
from identity.user import User
from shared.config import get_settings


def get_web_session(request: Request) -> Iterator[Session]:
    """Open the session named by the request's cookie, or a fresh one.

    The session is released when the request is done with it, whether or not
    it was saved.
    """
    store = get_session_store()
    session = store.open(request.cookies.get(get_settings().session_cookie))
    try:
        yield session
    finally:
        store.release(session)


def get_auth_context(session: Session = Depends(get_web_session)) -> AuthContext:
    with identity.domain_context():
        return resolve_auth_context(session, identity.repository_for(User))


def persist_session(response: Response, session: Session) -> None:
    """Write the session back and point the cookie at it."""
    get_session_store().save(session)
    response.set_cookie(get_settings().session_cookie, session.session_id, httponly=True, samesite="lax")


def forget_session(response: Response) -> None:
    response.delete_cookie(get_settings().session_cookie)
