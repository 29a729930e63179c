"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter, Depends, Response

from identity.api.schemas import CurrentUserResponse, LoginRequest, RegisterRequest, StatusResponse
from identity.authentication import authenticate, login, logout, sign_up
from identity.context import AuthContext
from identity.domain import identity
from identity.guard import require_authenticated
from identity.session import Session, get_session_store
from identity.user import User
from identity.web import forget_session, get_auth_context, get_web_session, persist_session
from shared.exceptions import Unauthenticated

router = APIRouter(tags=["identity"])


def _current_user_response(user: User) -> CurrentUserResponse:
    return CurrentUserResponse(
        user_id=user.id,
        email=user.email,
        name=user.name,
        roles=user.role_set.names(),
        is_admin=user.is_admin,
    )


@router.post("/register", status_code=201, response_model=CurrentUserResponse)
def register(body: RegisterRequest):
    user = sign_up(body.name, body.email, body.password, body.password_confirm)
    return _current_user_response(user)


@router.post("/login", response_model=CurrentUserResponse)
def login_user(body: LoginRequest, response: Response, session: Session = Depends(get_web_session)):
    user = authenticate(body.email, body.password)
    if user is None:
        raise Unauthenticated("Invalid email or password")

    login(get_session_store(), session, user)
    persist_session(response, session)
    return _current_user_response(user)


@router.post("/logout", response_model=StatusResponse)
def logout_user(response: Response, session: Session = Depends(get_web_session)):
    logout(get_session_store(), session)
    forget_session(response)
    return StatusResponse()


@router.get("/me", response_model=CurrentUserResponse)
def current_user(ctx: AuthContext = Depends(get_auth_context)):
    require_authenticated(ctx)
    return _current_user_response(identity.repository_for(User).get(ctx.user_id))
