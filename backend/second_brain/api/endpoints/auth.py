from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy import exc as sa_exc
import logging

from second_brain.api.deps import get_password_hasher
from second_brain.core.auth import TokenService, get_token_service
from second_brain.core.database import get_db
from second_brain.core.errors import AuthError
from second_brain.core.logging_config import log_security_event, get_client_ip
from second_brain.core.security import PasswordHasher
from second_brain.models.user import User
from second_brain.schemas.user import (
    SignupRequest,
    SigninRequest,
    TokenResponse,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

USERNAME_TAKEN = "User already exists with this username"


@router.post("/signup", response_model=MessageResponse)
def signup(
    request: Request,
    payload: SignupRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Register a new user; usernames are unique."""
    client_ip = get_client_ip(request)

    if db.query(User.id).filter(User.username == payload.username).first():
        log_security_event(
            event_type="auth.signup.failed",
            message="Signup rejected: username taken",
            level=logging.WARNING,
            username=payload.username,
            ip_address=client_ip,
            event_category="authentication",
        )
        raise AuthError(USERNAME_TAKEN, status_code=403)

    user = User(username=payload.username, password=hasher.hash(payload.password))
    db.add(user)
    try:
        db.commit()
    except sa_exc.IntegrityError:
        # Lost a race against a concurrent signup for the same name
        db.rollback()
        raise AuthError(USERNAME_TAKEN, status_code=403)

    log_security_event(
        event_type="auth.signup.success",
        message="User signed up",
        user_id=user.id,
        username=user.username,
        ip_address=client_ip,
        event_category="authentication",
    )

    return {"message": "Signed up successfully"}


@router.post("/signin", response_model=TokenResponse)
def signin(
    request: Request,
    payload: SigninRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
):
    """Exchange a username and password for a bearer token."""
    client_ip = get_client_ip(request)
    user = db.query(User).filter(User.username == payload.username).first()

    if not user:
        log_security_event(
            event_type="auth.signin.failed",
            message="Signin rejected: unknown username",
            level=logging.WARNING,
            username=payload.username,
            ip_address=client_ip,
            event_category="authentication",
        )
        raise AuthError("No User with this username exists", status_code=403)

    if not hasher.verify(payload.password, user.password):
        log_security_event(
            event_type="auth.signin.failed",
            message="Signin rejected: wrong password",
            level=logging.WARNING,
            user_id=user.id,
            username=user.username,
            ip_address=client_ip,
            event_category="authentication",
        )
        raise AuthError("Wrong password entered", status_code=403)

    token = token_service.issue(user.id)

    log_security_event(
        event_type="auth.signin.success",
        message="User signed in",
        user_id=user.id,
        username=user.username,
        ip_address=client_ip,
        event_category="authentication",
    )

    return {"token": token}
