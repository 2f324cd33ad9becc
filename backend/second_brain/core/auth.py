from fastapi import Depends, Header, Request
from jose import jwt, JWTError
from typing import Optional
from datetime import datetime, timedelta, timezone
import logging
import uuid

from second_brain.core.errors import AuthError
from second_brain.core.logging_config import log_security_event, get_client_ip

logger = logging.getLogger(__name__)

# JWT settings
ALGORITHM = "HS256"
TOKEN_TYPE = "access"


class InvalidTokenError(Exception):
    """Raised when a token cannot be trusted for any reason."""


class TokenService:
    """
    Issue and verify signed, stateless tokens that carry a user ID.

    Args:
        secret_key: HMAC signing secret
        expire_minutes: Lifetime of issued tokens; None means they never expire
    """

    def __init__(self, secret_key: str, expire_minutes: Optional[int] = None):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self._expire_minutes = expire_minutes

    def issue(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": now,
            "jti": str(uuid.uuid4()),
            "type": TOKEN_TYPE,
        }
        if self._expire_minutes is not None:
            claims["exp"] = now + timedelta(minutes=self._expire_minutes)

        return jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: Optional[str]) -> str:
        """
        Return the user ID asserted by ``token``.

        Raises:
            InvalidTokenError: If the token is absent, badly signed, expired,
                malformed, or of the wrong type
        """
        if not token:
            raise InvalidTokenError("Token is missing")

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        if payload.get("type") != TOKEN_TYPE:
            raise InvalidTokenError(f"Unexpected token type {payload.get('type')!r}")

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Token has no subject")

        return user_id


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    # The bare token is the contract; a Bearer scheme is accepted too
    if not authorization:
        return None
    token = authorization.strip()
    if token[:7].lower() == "bearer ":
        token = token[7:].strip()
    return token or None


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None),
    token_service: TokenService = Depends(get_token_service),
) -> str:
    """Resolve the caller's user ID from the Authorization header or reject."""
    token = _extract_token(authorization)

    try:
        user_id = token_service.verify(token)
    except Exception as e:
        # Anything thrown while verifying is a rejection, never a crash
        logger.warning(f"Token rejected: {e.__class__.__name__}")
        log_security_event(
            event_type="auth.token.rejected",
            message="Request with missing or invalid token rejected",
            level=logging.WARNING,
            ip_address=get_client_ip(request),
            request_method=request.method,
            request_path=request.url.path,
            event_category="authentication",
            reason=e.__class__.__name__,
        )
        raise AuthError()

    request.state.user_id = user_id
    return user_id
