"""
Auth module: password hashing, JWT creation/validation and the FastAPI
dependencies that guard the resource routes.

Tokens are stateless. Identity and role travel inside the token, so a route
authorizes from the decoded claims without a storage lookup. There is no
refresh and no revocation: a token stays valid until ``exp``.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request
from jose import jwt, JWTError
from werkzeug.security import generate_password_hash, check_password_hash
from mess_feedback.config import Settings
from mess_feedback.exceptions import Forbidden, InvalidToken, MissingToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionClaims:
    """Decoded identity attached to each request."""
    user_id: int
    email: str
    role: str                     # "student" | "admin"
    issued_at: int
    expires_at: int

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str, settings: Settings) -> str:
    return generate_password_hash(password, method=settings.password_hash_method)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_token(
    user_id: int,
    email: str,
    role: str,
    settings: Settings,
    now: Optional[int] = None,
) -> str:
    """Create a signed JWT carrying the account id, email and role."""
    issued_at = int(now if now is not None else time.time())
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + settings.token_expire_seconds,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_session(token: Optional[str], settings: Settings) -> SessionClaims:
    """Decode and validate a JWT. Raises MissingToken or InvalidToken."""
    if not token:
        raise MissingToken()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return SessionClaims(
            user_id=int(payload["sub"]),
            email=payload["email"],
            role=payload["role"],
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
        )
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        raise InvalidToken()
    except (KeyError, ValueError, TypeError):
        logger.info("Rejected session token: malformed claims")
        raise InvalidToken()


def bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:].strip() or None


async def get_current_user(request: Request) -> SessionClaims:
    """FastAPI dependency. Extracts and verifies the bearer token."""
    return verify_session(bearer_token(request), request.app.state.settings)


async def require_admin(current_user: SessionClaims = Depends(get_current_user)) -> SessionClaims:
    if not current_user.is_admin:
        logger.info("Admin access denied for user %s", current_user.user_id)
        raise Forbidden()
    return current_user
