"""Agate AI — Bearer Token Authentication.

Tokens are issued by the CMS; this service only verifies them.
"""

import uuid
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from jose import jwt
from jose.exceptions import JWTError

from app.config import settings
from app.core.logging import get_logger

logger = get_logger("auth")

USER_ID_CLAIMS = ("sub", "nameid")


def verify_token(token: str) -> Dict[str, Any]:
    """Decode and verify an HS-signed JWT, returning its claims."""
    options = {
        "verify_aud": settings.jwt_audience is not None,
        "verify_iss": settings.jwt_issuer is not None,
    }
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=options,
        )
    except JWTError as exc:
        logger.warning(f"Token verification failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        ) from exc


def _user_id_from_claims(claims: Dict[str, Any]) -> Optional[uuid.UUID]:
    for claim in USER_ID_CLAIMS:
        value = claims.get(claim)
        if not value:
            continue
        try:
            return uuid.UUID(str(value))
        except ValueError:
            continue
    return None


def get_current_user_id(request: Request) -> Optional[uuid.UUID]:
    """Dependency — require a bearer token and return the caller's user id.

    The id is also stashed on request.state for the audit middleware.
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = verify_token(token.strip())
    user_id = _user_id_from_claims(claims)
    request.state.user_id = user_id
    return user_id
