"""HS256 JWT access tokens issued at login."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import HTTPException, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

logger = logging.getLogger(__name__)


def _require_secret(secret_key: str) -> None:
    if not secret_key:
        logger.error("JWT_SECRET_KEY is not set, refusing to sign or accept tokens")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Missing token signing configuration",
        )


def create_access_token(
    subject: str,
    secret_key: str,
    algorithm: str,
    expires_minutes: int,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    _require_secret(secret_key)
    now = int(time.time())
    claims: dict[str, Any] = {
        "sub": subject,
        "iat": now,
        "exp": now + expires_minutes * 60,
    }
    if extra_claims:
        claims.update(extra_claims)
    return jwt.encode(claims, secret_key, algorithm=algorithm)


def validate_token(token: str, secret_key: str, algorithm: str) -> dict[str, Any]:
    _require_secret(secret_key)

    options = {
        "verify_signature": True,
        "verify_exp": True,
        "require_exp": True,
        "require_sub": True,
    }

    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm], options=options)
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is expired",
        ) from e
    except (JWTClaimsError, JWTError) as e:
        logger.debug("Rejected access token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        ) from e


def extract_roles_from_token(payload: dict[str, Any]) -> list[str]:
    roles = payload.get("roles", [])
    if not isinstance(roles, list):
        return []
    return [str(r) for r in roles if isinstance(r, str | int)]
