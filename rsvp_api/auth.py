"""Host authentication.

Hosts sign in with an external identity provider and call the API with a bearer
JWT. We only verify the signature and expiry and use the ``sub`` claim as the
host id stored in ``created_by``.

Guests never authenticate: knowing a guest id is enough to answer for that guest.
"""

import logging
from datetime import UTC, datetime, timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from rsvp_api.config.settings import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(host_id: str, expires_minutes: int | None = None) -> str:
    """Issue a host token. Used by the CLI for local development."""
    now = datetime.now(UTC)
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    expires = now + timedelta(minutes=expires_minutes)
    payload = {
        "sub": host_id,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
        "type": "access",
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def verify_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.info(f"Rejected host token: {e}")
        return None


async def get_current_host_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Dependency resolving the authenticated host. Override in tests."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_access_token(credentials.credentials)
    host_id = payload.get("sub") if payload else None
    if not host_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return host_id
