"""Bearer credential decoding for viewer identity.

Credentials are issued by the external identity provider; this module only
decodes them into a user identifier. Discovery endpoints pick one of two
explicit paths before calling the core: a resolved viewer id, or anonymous.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.config import settings

optional_bearer_scheme: HTTPBearer = HTTPBearer(auto_error=False)


def create_access_token(data: dict[str, Any]) -> str:
    """Create a signed JWT access token from payload data."""
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(
        minutes=settings.jwt_expire_minutes
    )
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_viewer_id(token: str) -> str | None:
    """Return the subject of a valid token, or None when the token is unusable."""
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None or str(subject).strip() == "":
        return None
    return str(subject)


def get_optional_viewer_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer_scheme),
) -> str | None:
    """Resolve the viewer for public endpoints; missing or invalid credentials mean anonymous."""
    if credentials is None:
        return None
    return decode_viewer_id(credentials.credentials)


def get_required_viewer_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer_scheme),
) -> str:
    """Resolve the viewer for endpoints that need an identity."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User authentication required",
        )

    viewer_id = decode_viewer_id(credentials.credentials)
    if viewer_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return viewer_id
