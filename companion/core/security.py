from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt.exceptions import InvalidTokenError

from companion.core.config import settings
from companion.db.schemas.profile import AuthenticatedUser

# Tokens come from the external identity provider; this service only verifies them
bearer_scheme = HTTPBearer(auto_error=False)


def create_identity_token(
    uid: str,
    email: str = "",
    name: str = "",
    picture: Optional[str] = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Mint a token shaped like the identity provider's (dev and tests)."""
    claims = {
        "sub": uid,
        "email": email,
        "name": name,
        "exp": datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1)),
    }
    if picture:
        claims["picture"] = picture
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_identity_token(token: str) -> AuthenticatedUser:
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    uid = payload.get("sub")
    if not uid:
        raise InvalidTokenError("Token has no subject")
    return AuthenticatedUser(
        uid=uid,
        email=payload.get("email") or "",
        displayName=payload.get("name") or "",
        photoURL=payload.get("picture"),
    )


async def get_current_user(
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)
    ],
) -> AuthenticatedUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        return decode_identity_token(credentials.credentials)
    except InvalidTokenError:
        raise credentials_exception


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
