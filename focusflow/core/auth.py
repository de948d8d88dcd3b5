# focusflow/core/auth.py
"""
Who is calling, and are they the owner of the watched tracker.

Production callers send a Supabase-issued HS256 bearer token. With
ALLOW_DEV_HEADER on, an ``X-User-Id`` header is trusted instead.
"""

from typing import Annotated, Any, Dict, Optional

import jwt
from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from focusflow.core import config

# Bearer so Swagger "Authorize" works
_bearer = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(token: str) -> Dict[str, Any]:
    """Claims of a valid HS256 token; 401 for anything else."""
    try:
        alg = jwt.get_unverified_header(token).get("alg")
        # issuer differs between hosted and local Supabase, take the token's own
        issuer = jwt.decode(token, options={"verify_signature": False}).get("iss")
    except jwt.PyJWTError as e:
        raise _unauthorized(f"[auth] unreadable token: {e}")

    if alg != "HS256":
        raise _unauthorized(f"[auth] token alg={alg}, expected HS256")
    if not config.SUPABASE_JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="[auth] SUPABASE_JWT_SECRET not configured",
        )

    try:
        return jwt.decode(
            token,
            config.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=config.SUPABASE_AUD,
            issuer=issuer or f"{config.SUPABASE_URL}/auth/v1",
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as e:
        raise _unauthorized(f"[auth] invalid token: {e}")


async def get_user_id(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Security(_bearer)],
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> str:
    if config.ALLOW_DEV_HEADER and x_user_id:
        return x_user_id

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Missing or invalid Authorization header")
    user_id = verify_token(credentials.credentials).get("sub")
    if not user_id:
        raise _unauthorized("Token payload missing 'sub'")
    return user_id


async def require_owner(user_id: Annotated[str, Depends(get_user_id)]) -> str:
    """The engine watches one tracker; only its owner may act on it."""
    if config.REMINDER_USER_ID and user_id != config.REMINDER_USER_ID:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not the owner of this tracker")
    return user_id
