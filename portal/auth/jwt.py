"""
JWT Token Authentication

Tokens are issued by the account service; the portal only verifies them.
Claims: sub = opaque reference, role = reviewer | admin | applicant,
name = display name (optional).
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from recruiting.config import get_config

REVIEWER_ROLES = {"reviewer", "admin"}
APPLICANT_ROLE = "applicant"

security = HTTPBearer()


class Principal(BaseModel):
    reference: str
    role: str
    name: Optional[str] = None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create a JWT access token (used by tooling and tests)"""
    auth = get_config().auth
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=auth.access_token_expire_minutes)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, auth.secret_key, algorithm=auth.algorithm)


def verify_token(token: str) -> Principal:
    """Verify and decode a JWT token"""
    auth = get_config().auth
    try:
        payload = jwt.decode(token, auth.secret_key, algorithms=[auth.algorithm])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    reference = payload.get("sub")
    if not reference:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    return Principal(
        reference=reference,
        role=payload.get("role", ""),
        name=payload.get("name"),
    )


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Principal:
    """Get the caller from the bearer token"""
    return verify_token(credentials.credentials)


async def get_current_reviewer(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Require reviewer (or admin) role"""
    if principal.role not in REVIEWER_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Reviewer access required"
        )
    return principal


async def get_current_applicant(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Require applicant role"""
    if principal.role != APPLICANT_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Applicant access required"
        )
    return principal
