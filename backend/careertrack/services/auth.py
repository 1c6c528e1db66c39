"""
Supabase Auth gate.

Bearer tokens are issued by Supabase Auth; we only ask Supabase who the token
belongs to and pass that identity on to the handlers.
"""
import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None


async def fetch_supabase_user(
    token: str,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AuthenticatedUser:
    """
    Resolve an access token to its Supabase user.

    Raises:
        HTTPException 500 if Supabase is not configured, 401 if the token is rejected
    """
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Supabase configuration missing"
        )

    try:
        async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
            response = await client.get(
                f"{settings.supabase_url.rstrip('/')}/auth/v1/user",
                headers={
                    "Authorization": f"Bearer {token}",
                    "apikey": settings.supabase_service_role_key,
                },
            )
    except httpx.HTTPError as e:
        logger.error(f"Auth error: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if response.status_code != 200:
        logger.warning(f"Token validation failed ({response.status_code}): {response.text[:200]}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    data = response.json()
    if not data.get("id"):
        logger.warning("Token validation returned no user")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return AuthenticatedUser(id=str(data["id"]), email=data.get("email"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> AuthenticatedUser:
    """FastAPI dependency: require a valid Supabase bearer token."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    return await fetch_supabase_user(credentials.credentials, settings)
