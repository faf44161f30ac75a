"""Bearer token authentication.

Clients sign in through /api/auth and pass the issued session token via the
Authorization header.
"""

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from services import AuthService, AuthenticationError
from services.models import UserResponse

from .dependencies import get_auth_service

bearer_scheme = HTTPBearer(auto_error=False)


async def verify_session_token(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    svc: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """FastAPI dependency that resolves the bearer token to the current user."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Missing bearer token")

    try:
        return svc.verify_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
