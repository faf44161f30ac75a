"""Auth endpoints - register, login, identity-provider exchange, current user."""

from fastapi import APIRouter, Depends

from api.auth import verify_session_token
from api.dependencies import get_auth_service
from services import AuthService
from services.models import (
    AuthResponse,
    ExchangeRequest,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    body: RegisterRequest,
    svc: AuthService = Depends(get_auth_service),
):
    """Create a local account and return a session token."""
    return svc.register(body.name, body.email, body.password)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    svc: AuthService = Depends(get_auth_service),
):
    """Sign in with email and password."""
    return svc.login(body.email, body.password)


@router.post("/exchange", response_model=AuthResponse)
def exchange(
    body: ExchangeRequest,
    svc: AuthService = Depends(get_auth_service),
):
    """Trade an identity-provider access token for a session token."""
    return svc.exchange(body.token)


@router.get("/me", response_model=UserResponse)
async def me(user: UserResponse = Depends(verify_session_token)):
    """Get the signed-in user."""
    return user
