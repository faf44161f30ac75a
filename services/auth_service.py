"""Auth service - local accounts, identity-provider exchange and session tokens."""

import logging
from datetime import datetime, timedelta, timezone

import httpx
import jwt
from passlib.hash import pbkdf2_sha256

from config_loader import get_identity_provider, get_jwt_secret, get_token_expiry_days

from .base_service import BaseService
from .exceptions import AuthenticationError, UserExistsError, ValidationError
from .models import AuthResponse, UserResponse

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
USERINFO_TIMEOUT = 10.0


def to_user_response(user: dict) -> UserResponse:
    """Public view of a stored user record (never includes the hash)."""
    return UserResponse(
        id=user["id"],
        name=user.get("name") or "",
        email=user["email"],
        plan=user.get("plan") or "free",
        provider=user.get("provider") or "local",
    )


class AuthService(BaseService):
    """Service for sign-up, sign-in and session token handling."""

    def __init__(self, http_client: httpx.Client | None = None, **kwargs):
        """Initialize the service.

        Args:
            http_client: Client used to call the identity provider. If None,
                a short-lived client is opened per exchange.
            **kwargs: Passed to BaseService.
        """
        super().__init__(**kwargs)
        self.http_client = http_client

    # =========================================================================
    # Session tokens
    # =========================================================================

    def issue_token(self, user_id: str) -> str:
        expires = datetime.now(timezone.utc) + timedelta(days=get_token_expiry_days(self.config))
        payload = {"sub": user_id, "exp": expires}
        return jwt.encode(payload, get_jwt_secret(), algorithm=JWT_ALGORITHM)

    def verify_token(self, token: str | None) -> UserResponse:
        """Resolve a session token to its user.

        Raises:
            AuthenticationError: If the token is missing, invalid, expired,
                or names a user that no longer exists.
        """
        if not token:
            raise AuthenticationError("Not authenticated")

        try:
            payload = jwt.decode(token, get_jwt_secret(), algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Session expired") from e
        except jwt.InvalidTokenError as e:
            raise AuthenticationError("Invalid or expired token") from e

        user = self.user_store.get_user(payload.get("sub"))
        if not user:
            raise AuthenticationError("Invalid or expired token")
        return to_user_response(user)

    def _session(self, user: dict) -> AuthResponse:
        return AuthResponse(token=self.issue_token(user["id"]), user=to_user_response(user))

    # =========================================================================
    # Local accounts
    # =========================================================================

    def register(self, name: str, email: str, password: str) -> AuthResponse:
        """Create a local account and sign it in.

        Raises:
            ValidationError: If any field is empty.
            UserExistsError: If the email is already registered.
        """
        name, email = (name or "").strip(), (email or "").strip()
        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")

        if self.user_store.find_by_email(email):
            raise UserExistsError(email)

        user = self.user_store.create_user(
            name=name,
            email=email,
            password_hash=pbkdf2_sha256.hash(password),
        )
        logger.info("Registered user %s", user["id"])
        return self._session(user)

    def login(self, email: str, password: str) -> AuthResponse:
        """Sign in with email and password.

        Raises:
            AuthenticationError: On unknown email, wrong password, or an
                account that only signs in through the identity provider.
        """
        user = self.user_store.find_by_email(email)
        if not user or not user.get("password_hash") or not password:
            raise AuthenticationError()
        if not pbkdf2_sha256.verify(password, user["password_hash"]):
            raise AuthenticationError()
        return self._session(user)

    # =========================================================================
    # Identity provider
    # =========================================================================

    def exchange(self, provider_token: str) -> AuthResponse:
        """Trade an identity-provider access token for a session token.

        The provider's userinfo endpoint is the source of truth for the email;
        the matching user is created on first sign-in.

        Raises:
            ValidationError: If no token is given.
            AuthenticationError: If the provider rejects the token or returns
                no email.
        """
        if not provider_token:
            raise ValidationError("Token is required", field="token")

        provider = get_identity_provider(self.config)
        profile = self._fetch_userinfo(provider["userinfo_url"], provider_token)

        email = (profile.get("email") or "").strip()
        if not email:
            raise AuthenticationError("Identity provider returned no email")

        user = self.user_store.find_by_email(email)
        if user is None:
            user = self.user_store.create_user(
                name=profile.get("name") or email.split("@")[0],
                email=email,
                provider=provider["name"],
            )
            logger.info("Created user %s from %s sign-in", user["id"], provider["name"])
        return self._session(user)

    def _fetch_userinfo(self, url: str, provider_token: str) -> dict:
        headers = {"Authorization": f"Bearer {provider_token}"}
        try:
            if self.http_client is not None:
                response = self.http_client.get(url, headers=headers, timeout=USERINFO_TIMEOUT)
            else:
                with httpx.Client(timeout=USERINFO_TIMEOUT) as client:
                    response = client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Identity provider request failed: %s", e)
            raise AuthenticationError("Identity provider unavailable") from e

        if response.status_code != 200:
            logger.warning("Identity provider rejected token: HTTP %d", response.status_code)
            raise AuthenticationError("Invalid identity provider token")

        try:
            return response.json()
        except ValueError as e:
            raise AuthenticationError("Invalid identity provider response") from e
