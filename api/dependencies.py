"""FastAPI dependency injection providers.

Singleton instances shared across all requests.
"""

from functools import lru_cache

from config_loader import load_config
from services import AtsService, AuthService, ResumeService
from user_store import UserStore


@lru_cache()
def get_config() -> dict:
    """Cached config singleton."""
    return load_config()


# Module-level singletons
_user_store: UserStore | None = None
_resume_service: ResumeService | None = None


def get_user_store() -> UserStore:
    """UserStore singleton."""
    global _user_store
    if _user_store is None:
        _user_store = UserStore(get_config())
    return _user_store


def _service_kwargs() -> dict:
    """Common kwargs for all services."""
    return {
        "config": get_config(),
        "user_store": get_user_store(),
    }


def get_resume_service() -> ResumeService:
    """ResumeService singleton; its layout engine holds no per-request state."""
    global _resume_service
    if _resume_service is None:
        _resume_service = ResumeService(**_service_kwargs())
    return _resume_service


def get_ats_service() -> AtsService:
    return AtsService(**_service_kwargs())


def get_auth_service() -> AuthService:
    return AuthService(**_service_kwargs())

