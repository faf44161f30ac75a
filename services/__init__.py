"""ResumeAI services - framework-agnostic business logic layer.

Services wrap the layout engine and skills and return structured data
(Pydantic models or bytes). No Rich imports, no console output. Callers
handle presentation.
"""

from .base_service import BaseService
from .exceptions import (
    ResumeAIError,
    MissingInputError,
    UnreadableUploadError,
    UploadTooLargeError,
    OracleConfigError,
    OracleUnavailableError,
    OracleResponseUnparseableError,
    GenerationFailedError,
    ValidationError,
    AuthenticationError,
    UserExistsError,
)
from .resume_service import ResumeService
from .ats_service import AtsService
from .auth_service import AuthService

__all__ = [
    # Base
    "BaseService",
    # Services
    "ResumeService",
    "AtsService",
    "AuthService",
    # Exceptions
    "ResumeAIError",
    "MissingInputError",
    "UnreadableUploadError",
    "UploadTooLargeError",
    "OracleConfigError",
    "OracleUnavailableError",
    "OracleResponseUnparseableError",
    "GenerationFailedError",
    "ValidationError",
    "AuthenticationError",
    "UserExistsError",
]
