"""Typed exception hierarchy for ResumeAI services.

Services raise these exceptions instead of printing to console.
Callers (CLI, API) catch and present them appropriately.
"""


class ResumeAIError(Exception):
    """Base exception for all ResumeAI service errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class MissingInputError(ResumeAIError):
    """Raised when a required document or field is absent."""

    def __init__(self, what: str):
        super().__init__(f"{what} is required", {"field": what})
        self.what = what


class UnreadableUploadError(ResumeAIError):
    """Raised when an uploaded PDF cannot be read or holds too little text."""

    def __init__(self, reason: str | None = None):
        msg = reason or (
            "PDF contains very little text. "
            "Please upload a valid text-based PDF resume."
        )
        super().__init__(msg, {"reason": reason})


class UploadTooLargeError(ResumeAIError):
    """Raised when an upload exceeds the configured size cap."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Uploaded file is {size} bytes; the limit is {limit} bytes",
            {"size": size, "limit": limit},
        )
        self.size = size
        self.limit = limit


class OracleConfigError(ResumeAIError):
    """Raised when the AI service rejects our credentials or is not configured."""

    def __init__(self, reason: str | None = None):
        msg = "AI service misconfigured: invalid API key."
        super().__init__(msg, {"reason": reason})
        self.reason = reason


class OracleUnavailableError(ResumeAIError):
    """Raised when every candidate model failed to answer."""

    def __init__(self, attempts: list[dict] | None = None):
        super().__init__(
            "AI service unavailable or models not supported. Please try again later.",
            {"attempts": attempts or []},
        )
        self.attempts = attempts or []


class OracleResponseUnparseableError(ResumeAIError):
    """Raised when the AI answered but no JSON object could be recovered."""

    def __init__(self, model: str | None = None):
        super().__init__(
            "Failed to parse AI response. Please try again.",
            {"model": model},
        )
        self.model = model


class GenerationFailedError(ResumeAIError):
    """Raised when document generation (PDF, DOCX, preview) fails."""

    def __init__(self, operation: str, reason: str | None = None):
        msg = f"{operation} failed"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, {"operation": operation, "reason": reason})
        self.operation = operation
        self.reason = reason


class ValidationError(ResumeAIError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, {"field": field})
        self.field = field


class AuthenticationError(ResumeAIError):
    """Raised when credentials or a session token are rejected."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class UserExistsError(ResumeAIError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        super().__init__("User already exists", {"email": email})
        self.email = email
