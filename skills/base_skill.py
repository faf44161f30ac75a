"""Plumbing shared by Claude-backed skills.

A skill reports expected failures in its SkillResult instead of raising.
The calling service maps `reason` onto its own exception types.
"""

from dataclasses import dataclass, field
from typing import Any

from claude_client import ClaudeClient


@dataclass
class SkillContext:
    """Per-call context; skills keep no state between calls."""

    config: dict


@dataclass
class SkillResult:
    """Outcome of one skill call."""

    success: bool
    data: Any = None
    error: str | None = None

    reason: str | None = None
    """Failure kind, one of the skill's FAILURE_* constants."""

    model: str | None = None
    """Model that answered, or the one that rejected our credentials."""

    details: dict = field(default_factory=dict)
    """Diagnostics for logging (failed attempts, a raw answer excerpt)."""

    @classmethod
    def ok(cls, data: Any, model: str | None = None) -> "SkillResult":
        return cls(success=True, data=data, model=model)

    @classmethod
    def fail(
        cls,
        error: str,
        reason: str,
        model: str | None = None,
        **details,
    ) -> "SkillResult":
        return cls(success=False, error=error, reason=reason, model=model, details=details)


class BaseSkill:
    """A stateless operation backed by Claude."""

    def __init__(self, client: ClaudeClient):
        self.client = client

    def execute(self, context: SkillContext, **kwargs) -> SkillResult:
        raise NotImplementedError("Subclasses must implement execute()")
