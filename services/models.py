"""Pydantic models for ResumeAI services.

Request and response models shared by CLI and API layers.
Services return these models; callers handle presentation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Enums
# =============================================================================


class MatchLevel(str, Enum):
    """ATS match bands, derived from the clamped score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


# =============================================================================
# Resume document
# =============================================================================


class _Lenient(BaseModel):
    """Base for document parts: nulls fall back to defaults, numbers become text."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Null keys fall back to defaults; null list entries are skipped
        if isinstance(data, dict):
            return {
                k: [item for item in v if item is not None] if isinstance(v, list) else v
                for k, v in data.items()
                if v is not None
            }
        return data


class PersonalInfo(_Lenient):
    """Name and contact details."""

    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""


class Skills(_Lenient):
    """Categorized skills. Always four named lists."""

    languages: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.languages or self.frameworks or self.tools or self.soft)


class ExperienceEntry(_Lenient):
    """Internship / work entry. Description holds one bullet per line."""

    title: str = ""
    company: str = ""
    duration: str = ""
    description: str = ""


class ProjectEntry(_Lenient):
    """Project entry. Description holds one bullet per line."""

    title: str = ""
    description: str = ""
    tech: str = ""
    duration: str = ""
    live_link: str = Field(default="", alias="liveLink")


class EducationEntry(_Lenient):
    """Education entry."""

    degree: str = ""
    institution: str = ""
    year: str = ""
    score: str = ""
    location: str = ""


class ResumeDocument(_Lenient):
    """Full resume snapshot as submitted by the client."""

    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    skills: Skills = Field(default_factory=Skills)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    certificates: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _migrate_legacy_skills(cls, data: Any) -> Any:
        # Older drafts stored skills as a flat list
        if isinstance(data, dict) and isinstance(data.get("skills"), list):
            data = dict(data)
            data["skills"] = {"frameworks": data["skills"]}
        return data


# =============================================================================
# Request Models
# =============================================================================


class ResumeRequest(BaseModel):
    """Request carrying a resume snapshot for PDF/DOCX/preview generation."""

    model_config = ConfigDict(populate_by_name=True)

    resume_data: ResumeDocument | None = Field(default=None, alias="resumeData")


class RegisterRequest(BaseModel):
    """Request to create a local account."""

    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    """Request to sign in with email and password."""

    email: str = ""
    password: str = ""


class ExchangeRequest(BaseModel):
    """Request to trade an identity-provider token for a session token."""

    token: str = Field(description="Access token issued by the identity provider")


# =============================================================================
# Response Models
# =============================================================================


class UserResponse(BaseModel):
    """Public view of a user record."""

    id: str
    name: str = ""
    email: str
    plan: str = "free"
    provider: str = "local"


class AuthResponse(BaseModel):
    """Session token plus the authenticated user."""

    token: str
    user: UserResponse


class AnalysisResult(BaseModel):
    """Normalized ATS analysis."""

    model_config = ConfigDict(populate_by_name=True)

    score: int = 0
    match_level: MatchLevel = Field(default=MatchLevel.POOR, alias="matchLevel")
    missing_keywords: list[str] = Field(default_factory=list, alias="missingKeywords")
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)


class ATSAnalysisResponse(BaseModel):
    """ATS analysis plus the model that produced it."""

    success: bool = True
    analysis: AnalysisResult
    model: str
