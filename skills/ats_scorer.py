"""ATS Scorer Skill - estimates how well a resume matches a job description."""

import math
from dataclasses import dataclass, field
from typing import Any

from claude_client import AllModelsFailedError, ClaudeClient, ModelAuthError
from config_loader import get_ats_max_tokens, get_model_candidates

from .base_skill import BaseSkill, SkillContext, SkillResult

FAILURE_CONFIG = "config"
FAILURE_UNAVAILABLE = "unavailable"
FAILURE_UNPARSEABLE = "unparseable"

MATCH_LEVELS = ((80, "Excellent"), (60, "Good"), (40, "Fair"))
LOWEST_MATCH_LEVEL = "Poor"

ATS_SYSTEM_PROMPT = """You are an expert ATS (Applicant Tracking System) analyzer.
Respond ONLY in JSON (no markdown, no commentary)."""

ATS_PROMPT_TEMPLATE = """Job Description:
{job_description}

Resume:
{resume_text}

Score how well the resume matches the job description, the way an ATS would.

Scoring bands:
- 80-100: Excellent - meets nearly all required skills and keywords
- 60-79: Good - meets most requirements, a few gaps
- 40-59: Fair - partial match, notable missing skills or keywords
- 0-39: Poor - little overlap with the role

Return exactly a JSON object with:
{{
  "score": <number 0-100>,
  "matchLevel": "<Excellent|Good|Fair|Poor>",
  "missingKeywords": ["..."],
  "strengths": ["..."],
  "improvements": ["..."]
}}
Be precise and do not include any extra fields or explanations."""


def build_prompt(job_description: str, resume_text: str) -> str:
    return ATS_PROMPT_TEMPLATE.format(
        job_description=job_description,
        resume_text=resume_text,
    )


def clamp_score(value: Any) -> int:
    """Clamp a score into [0, 100]; anything non-numeric counts as 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    return int(round(min(100.0, max(0.0, number))))


def match_level_for(score: int) -> str:
    for threshold, level in MATCH_LEVELS:
        if score >= threshold:
            return level
    return LOWEST_MATCH_LEVEL


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


@dataclass
class ATSScore:
    """Normalized scoring result."""

    score: int
    match_level: str
    missing_keywords: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)


def normalize_analysis(parsed: dict) -> ATSScore:
    """Build an ATSScore from raw model output.

    The match level is always derived from the clamped score; the model's own
    label is ignored.
    """
    score = clamp_score(parsed.get("score"))
    return ATSScore(
        score=score,
        match_level=match_level_for(score),
        missing_keywords=_string_list(parsed.get("missingKeywords")),
        strengths=_string_list(parsed.get("strengths")),
        improvements=_string_list(parsed.get("improvements")),
    )


class ATSScorerSkill(BaseSkill):
    """Scores a resume against a job description using Claude.

    Failures are reported in the result's `reason`:
    `config` (credentials rejected), `unavailable` (every model failed) or
    `unparseable` (no JSON object in the answer).
    """

    def execute(
        self,
        context: SkillContext,
        resume_text: str,
        job_description: str,
    ) -> SkillResult:
        """Score a resume against a job description.

        Args:
            context: Execution context with config.
            resume_text: Text extracted from the candidate's resume.
            job_description: Job description as pasted by the user.

        Returns:
            SkillResult with ATSScore data and the model that answered.
        """
        models = get_model_candidates(context.config)

        try:
            text, model = self.client.complete_with_fallback(
                system=ATS_SYSTEM_PROMPT,
                user=build_prompt(job_description, resume_text),
                models=models,
                max_tokens=get_ats_max_tokens(context.config),
            )
        except ModelAuthError as e:
            return SkillResult.fail(str(e), reason=FAILURE_CONFIG, model=e.model)
        except AllModelsFailedError as e:
            return SkillResult.fail(str(e), reason=FAILURE_UNAVAILABLE, attempts=e.attempts)

        try:
            parsed = ClaudeClient.parse_json_response(text)
        except ValueError as e:
            return SkillResult.fail(
                f"Failed to parse ATS analysis: {e}",
                reason=FAILURE_UNPARSEABLE,
                model=model,
                raw=text[:1000],
            )

        return SkillResult.ok(normalize_analysis(parsed), model=model)
