"""ATS service - validates an uploaded resume PDF and scores it against a job."""

import logging
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from config_loader import get_max_upload_bytes, get_min_resume_text_chars
from skills import ATSScorerSkill, SkillContext
from skills.ats_scorer import FAILURE_CONFIG, FAILURE_UNPARSEABLE

from .base_service import BaseService
from .exceptions import (
    MissingInputError,
    OracleConfigError,
    OracleResponseUnparseableError,
    OracleUnavailableError,
    UnreadableUploadError,
    UploadTooLargeError,
    ValidationError,
)
from .models import AnalysisResult, ATSAnalysisResponse

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = ("application/pdf", "application/x-pdf")


def extract_text(pdf_bytes: bytes) -> str:
    """Extract the text of every page of a PDF.

    Raises:
        UnreadableUploadError: If the bytes are not a readable PDF.
    """
    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError, KeyError, TypeError) as e:
        logger.warning("Could not read uploaded PDF: %s", e)
        raise UnreadableUploadError("Uploaded file is not a readable PDF.") from e
    return "\n".join(pages)


class AtsService(BaseService):
    """Service for ATS scoring of uploaded resumes."""

    def analyze(
        self,
        pdf_bytes: bytes | None,
        job_description: str | None,
        content_type: str | None = None,
    ) -> ATSAnalysisResponse:
        """Score an uploaded resume PDF against a job description.

        Args:
            pdf_bytes: Raw bytes of the uploaded PDF.
            job_description: Job description text.
            content_type: MIME type reported for the upload, if known.

        Returns:
            ATSAnalysisResponse with the normalized analysis and the model used.

        Raises:
            MissingInputError: If no file or job description was given.
            ValidationError: If the upload is not a PDF.
            UploadTooLargeError: If the upload exceeds the configured cap.
            UnreadableUploadError: If too little text could be extracted.
            OracleConfigError: If the AI service rejects our credentials.
            OracleUnavailableError: If every candidate model failed.
            OracleResponseUnparseableError: If the answer holds no JSON object.
        """
        if not pdf_bytes:
            raise MissingInputError("Resume PDF")
        if not job_description or not job_description.strip():
            raise MissingInputError("Job description")
        if content_type and content_type.split(";")[0].strip().lower() not in PDF_CONTENT_TYPES:
            raise ValidationError("Only PDF files are allowed", field="resume")

        limit = get_max_upload_bytes(self.config)
        if len(pdf_bytes) > limit:
            raise UploadTooLargeError(len(pdf_bytes), limit)

        resume_text = extract_text(pdf_bytes).strip()
        if len(resume_text) < get_min_resume_text_chars(self.config):
            raise UnreadableUploadError()

        try:
            client = self.client
        except ValueError as e:
            logger.error("Claude client unavailable: %s", e)
            raise OracleConfigError(str(e)) from e

        skill = ATSScorerSkill(client)
        result = skill.execute(
            SkillContext(config=self.config),
            resume_text=resume_text,
            job_description=job_description.strip(),
        )

        if not result.success:
            if result.reason == FAILURE_CONFIG:
                raise OracleConfigError(result.error)
            if result.reason == FAILURE_UNPARSEABLE:
                logger.error(
                    "Unparseable ATS response from %s: %s",
                    result.model, result.details.get("raw", "")[:200],
                )
                raise OracleResponseUnparseableError(result.model)
            raise OracleUnavailableError(result.details.get("attempts"))

        usage = client.get_token_usage()
        logger.info(
            "ATS analysis by %s: score %d (%d tokens)",
            result.model, result.data.score, usage["total_tokens"],
        )

        score = result.data
        return ATSAnalysisResponse(
            analysis=AnalysisResult(
                score=score.score,
                match_level=score.match_level,
                missing_keywords=score.missing_keywords,
                strengths=score.strengths,
                improvements=score.improvements,
            ),
            model=result.model,
        )
