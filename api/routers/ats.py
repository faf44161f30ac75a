"""ATS endpoint - scores an uploaded resume PDF against a job description."""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from api.auth import verify_session_token
from api.dependencies import get_ats_service
from config_loader import get_max_upload_bytes
from services import AtsService
from services.models import ATSAnalysisResponse

router = APIRouter(prefix="/ats", dependencies=[Depends(verify_session_token)])


@router.post("/analyze", response_model=ATSAnalysisResponse)
async def analyze(
    resume: UploadFile | None = File(None, description="Resume PDF"),
    job_description: str | None = Form(None, alias="jobDescription"),
    svc: AtsService = Depends(get_ats_service),
):
    """Extract the resume's text and score it against the job description."""
    pdf_bytes = content_type = None
    if resume is not None:
        # One byte past the cap is enough for the service to reject the upload
        pdf_bytes = await resume.read(get_max_upload_bytes(svc.config) + 1)
        content_type = resume.content_type
    return await run_in_threadpool(svc.analyze, pdf_bytes, job_description, content_type)
