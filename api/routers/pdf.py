"""PDF endpoint - renders a resume snapshot as a downloadable PDF."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.auth import verify_session_token
from api.dependencies import get_resume_service
from services import ResumeService
from services.models import ResumeRequest
from services.resume_service import content_disposition

router = APIRouter(prefix="/pdf", dependencies=[Depends(verify_session_token)])


@router.post("/generate", response_class=Response)
def generate_pdf(
    body: ResumeRequest,
    svc: ResumeService = Depends(get_resume_service),
):
    """Lay out and render the resume; responds with the PDF as an attachment."""
    pdf_bytes, filename = svc.generate_pdf(body.resume_data)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )
