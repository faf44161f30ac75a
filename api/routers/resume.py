"""Resume export endpoints - DOCX download and HTML preview."""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response

from api.auth import verify_session_token
from api.dependencies import get_resume_service
from services import ResumeService
from services.models import ResumeRequest
from services.resume_service import content_disposition

router = APIRouter(prefix="/resume", dependencies=[Depends(verify_session_token)])

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@router.post("/docx", response_class=Response)
def generate_docx(
    body: ResumeRequest,
    svc: ResumeService = Depends(get_resume_service),
):
    """Render the resume as a DOCX attachment."""
    docx_bytes, filename = svc.generate_docx(body.resume_data)
    return Response(
        content=docx_bytes,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.post("/preview", response_class=HTMLResponse)
def preview(
    body: ResumeRequest,
    svc: ResumeService = Depends(get_resume_service),
):
    """Render the resume as a standalone HTML page."""
    return HTMLResponse(svc.render_preview(body.resume_data))
