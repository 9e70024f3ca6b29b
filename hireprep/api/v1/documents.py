import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status
from pydantic import BaseModel, Field

from hireprep.api.errors import raise_prep_http_error
from hireprep.core.config import settings
from hireprep.core.errors import PrepError
from hireprep.core.rate_limit import rate_limit
from hireprep.features.tag_detector import (
    JobDetection,
    ResumeDetection,
    detect_job_profile,
    detect_resume_profile,
)
from hireprep.parsing.parse import parse_upload
from hireprep.schemas.prep import ParsePdfResponse

router = APIRouter()
logger = logging.getLogger(__name__)

PARSE_FAILED_MESSAGE = "Failed to parse PDF"


class DetectRequest(BaseModel):
    text: str = Field(default="", max_length=200000)


@router.post("/parse-pdf", response_model=ParsePdfResponse)
@rate_limit(settings.upload_rate_limit)
def parse_pdf(request: Request, file: UploadFile | None = File(default=None)):
    _ = request
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    content = file.file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is too large")

    try:
        parsed = parse_upload(content, file.filename or "", file.content_type)
    except PrepError as exc:
        raise_prep_http_error(exc, PARSE_FAILED_MESSAGE)

    if parsed.parsing_warnings:
        logger.info("parse_warnings doc_id=%s warnings=%s", parsed.doc_id, parsed.parsing_warnings)
    return ParsePdfResponse(text=parsed.text)


@router.post("/detect/resume", response_model=ResumeDetection | None)
def detect_resume(payload: DetectRequest):
    return detect_resume_profile(payload.text)


@router.post("/detect/job-description", response_model=JobDetection | None)
def detect_job_description(payload: DetectRequest):
    return detect_job_profile(payload.text)
