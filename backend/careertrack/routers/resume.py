"""
Resume Router - upload a resume, parse it with the model and store the result
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from ..config import Settings, get_settings
from ..database import get_db, describe_db_error
from ..services.auth import AuthenticatedUser, get_current_user
from ..services.errors import (
    ResumeProcessingError, UnsupportedFileTypeError, DocumentExtractionError
)
from ..services.text_extractor import extract_text
from ..services.resume_parser import (
    GeminiResumeExtractor, get_resume_extractor, parse_resume_text
)
from ..services.resume_writer import save_parsed_resume
from ..schemas.resume import ResumeUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resume", tags=["Resume"])


@router.post("", response_model=ResumeUploadResponse)
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    extractor: GeminiResumeExtractor = Depends(get_resume_extractor)
):
    """
    Parse an uploaded resume (PDF, DOCX or TXT) and save what it contains.

    Flow:
    1. Extract plain text from the file
    2. Ask the model for structured JSON, recover and validate it
    3. Save experiences, upsert skills, link them - all in one transaction
    """
    if resume is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded"
        )

    content = await resume.read()
    if len(content) > settings.max_upload_mb * 1024 * 1024:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File size must be less than {settings.max_upload_mb}MB"
        )

    # ===== STEP 1: EXTRACT TEXT =====
    try:
        text = extract_text(content, resume.content_type)
    except (UnsupportedFileTypeError, DocumentExtractionError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    # ===== STEP 2: PARSE WITH MODEL =====
    try:
        parsed = await parse_resume_text(text, extractor)
    except ResumeProcessingError as e:
        logger.error(f"Resume parse error for user {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    # ===== STEP 3: SAVE =====
    try:
        saved = await save_parsed_resume(db, current_user.id, parsed)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to save parsed resume for user {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=describe_db_error(e)
        )

    return ResumeUploadResponse(
        message="Resume parsed and experiences saved",
        skills=parsed.skills,
        education=parsed.education,
        experiences=parsed.experiences,
        saved=saved,
    )
