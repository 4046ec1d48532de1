"""Resume upload and deletion API endpoints."""

import logging

from fastapi import APIRouter, Depends, File, UploadFile, status

from hirechat.api.errors import http_error
from hirechat.dependencies import ServiceContainer, get_ingestion_pipeline, get_services
from hirechat.exceptions import HireChatError
from hirechat.middleware.auth import require_candidate
from hirechat.models.resume import ResumeDeleteResponse, ResumeUploadResponse
from hirechat.models.user import Profile
from hirechat.services.resume_ingestion import ResumeIngestionPipeline
from hirechat.utils.validation import validate_resume_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["resume"])


@router.post("/resume", response_model=ResumeUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_resume(
    file: UploadFile = File(...),
    current_user: Profile = Depends(require_candidate),
    pipeline: ResumeIngestionPipeline = Depends(get_ingestion_pipeline),
    services: ServiceContainer = Depends(get_services)
):
    """
    Upload a PDF resume, replacing any previous one.

    Args:
        file: The resume file (PDF only)
        current_user: The authenticated candidate

    Returns:
        Linked resume details with a freshly signed download URL

    Raises:
        HTTPException: With a specific message for size, type, content and upstream failures
    """
    file_content = await file.read()

    try:
        validate_resume_upload(
            file.filename,
            file.content_type,
            len(file_content),
            services.settings.max_file_size_mb,
            services.settings.allowed_file_types,
        )
        result = await pipeline.ingest(
            current_user.id,
            current_user.role,
            file_content,
            file.filename,
            file.content_type or "application/pdf",
        )
    except HireChatError as e:
        logger.warning(f"Resume upload failed for candidate {current_user.id}: {e.message}")
        raise http_error(e)

    signed = services.storage.signed_url(result.resume_path, services.settings.signed_url_ttl_seconds)
    return ResumeUploadResponse(
        message="Resume uploaded successfully",
        candidate_id=result.candidate_id,
        vector_point_id=result.vector_point_id,
        resume_url=signed.url,
        resume_url_expires_at=signed.expires_at,
        text_length=result.text_length,
    )


@router.delete("/resume", response_model=ResumeDeleteResponse)
async def delete_resume(
    current_user: Profile = Depends(require_candidate),
    pipeline: ResumeIngestionPipeline = Depends(get_ingestion_pipeline)
):
    """
    Delete the current candidate's resume.

    Cleanup problems with the index or file storage are reported as
    warnings; the profile no longer references a resume either way.
    """
    try:
        result = await pipeline.delete(current_user.id)
    except HireChatError as e:
        raise http_error(e)

    return ResumeDeleteResponse(
        message="Resume deleted successfully",
        warnings=result.warnings or None,
    )
