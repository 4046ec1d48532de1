"""Resume models for HireChat."""

from typing import List, Optional
from dataclasses import dataclass, field
from pydantic import BaseModel
from datetime import datetime


@dataclass
class IngestionResult:
    """Outcome of a successful resume ingestion."""
    candidate_id: str
    resume_path: str
    vector_point_id: str
    text_length: int
    warnings: List[str] = field(default_factory=list)


@dataclass
class DeletionResult:
    """Outcome of a resume deletion. `warnings` lists cleanup steps that failed."""
    candidate_id: str
    warnings: List[str] = field(default_factory=list)


class ResumeUploadResponse(BaseModel):
    """Response model for resume upload."""
    message: str
    candidate_id: str
    vector_point_id: str
    resume_url: str
    resume_url_expires_at: datetime
    text_length: int


class ResumeDeleteResponse(BaseModel):
    """Response model for resume deletion."""
    message: str
    warnings: Optional[List[str]] = None
