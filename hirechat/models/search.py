"""Search models for HireChat."""

from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field
from pydantic import BaseModel, Field

from .user import Profile


@dataclass(frozen=True)
class VectorMatch:
    """One vector index hit."""
    point_id: str
    similarity: float
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CandidateMatch:
    """A candidate profile joined with its similarity score."""
    profile: Profile
    similarity: float


@dataclass(frozen=True)
class SearchOutcome:
    """Result of one search run. `vector_hits` counts raw index matches before the profile join."""
    vector_hits: int = 0
    candidates: List[CandidateMatch] = field(default_factory=list)


class SearchRequest(BaseModel):
    """Search request model."""
    query: str = Field(..., max_length=5000, description="Free-text search query")
    limit: Optional[int] = Field(default=10, ge=1, le=100, description="Maximum number of results")


class SearchResult(BaseModel):
    """Individual search result model."""
    candidate_id: str = Field(..., description="Candidate identifier")
    name: str = Field(..., description="Candidate name")
    email: str = Field(..., description="Candidate email")
    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    similarity: float = Field(..., description="Similarity score")


class SearchResponse(BaseModel):
    """Search response model."""
    results: List[SearchResult] = Field(..., description="List of search results")
    total_results: int = Field(..., description="Total number of results found")
    search_time_ms: Optional[float] = Field(default=None, description="Search execution time in milliseconds")
