"""Search API schemas and the shared result shape."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from headhunter_trace.users.schemas import ProfileResponse


# =============================================================================
# Enums
# =============================================================================

class ResultType(str, Enum):
    """Kind of footprint a result represents."""
    SOCIAL_MEDIA = "social_media"
    PROFESSIONAL = "professional"
    MENTION = "mention"
    USERNAME_MATCH = "username_match"


class ExposureLevel(str, Enum):
    """Coarse label for how much public information was found."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SearchStatus(str, Enum):
    """Lifecycle of a search record. COMPLETED and FAILED are terminal."""
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# =============================================================================
# Result schema
# =============================================================================

class ProfileResult(BaseModel):
    """A single discovered profile."""
    result_type: ResultType
    platform: str
    profile_url: str = Field(min_length=1)
    username: str = ""
    display_name: str = ""
    bio: str = ""
    location: str = ""
    followers_count: int = Field(default=0, ge=0)
    posts_count: int = Field(default=0, ge=0)
    confidence_score: float = Field(default=0.0, allow_inf_nan=False)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("bio", "location", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("followers_count", "posts_count", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_as_empty_mapping(cls, value: Any) -> Any:
        return {} if value is None else value


class SearchSummary(BaseModel):
    """Aggregate summary. ``total_found`` is reported upstream and not reconciled."""
    total_found: int = 0
    exposure_level: ExposureLevel
    platforms_found: list[str] = Field(default_factory=list)
    key_insights: list[str] = Field(default_factory=list)


class SearchData(BaseModel):
    """Payload produced by the analysis function."""
    results: list[ProfileResult]
    summary: SearchSummary


def confidence_percent(score: float) -> int:
    """Confidence as a whole percentage, clamped to 0..100."""
    return max(0, min(100, round(score * 100)))


# =============================================================================
# Request / Response Models
# =============================================================================

class SearchRequest(BaseModel):
    """Search form submission."""
    query: str


class SearchRecordResponse(BaseModel):
    """A persisted search and its lifecycle status."""
    id: str
    user_id: str
    query: str
    query_type: str = "name"
    status: SearchStatus
    results_count: int = 0
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class SearchResultsResponse(BaseModel):
    """A search record with its data once completed."""
    search: SearchRecordResponse
    data: SearchData | None = None


class DashboardStats(BaseModel):
    total_searches: int = 0
    completed_searches: int = 0
    profiles_found: int = 0


class DashboardResponse(BaseModel):
    """Credit profile, usage stats and recent search history."""
    profile: ProfileResponse
    stats: DashboardStats
    history: list[SearchRecordResponse]


def record_to_response(record: dict[str, Any]) -> SearchRecordResponse:
    """Convert a search document to SearchRecordResponse."""
    return SearchRecordResponse(
        id=str(record["_id"]),
        user_id=record["user_id"],
        query=record["query"],
        query_type=record.get("query_type", "name"),
        status=SearchStatus(record["status"]),
        results_count=record.get("results_count", 0),
        error_message=record.get("error_message"),
        created_at=record["created_at"],
        updated_at=record.get("updated_at"),
    )
