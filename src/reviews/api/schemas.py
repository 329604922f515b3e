"""Pydantic request/response schemas for the Reviews API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    gig_id: str
    overall_rating: int = Field(ge=1, le=5)
    content: str = Field(min_length=10, max_length=1000)
    performance_rating: int | None = Field(default=None, ge=1, le=5)
    professionalism_rating: int | None = Field(default=None, ge=1, le=5)
    reliability_rating: int | None = Field(default=None, ge=1, le=5)
    venue_quality_rating: int | None = Field(default=None, ge=1, le=5)
    payment_rating: int | None = Field(default=None, ge=1, le=5)
    tags: list[str] | None = None
    photos: list[str] | None = None


class RespondToReviewRequest(BaseModel):
    response: str = Field(min_length=10, max_length=500)


class ModerateReviewRequest(BaseModel):
    action: str  # "flag", "reinstate" or "remove"
    reason: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ReviewIdResponse(BaseModel):
    review_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class HelpfulResponse(BaseModel):
    marked: bool
    helpful_count: int


class ReviewResponse(BaseModel):
    review_id: str
    gig_id: str
    gig_title: str
    gig_date: datetime | None = None
    reviewer_id: str
    reviewer_name: str
    reviewer_photo_url: str | None = None
    target_id: str
    target_type: str
    overall_rating: int
    performance_rating: int | None = None
    professionalism_rating: int | None = None
    reliability_rating: int | None = None
    venue_quality_rating: int | None = None
    payment_rating: int | None = None
    content: str
    tags: list[str] = []
    photos: list[str] = []
    response: str | None = None
    responded_at: datetime | None = None
    status: str
    helpful_count: int = 0
    is_verified_booking: bool = False
    created_at: datetime | None = None


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]
    total: int
    page: int
    limit: int
    has_more: bool


class TagCountResponse(BaseModel):
    tag: str
    count: int


class ReviewStatsResponse(BaseModel):
    average_rating: float
    total_reviews: int
    rating_distribution: dict[int, int]
    category_averages: dict[str, float]
    top_tags: list[TagCountResponse]
