"""FastAPI routes for the Reviews & Ratings bounded context.

Each write route translates between Pydantic schemas (external contract) and
Protean commands (internal domain concepts). Read routes call the review
queries directly.

The caller's member id arrives in the ``X-User-Id`` header, set by the auth
gateway after it has verified the session.
"""

import json

from fastapi import APIRouter, Header, Query
from protean.utils.globals import current_domain

from reviews.api.schemas import (
    HelpfulResponse,
    ModerateReviewRequest,
    RespondToReviewRequest,
    ReviewIdResponse,
    ReviewListResponse,
    ReviewResponse,
    ReviewStatsResponse,
    StatusResponse,
    SubmitReviewRequest,
    TagCountResponse,
)
from reviews.review.helpful import ToggleHelpful
from reviews.review.moderation import ModerateReview
from reviews.review.queries import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    SortBy,
    get_review_stats,
    list_reviews,
    list_reviews_by_reviewer,
)
from reviews.review.response import RespondToReview
from reviews.review.review import Review, TargetType
from reviews.review.submission import SubmitReview

review_router = APIRouter(prefix="/reviews", tags=["reviews"])


def _to_response(review) -> ReviewResponse:
    return ReviewResponse(
        review_id=str(review.id),
        gig_id=str(review.gig_id),
        gig_title=review.gig_title,
        gig_date=review.gig_date,
        reviewer_id=str(review.reviewer_id),
        reviewer_name=review.reviewer_name,
        reviewer_photo_url=review.reviewer_photo_url,
        target_id=str(review.target_id),
        target_type=review.target_type,
        overall_rating=review.overall_rating,
        performance_rating=review.performance_rating,
        professionalism_rating=review.professionalism_rating,
        reliability_rating=review.reliability_rating,
        venue_quality_rating=review.venue_quality_rating,
        payment_rating=review.payment_rating,
        content=review.content,
        tags=review.tag_list,
        photos=review.photo_list,
        response=review.response,
        responded_at=review.responded_at,
        status=review.status,
        helpful_count=review.helpful_count or 0,
        is_verified_booking=bool(review.is_verified_booking),
        created_at=review.created_at,
    )


def _to_list_response(page) -> ReviewListResponse:
    return ReviewListResponse(
        reviews=[_to_response(r) for r in page.items],
        total=page.total,
        page=page.page,
        limit=page.limit,
        has_more=page.has_more,
    )


def _to_stats_response(stats) -> ReviewStatsResponse:
    return ReviewStatsResponse(
        average_rating=stats.average_rating,
        total_reviews=stats.total_reviews,
        rating_distribution=stats.rating_distribution,
        category_averages=stats.category_averages,
        top_tags=[TagCountResponse(tag=t.tag, count=t.count) for t in stats.top_tags],
    )


# ---------------------------------------------------------------------------
# Writing reviews
# ---------------------------------------------------------------------------
@review_router.post("", status_code=201, response_model=ReviewIdResponse)
async def submit_review(
    body: SubmitReviewRequest,
    user_id: str = Header(alias="X-User-Id"),
) -> ReviewIdResponse:
    """Review the other side of a completed gig."""
    command = SubmitReview(
        gig_id=body.gig_id,
        reviewer_id=user_id,
        overall_rating=body.overall_rating,
        content=body.content,
        performance_rating=body.performance_rating,
        professionalism_rating=body.professionalism_rating,
        reliability_rating=body.reliability_rating,
        venue_quality_rating=body.venue_quality_rating,
        payment_rating=body.payment_rating,
        tags=json.dumps(body.tags) if body.tags else None,
        photos=json.dumps(body.photos) if body.photos else None,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=review_id)


@review_router.post("/{review_id}/response", status_code=201, response_model=StatusResponse)
async def respond_to_review(
    review_id: str,
    body: RespondToReviewRequest,
    user_id: str = Header(alias="X-User-Id"),
) -> StatusResponse:
    """Answer a review of your own profile."""
    command = RespondToReview(review_id=review_id, responder_id=user_id, response=body.response)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.post("/{review_id}/helpful", response_model=HelpfulResponse)
async def toggle_helpful(review_id: str, user_id: str = Header(alias="X-User-Id")) -> HelpfulResponse:
    """Mark a review helpful, or take the mark back."""
    result = current_domain.process(ToggleHelpful(review_id=review_id, user_id=user_id), asynchronous=False)
    return HelpfulResponse(**result)


@review_router.put("/{review_id}/moderate", response_model=StatusResponse)
async def moderate_review(
    review_id: str,
    body: ModerateReviewRequest,
    user_id: str = Header(alias="X-User-Id"),
) -> StatusResponse:
    """Flag, reinstate or remove a review (admins only)."""
    command = ModerateReview(
        review_id=review_id,
        moderator_id=user_id,
        action=body.action,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Reading reviews
# ---------------------------------------------------------------------------
@review_router.get("/me", response_model=ReviewListResponse)
async def my_reviews(
    user_id: str = Header(alias="X-User-Id"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
) -> ReviewListResponse:
    """Reviews written by the caller, in any status."""
    return _to_list_response(list_reviews_by_reviewer(user_id, page=page, limit=limit))


@review_router.get("/artists/{artist_id}", response_model=ReviewListResponse)
async def artist_reviews(
    artist_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    sort_by: str = Query(SortBy.NEWEST),
    rating: int | None = Query(None, ge=1, le=5),
) -> ReviewListResponse:
    """Published reviews of an artist."""
    return _to_list_response(
        list_reviews(artist_id, TargetType.ARTIST.value, page=page, limit=limit, sort_by=sort_by, rating=rating)
    )


@review_router.get("/venues/{venue_id}", response_model=ReviewListResponse)
async def venue_reviews(
    venue_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    sort_by: str = Query(SortBy.NEWEST),
    rating: int | None = Query(None, ge=1, le=5),
) -> ReviewListResponse:
    """Published reviews of a venue."""
    return _to_list_response(
        list_reviews(venue_id, TargetType.VENUE.value, page=page, limit=limit, sort_by=sort_by, rating=rating)
    )


@review_router.get("/artists/{artist_id}/stats", response_model=ReviewStatsResponse)
async def artist_review_stats(artist_id: str) -> ReviewStatsResponse:
    return _to_stats_response(get_review_stats(artist_id, TargetType.ARTIST.value))


@review_router.get("/venues/{venue_id}/stats", response_model=ReviewStatsResponse)
async def venue_review_stats(venue_id: str) -> ReviewStatsResponse:
    return _to_stats_response(get_review_stats(venue_id, TargetType.VENUE.value))


@review_router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(review_id: str) -> ReviewResponse:
    return _to_response(current_domain.repository_for(Review).get(review_id))
