"""Read-side queries over reviews: profile listings, stats, and a member's own reviews."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from reviews.review.review import Review, ReviewStatus
from reviews.review.stats import ReviewStats, summarize
from shared.querying import scan

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50
SCAN_BATCH_SIZE = 100


class SortBy:
    NEWEST = "newest"
    OLDEST = "oldest"
    HIGHEST = "highest"
    LOWEST = "lowest"
    HELPFUL = "helpful"

    ALL = (NEWEST, OLDEST, HIGHEST, LOWEST, HELPFUL)


@dataclass
class ReviewPage:
    items: list = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def has_more(self) -> bool:
        return self.page * self.limit < self.total


def published_reviews_for(target_id, target_type) -> list[Review]:
    repo = current_domain.repository_for(Review)
    return list(
        scan(
            repo._dao,
            "id",
            SCAN_BATCH_SIZE,
            target_id=str(target_id),
            target_type=target_type,
            status=ReviewStatus.PUBLISHED.value,
        )
    )


def _newest_first(reviews):
    return sorted(reviews, key=lambda r: r.created_at, reverse=True)


def sort_reviews(reviews, sort_by: str) -> list[Review]:
    """Order reviews for display. Unknown sort keys fall back to newest first.

    Rating and helpfulness orders break ties newest first.
    """
    if sort_by == SortBy.OLDEST:
        return sorted(reviews, key=lambda r: r.created_at)
    if sort_by == SortBy.HIGHEST:
        return sorted(_newest_first(reviews), key=lambda r: r.overall_rating, reverse=True)
    if sort_by == SortBy.LOWEST:
        return sorted(_newest_first(reviews), key=lambda r: r.overall_rating)
    if sort_by == SortBy.HELPFUL:
        return sorted(_newest_first(reviews), key=lambda r: r.helpful_count or 0, reverse=True)
    return _newest_first(reviews)


def _paginate(reviews, page, limit) -> ReviewPage:
    page = max(page or DEFAULT_PAGE, 1)
    limit = min(max(limit or DEFAULT_LIMIT, 1), MAX_LIMIT)
    start = (page - 1) * limit
    return ReviewPage(items=reviews[start : start + limit], total=len(reviews), page=page, limit=limit)


def list_reviews(
    target_id,
    target_type,
    page=DEFAULT_PAGE,
    limit=DEFAULT_LIMIT,
    sort_by=SortBy.NEWEST,
    rating=None,
) -> ReviewPage:
    """Published reviews of one artist or venue, one page at a time.

    ``rating`` keeps only reviews with exactly that overall rating.
    """
    reviews = published_reviews_for(target_id, target_type)
    if rating is not None:
        reviews = [r for r in reviews if r.overall_rating == rating]
    return _paginate(sort_reviews(reviews, sort_by), page, limit)


def get_review_stats(target_id, target_type) -> ReviewStats:
    return summarize(published_reviews_for(target_id, target_type))


def list_reviews_by_reviewer(reviewer_id, page=DEFAULT_PAGE, limit=DEFAULT_LIMIT) -> ReviewPage:
    """Every review a member has written, whatever its status, newest first."""
    repo = current_domain.repository_for(Review)
    reviews = list(scan(repo._dao, "id", SCAN_BATCH_SIZE, reviewer_id=str(reviewer_id)))
    return _paginate(_newest_first(reviews), page, limit)
