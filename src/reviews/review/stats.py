"""Review stats aggregation: reduces a set of reviews to profile-level numbers.

Pure functions over already-loaded reviews; callers decide which reviews
count (normally the published reviews of one artist or venue).
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

TOP_TAG_LIMIT = 10
DEFAULT_RELIABILITY_SCORE = 100

# Category name -> rating field on Review
CATEGORY_FIELDS = {
    "performance": "performance_rating",
    "professionalism": "professionalism_rating",
    "reliability": "reliability_rating",
    "venue_quality": "venue_quality_rating",
    "payment": "payment_rating",
}


def _empty_distribution() -> dict[int, int]:
    return {rating: 0 for rating in range(1, 6)}


def round_half_up(value: float, places: int = 1) -> float:
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class TagCount:
    tag: str
    count: int


@dataclass
class ReviewStats:
    average_rating: float = 0.0
    total_reviews: int = 0
    rating_distribution: dict[int, int] = field(default_factory=_empty_distribution)
    category_averages: dict[str, float] = field(default_factory=dict)
    top_tags: list[TagCount] = field(default_factory=list)


def summarize(reviews: Iterable) -> ReviewStats:
    """Aggregate ``reviews`` into a ReviewStats.

    - average of ``overall_rating``, rounded to one decimal (0 with no reviews)
    - count per star value 1..5
    - per-category means, unrounded, over only the reviews that carry the category;
      categories nobody rated are absent
    - the ten most frequent tags, ties in first-seen order
    """
    reviews = list(reviews)
    if not reviews:
        return ReviewStats()

    distribution = _empty_distribution()
    for review in reviews:
        distribution[review.overall_rating] += 1

    category_averages = {}
    for category, field_name in CATEGORY_FIELDS.items():
        values = [getattr(r, field_name) for r in reviews if getattr(r, field_name) is not None]
        if values:
            category_averages[category] = sum(values) / len(values)

    tag_counts = Counter(tag for review in reviews for tag in review.tag_list)

    return ReviewStats(
        average_rating=round_half_up(sum(r.overall_rating for r in reviews) / len(reviews)),
        total_reviews=len(reviews),
        rating_distribution=distribution,
        category_averages=category_averages,
        top_tags=[TagCount(tag=tag, count=count) for tag, count in tag_counts.most_common(TOP_TAG_LIMIT)],
    )


def reliability_score_for(reviews: Iterable) -> int:
    """Artist reliability on a 0-100 scale: average reliability rating x 20.

    Artists without any reliability ratings keep the default score of 100.
    """
    values = [r.reliability_rating for r in reviews if r.reliability_rating is not None]
    if not values:
        return DEFAULT_RELIABILITY_SCORE
    return int(round_half_up(sum(values) / len(values) * 20, places=0))
