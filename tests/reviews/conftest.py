import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture
from reviews.projections.reviewable_gigs import GigStatus, ReviewableGig
from reviews.projections.reviewers import Reviewer
from reviews.review.submission import SubmitReview


@pytest.fixture(scope="session")
def reviews_bed():
    from reviews.domain import reviews

    bed = DomainFixture(reviews)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(reviews_bed):
    with reviews_bed.domain_context():
        yield


@dataclass
class GigParty:
    """Everyone involved in one completed gig, plus an admin and a bystander."""

    gig_id: str
    venue_user: str
    venue_profile: str
    artist_user: str
    artist_profile: str
    admin_user: str
    outsider_user: str


def _add_reviewer(user_id, role, full_name="Test Member", artist_profile_id=None, venue_profile_id=None):
    reviewer = Reviewer(
        user_id=user_id,
        role=role,
        full_name=full_name,
        artist_profile_id=artist_profile_id,
        venue_profile_id=venue_profile_id,
        updated_at=datetime.now(UTC),
    )
    current_domain.repository_for(Reviewer).add(reviewer)
    return reviewer


def _add_gig(gig_id, venue_id, artist_ids, status=GigStatus.COMPLETED.value, title="Friday Night Jazz"):
    gig = ReviewableGig(
        gig_id=gig_id,
        venue_id=venue_id,
        title=title,
        gig_date=datetime.now(UTC) - timedelta(days=1),
        status=status,
        booked_artist_ids=json.dumps(artist_ids),
        updated_at=datetime.now(UTC),
    )
    current_domain.repository_for(ReviewableGig).add(gig)
    return gig


@pytest.fixture
def add_reviewer():
    return _add_reviewer


@pytest.fixture
def add_gig():
    return _add_gig


@pytest.fixture
def gig_party():
    """A completed gig between a venue and one booked artist, with unique ids."""
    suffix = uuid4().hex[:8]
    party = GigParty(
        gig_id=f"gig-{suffix}",
        venue_user=f"venue-user-{suffix}",
        venue_profile=f"venue-{suffix}",
        artist_user=f"artist-user-{suffix}",
        artist_profile=f"artist-{suffix}",
        admin_user=f"admin-{suffix}",
        outsider_user=f"outsider-{suffix}",
    )
    _add_reviewer(party.venue_user, "venue", "The Blue Room", venue_profile_id=party.venue_profile)
    _add_reviewer(party.artist_user, "artist", "Ella Brass", artist_profile_id=party.artist_profile)
    _add_reviewer(party.admin_user, "admin", "Moderator")
    _add_reviewer(party.outsider_user, "artist", "Someone Else", artist_profile_id=f"artist-other-{suffix}")
    _add_gig(party.gig_id, party.venue_profile, [party.artist_profile])
    return party


@pytest.fixture
def submit_review():
    """Submit a review through the command handler and return its id."""

    def _submit(gig_id, reviewer_id, overall_rating=5, content="Fantastic night, would book again.", **extra):
        command = SubmitReview(
            gig_id=gig_id,
            reviewer_id=reviewer_id,
            overall_rating=overall_rating,
            content=content,
            **extra,
        )
        return current_domain.process(command, asynchronous=False)

    return _submit
