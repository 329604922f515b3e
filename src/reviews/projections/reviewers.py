"""Reviewer: member snapshot used to verify gig participants.

Populated by the Identity cross-domain event handler.
"""

from protean.fields import DateTime, Identifier, String

from reviews.domain import reviews


@reviews.projection
class Reviewer:
    user_id = Identifier(identifier=True, required=True)
    role = String(required=True, max_length=10)
    full_name = String(max_length=150)
    photo_url = String(max_length=500)
    artist_profile_id = Identifier()
    venue_profile_id = Identifier()
    updated_at = DateTime()

    @property
    def profile_id(self):
        return self.artist_profile_id or self.venue_profile_id

    def owns_profile(self, profile_id) -> bool:
        return self.profile_id is not None and str(self.profile_id) == str(profile_id)
