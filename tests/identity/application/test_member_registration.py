"""Application tests for member registration and profile linking."""

import pytest
from identity.member.member import Member
from identity.member.profiles import LinkProfile
from identity.member.registration import RegisterMember
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.errors import ConflictError


def _register(**overrides):
    defaults = {
        "email": "sam@example.com",
        "full_name": "Sam Strings",
        "role": "artist",
    }
    defaults.update(overrides)
    return current_domain.process(RegisterMember(**defaults), asynchronous=False)


class TestRegisterMember:
    def test_register_persists_member(self):
        member_id = _register()

        member = current_domain.repository_for(Member).get(member_id)
        assert member.email == "sam@example.com"
        assert member.full_name == "Sam Strings"
        assert member.role == "artist"
        assert member.subscription_tier == "free"

    def test_duplicate_email_conflicts(self):
        _register(email="dup@example.com")
        with pytest.raises(ConflictError) as exc:
            _register(email="dup@example.com", full_name="Someone Else")
        assert "email" in exc.value.messages

    def test_invalid_role_rejected(self):
        with pytest.raises(ValidationError):
            _register(email="odd@example.com", role="roadie")


class TestLinkProfile:
    def test_link_profile_persists(self):
        member_id = _register(email="venue@example.com", role="venue")

        current_domain.process(LinkProfile(member_id=member_id, profile_id="venue-42"), asynchronous=False)

        member = current_domain.repository_for(Member).get(member_id)
        assert str(member.venue_profile_id) == "venue-42"

    def test_link_profile_for_unknown_member(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(LinkProfile(member_id="missing", profile_id="venue-42"), asynchronous=False)
