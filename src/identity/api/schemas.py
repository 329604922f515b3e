"""Pydantic request/response schemas for the Identity API."""

from pydantic import BaseModel, Field


class RegisterMemberRequest(BaseModel):
    email: str = Field(max_length=254)
    full_name: str = Field(min_length=1, max_length=150)
    role: str  # "artist", "venue" or "admin"
    profile_photo_url: str | None = None


class LinkProfileRequest(BaseModel):
    profile_id: str


class MemberIdResponse(BaseModel):
    member_id: str


class MemberResponse(BaseModel):
    member_id: str
    email: str
    full_name: str
    role: str
    profile_photo_url: str | None = None
    artist_profile_id: str | None = None
    venue_profile_id: str | None = None
    subscription_tier: str | None = None
    has_active_subscription: bool = False


class StatusResponse(BaseModel):
    status: str = "ok"
