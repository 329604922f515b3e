"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from identity.api.schemas import (
    LinkProfileRequest,
    MemberIdResponse,
    MemberResponse,
    RegisterMemberRequest,
    StatusResponse,
)
from identity.member.member import Member
from identity.member.profiles import LinkProfile
from identity.member.registration import RegisterMember

router = APIRouter(prefix="/members", tags=["members"])


@router.post("", status_code=201, response_model=MemberIdResponse)
async def register_member(body: RegisterMemberRequest) -> MemberIdResponse:
    command = RegisterMember(
        email=body.email,
        full_name=body.full_name,
        role=body.role,
        profile_photo_url=body.profile_photo_url,
    )
    member_id = current_domain.process(command, asynchronous=False)
    return MemberIdResponse(member_id=member_id)


@router.put("/{member_id}/profile", response_model=StatusResponse)
async def link_profile(member_id: str, body: LinkProfileRequest) -> StatusResponse:
    command = LinkProfile(member_id=member_id, profile_id=body.profile_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(member_id: str) -> MemberResponse:
    member = current_domain.repository_for(Member).get(member_id)
    return MemberResponse(
        member_id=str(member.id),
        email=member.email,
        full_name=member.full_name,
        role=member.role,
        profile_photo_url=member.profile_photo_url,
        artist_profile_id=str(member.artist_profile_id) if member.artist_profile_id else None,
        venue_profile_id=str(member.venue_profile_id) if member.venue_profile_id else None,
        subscription_tier=member.subscription_tier,
        has_active_subscription=bool(member.has_active_subscription),
    )
