"""Profile linking: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.member.member import Member


@identity.command(part_of="Member")
class LinkProfile:
    """Record the artist or venue profile a member owns."""

    member_id: Identifier(required=True)
    profile_id: Identifier(required=True)


@identity.command_handler(part_of=Member)
class LinkProfileHandler:
    @handle(LinkProfile)
    def link_profile(self, command):
        repo = current_domain.repository_for(Member)
        member = repo.get(command.member_id)
        member.link_profile(command.profile_id)
        repo.add(member)
