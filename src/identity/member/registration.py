"""Member registration: command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.member.member import Member
from shared.errors import ConflictError


@identity.command(part_of="Member")
class RegisterMember:
    """Create a new artist, venue or admin account."""

    email: String(required=True, max_length=254)
    full_name: String(required=True, max_length=150)
    role: String(required=True, max_length=10)
    profile_photo_url: String(max_length=500)


@identity.command_handler(part_of=Member)
class RegisterMemberHandler:
    @handle(RegisterMember)
    def register_member(self, command):
        repo = current_domain.repository_for(Member)

        if repo._dao.query.filter(email=command.email).all().items:
            raise ConflictError({"email": ["A member with this email already exists"]})

        member = Member.register(
            email=command.email,
            full_name=command.full_name,
            role=command.role,
            profile_photo_url=command.profile_photo_url,
        )
        repo.add(member)
        return str(member.id)
