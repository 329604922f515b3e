"""EmailAddress value object for validated member email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from identity.domain import identity

_FORBIDDEN_CHARACTERS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def email_address_problem(email: str) -> str | None:
    """Return what is wrong with ``email``, or None when it is usable."""
    if any(blank in email for blank in (" ", "\t", "\n")):
        return "must not contain whitespace"

    if email.count("@") != 1:
        return "must contain exactly one @"

    local_part, domain_part = email.split("@")

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return "has an invalid local part"

    if not domain_part or domain_part.startswith(".") or domain_part.endswith(".") or "." not in domain_part:
        return "has an invalid domain"

    # Domain labels cannot start or end with a hyphen
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        return "has an invalid domain"

    if ".." in email:
        return "must not contain consecutive dots"

    if any(character in email for character in _FORBIDDEN_CHARACTERS):
        return "contains a forbidden character"

    return None


@identity.value_object
class EmailAddress:
    """A member's email address: one @, a dotted domain, no whitespace,
    consecutive dots or forbidden characters.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def address_must_be_well_formed(self):
        if self.address is None:
            return
        problem = email_address_problem(self.address)
        if problem:
            raise ValidationError({"address": [f"Invalid email address {self.address!r}: {problem}"]})
