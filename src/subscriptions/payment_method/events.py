"""Domain events for the PaymentMethod aggregate."""

from protean.fields import DateTime, Identifier, String

from subscriptions.domain import subscriptions


@subscriptions.event(part_of="PaymentMethod")
class PaymentMethodAdded:
    """A member stored a new card or bank account."""

    __version__ = 1

    payment_method_id = Identifier(required=True)
    user_id = Identifier(required=True)
    method_type = String(required=True)
    brand = String()
    last4 = String()
    is_default = String(required=True)  # "True"/"False"
    added_at = DateTime(required=True)


@subscriptions.event(part_of="PaymentMethod")
class DefaultPaymentMethodChanged:
    """A payment method became the member's default."""

    __version__ = 1

    payment_method_id = Identifier(required=True)
    user_id = Identifier(required=True)
    changed_at = DateTime(required=True)


@subscriptions.event(part_of="PaymentMethod")
class PaymentMethodRemoved:
    """A payment method was deactivated; it is kept for billing history."""

    __version__ = 1

    payment_method_id = Identifier(required=True)
    user_id = Identifier(required=True)
    removed_at = DateTime(required=True)
