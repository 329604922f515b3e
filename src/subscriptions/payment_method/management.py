"""Payment method commands: add, set default, and remove.

The handlers keep "at most one default per member" across the member's
PaymentMethod aggregates: the first active method becomes the default,
choosing a new default clears the previous one, and removing the default
promotes the most recently added remaining method.
"""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from shared.errors import ConflictError
from subscriptions.domain import subscriptions
from subscriptions.payment_method.payment_method import PaymentMethod


@subscriptions.command(part_of="PaymentMethod")
class AddPaymentMethod:
    user_id = Identifier(required=True)
    external_payment_method_id = String(required=True, max_length=255)
    method_type = String(required=True, max_length=20)
    brand = String(max_length=50)
    last4 = String(max_length=4)
    expiry_month = Integer()
    expiry_year = Integer()
    set_as_default = Boolean(default=False)


@subscriptions.command(part_of="PaymentMethod")
class SetDefaultPaymentMethod:
    user_id = Identifier(required=True)
    payment_method_id = Identifier(required=True)


@subscriptions.command(part_of="PaymentMethod")
class RemovePaymentMethod:
    user_id = Identifier(required=True)
    payment_method_id = Identifier(required=True)


def _active_methods(repo, user_id):
    methods = repo._dao.query.filter(user_id=str(user_id), is_active=True).all().items
    return sorted(methods, key=lambda m: m.created_at, reverse=True)


def _owned_method(repo, user_id, payment_method_id):
    method = repo.get(payment_method_id)
    if str(method.user_id) != str(user_id):
        raise ObjectNotFoundError({"_entity": f"Payment method {payment_method_id} not found"})
    return method


def _clear_other_defaults(repo, user_id, keep_id=None):
    for other in _active_methods(repo, user_id):
        if other.is_default and str(other.id) != str(keep_id):
            other.clear_default()
            repo.add(other)


@subscriptions.command_handler(part_of=PaymentMethod)
class PaymentMethodHandler:
    @handle(AddPaymentMethod)
    def add_payment_method(self, command):
        repo = current_domain.repository_for(PaymentMethod)

        existing = repo._dao.query.filter(
            external_payment_method_id=command.external_payment_method_id,
        ).all()
        if existing.items:
            raise ConflictError({"external_payment_method_id": ["Payment method is already stored"]})

        make_default = bool(command.set_as_default) or not _active_methods(repo, command.user_id)
        if make_default:
            _clear_other_defaults(repo, command.user_id)

        method = PaymentMethod.register(
            user_id=command.user_id,
            external_payment_method_id=command.external_payment_method_id,
            method_type=command.method_type,
            brand=command.brand,
            last4=command.last4,
            expiry_month=command.expiry_month,
            expiry_year=command.expiry_year,
            is_default=make_default,
        )
        repo.add(method)
        return str(method.id)

    @handle(SetDefaultPaymentMethod)
    def set_default_payment_method(self, command):
        repo = current_domain.repository_for(PaymentMethod)
        method = _owned_method(repo, command.user_id, command.payment_method_id)

        _clear_other_defaults(repo, command.user_id, keep_id=method.id)
        method.make_default()
        repo.add(method)

    @handle(RemovePaymentMethod)
    def remove_payment_method(self, command):
        repo = current_domain.repository_for(PaymentMethod)
        method = _owned_method(repo, command.user_id, command.payment_method_id)

        was_default = method.is_default
        method.deactivate()
        repo.add(method)

        if was_default:
            remaining = [m for m in _active_methods(repo, command.user_id) if str(m.id) != str(method.id)]
            if remaining:
                remaining[0].make_default()
                repo.add(remaining[0])
