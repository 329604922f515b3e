"""PaymentMethod aggregate: a stored card or bank account of a member.

A member can store several payment methods; at most one active method is
the default at any time. Keeping that property holds across aggregates, so
it is enforced by the payment method command handlers (see management.py).
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from shared.errors import InvalidStateError
from subscriptions.domain import subscriptions
from subscriptions.payment_method.events import (
    DefaultPaymentMethodChanged,
    PaymentMethodAdded,
    PaymentMethodRemoved,
)


class PaymentMethodType(Enum):
    CARD = "card"
    BANK_ACCOUNT = "bank_account"


@subscriptions.aggregate
class PaymentMethod:
    user_id = Identifier(required=True)
    external_payment_method_id = String(required=True, max_length=255, unique=True)
    method_type = String(choices=PaymentMethodType, required=True)
    brand = String(max_length=50)
    last4 = String(max_length=4)
    expiry_month = Integer(min_value=1, max_value=12)
    expiry_year = Integer(min_value=2000)
    is_default = Boolean(default=False)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def inactive_method_cannot_be_default(self):
        if self.is_default and not self.is_active:
            raise ValidationError({"is_default": ["A removed payment method cannot be the default"]})

    @classmethod
    def register(
        cls,
        user_id,
        external_payment_method_id,
        method_type,
        brand=None,
        last4=None,
        expiry_month=None,
        expiry_year=None,
        is_default=False,
    ):
        now = datetime.now(UTC)
        method = cls(
            user_id=user_id,
            external_payment_method_id=external_payment_method_id,
            method_type=method_type,
            brand=brand,
            last4=last4,
            expiry_month=expiry_month,
            expiry_year=expiry_year,
            is_default=is_default,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        method.raise_(
            PaymentMethodAdded(
                payment_method_id=str(method.id),
                user_id=str(user_id),
                method_type=method_type,
                brand=brand,
                last4=last4,
                is_default=str(is_default),
                added_at=now,
            )
        )
        return method

    def make_default(self):
        if not self.is_active:
            raise InvalidStateError({"payment_method": ["A removed payment method cannot be the default"]})

        now = datetime.now(UTC)
        self.is_default = True
        self.updated_at = now

        self.raise_(
            DefaultPaymentMethodChanged(
                payment_method_id=str(self.id),
                user_id=str(self.user_id),
                changed_at=now,
            )
        )

    def clear_default(self):
        self.is_default = False
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        if not self.is_active:
            raise InvalidStateError({"payment_method": ["Payment method is already removed"]})

        now = datetime.now(UTC)
        self.is_default = False
        self.is_active = False
        self.updated_at = now

        self.raise_(
            PaymentMethodRemoved(
                payment_method_id=str(self.id),
                user_id=str(self.user_id),
                removed_at=now,
            )
        )
