"""Tests for the PaymentMethod aggregate."""

import pytest
from protean.exceptions import ValidationError
from shared.errors import InvalidStateError
from subscriptions.payment_method.events import (
    DefaultPaymentMethodChanged,
    PaymentMethodAdded,
    PaymentMethodRemoved,
)
from subscriptions.payment_method.payment_method import PaymentMethod


def _card(**overrides):
    defaults = {
        "user_id": "member-1",
        "external_payment_method_id": "pm_card_1",
        "method_type": "card",
        "brand": "visa",
        "last4": "4242",
        "expiry_month": 12,
        "expiry_year": 2030,
    }
    defaults.update(overrides)
    return PaymentMethod.register(**defaults)


class TestRegister:
    def test_register_card(self):
        method = _card(is_default=True)

        assert method.is_active is True
        assert method.is_default is True
        event = method._events[-1]
        assert isinstance(event, PaymentMethodAdded)
        assert event.is_default == "True"

    def test_unknown_method_type_rejected(self):
        with pytest.raises(ValidationError):
            _card(method_type="paypal")

    def test_expiry_month_bounds(self):
        with pytest.raises(ValidationError):
            _card(expiry_month=13)


class TestDefaultAndRemoval:
    def test_make_default(self):
        method = _card()
        method.make_default()

        assert method.is_default is True
        assert isinstance(method._events[-1], DefaultPaymentMethodChanged)

    def test_deactivate_clears_default(self):
        method = _card(is_default=True)
        method.deactivate()

        assert method.is_active is False
        assert method.is_default is False
        assert isinstance(method._events[-1], PaymentMethodRemoved)

    def test_removed_method_cannot_become_default(self):
        method = _card()
        method.deactivate()
        with pytest.raises(InvalidStateError):
            method.make_default()

    def test_cannot_remove_twice(self):
        method = _card()
        method.deactivate()
        with pytest.raises(InvalidStateError):
            method.deactivate()
