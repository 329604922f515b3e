"""Application tests for payment method management."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from shared.errors import ConflictError
from subscriptions.payment_method.management import (
    AddPaymentMethod,
    RemovePaymentMethod,
    SetDefaultPaymentMethod,
)
from subscriptions.payment_method.payment_method import PaymentMethod


def _add(user_id, external_id, **overrides):
    defaults = {
        "user_id": user_id,
        "external_payment_method_id": external_id,
        "method_type": "card",
        "brand": "visa",
        "last4": "4242",
        "expiry_month": 8,
        "expiry_year": 2031,
    }
    defaults.update(overrides)
    return current_domain.process(AddPaymentMethod(**defaults), asynchronous=False)


def _get(payment_method_id):
    return current_domain.repository_for(PaymentMethod).get(payment_method_id)


def _defaults_of(user_id):
    methods = current_domain.repository_for(PaymentMethod)._dao.query.filter(user_id=user_id, is_default=True).all()
    return [str(m.id) for m in methods.items]


class TestAddPaymentMethod:
    def test_first_method_becomes_default(self):
        first = _add("member-pm-1", "pm_1a")
        second = _add("member-pm-1", "pm_1b")

        assert _get(first).is_default is True
        assert _get(second).is_default is False

    def test_set_as_default_replaces_previous_default(self):
        first = _add("member-pm-2", "pm_2a")
        second = _add("member-pm-2", "pm_2b", set_as_default=True)

        assert _defaults_of("member-pm-2") == [second]
        assert _get(first).is_default is False

    def test_duplicate_external_id_conflicts(self):
        _add("member-pm-3", "pm_3a")
        with pytest.raises(ConflictError):
            _add("member-pm-3", "pm_3a")


class TestSetDefaultPaymentMethod:
    def test_switch_default(self):
        first = _add("member-pm-4", "pm_4a")
        second = _add("member-pm-4", "pm_4b")

        current_domain.process(
            SetDefaultPaymentMethod(user_id="member-pm-4", payment_method_id=second),
            asynchronous=False,
        )

        assert _defaults_of("member-pm-4") == [second]
        assert _get(first).is_default is False

    def test_cannot_use_another_members_method(self):
        foreign = _add("member-pm-5", "pm_5a")

        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                SetDefaultPaymentMethod(user_id="member-pm-6", payment_method_id=foreign),
                asynchronous=False,
            )


class TestRemovePaymentMethod:
    def test_removing_default_promotes_newest_remaining(self):
        first = _add("member-pm-7", "pm_7a")
        _add("member-pm-7", "pm_7b")
        newest = _add("member-pm-7", "pm_7c")

        current_domain.process(
            RemovePaymentMethod(user_id="member-pm-7", payment_method_id=first),
            asynchronous=False,
        )

        assert _get(first).is_active is False
        assert _defaults_of("member-pm-7") == [newest]

    def test_removing_last_method_leaves_no_default(self):
        only = _add("member-pm-8", "pm_8a")

        current_domain.process(
            RemovePaymentMethod(user_id="member-pm-8", payment_method_id=only),
            asynchronous=False,
        )

        assert _defaults_of("member-pm-8") == []
