"""Pydantic request/response schemas for the Subscriptions API.

These are separate from Protean commands (anti-corruption pattern).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class ActivateSubscriptionRequest(BaseModel):
    user_id: str
    tier: str  # "free", "pro" or "premium"
    external_subscription_id: str | None = None
    external_customer_id: str | None = None
    is_yearly_billing: bool = False


class ChangeTierRequest(BaseModel):
    tier: str


class CancelSubscriptionRequest(BaseModel):
    immediately: bool = False


class BillingStatusWebhook(BaseModel):
    """Subscription update pushed by the billing provider."""

    external_subscription_id: str
    status: str
    tier: str | None = None
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    cancel_at_period_end: bool | None = None


class AddPaymentMethodRequest(BaseModel):
    external_payment_method_id: str
    method_type: str  # "card" or "bank_account"
    brand: str | None = None
    last4: str | None = Field(default=None, min_length=4, max_length=4)
    expiry_month: int | None = Field(default=None, ge=1, le=12)
    expiry_year: int | None = None
    set_as_default: bool = False


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class SubscriptionIdResponse(BaseModel):
    subscription_id: str


class PaymentMethodIdResponse(BaseModel):
    payment_method_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class SubscriptionResponse(BaseModel):
    subscription_id: str
    user_id: str
    tier: str | None = None
    plan: str | None = None
    status: str
    has_active_subscription: bool
    cancel_at_period_end: bool = False
    current_period_end: datetime | None = None
    features: dict


class FeatureAccessResponse(BaseModel):
    tier: str
    has_active_subscription: bool
    features: dict


class FeatureCheckResponse(BaseModel):
    feature: str
    can_access: bool
    limit: int | bool | None = None
    remaining: int | None = None


class PaymentMethodResponse(BaseModel):
    payment_method_id: str
    method_type: str
    brand: str | None = None
    last4: str | None = None
    expiry_month: int | None = None
    expiry_year: int | None = None
    is_default: bool


class PaymentMethodListResponse(BaseModel):
    payment_methods: list[PaymentMethodResponse]
