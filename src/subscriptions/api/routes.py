"""FastAPI routes for the Subscriptions bounded context.

Write routes translate Pydantic schemas into Protean commands. The feature
access route resolves the member's effective bundle: members without a
subscription, or whose subscription is not active, get the free bundle.
"""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from subscriptions.api.schemas import (
    ActivateSubscriptionRequest,
    AddPaymentMethodRequest,
    BillingStatusWebhook,
    CancelSubscriptionRequest,
    ChangeTierRequest,
    FeatureAccessResponse,
    FeatureCheckResponse,
    PaymentMethodIdResponse,
    PaymentMethodListResponse,
    PaymentMethodResponse,
    StatusResponse,
    SubscriptionIdResponse,
    SubscriptionResponse,
)
from subscriptions.payment_method.management import (
    AddPaymentMethod,
    RemovePaymentMethod,
    SetDefaultPaymentMethod,
)
from subscriptions.payment_method.payment_method import PaymentMethod
from subscriptions.subscription.activation import ActivateSubscription
from subscriptions.subscription.billing_sync import SyncBillingStatus
from subscriptions.subscription.boosts import UseProfileBoost
from subscriptions.subscription.cancellation import CancelSubscription
from subscriptions.subscription.features import Tier, features_for_tier, normalize_tier
from subscriptions.subscription.subscription import Subscription
from subscriptions.subscription.tier_change import ChangeSubscriptionTier

subscription_router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


# ---------------------------------------------------------------------------
# Subscription lifecycle
# ---------------------------------------------------------------------------
@subscription_router.post("", status_code=201, response_model=SubscriptionIdResponse)
async def activate_subscription(body: ActivateSubscriptionRequest) -> SubscriptionIdResponse:
    command = ActivateSubscription(
        user_id=body.user_id,
        tier=body.tier,
        external_subscription_id=body.external_subscription_id,
        external_customer_id=body.external_customer_id,
        is_yearly_billing=body.is_yearly_billing,
    )
    subscription_id = current_domain.process(command, asynchronous=False)
    return SubscriptionIdResponse(subscription_id=subscription_id)


@subscription_router.put("/{user_id}/tier", response_model=StatusResponse)
async def change_tier(user_id: str, body: ChangeTierRequest) -> StatusResponse:
    current_domain.process(ChangeSubscriptionTier(user_id=user_id, tier=body.tier), asynchronous=False)
    return StatusResponse()


@subscription_router.post("/webhook", response_model=StatusResponse)
async def billing_webhook(body: BillingStatusWebhook) -> StatusResponse:
    """Apply a subscription update pushed by the billing provider."""
    command = SyncBillingStatus(
        external_subscription_id=body.external_subscription_id,
        status=body.status,
        tier=body.tier,
        current_period_start=body.current_period_start,
        current_period_end=body.current_period_end,
        cancel_at_period_end=body.cancel_at_period_end,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@subscription_router.post("/{user_id}/cancel", response_model=StatusResponse)
async def cancel_subscription(user_id: str, body: CancelSubscriptionRequest) -> StatusResponse:
    current_domain.process(
        CancelSubscription(user_id=user_id, immediately=body.immediately),
        asynchronous=False,
    )
    return StatusResponse()


@subscription_router.get("/{user_id}", response_model=SubscriptionResponse)
async def get_subscription(user_id: str) -> SubscriptionResponse:
    subscription = current_domain.repository_for(Subscription).get_by_user(user_id)
    return SubscriptionResponse(
        subscription_id=str(subscription.id),
        user_id=str(subscription.user_id),
        tier=subscription.tier,
        plan=subscription.plan,
        status=subscription.status,
        has_active_subscription=bool(subscription.has_active_subscription),
        cancel_at_period_end=bool(subscription.cancel_at_period_end),
        current_period_end=subscription.current_period_end,
        features=subscription.feature_bundle,
    )


# ---------------------------------------------------------------------------
# Feature access
# ---------------------------------------------------------------------------
@subscription_router.get("/{user_id}/features", response_model=FeatureAccessResponse)
async def get_features(user_id: str) -> FeatureAccessResponse:
    """The feature bundle the member can use right now."""
    subscription = current_domain.repository_for(Subscription).find_by_user(user_id)
    if subscription is None or not subscription.is_active:
        return FeatureAccessResponse(
            tier=Tier.FREE.value,
            has_active_subscription=False,
            features=features_for_tier(Tier.FREE.value),
        )

    return FeatureAccessResponse(
        tier=normalize_tier(subscription.tier),
        has_active_subscription=True,
        features=subscription.effective_features(),
    )


@subscription_router.get("/{user_id}/features/{feature}", response_model=FeatureCheckResponse)
async def check_feature(user_id: str, feature: str) -> FeatureCheckResponse:
    subscription = current_domain.repository_for(Subscription).find_by_user(user_id)
    if subscription is None:
        features = features_for_tier(Tier.FREE.value)
        limit = features.get(feature)
        return FeatureCheckResponse(feature=feature, can_access=bool(limit), limit=limit)

    used = (subscription.boosts_used_this_month or 0) if feature == "max_profile_boosts" else 0
    check = subscription.check_feature(feature, used=used)
    return FeatureCheckResponse(
        feature=check.feature,
        can_access=check.can_access,
        limit=check.limit,
        remaining=check.remaining,
    )


@subscription_router.post("/{user_id}/boosts", response_model=FeatureCheckResponse)
async def use_profile_boost(user_id: str) -> FeatureCheckResponse:
    """Spend one profile boost; responds with the allowance left."""
    remaining = current_domain.process(UseProfileBoost(user_id=user_id), asynchronous=False)
    return FeatureCheckResponse(feature="max_profile_boosts", can_access=remaining != 0, remaining=remaining)


# ---------------------------------------------------------------------------
# Payment methods
# ---------------------------------------------------------------------------
@subscription_router.post("/{user_id}/payment-methods", status_code=201, response_model=PaymentMethodIdResponse)
async def add_payment_method(user_id: str, body: AddPaymentMethodRequest) -> PaymentMethodIdResponse:
    command = AddPaymentMethod(
        user_id=user_id,
        external_payment_method_id=body.external_payment_method_id,
        method_type=body.method_type,
        brand=body.brand,
        last4=body.last4,
        expiry_month=body.expiry_month,
        expiry_year=body.expiry_year,
        set_as_default=body.set_as_default,
    )
    payment_method_id = current_domain.process(command, asynchronous=False)
    return PaymentMethodIdResponse(payment_method_id=payment_method_id)


@subscription_router.get("/{user_id}/payment-methods", response_model=PaymentMethodListResponse)
async def list_payment_methods(user_id: str) -> PaymentMethodListResponse:
    """Active payment methods, default first, then newest first."""
    repo = current_domain.repository_for(PaymentMethod)
    methods = repo._dao.query.filter(user_id=user_id, is_active=True).all().items
    methods = sorted(methods, key=lambda m: m.created_at, reverse=True)
    methods = sorted(methods, key=lambda m: not m.is_default)
    return PaymentMethodListResponse(
        payment_methods=[
            PaymentMethodResponse(
                payment_method_id=str(m.id),
                method_type=m.method_type,
                brand=m.brand,
                last4=m.last4,
                expiry_month=m.expiry_month,
                expiry_year=m.expiry_year,
                is_default=bool(m.is_default),
            )
            for m in methods
        ]
    )


@subscription_router.put("/{user_id}/payment-methods/{payment_method_id}/default", response_model=StatusResponse)
async def set_default_payment_method(user_id: str, payment_method_id: str) -> StatusResponse:
    current_domain.process(
        SetDefaultPaymentMethod(user_id=user_id, payment_method_id=payment_method_id),
        asynchronous=False,
    )
    return StatusResponse()


@subscription_router.delete("/{user_id}/payment-methods/{payment_method_id}", response_model=StatusResponse)
async def remove_payment_method(user_id: str, payment_method_id: str) -> StatusResponse:
    current_domain.process(
        RemovePaymentMethod(user_id=user_id, payment_method_id=payment_method_id),
        asynchronous=False,
    )
    return StatusResponse()
