"""Subscriptions domain API package."""

from subscriptions.api.routes import subscription_router

__all__ = ["subscription_router"]
