"""Push client selection for review alerts.

The client is built once from configuration: with FIREBASE_CREDENTIALS set
it is the FCM client, otherwise an UnconfiguredPushClient that skips
deliveries. Tests install a FakePushClient with set_push_client().
"""

import os

from reviews.alerts.fcm_push import FcmPushClient
from reviews.alerts.push_port import PushClient
from reviews.alerts.unconfigured_push import UnconfiguredPushClient

_current_client: PushClient | None = None


def build_push_client(environ=None) -> PushClient:
    """Create the push client the environment is configured for."""
    environ = os.environ if environ is None else environ
    credentials_path = environ.get("FIREBASE_CREDENTIALS")
    if credentials_path:
        return FcmPushClient(credentials_path=credentials_path)
    return UnconfiguredPushClient()


def get_push_client() -> PushClient:
    """Return the active push client, building it on first use."""
    global _current_client
    if _current_client is None:
        _current_client = build_push_client()
    return _current_client


def set_push_client(client: PushClient) -> None:
    """Override the active push client (useful for tests)."""
    global _current_client
    _current_client = client


def reset_push_client() -> None:
    """Forget the active client; the next get_push_client() rebuilds it."""
    global _current_client
    _current_client = None
