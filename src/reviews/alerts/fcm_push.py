"""Firebase Cloud Messaging push client.

Sends topic messages through the firebase-admin SDK. The Firebase app is
initialized from the service-account credentials file on first send and
reused afterwards.
"""

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from reviews.alerts.push_port import PushClient

APP_NAME = "gigmatch-review-alerts"


class FcmPushClient(PushClient):
    """Production Firebase push client."""

    def __init__(self, credentials_path: str, app_name: str = APP_NAME) -> None:
        self.credentials_path = credentials_path
        self.app_name = app_name
        self._app = None

    def _get_app(self):
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(self.app_name)
            except ValueError:
                self._app = firebase_admin.initialize_app(
                    credentials.Certificate(self.credentials_path),
                    name=self.app_name,
                )
        return self._app

    def send(
        self,
        topic: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        # FCM data payloads only carry string values
        message = messaging.Message(
            topic=topic,
            notification=messaging.Notification(title=title, body=body),
            data={key: str(value) for key, value in (data or {}).items()},
        )
        try:
            message_id = messaging.send(message, app=self._get_app())
        except FirebaseError as exc:
            return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": message_id, "status": "sent"}
