"""Push client used when no push credentials are configured.

Deliveries are logged and reported as skipped, so review flows keep working
in development and in environments without Firebase access.
"""

import structlog

from reviews.alerts.push_port import PushClient

logger = structlog.get_logger(__name__)


class UnconfiguredPushClient(PushClient):
    def send(
        self,
        topic: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        logger.info("Push notifications not configured, skipping delivery", topic=topic, title=title)
        return {"message_id": None, "status": "skipped", "error": "Push notifications are not configured"}
