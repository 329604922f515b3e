"""Fake push client: records sent pushes for testing."""

from uuid import uuid4

from reviews.alerts.push_port import PushClient


class FakePushClient(PushClient):
    """Push client that records notifications in memory for test assertions."""

    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Push delivery failed"):
        """Configure the fake client behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(
        self,
        topic: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append(
            {
                "message_id": message_id,
                "topic": topic,
                "title": title,
                "body": body,
                "data": data,
            }
        )
        return {"message_id": message_id, "status": "sent"}
