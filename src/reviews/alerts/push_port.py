"""Push notification port: abstract interface for review alert delivery."""

from abc import ABC, abstractmethod


class PushClient(ABC):
    """Abstract interface for push notification clients."""

    @abstractmethod
    def send(
        self,
        topic: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        """Send a push notification to every device subscribed to ``topic``.

        Returns:
            dict with keys: message_id, status ("sent", "failed" or "skipped"), error (optional)
        """
        ...
