"""Notification dispatch: builds the Discord embed and hands it to a sink."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import requests

from .config import Settings
from .models import NotificationEvent

log = logging.getLogger(__name__)

GOLD = 15844367
FALLBACK_DESCRIPTION = "New post detected on the official site."


@dataclass
class DeliveryResult:
    ok: bool
    status: int = 0
    body: str = ""


class DeliveryError(RuntimeError):
    """The sink did not acknowledge a notification; it may not have been delivered."""

    def __init__(self, status: int, body: str):
        super().__init__(f"Discord webhook failed: {status} {body}".strip())
        self.status = status
        self.body = body


class NotificationSink(ABC):
    @abstractmethod
    def send(self, message: dict) -> DeliveryResult:
        pass


class DiscordWebhookSink(NotificationSink):
    def __init__(self, webhook_url: str, timeout: float = 30.0):
        if not webhook_url:
            raise ValueError("Discord webhook URL is empty")
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send(self, message: dict) -> DeliveryResult:
        try:
            resp = requests.post(self.webhook_url, json=message, timeout=self.timeout)
        except requests.RequestException as exc:
            return DeliveryResult(ok=False, status=0, body=str(exc))
        if not resp.ok:
            return DeliveryResult(ok=False, status=resp.status_code, body=resp.text)
        return DeliveryResult(ok=True, status=resp.status_code)


class LogSink(NotificationSink):
    """Dry-run sink: logs the payload and reports success."""

    def send(self, message: dict) -> DeliveryResult:
        log.info("[dry-run] Would send: %s", json.dumps(message, ensure_ascii=False))
        return DeliveryResult(ok=True, status=200)


def build_message(event: NotificationEvent, settings: Settings) -> dict:
    description = f"**{event.title}**" if event.title else FALLBACK_DESCRIPTION
    return {
        "username": settings.username,
        "embeds": [
            {
                "title": f"📌 {event.category} — New post",
                "description": description,
                "url": event.url,
                "color": GOLD,
                "footer": {"text": settings.footer},
            }
        ],
    }


def notify(sink: NotificationSink, event: NotificationEvent, settings: Settings) -> None:
    """Send *event*; raise DeliveryError unless the sink confirms success."""
    result = sink.send(build_message(event, settings))
    if not result.ok:
        raise DeliveryError(result.status, result.body)
    log.info("Notified %s: %s", event.category, event.url)
