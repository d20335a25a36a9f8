import pytest
import requests

from origin_watch.models import NotificationEvent
from origin_watch.notify import (
    FALLBACK_DESCRIPTION,
    GOLD,
    DeliveryError,
    DiscordWebhookSink,
    LogSink,
    build_message,
    notify,
)

URL = "https://7origin.netmarble.com/en/news/1/3051"


class _Resp:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400


def test_build_message_with_title(settings):
    msg = build_message(NotificationEvent(category="Notices", url=URL, title="Maintenance"), settings)
    embed = msg["embeds"][0]
    assert msg["username"] == settings.username
    assert embed["title"] == "📌 Notices — New post"
    assert embed["description"] == "**Maintenance**"
    assert embed["url"] == URL
    assert embed["color"] == GOLD
    assert embed["footer"]["text"] == "Source: 7origin.netmarble.com"


def test_build_message_without_title_uses_fallback(settings):
    msg = build_message(NotificationEvent(category="News", url=URL), settings)
    assert msg["embeds"][0]["description"] == FALLBACK_DESCRIPTION


def test_webhook_sink_success(monkeypatch):
    sent = {}

    def fake_post(url, json=None, timeout=None):
        sent.update(url=url, json=json, timeout=timeout)
        return _Resp(204)

    monkeypatch.setattr(requests, "post", fake_post)
    result = DiscordWebhookSink("https://discord.com/api/webhooks/1/t", timeout=5).send({"embeds": []})
    assert result.ok is True
    assert sent["url"] == "https://discord.com/api/webhooks/1/t"
    assert sent["timeout"] == 5


def test_webhook_sink_http_error(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: _Resp(429, "rate limited"))
    result = DiscordWebhookSink("https://discord.com/api/webhooks/1/t").send({})
    assert result.ok is False
    assert result.status == 429
    assert result.body == "rate limited"


def test_webhook_sink_transport_error(monkeypatch):
    def boom(*a, **kw):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "post", boom)
    result = DiscordWebhookSink("https://discord.com/api/webhooks/1/t").send({})
    assert result.ok is False
    assert result.status == 0


def test_webhook_sink_requires_url():
    with pytest.raises(ValueError):
        DiscordWebhookSink("")


def test_notify_raises_on_failed_delivery(settings, monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: _Resp(500, "oops"))
    sink = DiscordWebhookSink(settings.webhook_url)
    with pytest.raises(DeliveryError) as excinfo:
        notify(sink, NotificationEvent(category="News", url=URL), settings)
    assert excinfo.value.status == 500
    assert "oops" in str(excinfo.value)


def test_log_sink_always_succeeds(settings):
    notify(LogSink(), NotificationEvent(category="News", url=URL), settings)
