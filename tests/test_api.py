from __future__ import annotations

import hashlib
import hmac
import json
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from barberbot.application.ports.booking_store import BookingFilter
from barberbot.application.use_cases.daily_reminder import DailyReminderUseCase
from barberbot.core.config import settings
from barberbot.domain.entities.booking import BookingDraft, BookingStatus
from barberbot.main import app
from barberbot.wiring.dependencies import get_daily_reminder_use_case, get_handle_incoming_message_use_case

TZ = ZoneInfo("America/Sao_Paulo")
CUSTOMER = "5521988887777"


def build_payload(text: str, sender: str = CUSTOMER, message_id: str = "wamid.1") -> dict:
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "waba_1",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "messaging_product": "whatsapp",
                            "contacts": [{"wa_id": sender, "profile": {"name": "João"}}],
                            "messages": [
                                {
                                    "from": sender,
                                    "id": message_id,
                                    "timestamp": "1760875200",
                                    "type": "text",
                                    "text": {"body": text},
                                }
                            ],
                        },
                    }
                ],
            }
        ],
    }


@pytest.fixture
def client(use_case, store):
    app.dependency_overrides[get_handle_incoming_message_use_case] = lambda: use_case
    app.dependency_overrides[get_daily_reminder_use_case] = lambda: DailyReminderUseCase(store=store)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_endpoints(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/ping").text == "🤖 OK"
    assert "rodando" in client.get("/").text


def test_webhook_verification(client, monkeypatch):
    monkeypatch.setattr(settings, "WHATSAPP_VERIFY_TOKEN", "secret-token")

    ok = client.get(
        "/webhooks/whatsapp",
        params={"hub.mode": "subscribe", "hub.verify_token": "secret-token", "hub.challenge": "42"},
    )
    assert ok.status_code == 200
    assert ok.text == "42"

    denied = client.get(
        "/webhooks/whatsapp",
        params={"hub.mode": "subscribe", "hub.verify_token": "wrong", "hub.challenge": "42"},
    )
    assert denied.status_code == 403


def test_inbound_message_is_booked(client, store, platform, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "dev")

    resp = client.post("/webhooks/whatsapp", json=build_payload("amanhã às 14:00"))

    assert resp.status_code == 200
    booking = store.find_one(BookingFilter(customer_handle=CUSTOMER))
    assert booking is not None
    assert booking.customer_name == "João"
    assert any(to == CUSTOMER and "pré-registrado" in text for to, text in platform.sent)


def test_signature_is_required_outside_dev(client, store, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "production")
    monkeypatch.setattr(settings, "WHATSAPP_APP_SECRET", "app-secret")
    body = json.dumps(build_payload("oi")).encode("utf-8")

    unsigned = client.post("/webhooks/whatsapp", content=body, headers={"Content-Type": "application/json"})
    assert unsigned.status_code == 403

    signature = "sha256=" + hmac.new(b"app-secret", body, hashlib.sha256).hexdigest()
    signed = client.post(
        "/webhooks/whatsapp",
        content=body,
        headers={"Content-Type": "application/json", "X-Hub-Signature-256": signature},
    )
    assert signed.status_code == 200


def test_malformed_body_is_rejected(client, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "dev")
    resp = client.post("/webhooks/whatsapp", content=b"{oops", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


def test_daily_reminders_task(client, store):
    tomorrow = datetime.now(TZ).replace(hour=10, minute=0, second=0, microsecond=0) + timedelta(days=1)
    store.insert(BookingDraft(customer_handle=CUSTOMER, scheduled_at=tomorrow, status=BookingStatus.CONFIRMED))
    store.insert(BookingDraft(customer_handle=CUSTOMER, scheduled_at=tomorrow + timedelta(hours=2), reminder_sent=True))

    resp = client.post("/tasks/daily-reminders", params={"src": "cron"})

    assert resp.json() == {"status": "ok", "due": 1}
    assert [b.reminder_sent for b in store.find(BookingFilter())] == [False, True]
