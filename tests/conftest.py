from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from barberbot.application.use_cases.booking import BookingService
from barberbot.application.use_cases.command_router import CommandRouter
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.infrastructure.store.memory_store import MemoryBookingStore
from barberbot.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform

TZ = ZoneInfo("America/Sao_Paulo")
OWNER = "5521900000000"
CUSTOMER = "5521988887777"

# Monday 2026-10-19 09:00 in São Paulo
MONDAY_9AM = datetime(2026, 10, 19, 9, 0, tzinfo=TZ)


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore(timezone=TZ)


@pytest.fixture
def platform() -> MockWhatsAppPlatform:
    return MockWhatsAppPlatform()


@pytest.fixture
def use_case(store: MemoryBookingStore, platform: MockWhatsAppPlatform) -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        router=CommandRouter(owner_id=OWNER),
        booking_service=BookingService(store=store),
        send_reply=SendReplyUseCase(platform=platform, auto_reply_enabled=True),
        owner_id=OWNER,
        business_name="JotaBarber",
        timezone=TZ,
        clock=lambda: MONDAY_9AM,
    )
