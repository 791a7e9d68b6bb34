from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from barberbot.core.config import settings
from barberbot.application.ports.booking_store import BookingStorePort
from barberbot.application.ports.message_platform import MessagePlatformPort
from barberbot.application.use_cases.booking import BookingService
from barberbot.application.use_cases.command_router import CommandRouter
from barberbot.application.use_cases.daily_reminder import DailyReminderUseCase
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.infrastructure.store.json_store import JsonBookingStore
from barberbot.infrastructure.store.memory_store import MemoryBookingStore
from barberbot.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform
from barberbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient
from barberbot.infrastructure.whatsapp.whatsapp_platform import WhatsAppPlatform


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_booking_store() -> BookingStorePort:
    provider = settings.STORE_PROVIDER.lower()
    if provider == "memory":
        return MemoryBookingStore(timezone=get_timezone())
    if provider == "json":
        return JsonBookingStore(path=settings.BOOKING_STORE_URL, timezone=get_timezone())
    raise ValueError(f"Unknown STORE_PROVIDER: {settings.STORE_PROVIDER}")


@lru_cache
def get_whatsapp_platform() -> MessagePlatformPort:
    logger = logging.getLogger(__name__)
    logger.info(
        "WHATSAPP_ACCESS_TOKEN present=%s len=%s",
        bool(settings.WHATSAPP_ACCESS_TOKEN),
        len(settings.WHATSAPP_ACCESS_TOKEN or ""),
    )
    logger.info("ENV=%s", settings.ENV)

    if not (settings.WHATSAPP_ACCESS_TOKEN and settings.WHATSAPP_PHONE_NUMBER_ID):
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockWhatsAppPlatform (credentials missing, ENV=dev/local)")
            return MockWhatsAppPlatform()
        raise ValueError("WHATSAPP_ACCESS_TOKEN and WHATSAPP_PHONE_NUMBER_ID are required to send replies.")

    logger.info("Using real WhatsAppPlatform")
    client = WhatsAppClient(
        access_token=settings.WHATSAPP_ACCESS_TOKEN,
        phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
        graph_api_version=settings.WHATSAPP_GRAPH_API_VERSION,
    )
    return WhatsAppPlatform(client=client)


@lru_cache
def get_booking_service() -> BookingService:
    return BookingService(store=get_booking_store())


@lru_cache
def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        router=CommandRouter(owner_id=settings.OWNER_NUMBER),
        booking_service=get_booking_service(),
        send_reply=SendReplyUseCase(
            platform=get_whatsapp_platform(),
            auto_reply_enabled=settings.AUTO_REPLY_ENABLED,
        ),
        owner_id=settings.OWNER_NUMBER,
        business_name=settings.BUSINESS_NAME,
        timezone=get_timezone(),
    )


def get_daily_reminder_use_case() -> DailyReminderUseCase:
    return DailyReminderUseCase(store=get_booking_store())
