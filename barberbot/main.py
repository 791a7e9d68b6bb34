import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from barberbot.api.tasks import router as tasks_router
from barberbot.api.webhooks import router as webhooks_router
from barberbot.core.config import settings
from barberbot.wiring.dependencies import get_booking_store, get_handle_incoming_message_use_case

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("message_id", "intent", "booking_id", "handle", "scheduled_at", "reply_text", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # An unreachable store stops startup instead of running degraded.
    get_booking_store()
    try:
        get_handle_incoming_message_use_case().announce_online()
    except Exception as e:
        logger.warning("Online notice not sent", extra={"reason": str(e)})
    logger.info("🤖 %s bot ready", settings.BUSINESS_NAME)
    yield


app = FastAPI(title="Barber WhatsApp Booking", version="1.0.0", lifespan=lifespan)

app.include_router(webhooks_router, tags=["webhooks"])
app.include_router(tasks_router, tags=["tasks"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/ping", response_class=PlainTextResponse)
def ping() -> str:
    return "🤖 OK"


@app.get("/", response_class=PlainTextResponse)
def index() -> str:
    return f"🤖 {settings.BUSINESS_NAME} Bot está rodando com sucesso!"
