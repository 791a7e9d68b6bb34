from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from barberbot.application.use_cases.booking import BookingService, ListScope
from barberbot.application.use_cases.command_router import CommandRouter
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.application.utils import replies
from barberbot.domain.entities.booking_result import (
    AmbiguousTarget,
    Cancelled,
    Confirmed,
    NotFound,
    ParseFailed,
    SlotUnavailable,
)
from barberbot.domain.entities.intent import (
    AttemptBooking,
    CancelBookingByHandle,
    CancelOwnLatestPending,
    ConfirmBooking,
    HandoffToHuman,
    Intent,
    ListOwnBookings,
    ListToday,
    ListUpcoming,
    ShowAdminMenu,
    ShowBookingPrompt,
    ShowMainMenu,
    Unhandled,
)
from barberbot.domain.entities.message import Message

PROCESSED_ID_LIMIT = 1000
UNKNOWN_CUSTOMER_NAME = "Cliente Desconhecido"


class HandleIncomingMessageUseCase:
    def __init__(
        self,
        router: CommandRouter,
        booking_service: BookingService,
        send_reply: SendReplyUseCase,
        owner_id: str,
        business_name: str,
        timezone: ZoneInfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._router = router
        self._booking_service = booking_service
        self._send_reply = send_reply
        self._owner_id = owner_id
        self._business_name = business_name
        self._timezone = timezone
        self._clock = clock or (lambda: datetime.now(timezone))
        self._processed_ids: deque[str] = deque(maxlen=PROCESSED_ID_LIMIT)
        self._processed_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

        self._handlers: dict[type, Callable[[Intent, Message, datetime], str | None]] = {
            ShowAdminMenu: self._show_admin_menu,
            ListToday: self._list_today,
            ListUpcoming: self._list_upcoming,
            ConfirmBooking: self._confirm_booking,
            CancelBookingByHandle: self._cancel_booking_by_handle,
            ShowMainMenu: self._show_main_menu,
            ShowBookingPrompt: self._show_booking_prompt,
            ListOwnBookings: self._list_own_bookings,
            HandoffToHuman: self._handoff_to_human,
            CancelOwnLatestPending: self._cancel_own_latest_pending,
            AttemptBooking: self._attempt_booking,
            Unhandled: self._unhandled,
        }

    def handle(self, message: Message) -> str | None:
        """Route one inbound message, reply to the sender and return the reply text (None if silent)."""
        if not self._mark_processed(message.id):
            self._logger.info("Duplicate message ignored", extra={"message_id": message.id})
            return None

        try:
            intent = self._router.route(message.sender_id, message.text)
            self._logger.info(
                "Message routed",
                extra={"message_id": message.id, "intent": type(intent).__name__},
            )

            reply = self._handlers[type(intent)](intent, message, self._clock())
            if reply:
                self._send_reply.execute(message.sender_id, reply)
            return reply
        except Exception as e:
            # Let a redelivery of the same message be processed again.
            self._unmark_processed(message.id)
            self._logger.exception(
                "Error handling message",
                extra={"message_id": message.id, "reason": str(e)},
            )
            raise

    def announce_online(self) -> bool:
        if not self._owner_id:
            self._logger.warning("OWNER_NUMBER not configured; skipping online notice")
            return False
        return self._send_reply.execute(self._owner_id, replies.build_online_notice(self._business_name))

    def _mark_processed(self, message_id: str) -> bool:
        with self._processed_lock:
            if message_id in self._processed_ids:
                return False
            self._processed_ids.append(message_id)
            return True

    def _unmark_processed(self, message_id: str) -> None:
        with self._processed_lock:
            if message_id in self._processed_ids:
                self._processed_ids.remove(message_id)

    def _notify(self, recipient_id: str, text: str) -> None:
        # Out-of-band notices must not cost the sender their reply.
        try:
            self._send_reply.execute(recipient_id, text)
        except Exception as e:
            self._logger.error("Notification failed", extra={"handle": recipient_id, "reason": str(e)})

    # Owner intents

    def _show_admin_menu(self, intent: Intent, message: Message, now: datetime) -> str:
        return replies.build_admin_menu()

    def _list_today(self, intent: Intent, message: Message, now: datetime) -> str:
        bookings = self._booking_service.list_active(ListScope.TODAY, now)
        return replies.build_admin_listing("📋 Agendamentos para HOJE:", bookings)

    def _list_upcoming(self, intent: Intent, message: Message, now: datetime) -> str:
        bookings = self._booking_service.list_active(ListScope.UPCOMING, now)
        return replies.build_admin_listing("📋 Agendamentos Futuros (Ativos):", bookings)

    def _confirm_booking(self, intent: ConfirmBooking, message: Message, now: datetime) -> str:
        result = self._booking_service.confirm(intent.token)
        if isinstance(result, Confirmed):
            self._notify(result.booking.customer_handle, replies.build_customer_confirmed(result.booking))
            return replies.build_owner_confirmed(result.booking)
        if isinstance(result, AmbiguousTarget):
            return replies.build_ambiguous_target(result.token, result.handles)
        return replies.build_confirm_not_found()

    def _cancel_booking_by_handle(self, intent: CancelBookingByHandle, message: Message, now: datetime) -> str:
        result = self._booking_service.cancel_by_handle(intent.token)
        if isinstance(result, Cancelled):
            self._notify(result.booking.customer_handle, replies.build_customer_cancelled_by_owner(result.booking))
            return replies.build_owner_cancelled(result.booking)
        if isinstance(result, AmbiguousTarget):
            return replies.build_ambiguous_target(result.token, result.handles)
        return replies.build_cancel_not_found()

    # Customer intents

    def _show_main_menu(self, intent: Intent, message: Message, now: datetime) -> str:
        return replies.build_main_menu(self._business_name)

    def _show_booking_prompt(self, intent: Intent, message: Message, now: datetime) -> str:
        return replies.build_booking_prompt()

    def _list_own_bookings(self, intent: Intent, message: Message, now: datetime) -> str:
        bookings = self._booking_service.list_active(ListScope.OWN, now, handle=message.sender_id)
        return replies.build_own_listing(bookings)

    def _handoff_to_human(self, intent: Intent, message: Message, now: datetime) -> str:
        return replies.build_handoff()

    def _cancel_own_latest_pending(self, intent: Intent, message: Message, now: datetime) -> str:
        result = self._booking_service.cancel_own_latest_pending(message.sender_id)
        if isinstance(result, NotFound):
            return replies.build_own_cancel_not_found()
        return replies.build_own_cancelled()

    def _attempt_booking(self, intent: AttemptBooking, message: Message, now: datetime) -> str:
        customer_name = message.sender_name or UNKNOWN_CUSTOMER_NAME
        result = self._booking_service.create_booking(
            customer_handle=message.sender_id,
            customer_name=customer_name,
            requested_phrase=intent.raw_text,
            now=now,
        )
        if isinstance(result, ParseFailed):
            return replies.build_parse_failed()
        if isinstance(result, SlotUnavailable):
            return replies.build_slot_unavailable(result.requested, result.suggested)
        if self._owner_id:
            self._notify(self._owner_id, replies.build_owner_new_booking(result.booking, intent.raw_text))
        return replies.build_pending_confirmation(result.booking)

    def _unhandled(self, intent: Intent, message: Message, now: datetime) -> None:
        return None
