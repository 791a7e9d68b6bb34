from __future__ import annotations

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

GREETINGS = frozenset({"oi", "menu", "olá"})
TIME_HINTS = ("às", ":", "h")

MENU_OPTIONS: dict[str, Intent] = {
    "1": ShowBookingPrompt(),
    "2": ListOwnBookings(),
    "3": HandoffToHuman(),
}


def _command_argument(text: str, command: str) -> str | None:
    """Return the first token after command, or None when the text is not that command."""
    parts = text.split()
    if len(parts) < 2 or parts[0] != command:
        return None
    return parts[1]


class CommandRouter:
    """Map (sender, text) to an Intent. Owner commands are checked before the customer menu."""

    def __init__(self, owner_id: str) -> None:
        self._owner_id = owner_id

    def is_owner(self, sender_id: str) -> bool:
        return bool(self._owner_id) and sender_id == self._owner_id

    def route(self, sender_id: str, raw_text: str) -> Intent:
        text = raw_text.lower().strip()

        if self.is_owner(sender_id):
            intent = self._route_owner(text)
            if intent is not None:
                return intent

        return self._route_customer(text, raw_text)

    def _route_owner(self, text: str) -> Intent | None:
        if text == "admin":
            return ShowAdminMenu()
        if text.startswith("listar hoje"):
            return ListToday()
        if text.startswith("listar"):
            return ListUpcoming()

        token = _command_argument(text, "confirmar")
        if token:
            return ConfirmBooking(token=token)
        token = _command_argument(text, "cancelar")
        if token:
            return CancelBookingByHandle(token=token)
        return None

    def _route_customer(self, text: str, raw_text: str) -> Intent:
        if text in GREETINGS:
            return ShowMainMenu()
        if text in MENU_OPTIONS:
            return MENU_OPTIONS[text]
        if text == "cancelar":
            return CancelOwnLatestPending()
        if any(hint in text for hint in TIME_HINTS):
            return AttemptBooking(raw_text=raw_text)
        return Unhandled()
