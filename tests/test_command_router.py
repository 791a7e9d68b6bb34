from __future__ import annotations

import pytest

from barberbot.application.use_cases.command_router import CommandRouter
from barberbot.domain.entities.intent import (
    AttemptBooking,
    CancelBookingByHandle,
    CancelOwnLatestPending,
    ConfirmBooking,
    HandoffToHuman,
    ListOwnBookings,
    ListToday,
    ListUpcoming,
    ShowAdminMenu,
    ShowBookingPrompt,
    ShowMainMenu,
    Unhandled,
)

OWNER = "5521900000000"
CUSTOMER = "5521988887777"


@pytest.fixture
def router() -> CommandRouter:
    return CommandRouter(owner_id=OWNER)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("admin", ShowAdminMenu()),
        ("  ADMIN ", ShowAdminMenu()),
        ("listar hoje", ListToday()),
        ("Listar Hoje por favor", ListToday()),
        ("listar futuros", ListUpcoming()),
        ("listar", ListUpcoming()),
        ("confirmar 5521988887777", ConfirmBooking(token="5521988887777")),
        ("confirmar 7777", ConfirmBooking(token="7777")),
        ("cancelar 5521988887777", CancelBookingByHandle(token="5521988887777")),
    ],
)
def test_owner_commands(router, text, expected):
    assert router.route(OWNER, text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("cancelar", CancelOwnLatestPending()),
        ("oi", ShowMainMenu()),
        ("amanhã às 10:00", AttemptBooking(raw_text="amanhã às 10:00")),
        ("confirmar", Unhandled()),
    ],
)
def test_owner_falls_through_to_customer_menu(router, text, expected):
    assert router.route(OWNER, text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("oi", ShowMainMenu()),
        ("Oi", ShowMainMenu()),
        (" menu ", ShowMainMenu()),
        ("olá", ShowMainMenu()),
        ("1", ShowBookingPrompt()),
        ("2", ListOwnBookings()),
        ("3", HandoffToHuman()),
        ("cancelar", CancelOwnLatestPending()),
        ("valeu", Unhandled()),
        ("4", Unhandled()),
    ],
)
def test_customer_commands(router, text, expected):
    assert router.route(CUSTOMER, text) == expected


def test_time_like_text_keeps_raw_text(router):
    assert router.route(CUSTOMER, "Amanhã às 14:00") == AttemptBooking(raw_text="Amanhã às 14:00")
    assert router.route(CUSTOMER, "sexta 10h") == AttemptBooking(raw_text="sexta 10h")
    assert router.route(CUSTOMER, "pode ser 9:30?") == AttemptBooking(raw_text="pode ser 9:30?")


def test_customer_cannot_use_admin_commands(router):
    assert router.route(CUSTOMER, "admin") == Unhandled()
    assert router.route(CUSTOMER, "confirmar 5521988887777") == Unhandled()
    assert router.route(CUSTOMER, "cancelar 5521988887777") == Unhandled()
    # "listar hoje" contains an "h", so for a customer it reads like a time request.
    assert router.route(CUSTOMER, "listar hoje") == AttemptBooking(raw_text="listar hoje")


def test_no_owner_configured_means_nobody_is_owner():
    router = CommandRouter(owner_id="")
    assert not router.is_owner("")
    assert router.route("", "admin") == Unhandled()
