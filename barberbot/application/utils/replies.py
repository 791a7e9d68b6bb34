from __future__ import annotations

from datetime import datetime

from barberbot.application.ports.booking_store import handle_digits
from barberbot.domain.entities.booking import Booking, BookingStatus

STATUS_LABELS = {
    BookingStatus.PENDING: "pendente",
    BookingStatus.CONFIRMED: "confirmado",
    BookingStatus.CANCELLED: "cancelado",
    BookingStatus.COMPLETED: "concluído",
    BookingStatus.NO_SHOW: "não compareceu",
}

HANDLE_SUFFIX_LENGTH = 4


def format_datetime(moment: datetime) -> str:
    return moment.strftime("%d/%m/%Y, %H:%M")


def format_time(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def short_handle(handle: str) -> str:
    digits = handle_digits(handle)
    return digits[-HANDLE_SUFFIX_LENGTH:] if digits else handle


def build_online_notice(business_name: str) -> str:
    return (
        f"✅ O {business_name} está online e pronto para agendar! 💈\n\n"
        "Digite *admin* para ver o menu de gerenciamento."
    )


def build_admin_menu() -> str:
    return (
        "👑 Menu de Administrador 👑\n\n"
        "Digite o que você deseja fazer:\n\n"
        "*listar hoje*: Ver agendamentos para o dia de hoje.\n"
        "*listar futuros*: Ver todos os agendamentos futuros (pendentes e confirmados).\n"
        "*confirmar [número]*: Confirma o agendamento pendente do cliente "
        f"(número completo ou os últimos {HANDLE_SUFFIX_LENGTH} dígitos).\n"
        "*cancelar [número]*: Cancela e *exclui* o agendamento do cliente.\n\n"
        "Atenção: Agendamentos cancelados são *excluídos*."
    )


def build_admin_listing(title: str, bookings: list[Booking]) -> str:
    if not bookings:
        return f"📭 {title}\nNenhum agendamento encontrado."
    lines = [
        f"[{b.customer_name or 'N/D'}] [{short_handle(b.customer_handle)}] "
        f"{format_datetime(b.scheduled_at)} | Status: {STATUS_LABELS[b.status]}"
        for b in bookings
    ]
    return f"{title}\n\n" + "\n".join(lines)


def build_main_menu(business_name: str) -> str:
    return (
        f"Olá! ✂️ Seja bem-vindo à *{business_name}!*\n\n"
        "1 - Agendar um corte\n"
        "2 - Consultar/Cancelar horário\n"
        "3 - Falar com atendente\n\n"
        "Digite o número da opção desejada."
    )


def build_booking_prompt() -> str:
    return (
        "🗓️ Perfeito! Vamos marcar seu horário.\n"
        "Por favor, me diga o dia e hora que você prefere "
        "(exemplo: sexta às 15:30 ou amanhã 10:00)."
    )


def build_own_listing(bookings: list[Booking]) -> str:
    if not bookings:
        return "📅 Você ainda não possui nenhum horário marcado."
    lines = [f"📋 {format_datetime(b.scheduled_at)} ({STATUS_LABELS[b.status]})" for b in bookings]
    return "📋 Seus horários marcados:\n" + "\n".join(lines) + "\n\nPara cancelar o último pendente, digite *cancelar*."


def build_handoff() -> str:
    return "💈 Um atendente humano entrará em contato com você em breve!"


def build_parse_failed() -> str:
    return (
        "❌ Não consegui entender a data e hora. Tente um formato mais claro, "
        "como: 'amanhã às 14:00' ou 'sexta 10:30'."
    )


def build_slot_unavailable(requested: datetime, suggested: datetime) -> str:
    return (
        f"⛔️ Sentimos muito, mas o horário de *{format_datetime(requested)}* já está *reservado*!\n\n"
        f"O próximo horário disponível é *{format_datetime(suggested)}*.\n\n"
        f"Por favor, digite o horário disponível (*{format_time(suggested)}*) para confirmar "
        "seu agendamento, ou escolha outro dia/hora."
    )


def build_pending_confirmation(booking: Booking) -> str:
    return (
        f"✅ Agendamento pré-registrado para *{format_datetime(booking.scheduled_at)}*.\n\n"
        "Por favor, aguarde a confirmação do barbeiro 💈. (Status: pendente)"
    )


def build_owner_new_booking(booking: Booking, original_text: str) -> str:
    return (
        "🚨 *NOVO AGENDAMENTO PENDENTE* 🚨\n"
        f"*Nome:* {booking.customer_name or 'N/D'}\n"
        f"Cliente: {booking.customer_handle}\n"
        f"Horário: {format_datetime(booking.scheduled_at)}\n"
        f"Texto Original: {original_text}\n\n"
        f"Para confirmar, digite: *confirmar {booking.customer_handle}*\n"
        f"Para cancelar, digite: *cancelar {booking.customer_handle}*"
    )


def build_customer_confirmed(booking: Booking) -> str:
    return f"✅ Seu agendamento de *{format_datetime(booking.scheduled_at)}* foi *confirmado*! 💈"


def build_owner_confirmed(booking: Booking) -> str:
    return f"✅ Agendamento de {booking.customer_name or booking.customer_handle} foi confirmado com sucesso!"


def build_confirm_not_found() -> str:
    return "❌ Nenhum agendamento pendente encontrado para este número."


def build_customer_cancelled_by_owner(booking: Booking) -> str:
    return (
        f"❌ Seu agendamento de *{format_datetime(booking.scheduled_at)}* foi *cancelado* "
        "pelo barbeiro e *removido* do sistema."
    )


def build_owner_cancelled(booking: Booking) -> str:
    return f"❌ Agendamento de {booking.customer_name or booking.customer_handle} foi cancelado e *excluído*."


def build_cancel_not_found() -> str:
    return "❌ Nenhum agendamento ativo encontrado para este número."


def build_ambiguous_target(token: str, handles: tuple[str, ...]) -> str:
    listed = "\n".join(f"• {h}" for h in handles)
    return (
        f"⚠️ Mais de um cliente termina com *{token}*:\n{listed}\n\n"
        "Digite mais dígitos ou o número completo."
    )


def build_own_cancelled() -> str:
    return "✅ Seu agendamento foi cancelado com sucesso e *removido* do sistema."


def build_own_cancel_not_found() -> str:
    return "❌ Você não possui nenhum agendamento pendente para cancelar."
