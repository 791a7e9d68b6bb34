#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no WhatsApp).

Usage:
  STORE_PROVIDER=memory OWNER_NUMBER=5521900000000 python3 scripts/chat_local.py

What it does:
- Sends your typed messages through the same HandleIncomingMessageUseCase
- Lets you switch between a customer and the owner with /owner and /customer
- Prints the reply and every notification the bot would have sent
"""
from __future__ import annotations

import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from barberbot.application.use_cases.booking import BookingService
from barberbot.application.use_cases.command_router import CommandRouter
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.application.use_cases.send_reply import SendReplyUseCase
from barberbot.core.config import settings
from barberbot.domain.entities.message import Message
from barberbot.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform
from barberbot.wiring.dependencies import get_booking_store, get_timezone


def _print_header(sender_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"sender: {sender_id}")
    print("Type your message and press Enter.")
    print("Commands: /owner, /customer, /quit, /help")
    print("-" * 60)


def main() -> None:
    owner_id = settings.OWNER_NUMBER or "5521900000000"
    customer_id = os.getenv("CHAT_SENDER_ID", "5521999990000")
    platform = MockWhatsAppPlatform()
    use_case = HandleIncomingMessageUseCase(
        router=CommandRouter(owner_id=owner_id),
        booking_service=BookingService(store=get_booking_store()),
        send_reply=SendReplyUseCase(platform=platform, auto_reply_enabled=True),
        owner_id=owner_id,
        business_name=settings.BUSINESS_NAME,
        timezone=get_timezone(),
    )
    sender_id = customer_id
    _print_header(sender_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nTchau!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Tchau!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /owner    -> speak as the owner")
            print("  /customer -> speak as the customer")
            print("  /quit     -> exit")
            continue
        if cmd == "/owner":
            sender_id = owner_id
            print(f"sender: {sender_id} (owner)")
            continue
        if cmd == "/customer":
            sender_id = customer_id
            print(f"sender: {sender_id}")
            continue

        message = Message(
            id=f"local_{int(time.time() * 1000)}",
            sender_id=sender_id,
            text=user_text,
            timestamp=int(time.time()),
            platform="local",
            sender_name="Cliente Local",
        )

        platform.sent.clear()
        try:
            use_case.handle(message)
        except Exception as e:
            print(f"ERROR: {e}")
            continue

        if not platform.sent:
            print("(no outbound message)")
        for recipient, text in platform.sent:
            print(f"\n--- to {recipient} ---")
            print(text)
        print("-" * 60)


if __name__ == "__main__":
    main()
