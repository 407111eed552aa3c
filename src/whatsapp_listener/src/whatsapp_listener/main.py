"""WhatsApp Web listener that forwards messages to the relay service."""

import logging
import os
import time

import requests
from dotenv import load_dotenv
from relay_router.models import IncomingMessage, OutgoingReply
from selenium.common.exceptions import WebDriverException

from whatsapp_listener.session import ChatMessage, WhatsAppSession

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("whatsapp_listener")

RELAY_BASE_URL = os.environ.get("RELAY_BASE_URL")
WHATSAPP_PROFILE_DIR = os.environ.get("WHATSAPP_PROFILE_DIR", "authSession")
WHATSAPP_HEADLESS = os.environ.get("WHATSAPP_HEADLESS", "false").strip().lower() in ("1", "true", "yes", "on")
WHATSAPP_POLL_SECONDS = float(os.environ.get("WHATSAPP_POLL_SECONDS", "2"))
WHATSAPP_LOGIN_TIMEOUT_SECONDS = float(os.environ.get("WHATSAPP_LOGIN_TIMEOUT_SECONDS", "120"))
WHATSAPP_IGNORED_CHATS = {
    chat.strip() for chat in os.environ.get("WHATSAPP_IGNORED_CHATS", "").split(",") if chat.strip()
}
DEFAULT_TIMEOUT_SECONDS = 60.0
FALLBACK_REPLY = "Sorry, I encountered an error while processing your message."

if not RELAY_BASE_URL:
    raise RuntimeError("RELAY_BASE_URL is required.")  # noqa: TRY003, EM101
RELAY_URL = f"{RELAY_BASE_URL.rstrip('/')}/events/message"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _preview(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def _send_to_relay(
    url: str,
    message: IncomingMessage,
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> OutgoingReply:
    """Post the normalized message to the relay service and parse its reply."""
    response = requests.post(url, json=message.model_dump(), timeout=timeout_seconds)
    response.raise_for_status()
    return OutgoingReply.model_validate(response.json())


# ---------------------------------------------------------------------------
# Event handling
# ---------------------------------------------------------------------------


def handle_message(session: WhatsAppSession, chat_message: ChatMessage) -> None:
    """Forward one WhatsApp message to the relay and reply in the same chat.

    Args:
        session: Active WhatsApp Web session used to send the reply.
        chat_message: Incoming message read from the session.

    Returns:
        None.

    """
    if chat_message.chat in WHATSAPP_IGNORED_CHATS:
        logger.info("Ignoring message in %s", chat_message.chat)
        return

    content = chat_message.text.strip()
    if not content:
        return

    logger.info("Received message from %s: %s", chat_message.chat, content)
    incoming = IncomingMessage(text=content, source_id=chat_message.chat, provider="whatsapp")

    try:
        reply = _send_to_relay(RELAY_URL, incoming).text
    except (requests.RequestException, ValueError):
        logger.exception("Failed to call relay service")
        reply = FALLBACK_REPLY

    try:
        session.reply(chat_message, reply)
    except WebDriverException:
        logger.exception("Failed to send reply to %s", chat_message.chat)
        return
    logger.info("Sent response: %s", _preview(reply))


def poll_once(session: WhatsAppSession) -> int:
    """Handle every new message currently visible; return how many were read."""
    messages = session.fetch_new_messages()
    for chat_message in messages:
        handle_message(session, chat_message)
    return len(messages)


def main() -> None:
    """Run the WhatsApp listener until interrupted."""
    session = WhatsAppSession.launch(WHATSAPP_PROFILE_DIR, headless=WHATSAPP_HEADLESS)
    try:
        if not session.wait_for_login(WHATSAPP_LOGIN_TIMEOUT_SECONDS):
            raise RuntimeError("WhatsApp login timed out.")  # noqa: TRY003, EM101
        while True:
            poll_once(session)
            time.sleep(WHATSAPP_POLL_SECONDS)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
    finally:
        session.close()


if __name__ == "__main__":
    main()
