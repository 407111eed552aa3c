"""Browser-automated WhatsApp Web session.

Pairing happens once by scanning the QR code shown in the browser window; the Chrome
profile directory keeps the session so later runs start logged in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from selenium import webdriver
from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.support import expected_conditions as ec
from selenium.webdriver.support.ui import WebDriverWait

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

WHATSAPP_WEB_URL = "https://web.whatsapp.com/"

SELECTORS = {
    "chat_list": 'div[aria-label="Chat list"]',
    "unread_chat": 'div[aria-label="Chat list"] div[role="listitem"]:has(span[aria-label*="unread message"])',
    "unread_badge": 'span[aria-label*="unread message"]',
    "chat_title": "span[title]",
    "conversation_header": "#main header span[title]",
    "message_row": "#main div[data-id]",
    "incoming": "div.message-in",
    "message_text": "span.selectable-text",
    "message_input": '#main footer div[contenteditable="true"]',
}

logger = logging.getLogger("whatsapp_listener.session")


@dataclass(frozen=True)
class ChatMessage:
    """An incoming text message read from an open chat."""

    message_id: str
    chat: str
    text: str


class WhatsAppSession:
    """Read new incoming messages and reply to them through WhatsApp Web."""

    def __init__(self, driver: WebDriver) -> None:
        self.driver = driver
        self._seen: set[str] = set()

    @classmethod
    def launch(cls, profile_dir: str, *, headless: bool = False) -> WhatsAppSession:
        """Start Chrome with a persistent profile and open WhatsApp Web."""
        options = webdriver.ChromeOptions()
        if headless:
            options.add_argument("--headless=new")
            logger.warning("Running headless - pairing by QR code requires an existing session")
        options.add_argument("--disable-gpu")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        profile = Path(profile_dir).resolve()
        options.add_argument(f"--user-data-dir={profile}")
        logger.info("Using Chrome profile at: %s", profile)

        driver = webdriver.Chrome(options=options)
        driver.get(WHATSAPP_WEB_URL)
        logger.info("Opened WhatsApp Web - scan the QR code with your phone if prompted")
        return cls(driver)

    def wait_for_login(self, timeout: float = 120) -> bool:
        """Block until the chat list is visible, i.e. the session is paired."""
        try:
            WebDriverWait(self.driver, timeout).until(
                ec.presence_of_element_located((By.CSS_SELECTOR, SELECTORS["chat_list"]))
            )
        except TimeoutException:
            logger.error("Timeout waiting for WhatsApp login")  # noqa: TRY400
            return False
        logger.info("WhatsApp client is ready!")
        return True

    def fetch_new_messages(self) -> list[ChatMessage]:
        """Open each chat with unread messages and collect incoming texts not seen before."""
        messages: list[ChatMessage] = []
        for chat in self.driver.find_elements(By.CSS_SELECTOR, SELECTORS["unread_chat"]):
            try:
                unread = _unread_count(chat)
                chat.click()
            except StaleElementReferenceException:
                continue
            messages.extend(self._read_open_chat(unread))
        return messages

    def reply(self, message: ChatMessage, text: str) -> None:
        """Type ``text`` into the chat the message came from and send it."""
        if self._current_chat() != message.chat:
            self._open_chat(message.chat)
        input_box = self.driver.find_element(By.CSS_SELECTOR, SELECTORS["message_input"])
        input_box.click()
        lines = text.split("\n")
        for index, line in enumerate(lines):
            input_box.send_keys(line)
            if index < len(lines) - 1:
                input_box.send_keys(Keys.SHIFT, Keys.ENTER)
        input_box.send_keys(Keys.ENTER)

    def close(self) -> None:
        """Close the browser."""
        self.driver.quit()
        logger.info("Browser closed")

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _read_open_chat(self, unread: int) -> list[ChatMessage]:
        """Return the last ``unread`` incoming messages of the open chat, skipping seen ids."""
        chat = self._current_chat()
        incoming: list[tuple[str, WebElement]] = []
        for row in self.driver.find_elements(By.CSS_SELECTOR, SELECTORS["message_row"]):
            try:
                message_id = row.get_attribute("data-id") or ""
                if message_id and row.find_elements(By.CSS_SELECTOR, SELECTORS["incoming"]):
                    incoming.append((message_id, row))
            except StaleElementReferenceException:
                continue

        recent = incoming[-unread:] if unread else []
        found: list[ChatMessage] = []
        for message_id, row in recent:
            if message_id in self._seen:
                continue
            self._seen.add(message_id)
            try:
                text = _message_text(row)
            except StaleElementReferenceException:
                continue
            if text:
                found.append(ChatMessage(message_id=message_id, chat=chat, text=text))
        return found

    def _current_chat(self) -> str:
        try:
            header = self.driver.find_element(By.CSS_SELECTOR, SELECTORS["conversation_header"])
        except NoSuchElementException:
            return ""
        return header.get_attribute("title") or header.text

    def _open_chat(self, title: str) -> None:
        for chat in self.driver.find_elements(By.CSS_SELECTOR, f'{SELECTORS["chat_list"]} {SELECTORS["chat_title"]}'):
            if chat.get_attribute("title") == title:
                chat.click()
                return
        raise NoSuchElementException(f"Chat not found: {title}")


def _unread_count(chat: WebElement) -> int:
    """Parse the badge label, e.g. "3 unread messages"."""
    badges = chat.find_elements(By.CSS_SELECTOR, SELECTORS["unread_badge"])
    if not badges:
        return 0
    label = badges[0].get_attribute("aria-label") or ""
    count = label.split(" ", 1)[0]
    return int(count) if count.isdigit() else 1


def _message_text(row: WebElement) -> str | None:
    parts = [element.text for element in row.find_elements(By.CSS_SELECTOR, SELECTORS["message_text"])]
    text = "\n".join(part for part in parts if part).strip()
    return text or None
