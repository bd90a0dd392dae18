"""UI-independent chat state and actions.

Holds everything the chat page shows (signed-in user, saved chats, open
conversation, loading flag, follow-up prompts) and implements the actions
behind its buttons. The page only renders this state and calls these
methods, so the behavior is testable without a browser.
"""

import logging
import random
import time
from collections.abc import AsyncIterator, Callable
from typing import Literal

from indie_coach.agent.prompts import BOOK_SUMMARY_ACTION_PROMPT, Suggestion
from indie_coach.models.schemas import (
    ChatSession,
    FilePart,
    Message,
    RecoverySnapshot,
    Role,
    TextPart,
    User,
)
from indie_coach.parsing.tags import extract_suggestions, visible_stream_text
from indie_coach.storage.store import CoachStorage

logger = logging.getLogger(__name__)

GUEST_MESSAGE_LIMIT = 3
NEW_CHAT_TITLE_LENGTH = 30
IMPORTED_CHAT_TITLE_LENGTH = 40

ChatStreamer = Callable[[list[Message], bool], AsyncIterator[str]]


class ChatStreamError(Exception):
    """Raised by a streamer when the response cannot be delivered."""

    pass


def _now_ms() -> int:
    return int(time.time() * 1000)


def derive_title(message: Message | None, length: int, fallback: str) -> str:
    """Title a chat from its first user message.

    Uses the message text, else the attached file name, cut to ``length``.
    """
    if message is not None:
        text = message.first_text()
        if text:
            return text[:length]
        file = message.first_file()
        if file is not None and file.name:
            return file.name[:length]
    return fallback


class ChatController:
    """State and actions for one browser tab.

    Args:
        storage: Browser/tab storage for accounts, history, and recovery.
        streamer: Async callable yielding response chunks for a conversation.
        on_change: Called whenever state the page renders has changed.
    """

    def __init__(
        self,
        storage: CoachStorage,
        streamer: ChatStreamer,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._storage = storage
        self._streamer = streamer
        self._on_change = on_change

        self.view: Literal["auth", "chat"] = "auth"
        self.user: User | None = None
        self.chat_history: list[ChatSession] = []
        self.active_chat_id: str | None = None
        self.messages: list[Message] = []
        self.is_loading: bool = False
        self.follow_up_prompts: list[str] = []
        self.show_book_summary: bool = True
        self.guest_message_count: int = 0
        self.error_banner: str | None = None

    # === Derived state ===

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_chat_locked(self) -> bool:
        """Guests are locked out after the free message quota."""
        return not self.is_authenticated and self.guest_message_count >= GUEST_MESSAGE_LIMIT

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _find_chat(self, chat_id: str) -> ChatSession | None:
        return next((c for c in self.chat_history if c.id == chat_id), None)

    def _persist_history(self) -> None:
        if self.user is not None:
            self._storage.save_history(self.user.email, self.chat_history)

    def _save_recovery(self) -> None:
        if self.is_loading or not self.messages:
            return
        self._storage.save_recovery(
            RecoverySnapshot(
                active_chat_id=self.active_chat_id if self.is_authenticated else None,
                messages=self.messages,
            )
        )

    def _update_chat(self, chat_id: str | None, messages: list[Message]) -> None:
        chat = self._find_chat(chat_id) if chat_id else None
        if chat is not None:
            chat.messages = list(messages)

    def _store_reply(self, owner: User, chat_id: str | None, messages: list[Message]) -> None:
        """Save a finished conversation into the chat it was sent from."""
        if self.user is not None and self.user.email == owner.email:
            self._update_chat(chat_id, messages)
            self._persist_history()
            return

        # Signed out (or switched accounts) while the reply was streaming
        history = self._storage.load_history(owner.email)
        for chat in history:
            if chat.id == chat_id:
                chat.messages = list(messages)
                self._storage.save_history(owner.email, history)
                return

    # === Session lifecycle ===

    def restore(self) -> None:
        """Resume the previous state of this browser tab on page load."""
        user = self._storage.active_user()
        if user is not None:
            self.authenticate(user)
            return

        self.guest_message_count = self._storage.guest_message_count()
        snapshot = self._storage.load_recovery()
        if snapshot is not None and snapshot.messages and snapshot.active_chat_id is None:
            self.messages = snapshot.messages
            self.follow_up_prompts = []
            self.view = "chat"
        self._notify()

    def authenticate(self, user: User, guest_messages: list[Message] | None = None) -> None:
        """Switch to a signed-in user and load their saved chats.

        Guest messages, when given, become a new saved chat that is opened.
        Otherwise a recovery snapshot for a chat that still exists is
        reopened, and failing that a fresh chat screen is shown.
        """
        self.user = user
        self.view = "chat"
        self.guest_message_count = 0
        self.chat_history = self._storage.load_history(user.email)

        if guest_messages:
            first_user_message = next((m for m in guest_messages if m.role == Role.USER), None)
            session = ChatSession(
                id=str(_now_ms()),
                title=derive_title(
                    first_user_message, IMPORTED_CHAT_TITLE_LENGTH, "Imported Chat"
                ),
                messages=list(guest_messages),
            )
            self.chat_history.insert(0, session)
            self.messages = list(guest_messages)
            self.active_chat_id = session.id
            self._persist_history()
            self._save_recovery()
            self._notify()
            return

        snapshot = self._storage.load_recovery()
        if (
            snapshot is not None
            and snapshot.messages
            and snapshot.active_chat_id
            and self._find_chat(snapshot.active_chat_id) is not None
        ):
            self.active_chat_id = snapshot.active_chat_id
            self.messages = snapshot.messages
            self.follow_up_prompts = []
            self._notify()
            return

        self.active_chat_id = None
        self.messages = []
        self._notify()

    def sign_up(self, first_name: str, last_name: str, email: str) -> User:
        """Register, sign in, and carry over the guest conversation.

        Raises:
            DuplicateAccountError: If the email is already registered.
            ValidationError: If the email is blank.
        """
        user = self._storage.sign_up(
            User(first_name=first_name, last_name=last_name, email=email)
        )
        guest_messages = list(self.messages)
        self.authenticate(user, guest_messages)
        self._storage.clear_guest_message_count()
        if not guest_messages:
            self._storage.clear_recovery()
        return user

    def login(self, email: str) -> bool:
        """Sign in by email lookup. Returns False for unknown emails."""
        user = self._storage.login(email)
        if user is None:
            return False
        self.authenticate(user)
        return True

    def logout(self) -> None:
        self._storage.logout()
        self.user = None
        self.messages = []
        self.active_chat_id = None
        self.chat_history = []
        self.follow_up_prompts = []
        self.view = "auth"
        self._notify()

    def continue_as_guest(self) -> None:
        self.guest_message_count = self._storage.guest_message_count()
        self.view = "chat"
        self._notify()

    # === Chat navigation ===

    def new_chat(self) -> None:
        self.active_chat_id = None
        self.messages = []
        self.follow_up_prompts = []
        self.error_banner = None
        self.show_book_summary = True
        self._storage.clear_recovery()
        self._notify()

    def select_chat(self, chat_id: str) -> None:
        chat = self._find_chat(chat_id)
        if chat is None:
            logger.warning(f"Selected chat not found: {chat_id}")
            return

        self.active_chat_id = chat_id
        self.messages = list(chat.messages)
        self.follow_up_prompts = []
        self.show_book_summary = False
        if self.user is not None:
            self._storage.remember_last_active(self.user.email, chat_id)
        self._save_recovery()
        self._notify()

    def delete_chat(self, chat_id: str) -> None:
        self.chat_history = [c for c in self.chat_history if c.id != chat_id]
        self._persist_history()
        if self.active_chat_id == chat_id:
            self.new_chat()
        else:
            self._notify()

    # === Messaging ===

    def topic_prompt(self, suggestion: Suggestion) -> str:
        """Pick one of a shortcut's prompts at random."""
        return random.choice(suggestion.prompts)

    async def send_topic(self, suggestion: Suggestion) -> None:
        await self.send_message(self.topic_prompt(suggestion))

    async def send_book_summary(self) -> None:
        await self.send_message(BOOK_SUMMARY_ACTION_PROMPT, book_summary=True)

    async def send_message(
        self,
        text: str,
        attachment: FilePart | None = None,
        book_summary: bool = False,
    ) -> None:
        """Send a message and stream the coach's reply into the conversation.

        Ignored when there is nothing to send, a reply is already streaming,
        or the guest quota is used up. Failures replace the pending reply
        with an apology that includes the error. The finished reply is saved
        to the chat it was sent from even if another chat is opened, or the
        user signs out, before it arrives.
        """
        self.follow_up_prompts = []
        self.error_banner = None
        if book_summary:
            self.show_book_summary = False
        if (not text.strip() and attachment is None) or self.is_loading or self.is_chat_locked:
            self._notify()
            return

        parts: list[TextPart | FilePart] = []
        if text.strip():
            parts.append(TextPart(text=text))
        if attachment is not None:
            parts.append(attachment)

        user_message = Message(role=Role.USER, parts=parts, timestamp=_now_ms())
        placeholder = Message(role=Role.MODEL, parts=[TextPart(text="")], timestamp=_now_ms())
        current = [*self.messages, user_message]
        self.messages = [*current, placeholder]
        self.is_loading = True

        if self.is_authenticated and self.active_chat_id is None:
            session = ChatSession(
                id=str(_now_ms()),
                title=derive_title(user_message, NEW_CHAT_TITLE_LENGTH, "New Chat"),
                messages=current,
            )
            self.active_chat_id = session.id
            self.chat_history.insert(0, session)
            self._persist_history()
        elif self.is_authenticated:
            self._update_chat(self.active_chat_id, current)
            self._persist_history()

        # The reply belongs to this user and chat even if the page moves on
        owner = self.user
        chat_id = self.active_chat_id
        conversation = self.messages
        self._notify()

        def still_open() -> bool:
            return self.messages is conversation

        try:
            buffer = ""
            async for chunk in self._streamer(current, book_summary):
                buffer += chunk
                placeholder.parts = [TextPart(text=visible_stream_text(buffer))]
                self._notify()

            final_text, prompts = extract_suggestions(buffer)
            final_message = Message(
                role=Role.MODEL, parts=[TextPart(text=final_text)], timestamp=_now_ms()
            )

            if owner is not None:
                self._store_reply(owner, chat_id, [*current, final_message])
            elif self.user is None:
                self.guest_message_count += 1
                self._storage.set_guest_message_count(self.guest_message_count)

            if still_open():
                self.follow_up_prompts = prompts
                self.messages = [*current, final_message]
            else:
                logger.info("Reply finished after the conversation was closed")

        except ChatStreamError as e:
            logger.warning(f"Chat response failed: {e}")
            if still_open():
                self.error_banner = str(e)
                error_message = Message(
                    role=Role.MODEL,
                    parts=[TextPart(text=f"Sorry, something went wrong: {e}")],
                    timestamp=_now_ms(),
                )
                self.messages = [*current, error_message]
        finally:
            self.is_loading = False
            self._save_recovery()
            self._notify()
