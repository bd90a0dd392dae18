"""Browser-scoped persistence for accounts, chat history, and crash recovery.

Every value is a whole JSON document stored under a fixed key, in two
mappings: one that lives as long as the browser (users, active user,
history) and one that lives as long as the tab (recovery snapshot, guest
message count). Under NiceGUI these are ``app.storage.user`` and
``app.storage.tab``; tests use plain dicts.

There is no verification: logging in is an email lookup.
"""

import json
import logging
from collections.abc import MutableMapping

from pydantic import TypeAdapter, ValidationError

from indie_coach.models.schemas import ChatSession, FilePart, RecoverySnapshot, User

logger = logging.getLogger(__name__)

USERS_KEY = "indie-coach-users"
ACTIVE_USER_KEY = "indie-coach-active-user"
RECOVERY_KEY = "indie-coach-recovery-data"
GUEST_COUNT_KEY = "guestMessageCount"

_USER_LIST = TypeAdapter(list[User])
_SESSION_LIST = TypeAdapter(list[ChatSession])


class DuplicateAccountError(Exception):
    """Raised when signing up with an email that is already registered."""

    def __init__(self) -> None:
        super().__init__("An account with this email already exists. Please log in.")


def history_key(email: str) -> str:
    return f"indie-coach-history-{email}"


def last_active_key(email: str) -> str:
    return f"indie-coach-last-active-{email}"


def strip_file_data(sessions: list[ChatSession]) -> list[ChatSession]:
    """Copy sessions without base64 payloads on file parts.

    Keeps saved history small; the file name and type stay for display.
    """
    stripped: list[ChatSession] = []
    for session in sessions:
        messages = []
        for message in session.messages:
            parts = [
                p.model_copy(update={"file": p.file.model_copy(update={"data": None})})
                if isinstance(p, FilePart)
                else p
                for p in message.parts
            ]
            messages.append(message.model_copy(update={"parts": parts}))
        stripped.append(session.model_copy(update={"messages": messages}))
    return stripped


class CoachStorage:
    """Accounts, history, and recovery bookkeeping over two key-value stores.

    Args:
        browser: Store that persists across tabs and reloads.
        tab: Store scoped to a single tab.
    """

    def __init__(
        self,
        browser: MutableMapping[str, str],
        tab: MutableMapping[str, str],
    ) -> None:
        self._browser = browser
        self._tab = tab

    # === Accounts ===

    def list_users(self) -> list[User]:
        raw = self._browser.get(USERS_KEY)
        if not raw:
            return []
        try:
            return _USER_LIST.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to parse users list, starting fresh: {e}")
            return []

    def find_user(self, email: str) -> User | None:
        wanted = email.strip().lower()
        for user in self.list_users():
            if user.email.lower() == wanted:
                return user
        return None

    def sign_up(self, user: User) -> User:
        """Register a user and make them active.

        Raises:
            DuplicateAccountError: If the email is taken (case-insensitive).
        """
        if self.find_user(user.email) is not None:
            raise DuplicateAccountError()

        users = self.list_users()
        users.append(user)
        self._browser[USERS_KEY] = _USER_LIST.dump_json(users, by_alias=True).decode()
        self.set_active_user(user)
        logger.info("Registered new local account")
        return user

    def login(self, email: str) -> User | None:
        """Make the user with this email active. Returns None if unknown."""
        user = self.find_user(email)
        if user is not None:
            self.set_active_user(user)
        return user

    def logout(self) -> None:
        self._browser.pop(ACTIVE_USER_KEY, None)
        self.clear_recovery()

    def set_active_user(self, user: User) -> None:
        self._browser[ACTIVE_USER_KEY] = user.model_dump_json(by_alias=True)

    def active_user(self) -> User | None:
        """Return the signed-in user; a corrupt record is removed."""
        raw = self._browser.get(ACTIVE_USER_KEY)
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to parse active user, logging out: {e}")
            self._browser.pop(ACTIVE_USER_KEY, None)
            return None

    # === History ===

    def load_history(self, email: str) -> list[ChatSession]:
        raw = self._browser.get(history_key(email))
        if not raw:
            return []
        try:
            return _SESSION_LIST.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to parse chat history, resetting: {e}")
            return []

    def save_history(self, email: str, sessions: list[ChatSession]) -> None:
        self._browser[history_key(email)] = _SESSION_LIST.dump_json(
            strip_file_data(sessions), by_alias=True, exclude_none=True
        ).decode()

    def remember_last_active(self, email: str, chat_id: str) -> None:
        self._browser[last_active_key(email)] = chat_id

    def last_active(self, email: str) -> str | None:
        return self._browser.get(last_active_key(email))

    # === Recovery ===

    def save_recovery(self, snapshot: RecoverySnapshot) -> None:
        self._tab[RECOVERY_KEY] = snapshot.model_dump_json(by_alias=True)

    def load_recovery(self) -> RecoverySnapshot | None:
        raw = self._tab.get(RECOVERY_KEY)
        if not raw:
            return None
        try:
            return RecoverySnapshot.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to parse recovery data: {e}")
            return None

    def clear_recovery(self) -> None:
        self._tab.pop(RECOVERY_KEY, None)

    # === Guest quota ===

    def guest_message_count(self) -> int:
        raw = self._tab.get(GUEST_COUNT_KEY)
        try:
            return int(raw) if raw else 0
        except ValueError:
            return 0

    def set_guest_message_count(self, count: int) -> None:
        self._tab[GUEST_COUNT_KEY] = str(count)

    def clear_guest_message_count(self) -> None:
        self._tab.pop(GUEST_COUNT_KEY, None)
