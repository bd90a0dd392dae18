"""Browser- and tab-scoped storage for accounts, history, and recovery."""

from indie_coach.storage.store import (
    ACTIVE_USER_KEY,
    GUEST_COUNT_KEY,
    RECOVERY_KEY,
    USERS_KEY,
    CoachStorage,
    DuplicateAccountError,
    history_key,
    last_active_key,
)

__all__ = [
    "ACTIVE_USER_KEY",
    "GUEST_COUNT_KEY",
    "RECOVERY_KEY",
    "USERS_KEY",
    "CoachStorage",
    "DuplicateAccountError",
    "history_key",
    "last_active_key",
]
