"""Unit tests for ChatController with a scripted streamer."""

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_check as check

from indie_coach.agent.prompts import BOOK_SUMMARY_ACTION_PROMPT, TOPIC_SUGGESTIONS
from indie_coach.chat.controller import (
    GUEST_MESSAGE_LIMIT,
    ChatController,
    ChatStreamError,
    derive_title,
)
from indie_coach.models.schemas import FileData, FilePart, Message, RecoverySnapshot, Role, User
from indie_coach.storage.store import CoachStorage, DuplicateAccountError


class ScriptedStreamer:
    """Yields a fixed reply and records what it was sent."""

    def __init__(self, chunks: list[str] | None = None, error: str | None = None) -> None:
        self.chunks = chunks if chunks is not None else ["Hello ", "there!"]
        self.error = error
        self.calls: list[tuple[list[Message], bool]] = []

    async def __call__(self, messages: list[Message], book_summary: bool) -> AsyncIterator[str]:
        self.calls.append((messages, book_summary))
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise ChatStreamError(self.error)


class HeldStreamer(ScriptedStreamer):
    """Waits for the test to release it before replying."""

    def __init__(self, chunks: list[str] | None = None, error: str | None = None) -> None:
        super().__init__(chunks, error)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def __call__(self, messages: list[Message], book_summary: bool) -> AsyncIterator[str]:
        self.started.set()
        await self.release.wait()
        async for chunk in super().__call__(messages, book_summary):
            yield chunk


@pytest.fixture
def streamer() -> ScriptedStreamer:
    return ScriptedStreamer()


@pytest.fixture
def controller(storage: CoachStorage, streamer: ScriptedStreamer) -> ChatController:
    return ChatController(storage, streamer)


def register(storage: CoachStorage, email: str = "mira@example.com") -> User:
    user = storage.sign_up(User(first_name="Mira", last_name="Sol", email=email))
    storage.logout()
    return user


class TestDeriveTitle:
    def test_uses_text_cut_to_length(self, make_message) -> None:
        message = make_message("user", "How do I register my songs with a PRO?")

        assert derive_title(message, 10, "New Chat") == "How do I r"

    def test_falls_back_to_file_name(self, make_message) -> None:
        message = make_message("user", file=("contract.pdf", "application/pdf", "QUJD"))

        assert derive_title(message, 30, "New Chat") == "contract.pdf"

    def test_fallback_without_message(self) -> None:
        assert derive_title(None, 30, "Imported Chat") == "Imported Chat"


class TestGuestMessaging:
    async def test_send_streams_reply_and_counts_guest_message(
        self, controller: ChatController, storage: CoachStorage, streamer: ScriptedStreamer
    ) -> None:
        controller.continue_as_guest()

        await controller.send_message("What is a PRO?")

        check.equal([m.role for m in controller.messages], [Role.USER, Role.MODEL])
        check.equal(controller.messages[1].text(), "Hello there!")
        check.is_false(controller.is_loading)
        check.equal(controller.guest_message_count, 1)
        check.equal(storage.guest_message_count(), 1)
        check.equal(len(streamer.calls), 1)
        check.equal(streamer.calls[0][0][-1].first_text(), "What is a PRO?")

    async def test_suggestions_become_follow_up_prompts(
        self, storage: CoachStorage
    ) -> None:
        streamer = ScriptedStreamer(["Answer.", "[SUGGESTIONS]Next?|", "More?[/SUGGESTIONS]"])
        controller = ChatController(storage, streamer)

        await controller.send_message("Hi")

        assert controller.messages[-1].text() == "Answer."
        assert controller.follow_up_prompts == ["Next?", "More?"]

    async def test_placeholder_hides_partial_suggestions_while_streaming(
        self, storage: CoachStorage
    ) -> None:
        seen: list[str] = []
        streamer = ScriptedStreamer(["Answer ", "[SUGG", "ESTIONS]a|b[/SUGGESTIONS]"])

        def capture() -> None:
            if controller.is_loading:
                seen.append(controller.messages[-1].text())

        controller = ChatController(storage, streamer, on_change=capture)

        await controller.send_message("Hi")

        assert seen == ["", "Answer ", "Answer ", "Answer "]

    async def test_guest_is_locked_after_limit(
        self, controller: ChatController, streamer: ScriptedStreamer
    ) -> None:
        for i in range(GUEST_MESSAGE_LIMIT):
            await controller.send_message(f"question {i}")

        assert controller.is_chat_locked

        await controller.send_message("one more")

        assert len(streamer.calls) == GUEST_MESSAGE_LIMIT
        assert len(controller.messages) == GUEST_MESSAGE_LIMIT * 2

    async def test_blank_message_is_ignored(
        self, controller: ChatController, streamer: ScriptedStreamer
    ) -> None:
        await controller.send_message("   ")

        assert controller.messages == []
        assert streamer.calls == []

    async def test_attachment_only_message_is_sent(
        self, controller: ChatController, streamer: ScriptedStreamer
    ) -> None:
        attachment = FilePart(file=FileData(name="demo.txt", mime_type="text/plain", data="QUJD"))

        await controller.send_message("", attachment)

        sent = streamer.calls[0][0][-1]
        assert sent.parts == [attachment]

    async def test_stream_failure_replaces_placeholder(self, storage: CoachStorage) -> None:
        streamer = ScriptedStreamer(["partial"], error="API key is missing")
        controller = ChatController(storage, streamer)

        await controller.send_message("Hi")

        check.equal(len(controller.messages), 2)
        check.equal(
            controller.messages[-1].text(), "Sorry, something went wrong: API key is missing"
        )
        check.equal(controller.error_banner, "API key is missing")
        check.equal(controller.guest_message_count, 0)
        check.is_false(controller.is_loading)

    async def test_guest_recovery_snapshot_is_saved(
        self, controller: ChatController, storage: CoachStorage
    ) -> None:
        await controller.send_message("Hi")

        snapshot = storage.load_recovery()
        assert snapshot is not None
        assert snapshot.active_chat_id is None
        assert len(snapshot.messages) == 2

    async def test_book_summary_flag_is_forwarded(
        self, controller: ChatController, streamer: ScriptedStreamer
    ) -> None:
        await controller.send_book_summary()

        messages, book_summary = streamer.calls[0]
        assert book_summary is True
        assert messages[-1].first_text() == BOOK_SUMMARY_ACTION_PROMPT
        assert controller.show_book_summary is False

    async def test_topic_sends_one_of_its_prompts(
        self, controller: ChatController, streamer: ScriptedStreamer
    ) -> None:
        topic = TOPIC_SUGGESTIONS[0]

        await controller.send_topic(topic)

        assert streamer.calls[0][0][-1].first_text() in topic.prompts


class TestAuthenticatedMessaging:
    async def test_first_message_creates_saved_chat(
        self, controller: ChatController, storage: CoachStorage
    ) -> None:
        user = register(storage)
        assert controller.login(user.email)

        await controller.send_message("Plan my single release for next month please")

        check.equal(len(controller.chat_history), 1)
        chat = controller.chat_history[0]
        check.equal(chat.id, controller.active_chat_id)
        check.equal(chat.title, "Plan my single release for nex")
        check.equal(len(chat.messages), 2)
        check.equal(storage.load_history(user.email)[0].messages[1].text(), "Hello there!")
        check.equal(storage.guest_message_count(), 0)

    async def test_follow_up_updates_same_chat(
        self, controller: ChatController, storage: CoachStorage
    ) -> None:
        user = register(storage)
        controller.login(user.email)

        await controller.send_message("first")
        await controller.send_message("second")

        assert len(controller.chat_history) == 1
        assert len(storage.load_history(user.email)[0].messages) == 4

    async def test_select_and_delete_chat(
        self, controller: ChatController, storage: CoachStorage
    ) -> None:
        user = register(storage)
        controller.login(user.email)
        await controller.send_message("first chat")
        controller.new_chat()
        controller.chat_history[0].id = "older"
        await controller.send_message("second chat")

        controller.select_chat("older")
        check.equal(controller.active_chat_id, "older")
        check.equal(controller.messages[0].first_text(), "first chat")
        check.equal(storage.last_active(user.email), "older")

        controller.delete_chat("older")
        check.is_none(controller.active_chat_id)
        check.equal(controller.messages, [])
        check.equal(len(storage.load_history(user.email)), 1)

    def test_select_unknown_chat_is_ignored(self, controller: ChatController) -> None:
        controller.select_chat("missing")

        assert controller.active_chat_id is None

    def test_login_unknown_email(self, controller: ChatController) -> None:
        assert controller.login("ghost@example.com") is False
        assert controller.view == "auth"

    def test_logout_resets_state(self, controller: ChatController, storage: CoachStorage) -> None:
        user = register(storage)
        controller.login(user.email)

        controller.logout()

        check.is_none(controller.user)
        check.equal(controller.view, "auth")
        check.is_none(storage.active_user())


class TestLeavingChatWhileStreaming:
    """The reply lands in the chat it was sent from, whatever is open when it ends."""

    async def start_second_chat(
        self, controller: ChatController, streamer: HeldStreamer
    ) -> tuple[asyncio.Task, str]:
        streamer.release.set()
        await controller.send_message("first")
        controller.chat_history[0].id = "first"
        controller.active_chat_id = "first"
        controller.new_chat()

        streamer.started.clear()
        streamer.release.clear()
        task = asyncio.create_task(controller.send_message("second"))
        await streamer.started.wait()
        return task, controller.active_chat_id

    async def test_selecting_another_chat(self, storage: CoachStorage) -> None:
        user = register(storage)
        streamer = HeldStreamer()
        controller = ChatController(storage, streamer)
        controller.login(user.email)
        task, second_id = await self.start_second_chat(controller, streamer)

        controller.select_chat("first")
        streamer.release.set()
        await task

        saved = {chat.id: chat for chat in storage.load_history(user.email)}
        check.equal(controller.active_chat_id, "first")
        check.equal([m.first_text() for m in controller.messages], ["first", "Hello there!"])
        check.equal(controller.follow_up_prompts, [])
        check.equal([m.first_text() for m in saved["first"].messages], ["first", "Hello there!"])
        check.equal([m.first_text() for m in saved[second_id].messages], ["second", "Hello there!"])
        check.is_false(controller.is_loading)

    async def test_logging_out(self, storage: CoachStorage) -> None:
        user = register(storage)
        streamer = HeldStreamer()
        controller = ChatController(storage, streamer)
        controller.login(user.email)
        task, second_id = await self.start_second_chat(controller, streamer)

        controller.logout()
        streamer.release.set()
        await task

        saved = {chat.id: chat for chat in storage.load_history(user.email)}
        check.equal(controller.messages, [])
        check.equal([m.first_text() for m in saved[second_id].messages], ["second", "Hello there!"])

    async def test_failure_after_new_chat_leaves_new_chat_alone(
        self, storage: CoachStorage
    ) -> None:
        streamer = HeldStreamer(error="stream cut")
        controller = ChatController(storage, streamer)
        task = asyncio.create_task(controller.send_message("Hi"))
        await streamer.started.wait()

        controller.new_chat()
        streamer.release.set()
        await task

        check.equal(controller.messages, [])
        check.is_none(controller.error_banner)


class TestSignUp:
    async def test_guest_conversation_is_imported(
        self, controller: ChatController, storage: CoachStorage
    ) -> None:
        await controller.send_message("What does a manager do for an artist?")
        await controller.send_message("And a booking agent?")

        user = controller.sign_up("Mira", "Sol", "mira@example.com")

        check.equal(controller.user, user)
        check.equal(controller.guest_message_count, 0)
        check.equal(storage.guest_message_count(), 0)
        check.equal(len(controller.chat_history), 1)
        check.equal(controller.chat_history[0].title, "What does a manager do for an artist?")
        check.equal(controller.active_chat_id, controller.chat_history[0].id)
        check.equal(len(storage.load_history("mira@example.com")[0].messages), 4)

    def test_sign_up_without_guest_messages(
        self, controller: ChatController, storage: CoachStorage
    ) -> None:
        controller.sign_up("Mira", "Sol", "mira@example.com")

        assert controller.chat_history == []
        assert controller.messages == []
        assert storage.load_recovery() is None

    def test_duplicate_sign_up_raises(
        self, controller: ChatController, storage: CoachStorage
    ) -> None:
        register(storage, "mira@example.com")

        with pytest.raises(DuplicateAccountError):
            controller.sign_up("Other", "Person", "MIRA@example.com")
        assert controller.user is None


class TestRestore:
    def test_restores_active_user(self, storage: CoachStorage, streamer) -> None:
        storage.sign_up(User(first_name="Mira", email="mira@example.com"))
        controller = ChatController(storage, streamer)

        controller.restore()

        assert controller.user is not None
        assert controller.view == "chat"

    def test_restores_guest_conversation(
        self, storage: CoachStorage, streamer, make_message
    ) -> None:
        messages = [make_message("user", "hi"), make_message("model", "hello")]
        storage.save_recovery(RecoverySnapshot(active_chat_id=None, messages=messages))
        storage.set_guest_message_count(2)
        controller = ChatController(storage, streamer)

        controller.restore()

        check.equal(controller.messages, messages)
        check.equal(controller.view, "chat")
        check.equal(controller.guest_message_count, 2)

    def test_restores_open_chat_for_user(
        self, storage: CoachStorage, streamer, make_message
    ) -> None:
        from indie_coach.models.schemas import ChatSession

        messages = [make_message("user", "hi"), make_message("model", "hello")]
        user = storage.sign_up(User(email="mira@example.com"))
        storage.save_history(user.email, [ChatSession(id="7", title="hi", messages=messages)])
        storage.save_recovery(RecoverySnapshot(active_chat_id="7", messages=messages))
        controller = ChatController(storage, streamer)

        controller.restore()

        assert controller.active_chat_id == "7"
        assert controller.messages == messages

    def test_recovery_for_deleted_chat_is_ignored(
        self, storage: CoachStorage, streamer, make_message
    ) -> None:
        storage.sign_up(User(email="mira@example.com"))
        storage.save_recovery(
            RecoverySnapshot(active_chat_id="gone", messages=[make_message("user", "hi")])
        )
        controller = ChatController(storage, streamer)

        controller.restore()

        assert controller.active_chat_id is None
        assert controller.messages == []

    def test_fresh_visitor_stays_on_auth(self, storage: CoachStorage, streamer) -> None:
        controller = ChatController(storage, streamer)

        controller.restore()

        assert controller.view == "auth"
