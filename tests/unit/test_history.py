"""Unit tests for chat history normalization and conversion."""

import base64

import pytest_check as check
from agno.media import File, Image

from indie_coach.agent.history import (
    alternate_roles,
    to_agent_message,
    to_agent_messages,
    with_book_summary_context,
)
from indie_coach.agent.prompts import BOOK_SUMMARY_ACKNOWLEDGEMENT
from indie_coach.models.schemas import Role

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"
PNG_B64 = base64.b64encode(PNG_BYTES).decode()


class TestAlternateRoles:
    def test_keeps_first_of_each_run(self, make_message) -> None:
        history = [
            make_message("user", "a"),
            make_message("user", "b"),
            make_message("model", "c"),
            make_message("model", "d"),
            make_message("user", "e"),
        ]

        result = alternate_roles(history)

        assert [m.first_text() for m in result] == ["a", "c", "e"]

    def test_drops_trailing_model_message(self, make_message) -> None:
        history = [make_message("user", "a"), make_message("model", "b")]

        result = alternate_roles(history)

        assert [m.first_text() for m in result] == ["a"]

    def test_leading_model_message_is_kept(self, make_message) -> None:
        history = [make_message("model", "hello"), make_message("user", "hi")]

        result = alternate_roles(history)

        assert [m.role for m in result] == [Role.MODEL, Role.USER]

    def test_empty_when_only_model_messages(self, make_message) -> None:
        assert alternate_roles([make_message("model", "x")]) == []
        assert alternate_roles([]) == []


class TestToAgentMessage:
    def test_joins_text_parts_with_blank_line(self, make_message) -> None:
        message = make_message("user", "first")
        message.parts.append(message.parts[0].model_copy(update={"text": "second"}))

        result = to_agent_message(message)

        check.equal(result.role, "user")
        check.equal(result.content, "first\n\nsecond")

    def test_model_role_maps_to_assistant(self, make_message) -> None:
        assert to_agent_message(make_message("model", "ok")).role == "assistant"

    def test_image_attachment_becomes_image(self, make_message) -> None:
        message = make_message("user", "look", file=("cover.png", "image/png", PNG_B64))

        result = to_agent_message(message)

        check.equal(len(result.images), 1)
        check.is_instance(result.images[0], Image)
        check.equal(result.images[0].content, PNG_BYTES)
        check.is_none(result.files)

    def test_other_attachment_becomes_file(self, make_message) -> None:
        data = base64.b64encode(b"%PDF-1.4 contract").decode()
        message = make_message("user", "review", file=("deal.pdf", "application/pdf", data))

        result = to_agent_message(message)

        check.equal(len(result.files), 1)
        check.is_instance(result.files[0], File)
        check.equal(result.files[0].filename, "deal.pdf")
        check.is_none(result.images)

    def test_stripped_file_is_skipped(self, make_message) -> None:
        message = make_message("user", "old", file=("cover.png", "image/png", None))

        result = to_agent_message(message)

        assert result.images is None
        assert result.content == "old"

    def test_invalid_base64_is_skipped(self, make_message) -> None:
        message = make_message("user", "bad", file=("cover.png", "image/png", "not base64!!"))

        result = to_agent_message(message)

        assert result.images is None


def test_to_agent_messages_normalizes_first(make_message) -> None:
    history = [make_message("user", "a"), make_message("user", "b")]

    result = to_agent_messages(history)

    assert [m.content for m in result] == ["a"]


def test_book_summary_context_precedes_conversation(make_message) -> None:
    history = [make_message("user", "What is a 360 deal?")]

    result = with_book_summary_context(history)

    check.equal([m.role for m in result], [Role.USER, Role.MODEL, Role.USER])
    check.is_in("All About the Music Business", result[0].first_text())
    check.equal(result[1].first_text(), BOOK_SUMMARY_ACKNOWLEDGEMENT)
    check.equal(result[2].first_text(), "What is a 360 deal?")
