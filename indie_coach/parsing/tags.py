"""Extraction of bracketed tags from streamed model output.

The model appends follow-up prompts in a ``[SUGGESTIONS]a|b|c[/SUGGESTIONS]``
block and may embed widget JSON between ``[BUDGET_TABLE]``,
``[TICKET_ESTIMATOR]`` or ``[BRANDING_GUIDE]`` tags.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ValidationError

from indie_coach.widgets.branding_guide import BrandingGuide
from indie_coach.widgets.budget_table import BudgetTable
from indie_coach.widgets.ticket_estimator import TicketEstimatorData

logger = logging.getLogger(__name__)

SUGGESTIONS_OPEN = "[SUGGESTIONS]"
SUGGESTIONS_CLOSE = "[/SUGGESTIONS]"

_SUGGESTIONS_RE = re.compile(r"\[SUGGESTIONS\](.*?)\[/SUGGESTIONS\]", re.DOTALL)


class SegmentKind(str, Enum):
    """Kinds of content in a rendered model message."""

    TEXT = "text"
    BUDGET_TABLE = "BUDGET_TABLE"
    TICKET_ESTIMATOR = "TICKET_ESTIMATOR"
    BRANDING_GUIDE = "BRANDING_GUIDE"
    PENDING = "pending"


_WIDGET_MODELS: dict[SegmentKind, type[BaseModel]] = {
    SegmentKind.BUDGET_TABLE: BudgetTable,
    SegmentKind.TICKET_ESTIMATOR: TicketEstimatorData,
    SegmentKind.BRANDING_GUIDE: BrandingGuide,
}

_WIDGET_OPEN_RE = re.compile(r"\[(BUDGET_TABLE|TICKET_ESTIMATOR|BRANDING_GUIDE)\]")


@dataclass(frozen=True)
class Segment:
    """A piece of a model message.

    Attributes:
        kind: Text, a widget type, or a widget still being streamed.
        text: Markdown for text segments, the widget name for pending ones.
        data: Validated widget model for widget segments.
    """

    kind: SegmentKind
    text: str = ""
    data: BaseModel | None = None


def visible_stream_text(buffer: str) -> str:
    """Text to display while a response is still streaming.

    Hides everything from the suggestions tag onward, including a partial
    opening tag at the very end of the buffer.
    """
    index = buffer.find(SUGGESTIONS_OPEN)
    if index != -1:
        return buffer[:index]

    # "...[SUGG" may be the start of the tag arriving across chunks.
    for length in range(len(SUGGESTIONS_OPEN) - 1, 0, -1):
        if buffer.endswith(SUGGESTIONS_OPEN[:length]):
            return buffer[:-length]
    return buffer


def extract_suggestions(text: str) -> tuple[str, list[str]]:
    """Split a finished response into its body and follow-up prompts.

    Only the first suggestions block is used and removed.

    Returns:
        The trimmed text without the block, and the non-empty prompts. When
        no complete block exists, or the block is empty, the text is returned
        unchanged.
    """
    match = _SUGGESTIONS_RE.search(text)
    if not match or not match.group(1):
        return text, []

    prompts = [p.strip() for p in match.group(1).split("|")]
    prompts = [p for p in prompts if p]
    cleaned = (text[: match.start()] + text[match.end():]).strip()
    return cleaned, prompts


def _parse_widget(kind: SegmentKind, raw_json: str) -> BaseModel | None:
    try:
        return _WIDGET_MODELS[kind].model_validate(json.loads(raw_json))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Invalid {kind.value} block: {e}")
        return None


def split_segments(text: str) -> list[Segment]:
    """Split a model message into text and widget segments, in order.

    A widget block with invalid JSON is kept as raw text. An opening tag with
    no closing tag yet becomes a pending segment, and nothing after it is
    rendered until the block completes.
    """
    segments: list[Segment] = []
    position = 0

    while True:
        opening = _WIDGET_OPEN_RE.search(text, position)
        if not opening:
            break

        kind = SegmentKind(opening.group(1))
        closing_tag = f"[/{kind.value}]"
        close_index = text.find(closing_tag, opening.end())

        before = text[position: opening.start()]
        if before.strip():
            segments.append(Segment(SegmentKind.TEXT, before))

        if close_index == -1:
            segments.append(Segment(SegmentKind.PENDING, kind.value))
            return segments

        raw = text[opening.end(): close_index]
        data = _parse_widget(kind, raw.strip())
        if data is None:
            block = text[opening.start(): close_index + len(closing_tag)]
            segments.append(Segment(SegmentKind.TEXT, f"```\n{block}\n```"))
        else:
            segments.append(Segment(kind, data=data))
        position = close_index + len(closing_tag)

    rest = text[position:]
    if rest.strip():
        segments.append(Segment(SegmentKind.TEXT, rest))
    return segments
