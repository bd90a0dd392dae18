"""Parsing utilities for model output and user uploads.

Responsibilities:
    - Hiding the suggestions tag while a response streams
    - Extracting follow-up prompts from finished responses
    - Splitting responses into markdown and widget segments
    - Validating file attachments (size, type, PDF integrity)
"""

from indie_coach.parsing.attachments import AttachmentError, read_attachment
from indie_coach.parsing.tags import (
    Segment,
    SegmentKind,
    extract_suggestions,
    split_segments,
    visible_stream_text,
)

__all__ = [
    "AttachmentError",
    "Segment",
    "SegmentKind",
    "extract_suggestions",
    "read_attachment",
    "split_segments",
    "visible_stream_text",
]
