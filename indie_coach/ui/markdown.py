"""Markdown to HTML conversion for chat bubbles.

Supports: headings, bold, italic, inline code, code blocks, links, lists,
and the coach's ``> [!TIP]`` / ``> [!IMPORTANT]`` / ``> [!ACTION]`` callouts.
"""

import re

CALLOUTS = {
    "TIP": ("Tip", "lightbulb", "callout-tip"),
    "IMPORTANT": ("Important", "priority_high", "callout-important"),
    "ACTION": ("Action Step", "bolt", "callout-action"),
}

# Runs after HTML escaping, so ">" arrives as "&gt;".
_CALLOUT_RE = re.compile(r"^&gt;\s*\[!(TIP|IMPORTANT|ACTION)\]\s*(.*)$")
_QUOTE_RE = re.compile(r"^&gt;\s?(.*)$")
_HEADING_RE = re.compile(r"^(#{1,3})\s+(.+)$")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_SAFE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

_HEADING_CLASSES = {
    1: "text-xl font-bold mt-3 mb-2",
    2: "text-lg font-semibold mt-3 mb-1",
    3: "text-base font-semibold mt-2 mb-1",
}


def _render_callout(kind: str, body: str) -> str:
    title, icon, css = CALLOUTS[kind]
    return (
        f'<div class="callout {css}">'
        f'<div class="callout-title"><i class="material-icons">{icon}</i> {title}</div>'
        f"<div>{body}</div></div>"
    )


def _render_blocks(text: str) -> str:
    """Headings, callouts, and block quotes, one line at a time."""
    result = []
    for line in text.split("\n"):
        stripped = line.strip()
        if heading := _HEADING_RE.match(stripped):
            level = len(heading.group(1))
            result.append(
                f'<h{level} class="{_HEADING_CLASSES[level]}">{heading.group(2)}</h{level}>'
            )
        elif callout := _CALLOUT_RE.match(stripped):
            result.append(_render_callout(callout.group(1), callout.group(2)))
        elif quote := _QUOTE_RE.match(stripped):
            result.append(
                f'<blockquote class="border-l-4 pl-3 my-2 text-gray-600">{quote.group(1)}</blockquote>'
            )
        else:
            result.append(line)
    return "\n".join(result)


def _render_link(match: re.Match) -> str:
    """Only http(s) targets become links; anything else shows as its label."""
    label, url = match.group(1), match.group(2).strip()
    if not _SAFE_URL_RE.match(url):
        return label
    url = url.replace('"', "&quot;").replace("'", "&#x27;")
    return (
        f'<a href="{url}" class="text-indigo-600 underline" rel="noopener noreferrer" '
        f'target="_blank">{label}</a>'
    )


def _render_list(text: str, pattern: str, tag: str, css: str) -> str:
    lines = text.split("\n")
    in_list = False
    result = []
    for line in lines:
        stripped = line.strip()
        if re.match(pattern, stripped):
            if not in_list:
                result.append(f'<{tag} class="{css}">')
                in_list = True
            item = re.sub(pattern, "", stripped)
            result.append(f"<li>{item}</li>")
        else:
            if in_list:
                result.append(f"</{tag}>")
                in_list = False
            result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display."""
    # Escape HTML entities first
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    # Code blocks (```code```)
    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs"><code>\2</code></pre>',
        text,
    )

    # Inline code (`code`)
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )

    text = _render_blocks(text)

    # Bold (**text** or __text__)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"__(.+?)__", r"<strong>\1</strong>", text)

    # Italic (*text* or _text_), not touching list markers
    text = re.sub(r"(?<![\w*])\*(?!\s)([^*\n]+?)\*", r"<em>\1</em>", text)
    text = re.sub(r"(?<!\w)_([^_\n]+)_(?!\w)", r"<em>\1</em>", text)

    # Links [text](url)
    text = _LINK_RE.sub(_render_link, text)

    text = _render_list(
        text, r"^[-*]\s+", "ul", "list-disc list-inside my-2 space-y-1"
    )
    text = _render_list(
        text, r"^\d+\.\s+", "ol", "list-decimal list-inside my-2 space-y-1"
    )

    # Line breaks, except right after block elements
    text = re.sub(r"(</(?:h\d|ul|ol|li|div|blockquote|pre)>|<(?:ul|ol)[^>]*>)\n", r"\1", text)
    text = text.replace("\n", "<br>")

    return text
