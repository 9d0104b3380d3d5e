"""Converts GitHub issue bodies into Notion rich text."""

import re
from typing import Any

import structlog
from markdown_it import MarkdownIt
from markdown_it.token import Token

from github_notion_sync.utils.constants import NOTION_MAX_RICH_TEXT_ITEMS, NOTION_MAX_TEXT_LENGTH

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

HTML_COMMENT_PATTERN = re.compile(r"<!--[\s\S]*?-->")
HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
BLANK_LINES_PATTERN = re.compile(r"\n\s*\n")
LINE_ENDING_PATTERN = re.compile(r"\r\n?")
HEADING_PATTERN = re.compile(r"^#+[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)
IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\([^)]*\)")

_markdown = MarkdownIt("commonmark").enable("strikethrough")

# Block tokens that end a run of text, so the next text starts on a new line.
_BLOCK_CLOSING_TOKENS = {"paragraph_close", "heading_close", "fence", "code_block", "hr", "list_item_close"}

_INLINE_TOGGLES = {
    "strong_open": ("bold", 1),
    "strong_close": ("bold", -1),
    "em_open": ("italic", 1),
    "em_close": ("italic", -1),
    "s_open": ("strikethrough", 1),
    "s_close": ("strikethrough", -1),
}


def remove_html(text: str | None) -> str:
    """Remove HTML comments and tags (paired and self-closing) and collapse blank lines."""
    if not text:
        return ""
    text = LINE_ENDING_PATTERN.sub("\n", text)
    text = HTML_COMMENT_PATTERN.sub("", text)
    text = HTML_TAG_PATTERN.sub("", text)
    text = BLANK_LINES_PATTERN.sub("\n", text)
    return text.strip()


def preprocess_markdown(text: str) -> str:
    """Rewrite headings as bold text and images as their alt text followed by ``(image)``."""
    text = HEADING_PATTERN.sub(r"**\1**", text)
    text = IMAGE_PATTERN.sub(r"\1 (image)", text)
    return text


def text_span(content: str, bold: bool = False, italic: bool = False, strikethrough: bool = False, code: bool = False, url: str | None = None) -> dict[str, Any]:
    """Build a single Notion rich text object of type ``text``."""
    return {
        "type": "text",
        "text": {"content": content, "link": {"url": url} if url else None},
        "annotations": {
            "bold": bold,
            "italic": italic,
            "strikethrough": strikethrough,
            "underline": False,
            "code": code,
            "color": "default",
        },
    }


class _RichTextBuilder:
    """Accumulates rich text spans while walking markdown-it tokens."""

    def __init__(self) -> None:
        self.spans: list[dict[str, Any]] = []
        self.depth = {"bold": 0, "italic": 0, "strikethrough": 0}
        self.links: list[str | None] = []
        self.list_counters: list[int | None] = []
        self.needs_newline = False

    def add(self, content: str, code: bool = False) -> None:
        if not content:
            return
        if self.needs_newline and self.spans:
            content = "\n" + content
        self.needs_newline = False
        url = self.links[-1] if self.links else None
        span = text_span(content, code=code, url=url, **{name: count > 0 for name, count in self.depth.items()})
        last = self.spans[-1] if self.spans else None
        if last is not None and last["annotations"] == span["annotations"] and last["text"]["link"] == span["text"]["link"]:
            last["text"]["content"] += content
        else:
            self.spans.append(span)

    def walk_blocks(self, tokens: list[Token]) -> None:
        for token in tokens:
            if token.type == "bullet_list_open":
                self.list_counters.append(None)
            elif token.type == "ordered_list_open":
                self.list_counters.append(int(token.attrGet("start") or 1))
            elif token.type in ("bullet_list_close", "ordered_list_close"):
                self.list_counters.pop()
            elif token.type == "list_item_open" and self.list_counters:
                counter = self.list_counters[-1]
                if counter is None:
                    self.add("• ")
                else:
                    self.add(f"{counter}. ")
                    self.list_counters[-1] = counter + 1
            elif token.type == "inline":
                self.walk_inline(token.children or [])
            elif token.type in ("fence", "code_block"):
                self.add(token.content.rstrip("\n"), code=True)
            if token.type in _BLOCK_CLOSING_TOKENS:
                self.needs_newline = True

    def walk_inline(self, tokens: list[Token]) -> None:
        for token in tokens:
            if token.type in _INLINE_TOGGLES:
                name, step = _INLINE_TOGGLES[token.type]
                self.depth[name] += step
            elif token.type == "text":
                self.add(token.content)
            elif token.type == "code_inline":
                self.add(token.content, code=True)
            elif token.type in ("softbreak", "hardbreak"):
                self.add("\n")
            elif token.type == "link_open":
                href = str(token.attrGet("href") or "")
                self.links.append(href if href.startswith(("http://", "https://")) else None)
            elif token.type == "link_close":
                if self.links:
                    self.links.pop()
            elif token.type == "image":
                self.add(token.content)


def _split_long_spans(spans: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Split spans whose content exceeds Notion's per-object text limit."""
    result: list[dict[str, Any]] = []
    for span in spans:
        content = span["text"]["content"]
        if len(content) <= NOTION_MAX_TEXT_LENGTH:
            result.append(span)
            continue
        for start in range(0, len(content), NOTION_MAX_TEXT_LENGTH):
            chunk = {**span, "text": {**span["text"], "content": content[start : start + NOTION_MAX_TEXT_LENGTH]}}
            result.append(chunk)
    return result


def markdown_to_rich_text(text: str) -> list[dict[str, Any]]:
    """Parse markdown into Notion rich text spans, within Notion's size limits."""
    builder = _RichTextBuilder()
    builder.walk_blocks(_markdown.parse(text))
    spans = _split_long_spans(builder.spans)
    if len(spans) > NOTION_MAX_RICH_TEXT_ITEMS:
        logger.debug("Dropping rich text beyond Notion's item limit", span_count=len(spans), limit=NOTION_MAX_RICH_TEXT_ITEMS)
        spans = spans[:NOTION_MAX_RICH_TEXT_ITEMS]
    return spans


def parse_body_rich_text(body: str | None, log: structlog.stdlib.BoundLogger | None = None) -> list[dict[str, Any]]:
    """Convert an issue body into Notion rich text.

    HTML is stripped, headings become bold text and images become their alt text before
    the markdown is parsed. If parsing fails, the tag-stripped body is returned as a
    single plain span truncated to Notion's text limit, or an empty list if nothing is left.
    """
    log = log if log is not None else logger
    clean_body = remove_html(body)
    try:
        return markdown_to_rich_text(preprocess_markdown(clean_body))
    except Exception as exc:
        log.warning("Failed to parse markdown, falling back to plain text", error=str(exc), error_type=type(exc).__name__)
        if clean_body:
            return [text_span(clean_body[:NOTION_MAX_TEXT_LENGTH])]
        return []
