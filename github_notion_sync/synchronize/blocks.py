"""Builds page content blocks and reconciles them against the blocks already on a page."""

from dataclasses import dataclass, field
from typing import Any, TypeAlias

import structlog

from github_notion_sync.synchronize.rich_text import parse_body_rich_text

ContentBlock: TypeAlias = dict[str, Any]


@dataclass
class BlockReconciliationPlan:
    """The block operations that turn a page's existing blocks into the desired blocks."""

    to_update: list[tuple[str, ContentBlock]] = field(default_factory=list)
    to_append: list[ContentBlock] = field(default_factory=list)
    to_delete: list[str] = field(default_factory=list)


def paragraph(rich_text: list[dict[str, Any]]) -> ContentBlock:
    """Build a paragraph block."""
    return {"object": "block", "type": "paragraph", "paragraph": {"rich_text": rich_text}}


def get_body_children_blocks(body: str | None, log: structlog.stdlib.BoundLogger | None = None) -> list[ContentBlock]:
    """Build the content blocks of an issue page from the issue body.

    The body currently maps onto a single paragraph block.
    """
    return [paragraph(parse_body_rich_text(body, log=log))]


def reconcile_blocks(desired: list[ContentBlock], existing: list[ContentBlock]) -> BlockReconciliationPlan:
    """Pair desired blocks with existing blocks by position.

    Overlapping positions are updated in place, surplus desired blocks are appended in
    order and surplus existing blocks are deleted. Block content is never compared.
    """
    overlap = min(len(desired), len(existing))
    return BlockReconciliationPlan(
        to_update=[(existing[index]["id"], desired[index]) for index in range(overlap)],
        to_append=list(desired[overlap:]),
        to_delete=[block["id"] for block in existing[overlap:]],
    )
