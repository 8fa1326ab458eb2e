# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Turning free-form text input into a content tree.

This is the bridge between what a person types into a form (a textarea
and a few comma-separated address fields) and the structures the
serializer and link builder work with.

Body text conventions:

- Each line ending between two lines of content becomes a ``LineBreak``.
  Blank lines do not produce extra nodes; they widen the pending break.
- Lines starting with tabs become an ``IndentBlock`` of
  ``tabs * tab_width`` spaces.
- Lines starting with ``- ``, ``* `` or ``1. `` become list items.  Their
  leading whitespace (tabs, or ``tab_width`` spaces per level) selects the
  nesting depth, and consecutive item lines form a single list.
"""

import re
from dataclasses import dataclass

from mailto.body import (
    INDENT_SPACING_DEFAULT,
    ContentNode,
    IndentBlock,
    LineBreak,
    ListBlock,
    ListItem,
    Root,
    Text,
)


_LIST_ITEM_PATTERN = re.compile(r"^(?:[-*]|(\d+)\.)\s+(\S.*)$")


@dataclass(frozen=True)
class _ListEntry:
    depth: int
    ordered: bool
    text: str


def parse_address_list(text: str | None) -> list[str]:
    """Split comma-separated address input into a list.

    Args:
        text: Free text such as ``"a@example.com, b@example.com"``.

    Returns:
        Stripped, non-empty addresses in input order.
    """
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def compose_body(text: str, *, tab_width: int = INDENT_SPACING_DEFAULT) -> Root:
    """Build a content tree from textarea-style input.

    Args:
        text: Body text as typed, lines separated by newlines.
        tab_width: Spaces per leading tab (and per list nesting level when
            list items are indented with spaces).

    Returns:
        A ``Root`` holding text, breaks, indent blocks and lists.
    """
    nodes: list[ContentNode] = []
    pending_break = 0
    list_run: list[_ListEntry] = []

    def flush_list() -> None:
        if list_run:
            nodes.append(_build_list(list_run))
            list_run.clear()

    for line in text.replace("\r\n", "\n").split("\n"):
        if not line.strip():
            if nodes or list_run:
                pending_break += 1
            continue

        entry = _parse_list_entry(line, tab_width)
        if entry is not None and not pending_break:
            # Same list continues on the next line.
            list_run.append(entry)
            continue

        ends_with_list = bool(list_run)
        flush_list()
        if nodes:
            # A list already ends its last line, so that newline counts
            # as the first break after it.
            spacing = pending_break if ends_with_list else pending_break + 1
            if spacing:
                nodes.append(LineBreak(spacing))
        pending_break = 0

        if entry is not None:
            list_run.append(entry)
        elif line.startswith("\t"):
            tabs = len(line) - len(line.lstrip("\t"))
            nodes.append(
                IndentBlock((Text(line.strip()),), spacing=tabs * tab_width)
            )
        else:
            nodes.append(Text(line))

    flush_list()
    return Root(tuple(nodes))


def _parse_list_entry(line: str, tab_width: int) -> _ListEntry | None:
    """Recognize a bullet or numbered line and measure its depth."""
    content = line.lstrip(" \t")
    match = _LIST_ITEM_PATTERN.match(content)
    if match is None:
        return None
    leading = line[: len(line) - len(content)]
    depth = leading.count("\t") + leading.count(" ") // max(tab_width, 1)
    return _ListEntry(
        depth=depth,
        ordered=match.group(1) is not None,
        text=match.group(2),
    )


def _build_list(entries: list[_ListEntry]) -> ListBlock:
    """Nest a run of list lines by depth."""
    base = min(entry.depth for entry in entries)
    block, _ = _build_level(entries, 0, base)
    return block


def _build_level(
    entries: list[_ListEntry], start: int, depth: int
) -> tuple[ListBlock, int]:
    items: list[ListItem] = []
    ordered = entries[start].ordered
    i = start
    while i < len(entries) and entries[i].depth >= depth:
        children: list[ContentNode] = []
        if entries[i].depth == depth:
            children.append(Text(entries[i].text))
            i += 1
        if i < len(entries) and entries[i].depth > depth:
            nested, i = _build_level(entries, i, depth + 1)
            children.append(nested)
        items.append(ListItem(tuple(children)))
    return ListBlock(tuple(items), ordered=ordered), i
