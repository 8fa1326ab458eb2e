# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Content tree for email bodies and its plain-text serializer.

A message body is described as a tree of small, immutable nodes.  The
serializer walks the tree once (depth-first, pre-order) and flattens it
into the plain text that ends up in the ``body`` header of a mailto link.

Rendering rules at nesting level ``L``:

- ``Text`` → value, unmodified
- ``LineBreak(n)`` → ``n`` newlines
- ``IndentBlock(spacing)`` → ``spacing`` spaces, then children at ``L``
- ``ListBlock`` → starts on its own line, renders ``ListItem`` children
- ``ListItem`` → ``L * 4`` spaces + ``"- "`` + text per text child, nested
  lists at ``L + 1``, then a newline
- ``Root`` → children, result stripped of surrounding whitespace

Unknown or misplaced nodes are dropped without error.
"""

from collections.abc import Iterable
from dataclasses import dataclass


#: Spaces per list nesting level, and the default ``IndentBlock`` width.
INDENT_SPACING_DEFAULT = 4

#: Default number of newlines emitted by ``LineBreak``.
BREAK_SPACING_DEFAULT = 1

#: Prefix written before each list item's text.
LIST_ITEM_PREFIX = "- "


@dataclass(frozen=True)
class Text:
    """Literal text, emitted verbatim."""

    value: str


@dataclass(frozen=True)
class LineBreak:
    """One or more forced line breaks."""

    spacing: int = BREAK_SPACING_DEFAULT


@dataclass(frozen=True)
class IndentBlock:
    """A one-time space prefix followed by its children.

    The prefix does not carry over to nested lists, and nested blocks do
    not add up: each block's ``spacing`` stands on its own.
    """

    children: tuple["ContentNode", ...] = ()
    spacing: int = INDENT_SPACING_DEFAULT


@dataclass(frozen=True)
class ListItem:
    """A list entry holding text and nested lists."""

    children: tuple["ContentNode", ...] = ()


@dataclass(frozen=True)
class ListBlock:
    """A bulleted (or numbered) list of ``ListItem`` children.

    ``ordered`` is kept for callers that care; both kinds render with the
    same ``"- "`` prefix.
    """

    children: tuple["ContentNode", ...] = ()
    ordered: bool = False


@dataclass(frozen=True)
class Root:
    """Top-level container for a message body."""

    children: tuple["ContentNode", ...] = ()


ContentNode = Text | LineBreak | IndentBlock | ListBlock | ListItem | Root


def serialize(root: object, start_level: int = 0) -> str:
    """Flatten a content tree into plain text.

    Args:
        root: A ``Root`` (or any single node), or an iterable of nodes.
            Plain strings are treated as ``Text``.
        start_level: List nesting level to start from.

    Returns:
        The flattened body with leading/trailing whitespace removed.
    """
    writer = _BodyWriter()
    if isinstance(root, Iterable) and not isinstance(root, str):
        for node in root:
            writer.render(node, start_level)
    else:
        writer.render(root, start_level)
    return writer.get_text().strip()


class _BodyWriter:
    """Single output buffer shared by one serialization pass."""

    def __init__(self) -> None:
        self._output: list[str] = []

    def get_text(self) -> str:
        return "".join(self._output)

    def render(self, node: object, level: int) -> None:
        """Render any node at the given nesting level."""
        if isinstance(node, str):
            self._output.append(node)
        elif isinstance(node, Text):
            self._output.append(node.value)
        elif isinstance(node, LineBreak):
            self._output.append("\n" * node.spacing)
        elif isinstance(node, IndentBlock):
            self._output.append(" " * node.spacing)
            for child in node.children:
                self.render(child, level)
        elif isinstance(node, ListBlock):
            self._render_list(node, level)
        elif isinstance(node, ListItem):
            self._render_item(node, level)
        elif isinstance(node, Root):
            for child in node.children:
                self.render(child, level)
        # Anything else contributes nothing.

    def _render_list(self, block: ListBlock, level: int) -> None:
        """Render a list, making sure it starts on a fresh line."""
        last = self._last_char()
        if last and last != "\n":
            self._output.append("\n")
        for child in block.children:
            if isinstance(child, ListItem):
                self._render_item(child, level)

    def _render_item(self, item: ListItem, level: int) -> None:
        """Render one list item and terminate its line."""
        indent = " " * (level * INDENT_SPACING_DEFAULT)
        for child in item.children:
            if isinstance(child, ListBlock):
                self._render_list(child, level + 1)
            elif isinstance(child, Text):
                self._output.append(f"{indent}{LIST_ITEM_PREFIX}{child.value}")
            elif isinstance(child, str):
                self._output.append(f"{indent}{LIST_ITEM_PREFIX}{child}")
        if self._last_char() != "\n":
            self._output.append("\n")

    def _last_char(self) -> str:
        # Empty chunks from "" text do not count.
        for chunk in reversed(self._output):
            if chunk:
                return chunk[-1]
        return ""
