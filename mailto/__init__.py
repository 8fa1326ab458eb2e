# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Structured email bodies and mailto links.

- Content tree and plain-text serializer (``serialize``)
- mailto URI builder (``build_link``)
- Trigger binding, direct or obfuscated (``MailtoControl``)
- Free-text composer and YAML message definitions
"""

from mailto.body import (
    IndentBlock,
    LineBreak,
    ListBlock,
    ListItem,
    Root,
    Text,
    serialize,
)
from mailto.composer import compose_body, parse_address_list
from mailto.config import ConfigError, MessageConfig
from mailto.link import (
    MailHeaders,
    build_link,
    normalize_recipients,
    to_search_string,
)
from mailto.trigger import BoundTrigger, MailtoControl, Trigger


__all__ = [
    "BoundTrigger",
    "ConfigError",
    "IndentBlock",
    "LineBreak",
    "ListBlock",
    "ListItem",
    "MailHeaders",
    "MailtoControl",
    "MessageConfig",
    "Root",
    "Text",
    "Trigger",
    "build_link",
    "compose_body",
    "normalize_recipients",
    "parse_address_list",
    "serialize",
    "to_search_string",
]
