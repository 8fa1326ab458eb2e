# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Message definitions loaded from YAML.

A message file describes one mailto control: recipients, headers, the
body and how the trigger is bound.  ``!env`` tags resolve values from
environment variables (``.env`` files are loaded first)::

    to: [sales@example.com, support@example.com]
    subject: Meeting request
    cc: !env MAILTO_CC
    obfuscate: true
    trigger: Request a meeting
    body: |
      Dear team,

      I would like to schedule a meeting next week.

The body is either free text (parsed with ``compose_body``) or a list of
nodes::

    body:
      - text: Hello
      - break: 2
      - indent: {spacing: 8, children: [{text: Indented}]}
      - list:
          ordered: false
          items:
            - Item 1
            - [Item 2, {list: {items: [Subitem]}}]

Fields a message leaves out are taken from the defaults file at
``$XDG_CONFIG_HOME/mailto/mailto.yaml`` (typically
``~/.config/mailto/mailto.yaml``), which accepts ``subject``, ``cc``,
``bcc``, ``obfuscate`` and ``trigger``.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from platformdirs import user_config_path

from mailto.body import (
    BREAK_SPACING_DEFAULT,
    INDENT_SPACING_DEFAULT,
    ContentNode,
    IndentBlock,
    LineBreak,
    ListBlock,
    ListItem,
    Root,
    Text,
)
from mailto.composer import compose_body, parse_address_list
from mailto.dotenv_loader import load_dotenv_once
from mailto.trigger import MailtoControl, Trigger


logger = logging.getLogger(__name__)

#: Application name for XDG path resolution.
_APP_NAME = "mailto"

#: Trigger label used when neither message nor defaults name one.
DEFAULT_TRIGGER_LABEL = "Send Email"

#: Keys the defaults file may provide.
_DEFAULT_KEYS = frozenset({"subject", "cc", "bcc", "obfuscate", "trigger"})

_BOOL_TRUTHY = frozenset({"true", "1", "yes", "on"})
_BOOL_FALSY = frozenset({"false", "0", "no", "off"})


def get_config_path() -> Path:
    """Return the default defaults-file path.

    Uses XDG: ``$XDG_CONFIG_HOME/mailto/mailto.yaml``.

    Returns:
        Path to the defaults file.
    """
    return user_config_path(_APP_NAME) / "mailto.yaml"


def get_dotenv_path() -> Path:
    """Return the ``.env`` path inside the XDG config directory."""
    return user_config_path(_APP_NAME) / ".env"


class ConfigError(Exception):
    """Base exception for message configuration errors."""


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


class _EnvVar:
    """Placeholder for an unresolved ``!env VAR_NAME`` tag."""

    def __init__(self, var_name: str) -> None:
        self.var_name = var_name


def _env_constructor(loader: yaml.SafeLoader, node: yaml.Node) -> _EnvVar:
    """Handle ``!env VAR_NAME`` in YAML."""
    value = loader.construct_scalar(node)
    return _EnvVar(str(value))


def _make_loader() -> type[yaml.SafeLoader]:
    """Create a YAML loader that understands ``!env``."""

    class EnvLoader(yaml.SafeLoader):
        pass

    EnvLoader.add_constructor("!env", _env_constructor)
    return EnvLoader


def _load_yaml_mapping(path: Path) -> dict:
    """Read a YAML file that must contain a mapping."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            raw = yaml.load(f, Loader=_make_loader())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must be a YAML mapping: {path}")
    return raw


# ---------------------------------------------------------------------------
# Value resolution
# ---------------------------------------------------------------------------


def _raw_resolve(value: object) -> object:
    """Resolve ``!env`` placeholders; other values pass through.

    An unset environment variable resolves to None.
    """
    if isinstance(value, _EnvVar):
        return os.environ.get(value.var_name)
    return value


def _resolve_str(value: object, key: str) -> str | None:
    value = _raw_resolve(value)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ConfigError(f"'{key}' must be a string")
    return str(value)


def _coerce_bool(value: object, key: str) -> bool:
    """Coerce a value to bool, handling string representations."""
    if isinstance(value, bool):
        return value
    s = str(value).lower().strip()
    if s in _BOOL_TRUTHY:
        return True
    if s in _BOOL_FALSY:
        return False
    raise ConfigError(f"Cannot convert '{key}' value {value!r} to bool")


def _resolve_address_list(value: object, key: str) -> list[str]:
    """Resolve an address field given as a string or a list.

    Strings (including ``!env`` values) are split on commas.
    """
    value = _raw_resolve(value)
    if value is None:
        return []
    if isinstance(value, str):
        return parse_address_list(value)
    if isinstance(value, list):
        addresses: list[str] = []
        for item in value:
            resolved = _raw_resolve(item)
            if resolved is None:
                continue
            if isinstance(resolved, (dict, list)):
                raise ConfigError(f"'{key}' entries must be strings")
            addresses.extend(parse_address_list(str(resolved)))
        return addresses
    raise ConfigError(f"'{key}' must be a string or a list of strings")


# ---------------------------------------------------------------------------
# Body nodes
# ---------------------------------------------------------------------------


def parse_body(raw: object) -> Root:
    """Build a content tree from the ``body`` value of a message.

    Args:
        raw: Free text, a list of node mappings, or None.

    Returns:
        The body as a ``Root``.

    Raises:
        ConfigError: If a node is not understood.
    """
    raw = _raw_resolve(raw)
    if raw is None:
        return Root()
    if isinstance(raw, str):
        return compose_body(raw)
    if isinstance(raw, list):
        return Root(_parse_nodes(raw, "body"))
    raise ConfigError("'body' must be text or a list of nodes")


def _parse_nodes(raw: list, path: str) -> tuple[ContentNode, ...]:
    return tuple(
        _parse_node(item, f"{path}[{index}]") for index, item in enumerate(raw)
    )


def _parse_node(raw: object, path: str) -> ContentNode:
    """Parse a single body node.

    Strings are text; mappings have exactly one key naming the node kind.
    """
    raw = _raw_resolve(raw)
    if isinstance(raw, str):
        return Text(raw)
    if not isinstance(raw, dict) or len(raw) != 1:
        raise ConfigError(f"{path} must be text or a single-key mapping")

    kind, value = next(iter(raw.items()))
    value = _raw_resolve(value)
    if kind == "text":
        return Text("" if value is None else str(value))
    if kind == "break":
        spacing = _int_value(value, f"{path}.break", BREAK_SPACING_DEFAULT)
        if spacing < 1:
            raise ConfigError(f"{path}.break must be at least 1")
        return LineBreak(spacing)
    if kind == "indent":
        return _parse_indent(value, f"{path}.indent")
    if kind == "list":
        return _parse_list(value, f"{path}.list")
    raise ConfigError(f"{path}: unknown body node '{kind}'")


def _int_value(value: object, path: str, default: int) -> int:
    if value is None:
        return default
    try:
        return int(str(value))
    except ValueError:
        raise ConfigError(f"{path} must be an integer") from None


def _parse_indent(value: object, path: str) -> IndentBlock:
    if value is None:
        value = {}
    if not isinstance(value, dict):
        raise ConfigError(f"{path} must be a mapping")
    spacing = _int_value(
        _raw_resolve(value.get("spacing")),
        f"{path}.spacing",
        INDENT_SPACING_DEFAULT,
    )
    if spacing < 0:
        raise ConfigError(f"{path}.spacing cannot be negative")
    children = _raw_resolve(value.get("children", []))
    if children is None:
        children = []
    if isinstance(children, str):
        children = [children]
    if not isinstance(children, list):
        raise ConfigError(f"{path}.children must be a list")
    return IndentBlock(_parse_nodes(children, f"{path}.children"), spacing)


def _parse_list(value: object, path: str) -> ListBlock:
    value = _raw_resolve(value)
    if isinstance(value, list):
        value = {"items": value}
    if not isinstance(value, dict):
        raise ConfigError(f"{path} must be a mapping or a list of items")
    ordered = _raw_resolve(value.get("ordered", False))
    ordered = _coerce_bool(
        False if ordered is None else ordered, f"{path}.ordered"
    )
    raw_items = _raw_resolve(value.get("items", []))
    if not isinstance(raw_items, list):
        raise ConfigError(f"{path}.items must be a list")

    items: list[ListItem] = []
    for index, raw_item in enumerate(raw_items):
        item_path = f"{path}.items[{index}]"
        if isinstance(raw_item, list):
            items.append(ListItem(_parse_nodes(raw_item, item_path)))
        else:
            items.append(ListItem((_parse_node(raw_item, item_path),)))
    return ListBlock(tuple(items), ordered=ordered)


# ---------------------------------------------------------------------------
# Message config
# ---------------------------------------------------------------------------


def load_defaults(path: Path | None = None) -> dict[str, Any]:
    """Load the defaults file.

    Args:
        path: Explicit defaults file.  When None, the XDG location is used
            and a missing file simply means no defaults.

    Returns:
        Mapping of default field values.

    Raises:
        ConfigError: If an explicit file is missing or the file is invalid.
    """
    if path is None:
        path = get_config_path()
        if not path.exists():
            return {}

    raw = _load_yaml_mapping(path)
    unknown = set(raw) - _DEFAULT_KEYS
    if unknown:
        logger.warning(
            "Ignoring unknown keys in %s: %s", path, ", ".join(sorted(unknown))
        )
    return {key: value for key, value in raw.items() if key in _DEFAULT_KEYS}


@dataclass(frozen=True)
class MessageConfig:
    """A fully resolved message definition.

    Attributes:
        to: Recipient addresses.
        subject: Subject line.
        cc: Addresses to copy.
        bcc: Addresses to blind copy.
        body: Message body as a content tree.
        obfuscate: Whether the trigger hides the link target.
        trigger: Trigger label.
        attributes: Extra anchor attributes for the trigger.
    """

    to: tuple[str, ...]
    subject: str | None = None
    cc: tuple[str, ...] = ()
    bcc: tuple[str, ...] = ()
    body: Root = field(default_factory=Root)
    obfuscate: bool = False
    trigger: str = DEFAULT_TRIGGER_LABEL
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_yaml(
        cls, path: Path, defaults_path: Path | None = None
    ) -> "MessageConfig":
        """Load a message definition from a YAML file.

        Args:
            path: Message file.
            defaults_path: Defaults file.  Defaults to the XDG location.

        Returns:
            MessageConfig instance.

        Raises:
            ConfigError: If a file is missing or values are invalid.
        """
        load_dotenv_once()
        defaults = load_defaults(defaults_path)
        raw = _load_yaml_mapping(path)
        return cls.from_raw(raw, defaults)

    @classmethod
    def from_raw(
        cls, raw: dict, defaults: dict[str, Any] | None = None
    ) -> "MessageConfig":
        """Build a message from parsed (but unresolved) YAML data."""
        merged = {**(defaults or {}), **raw}

        to = _resolve_address_list(merged.get("to"), "to")
        if not to:
            raise ConfigError("Required config 'to' is missing")

        attributes = merged.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise ConfigError("'attributes' must be a mapping")

        trigger = _resolve_str(merged.get("trigger"), "trigger")

        return cls(
            to=tuple(to),
            subject=_resolve_str(merged.get("subject"), "subject"),
            cc=tuple(_resolve_address_list(merged.get("cc"), "cc")),
            bcc=tuple(_resolve_address_list(merged.get("bcc"), "bcc")),
            body=parse_body(merged.get("body")),
            obfuscate=_coerce_bool(
                _raw_resolve(merged.get("obfuscate", False)) or False,
                "obfuscate",
            ),
            trigger=trigger or DEFAULT_TRIGGER_LABEL,
            attributes={
                str(key): str(resolved)
                for key, value in attributes.items()
                if (resolved := _raw_resolve(value)) is not None
            },
        )

    def to_control(
        self,
        *,
        obfuscate: bool | None = None,
        navigate: Callable[[str], object] | None = None,
    ) -> MailtoControl:
        """Create the mailto control described by this message.

        Args:
            obfuscate: Override the configured binding mode.
            navigate: Click-time navigation callback for obfuscated mode.
        """
        return MailtoControl(
            self.to,
            (*self.body.children, Trigger(self.trigger)),
            subject=self.subject,
            cc=self.cc,
            bcc=self.bcc,
            obfuscate=self.obfuscate if obfuscate is None else obfuscate,
            attributes=self.attributes,
            navigate=navigate,
        )

    def link(self) -> str:
        """Return the mailto URI for this message."""
        return self.to_control().link()
