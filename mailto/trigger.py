# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Binding a mailto link to a clickable trigger.

A ``MailtoControl`` gathers recipients, headers and a list of children.
The children are content nodes (which become the message body) plus
exactly one ``Trigger``, the element the user clicks.

Two binding modes exist:

- direct: the trigger's ``href`` is the mailto URI
- obfuscated: the trigger's ``href`` is ``"#"`` and the URI is only handed
  to the host's ``navigate`` callback when the trigger is clicked, so the
  address never appears in rendered markup

A control without a trigger renders nothing and logs an error.
"""

import html
import logging
import webbrowser
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from mailto.body import Root, serialize
from mailto.link import MailHeaders, build_link, normalize_recipients


logger = logging.getLogger(__name__)

#: Link target used in obfuscated mode.
OBFUSCATED_HREF = "#"


class ClickEvent(Protocol):
    """Host click event; only default-action suppression is needed."""

    def prevent_default(self) -> None: ...


@dataclass(frozen=True)
class Trigger:
    """The clickable element of a mailto control.

    Attributes:
        label: Visible link text.
        attributes: Extra anchor attributes (``class``, ``title``, ...).
    """

    label: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BoundTrigger:
    """A trigger with its link target (and click handler) attached.

    Attributes:
        label: Visible link text.
        attributes: Final anchor attributes, including ``href``.
        on_click: Click handler in obfuscated mode, None in direct mode.
    """

    label: str
    attributes: dict[str, str]
    on_click: Callable[[ClickEvent | None], None] | None = None

    @property
    def href(self) -> str:
        return self.attributes.get("href", "")

    def to_html(self) -> str:
        """Render the trigger as an ``<a>`` element.

        Returns:
            HTML string with escaped attributes and label.
        """
        attrs = "".join(
            f' {html.escape(name)}="{html.escape(value)}"'
            for name, value in self.attributes.items()
        )
        return f"<a{attrs}>{html.escape(self.label)}</a>"


class MailtoControl:
    """A mailto link composed of recipients, headers, body and a trigger.

    Args:
        to: Recipient address or addresses.
        children: Body content nodes and one ``Trigger``.
        subject: Optional subject line.
        cc: Address or addresses to copy.
        bcc: Address or addresses to blind copy.
        obfuscate: Keep the URI out of the trigger's markup.
        attributes: Anchor attributes applied last, over the trigger's
            own attributes and ``href``.
        navigate: Called with the URI when an obfuscated trigger is
            clicked.  Defaults to opening it with ``webbrowser``.
    """

    def __init__(
        self,
        to: str | Iterable[str],
        children: Iterable[object],
        *,
        subject: str | None = None,
        cc: str | Iterable[str] | None = None,
        bcc: str | Iterable[str] | None = None,
        obfuscate: bool = False,
        attributes: Mapping[str, str] | None = None,
        navigate: Callable[[str], object] | None = None,
    ) -> None:
        self.to = normalize_recipients(to)
        self.children = tuple(children)
        self.subject = subject
        self.cc = normalize_recipients(cc)
        self.bcc = normalize_recipients(bcc)
        self.obfuscate = obfuscate
        self.attributes = dict(attributes or {})
        self._navigate = navigate or webbrowser.open

    def headers(self) -> MailHeaders:
        """Collect the header fields, including the flattened body."""
        body = serialize(Root(self.children))
        return MailHeaders(
            subject=self.subject,
            cc=tuple(self.cc),
            bcc=tuple(self.bcc),
            body=body or None,
        )

    def link(self) -> str:
        """Return the mailto URI for this control."""
        return build_link(self.to, self.headers())

    def find_trigger(self) -> Trigger | None:
        for child in self.children:
            if isinstance(child, Trigger):
                return child
        return None

    def render(self) -> BoundTrigger | None:
        """Bind the control's URI to its trigger.

        Returns:
            The bound trigger, or None if the control has no trigger.
        """
        trigger = self.find_trigger()
        if trigger is None:
            logger.error("Trigger is required inside a mailto control.")
            return None

        mailto_link = self.link()

        if self.obfuscate:
            navigate = self._navigate

            def on_click(event: ClickEvent | None = None) -> None:
                if event is not None:
                    event.prevent_default()
                navigate(mailto_link)

            return BoundTrigger(
                label=trigger.label,
                attributes={
                    **trigger.attributes,
                    "href": OBFUSCATED_HREF,
                    **self.attributes,
                },
                on_click=on_click,
            )

        return BoundTrigger(
            label=trigger.label,
            attributes={
                **trigger.attributes,
                "href": mailto_link,
                **self.attributes,
            },
        )
