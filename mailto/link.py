# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Building ``mailto:`` URIs from recipients and header fields.

The URI has the shape::

    mailto:<to,to,...>[?key=value&key=value...]

Recipients are joined with commas as given.  Header values are encoded
the way browsers encode URI components, keys are written as-is, and the
headers always appear in the order ``subject, cc, bcc, body``.  Multi-valued
headers repeat their key once per address.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from urllib.parse import quote


#: Header keys in the order they are written to the query string.
HEADER_ORDER = ("subject", "cc", "bcc", "body")

#: Headers that may carry several values.
MULTI_VALUED_HEADERS = frozenset({"cc", "bcc"})

# Characters encodeURIComponent leaves alone on top of quote()'s defaults.
_COMPONENT_SAFE = "!*'()"


@dataclass(frozen=True)
class MailHeaders:
    """Optional header fields of a mailto link.

    Attributes:
        subject: Subject line.
        cc: Addresses to copy, in order.
        bcc: Addresses to blind copy, in order.
        body: Plain-text message body (usually from ``serialize``).
    """

    subject: str | None = None
    cc: tuple[str, ...] = ()
    bcc: tuple[str, ...] = ()
    body: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "MailHeaders":
        """Build headers from a plain mapping, ignoring unknown keys."""
        subject = raw.get("subject")
        body = raw.get("body")
        return cls(
            subject=str(subject) if subject is not None else None,
            cc=tuple(normalize_recipients(raw.get("cc"))),
            bcc=tuple(normalize_recipients(raw.get("bcc"))),
            body=str(body) if body is not None else None,
        )


def normalize_recipients(value: str | Iterable[str] | None) -> list[str]:
    """Normalize a recipient value to a list of addresses.

    A bare string becomes a one-element list and ``None`` an empty list.
    Entries are neither trimmed nor deduplicated.

    Args:
        value: A single address, a sequence of addresses, or None.

    Returns:
        List of address strings.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def encode_component(value: str) -> str:
    """Percent-encode a value like JavaScript's ``encodeURIComponent``."""
    return quote(value, safe=_COMPONENT_SAFE)


def to_search_string(
    headers: MailHeaders | Mapping[str, object] | None = None,
) -> str:
    """Convert header fields into a mailto query string.

    Empty values are left out entirely.

    Args:
        headers: Header fields, either as ``MailHeaders`` or a mapping
            with the same keys.  None means no headers.

    Returns:
        ``&``-joined ``key=value`` pairs without a leading ``?``.
    """
    if headers is None:
        return ""
    if not isinstance(headers, MailHeaders):
        headers = MailHeaders.from_mapping(headers)

    pairs: list[str] = []
    for key in HEADER_ORDER:
        value = getattr(headers, key)
        if key in MULTI_VALUED_HEADERS:
            values = list(value)
        else:
            values = [value] if value else []
        for item in values:
            if item:
                pairs.append(f"{key}={encode_component(item)}")
    return "&".join(pairs)


def build_link(
    recipients: str | Iterable[str] | None,
    headers: MailHeaders | Mapping[str, object] | None = None,
) -> str:
    """Create a mailto link for the given recipients and headers.

    Args:
        recipients: Recipient address or addresses.  Not encoded.
        headers: Optional header fields.

    Returns:
        The mailto URI, without a trailing ``?`` when there are no
        headers to write.
    """
    link = f"mailto:{','.join(normalize_recipients(recipients))}"
    params = to_search_string(headers)
    if params:
        link += f"?{params}"
    return link
