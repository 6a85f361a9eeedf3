from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, MutableMapping
from email.message import Message

# Get logger for this module.
logger = logging.getLogger(__name__)

# fmt: off
# Header field names are RFC 7230 tokens: alphanumerics plus these specials.
TOKEN_CHARS_SET = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789"
    "!#$%&'*+-.^_`|~")
# fmt: on

HTAB = "\t"


def is_valid_header_name(name: str) -> bool:
    return len(name) > 0 and all(c in TOKEN_CHARS_SET for c in name)


def is_valid_header_value(value: str) -> bool:
    # Visible ASCII, space and horizontal tab only.
    return all(" " <= c <= "~" or c == HTAB for c in value)


class Headers(MutableMapping[str, str]):
    """
    An ordered collection of header fields with case-insensitive names.

    Setting a name that is already present replaces its value without
    changing its position, so the last write for a given name wins.  The
    name is reported with the spelling it was most recently written with.
    """

    __slots__ = ("_store",)

    def __init__(self, items: Mapping[str, str] | list[tuple[str, str]] | None = None) -> None:
        self._store: dict[str, tuple[str, str]] = {}
        if items is not None:
            self.update(items)

    def __getitem__(self, name: str) -> str:
        return self._store[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        self._store[name.lower()] = (name, value)

    def __delitem__(self, name: str) -> None:
        del self._store[name.lower()]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.lower() in self._store

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    @property
    def raw(self) -> list[tuple[str, str]]:
        """The (name, value) pairs, in insertion order."""
        return list(self._store.values())

    def copy(self) -> Headers:
        return Headers(self.raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        theirs = {str(k).lower(): v for k, v in other.items()}
        return {k: v for k, (_, v) in self._store.items()} == theirs

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.raw!r})"


def parse_header_block(block: bytes) -> Headers:
    """
    Turns the bytes before a part's blank line into a :class:`Headers`.

    This is deliberately lenient: a block that is not valid UTF-8 yields no
    headers at all, and any line without a colon, with an invalid name or
    with a value containing control characters is dropped.  None of these
    raise, since the body is what the caller is after.
    """
    headers = Headers()

    try:
        text = block.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Header block is not valid UTF-8, ignoring %d bytes", len(block))
        return headers

    for line in text.strip().split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if not line:
            continue

        name, sep, value = line.partition(":")
        value = value.strip()
        if not sep or not is_valid_header_name(name) or not is_valid_header_value(value):
            logger.debug("Dropping unparseable header line %r", line)
            continue

        headers[name] = value

    return headers


def parse_options_header(value: str | bytes | None) -> tuple[str, dict[str, str]]:
    """
    Parses a Content-Type like header into a value in the following format:
        (content_type, {parameters})

    The content type and parameter names are lower-cased, quoted values are
    unquoted and RFC 2231 encoded values are decoded.
    """
    if not value:
        return ("", {})

    if isinstance(value, bytes):
        value = value.decode("latin-1")

    # If we have no options, return the string as-is.
    if ";" not in value:
        return (value.lower().strip(), {})

    # The email package knows how to split and unquote MIME parameters.
    message = Message()
    message["content-type"] = value
    params = message.get_params()
    assert params, "At least the content type value should be present"
    ctype = params.pop(0)[0].lower().strip()
    options: dict[str, str] = {}
    for key, param in params:
        if isinstance(param, tuple):
            param = param[-1]
        options[key.lower()] = param
    return ctype, options
