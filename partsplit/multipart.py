from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import MalformedMultipart, MalformedPart, PartsplitError
from .headers import Headers, parse_header_block, parse_options_header

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterator, Mapping
    from typing import Union

    BufferLike = Union[bytes, bytearray, memoryview]

# Get logger for this module.
logger = logging.getLogger(__name__)

# Every boundary in the body is the caller's boundary prefixed with this.
BOUNDARY_PREFIX = b"--"

# The marker we search for inside a Content-Type value.
BOUNDARY_MARKER = b"boundary="

# Separates a part's header block from its body.
HEADERS_END = b"\r\n\r\n"


def _to_bytes(value: str) -> bytes:
    # Latin-1 round-trips header bytes; anything beyond it is encoded as UTF-8.
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8", errors="surrogateescape")


def extract_boundary(header_value: str | bytes) -> bytes | None:
    """
    Returns everything following ``boundary=`` in the given header value, or
    None if the marker isn't there.

    The remainder is returned untouched: quotes, whitespace and any further
    parameters are the caller's problem.  Use
    :func:`partsplit.headers.parse_options_header` for a parsed value.
    """
    if isinstance(header_value, str):
        pos = header_value.find(BOUNDARY_MARKER.decode("ascii"))
        if pos == -1:
            return None
        return _to_bytes(header_value[pos + len(BOUNDARY_MARKER) :])

    pos = header_value.find(BOUNDARY_MARKER)
    if pos == -1:
        return None

    return header_value[pos + len(BOUNDARY_MARKER) :]


class Part:
    """
    One part of a multipart buffer: its headers and a copy of its body.

    A part unpacks like the pair it stands for::

        headers, body = part
    """

    __slots__ = ("_headers", "_body")

    def __init__(self, headers: Headers, body: bytes) -> None:
        self._headers = headers
        self._body = body

    @property
    def headers(self) -> Headers:
        return self._headers

    @property
    def body(self) -> bytes:
        """The raw bytes following the blank line, exactly as found."""
        return self._body

    @property
    def content_type(self) -> str | None:
        """The lower-cased media type of this part, without parameters."""
        value = self._headers.get("Content-Type")
        if value is None:
            return None
        return parse_options_header(value)[0]

    @property
    def content_id(self) -> str | None:
        return self._headers.get("Content-ID")

    def __iter__(self) -> Iterator[Headers | bytes]:
        yield self._headers
        yield self._body

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Part):
            return self.headers == other.headers and self.body == other.body
        else:
            return NotImplemented

    def __repr__(self) -> str:
        if len(self.body) > 97:
            # We get the repr, and then insert three dots before the final
            # quote.
            v = repr(self.body[:97])[:-1] + "...'"
        else:
            v = repr(self.body)
        return f"{self.__class__.__name__}(headers={self.headers!r}, body={v})"


class PartIterator:
    """
    Splits a fully buffered multipart body into :class:`Part` objects, one
    per call to ``next()``.

    A ``bytes`` buffer is never modified or copied; the iterator only keeps
    offsets into it.  A ``bytearray`` or ``memoryview`` is copied to
    ``bytes`` once, up front, so later changes by the caller can't move
    those offsets.  Everything before the first boundary (the preamble) is
    skipped, and the last occurrence of the boundary is taken as the
    terminator, so anything after it (the epilogue) is ignored.

    A segment with no blank line between headers and body makes ``next()``
    raise :class:`MalformedPart`.  The iterator has already moved past it
    by then, so calling ``next()`` again picks up with the following part.
    Pass ``skip_malformed=True`` to have such segments logged and skipped.

    :param boundary: The boundary parameter of the Content-Type, without the
                     leading ``--``.

    :param buffer: The complete multipart body.

    :param skip_malformed: Skip segments lacking a header/body separator
                           instead of raising.
    """

    def __init__(self, boundary: str | bytes, buffer: BufferLike, skip_malformed: bool = False) -> None:
        if isinstance(boundary, str):
            boundary = _to_bytes(boundary)
        if not boundary:
            raise ValueError("boundary must be a non-empty string, not %r" % (boundary,))

        # Only an immutable bytes object can be shared as-is.
        if not isinstance(buffer, bytes):
            buffer = bytes(buffer)

        self._boundary = BOUNDARY_PREFIX + boundary
        self._buffer = buffer
        self.skip_malformed = skip_malformed
        self._exhausted = False

        first = buffer.find(self._boundary)
        if first == -1:
            msg = "Did not find boundary %r in buffer" % (self._boundary,)
            logger.error(msg)
            raise MalformedMultipart(msg)

        last = buffer.rfind(self._boundary)
        if last == first:
            msg = "Did not find a closing boundary after the one at %d" % (first,)
            logger.error(msg)
            e = MalformedMultipart(msg)
            e.offset = first
            raise e

        # The opening boundary carries no data, so start right after it.
        self._pos = first + len(self._boundary)
        self._end = last
        logger.debug("Splitting %d bytes between offsets %d and %d", len(buffer), self._pos, self._end)

    @property
    def boundary(self) -> bytes:
        """The boundary as it appears in the buffer, including ``--``."""
        return self._boundary

    @property
    def position(self) -> int:
        """
        Offset of the next unconsumed segment.

        This only ever grows.  Once the last part has been returned it
        points just past the closing boundary, so it ends up greater than
        :attr:`end`.
        """
        return self._pos

    @property
    def end(self) -> int:
        return self._end

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def __iter__(self) -> PartIterator:
        return self

    def __next__(self) -> Part:
        while True:
            try:
                return self._next_part()
            except MalformedPart:
                if not self.skip_malformed:
                    raise

    def _next_part(self) -> Part:
        if self._exhausted:
            raise StopIteration

        buffer = self._buffer
        start = self._pos

        found = buffer.find(self._boundary, start)
        if found == -1 or found == start or start >= self._end:
            logger.debug("No more parts after offset %d", start)
            self._exhausted = True
            raise StopIteration

        # Move past this boundary before looking inside the segment, so a
        # malformed segment doesn't stop the caller from moving on.
        self._pos = found + len(self._boundary)

        # Only the headers and body are copied out of the buffer.
        segment = memoryview(buffer)[start:found]
        split = buffer.find(HEADERS_END, start, found)
        if split == -1:
            msg = "Did not find end of headers in part at %d" % (start,)
            logger.warning(msg)
            e = MalformedPart(msg)
            e.offset = start
            raise e

        split -= start
        headers = parse_header_block(segment[:split].tobytes())
        body = segment[split + len(HEADERS_END) :].tobytes()
        logger.debug("Found part at %d with %d header(s) and %d body bytes", start, len(headers), len(body))

        return Part(headers, body)

    def __repr__(self) -> str:
        return "%s(boundary=%r, position=%d, end=%d)" % (
            self.__class__.__name__,
            self._boundary,
            self._pos,
            self._end,
        )


def create_part_iterator(
    headers: Mapping[str, str | bytes], buffer: BufferLike, skip_malformed: bool = False
) -> PartIterator:
    """
    This function is a helper function to aid in creating a PartIterator
    from the headers of a response or request.

    The boundary is taken from the parsed Content-Type, so it may be quoted
    and followed by further parameters.

    :param headers: A dictionary-like object of HTTP headers.  The only
                    required header is Content-Type.

    :param buffer: The complete multipart body.

    :param skip_malformed: Passed to :class:`PartIterator`.
    """
    content_type = headers.get("Content-Type")
    if content_type is None:
        logger.warning("No Content-Type header given")
        raise PartsplitError("No Content-Type header given!")

    ctype, params = parse_options_header(content_type)
    boundary = params.get("boundary")
    if not boundary:
        logger.error("No boundary given in Content-Type %r", content_type)
        raise PartsplitError("No boundary given")

    logger.debug("Creating part iterator for %s with boundary %r", ctype, boundary)
    return PartIterator(boundary, buffer, skip_malformed=skip_malformed)


def parse_multipart(
    headers: Mapping[str, str | bytes], buffer: BufferLike, skip_malformed: bool = False
) -> list[Part]:
    """
    Splits a whole multipart body at once and returns every part, in order.

    :param headers: A dictionary-like object of HTTP headers.

    :param buffer: The complete multipart body.

    :param skip_malformed: Skip malformed parts instead of raising.
    """
    return list(create_part_iterator(headers, buffer, skip_malformed=skip_malformed))
