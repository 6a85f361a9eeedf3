__version__ = "0.1.0"

from .exceptions import MalformedMultipart, MalformedPart, ParseError, PartsplitError
from .headers import Headers, parse_header_block, parse_options_header
from .multipart import (
    Part,
    PartIterator,
    create_part_iterator,
    extract_boundary,
    parse_multipart,
)

__all__ = (
    "Headers",
    "MalformedMultipart",
    "MalformedPart",
    "ParseError",
    "Part",
    "PartIterator",
    "PartsplitError",
    "create_part_iterator",
    "extract_boundary",
    "parse_header_block",
    "parse_multipart",
    "parse_options_header",
)
