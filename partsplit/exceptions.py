class PartsplitError(ValueError):
    """Base error class for the multipart splitter."""


class ParseError(PartsplitError):
    """This exception (or a subclass) is raised when there is an error while
    splitting a multipart buffer.
    """

    #: This is the offset in the buffer at which the problem was detected.
    #: It will be -1 if not specified.
    offset = -1


class MalformedMultipart(ParseError):
    """Raised when constructing a part iterator over a buffer that lacks an
    opening or closing boundary.  Nothing can be recovered from such a
    buffer.
    """


class MalformedPart(ParseError):
    """Raised for a single segment that has no blank line separating its
    headers from its body.  The iterator has already moved past the
    segment, so the caller may keep iterating.
    """
