"""
peekmq.exceptions
~~~~~~~~~~~~~~~~~

Stores all custom exceptions raised in PeekMQ.
"""


from typing import Optional


class PeekMQError(Exception):
    """Base class for PeekMQ errors"""


class ComposeError(PeekMQError):
    """A message could not be rendered"""


class DecodeError(ComposeError):
    """A message body could not be decoded for its content type"""

    def __init__(self, *args: object, content_type: Optional[str] = None) -> None:
        super().__init__(*args)
        self.content_type = content_type


class Utf8DecodeError(DecodeError):
    """Body bytes are not valid UTF-8"""


class JsonParseError(DecodeError):
    """Body text is not well-formed JSON"""


class TableDepthError(ComposeError):
    """Field table nested deeper than allowed"""

    def __init__(self, *args: object, max_depth: Optional[int] = None) -> None:
        if max_depth is not None:
            args = (f"Field table nesting exceeds {max_depth} levels",)
        super().__init__(*args)
        self.max_depth = max_depth
