"""
peekmq.body
~~~~~~~~~~~

Decide how a message body is shown based on its declared content type.
"""

import base64
import json
import logging
import math
from typing import Any

from .exceptions import JsonParseError, Utf8DecodeError

LOGGER = logging.getLogger("peekmq")

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_PREFIX = "text/"


def _reject_constant(name: str) -> Any:
    # python's parser accepts NaN/Infinity, JSON doesn't
    raise ValueError(f"{name} is not valid JSON")


def _parse_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number {literal} is out of range")
    return value


def _to_text(content_type: str, body: bytes) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        LOGGER.debug(f"'{content_type}' body is not valid UTF-8: {e}")
        raise Utf8DecodeError(
            f"body declared as '{content_type}' is not valid UTF-8", content_type=content_type
        ) from e


def decode(content_type: str, body: bytes) -> Any:
    """Render ``body`` as a JSON value according to ``content_type``.

    ``application/json`` bodies are parsed, ``text/*`` bodies become a string
    and everything else is base64 encoded.
    """
    if content_type == JSON_CONTENT_TYPE:
        text = _to_text(content_type, body)
        try:
            value = json.loads(text, parse_constant=_reject_constant, parse_float=_parse_float)
            # lone surrogates parse fine but can't be written back as UTF-8
            json.dumps(value, ensure_ascii=False).encode("utf-8")
            return value
        except (ValueError, RecursionError) as e:
            LOGGER.debug(f"body is not valid JSON: {e}")
            raise JsonParseError(f"body is not valid JSON: {e}", content_type=content_type) from e
    if content_type.startswith(TEXT_CONTENT_PREFIX):
        return _to_text(content_type, body)
    return base64.b64encode(body).decode("ascii")
