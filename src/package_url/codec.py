"""Percent-encoding of package URL components

Encoding is RFC 3986 component encoding: everything outside the unreserved
set ``A-Z a-z 0-9 - . _ ~`` becomes UTF-8 ``%XX`` octets. Decoding is strict.
"""

import re
from urllib.parse import quote, unquote

from .errors import MalformedEncodingError

# A '%' not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode(value: str) -> str:
    """Percent-encode a single component"""
    return quote(value, safe="")


def decode(value: str) -> str:
    """Reverse percent-encoding

    Raises MalformedEncodingError for a truncated or non-hex escape, or when
    the escaped octets are not valid UTF-8. '+' is left as-is.
    """
    if "%" not in value:
        return value

    bad = _BAD_ESCAPE.search(value)
    if bad:
        raise MalformedEncodingError(
            f"Malformed percent-escape at position {bad.start()}: {value}", value
        )

    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedEncodingError(f"Escaped octets are not valid UTF-8: {value}", value) from e
