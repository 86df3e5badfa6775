"""Query string preparation for the code search endpoint."""

from __future__ import annotations

import re
from urllib.parse import quote, unquote

# Characters left untouched by URL component encoding besides ASCII letters,
# digits and "-_.~" (which quote() never escapes).
URL_COMPONENT_SAFE = "!~*'()"

REGEX_SPECIALS = r".*+?^${}()|[]\\"
REGEX_ESCAPE_RE = re.compile(f"([{re.escape(REGEX_SPECIALS)}])")
REGEX_UNESCAPE_RE = re.compile(r"\\(.)")


def encode_query(raw: str | None, *, escape_pattern: bool = True) -> str | None:
    """Turn user input into the value of the ``text`` query parameter.

    Returns ``None`` for blank input; callers must not issue a request then.

    The input is percent-encoded first and the regex pass runs over the
    encoded string, so the result is meant to be placed in the URL as-is and
    read by the service as a literal pattern fragment.
    """

    trimmed = (raw or "").strip()
    if not trimmed:
        return None
    encoded = quote(trimmed, safe=URL_COMPONENT_SAFE)
    if not escape_pattern:
        return encoded
    return REGEX_ESCAPE_RE.sub(r"\\\1", encoded)


def decode_query(encoded: str) -> str:
    """Undo :func:`encode_query` for display and logging.

    Percent-encoded text never contains a backslash, so for strings produced
    by :func:`encode_query` this recovers the trimmed input. Arbitrary
    strings lose any backslash that precedes another character.
    """

    return unquote(REGEX_UNESCAPE_RE.sub(r"\1", encoded))


__all__ = ["decode_query", "encode_query"]
