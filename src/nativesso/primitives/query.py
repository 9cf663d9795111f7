"""Query-string helpers for SSO redirect URLs.

Redirects from the native app put their parameters where a URL host would
normally go (``scheme://secret=...&token=...``), so the standard library
parsers that expect a real query component can't be used directly. Values
are percent-decoded but ``+`` is kept as-is since base64 identifiers are
often sent unescaped.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from urllib.parse import quote, unquote

_PAIR_SEPARATORS = re.compile(r"[&?]")
_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")


def is_url_scheme(candidate: str | None) -> bool:
    """Check scheme syntax: a letter, then letters, digits, "+", "-" or "."."""
    return bool(candidate) and _SCHEME.fullmatch(candidate) is not None


def query_string_from_parameters(parameters: Mapping[str, str]) -> str:
    """Encode parameters as a query string in insertion order.

    Every reserved character is percent-encoded, including ``/``, ``+``,
    ``=`` and ``:``, so schemes and base64 values round-trip exactly.
    """
    return "&".join(
        f"{quote(str(key), safe='')}={quote(str(value), safe='')}"
        for key, value in parameters.items()
    )


def parameters_from_query_string(query_string: str | None) -> dict[str, str]:
    """Decode a host- or query-encoded parameter string.

    Pairs are separated by ``&`` or ``?``. A key without ``=`` maps to an
    empty string. Duplicate keys keep the last value.
    """
    parameters: dict[str, str] = {}
    if not query_string:
        return parameters

    for pair in _PAIR_SEPARATORS.split(query_string):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        if not key:
            continue
        parameters[unquote(key)] = unquote(value)

    return parameters
