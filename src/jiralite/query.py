"""Query-string serialisation for Jira REST requests.

Keys are always emitted in ascending order so the same parameters build the
same URL, which keeps request logs and recorded fixtures comparable.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

__all__ = ["encode_value", "params_to_query"]

# encodeURIComponent leaves these unescaped in addition to alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"


def encode_value(value: Any) -> str:
    """Percent-encode a single query value.

    Booleans render lowercase (``true``/``false``), the form Jira parses.
    """
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    return quote(text, safe=_URI_COMPONENT_SAFE)


def params_to_query(params: Mapping[str, Any] | None = None) -> str:
    """Serialise parameters as ``?k1=v1&k2=v2`` with sorted keys.

    Entries whose value is None are dropped first; if nothing remains the
    result is the empty string (no bare ``?``).

    Example:
        >>> params_to_query({"b": 2, "a": "x y"})
        '?a=x%20y&b=2'
        >>> params_to_query({})
        ''
    """
    if not params:
        return ""
    keys = sorted(str(k) for k, v in params.items() if v is not None)
    if not keys:
        return ""
    lookup = {str(k): v for k, v in params.items()}
    return "?" + "&".join(f"{key}={encode_value(lookup[key])}" for key in keys)
