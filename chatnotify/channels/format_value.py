"""
Value and key formatting for stats fields/facts.

Every stats value becomes a string:
  strings are used as-is, everything else is serialized as compact JSON
  (``True`` -> ``true``, ``3`` -> ``3``, ``None`` -> ``null``, dicts/lists -> JSON).

Keys are humanized into Title Case words, so ``requestCount``,
``request_count`` and ``request-count`` all become ``Request Count``.
"""

import json
import re
from typing import Any

# Letter runs and digit runs, in any script
_WORD_RE = re.compile(r"[^\W\d_]+|\d+")


def stringify_value(val: Any) -> str:
    """Total stringification of a stats value, trimmed."""
    if isinstance(val, str):
        return val.strip()
    try:
        return json.dumps(val, default=str, ensure_ascii=False).strip()
    except (TypeError, ValueError):
        return str(val).strip()


def _split_case(run: str) -> list[str]:
    """Split a letter run at case changes: ``fooBar`` -> foo, Bar; ``HTTPStatus`` -> HTTP, Status."""
    words = []
    start = 0
    for i in range(1, len(run)):
        prev, cur = run[i - 1], run[i]
        nxt = run[i + 1] if i + 1 < len(run) else ""
        if cur.isupper() and (not prev.isupper() or nxt.islower()):
            words.append(run[start:i])
            start = i
    words.append(run[start:])
    return words


def humanize_key(key: str) -> str:
    """
    Convert snake/camel/kebab case keys to space separated Title Case.

    Keys without any letters or digits are returned trimmed.
    """
    key = key.strip()
    words = [word for run in _WORD_RE.findall(key) for word in _split_case(run)]
    if not words:
        return key
    return " ".join(word[0].upper() + word[1:] for word in words)
