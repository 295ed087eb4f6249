from __future__ import annotations

import re
from typing import Any, Iterable
from urllib.parse import quote

from .errors import InvalidArgument

# Only lowercase_lowercase boundaries are rewritten: due_date -> dueDate.
_CAMEL_RE = re.compile(r"(?<=[a-z])_([a-z])")


def camelcase(segment: str) -> str:
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), segment)


def _render_value(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise InvalidArgument(f"segment value must be a string or integer, got {type(value).__name__}")
    return str(value)


def _pairs(segments: Iterable[Any]) -> list[tuple[str, Any]]:
    """Group raw segments into (segment, value) pairs.

    Explicit tuples are taken as-is; bare items are consumed two at a time.
    A trailing bare item becomes an unpaired segment with value ``None``.
    """
    pairs: list[tuple[str, Any]] = []
    pending: list[Any] = []
    for item in segments:
        if isinstance(item, tuple):
            if pending:
                raise InvalidArgument(f"segment {pending[0]!r} is missing a value before {item!r}")
            if len(item) != 2:
                raise InvalidArgument(f"segment pair must have exactly two items, got {item!r}")
            pairs.append((item[0], item[1]))
            continue
        pending.append(item)
        if len(pending) == 2:
            pairs.append((pending[0], pending[1]))
            pending = []
    if pending:
        pairs.append((pending[0], None))
    return pairs


def build_segments(name: str, segments: Iterable[Any], *, camel: bool) -> list[str]:
    """Return the percent-encoded path parts for ``name`` and its segments."""
    if not isinstance(name, str) or not name:
        raise InvalidArgument("resource name must be a non-empty string")

    out = [name]
    for segment, value in _pairs(segments):
        if value is None:
            out.append(_render_value(segment))
            continue
        if not isinstance(segment, str) or not segment:
            raise InvalidArgument(f"segment name must be a non-empty string, got {segment!r}")
        out.append(camelcase(segment) if camel else segment)
        out.append(_render_value(value))
    return [quote(part, safe="") for part in out]


def join_path(base: str, parts: Iterable[str]) -> str:
    return "/".join([base.rstrip("/"), *parts])
