"""Parsing of ``doc:`` directive lines embedded in documentation comments.

A directive is a whole line of a comment that starts with :data:`DOC_PREFIX`,
followed by ``key`` or ``key=value``::

    Bstart is the initial value of B.

    doc: type=MyType

Directive lines are removed from the comment text before it is rendered.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

DOC_PREFIX = "doc:"

HIDE = "hide"
TYPE = "type"

Flags = Dict[str, str]


def parse_comment_flags(text: str) -> Tuple[str, Optional[Flags]]:
    """Strip directive lines from ``text`` and return ``(text, flags)``.

    ``flags`` is ``None`` when the comment holds no directive. A later line
    with the same key overwrites an earlier one. A line with more than one
    ``=`` is kept as a bare key without a value.
    """
    kept = []
    flags: Optional[Flags] = None
    for line in text.splitlines(keepends=True):
        if not line.startswith(DOC_PREFIX):
            kept.append(line)
            continue
        if flags is None:
            flags = {}
        parts = line[len(DOC_PREFIX):].split("=")
        if len(parts) == 2:
            flags[parts[0].strip()] = parts[1].strip()
        else:
            flags[parts[0].strip()] = ""
    return "".join(kept), flags


def is_hidden(flags: Optional[Mapping[str, str]]) -> bool:
    return flags is not None and HIDE in flags


def type_target(flags: Optional[Mapping[str, str]]) -> str:
    """Return the type a record asks to be moved into, or ``""``."""
    if not flags:
        return ""
    return flags.get(TYPE, "")


__all__ = ["DOC_PREFIX", "Flags", "HIDE", "TYPE", "is_hidden", "parse_comment_flags", "type_target"]
