"""Reading declaration source text by span."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from .models import SourceSpan


class SourceSpanError(RuntimeError):
    """Raised when a span cannot describe a contiguous range of one file."""


class SourceReader:
    """Returns source fragments for spans, caching each file's bytes for the run."""

    def __init__(self) -> None:
        self._cache: Dict[str, bytes] = {}

    def fragment(self, span: SourceSpan) -> str:
        start, end = span.start, span.end
        if start.filename != end.filename:
            raise SourceSpanError(
                f"span starts in {start.filename} but ends in {end.filename}"
            )
        if end.offset < start.offset:
            raise SourceSpanError(
                f"span in {start.filename} ends at offset {end.offset} before it starts at {start.offset}"
            )
        data = self._read(start.filename)
        if end.offset > len(data):
            raise SourceSpanError(
                f"span end {end.offset} is past the end of {start.filename} ({len(data)} bytes)"
            )
        return data[start.offset : end.offset].decode("utf-8", errors="replace")

    def code_for(self, code: Optional[str], span: Optional[SourceSpan]) -> str:
        """Prefer inline ``code``; fall back to reading ``span``."""
        if code is not None:
            return code
        if span is None:
            return ""
        return self.fragment(span)

    def _read(self, filename: str) -> bytes:
        cached = self._cache.get(filename)
        if cached is None:
            cached = Path(filename).read_bytes()
            self._cache[filename] = cached
        return cached


__all__ = ["SourceReader", "SourceSpanError"]
