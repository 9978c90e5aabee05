"""Source extractors that feed raw packages to the builder."""

from __future__ import annotations

from .base import Extractor, ManifestError
from .python import PythonExtractor

__all__ = ["Extractor", "ManifestError", "PythonExtractor"]
