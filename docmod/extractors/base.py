"""Base classes for source extractors."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from ..models import RawPackage


class ManifestError(RuntimeError):
    """Raised when a source tree cannot be turned into raw packages."""


class Extractor(ABC):
    """Contract for extractors that read a source tree into raw packages."""

    @abstractmethod
    def supports(self, root: Path) -> bool:
        """Return True when this extractor understands the tree at ``root``."""

    @abstractmethod
    def import_root(self, root: Path) -> str:
        """Return the root import path of the module at ``root``."""

    @abstractmethod
    def extract(self, root: Path, import_root: str) -> List[RawPackage]:
        """Produce one raw package per documented directory, parents first."""
