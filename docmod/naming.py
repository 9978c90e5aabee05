"""Output file naming for package pages."""

from __future__ import annotations

import os
import posixpath

INDEX_FILE = "index.html"

_CURRENT_DIR = "."


def _segments(path: str) -> list[str]:
    normalised = path.replace(os.sep, "/") if os.sep != "/" else path
    return [part for part in normalised.split("/") if part]


def make_file_name(import_root: str, rel_path: str, package_name: str) -> str:
    """Return the ``.html`` page name for the package at ``rel_path``.

    The root package takes the last segment of ``import_root``. Nested
    packages flatten their path with underscores and append ``_<name>`` when
    the directory name differs from the declared package name.
    """
    if rel_path in ("", _CURRENT_DIR):
        return posixpath.basename(import_root.rstrip("/")) + ".html"

    parts = _segments(rel_path)
    file_name = "_".join(parts)
    if file_name.startswith("._"):
        file_name = file_name[2:]
    if parts and parts[-1] != package_name:
        file_name += "_" + package_name
    return file_name + ".html"


def normalise_rel_path(rel_path: str) -> str:
    """Return ``rel_path`` as slash separated segments, ``""`` for the root."""
    parts = [part for part in _segments(rel_path) if part != _CURRENT_DIR]
    return "/".join(parts)


__all__ = ["INDEX_FILE", "make_file_name", "normalise_rel_path"]
