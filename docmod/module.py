"""Aggregation of package documents into a module and its sitemap breadcrumbs."""

from __future__ import annotations

import posixpath
from typing import Dict, Iterable, List, Optional

from .builder import BuildContext, build_package
from .directives import is_hidden, parse_comment_flags
from .links import STDLIB_SOURCE
from .logging import get_logger
from .models import Module, Package, PathPart, RawPackage
from .naming import INDEX_FILE, make_file_name, normalise_rel_path
from .source import SourceReader

logger = get_logger("module")


def _context_for(
    import_path: str,
    raw_packages: List[RawPackage],
    reader: Optional[SourceReader],
    stdlib_url: str,
) -> BuildContext:
    context = BuildContext(module_name=import_path, stdlib_url=stdlib_url)
    if reader is not None:
        context.reader = reader
    for raw in raw_packages:
        _, flags = parse_comment_flags(raw.doc)
        if is_hidden(flags):
            continue
        context.package_names.setdefault(normalise_rel_path(raw.rel_path), raw.name)
        context.module_packages.setdefault(raw.name, raw.import_path)
    return context


def _with_unique_pages(import_path: str, raw_packages: List[RawPackage]) -> List[RawPackage]:
    """Drop packages whose page name an earlier visible package already claims."""
    claimed: Dict[str, str] = {}
    kept: List[RawPackage] = []
    for raw in raw_packages:
        _, flags = parse_comment_flags(raw.doc)
        if not is_hidden(flags):
            file_name = make_file_name(import_path, raw.rel_path, raw.name)
            if file_name in claimed:
                logger.warning(
                    "Package %s would overwrite %s written for %s; skipping it",
                    raw.import_path,
                    file_name,
                    claimed[file_name],
                )
                continue
            claimed[file_name] = raw.import_path
        kept.append(raw)
    return kept


def build_module(
    import_path: str,
    dir_name: str,
    raw_packages: Iterable[RawPackage],
    *,
    reader: Optional[SourceReader] = None,
    stdlib_url: str = STDLIB_SOURCE,
) -> Module:
    """Build every package of a module in order, then attach breadcrumbs."""
    raws = _with_unique_pages(import_path, list(raw_packages))
    context = _context_for(import_path, raws, reader, stdlib_url)
    module = Module(
        name=posixpath.basename(import_path.rstrip("/")),
        import_path=import_path,
        dir_name=dir_name,
    )
    for raw in raws:
        package = build_package(raw, context)
        if package is None:
            continue
        if not module.add(package):
            logger.warning(
                "Package %s shares directory %r with an earlier package; child breadcrumbs link to the first",
                package.import_path,
                package.path or ".",
            )
    assign_breadcrumbs(module)
    logger.debug("Module %s holds %d packages", module.import_path, len(module.packages))
    return module


def breadcrumbs(module: Module, package: Package) -> List[PathPart]:
    """Return the navigation trail from the module root to ``package``."""
    parts = [PathPart(dir_name=module.dir_name, doc_file=INDEX_FILE)]
    segments = package.path.split("/") if package.path else []
    for index, segment in enumerate(segments):
        if index == len(segments) - 1:
            owner: Optional[Package] = package
        else:
            owner = module.package_at("/".join(segments[: index + 1]))
        parts.append(PathPart(dir_name=segment, doc_file=owner.file_name if owner else ""))
    return parts


def assign_breadcrumbs(module: Module) -> None:
    for package in module.packages:
        package.path_parts = breadcrumbs(module, package)


__all__ = ["assign_breadcrumbs", "breadcrumbs", "build_module"]
