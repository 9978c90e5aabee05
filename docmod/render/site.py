"""Writes package pages and the module sitemap with Jinja templates."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    PackageLoader,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)

from ..logging import get_logger
from ..models import Module, Package
from ..naming import INDEX_FILE

PACKAGE_TEMPLATE = "package.html.j2"
INDEX_TEMPLATE = "index.html.j2"


class TemplateError(RuntimeError):
    """Raised when a page template cannot be loaded."""


class SiteRenderer:
    """Renders a :class:`Module` into a directory of static HTML files.

    Custom template files replace the bundled ones; the package template is
    rendered once per package with ``package`` and ``module`` in scope, the
    index template once with ``module`` and ``packages``.
    """

    def __init__(
        self,
        package_template: Optional[Path] = None,
        index_template: Optional[Path] = None,
    ) -> None:
        self.logger = get_logger("render")
        self._env = Environment(
            loader=PackageLoader("docmod", "templates"),
            autoescape=select_autoescape(default=True, default_for_string=True),
            keep_trailing_newline=True,
        )
        self._package_template = self._load(package_template, PACKAGE_TEMPLATE)
        self._index_template = self._load(index_template, INDEX_TEMPLATE)

    def _load(self, path: Optional[Path], default: str) -> Template:
        try:
            if path is None:
                return self._env.get_template(default)
            path = path.expanduser().resolve()
            custom = self._env.overlay(loader=FileSystemLoader(str(path.parent)))
            return custom.get_template(path.name)
        except TemplateNotFound as exc:
            raise TemplateError(f"template not found: {exc.name}") from exc
        except TemplateSyntaxError as exc:
            raise TemplateError(f"template {exc.filename or default} line {exc.lineno}: {exc.message}") from exc

    def render_package(self, module: Module, package: Package) -> str:
        return self._package_template.render(module=module, package=package)

    def render_index(self, module: Module) -> str:
        return self._index_template.render(module=module, packages=module.packages)

    def write(self, module: Module, output_dir: Path) -> List[Path]:
        """Write every package page and ``index.html``; return the written paths."""
        output_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for package in module.packages:
            target = output_dir / package.file_name
            target.write_text(self.render_package(module, package), encoding="utf-8")
            self.logger.debug("Wrote %s", target)
            written.append(target)
        index = output_dir / INDEX_FILE
        index.write_text(self.render_index(module), encoding="utf-8")
        written.append(index)
        self.logger.info("Wrote %d pages to %s", len(written), output_dir)
        return written


__all__ = ["INDEX_TEMPLATE", "PACKAGE_TEMPLATE", "SiteRenderer", "TemplateError"]
