"""Doc link parsing and URL resolution."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import AbstractSet, Mapping, Optional

from .naming import make_file_name

STDLIB_SOURCE = "https://docs.python.org/3/library/"

_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_STDLIB_NAMES = frozenset(getattr(sys, "stdlib_module_names", ()))


@dataclass(frozen=True)
class DocLink:
    """A ``[target]`` reference found in a comment."""

    text: str
    import_path: str = ""
    recv: str = ""
    name: str = ""


def _is_ident(value: str) -> bool:
    return bool(_IDENT.match(value))


class LinkResolver:
    """Maps doc links to URLs for one package.

    ``module_name`` is the root import path of the module being documented,
    ``package_name`` the declared name of the package whose comments are being
    rendered. ``package_names`` maps a module-relative path to the declared
    package name found there and ``module_packages`` maps a short package name
    to its full import path, both over the whole module.
    """

    def __init__(
        self,
        module_name: str,
        package_name: str,
        *,
        symbols: AbstractSet[str] = frozenset(),
        package_names: Optional[Mapping[str, str]] = None,
        module_packages: Optional[Mapping[str, str]] = None,
        stdlib_url: str = STDLIB_SOURCE,
    ) -> None:
        self.module_name = module_name
        self.package_name = package_name
        self.symbols = symbols
        self.package_names = dict(package_names or {})
        self.module_packages = dict(module_packages or {})
        self.stdlib_url = stdlib_url

    def url_for(self, link: DocLink) -> str:
        url = ""
        if self.module_name and link.import_path.startswith(self.module_name):
            rel_path = link.import_path[len(self.module_name):].lstrip("/")
            url = make_file_name(self.module_name, rel_path, self._declared_name(rel_path))
        elif "." in link.import_path:
            url = "https://" + link.import_path
        elif link.import_path:
            url = self.stdlib_url + link.import_path

        if link.name:
            if link.recv:
                url += "#" + link.recv + "." + link.name
            else:
                url += "#" + link.name
        return url

    def parse(self, target: str) -> Optional[DocLink]:
        """Interpret the text between brackets, or return None if it is not a doc link."""
        text = target
        target = target.lstrip("*")
        if not target or any(ch.isspace() for ch in target):
            return None
        # URLs are linked as text, never as import paths
        if ":" in target:
            return None

        if "/" in target:
            head, _, tail = target.rpartition("/")
            package_tail, *symbols = tail.split(".")
            if not head or not package_tail:
                return None
            if len(symbols) > 2 or not all(_is_ident(s) for s in symbols):
                return None
            return self._with_symbols(text, f"{head}/{package_tail}", symbols)

        pieces = target.split(".")
        if not all(_is_ident(piece) for piece in pieces) or len(pieces) > 3:
            return None
        if len(pieces) == 1:
            (only,) = pieces
            if only in self.symbols:
                return DocLink(text=text, name=only)
            package = self._package_path(only)
            if package is not None:
                return DocLink(text=text, import_path=package)
            return None
        if len(pieces) == 2 and pieces[0] in self.symbols:
            return DocLink(text=text, recv=pieces[0], name=pieces[1])
        package = self._package_path(pieces[0])
        if package is None:
            return None
        return self._with_symbols(text, package, pieces[1:])

    def _with_symbols(self, text: str, import_path: str, symbols: list[str]) -> DocLink:
        if len(symbols) == 2:
            return DocLink(text=text, import_path=import_path, recv=symbols[0], name=symbols[1])
        if len(symbols) == 1:
            return DocLink(text=text, import_path=import_path, name=symbols[0])
        return DocLink(text=text, import_path=import_path)

    def _package_path(self, name: str) -> Optional[str]:
        if name in self.module_packages:
            return self.module_packages[name]
        if name in _STDLIB_NAMES:
            return name
        return None

    def _declared_name(self, rel_path: str) -> str:
        if rel_path in self.package_names:
            return self.package_names[rel_path]
        return rel_path.rsplit("/", 1)[-1]


__all__ = ["DocLink", "LinkResolver", "STDLIB_SOURCE"]
