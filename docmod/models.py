"""Core data models shared across docmod components.

Two families live here. The ``Raw*`` records are what an extractor hands to
the builder: names, an unprocessed doc comment and either code text or a
source span. The remaining records form the document model consumed by
templates. All strings in the document model are unescaped except the
``comment_html`` fields, which already hold rendered HTML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .directives import Flags


@dataclass(frozen=True)
class SourcePosition:
    """A byte offset (and 1-based line, for messages) within a source file."""

    filename: str
    offset: int
    line: int = 0


@dataclass(frozen=True)
class SourceSpan:
    """Half-open range ``[start, end)`` of source text."""

    start: SourcePosition
    end: SourcePosition


# Extractor output ------------------------------------------------------------


@dataclass
class RawValue:
    """A constant or variable declaration, possibly naming several values."""

    names: List[str]
    doc: str = ""
    code: Optional[str] = None
    span: Optional[SourceSpan] = None


@dataclass
class RawFunc:
    """A function declaration."""

    name: str
    doc: str = ""
    code: Optional[str] = None
    span: Optional[SourceSpan] = None


@dataclass
class RawMethod:
    """A method in a type's method set.

    ``receiver`` names the type the method is listed on. ``embedded_type``
    names the base type that contributed a promoted method and is empty for
    methods declared on the receiver itself.
    """

    name: str
    receiver: str
    doc: str = ""
    code: Optional[str] = None
    span: Optional[SourceSpan] = None
    embedded_type: str = ""
    level: int = 0


@dataclass
class RawType:
    """A type declaration with the members the extractor attributes to it."""

    name: str
    doc: str = ""
    code: Optional[str] = None
    span: Optional[SourceSpan] = None
    constants: List[RawValue] = field(default_factory=list)
    variables: List[RawValue] = field(default_factory=list)
    functions: List[RawFunc] = field(default_factory=list)
    methods: List[RawMethod] = field(default_factory=list)


@dataclass
class RawPackage:
    """Everything an extractor knows about one package directory."""

    name: str
    import_path: str
    rel_path: str
    doc: str = ""
    constants: List[RawValue] = field(default_factory=list)
    variables: List[RawValue] = field(default_factory=list)
    functions: List[RawFunc] = field(default_factory=list)
    types: List[RawType] = field(default_factory=list)


# Document model ---------------------------------------------------------------


@dataclass
class Constant:
    """A single constant or a group of constants declared together."""

    names: List[str]
    comment_html: str
    code: str
    flags: Flags = field(default_factory=dict)


@dataclass
class Variable:
    """A variable declaration, or several variables declared together."""

    names: List[str]
    comment_html: str
    code: str
    flags: Flags = field(default_factory=dict)


@dataclass
class Function:
    """A function that is not part of a type's method set."""

    name: str
    comment_html: str
    code: str
    flags: Flags = field(default_factory=dict)


@dataclass
class Method:
    """A method listed on a type, either declared there or promoted from a base."""

    name: str
    comment_html: str
    code: str
    receiver: str
    embedded_type: str = ""
    level: int = 0
    flags: Flags = field(default_factory=dict)

    @property
    def promoted(self) -> bool:
        return self.level > 0


@dataclass
class Type:
    """A type definition together with the members documented under it."""

    name: str
    comment_html: str
    code: str
    flags: Flags = field(default_factory=dict)
    constants: List[Constant] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)


@dataclass
class PathPart:
    """One breadcrumb entry. An empty ``doc_file`` means the directory has no page."""

    dir_name: str
    doc_file: str = ""


@dataclass
class Package:
    """A package deconstructed into its documentation parts for templates."""

    module_name: str
    import_path: str
    path: str
    name: str
    synopsis: str
    comment_html: str
    file_name: str
    constants: List[Constant] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    types: List[Type] = field(default_factory=list)
    path_parts: List[PathPart] = field(default_factory=list)

    def type_named(self, name: str) -> Optional[Type]:
        for item in self.types:
            if item.name == name:
                return item
        return None


@dataclass
class Module:
    """The documentation for an entire source tree.

    ``name`` is the last segment of ``import_path``; ``dir_name`` is the name
    of the directory that was scanned and labels the root breadcrumb.
    """

    name: str
    import_path: str
    dir_name: str
    packages: List[Package] = field(default_factory=list)
    _by_path: Dict[str, Package] = field(default_factory=dict, repr=False, compare=False)

    def add(self, package: Package) -> bool:
        """Register ``package``; returns False when its path is already taken."""
        self.packages.append(package)
        if package.path in self._by_path:
            return False
        self._by_path[package.path] = package
        return True

    def package_at(self, rel_path: str) -> Optional[Package]:
        return self._by_path.get(rel_path)


__all__ = [
    "Constant",
    "Function",
    "Method",
    "Module",
    "Package",
    "PathPart",
    "RawFunc",
    "RawMethod",
    "RawPackage",
    "RawType",
    "RawValue",
    "SourcePosition",
    "SourceSpan",
    "Type",
    "Variable",
]
