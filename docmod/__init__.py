"""docmod builds static HTML documentation sites from Python source trees.

The pipeline runs extractor records through :func:`build_module`, which
parses ``doc:`` directives, renders comments with resolved doc links, moves
``doc: type=X`` records under their type and attaches sitemap breadcrumbs.
"""

from .builder import BuildContext, PackageAssembler, PackageState, build_package
from .directives import parse_comment_flags
from .models import (
    Constant,
    Function,
    Method,
    Module,
    Package,
    PathPart,
    RawFunc,
    RawMethod,
    RawPackage,
    RawType,
    RawValue,
    Type,
    Variable,
)
from .module import build_module
from .naming import make_file_name

__all__ = [
    "BuildContext",
    "Constant",
    "Function",
    "Method",
    "Module",
    "Package",
    "PackageAssembler",
    "PackageState",
    "PathPart",
    "RawFunc",
    "RawMethod",
    "RawPackage",
    "RawType",
    "RawValue",
    "Type",
    "Variable",
    "build_module",
    "build_package",
    "make_file_name",
    "parse_comment_flags",
]
