"""Construction of package documents from extractor records.

A package is built in one pass over its raw declarations followed by a
second pass that moves ``doc: type=X`` records under the type ``X``. The
second pass runs only after every type exists, so a record may name a type
declared later in the package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Set, Tuple

from .comment import CommentRenderer
from .directives import Flags, is_hidden, parse_comment_flags, type_target
from .links import STDLIB_SOURCE, LinkResolver
from .logging import get_logger
from .models import (
    Constant,
    Function,
    Method,
    Package,
    RawFunc,
    RawMethod,
    RawPackage,
    RawType,
    RawValue,
    Type,
    Variable,
)
from .naming import make_file_name, normalise_rel_path
from .source import SourceReader

logger = get_logger("builder")


class PackageState(str, Enum):
    """Stages a package passes through while being assembled."""

    CREATED = "created"
    DIRECTIVES_APPLIED = "directives_applied"
    RECORDS_BUILT = "records_built"
    REASSOCIATED = "reassociated"
    FINALIZED = "finalized"
    DISCARDED = "discarded"


@dataclass
class BuildContext:
    """Module-wide lookups shared by every package assembled for one module."""

    module_name: str
    reader: SourceReader = field(default_factory=SourceReader)
    package_names: Dict[str, str] = field(default_factory=dict)
    module_packages: Dict[str, str] = field(default_factory=dict)
    stdlib_url: str = STDLIB_SOURCE


class RecordBuilder:
    """Turns raw declarations into document records, dropping hidden ones."""

    def __init__(self, renderer: CommentRenderer, reader: SourceReader) -> None:
        self.renderer = renderer
        self.reader = reader

    def _comment(self, doc: str) -> Optional[Tuple[str, Flags]]:
        text, flags = parse_comment_flags(doc)
        if is_hidden(flags):
            return None
        return self.renderer.html(text), flags or {}

    def constant(self, raw: RawValue) -> Optional[Constant]:
        parsed = self._comment(raw.doc)
        if parsed is None:
            return None
        html, flags = parsed
        return Constant(list(raw.names), html, self.reader.code_for(raw.code, raw.span), flags)

    def variable(self, raw: RawValue) -> Optional[Variable]:
        parsed = self._comment(raw.doc)
        if parsed is None:
            return None
        html, flags = parsed
        return Variable(list(raw.names), html, self.reader.code_for(raw.code, raw.span), flags)

    def function(self, raw: RawFunc) -> Optional[Function]:
        parsed = self._comment(raw.doc)
        if parsed is None:
            return None
        html, flags = parsed
        return Function(raw.name, html, self.reader.code_for(raw.code, raw.span), flags)

    def method(self, raw: RawMethod) -> Optional[Method]:
        parsed = self._comment(raw.doc)
        if parsed is None:
            return None
        html, flags = parsed
        return Method(
            name=raw.name,
            comment_html=html,
            code=self.reader.code_for(raw.code, raw.span),
            receiver=raw.receiver,
            embedded_type=raw.embedded_type,
            level=raw.level,
            flags=flags,
        )

    def type(self, raw: RawType) -> Optional[Type]:
        parsed = self._comment(raw.doc)
        if parsed is None:
            return None
        html, flags = parsed
        return Type(
            name=raw.name,
            comment_html=html,
            code=self.reader.code_for(raw.code, raw.span),
            flags=flags,
            constants=self.constants(raw.constants),
            variables=self.variables(raw.variables),
            functions=self.functions(raw.functions),
            methods=[m for m in map(self.method, raw.methods) if m is not None],
        )

    def constants(self, raws: List[RawValue]) -> List[Constant]:
        return [c for c in map(self.constant, raws) if c is not None]

    def variables(self, raws: List[RawValue]) -> List[Variable]:
        return [v for v in map(self.variable, raws) if v is not None]

    def functions(self, raws: List[RawFunc]) -> List[Function]:
        return [f for f in map(self.function, raws) if f is not None]


def package_symbols(raw: RawPackage) -> Set[str]:
    """Names a ``[Name]`` or ``[Recv.Name]`` link may refer to inside ``raw``."""
    symbols: Set[str] = set()
    for value in raw.constants + raw.variables:
        symbols.update(value.names)
    symbols.update(func.name for func in raw.functions)
    for item in raw.types:
        symbols.add(item.name)
        for value in item.constants + item.variables:
            symbols.update(value.names)
        symbols.update(func.name for func in item.functions)
    return symbols


def reassociate(
    constants: List[Constant],
    variables: List[Variable],
    functions: List[Function],
    types: Mapping[str, Type],
) -> Tuple[List[Constant], List[Variable], List[Function], List[str]]:
    """Move records flagged ``type=X`` into type ``X``.

    Returns the records left at package level and a warning for each record
    whose target type does not exist. Those records stay at package level.
    """
    warnings: List[str] = []

    def _move(items, attr: str, kind: str, label):  # type: ignore[no-untyped-def]
        kept = []
        for item in items:
            target = type_target(item.flags)
            if not target:
                kept.append(item)
                continue
            owner = types.get(target)
            if owner is None:
                message = f"type {target} not found in comment for {kind} {label(item)}"
                logger.warning("%s", message)
                warnings.append(message)
                kept.append(item)
                continue
            getattr(owner, attr).append(item)
        return kept

    kept_constants = _move(constants, "constants", "constant", lambda c: c.names[0])
    kept_variables = _move(variables, "variables", "variable", lambda v: v.names[0])
    kept_functions = _move(functions, "functions", "function", lambda f: f.name)
    return kept_constants, kept_variables, kept_functions, warnings


class PackageAssembler:
    """Builds the :class:`Package` document for one raw package.

    ``assemble`` returns None when the package comment carries ``doc: hide``;
    :attr:`state` then ends as :attr:`PackageState.DISCARDED`.
    """

    def __init__(self, raw: RawPackage, context: BuildContext) -> None:
        self.raw = raw
        self.context = context
        self.state = PackageState.CREATED
        self.warnings: List[str] = []

    def assemble(self) -> Optional[Package]:
        raw = self.raw
        if self.state is not PackageState.CREATED:
            raise RuntimeError(f"package {raw.import_path} was already assembled")

        text, flags = parse_comment_flags(raw.doc)
        if is_hidden(flags):
            logger.debug("Package %s is hidden", raw.import_path)
            self.state = PackageState.DISCARDED
            return None
        self.state = PackageState.DIRECTIVES_APPLIED

        renderer = CommentRenderer(
            LinkResolver(
                self.context.module_name,
                raw.name,
                symbols=package_symbols(raw),
                package_names=self.context.package_names,
                module_packages=self.context.module_packages,
                stdlib_url=self.context.stdlib_url,
            )
        )
        records = RecordBuilder(renderer, self.context.reader)
        comment_html = renderer.html(text)
        synopsis = renderer.synopsis(text)

        constants = records.constants(raw.constants)
        variables = records.variables(raw.variables)
        functions = records.functions(raw.functions)
        types: List[Type] = []
        types_by_name: Dict[str, Type] = {}
        for raw_type in raw.types:
            built = records.type(raw_type)
            if built is None:
                continue
            types.append(built)
            types_by_name[built.name] = built
        self.state = PackageState.RECORDS_BUILT

        constants, variables, functions, self.warnings = reassociate(
            constants, variables, functions, types_by_name
        )
        self.state = PackageState.REASSOCIATED

        package = Package(
            module_name=self.context.module_name,
            import_path=raw.import_path,
            path=normalise_rel_path(raw.rel_path),
            name=raw.name,
            synopsis=synopsis,
            comment_html=comment_html,
            file_name=make_file_name(self.context.module_name, raw.rel_path, raw.name),
            constants=constants,
            variables=variables,
            functions=functions,
            types=types,
        )
        self.state = PackageState.FINALIZED
        return package


def build_package(raw: RawPackage, context: BuildContext) -> Optional[Package]:
    """Assemble ``raw``; None if the package is hidden."""
    return PackageAssembler(raw, context).assemble()


__all__ = [
    "BuildContext",
    "PackageAssembler",
    "PackageState",
    "RecordBuilder",
    "build_package",
    "package_symbols",
    "reassociate",
]
