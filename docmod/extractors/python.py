"""Extractor that reads Python source trees with the ``ast`` module.

Every directory holding Python modules becomes one package. Public
module-level names are collected in source order; ``ALL_CAPS`` assignments
are constants and other assignments variables. Classes gather their methods,
the methods promoted from in-package base classes, and the module-level
functions and values that produce instances of them.
"""

from __future__ import annotations

import ast
import copy
import inspect
import os
import tomllib
from collections import deque
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union

from ..logging import get_logger
from ..models import RawFunc, RawMethod, RawPackage, RawType, RawValue, SourcePosition, SourceSpan
from .base import Extractor, ManifestError

logger = get_logger("extractors.python")

_SKIPPED_DIRS = {"test", "tests", "node_modules", "site-packages"}
_SKIPPED_FILES = {"setup.py", "conftest.py"}

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]
AssignNode = Union[ast.Assign, ast.AnnAssign]


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _is_constant_name(name: str) -> bool:
    return name.isupper()


def _package_name(segment: str) -> str:
    return segment.replace("-", "_").replace(".", "_")


@dataclass
class _SourceFile:
    path: Path
    text: str
    tree: ast.Module
    line_starts: List[int] = field(default_factory=list)

    @classmethod
    def parse(cls, path: Path) -> "_SourceFile":
        try:
            data = path.read_bytes()
            text = data.decode("utf-8")
            tree = ast.parse(text, filename=str(path))
        except (OSError, UnicodeDecodeError, SyntaxError) as exc:
            raise ManifestError(f"could not parse {path}: {exc}") from exc
        starts = [0]
        for line in data.splitlines(keepends=True):
            starts.append(starts[-1] + len(line))
        return cls(path=path, text=text, tree=tree, line_starts=starts)

    def position(self, line: int, col: int) -> SourcePosition:
        return SourcePosition(str(self.path), self.line_starts[line - 1] + col, line)

    def span(self, node: ast.stmt) -> SourceSpan:
        decorators = getattr(node, "decorator_list", None)
        first_line = decorators[0].lineno if decorators else node.lineno
        end_line = node.end_lineno or node.lineno
        end_col = node.end_col_offset or 0
        return SourceSpan(self.position(first_line, node.col_offset), self.position(end_line, end_col))

    def segment(self, node: ast.AST) -> str:
        return ast.get_source_segment(self.text, node) or ""

    def comment_above(self, node: ast.stmt) -> str:
        # ast counts only \n, \r\n and \r as line breaks
        lines = self.text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        collected: List[str] = []
        index = node.lineno - 2
        while index >= 0:
            stripped = lines[index].strip()
            if not stripped.startswith("#"):
                break
            body = stripped[1:]
            collected.append(body[1:] if body.startswith(" ") else body)
            index -= 1
        return "\n".join(reversed(collected))


def _docstring_after(body: Sequence[ast.stmt], index: int) -> Optional[str]:
    if index + 1 >= len(body):
        return None
    following = body[index + 1]
    if (
        isinstance(following, ast.Expr)
        and isinstance(following.value, ast.Constant)
        and isinstance(following.value.value, str)
    ):
        return inspect.cleandoc(following.value.value)
    return None


def _assigned_names(node: AssignNode) -> List[str]:
    targets = node.targets if isinstance(node, ast.Assign) else [node.target]
    names: List[str] = []
    for target in targets:
        elements = target.elts if isinstance(target, (ast.Tuple, ast.List)) else [target]
        names.extend(el.id for el in elements if isinstance(el, ast.Name))
    return names


def _annotation_name(node: Optional[ast.expr]) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _produced_type(node: AssignNode) -> Optional[str]:
    if isinstance(node, ast.AnnAssign):
        annotated = _annotation_name(node.annotation)
        if annotated:
            return annotated
    value = node.value
    if isinstance(value, ast.Call):
        return _annotation_name(value.func)
    return None


def _is_documented_method(name: str) -> bool:
    return _is_public(name) or name == "__init__"


class PythonExtractor(Extractor):
    """Reads a Python project directory into :class:`RawPackage` records."""

    def __init__(self, module: Optional[str] = None, exclude_paths: Sequence[str] = ()) -> None:
        self.module = module
        self.exclude_paths = [pattern.rstrip("/") for pattern in exclude_paths if pattern.strip()]

    def supports(self, root: Path) -> bool:
        return any(self._package_dirs(root))

    def import_root(self, root: Path) -> str:
        if self.module:
            return self.module
        manifest = root / "pyproject.toml"
        if not manifest.exists():
            raise ManifestError(f"could not find pyproject.toml in {root}; set 'module' in .docmod.yml")
        try:
            data = tomllib.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ManifestError(f"could not parse {manifest}: {exc}") from exc
        name = data.get("project", {}).get("name") or data.get("tool", {}).get("poetry", {}).get("name")
        if not isinstance(name, str) or not name.strip():
            raise ManifestError(f"{manifest} does not declare a project name")
        return name.strip()

    def extract(self, root: Path, import_root: str) -> List[RawPackage]:
        root = root.resolve()
        package_dirs = list(self._package_dirs(root))
        root_dir = _package_name(import_root.rstrip("/").rsplit("/", 1)[-1])
        has_root_dir = any(rel_path == root_dir for rel_path, _ in package_dirs)
        packages: List[RawPackage] = []
        for rel_path, files in package_dirs:
            if rel_path == "." and has_root_dir and not any(path.name == "__init__.py" for path in files):
                # top-level scripts beside the root package would share its page name
                logger.debug("Skipping top-level modules in %s; %s/ holds the root package", root, root_dir)
                continue
            packages.append(self._extract_package(rel_path, files, import_root))
        if not packages:
            raise ManifestError(f"no Python packages found under {root}")
        return packages

    def _excluded(self, rel_path: str) -> bool:
        return any(fnmatchcase(rel_path, pattern) for pattern in self.exclude_paths)

    def _package_dirs(self, root: Path) -> Iterator[Tuple[str, List[Path]]]:
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_path = current.relative_to(root).as_posix()
            kept = []
            for name in sorted(dirnames):
                child = f"{name}" if rel_path == "." else f"{rel_path}/{name}"
                if name.startswith((".", "_")) or name in _SKIPPED_DIRS or self._excluded(child):
                    logger.debug("Skipping directory %s", child)
                    continue
                kept.append(name)
            dirnames[:] = kept

            files = [current / name for name in sorted(filenames) if self._documented_file(name)]
            files = [path for path in files if not self._excluded(path.relative_to(root).as_posix())]
            if files:
                files.sort(key=lambda path: path.name != "__init__.py")
                yield rel_path, files

    @staticmethod
    def _documented_file(name: str) -> bool:
        if not name.endswith(".py") or name in _SKIPPED_FILES:
            return False
        if name.startswith("test_") or name.endswith("_test.py"):
            return False
        return name == "__init__.py" or _is_public(name)

    def _extract_package(self, rel_path: str, files: List[Path], import_root: str) -> RawPackage:
        sources = [_SourceFile.parse(path) for path in files]
        if rel_path == ".":
            name = _package_name(import_root.rstrip("/").rsplit("/", 1)[-1])
            import_path = import_root
        else:
            name = _package_name(rel_path.rsplit("/", 1)[-1])
            import_path = f"{import_root}/{rel_path}"

        doc = ""
        for source in sources:
            doc = ast.get_docstring(source.tree) or ""
            if doc:
                break

        classes: Dict[str, ast.ClassDef] = {}
        for source in sources:
            for node in source.tree.body:
                if isinstance(node, ast.ClassDef) and _is_public(node.name):
                    classes[node.name] = node

        package = RawPackage(name=name, import_path=import_path, rel_path=rel_path, doc=doc)
        types: Dict[str, RawType] = {}
        pending: List[Tuple[_SourceFile, ast.stmt, int]] = []
        for source in sources:
            for index, node in enumerate(source.tree.body):
                if isinstance(node, ast.ClassDef) and _is_public(node.name):
                    raw_type = self._type(source, node, classes)
                    types[raw_type.name] = raw_type
                    package.types.append(raw_type)
                else:
                    pending.append((source, node, index))

        for source, node, index in pending:
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                if not _is_public(node.name):
                    continue
                func = self._function(source, node)
                owner = types.get(_annotation_name(node.returns) or "")
                (owner.functions if owner else package.functions).append(func)
            elif isinstance(node, (ast.Assign, ast.AnnAssign)):
                value = self._value(source, node, source.tree.body, index)
                if value is None:
                    continue
                owner = types.get(_produced_type(node) or "")
                constant = all(_is_constant_name(name) for name in value.names)
                if owner is not None:
                    (owner.constants if constant else owner.variables).append(value)
                else:
                    (package.constants if constant else package.variables).append(value)

        logger.debug(
            "Extracted package %s: %d constants, %d variables, %d functions, %d types",
            import_path,
            len(package.constants),
            len(package.variables),
            len(package.functions),
            len(package.types),
        )
        return package

    def _value(
        self, source: _SourceFile, node: AssignNode, body: Sequence[ast.stmt], index: int
    ) -> Optional[RawValue]:
        if isinstance(node, ast.AnnAssign) and node.value is None:
            return None
        names = [name for name in _assigned_names(node) if _is_public(name)]
        if not names:
            return None
        doc = _docstring_after(body, index)
        if doc is None:
            doc = source.comment_above(node)
        return RawValue(names=names, doc=doc, code=source.segment(node))

    def _function(self, source: _SourceFile, node: FunctionNode) -> RawFunc:
        return RawFunc(name=node.name, doc=ast.get_docstring(node) or "", span=source.span(node))

    def _type(self, source: _SourceFile, node: ast.ClassDef, classes: Dict[str, ast.ClassDef]) -> RawType:
        raw = RawType(name=node.name, doc=ast.get_docstring(node) or "", code=self._class_outline(node))
        declared: Set[str] = set()
        for index, stmt in enumerate(node.body):
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                if not _is_documented_method(stmt.name):
                    continue
                declared.add(stmt.name)
                raw.methods.append(
                    RawMethod(
                        name=stmt.name,
                        receiver=node.name,
                        doc=ast.get_docstring(stmt) or "",
                        span=source.span(stmt),
                    )
                )
            elif isinstance(stmt, (ast.Assign, ast.AnnAssign)):
                value = self._value(source, stmt, node.body, index)
                if value is not None and all(_is_constant_name(name) for name in value.names):
                    raw.constants.append(value)
        raw.methods.extend(self._promoted_methods(node, classes, declared))
        return raw

    def _promoted_methods(
        self, node: ast.ClassDef, classes: Dict[str, ast.ClassDef], declared: Set[str]
    ) -> List[RawMethod]:
        promoted: List[RawMethod] = []
        seen = {node.name}
        queue = deque((base, 1) for base in self._local_bases(node, classes))
        while queue:
            base, level = queue.popleft()
            if base.name in seen:
                continue
            seen.add(base.name)
            for stmt in base.body:
                if not isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                    continue
                if not _is_public(stmt.name) or stmt.name in declared:
                    continue
                declared.add(stmt.name)
                promoted.append(
                    RawMethod(
                        name=stmt.name,
                        receiver=node.name,
                        doc=ast.get_docstring(stmt) or "",
                        code=ast.unparse(self._signature(stmt)),
                        embedded_type=base.name,
                        level=level,
                    )
                )
            queue.extend((grand, level + 1) for grand in self._local_bases(base, classes))
        return promoted

    @staticmethod
    def _local_bases(node: ast.ClassDef, classes: Dict[str, ast.ClassDef]) -> List[ast.ClassDef]:
        return [classes[base.id] for base in node.bases if isinstance(base, ast.Name) and base.id in classes]

    @staticmethod
    def _signature(node: FunctionNode) -> FunctionNode:
        stub = copy.copy(node)
        stub.body = [ast.Expr(value=ast.Constant(value=Ellipsis))]
        return stub

    @staticmethod
    def _class_outline(node: ast.ClassDef) -> str:
        outline = copy.copy(node)
        fields: List[ast.stmt] = [
            stmt
            for stmt in node.body
            if isinstance(stmt, (ast.Assign, ast.AnnAssign))
        ]
        outline.body = fields or [ast.Expr(value=ast.Constant(value=Ellipsis))]
        return ast.unparse(outline)


__all__ = ["PythonExtractor"]
