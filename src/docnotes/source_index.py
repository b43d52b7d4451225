# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Comment locator backed by docstrings extracted from Python source files."""

import ast
import logging
from dataclasses import dataclass
from pathlib import Path

import pathspec

from docnotes.locator import Declaration, ResolutionError, split_method_reference
from docnotes.model import DeclarationIdentity, DeclarationKind, method_identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexedDeclaration:
    """Represent one class or method found in source.

    Attributes:
        identity: Declaration identity (``pkg.mod.Class`` or ``pkg.mod.Class#method``).
        kind: Declaration category.
        file_path: Project-relative source file path.
        line: Declaration start line (1-based).
        comment: Raw docstring, or ``None`` when the declaration has none.
    """

    identity: DeclarationIdentity
    kind: DeclarationKind
    file_path: str
    line: int
    comment: str | None


@dataclass(frozen=True)
class SourceError:
    """Represent a source file that could not be indexed."""

    file_path: str
    message: str


class SourceIndexLocator:
    """Resolve declaration identities against a pre-built source index.

    Only methods defined directly in a class body are indexed; inherited
    methods are not looked up through base classes.
    """

    def __init__(
        self,
        declarations: list[IndexedDeclaration],
        errors: list[SourceError] | None = None,
    ) -> None:
        """Initialize the locator.

        Args:
            declarations: Indexed declarations; later duplicates replace earlier ones.
            errors: Files that could not be indexed.
        """
        self._declarations = {item.identity: item for item in declarations}
        self._errors = list(errors or [])

    @classmethod
    def from_root(
        cls, root_path: Path, respect_gitignore: bool = True
    ) -> "SourceIndexLocator":
        """Index every Python file beneath a project root.

        Args:
            root_path: Project root; module names are derived relative to it.
            respect_gitignore: Skip paths matched by the root ``.gitignore``.

        Returns:
            Locator over the indexed declarations.
        """
        ignore_spec = _load_ignore_spec(root_path) if respect_gitignore else None
        declarations: list[IndexedDeclaration] = []
        errors: list[SourceError] = []

        for file_path in sorted(root_path.rglob("*.py")):
            relative = file_path.relative_to(root_path)
            if ".git" in relative.parts:
                continue
            if ignore_spec is not None and ignore_spec.match_file(relative.as_posix()):
                logger.debug(f"Skipping ignored file (file_path={relative})")
                continue
            try:
                source = file_path.read_text(encoding="utf-8")
                tree = ast.parse(source, filename=str(file_path))
            except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as exc:
                logger.warning(
                    f"Skipping file due to parse/read failure (file_path={relative} error={exc})",
                )
                errors.append(SourceError(file_path=str(relative), message=str(exc)))
                continue
            declarations.extend(
                _collect_declarations(
                    body=tree.body,
                    prefix=_module_name(relative),
                    file_path=str(relative),
                )
            )

        logger.info(
            f"Source index built (path={root_path} declarations={len(declarations)} errors={len(errors)})"
        )
        return cls(declarations=declarations, errors=errors)

    @property
    def declarations(self) -> list[IndexedDeclaration]:
        """Return indexed declarations in discovery order."""
        return list(self._declarations.values())

    @property
    def errors(self) -> list[SourceError]:
        """Return files that could not be indexed."""
        return list(self._errors)

    def locate_class(self, ref: object) -> Declaration:
        method_ref = self._method_parts(ref)
        if method_ref is not None:
            class_path, name = method_ref
            self._lookup(method_identity(class_path, name), kind="method")
            return self._lookup(class_path, kind="class")
        if isinstance(ref, str):
            return self._lookup(ref, kind="class")
        raise ResolutionError(f"Unsupported class reference (ref={ref!r})")

    def locate_method(self, ref: object) -> Declaration:
        method_ref = self._method_parts(ref)
        if method_ref is None:
            raise ResolutionError(f"Not a method reference (ref={ref!r})")
        class_path, name = method_ref
        return self._lookup(method_identity(class_path, name), kind="method")

    def read_comment(self, declaration: Declaration) -> str | None:
        item = self._declarations.get(declaration.identity)
        return item.comment if item is not None else None

    def _method_parts(self, ref: object) -> tuple[str, str] | None:
        if isinstance(ref, (tuple, list)):
            if len(ref) != 2 or not all(isinstance(part, str) for part in ref):
                raise ResolutionError(f"Invalid method reference (ref={ref!r})")
            return ref[0], ref[1]
        if isinstance(ref, str):
            return split_method_reference(ref)
        return None

    def _lookup(self, identity: str, kind: DeclarationKind) -> Declaration:
        item = self._declarations.get(identity)
        if item is None or item.kind != kind:
            raise ResolutionError(f"Declaration not indexed (identity={identity})")
        return Declaration(identity=item.identity, kind=item.kind, target=item)


def _load_ignore_spec(root_path: Path) -> pathspec.GitIgnoreSpec | None:
    ignore_path = root_path / ".gitignore"
    if not ignore_path.is_file():
        return None
    try:
        lines = ignore_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(
            f"Ignoring unreadable .gitignore (path={ignore_path} error={exc})"
        )
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


def _module_name(relative_path: Path) -> str:
    parts = list(relative_path.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


def _collect_declarations(
    body: list[ast.stmt], prefix: str, file_path: str
) -> list[IndexedDeclaration]:
    declarations: list[IndexedDeclaration] = []
    for node in body:
        if not isinstance(node, ast.ClassDef):
            continue
        identity = f"{prefix}.{node.name}" if prefix else node.name
        declarations.append(
            IndexedDeclaration(
                identity=identity,
                kind="class",
                file_path=file_path,
                line=int(node.lineno),
                comment=ast.get_docstring(node, clean=False),
            )
        )
        for member in node.body:
            if isinstance(member, (ast.FunctionDef, ast.AsyncFunctionDef)):
                declarations.append(
                    IndexedDeclaration(
                        identity=method_identity(identity, member.name),
                        kind="method",
                        file_path=file_path,
                        line=int(member.lineno),
                        comment=ast.get_docstring(member, clean=False),
                    )
                )
        declarations.extend(
            _collect_declarations(body=node.body, prefix=identity, file_path=file_path)
        )
    return declarations
