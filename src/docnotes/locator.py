# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Comment locator contract and the runtime implementation."""

import builtins
import importlib
import inspect
import logging
import sys
from dataclasses import dataclass, field
from typing import Protocol

from docnotes.model import DeclarationIdentity, DeclarationKind, method_identity

logger = logging.getLogger(__name__)

_QUALIFIED_SEPARATORS = ("::", "#")


class ResolutionError(LookupError):
    """Represent a declaration reference that does not resolve."""


@dataclass(frozen=True)
class Declaration:
    """Represent one resolved class or method declaration.

    Attributes:
        identity: Stable identity used as cache key.
        kind: Declaration category.
        target: Locator specific handle used to read the comment.
    """

    identity: DeclarationIdentity
    kind: DeclarationKind
    target: object = field(default=None, compare=False, repr=False)


class CommentLocator(Protocol):
    """Resolve declaration references and read their documentation comments."""

    def locate_class(self, ref: object) -> Declaration:
        """Resolve a class reference.

        Raises:
            ResolutionError: If the reference does not name an existing class.
        """

    def locate_method(self, ref: object) -> Declaration:
        """Resolve a method reference.

        Raises:
            ResolutionError: If the reference does not name exactly one method.
        """

    def read_comment(self, declaration: Declaration) -> str | None:
        """Return the raw comment text, or ``None`` when there is none."""


def split_method_reference(reference: str) -> tuple[str, str] | None:
    """Split ``"Class::method"`` or ``"Class#method"`` into its two parts.

    Args:
        reference: Qualified method name.

    Returns:
        Tuple of class path and method name, or ``None`` when no separator is
        present.
    """
    for separator in _QUALIFIED_SEPARATORS:
        if separator in reference:
            class_path, _, method_name = reference.rpartition(separator)
            return class_path, method_name
    return None


def is_method_reference(ref: object) -> bool:
    """Check whether a reference has one of the method reference shapes."""
    if isinstance(ref, (tuple, list)):
        return True
    if isinstance(ref, str):
        return split_method_reference(ref) is not None
    return inspect.ismethod(ref) or inspect.isfunction(ref)


def class_identity(cls: type) -> DeclarationIdentity:
    """Build the identity of a class from its module and qualified name."""
    return f"{cls.__module__}.{cls.__qualname__}"


class RuntimeCommentLocator:
    """Locate docstrings of live classes and methods.

    Method references resolve to the first class in the MRO whose own
    namespace defines the method.
    """

    def locate_class(self, ref: object) -> Declaration:
        if is_method_reference(ref):
            owner, _, _ = self._resolve_method(ref)
        else:
            owner = self._resolve_class(ref)
        return Declaration(identity=class_identity(owner), kind="class", target=owner)

    def locate_method(self, ref: object) -> Declaration:
        owner, name, function = self._resolve_method(ref)
        return Declaration(
            identity=method_identity(class_identity(owner), name),
            kind="method",
            target=function,
        )

    def read_comment(self, declaration: Declaration) -> str | None:
        if isinstance(declaration.target, type):
            comment = vars(declaration.target).get("__doc__")
        else:
            comment = getattr(declaration.target, "__doc__", None)
        return comment if isinstance(comment, str) else None

    def _resolve_class(self, ref: object) -> type:
        if ref is None:
            raise ResolutionError("Class reference is None")
        if isinstance(ref, type):
            return ref
        if isinstance(ref, str):
            return import_class(ref)
        if inspect.isroutine(ref):
            raise ResolutionError(f"Routine is not a class reference (ref={ref!r})")
        return type(ref)

    def _resolve_method(self, ref: object) -> tuple[type, str, object]:
        if isinstance(ref, (tuple, list)):
            if len(ref) != 2:
                raise ResolutionError(
                    f"Method reference must have two items (items={len(ref)})"
                )
            target, name = ref
            owner = self._resolve_class(target)
        elif isinstance(ref, str):
            parts = split_method_reference(ref)
            if parts is None:
                raise ResolutionError(f"Not a qualified method name (ref={ref})")
            class_path, name = parts
            owner = import_class(class_path)
        elif inspect.ismethod(ref):
            bound_to = ref.__self__
            owner = bound_to if isinstance(bound_to, type) else type(bound_to)
            name = ref.__func__.__name__
        elif inspect.isfunction(ref):
            owner = _owner_from_qualname(ref)
            name = ref.__name__
        else:
            raise ResolutionError(f"Unsupported method reference (ref={ref!r})")

        if not isinstance(name, str) or not name:
            raise ResolutionError(f"Invalid method name (name={name!r})")
        return _find_declaring_member(owner, name)


def import_class(path: str) -> type:
    """Import a class from a dotted path such as ``"pkg.module.Outer.Inner"``.

    A single bare name is looked up in :mod:`builtins`.

    Args:
        path: Dotted class path.

    Returns:
        The class object.

    Raises:
        ResolutionError: If the path does not name an importable class.
    """
    parts = path.split(".")
    if not all(part.isidentifier() for part in parts):
        raise ResolutionError(f"Invalid class path (path={path!r})")

    resolved: object = None
    if len(parts) == 1:
        resolved = getattr(builtins, path, None)
    else:
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                module = importlib.import_module(module_name)
            except ImportError:
                continue
            except Exception as exc:
                raise ResolutionError(
                    f"Module failed to import (module={module_name} error={exc!r})"
                ) from exc
            resolved = _walk_attributes(module, parts[split:])
            break

    if not isinstance(resolved, type):
        raise ResolutionError(f"Class not found (path={path})")
    return resolved


def _walk_attributes(root: object, names: list[str]) -> object:
    current = root
    for name in names:
        try:
            current = getattr(current, name, None)
        except Exception as exc:
            raise ResolutionError(
                f"Attribute lookup failed (name={name} error={exc!r})"
            ) from exc
        if current is None:
            return None
    return current


def _owner_from_qualname(function: object) -> type:
    qualname = getattr(function, "__qualname__", "")
    owner_path, _, _ = qualname.rpartition(".")
    if not owner_path or "<locals>" in qualname:
        raise ResolutionError(
            f"Function is not defined in a class body (qualname={qualname})"
        )
    module = sys.modules.get(getattr(function, "__module__", None) or "")
    owner = _walk_attributes(module, owner_path.split("."))
    if not isinstance(owner, type):
        raise ResolutionError(f"Owning class not found (qualname={qualname})")
    return owner


def _find_declaring_member(owner: type, name: str) -> tuple[type, str, object]:
    for klass in inspect.getmro(owner):
        namespace = vars(klass)
        if name in namespace:
            member = namespace[name]
            break
    else:
        raise ResolutionError(
            f"Method not found (class={class_identity(owner)} method={name})"
        )

    if isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    if not inspect.isroutine(member):
        raise ResolutionError(
            f"Attribute is not a method (class={class_identity(klass)} method={name})"
        )
    return klass, name, member
