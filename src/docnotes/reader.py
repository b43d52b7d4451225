# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public annotation lookup API."""

import logging
from collections.abc import Callable
from typing import Literal

from docnotes.cache import AnnotationCache
from docnotes.locator import (
    CommentLocator,
    Declaration,
    ResolutionError,
    RuntimeCommentLocator,
)
from docnotes.model import AnnotationMap, Missing
from docnotes.parser import parse_annotations

logger = logging.getLogger(__name__)

AnnotationsResult = AnnotationMap | Literal[Missing.NOT_FOUND]
AnnotationResult = str | Missing


class AnnotationReader:
    """Read annotations of classes and methods through a comment locator.

    Resolution failures never raise; they are reported as
    ``Missing.NOT_FOUND``. A declaration without a comment has an empty map.
    """

    def __init__(
        self,
        locator: CommentLocator | None = None,
        cache: AnnotationCache | None = None,
        parser: Callable[[str], dict[str, str]] = parse_annotations,
    ) -> None:
        """Initialize the reader.

        Args:
            locator: Resolves references and reads comments. Defaults to live
                runtime introspection.
            cache: Annotation cache; a private one is created when omitted.
            parser: Turns a raw comment into an annotation map.
        """
        self._locator: CommentLocator = locator or RuntimeCommentLocator()
        self._cache = cache if cache is not None else AnnotationCache()
        self._parser = parser

    @property
    def cache(self) -> AnnotationCache:
        return self._cache

    def annotations_for_class(self, ref: object) -> AnnotationsResult:
        """Return all annotations of a class.

        Args:
            ref: Class, instance, dotted class path, or a method reference whose
                declaring class should be used.

        Returns:
            Read-only annotation map, or ``Missing.NOT_FOUND`` when the
            reference does not resolve.
        """
        try:
            declaration = self._locator.locate_class(ref)
        except ResolutionError as exc:
            logger.debug(f"Class reference did not resolve (ref={ref!r} error={exc})")
            return Missing.NOT_FOUND
        return self._annotations(declaration)

    def annotation_for_class(self, ref: object, name: str) -> AnnotationResult:
        """Return one annotation value of a class.

        Returns:
            The value, ``Missing.NOT_SET`` when the class has no such
            annotation, or ``Missing.NOT_FOUND`` when the class does not resolve.
        """
        return _lookup(self.annotations_for_class(ref), name)

    def annotations_for_method(self, ref: object) -> AnnotationsResult:
        """Return all annotations of a method.

        Args:
            ref: ``(target, name)`` pair, ``"Class::method"`` or
                ``"Class#method"`` string, bound method, or function defined in
                a class body.

        Returns:
            Read-only annotation map, or ``Missing.NOT_FOUND`` when the
            reference does not resolve to exactly one method.
        """
        try:
            declaration = self._locator.locate_method(ref)
        except ResolutionError as exc:
            logger.debug(f"Method reference did not resolve (ref={ref!r} error={exc})")
            return Missing.NOT_FOUND
        return self._annotations(declaration)

    def annotation_for_method(self, ref: object, name: str) -> AnnotationResult:
        """Return one annotation value of a method.

        Returns:
            The value, ``Missing.NOT_SET`` when the method has no such
            annotation, or ``Missing.NOT_FOUND`` when the method does not resolve.
        """
        return _lookup(self.annotations_for_method(ref), name)

    def _annotations(self, declaration: Declaration) -> AnnotationMap:
        return self._cache.get_or_compute(
            declaration.identity, lambda: self._parse(declaration)
        )

    def _parse(self, declaration: Declaration) -> dict[str, str]:
        comment = self._locator.read_comment(declaration)
        if comment is None:
            return {}
        return self._parser(comment)


def _lookup(annotations: AnnotationsResult, name: str) -> AnnotationResult:
    if annotations is Missing.NOT_FOUND:
        return Missing.NOT_FOUND
    return annotations.get(name, Missing.NOT_SET)


_default_reader: AnnotationReader | None = None


def default_reader() -> AnnotationReader:
    """Return the process-wide reader, creating it on first use."""
    global _default_reader
    if _default_reader is None:
        _default_reader = AnnotationReader()
    return _default_reader


def reset_default_reader(reader: AnnotationReader | None = None) -> None:
    """Replace the process-wide reader, discarding its cache.

    Args:
        reader: Reader to install; a fresh runtime reader is created lazily when
            omitted.
    """
    global _default_reader
    _default_reader = reader


def get_annotations_for_class(ref: object) -> AnnotationsResult:
    """Return all annotations of a class using the process-wide reader."""
    return default_reader().annotations_for_class(ref)


def get_annotation_for_class(ref: object, name: str) -> AnnotationResult:
    """Return one annotation of a class using the process-wide reader."""
    return default_reader().annotation_for_class(ref, name)


def get_annotations_for_method(ref: object) -> AnnotationsResult:
    """Return all annotations of a method using the process-wide reader."""
    return default_reader().annotations_for_method(ref)


def get_annotation_for_method(ref: object, name: str) -> AnnotationResult:
    """Return one annotation of a method using the process-wide reader."""
    return default_reader().annotation_for_method(ref, name)
