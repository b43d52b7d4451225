# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for docstring annotation reading."""

from docnotes.cache import AnnotationCache
from docnotes.locator import (
    CommentLocator,
    Declaration,
    ResolutionError,
    RuntimeCommentLocator,
)
from docnotes.model import Missing
from docnotes.parser import parse_annotations
from docnotes.reader import (
    AnnotationReader,
    default_reader,
    get_annotation_for_class,
    get_annotation_for_method,
    get_annotations_for_class,
    get_annotations_for_method,
    reset_default_reader,
)
from docnotes.services import PROTOTYPE, ServiceContainer, UnregisteredServiceError
from docnotes.source_index import SourceIndexLocator

__all__ = [
    "PROTOTYPE",
    "AnnotationCache",
    "AnnotationReader",
    "CommentLocator",
    "Declaration",
    "Missing",
    "ResolutionError",
    "RuntimeCommentLocator",
    "ServiceContainer",
    "SourceIndexLocator",
    "UnregisteredServiceError",
    "default_reader",
    "get_annotation_for_class",
    "get_annotation_for_method",
    "get_annotations_for_class",
    "get_annotations_for_method",
    "parse_annotations",
    "reset_default_reader",
]
