# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Parse ``@name value`` annotations out of documentation comments."""

import logging
import re

logger = logging.getLogger(__name__)

_FILLER = "/"
_MARKER = "@"
_CONTINUATION = "*"
_WHITESPACE_RUN = re.compile(r"[\n\r\t ]+")


def parse_annotations(comment: str) -> dict[str, str]:
    """Parse all annotations from a documentation comment.

    Args:
        comment: Raw comment text, optionally wrapped in ``/`` filler characters.

    Returns:
        Annotation names mapped to their normalized values. A name that occurs
        more than once keeps the value of its last occurrence.
    """
    annotations: dict[str, str] = {}
    for chunk in segment_comment(comment):
        name, value = parse_annotation(chunk)
        annotations[name] = value
    return annotations


def segment_comment(comment: str) -> list[str]:
    """Split a comment into one chunk per annotation marker.

    A chunk runs from its ``@`` up to the first ``@`` found after the next
    newline. When no such marker exists the chunk takes the rest of the text
    and scanning stops.

    Args:
        comment: Raw comment text.

    Returns:
        Chunks in source order, each starting with ``@``.
    """
    if comment.startswith(_FILLER):
        comment = comment[1:]
    if comment.endswith(_FILLER):
        comment = comment[:-1]

    chunks: list[str] = []
    position = comment.find(_MARKER)
    while position != -1:
        newline = comment.find("\n", position)
        if newline == -1:
            chunks.append(comment[position:])
            break
        next_marker = comment.find(_MARKER, newline)
        if next_marker == -1:
            chunks.append(comment[position:])
            break
        chunks.append(comment[position:next_marker])
        position = comment.find(_MARKER, position + 1)
    return chunks


def parse_annotation(chunk: str) -> tuple[str, str]:
    """Split one chunk into annotation name and normalized value.

    The name ends at the first space. A chunk without any space is taken as a
    bare name with an empty value.

    Args:
        chunk: Text from an ``@`` marker to the start of the next chunk.

    Returns:
        Tuple of ``(name, value)``.
    """
    space = chunk.find(" ")
    if space == -1:
        return chunk[1:].strip(), ""
    name = chunk[1:space].strip()
    value = chunk[space:].strip()
    return name, clean_annotation_value(value)


def clean_annotation_value(value: str) -> str:
    """Flatten a multi-line value and drop leading ``*`` continuation markers.

    Args:
        value: Raw annotation value.

    Returns:
        Single-line value with whitespace runs collapsed to one space.
    """
    cleaned: list[str] = []
    for line in value.split("\n"):
        line = line.strip()
        while line.startswith(_CONTINUATION):
            line = line[1:].strip()
        cleaned.append(line)
    return _WHITESPACE_RUN.sub(" ", " ".join(cleaned).strip())
