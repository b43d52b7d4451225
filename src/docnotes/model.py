# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain types shared by the annotation reader components."""

from collections.abc import Mapping
from enum import Enum
from typing import Literal

DeclarationIdentity = str
AnnotationMap = Mapping[str, str]
DeclarationKind = Literal["class", "method"]

METHOD_SEPARATOR = "#"


class Missing(Enum):
    """Represent why a lookup produced no value.

    Both members are falsy so ``if not result`` keeps working for callers that
    do not care which case occurred.
    """

    NOT_FOUND = "not_found"
    NOT_SET = "not_set"

    def __bool__(self) -> bool:
        return False


def method_identity(class_identity: DeclarationIdentity, method_name: str) -> str:
    """Build the identity of a method from its declaring class identity."""
    return f"{class_identity}{METHOD_SEPARATOR}{method_name}"
