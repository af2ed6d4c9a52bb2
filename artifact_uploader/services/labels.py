"""Label helpers: default labels from packaging/classifier and list splitting."""
import re
from typing import List

OPSYS_ALL = "OpSys-All"
TYPE_SOURCE = "Type-Source"

# Packaging kinds that are deployable on any platform
PLATFORM_INDEPENDENT_PACKAGING = frozenset({"jar", "maven-plugin", "archive", "plugin"})
SOURCE_MARKERS = ("src", "sources")

_LIST_SEPARATORS = re.compile(r"[;,\s]+")


def default_labels(packaging: str, classifier: str) -> List[str]:
    """
    Derive default labels for an upload.

    Platform label first, then the source label; empty when neither applies.
    """
    labels: List[str] = []
    if packaging in PLATFORM_INDEPENDENT_PACKAGING:
        labels.append(OPSYS_ALL)
    if any(marker in (classifier or "") for marker in SOURCE_MARKERS):
        labels.append(TYPE_SOURCE)
    return labels


def split_labels(value: str) -> List[str]:
    """Split a ``;``/``,``/whitespace separated list, dropping empty tokens."""
    return [token.strip() for token in _LIST_SEPARATORS.split(value or "") if token.strip()]
