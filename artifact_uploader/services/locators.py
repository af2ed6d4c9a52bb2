"""
Artifact locators - strategies that map a configuration entry to files.

Two addressing conventions exist:

* classifier addressing looks the classifier up in the project's
  classifier -> file map (``""`` is the primary artifact);
* file-name addressing builds ``<prefix>[-<postfix>].<ext>`` names inside
  the build directory, one file per extension.

Both satisfy ``IArtifactLocator`` so the resolver never needs to know which
one is in use.
"""
import logging
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple

from ..errors import ConfigurationError
from ..models import ProjectMetadata, RawUploadSpec
from .labels import split_labels

logger = logging.getLogger(__name__)

CLASSIFIER = "classifier"
SUMMARY = "summary"
LABELS = "labels"
PREFIX = "prefix"
POSTFIX = "postfix"
EXTENSIONS = "extensions"

WEB_ARCHIVE_PACKAGING = frozenset({"war", "web-archive"})

Located = List[Tuple[str, Optional[Path]]]


def packaging_extension(packaging: str) -> str:
    """File extension the build uses for the given packaging kind."""
    if packaging in WEB_ARCHIVE_PACKAGING:
        return "war"
    return "jar"


def _file_stem(prefix: str, suffix: str) -> str:
    return f"{prefix}-{suffix}" if suffix else prefix


class ClassifierLocator:
    """Locate artifacts by classifier."""

    name = "classifier"
    allowed_keys: FrozenSet[str] = frozenset({CLASSIFIER, SUMMARY, LABELS})

    def locate(self, spec: RawUploadSpec, project: ProjectMetadata) -> Located:
        classifier = spec.get(CLASSIFIER, "")
        path = project.artifacts.get(classifier)
        if path is None:
            path = self._expected_path(project, classifier)
            logger.debug(
                "No artifact attached for classifier %r, expecting %s", classifier, path
            )
        return [(classifier, path)]

    @staticmethod
    def _expected_path(project: ProjectMetadata, classifier: str) -> Optional[Path]:
        if project.build_directory is None:
            return None
        stem = _file_stem(f"{project.artifact_id}-{project.version}", classifier)
        return project.build_directory / f"{stem}.{packaging_extension(project.packaging)}"


class FileNameLocator:
    """Locate artifacts by prefix, postfix and extensions in the build directory."""

    name = "filename"
    allowed_keys: FrozenSet[str] = frozenset({PREFIX, POSTFIX, EXTENSIONS, SUMMARY, LABELS})

    def locate(self, spec: RawUploadSpec, project: ProjectMetadata) -> Located:
        if project.build_directory is None:
            raise ConfigurationError(
                "file-name addressing needs the project's build_directory"
            )

        prefix = spec.get(PREFIX) or f"{project.artifact_id}-{project.version}"
        postfix = spec.get(POSTFIX, "")
        if EXTENSIONS in spec:
            extensions = split_labels(spec[EXTENSIONS])
            if not extensions:
                raise ConfigurationError("extensions must name at least one file extension")
        else:
            extensions = [packaging_extension(project.packaging)]

        stem = _file_stem(prefix, postfix)
        return [
            (postfix, project.build_directory / f"{stem}.{extension.lstrip('.')}")
            for extension in extensions
        ]


LOCATORS = {
    ClassifierLocator.name: ClassifierLocator,
    FileNameLocator.name: FileNameLocator,
}


def get_locator(strategy: str):
    """Return a locator instance for the configured strategy name."""
    try:
        return LOCATORS[strategy]()
    except KeyError:
        raise ConfigurationError(
            f"unknown resolution strategy {strategy!r} (expected one of: {', '.join(sorted(LOCATORS))})"
        ) from None
