"""
Descriptor Resolver - Single Responsibility: turn configuration into uploads.

Applies convention-over-configuration defaults to sparse upload entries and
validates that every resolved file exists.
"""
import logging
from typing import List, Optional, Sequence

from ..errors import ConfigurationError, MissingArtifactError, PolicyViolationError
from ..models import ProjectMetadata, RawUploadSpec, ResolvedUploadDescriptor
from ..protocols import IArtifactLocator
from .labels import default_labels, split_labels
from .locators import LABELS, SUMMARY, ClassifierLocator, Located

logger = logging.getLogger(__name__)


def default_summary(project: ProjectMetadata, classifier: str) -> str:
    """Project description, or ``name version classifier`` when there is none."""
    if project.description and project.description.strip():
        return project.description
    parts = (project.name or project.artifact_id, project.version, classifier)
    return " ".join(part for part in parts if part)


class DescriptorResolver:
    """
    Resolve raw upload entries against project metadata.

    Unknown keys, malformed values and disallowed snapshot versions abort the
    whole resolution; nothing is uploaded in that case.
    """

    def __init__(
        self,
        locator: Optional[IArtifactLocator] = None,
        allow_snapshots: bool = False,
    ):
        self._locator = locator or ClassifierLocator()
        self._allow_snapshots = allow_snapshots

    def resolve(
        self,
        raw_specs: Sequence[RawUploadSpec],
        project: ProjectMetadata,
    ) -> List[ResolvedUploadDescriptor]:
        """
        Resolve and validate every entry, preserving input order.

        An empty sequence yields exactly one default descriptor.

        Raises:
            PolicyViolationError: snapshot version without allow_snapshots
            ConfigurationError: unknown keys or non-string values
            MissingArtifactError: a resolved file does not exist
        """
        if not self._allow_snapshots and project.is_snapshot:
            raise PolicyViolationError(
                f"Cannot upload SNAPSHOT version {project.version}. "
                "If really necessary, enable allow_snapshots."
            )

        entries = list(raw_specs) or [{}]

        # Every entry is checked before any file is looked at
        for spec in entries:
            self._check_keys(spec)
        located = [(spec, self._locator.locate(spec, project)) for spec in entries]

        descriptors: List[ResolvedUploadDescriptor] = []
        for spec, targets in located:
            for descriptor in self._build(spec, targets, project):
                logger.info("Loaded descriptor %r", descriptor.id)
                logger.debug("Descriptor %r = %s", descriptor.id, descriptor.describe())
                descriptors.append(descriptor)
        return descriptors

    def _build(
        self,
        spec: RawUploadSpec,
        targets: Located,
        project: ProjectMetadata,
    ) -> List[ResolvedUploadDescriptor]:
        resolved = []
        for classifier, path in targets:
            if SUMMARY in spec:
                summary = spec[SUMMARY]
            else:
                summary = default_summary(project, classifier)

            if LABELS in spec:
                labels = split_labels(spec[LABELS])
            else:
                labels = default_labels(project.packaging, classifier)

            if path is None or not path.exists():
                raise MissingArtifactError(classifier, path)

            resolved.append(
                ResolvedUploadDescriptor(
                    classifier=classifier,
                    file=path.resolve(),
                    summary=summary,
                    labels=tuple(labels),
                )
            )
        return resolved

    def _check_keys(self, spec: RawUploadSpec) -> None:
        allowed = self._locator.allowed_keys
        unknown = [key for key in spec if key not in allowed]
        if unknown:
            raise ConfigurationError.for_unknown_keys(unknown, allowed)

        bad_values = sorted(key for key, value in spec.items() if not isinstance(value, str))
        if bad_values:
            raise ConfigurationError(
                f"upload descriptor values must be strings: {', '.join(bad_values)}"
            )
