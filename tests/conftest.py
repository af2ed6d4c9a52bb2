"""Shared fixtures for artifact_uploader tests."""
from pathlib import Path

import pytest

from artifact_uploader.models import ProjectMetadata


@pytest.fixture
def make_project(tmp_path):
    """Build a project whose artifacts exist on disk under tmp_path/target."""

    def _make(
        packaging="jar",
        version="1.0",
        classifiers=("",),
        description="Widgets for everyone",
        name="Widgets",
    ):
        target = tmp_path / "target"
        target.mkdir(exist_ok=True)
        artifacts = {}
        for classifier in classifiers:
            stem = f"widgets-{version}" + (f"-{classifier}" if classifier else "")
            path = target / f"{stem}.jar"
            path.write_bytes(b"PK\x03\x04" + stem.encode("ascii"))
            artifacts[classifier] = path
        return ProjectMetadata(
            group_id="org.example.widgets",
            artifact_id="widgets",
            version=version,
            packaging=packaging,
            name=name,
            description=description,
            artifacts=artifacts,
            build_directory=target,
        )

    return _make
