"""Tests for descriptor resolution."""
from pathlib import Path

import pytest

from artifact_uploader.errors import ConfigurationError, MissingArtifactError, PolicyViolationError
from artifact_uploader.models import ProjectMetadata
from artifact_uploader.services.locators import ClassifierLocator, FileNameLocator, get_locator
from artifact_uploader.services.resolver import DescriptorResolver, default_summary


class TestDefaults:
    def test_empty_specs_yield_primary_descriptor(self, make_project):
        project = make_project()
        descriptors = DescriptorResolver().resolve([], project)

        assert len(descriptors) == 1
        descriptor = descriptors[0]
        assert descriptor.classifier == ""
        assert descriptor.file == project.primary_artifact.resolve()
        assert descriptor.summary == "Widgets for everyone"
        assert descriptor.labels == ("OpSys-All",)

    def test_summary_falls_back_to_composite(self, make_project):
        project = make_project(description=None, classifiers=("", "sources"))
        descriptors = DescriptorResolver().resolve([{"classifier": "sources"}], project)
        assert descriptors[0].summary == "Widgets 1.0 sources"

    def test_composite_summary_without_classifier_has_no_trailing_space(self, make_project):
        project = make_project(description="   ")
        assert default_summary(project, "") == "Widgets 1.0"

    def test_recognized_keys_give_complete_descriptor(self, make_project):
        project = make_project(classifiers=("", "sources"))
        for spec in ({}, {"summary": "x"}, {"labels": "a"}, {"classifier": "sources"}):
            descriptors = DescriptorResolver().resolve([spec], project)
            assert len(descriptors) == 1
            descriptor = descriptors[0]
            assert descriptor.classifier is not None
            assert descriptor.summary is not None
            assert descriptor.labels is not None


class TestExplicitValues:
    def test_sources_classifier(self, make_project):
        project = make_project(packaging="archive", classifiers=("", "sources"))
        descriptors = DescriptorResolver().resolve([{"classifier": "sources"}], project)

        assert len(descriptors) == 1
        assert descriptors[0].classifier == "sources"
        assert descriptors[0].labels == ("OpSys-All", "Type-Source")
        assert descriptors[0].file.name == "widgets-1.0-sources.jar"

    def test_explicit_summary_and_labels(self, make_project):
        project = make_project()
        descriptors = DescriptorResolver().resolve(
            [{"summary": "  Release build ", "labels": "Featured;  Type-Archive,,OpSys-All"}],
            project,
        )
        assert descriptors[0].summary == "  Release build "
        assert descriptors[0].labels == ("Featured", "Type-Archive", "OpSys-All")

    def test_explicit_empty_labels(self, make_project):
        descriptors = DescriptorResolver().resolve([{"labels": ""}], make_project())
        assert descriptors[0].labels == ()

    def test_order_is_preserved(self, make_project):
        project = make_project(classifiers=("", "sources", "javadoc"))
        specs = [{"classifier": "javadoc"}, {}, {"classifier": "sources"}]
        descriptors = DescriptorResolver().resolve(specs, project)
        assert [d.classifier for d in descriptors] == ["javadoc", "", "sources"]


class TestValidation:
    def test_unknown_keys_are_all_reported(self, make_project):
        with pytest.raises(ConfigurationError) as excinfo:
            DescriptorResolver().resolve(
                [{"classifier": "", "postfix": "x", "extensions": "jar", "tags": "a"}],
                make_project(),
            )
        assert excinfo.value.unknown_keys == ("extensions", "postfix", "tags")
        for key in ("extensions", "postfix", "tags"):
            assert key in str(excinfo.value)

    def test_later_unknown_key_reported_before_missing_file(self, make_project):
        with pytest.raises(ConfigurationError) as excinfo:
            DescriptorResolver().resolve(
                [{"classifier": "javadoc"}, {"bogus": "x"}],
                make_project(),
            )
        assert excinfo.value.unknown_keys == ("bogus",)

    def test_non_string_value(self, make_project):
        with pytest.raises(ConfigurationError, match="labels"):
            DescriptorResolver().resolve([{"labels": ["a", "b"]}], make_project())

    def test_missing_primary_artifact(self, make_project):
        project = make_project()
        project.primary_artifact.unlink()
        with pytest.raises(MissingArtifactError) as excinfo:
            DescriptorResolver().resolve([], project)
        assert excinfo.value.descriptor_id == ""
        assert excinfo.value.path == project.primary_artifact

    def test_unattached_classifier_reports_expected_path(self, make_project, tmp_path):
        project = make_project()
        with pytest.raises(MissingArtifactError) as excinfo:
            DescriptorResolver().resolve([{"classifier": "javadoc"}], project)
        assert excinfo.value.descriptor_id == "javadoc"
        assert excinfo.value.path == tmp_path / "target" / "widgets-1.0-javadoc.jar"

    def test_unattached_classifier_without_build_directory(self):
        project = ProjectMetadata("g", "a", "1.0", "jar")
        with pytest.raises(MissingArtifactError) as excinfo:
            DescriptorResolver().resolve([], project)
        assert excinfo.value.path is None

    def test_unattached_classifier_found_in_build_directory(self, make_project, tmp_path):
        project = make_project()
        built = tmp_path / "target" / "widgets-1.0-javadoc.jar"
        built.write_bytes(b"doc")
        descriptors = DescriptorResolver().resolve([{"classifier": "javadoc"}], project)
        assert descriptors[0].file == built.resolve()


class TestSnapshotPolicy:
    def test_snapshot_refused(self, make_project):
        project = make_project(version="1.0-SNAPSHOT")
        with pytest.raises(PolicyViolationError):
            DescriptorResolver().resolve([{"classifier": "sources", "bogus": "x"}], project)

    def test_snapshot_allowed(self, make_project):
        project = make_project(version="1.0-SNAPSHOT")
        descriptors = DescriptorResolver(allow_snapshots=True).resolve([], project)
        assert descriptors[0].file.name == "widgets-1.0-SNAPSHOT.jar"


class TestFileNameLocator:
    def test_default_name_from_artifact_and_version(self, make_project):
        project = make_project()
        resolver = DescriptorResolver(locator=FileNameLocator())
        descriptors = resolver.resolve([], project)

        assert descriptors[0].file.name == "widgets-1.0.jar"
        assert descriptors[0].classifier == ""

    def test_one_descriptor_per_extension(self, make_project, tmp_path):
        project = make_project()
        for ext in ("zip", "tar.gz"):
            (tmp_path / "target" / f"dist-bin.{ext}").write_bytes(b"x")

        resolver = DescriptorResolver(locator=FileNameLocator())
        descriptors = resolver.resolve(
            [{"prefix": "dist", "postfix": "bin", "extensions": "zip, tar.gz"}],
            project,
        )

        assert [d.file.name for d in descriptors] == ["dist-bin.zip", "dist-bin.tar.gz"]
        assert all(d.classifier == "bin" for d in descriptors)

    def test_sources_postfix_labels(self, make_project):
        project = make_project(classifiers=("", "sources"))
        resolver = DescriptorResolver(locator=FileNameLocator())
        descriptors = resolver.resolve([{"postfix": "sources"}], project)
        assert descriptors[0].labels == ("OpSys-All", "Type-Source")

    def test_war_packaging_defaults_to_war(self, make_project, tmp_path):
        project = make_project(packaging="war")
        (tmp_path / "target" / "widgets-1.0.war").write_bytes(b"x")
        descriptors = DescriptorResolver(locator=FileNameLocator()).resolve([], project)
        assert descriptors[0].file.name == "widgets-1.0.war"
        assert descriptors[0].labels == ()

    def test_classifier_key_rejected(self, make_project):
        with pytest.raises(ConfigurationError) as excinfo:
            DescriptorResolver(locator=FileNameLocator()).resolve([{"classifier": "x"}], make_project())
        assert excinfo.value.unknown_keys == ("classifier",)

    def test_needs_build_directory(self):
        project = ProjectMetadata("g", "a", "1.0", "jar")
        with pytest.raises(ConfigurationError, match="build_directory"):
            DescriptorResolver(locator=FileNameLocator()).resolve([], project)


class TestGetLocator:
    def test_known_strategies(self):
        assert isinstance(get_locator("classifier"), ClassifierLocator)
        assert isinstance(get_locator("filename"), FileNameLocator)

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError, match="unknown resolution strategy"):
            get_locator("extension")
