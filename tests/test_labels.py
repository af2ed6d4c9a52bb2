"""Tests for default labels and auth token encoding."""
import base64

from artifact_uploader.services.auth import basic_auth_header, encode_auth_token
from artifact_uploader.services.labels import default_labels, split_labels


class TestDefaultLabels:
    def test_archive_primary(self):
        assert default_labels("archive", "") == ["OpSys-All"]

    def test_archive_sources(self):
        assert default_labels("archive", "sources") == ["OpSys-All", "Type-Source"]

    def test_unknown_packaging(self):
        assert default_labels("unknown-kind", "") == []

    def test_maven_packaging_kinds(self):
        assert default_labels("jar", "") == ["OpSys-All"]
        assert default_labels("maven-plugin", "") == ["OpSys-All"]
        assert default_labels("plugin", "") == ["OpSys-All"]
        assert default_labels("war", "") == []
        assert default_labels("web-archive", "") == []

    def test_src_substring_anywhere(self):
        assert default_labels("pom", "project-src") == ["Type-Source"]
        assert default_labels("jar", "test-sources") == ["OpSys-All", "Type-Source"]

    def test_source_marker_is_case_sensitive(self):
        assert default_labels("jar", "SOURCES") == ["OpSys-All"]

    def test_no_duplicates(self):
        labels = default_labels("jar", "src-sources")
        assert labels == ["OpSys-All", "Type-Source"]


class TestSplitLabels:
    def test_mixed_separators(self):
        assert split_labels("Featured; Type-Archive,OpSys-All  Deprecated") == [
            "Featured",
            "Type-Archive",
            "OpSys-All",
            "Deprecated",
        ]

    def test_drops_empty_tokens(self):
        assert split_labels(" ;, Featured ,; ") == ["Featured"]
        assert split_labels("") == []


class TestAuthToken:
    def test_alice(self):
        assert encode_auth_token("alice", "secret") == "YWxpY2U6c2VjcmV0"
        assert encode_auth_token("alice", "secret") == base64.b64encode(b"alice:secret").decode()

    def test_empty_values_produce_token(self):
        assert encode_auth_token("", "") == base64.b64encode(b":").decode()

    def test_header(self):
        assert basic_auth_header("alice", "secret") == "Basic YWxpY2U6c2VjcmV0"
