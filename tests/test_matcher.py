"""Tests for version range matching and severity classification."""

import pytest

from hulud_guard.core.matcher import (
    MaliciousPackageMatcher,
    SemVer,
    installed_version_matches,
    parse_version,
    range_satisfied_by,
)
from hulud_guard.core.models import Severity, SourceType


class TestParseVersion:
    """Test extraction of major.minor.patch triples."""

    def test_plain_version(self):
        assert parse_version("1.2.3") == SemVer(1, 2, 3)

    def test_ignores_prerelease_and_extra_components(self):
        assert parse_version("1.2.3-beta.1") == SemVer(1, 2, 3)
        assert parse_version("1.2.3.4") == SemVer(1, 2, 3)
        assert parse_version("v10.20.30+build") == SemVer(10, 20, 30)

    def test_unparseable(self):
        assert parse_version("latest") is None
        assert parse_version("1.2") is None
        assert parse_version("") is None
        assert parse_version(None) is None


class TestCaretRanges:
    """Test ^ ranges."""

    @pytest.mark.parametrize("candidate", ["1.2.0", "1.2.3", "1.3.0", "1.99.0"])
    def test_major_above_zero_allows_minor_and_patch_upgrades(self, candidate):
        assert range_satisfied_by("^1.2.0", candidate)

    @pytest.mark.parametrize("candidate", ["1.1.9", "1.2.2", "2.0.0", "0.9.9"])
    def test_major_above_zero_rejects_lower_or_next_major(self, candidate):
        assert not range_satisfied_by("^1.2.3", candidate)

    def test_major_above_zero_any_patch_when_minor_higher(self):
        assert range_satisfied_by("^1.2.5", "1.3.0")

    def test_zero_major(self):
        assert range_satisfied_by("^0.2.5", "0.2.5")
        assert range_satisfied_by("^0.2.5", "0.2.9")
        assert not range_satisfied_by("^0.2.5", "0.2.4")
        assert not range_satisfied_by("^0.2.5", "0.3.0")
        assert not range_satisfied_by("^0.2.5", "1.2.5")

    def test_zero_major_zero_minor_is_exact(self):
        assert range_satisfied_by("^0.0.3", "0.0.3")
        assert not range_satisfied_by("^0.0.3", "0.0.4")
        assert not range_satisfied_by("^0.0.3", "0.1.3")


class TestTildeRanges:
    """Test ~ ranges."""

    def test_patch_upgrades_only(self):
        assert range_satisfied_by("~1.2.3", "1.2.3")
        assert range_satisfied_by("~1.2.3", "1.2.10")
        assert not range_satisfied_by("~1.2.3", "1.2.2")
        assert not range_satisfied_by("~1.2.3", "1.3.0")
        assert not range_satisfied_by("~1.2.3", "2.2.3")


class TestExactSpecs:
    """Test specs without a prefix."""

    def test_exact_triple_equality(self):
        assert range_satisfied_by("1.2.3", "1.2.3")
        assert not range_satisfied_by("1.2.3", "1.2.4")

    def test_textual_identity_short_circuits(self):
        assert range_satisfied_by("1.0.0-rc.1", "1.0.0-rc.1")
        assert range_satisfied_by("latest", "latest")

    def test_whitespace_is_ignored(self):
        assert range_satisfied_by("  ^1.2.0 ", "1.2.3\n")

    def test_unparseable_never_matches(self):
        assert not range_satisfied_by("latest", "1.2.3")
        assert not range_satisfied_by("^1.2.0", "garbage")
        assert not range_satisfied_by("*", "1.2.3")
        assert not range_satisfied_by(None, "1.2.3")


class TestInstalledVersionMatches:
    """Test exact comparison for lock file versions."""

    def test_exact_versions(self):
        assert installed_version_matches("3.3.3", "3.3.3")
        assert not installed_version_matches("3.3.4", "3.3.3")

    def test_no_range_semantics(self):
        assert not installed_version_matches("^3.3.0", "3.3.3")


class TestMaliciousPackageMatcher:
    """Test severity derivation."""

    def test_manifest_critical(self, database):
        matcher = MaliciousPackageMatcher(database)
        finding = matcher.match_manifest_dependency("/p/package.json", "left-pad", "^1.2.0")

        assert finding.severity is Severity.CRITICAL
        assert finding.source_type is SourceType.MANIFEST
        assert finding.matched_malicious_versions == ("1.2.3",)
        assert finding.all_known_malicious_versions == ("1.2.3",)
        assert "could install" in finding.message

    def test_manifest_warning(self, database):
        matcher = MaliciousPackageMatcher(database)
        finding = matcher.match_manifest_dependency("/p/package.json", "left-pad", "^2.0.0")

        assert finding.severity is Severity.WARNING
        assert finding.matched_malicious_versions == ()
        assert finding.all_known_malicious_versions == ("1.2.3",)

    def test_manifest_info_for_name_only_package(self, database):
        matcher = MaliciousPackageMatcher(database)
        finding = matcher.match_manifest_dependency("/p/package.json", "name-only-pkg", "^1.0.0")

        assert finding.severity is Severity.INFO
        assert finding.all_known_malicious_versions == ()

    def test_manifest_unknown_package(self, database):
        matcher = MaliciousPackageMatcher(database)
        assert matcher.match_manifest_dependency("/p/package.json", "unknown-pkg-x", "1.0.0") is None

    def test_manifest_matches_several_versions(self, database):
        matcher = MaliciousPackageMatcher(database)
        finding = matcher.match_manifest_dependency("/p/package.json", "evil-pkg", "^3.0.0")

        assert finding.severity is Severity.CRITICAL
        assert finding.matched_malicious_versions == ("3.3.3", "3.4.0")

    def test_lock_critical(self, database):
        matcher = MaliciousPackageMatcher(database)
        finding = matcher.match_lock_entry("/p/yarn.lock", "evil-pkg", "3.3.3")

        assert finding.severity is Severity.CRITICAL
        assert finding.source_type is SourceType.LOCK_FILE
        assert finding.version == "3.3.3"
        assert finding.matched_malicious_versions == ("3.3.3",)

    def test_lock_safe_version_is_warning(self, database):
        matcher = MaliciousPackageMatcher(database)
        finding = matcher.match_lock_entry("/p/yarn.lock", "evil-pkg", "3.3.2")

        assert finding.severity is Severity.WARNING
        assert "appears safe" in finding.message

    def test_lock_name_only_package_is_warning(self, database):
        matcher = MaliciousPackageMatcher(database)
        finding = matcher.match_lock_entry("/p/yarn.lock", "name-only-pkg", "1.0.0")

        assert finding.severity is Severity.WARNING
        assert finding.message == "Package found in lock file with version 1.0.0"
