"""Tests for manifest discovery."""

from pathlib import Path

import pytest

from gemfile_parser.utils.path_utils import (
    ManifestFileFinder,
    PathFilter,
    find_manifest_files,
    resolve_gemspec_files,
)


@pytest.fixture
def project(tmp_path):
    """Create a small Ruby project tree."""
    (tmp_path / "Gemfile").write_text('gemspec\ngem "rake"\n')
    (tmp_path / "demo.gemspec").write_text("Gem::Specification.new do |spec|\nend\n")
    (tmp_path / "gemfiles").mkdir()
    (tmp_path / "gemfiles" / "rails_7.gemfile").write_text('gem "rails", "~> 7.0"\n')
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "demo.rb").write_text("module Demo; end\n")

    bundled = tmp_path / "vendor" / "bundle" / "gems" / "rack-3.0.0"
    bundled.mkdir(parents=True)
    (bundled / "rack.gemspec").write_text("")

    return tmp_path


class TestManifestFileFinder:
    """Test finding manifests on disk."""

    def test_find_manifest_files(self, project):
        manifests = find_manifest_files(project)
        found = {m.path.relative_to(project).as_posix(): m.parser_type for m in manifests}

        assert found == {
            "Gemfile": "gemfile",
            "demo.gemspec": "gemspec",
            "gemfiles/rails_7.gemfile": "gemfile",
        }

    def test_results_are_sorted(self, project):
        paths = [m.path for m in find_manifest_files(project)]

        assert paths == sorted(paths)

    def test_extra_ignore_patterns(self, project):
        manifests = find_manifest_files(project, ["**/gemfiles/**"])

        assert [m.path.name for m in manifests] == ["Gemfile", "demo.gemspec"]

    def test_single_file(self, project):
        manifests = find_manifest_files(project / "Gemfile")

        assert len(manifests) == 1
        assert manifests[0].parser_type == "gemfile"

    def test_single_non_manifest_file(self, project):
        assert find_manifest_files(project / "lib" / "demo.rb") == []

    def test_missing_root(self, tmp_path):
        with pytest.raises(ValueError):
            find_manifest_files(tmp_path / "missing")

    @pytest.mark.parametrize("name, expected", [
        ("Gemfile", "gemfile"),
        ("gems.rb", "gemfile"),
        ("rails_6.gemfile", "gemfile"),
        ("demo.gemspec", "gemspec"),
        ("Gemfile.lock", None),
        ("Rakefile", None),
    ])
    def test_get_parser_type(self, name, expected):
        assert ManifestFileFinder().get_parser_type(Path(name)) == expected


class TestPathFilter:
    """Test ignore rules."""

    def test_relative_top_level_directory(self):
        path_filter = PathFilter()

        assert path_filter.is_ignored(Path("vendor/bundle/x/Gemfile"))
        assert path_filter.is_ignored(Path(".git/Gemfile"))
        assert not path_filter.is_ignored(Path("Gemfile"))
        assert not path_filter.is_ignored(Path("vendor/Gemfile"))


class TestResolveGemspecFiles:
    """Test expanding gemspec patterns."""

    def test_default_pattern(self, project):
        assert resolve_gemspec_files(project / "Gemfile", "*.gemspec") == [project / "demo.gemspec"]

    def test_path_pattern(self, project):
        (project / "lib" / "other.gemspec").write_text("")

        assert resolve_gemspec_files(project / "Gemfile", "lib/*.gemspec") == [project / "lib" / "other.gemspec"]

    def test_no_match(self, project):
        assert resolve_gemspec_files(project / "Gemfile", "missing.gemspec") == []
