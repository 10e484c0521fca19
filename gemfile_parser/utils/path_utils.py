"""Path utilities for finding manifest files and filtering paths."""

import fnmatch
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional


@dataclass
class ManifestFile:
    """A manifest file found on disk."""

    path: Path
    parser_type: str

    def __post_init__(self) -> None:
        """Validate the manifest file."""
        if not self.path.exists():
            raise ValueError(f"Manifest file does not exist: {self.path}")


class PathFilter:
    """Filters paths based on patterns and rules."""

    DEFAULT_IGNORE_PATTERNS = [
        "**/.git/**",
        "**/.bundle/**",
        "**/vendor/bundle/**",
        "**/vendor/cache/**",
        "**/node_modules/**",
        "**/tmp/**",
        "**/log/**",
        "**/coverage/**",
        "**/pkg/**",
    ]

    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        """Initialize path filter.

        Args:
            ignore_patterns: Extra glob patterns to ignore on top of the defaults
        """
        self.ignore_patterns = self.DEFAULT_IGNORE_PATTERNS + list(ignore_patterns or [])

    def is_ignored(self, path: Path) -> bool:
        """Check if a path should be ignored.

        Args:
            path: Path to check

        Returns:
            True if path should be ignored
        """
        path_str = path.as_posix()
        if not path.is_absolute():
            # so that "**/x/**" also matches a top-level "x/"
            path_str = f"./{path_str}"

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(path_str, pattern):
                return True

        return False


class ManifestFileFinder:
    """Finds Gemfiles and gemspecs in a project directory."""

    MANIFEST_PATTERNS = {
        "Gemfile": "gemfile",
        "gems.rb": "gemfile",
        "*.gemfile": "gemfile",
        "*.gemspec": "gemspec",
    }

    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        self.path_filter = PathFilter(ignore_patterns)

    def find_manifest_files(self, root_path: Path) -> List[ManifestFile]:
        """Find all manifest files in a directory tree.

        Args:
            root_path: Root directory to search, or a single manifest file

        Returns:
            List of found manifest files, sorted by path
        """
        if not root_path.exists():
            raise ValueError(f"Root path does not exist: {root_path}")

        if root_path.is_file():
            parser_type = self.get_parser_type(root_path)
            return [ManifestFile(root_path, parser_type)] if parser_type else []

        manifests = []
        for file_path in self._walk_files(root_path):
            parser_type = self.get_parser_type(file_path)
            if parser_type:
                manifests.append(ManifestFile(path=file_path, parser_type=parser_type))

        return sorted(manifests, key=lambda manifest: manifest.path)

    def _walk_files(self, root_path: Path) -> Iterator[Path]:
        for file_path in root_path.rglob("*"):
            if file_path.is_file() and not self.path_filter.is_ignored(file_path.relative_to(root_path)):
                yield file_path

    def get_parser_type(self, file_path: Path) -> Optional[str]:
        """Get the parser type for a file name.

        Args:
            file_path: Path to the file

        Returns:
            'gemfile', 'gemspec' or None if not a manifest
        """
        filename = file_path.name

        if filename in self.MANIFEST_PATTERNS:
            return self.MANIFEST_PATTERNS[filename]

        for pattern, parser_type in self.MANIFEST_PATTERNS.items():
            if fnmatch.fnmatch(filename, pattern):
                return parser_type

        return None


def find_manifest_files(
    root_path: Path,
    ignore_patterns: Optional[List[str]] = None
) -> List[ManifestFile]:
    """Convenience function to find manifest files.

    Args:
        root_path: Root directory to search
        ignore_patterns: Additional ignore patterns

    Returns:
        List of found manifest files
    """
    finder = ManifestFileFinder(ignore_patterns)
    return finder.find_manifest_files(root_path)


def resolve_gemspec_files(gemfile_path: Path, pattern: str) -> List[Path]:
    """Expand a gemspec glob pattern relative to the Gemfile's directory.

    Args:
        gemfile_path: Gemfile that declared ``gemspec``
        pattern: Pattern such as ``*.gemspec`` or ``lib/foo.gemspec``

    Returns:
        Sorted list of matching gemspec files
    """
    base_dir = gemfile_path.parent
    if Path(pattern).is_absolute():
        return sorted(p for p in Path(pattern).parent.glob(Path(pattern).name) if p.is_file())
    return sorted(p for p in base_dir.glob(pattern) if p.is_file())
