"""Registry mapping manifest files to their parsers."""

from pathlib import Path
from typing import Dict, List, Optional

from .base import BaseParser, ParsedManifest


class ParserRegistry:
    """Registry for manifest parsers."""

    def __init__(self) -> None:
        """Initialize the parser registry."""
        self._parsers: Dict[str, BaseParser] = {}

    def register(self, parser_type: str, parser: BaseParser) -> None:
        """Register a parser under a type name.

        Args:
            parser_type: Parser type (e.g., 'gemfile', 'gemspec')
            parser: Parser instance to register
        """
        self._parsers[parser_type] = parser

    def get_parser(self, parser_type: str) -> Optional[BaseParser]:
        """Get the parser registered for a type.

        Args:
            parser_type: Parser type

        Returns:
            Parser instance or None if not found
        """
        return self._parsers.get(parser_type)

    def find_parser_for_file(self, file_path: Path) -> Optional[BaseParser]:
        """Find a parser that can handle the given file.

        Args:
            file_path: Path to the file

        Returns:
            Parser that can handle the file or None
        """
        for parser in self._parsers.values():
            if parser.can_parse(file_path):
                return parser
        return None

    def get_supported_parser_types(self) -> List[str]:
        return list(self._parsers.keys())

    def get_file_patterns(self) -> List[str]:
        """Glob patterns of every file some registered parser accepts."""
        patterns: List[str] = []
        for parser in self._parsers.values():
            for pattern in parser.file_patterns:
                if pattern not in patterns:
                    patterns.append(pattern)
        return patterns

    def parse_file(self, file_path: Path) -> Optional[ParsedManifest]:
        """Parse a file using the appropriate parser.

        Args:
            file_path: Path to the file to parse

        Returns:
            Parsed manifest or None if no parser found
        """
        parser = self.find_parser_for_file(file_path)
        if parser:
            return parser.parse(file_path)
        return None

    def parse_files(self, file_paths: List[Path]) -> List[ParsedManifest]:
        """Parse multiple files.

        Args:
            file_paths: List of file paths to parse

        Returns:
            List of parsed manifests, skipping files no parser handles
        """
        results = []
        for file_path in file_paths:
            parsed = self.parse_file(file_path)
            if parsed:
                results.append(parsed)
        return results
