"""Gemfile and gemspec parsers."""

import re
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from ...utils.logging import get_logger
from ..config import RuntimeGroups, runtime_groups as default_runtime_groups
from .base import BaseParser, ParsedManifest, ParseMode
from .builder import DependencyBuilder
from .context import FrameKind, GroupContextStack
from .statements import StatementKind, locate_gemspec, match_statement
from .tokenizer import LBRACE, LBRACKET, LPAREN, RBRACE, RBRACKET, RPAREN, TokenizeError, strip_comment, tokenize

# A statement spread over more lines than this is treated as broken
MAX_CONTINUATION_LINES = 20

_LINE_BREAK = re.compile(r'\r\n|\r|\n')


class GemfileParser(BaseParser):
    """Parser for Bundler Gemfiles."""

    mode = ParseMode.GEMFILE

    def __init__(self, runtime_groups: Optional[RuntimeGroups] = None) -> None:
        """Initialize the Gemfile parser.

        Args:
            runtime_groups: Groups classified as runtime; the process-wide
                set is used when omitted
        """
        super().__init__()
        self.parser_type = "gemfile"
        self.file_patterns = ["Gemfile", "gems.rb", "*.gemfile"]
        self.runtime_groups = runtime_groups
        self.logger = get_logger("GemfileParser")

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a Gemfile
        """
        name = file_path.name
        return name in ("Gemfile", "gems.rb") or name.endswith(".gemfile")

    def parse_text(self, text: str, source_file: Optional[Path] = None) -> ParsedManifest:
        """Scan manifest text line by line.

        Unrecognized lines are skipped. The only condition reported is an
        ``end`` with nothing to close, which is recorded in ``warnings``.

        Args:
            text: Full manifest text
            source_file: File the text was read from, if any

        Returns:
            Parsed manifest

        Raises:
            TypeError: If text is not a string
        """
        if not isinstance(text, str):
            raise TypeError(f"Manifest text must be a string, got {type(text).__name__}")

        groups = self.runtime_groups if self.runtime_groups is not None else default_runtime_groups
        builder = DependencyBuilder(groups, source_file=source_file)
        context = GroupContextStack()
        result = ParsedManifest(
            is_gemspec=self.mode is ParseMode.GEMSPEC,
            mode=self.mode,
            source_file=source_file
        )

        for line_number, line in logical_lines(text):
            statement = match_statement(line, self.mode)

            if statement is None:
                self.logger.debug(f"Ignoring line {line_number}: {line}")
                continue

            if statement.kind is StatementKind.DEPENDENCY:
                dependency = builder.build(statement, context, line_number)
                if dependency:
                    result.add_dependency(dependency)
                else:
                    self.logger.debug(f"Skipping {statement.name} on line {line_number}: non-local source")

            elif statement.kind is StatementKind.SPEC:
                result.is_gemspec = True
                result.gemspec_path = locate_gemspec(
                    name=_option_string(statement.options.get("name")),
                    path=_option_string(statement.options.get("path"))
                )

            elif statement.kind is StatementKind.GROUP_OPEN:
                context.open(FrameKind.GROUP, statement.groups)

            elif statement.kind is StatementKind.SOURCE_OPEN:
                context.open(FrameKind.SOURCE)

            elif statement.kind is StatementKind.BLOCK_OPEN:
                context.open(FrameKind.BLOCK)

            elif statement.kind is StatementKind.END:
                if not context.close():
                    result.warnings.append(f"Line {line_number}: 'end' without a matching block")

        return result


class GemspecParser(GemfileParser):
    """Parser for ``*.gemspec`` files."""

    mode = ParseMode.GEMSPEC

    def __init__(self, runtime_groups: Optional[RuntimeGroups] = None) -> None:
        super().__init__(runtime_groups)
        self.parser_type = "gemspec"
        self.file_patterns = ["*.gemspec"]
        self.logger = get_logger("GemspecParser")

    def can_parse(self, file_path: Path) -> bool:
        return file_path.suffix == ".gemspec"


def parse(
    text: str,
    mode: Union[ParseMode, str] = ParseMode.GEMFILE,
    runtime_groups: Optional[RuntimeGroups] = None,
    source_file: Optional[Path] = None
) -> ParsedManifest:
    """Parse Gemfile or gemspec text without evaluating it.

    Args:
        text: Full manifest text
        mode: ``gemfile`` or ``gemspec``
        runtime_groups: Groups classified as runtime (defaults to the
            process-wide set)
        source_file: Optional path recorded on the result

    Returns:
        Parsed manifest

    Raises:
        TypeError: If text is not a string
        ValueError: If mode is not recognized
    """
    if not isinstance(text, str):
        raise TypeError(f"Manifest text must be a string, got {type(text).__name__}")

    parser_class = GemspecParser if ParseMode.coerce(mode) is ParseMode.GEMSPEC else GemfileParser
    return parser_class(runtime_groups).parse_text(text, source_file=source_file)


def logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_number, code)`` for each statement in the text.

    Comments are removed and statements continued over several lines (a
    trailing comma or backslash, or an unclosed bracket) are joined; the
    line number is that of the statement's first line.

    Args:
        text: Full manifest text

    Yields:
        1-based line number and the statement's code
    """
    buffer: List[str] = []
    start = 0

    for number, raw in enumerate(_LINE_BREAK.split(text), 1):
        code = strip_comment(raw).strip()
        if not code:
            continue

        if not buffer:
            start = number

        continued = code.endswith("\\")
        buffer.append(code[:-1].rstrip() if continued else code)
        joined = " ".join(buffer)

        if len(buffer) < MAX_CONTINUATION_LINES and _continues(joined, continued):
            continue

        yield start, joined
        buffer = []

    if buffer:
        yield start, " ".join(buffer)


def _continues(code: str, backslash: bool) -> bool:
    try:
        tokens = tokenize(code)
    except TokenizeError:
        # broken literal: the line is ignored, never glued to the next one
        return False

    if backslash or code.endswith(","):
        return True

    depth = 0
    for token in tokens:
        if token.kind in (LPAREN, LBRACKET, LBRACE):
            depth += 1
        elif token.kind in (RPAREN, RBRACKET, RBRACE):
            depth -= 1
    return depth > 0


def _option_string(value: object) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None
