"""Statement recognition for Gemfile and gemspec lines.

Each recognizer takes the token list of one logical line and either returns a
Statement or None. Lines that fit no recognizer are ignored by the parser.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .base import ParseMode
from .tokenizer import (
    ARROW,
    COMMA,
    COMMAND,
    IDENT,
    LABEL,
    LBRACE,
    LBRACKET,
    LPAREN,
    NUMBER,
    OTHER,
    PIPE,
    RBRACE,
    RBRACKET,
    RPAREN,
    STRING,
    SYMBOL,
    WORDS,
    DOT,
    Token,
    TokenizeError,
    tokenize,
)

DEPENDENCY_METHODS = ("gem", "dependency")
SPEC_METHODS = ("gemspec", "spec")
GROUP_METHODS = ("group",)
SOURCE_BLOCK_METHODS = ("git", "path", "github", "gist", "bitbucket")
GEMSPEC_DEPENDENCY_METHODS = {
    "add_dependency": "runtime",
    "add_runtime_dependency": "runtime",
    "add_development_dependency": "development",
}
# Statement-level keywords that are closed by "end"
BLOCK_KEYWORDS = ("if", "unless", "case", "while", "until", "begin", "def", "class", "module", "for")
END_MODIFIERS = ("if", "unless", "while", "until", "rescue")
GEM_NAME = re.compile(r'^[A-Za-z0-9._-]+$')
QUOTE_CHARS = frozenset("'\"")

_OPENERS = {LPAREN: RPAREN, LBRACKET: RBRACKET, LBRACE: RBRACE}
_CLOSERS = {RPAREN, RBRACKET, RBRACE}
_INVALID = object()


class StatementKind(str, Enum):
    """Kinds of recognized statement."""

    DEPENDENCY = "dependency"
    SPEC = "spec"
    GROUP_OPEN = "group_open"
    SOURCE_OPEN = "source_open"
    BLOCK_OPEN = "block_open"
    END = "end"


@dataclass(frozen=True)
class Statement:
    """A recognized statement with its raw arguments."""

    kind: StatementKind
    method: str = ""
    name: Optional[str] = None
    constraints: Tuple[str, ...] = ()
    options: Dict[str, Any] = field(default_factory=dict)
    groups: Tuple[str, ...] = ()


Matcher = Callable[[List[Token]], Optional[Statement]]


def match_statement(line: str, mode: ParseMode = ParseMode.GEMFILE) -> Optional[Statement]:
    """Recognize a single line of manifest source.

    Args:
        line: Source line with its comment already removed
        mode: Gemfile or gemspec statement set

    Returns:
        The recognized statement, or None if the line should be ignored
    """
    if not line or not line.strip():
        return None

    try:
        tokens = tokenize(line)
    except TokenizeError:
        return None

    if not tokens:
        return None

    # Lines holding interpolation or shell commands are never taken apart,
    # but they still open and close blocks.
    safe = not any(token.kind == COMMAND or token.interpolated for token in tokens)
    matchers = _MATCHERS[mode] if safe else _STRUCTURAL_MATCHERS

    for matcher in matchers:
        statement = matcher(tokens)
        if statement is not None:
            return statement

    return None


def locate_gemspec(name: Optional[str] = None, path: Optional[str] = None) -> str:
    """Build the glob pattern for the gemspec a ``gemspec`` call refers to.

    Args:
        name: Value of the ``name`` option
        path: Value of the ``path`` option

    Returns:
        Glob pattern such as ``lib/foo.gemspec`` or ``*.gemspec``
    """
    filename = f"{name}.gemspec" if name else "*.gemspec"
    if not path:
        return filename
    return f"{path.rstrip('/')}/{filename}"


def match_end(tokens: List[Token]) -> Optional[Statement]:
    """``end`` closing the innermost block.

    It may be chained (``end.freeze``), terminated (``end;``, ``end)``) or
    followed by a modifier (``end if cond``).
    """
    if not tokens[0].is_ident("end"):
        return None
    if len(tokens) == 1:
        return Statement(StatementKind.END, method="end")

    follower = tokens[1]
    if (
        follower.kind in (DOT, RPAREN)
        or (follower.kind == OTHER and follower.value == ";")
        or follower.is_ident(*END_MODIFIERS)
    ):
        return Statement(StatementKind.END, method="end")
    return None


def match_dependency(tokens: List[Token]) -> Optional[Statement]:
    """``gem "name", "constraint", ..., key: value`` in bare or parenthesized form."""
    call = _parse_call(tokens, DEPENDENCY_METHODS)
    if call is None:
        return None

    method, args, trailing = call
    if trailing:
        return None

    return _dependency_statement(method, args)


def match_gemspec_dependency(tokens: List[Token]) -> Optional[Statement]:
    """``spec.add_dependency "name", ...`` and its runtime/development variants."""
    if len(tokens) >= 3 and tokens[0].kind == IDENT and tokens[1].kind == DOT:
        tokens = tokens[2:]

    call = _parse_call(tokens, tuple(GEMSPEC_DEPENDENCY_METHODS))
    if call is None:
        return None

    method, args, trailing = call
    if trailing:
        return None

    return _dependency_statement(method, args)


def match_spec(tokens: List[Token]) -> Optional[Statement]:
    """``gemspec`` with optional ``name``/``path`` options."""
    call = _parse_call(tokens, SPEC_METHODS)
    if call is None:
        return None

    method, args, trailing = call
    if trailing:
        return None

    parsed = _parse_arguments(args)
    if parsed is None:
        return None

    positional, options = parsed
    if positional:
        return None

    return Statement(StatementKind.SPEC, method=method, options=options)


def match_group_open(tokens: List[Token]) -> Optional[Statement]:
    """``group :development, :test do``."""
    call = _parse_call(tokens, GROUP_METHODS)
    if call is None:
        return None

    method, args, trailing = call
    if not _is_block_tail(trailing):
        return None

    parsed = _parse_arguments(args)
    if parsed is None:
        return None

    positional, options = parsed
    if not positional or not all(isinstance(group, str) and group for group in positional):
        return None

    return Statement(
        StatementKind.GROUP_OPEN,
        method=method,
        options=options,
        groups=_unique(positional)
    )


def match_source_open(tokens: List[Token]) -> Optional[Statement]:
    """``git "url" do``, ``path "dir" do`` and other non-local source blocks."""
    call = _parse_call(tokens, SOURCE_BLOCK_METHODS)
    if call is None:
        return None

    method, args, trailing = call
    if not _is_block_tail(trailing):
        return None

    parsed = _parse_arguments(args)
    if parsed is None:
        return None

    positional, options = parsed
    if len(positional) != 1 or not isinstance(positional[0], str):
        return None

    return Statement(
        StatementKind.SOURCE_OPEN,
        method=method,
        name=positional[0],
        options=options
    )


def match_block_open(tokens: List[Token]) -> Optional[Statement]:
    """Any other construct closed by ``end``: ``platforms :jruby do``, ``if``, ``def``..."""
    if any(token.is_ident("end") for token in tokens):
        # one-liner such as "def foo; end" or "foo do bar end"
        return None

    first = tokens[0]
    if first.is_ident(*BLOCK_KEYWORDS):
        return Statement(StatementKind.BLOCK_OPEN, method=first.value)

    do_index = _find_top_level_do(tokens)
    if do_index is not None and _is_block_tail(tokens[do_index:]):
        method = first.value if first.kind == IDENT else ""
        return Statement(StatementKind.BLOCK_OPEN, method=method)

    return None


_MATCHERS: Dict[ParseMode, Sequence[Matcher]] = {
    ParseMode.GEMFILE: (
        match_end,
        match_dependency,
        match_spec,
        match_group_open,
        match_source_open,
        match_block_open,
    ),
    ParseMode.GEMSPEC: (
        match_end,
        match_gemspec_dependency,
        match_block_open,
    ),
}
_STRUCTURAL_MATCHERS: Sequence[Matcher] = (match_end, match_block_open)


def _dependency_statement(method: str, args: List[Token]) -> Optional[Statement]:
    parsed = _parse_arguments(args)
    if parsed is None:
        return None

    positional, options = parsed
    # options always follow the positional arguments
    pieces = _split_top_level(args)[:len(positional)]
    if not pieces or not _is_string(pieces[0]) or not GEM_NAME.match(positional[0]):
        return None

    constraints: List[str] = []
    for piece, value in zip(pieces[1:], positional[1:]):
        if _is_string(piece):
            values = [value]
        elif piece[0].kind == LBRACKET and all(_is_string(item) for item in _array_items(piece)):
            values = value
        else:
            return None

        # a quote inside a constraint means the literals were mismatched
        if any(QUOTE_CHARS.intersection(item) for item in values):
            return None
        constraints.extend(values)

    return Statement(
        StatementKind.DEPENDENCY,
        method=method,
        name=positional[0],
        constraints=tuple(constraints),
        options=options
    )


def _parse_call(
    tokens: List[Token],
    methods: Sequence[str]
) -> Optional[Tuple[str, List[Token], List[Token]]]:
    """Split ``method args`` or ``method(args)`` into name, arguments and trailing tokens."""
    if not tokens or not tokens[0].is_ident(*methods):
        return None

    method = tokens[0].value
    rest = tokens[1:]

    if rest and rest[0].kind == LPAREN:
        close = _matching_close(rest, 0)
        if close is None:
            return None
        return method, rest[1:close], rest[close + 1:]

    # "gem.foo" or "gem = 1" are not calls
    if rest and rest[0].kind not in (STRING, SYMBOL, LABEL, LBRACKET, IDENT, NUMBER, WORDS):
        return None

    do_index = _find_top_level_do(rest)
    if do_index is None:
        return method, rest, []
    return method, rest[:do_index], rest[do_index:]


def _parse_arguments(tokens: List[Token]) -> Optional[Tuple[List[Any], Dict[str, Any]]]:
    """Parse a comma separated argument list of literals.

    Positional arguments must come before ``key => value`` / ``key: value``
    pairs. Returns None if any argument is not a plain literal.
    """
    positional: List[Any] = []
    options: Dict[str, Any] = {}

    if not tokens:
        return positional, options

    for piece in _split_top_level(tokens):
        if not piece:
            return None

        if piece[0].kind == LABEL:
            key, value_tokens = piece[0].value, piece[1:]
        elif len(piece) >= 2 and piece[1].kind == ARROW and piece[0].kind in (SYMBOL, STRING):
            key, value_tokens = piece[0].value, piece[2:]
        else:
            if options:
                return None
            value = _parse_value(piece)
            if value is _INVALID:
                return None
            positional.append(value)
            continue

        value = _parse_value(value_tokens)
        if value is _INVALID:
            return None
        options[key] = value

    return positional, options


def _parse_value(tokens: List[Token]) -> Any:
    if not tokens:
        return _INVALID

    if len(tokens) == 1:
        token = tokens[0]
        if token.kind in (STRING, SYMBOL, NUMBER):
            return token.value
        if token.kind == WORDS:
            return token.value.split()
        if token.is_ident("true"):
            return True
        if token.is_ident("false"):
            return False
        if token.is_ident("nil"):
            return None
        return _INVALID

    if tokens[0].kind == LBRACKET and _matching_close(tokens, 0) == len(tokens) - 1:
        items = []
        inner = tokens[1:-1]
        if not inner:
            return items
        pieces = _split_top_level(inner)
        # allow a trailing comma: [:a, :b,]
        if pieces and not pieces[-1]:
            pieces = pieces[:-1]
        for piece in pieces:
            item = _parse_value(piece)
            if item is _INVALID:
                return _INVALID
            items.append(item)
        return items

    return _INVALID


def _is_string(piece: List[Token]) -> bool:
    return len(piece) == 1 and piece[0].kind == STRING


def _array_items(piece: List[Token]) -> List[List[Token]]:
    items = _split_top_level(piece[1:-1]) if len(piece) > 2 else []
    if items and not items[-1]:
        items = items[:-1]
    return items


def _split_top_level(tokens: List[Token]) -> List[List[Token]]:
    pieces: List[List[Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.kind in _OPENERS:
            depth += 1
        elif token.kind in _CLOSERS:
            depth -= 1
        if token.kind == COMMA and depth == 0:
            pieces.append([])
            continue
        pieces[-1].append(token)
    return pieces


def _matching_close(tokens: List[Token], start: int) -> Optional[int]:
    opener = tokens[start].kind
    closer = _OPENERS[opener]
    depth = 0
    for index in range(start, len(tokens)):
        kind = tokens[index].kind
        if kind == opener:
            depth += 1
        elif kind == closer:
            depth -= 1
            if depth == 0:
                return index
    return None


def _find_top_level_do(tokens: List[Token]) -> Optional[int]:
    depth = 0
    for index, token in enumerate(tokens):
        if token.kind in _OPENERS:
            depth += 1
        elif token.kind in _CLOSERS:
            depth -= 1
        elif depth == 0 and token.is_ident("do"):
            return index
    return None


def _is_block_tail(tokens: List[Token]) -> bool:
    """True for ``do`` or ``do |args|`` and nothing after it."""
    if not tokens or not tokens[0].is_ident("do"):
        return False
    if len(tokens) == 1:
        return True
    return len(tokens) >= 3 and tokens[1].kind == PIPE and tokens[-1].kind == PIPE


def _unique(values: Sequence[Any]) -> Tuple[str, ...]:
    seen: List[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return tuple(seen)
