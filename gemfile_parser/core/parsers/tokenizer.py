"""Lexer for single lines of Gemfile and gemspec source.

The lexer only recognizes the literal shapes that dependency declarations are
made of. Nothing is ever evaluated: interpolated strings and command literals
are flagged so the statement matcher can refuse the whole line.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

# Kinds of token produced by tokenize()
IDENT = "IDENT"
CONSTANT = "CONSTANT"
STRING = "STRING"
SYMBOL = "SYMBOL"
LABEL = "LABEL"
ARROW = "ARROW"
COMMA = "COMMA"
DOT = "DOT"
SCOPE = "SCOPE"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
PIPE = "PIPE"
NUMBER = "NUMBER"
COMMAND = "COMMAND"
WORDS = "WORDS"
OTHER = "OTHER"

_PAIRED_DELIMITERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_SINGLE_CHAR_TOKENS = {
    ",": COMMA,
    "(": LPAREN,
    ")": RPAREN,
    "[": LBRACKET,
    "]": RBRACKET,
    "{": LBRACE,
    "}": RBRACE,
    "|": PIPE,
}


class TokenizeError(ValueError):
    """Raised when a line contains an unterminated or malformed literal."""


class Quote(Enum):
    """How a string literal was written."""

    SINGLE = "single"
    DOUBLE = "double"
    PERCENT = "percent"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source text.

    For STRING tokens ``value`` is the literal's content; for SYMBOL and
    LABEL tokens it is the name without the colon.
    """

    kind: str
    value: str
    interpolated: bool = False
    quote: Quote = Quote.DOUBLE

    def is_ident(self, *names: str) -> bool:
        return self.kind == IDENT and (not names or self.value in names)


def strip_comment(line: str) -> str:
    """Remove a trailing ``#`` comment that is not inside a string literal.

    Args:
        line: Source line

    Returns:
        The line without its comment, right-stripped
    """
    quote = None
    escaped = False

    for index, char in enumerate(line):
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
        elif char in "\"'`":
            quote = char
        elif char == "#":
            return line[:index].rstrip()

    return line.rstrip()


def tokenize(line: str) -> List[Token]:
    """Split a single source line into tokens.

    Args:
        line: Source line without its comment

    Returns:
        List of tokens

    Raises:
        TokenizeError: If a string literal is not terminated
    """
    tokens: List[Token] = []
    pos = 0
    length = len(line)

    while pos < length:
        char = line[pos]

        if char.isspace():
            pos += 1
            continue

        if char in "\"'":
            value, pos = _read_quoted(line, pos + 1, char)
            quote = Quote.DOUBLE if char == '"' else Quote.SINGLE
            tokens.append(Token(
                STRING,
                value,
                interpolated=char == '"' and "#{" in value,
                quote=quote
            ))
            continue

        if char == "`":
            value, pos = _read_quoted(line, pos + 1, "`")
            tokens.append(Token(COMMAND, value))
            continue

        if char == "%" and pos + 1 < length:
            token, pos = _read_percent_literal(line, pos)
            tokens.append(token)
            continue

        if char == "=" and line.startswith("=>", pos):
            tokens.append(Token(ARROW, "=>"))
            pos += 2
            continue

        if char == ":" and line.startswith("::", pos):
            tokens.append(Token(SCOPE, "::"))
            pos += 2
            continue

        if char == ":" and pos + 1 < length:
            nxt = line[pos + 1]
            if nxt in "\"'":
                value, pos = _read_quoted(line, pos + 2, nxt)
                tokens.append(Token(SYMBOL, value, interpolated=nxt == '"' and "#{" in value))
                continue
            if _is_ident_start(nxt):
                end = _scan_ident(line, pos + 1)
                tokens.append(Token(SYMBOL, line[pos + 1:end]))
                pos = end
                continue

        if char in _SINGLE_CHAR_TOKENS:
            tokens.append(Token(_SINGLE_CHAR_TOKENS[char], char))
            pos += 1
            continue

        if char == ".":
            tokens.append(Token(DOT, "."))
            pos += 1
            continue

        if char.isdigit() or (char == "-" and pos + 1 < length and line[pos + 1].isdigit()):
            end = pos + 1
            while end < length and (line[end].isalnum() or line[end] in "._"):
                end += 1
            tokens.append(Token(NUMBER, line[pos:end]))
            pos = end
            continue

        if _is_ident_start(char):
            end = _scan_ident(line, pos)
            word = line[pos:end]
            # "name: value" hash label, but not "Foo::Bar"
            if end < length and line[end] == ":" and not line.startswith("::", end):
                tokens.append(Token(LABEL, word))
                pos = end + 1
                continue
            kind = CONSTANT if word[0].isupper() else IDENT
            tokens.append(Token(kind, word))
            pos = end
            continue

        tokens.append(Token(OTHER, char))
        pos += 1

    return tokens


def _is_ident_start(char: str) -> bool:
    return char.isalpha() or char == "_"


def _scan_ident(line: str, pos: int) -> int:
    end = pos
    while end < len(line) and (line[end].isalnum() or line[end] == "_"):
        end += 1
    # Ruby method names may end in ? or !
    if end < len(line) and line[end] in "?!" and not line.startswith("!=", end):
        end += 1
    return end


def _read_quoted(line: str, pos: int, quote: str):
    """Read up to the closing quote, honouring backslash escapes."""
    chars = []
    while pos < len(line):
        char = line[pos]
        if char == "\\" and pos + 1 < len(line):
            nxt = line[pos + 1]
            chars.append(nxt if nxt in (quote, "\\") else char + nxt)
            pos += 2
            continue
        if char == quote:
            return "".join(chars), pos + 1
        chars.append(char)
        pos += 1
    raise TokenizeError(f"Unterminated {quote} literal")


def _read_percent_literal(line: str, pos: int):
    """Read a ``%q``, ``%Q``, ``%w`` or ``%x`` style literal starting at ``pos``."""
    kind_char = line[pos + 1]
    if kind_char.isalpha():
        start = pos + 2
    else:
        # bare %(...) behaves like %Q
        kind_char = "Q"
        start = pos + 1

    if start >= len(line) or line[start].isalnum() or line[start].isspace():
        # modulo operator or something we don't care about
        return Token(OTHER, "%"), pos + 1

    opener = line[start]
    closer = _PAIRED_DELIMITERS.get(opener, opener)
    depth = 1
    index = start + 1
    chars = []

    while index < len(line):
        char = line[index]
        if char == "\\" and index + 1 < len(line):
            chars.append(line[index + 1])
            index += 2
            continue
        if char == opener and opener != closer:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                break
        chars.append(char)
        index += 1
    else:
        raise TokenizeError("Unterminated % literal")

    value = "".join(chars)
    end = index + 1

    if kind_char in "xX":
        return Token(COMMAND, value), end
    if kind_char == "q":
        return Token(STRING, value, quote=Quote.PERCENT), end
    if kind_char == "Q":
        return Token(STRING, value, interpolated="#{" in value, quote=Quote.PERCENT), end
    if kind_char in "wWiI":
        return Token(WORDS, value, interpolated=kind_char in "WI" and "#{" in value), end
    return Token(OTHER, value), end
