"""Tests for the tokenizer and statement matchers."""

import pytest

from gemfile_parser.core.parsers.base import ParseMode
from gemfile_parser.core.parsers.gemfile import logical_lines
from gemfile_parser.core.parsers.statements import StatementKind, locate_gemspec, match_statement
from gemfile_parser.core.parsers.tokenizer import (
    ARROW,
    COMMAND,
    LABEL,
    STRING,
    SYMBOL,
    WORDS,
    Quote,
    TokenizeError,
    strip_comment,
    tokenize,
)


class TestStripComment:
    """Test inline comment removal."""

    @pytest.mark.parametrize("line, expected", [
        ('gem "rake" # Comment', 'gem "rake"'),
        ("# whole line", ""),
        ('gem "c#"', 'gem "c#"'),
        ("gem 'a#b' # trailing", "gem 'a#b'"),
        ('gem "a\\"#b"', 'gem "a\\"#b"'),
        ("gem 'rake'   ", "gem 'rake'"),
    ])
    def test_strip_comment(self, line, expected):
        assert strip_comment(line) == expected


class TestTokenize:
    """Test the line lexer."""

    def test_strings_and_symbols(self):
        tokens = tokenize('gem "rake", :require => false')

        assert [t.kind for t in tokens] == ["IDENT", STRING, "COMMA", SYMBOL, ARROW, "IDENT"]
        assert tokens[1].value == "rake"
        assert tokens[1].quote is Quote.DOUBLE
        assert tokens[3].value == "require"

    def test_labels(self):
        tokens = tokenize('spec(name: "foo")')

        assert tokens[2].kind == LABEL
        assert tokens[2].value == "name"

    def test_scope_is_not_a_label(self):
        tokens = tokenize("Gem::Specification.new")

        assert [t.kind for t in tokens] == ["CONSTANT", "SCOPE", "CONSTANT", "DOT", "IDENT"]

    def test_percent_literals(self):
        assert tokenize("%q<rake>")[0].value == "rake"
        assert tokenize("%q{a{b}c}")[0].value == "a{b}c"
        assert tokenize("%q|rake|")[0].kind == STRING

        words = tokenize("%i[mri jruby]")[0]
        assert words.kind == WORDS
        assert words.value == "mri jruby"

    def test_interpolation_is_flagged(self):
        assert tokenize('"#{foo}"')[0].interpolated
        assert not tokenize("'#{foo}'")[0].interpolated
        assert tokenize("%Q(#{foo})")[0].interpolated

    def test_commands(self):
        assert tokenize("`ls`")[0].kind == COMMAND
        assert tokenize("%x(ls)")[0].kind == COMMAND

    def test_escaped_quote(self):
        assert tokenize(r'"a\"b"')[0].value == 'a"b'

    @pytest.mark.parametrize("line", [
        'gem "rake',
        "gem 'rake\", \">= 1\"",
        "%q<rake",
    ])
    def test_unterminated(self, line):
        with pytest.raises(TokenizeError):
            tokenize(line)


class TestMatchStatement:
    """Test statement recognition."""

    def test_dependency(self):
        statement = match_statement('gem "rails", "~> 7.0", ">= 7.0.4", require: false')

        assert statement.kind is StatementKind.DEPENDENCY
        assert statement.name == "rails"
        assert statement.constraints == ("~> 7.0", ">= 7.0.4")
        assert statement.options == {"require": False}

    def test_option_values(self):
        statement = match_statement('gem "x", a: nil, b: 1, c: [:d, "e",], "f" => true')

        assert statement.options == {"a": None, "b": "1", "c": ["d", "e"], "f": True}

    def test_options_before_constraints_are_rejected(self):
        assert match_statement('gem "x", require: false, ">= 1"') is None

    def test_group_open(self):
        statement = match_statement("group :development, :test do")

        assert statement.kind is StatementKind.GROUP_OPEN
        assert statement.groups == ("development", "test")

    def test_group_open_with_options(self):
        statement = match_statement("group :docs, optional: true do")

        assert statement.groups == ("docs",)
        assert statement.options == {"optional": True}

    def test_group_without_block_is_ignored(self):
        assert match_statement("group :development") is None

    @pytest.mark.parametrize("line", [
        'git "https://github.com/rails/rails.git" do',
        'path "vendor" do',
        'github("rails/rails") do',
        'git "https://example.com/x.git", branch: "main" do |g|',
    ])
    def test_source_open(self, line):
        assert match_statement(line).kind is StatementKind.SOURCE_OPEN

    @pytest.mark.parametrize("line", [
        "platforms :jruby do",
        'source "https://gems.example.com" do',
        "Gem::Specification.new do |spec|",
        "if ENV['CI']",
        "unless RUBY_PLATFORM =~ /darwin/",
        "def helper(name)",
        "%w[a b].each do |name|",
    ])
    def test_block_open(self, line):
        assert match_statement(line).kind is StatementKind.BLOCK_OPEN

    @pytest.mark.parametrize("line", [
        "def helper; end",
        "foo do bar end",
        "x = 1 if y",
    ])
    def test_one_liners_do_not_open_blocks(self, line):
        assert match_statement(line) is None

    def test_end(self):
        assert match_statement("end").kind is StatementKind.END
        assert match_statement("end.freeze").kind is StatementKind.END

    @pytest.mark.parametrize("line", ["end;", "end)", "end if ready", "end unless x", "end rescue nil"])
    def test_end_with_terminator_or_modifier(self, line):
        assert match_statement(line).kind is StatementKind.END

    @pytest.mark.parametrize("line", ["end_of_list", "end = 1", "ending do"])
    def test_words_starting_with_end(self, line):
        statement = match_statement(line)

        assert statement is None or statement.kind is not StatementKind.END

    def test_spec(self):
        statement = match_statement('gemspec path: "lib", name: "foo"')

        assert statement.kind is StatementKind.SPEC
        assert statement.options == {"path": "lib", "name": "foo"}

    def test_spec_with_positional_argument_is_ignored(self):
        assert match_statement('gemspec "foo"') is None

    @pytest.mark.parametrize("line", [
        "",
        "   ",
        'source "https://rubygems.org"',
        'ruby "3.2.0"',
        'gem = "rake"',
        "gem.foo",
        'gem name_from_variable',
        'gem "x" if RUBY_VERSION > "3"',
    ])
    def test_unrecognized(self, line):
        assert match_statement(line) is None

    def test_unsafe_line_still_opens_blocks(self):
        statement = match_statement('if `uname` == "Linux"')

        assert statement.kind is StatementKind.BLOCK_OPEN

    def test_gemspec_mode(self):
        statement = match_statement('spec.add_development_dependency "rspec", "~> 3.0"', ParseMode.GEMSPEC)

        assert statement.kind is StatementKind.DEPENDENCY
        assert statement.method == "add_development_dependency"
        assert statement.name == "rspec"
        assert statement.constraints == ("~> 3.0",)

    def test_gemspec_mode_ignores_gemfile_statements(self):
        assert match_statement('gem "rake"', ParseMode.GEMSPEC) is None
        assert match_statement("group :test do", ParseMode.GEMSPEC).kind is StatementKind.BLOCK_OPEN


class TestLocateGemspec:
    """Test gemspec pattern resolution."""

    @pytest.mark.parametrize("name, path, expected", [
        (None, None, "*.gemspec"),
        ("foo", None, "foo.gemspec"),
        (None, "lib", "lib/*.gemspec"),
        ("foo", "lib", "lib/foo.gemspec"),
        ("foo", "lib/", "lib/foo.gemspec"),
    ])
    def test_locate_gemspec(self, name, path, expected):
        assert locate_gemspec(name=name, path=path) == expected


class TestLogicalLines:
    """Test joining of continued statements."""

    def test_skips_blank_and_comment_lines(self):
        text = "# header\n\ngem 'a'\n  # note\ngem 'b'\n"

        assert list(logical_lines(text)) == [(3, "gem 'a'"), (5, "gem 'b'")]

    def test_joins_open_brackets(self):
        text = 'gem "a", [\n  ">= 1",\n  "< 2"\n]\ngem "b"'

        assert list(logical_lines(text)) == [
            (1, 'gem "a", [ ">= 1", "< 2" ]'),
            (5, 'gem "b"'),
        ]

    def test_backslash_continuation(self):
        assert list(logical_lines('gem "a", \\\n  ">= 1"')) == [(1, 'gem "a", ">= 1"')]

    def test_broken_literal_is_not_joined(self):
        text = 'gem "a\', ">= 1",\ngem "b"'

        assert [number for number, _ in logical_lines(text)] == [1, 2]
