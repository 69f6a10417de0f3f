"""
Tests for the replacement template lexer.
"""

import pytest

from sewer.replacement.errors import ParseErrorKind, TemplateParseError
from sewer.replacement.lexer import TemplateLexer, TokenType, tokenize_template


class TestTemplateLexer:

    def test_empty_string(self):
        """Test tokenization of empty string"""
        tokens = tokenize_template("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_plain_text_is_one_literal(self):
        """Test a run of plain characters becomes a single literal token"""
        tokens = tokenize_template("hello world")
        assert [t.type for t in tokens] == [TokenType.LITERAL, TokenType.EOF]
        assert tokens[0].value == b"hello world"

    def test_non_ascii_text_is_utf8(self):
        tokens = tokenize_template("привет")
        assert tokens[0].value == "привет".encode("utf-8")

    def test_symbols(self):
        """Test recognition of alternation symbols"""
        tokens = tokenize_template("(|)")
        assert [t.type for t in tokens] == [
            TokenType.LPAREN, TokenType.PIPE, TokenType.RPAREN, TokenType.EOF,
        ]

    def test_dollar_forms(self):
        tokens = tokenize_template("$$$12$<name>")
        assert tokens[0].type == TokenType.LITERAL
        assert tokens[0].value == b"$"
        assert tokens[1].type == TokenType.INDEX
        assert tokens[1].value == 12
        assert tokens[2].type == TokenType.NAME
        assert tokens[2].value == "name"

    def test_index_digits_are_greedy(self):
        tokens = tokenize_template("$1234x")
        assert tokens[0].value == 1234
        assert tokens[1].value == b"x"

    def test_escapes(self):
        tokens = tokenize_template("\\\\\\ \\x41\\xff")
        assert [t.value for t in tokens[:-1]] == [b"\\", b" ", b"A", b"\xff"]

    def test_hex_escape_is_case_insensitive(self):
        tokens = tokenize_template("\\xAb")
        assert tokens[0].value == b"\xab"

    def test_hash_is_literal_in_normal_mode(self):
        tokens = tokenize_template("a # b")
        assert tokens[0].value == b"a # b"

    def test_positions(self):
        """Test token positions are correct"""
        tokens = tokenize_template("ab$1\n(x)")

        assert tokens[0].position == 0   # ab
        assert tokens[1].position == 2   # $1
        assert tokens[2].position == 4   # \n
        assert tokens[3].position == 5   # (
        assert tokens[3].line == 2
        assert tokens[3].column == 1


class TestExtendedMode:

    def test_marker_enables_extended_mode(self):
        lexer = TemplateLexer("(?x) a b ")
        assert lexer.extended is True
        tokens = lexer.tokenize()
        assert [t.value for t in tokens if t.type == TokenType.LITERAL] == [b"a", b"b"]

    def test_marker_only_at_start(self):
        lexer = TemplateLexer(" (?x)")
        assert lexer.extended is False

    def test_comments_are_skipped(self):
        tokens = tokenize_template("(?x)a # comment $ \\q\nb # trailing")
        literals = [t.value for t in tokens if t.type == TokenType.LITERAL]
        assert literals == [b"a", b"b"]

    def test_escaped_space_survives(self):
        tokens = tokenize_template("(?x) a \\  b")
        literals = [t.value for t in tokens if t.type == TokenType.LITERAL]
        assert literals == [b"a", b" ", b"b"]

    def test_whitespace_inside_name_is_kept(self):
        tokens = tokenize_template("(?x) $<a b>")
        assert tokens[0].type == TokenType.NAME
        assert tokens[0].value == "a b"

    def test_marker_alone_gives_eof(self):
        tokens = tokenize_template("(?x)")
        assert [t.type for t in tokens] == [TokenType.EOF]


class TestLexerErrors:

    @pytest.mark.parametrize("text, kind, position", [
        ("$", ParseErrorKind.DANGLING_DOLLAR, 0),
        ("ab$x", ParseErrorKind.DANGLING_DOLLAR, 2),
        ("$<name", ParseErrorKind.UNTERMINATED_NAMED_GROUP, 0),
        ("x\\x4", ParseErrorKind.INVALID_HEX_ESCAPE, 1),
        ("\\xg0", ParseErrorKind.INVALID_HEX_ESCAPE, 0),
        ("\\n", ParseErrorKind.UNKNOWN_ESCAPE, 0),
        ("abc\\", ParseErrorKind.UNKNOWN_ESCAPE, 3),
    ])
    def test_error_kinds(self, text, kind, position):
        with pytest.raises(TemplateParseError) as exc_info:
            tokenize_template(text)
        assert exc_info.value.kind == kind
        assert exc_info.value.position == position

    def test_error_reports_line_and_column(self):
        with pytest.raises(TemplateParseError) as exc_info:
            tokenize_template("ok\n  $")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 3
        assert "2:3" in str(exc_info.value)
