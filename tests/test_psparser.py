import logging

import pytest

from pdfvector.psexceptions import PSEOF
from pdfvector.psparser import (
    ContentLexer,
    Token,
    TokenKind,
    decode_hex_string,
    decode_literal_string,
    decode_string_token,
    tokenize,
)

logger = logging.getLogger(__name__)

N = TokenKind.NUMBER
NAME = TokenKind.NAME
LIT = TokenKind.LITERAL_STRING
HEX = TokenKind.HEX_STRING
AS = TokenKind.ARRAY_START
AE = TokenKind.ARRAY_END
OP = TokenKind.OPERATOR


def kinds_and_values(data):
    return [(t.kind, t.value) for t in tokenize(data)]


class TestTokenize:
    def test_path_operators(self):
        assert kinds_and_values(b"1 0 0 RG 10 10 m") == [
            (N, "1"),
            (N, "0"),
            (N, "0"),
            (OP, "RG"),
            (N, "10"),
            (N, "10"),
            (OP, "m"),
        ]

    def test_positions(self):
        tokens = tokenize(b"  10 w")
        assert tokens == [Token(N, "10", 2), Token(OP, "w", 5)]

    @pytest.mark.parametrize(
        "number",
        ["12", "-3.5", ".5", "4.", "+2", "-.25", "0"],
    )
    def test_numbers(self, number):
        assert kinds_and_values(number.encode()) == [(N, number)]

    def test_names_keep_their_slash(self):
        assert kinds_and_values(b"/F1 12 Tf") == [
            (NAME, "/F1"),
            (N, "12"),
            (OP, "Tf"),
        ]

    def test_name_ends_at_delimiter(self):
        assert kinds_and_values(b"/F1[/F2(x)") == [
            (NAME, "/F1"),
            (AS, "["),
            (NAME, "/F2"),
            (LIT, "(x)"),
        ]

    def test_nested_parentheses(self):
        assert kinds_and_values(b"(a(b)c) Tj") == [(LIT, "(a(b)c)"), (OP, "Tj")]

    def test_escaped_parentheses(self):
        assert kinds_and_values(b"(a\\)b\\() Tj") == [
            (LIT, "(a\\)b\\()"),
            (OP, "Tj"),
        ]

    def test_escaped_backslash_before_paren(self):
        assert kinds_and_values(b"(a\\\\) Tj") == [(LIT, "(a\\\\)"), (OP, "Tj")]

    def test_unterminated_string_runs_to_the_end(self):
        assert kinds_and_values(b"(abc Tj") == [(LIT, "(abc Tj")]

    def test_hex_string_with_whitespace(self):
        assert kinds_and_values(b"<48 65\n6C> Tj") == [
            (HEX, "<48 65\n6C>"),
            (OP, "Tj"),
        ]

    def test_array(self):
        assert kinds_and_values(b"[(A) -120 (B)] TJ") == [
            (AS, "["),
            (LIT, "(A)"),
            (N, "-120"),
            (LIT, "(B)"),
            (AE, "]"),
            (OP, "TJ"),
        ]

    @pytest.mark.parametrize("op", ["T*", "f*", "'", '"', "B*", "d0", "BDC"])
    def test_operators_with_special_characters(self, op):
        assert kinds_and_values(op.encode()) == [(OP, op)]

    def test_comments_are_discarded(self):
        assert kinds_and_values(b"% a comment (not a string\n1 w") == [
            (N, "1"),
            (OP, "w"),
        ]

    def test_unrecognized_bytes_are_skipped(self):
        assert kinds_and_values(b"1 } { > w") == [(N, "1"), (OP, "w")]

    def test_dictionary_delimiters_are_skipped(self):
        assert kinds_and_values(b"/OC << /MCID 0 >> BDC") == [
            (NAME, "/OC"),
            (NAME, "/MCID"),
            (N, "0"),
            (OP, "BDC"),
        ]

    def test_high_bytes_are_single_characters(self):
        assert kinds_and_values(b"(\xe9\xff) Tj") == [
            (LIT, "(\xe9\xff)"),
            (OP, "Tj"),
        ]

    def test_empty(self):
        assert tokenize(b"") == []
        assert tokenize(b" \n\t\r\x0c\x00") == []


class TestContentLexer:
    def test_nexttoken_raises_at_end(self):
        lexer = ContentLexer(b"1 w")
        assert lexer.nexttoken() == Token(N, "1", 0)
        assert lexer.nexttoken() == Token(OP, "w", 2)
        with pytest.raises(PSEOF):
            lexer.nexttoken()

    def test_accepts_text(self):
        assert [t.value for t in ContentLexer("q Q")] == ["q", "Q"]

    def test_skip_inline_data(self):
        lexer = ContentLexer(b"BI /W 1 ID \x00S)\xff EI Q")
        values = []
        for token in lexer:
            values.append(token.value)
            if token.value == "ID":
                assert lexer.skip_inline_data() == "\x00S)\xff"
        assert values == ["BI", "/W", "1", "ID", "Q"]

    def test_skip_inline_data_without_end(self):
        lexer = ContentLexer(b"ID \x01\x02")
        assert lexer.nexttoken().value == "ID"
        assert lexer.skip_inline_data() == "\x01\x02"
        assert list(lexer) == []


@pytest.mark.parametrize(
    ("lexeme", "expected"),
    [
        ("(abc)", b"abc"),
        ("(a\\nb)", b"a\nb"),
        ("(\\r\\t\\b\\f)", b"\r\t\x08\x0c"),
        ("(\\(x\\))", b"(x)"),
        ("(\\\\)", b"\\"),
        ("(a(b)c)", b"a(b)c"),
        ("(a\\\nb)", b"ab"),
        ("(a\\\r\nb)", b"ab"),
        ("(\\101\\60)", b"A0"),
        ("(\\q)", b"q"),
        ("(unterminated", b"unterminated"),
        ("()", b""),
    ],
)
def test_decode_literal_string(lexeme, expected):
    assert decode_literal_string(lexeme) == expected


@pytest.mark.parametrize(
    ("lexeme", "expected"),
    [
        ("<48656C6C6F>", b"Hello"),
        ("<48 65\n6c>", b"Hel"),
        ("<414>", b"A@"),
        ("<>", b""),
    ],
)
def test_decode_hex_string(lexeme, expected):
    assert decode_hex_string(lexeme) == expected


def test_decode_string_token():
    assert decode_string_token("<41>") == b"A"
    assert decode_string_token("(A)") == b"A"
    assert decode_string_token("/A") is None
    assert decode_string_token("12") is None
