"""Content-stream lexer.

The lexer works on the stream decoded as latin-1, so every byte is one
character, and yields tokens that keep their exact lexical text. Operands are
interpreted later by the operators that consume them.
"""

import enum
import logging
import re
from collections.abc import Iterator
from typing import NamedTuple

from pdfvector.psexceptions import PSEOF

log = logging.getLogger(__name__)


class TokenKind(enum.Enum):
    NUMBER = "number"
    NAME = "name"
    LITERAL_STRING = "literal-string"
    HEX_STRING = "hex-string"
    ARRAY_START = "array-start"
    ARRAY_END = "array-end"
    OPERATOR = "operator"


class Token(NamedTuple):
    kind: TokenKind
    value: str
    pos: int

    def __repr__(self) -> str:
        return f"<Token {self.kind.name} {self.value!r} at {self.pos}>"


# PDF white-space characters are NUL, HT, LF, FF, CR and SP.
LEXER = re.compile(
    r"""(?:
      (?P<whitespace> [\x00\t\n\x0c\r\x20]+)
    | (?P<comment> %[^\r\n]*)
    | (?P<hexstr> <[A-Fa-f\d\x00\t\n\x0c\r\x20]*>)
    | (?P<number> [-+]? (?: \d+\.?\d* | \.\d+ ) )
    | (?P<arraystart> \[)
    | (?P<arrayend> \])
    | (?P<startstr> \()
    | (?P<name> /[^\x00\t\n\x0c\r\x20/%\[\]()<>{}]*)
    | (?P<operator> [A-Za-z'"*][A-Za-z\d'"*]*)
    | (?P<other> .)
)
""",
    re.VERBOSE | re.DOTALL,
)
STRDELIM = re.compile(r"\\.|[()]", re.DOTALL)
STRLEXER = re.compile(
    r"""(?:
      (?P<octal> \\[0-7]{1,3})
    | (?P<linebreak> \\(?:\r\n?|\n))
    | (?P<escape> \\.)
    | (?P<other> [^\\]+ | \\)
)""",
    re.VERBOSE | re.DOTALL,
)
HEXSPACE = re.compile(r"[\x00\t\n\x0c\r\x20]")
# The end of inline image data: white space, EI, then a delimiter or the end.
INLINE_END = re.compile(r"[\x00\t\n\x0c\r\x20]EI(?=[\x00\t\n\x0c\r\x20/\[<(%]|\Z)")

ESC_STRING = {
    "b": "\x08",
    "t": "\t",
    "n": "\n",
    "f": "\x0c",
    "r": "\r",
    "(": "(",
    ")": ")",
    "\\": "\\",
}

_SIMPLE_KINDS = {
    "hexstr": TokenKind.HEX_STRING,
    "number": TokenKind.NUMBER,
    "arraystart": TokenKind.ARRAY_START,
    "arrayend": TokenKind.ARRAY_END,
    "name": TokenKind.NAME,
    "operator": TokenKind.OPERATOR,
}


def scan_literal(text: str, pos: int) -> tuple[int, bool]:
    """Finds the end of the literal string opening at ``text[pos]``.

    Nested unescaped parentheses must balance. Returns the index just past
    the closing parenthesis and True, or the end of ``text`` and False when
    the string is never closed.
    """
    depth = 1
    for m in STRDELIM.finditer(text, pos + 1):
        c = m[0]
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth == 0:
                return m.end(), True
    return len(text), False


class ContentLexer:
    """Tokenizer for an in-memory content stream."""

    def __init__(self, data: bytes | str) -> None:
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("latin-1")
        self.data = data
        self.pos = 0
        self.end = len(data)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: pos={self.pos}, end={self.end}>"

    def __iter__(self) -> Iterator[Token]:
        return self

    def nexttoken(self) -> Token:
        """Get the next token, raising PSEOF when done."""
        try:
            return self.__next__()
        except StopIteration:
            raise PSEOF

    def __next__(self) -> Token:
        while self.pos < self.end:
            m = LEXER.match(self.data, self.pos)
            if m is None:  # can only happen at EOS
                break
            start = m.start()
            self.pos = m.end()
            group = m.lastgroup
            if group in ("whitespace", "comment"):
                continue
            if group == "other":
                log.debug("Skipping unexpected character %r at %d", m[0], start)
                continue
            if group == "startstr":
                (self.pos, closed) = scan_literal(self.data, start)
                if not closed:
                    log.debug("Unterminated string at %d", start)
                return Token(
                    TokenKind.LITERAL_STRING, self.data[start : self.pos], start
                )
            assert group is not None
            return Token(_SIMPLE_KINDS[group], m[0], start)
        raise StopIteration

    def skip_inline_data(self) -> str:
        """Skips the data of an inline image up to and including EI.

        Returns the image data without the white space that follows ID.
        """
        m = INLINE_END.search(self.data, self.pos)
        if m is None:
            data = self.data[self.pos + 1 :]
            self.pos = self.end
        else:
            data = self.data[self.pos + 1 : m.start()]
            self.pos = m.end()
        return data


def tokenize(data: bytes | str) -> list[Token]:
    """Returns every token of a content stream, in stream order."""
    return list(ContentLexer(data))


def decode_hex_string(lexeme: str) -> bytes:
    """Decodes ``<...>``; whitespace is dropped and an odd digit padded."""
    digits = lexeme[1:-1] if lexeme.endswith(">") else lexeme[1:]
    digits = HEXSPACE.sub("", digits)
    if len(digits) % 2 == 1:
        digits += "0"
    try:
        return bytes.fromhex(digits)
    except ValueError:
        log.warning(f"Invalid hexadecimal string {lexeme!r}")
        return b""


def decode_literal_string(lexeme: str) -> bytes:
    """Decodes ``(...)`` with its escape sequences into raw bytes."""
    (end, closed) = scan_literal(lexeme, 0)
    body = lexeme[1 : end - 1] if closed else lexeme[1:]
    parts = []
    for m in STRLEXER.finditer(body):
        if m.lastgroup == "escape":
            c = m[0][1:]
            # An unknown escape keeps the character and drops the backslash.
            parts.append(ESC_STRING.get(c, c))
        elif m.lastgroup == "octal":
            chrcode = int(m[0][1:], 8)
            if chrcode >= 256:
                log.warning("Invalid octal %r (%d)", m[0][1:], chrcode)
            else:
                parts.append(chr(chrcode))
        elif m.lastgroup == "linebreak":
            pass
        elif m[0] != "\\":
            parts.append(m[0])
    return "".join(parts).encode("latin-1", "replace")


def decode_string_token(lexeme: str) -> bytes | None:
    """Decodes a string operand by its delimiter, or None if it is not one."""
    if lexeme.startswith("<"):
        return decode_hex_string(lexeme)
    if lexeme.startswith("("):
        return decode_literal_string(lexeme)
    return None
