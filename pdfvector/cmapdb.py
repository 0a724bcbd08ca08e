"""ToUnicode CMap support.

A ToUnicode CMap maps the character codes a font uses in content streams to
Unicode text. Only the ``bfchar`` and ``bfrange`` sections are read; the
other sections of the CMap program are skipped.

See Section 5.9.2 - ToUnicode CMaps of the PDF Reference.
"""

import logging
import struct
import zlib
from collections.abc import Iterable
from typing import Any

from pdfvector import settings
from pdfvector.diagnostics import CMAP_ERROR, Diagnostics
from pdfvector.pdfexceptions import CMapError, PDFTypeError
from pdfvector.psparser import ContentLexer, TokenKind, decode_string_token
from pdfvector.utils import choplist, nunpack

log = logging.getLogger(__name__)

FLATE_FILTERS = ("FlateDecode", "Fl")


class ToUnicodeMap:
    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self.cid2unichr: dict[int, str] = {}

    def __repr__(self) -> str:
        return f"<ToUnicodeMap: {self.name}, {len(self.cid2unichr)} codes>"

    def __len__(self) -> int:
        return len(self.cid2unichr)

    def __contains__(self, code: object) -> bool:
        return code in self.cid2unichr

    def add_cid2unichr(self, cid: int, code: bytes | int | str) -> None:
        assert isinstance(cid, int), str(type(cid))
        if isinstance(code, bytes):
            # Interpret as UTF-16BE.
            unichr = code.decode("UTF-16BE", "ignore")
        elif isinstance(code, int):
            unichr = chr(code)
        elif isinstance(code, str):
            unichr = code
        else:
            raise PDFTypeError(code)
        self.cid2unichr[cid] = unichr

    def get_unichr(self, cid: int) -> str:
        return self.cid2unichr[cid]

    def decode(self, data: bytes) -> str:
        """Decodes raw string bytes into text.

        At each position the two-byte big-endian code is tried first, then
        the one-byte code. A byte that maps under neither is kept as the
        character with the same value.
        """
        chars = []
        i = 0
        n = len(data)
        while i < n:
            if i + 1 < n:
                code = (data[i] << 8) | data[i + 1]
                if code in self.cid2unichr:
                    chars.append(self.cid2unichr[code])
                    i += 2
                    continue
            code = data[i]
            chars.append(self.cid2unichr.get(code, chr(code)))
            i += 1
        return "".join(chars)


class CMapParser:
    """Reads the bfchar and bfrange sections of a ToUnicode CMap program."""

    def __init__(
        self,
        cmap: ToUnicodeMap,
        data: bytes,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.cmap = cmap
        self.lexer = ContentLexer(data)
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.stack: list[Any] = []
        self.arrays: list[list[Any]] = []

    def run(self) -> ToUnicodeMap:
        for token in self.lexer:
            if token.kind is TokenKind.ARRAY_START:
                self.arrays.append([])
            elif token.kind is TokenKind.ARRAY_END:
                if self.arrays:
                    array = self.arrays.pop()
                    self.push(array)
            elif token.kind is TokenKind.OPERATOR:
                self.do_keyword(token.value)
            elif token.kind in (TokenKind.HEX_STRING, TokenKind.LITERAL_STRING):
                self.push(decode_string_token(token.value))
            else:
                self.push(token.value)
        return self.cmap

    def push(self, obj: Any) -> None:
        if self.arrays:
            self.arrays[-1].append(obj)
        else:
            self.stack.append(obj)

    def popall(self) -> list[Any]:
        objs = self.stack
        self.stack = []
        self.arrays = []
        return objs

    def do_keyword(self, name: str) -> None:
        if name == "endbfrange":
            self.add_ranges(self.popall())
        elif name == "endbfchar":
            self.add_chars(self.popall())
        else:
            # begin* markers, def, findresource and the rest of the program.
            self.popall()

    def add_chars(self, objs: list[Any]) -> None:
        if len(objs) % 2:
            self._warn_once("The bfchar section has an odd number of entries.")
        for cid, code in choplist(2, objs):
            if isinstance(cid, bytes) and isinstance(code, bytes):
                self.cmap.add_cid2unichr(nunpack(cid), code)
            else:
                self._warn_once("The bfchar entry is not a pair of strings.")

    def add_ranges(self, objs: list[Any]) -> None:
        for start_byte, end_byte, code in choplist(3, objs):
            if not isinstance(start_byte, bytes):
                self._warn_once("The start object is not a byte.")
                continue
            if not isinstance(end_byte, bytes):
                self._warn_once("The end object is not a byte.")
                continue
            start = nunpack(start_byte)
            end = nunpack(end_byte)
            if end < start:
                self._warn_once("The end of the range is before its start.")
                continue
            if isinstance(code, list):
                if len(code) != end - start + 1:
                    self._warn_once(
                        "The difference between the start and end "
                        "offsets does not match the code length.",
                    )
                for cid, unicode_value in zip(range(start, end + 1), code):
                    if isinstance(unicode_value, bytes):
                        self.cmap.add_cid2unichr(cid, unicode_value)
            elif isinstance(code, bytes) and code:
                var = code[-4:]
                base = nunpack(var)
                prefix = code[:-4]
                vlen = len(var)
                for i in range(end - start + 1):
                    x = prefix + struct.pack(">L", (base + i) & 0xFFFFFFFF)[-vlen:]
                    self.cmap.add_cid2unichr(start + i, x)
            else:
                self._warn_once("The destination of the range is not a string.")

    def _warn_once(self, msg: str) -> None:
        """Warn once for each unique message"""
        base_msg = (
            "Ignoring (part of) ToUnicode map because the PDF data "
            "does not conform to the format. "
        )
        self.diagnostics.warn_once(log, CMAP_ERROR, base_msg + msg)


def _filter_names(filters: Iterable[str] | str | None) -> list[str]:
    if filters is None:
        return []
    if isinstance(filters, str):
        filters = [filters]
    return [f.lstrip("/") for f in filters]


class CMapDB:
    """Builds ToUnicode maps from embedded CMap streams."""

    @classmethod
    def inflate(cls, data: bytes, filters: Iterable[str] | str | None) -> bytes:
        for name in _filter_names(filters):
            if name in FLATE_FILTERS:
                try:
                    data = zlib.decompress(data)
                except zlib.error as e:
                    raise CMapError(f"Invalid zlib bytes: {e!r}") from e
            else:
                raise CMapError(f"Unsupported ToUnicode filter: {name!r}")
        return data

    @classmethod
    def load(
        cls,
        data: bytes,
        filters: Iterable[str] | str | None = None,
        name: str | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> ToUnicodeMap | None:
        """Parses a ToUnicode stream; returns None when it cannot be used."""
        if diagnostics is None:
            diagnostics = Diagnostics()
        try:
            data = cls.inflate(data, filters)
        except CMapError as e:
            if settings.STRICT:
                raise
            diagnostics.warn_once(log, CMAP_ERROR, f"Cannot load CMap {name!r}: {e}")
            return None
        log.debug("load: name=%r, %d bytes", name, len(data))
        cmap = ToUnicodeMap(name)
        return CMapParser(cmap, data, diagnostics).run()
