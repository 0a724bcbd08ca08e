"""Miscellaneous Routines."""

import io
import pathlib
from collections.abc import Iterable, Iterator
from html import escape
from typing import Any, BinaryIO, TextIO, TypeVar, Union, cast

import charset_normalizer  # For str encoding detection

from pdfvector.pdfexceptions import PDFTypeError

# PDF numbers are 32 bit ints
INF = (1 << 31) - 1

FileOrName = Union[pathlib.PurePath, str, io.IOBase]
AnyIO = Union[TextIO, BinaryIO]

_T = TypeVar("_T")


class open_filename:
    """Context manager that allows opening a filename
    (str or pathlib.PurePath type is supported) and closes it on exit,
    (just like `open`), but does nothing for file-like objects.
    """

    def __init__(self, filename: FileOrName, *args: Any, **kwargs: Any) -> None:
        if isinstance(filename, pathlib.PurePath):
            filename = str(filename)
        if isinstance(filename, str):
            self.file_handler: AnyIO = open(filename, *args, **kwargs)  # noqa: SIM115
            self.closing = True
        elif isinstance(filename, io.IOBase):
            self.file_handler = cast(AnyIO, filename)
            self.closing = False
        else:
            raise PDFTypeError(f"Unsupported input type: {type(filename)}")

    def __enter__(self) -> AnyIO:
        return self.file_handler

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if self.closing:
            self.file_handler.close()


def make_compat_str(o: object) -> str:
    """Converts everything to string, if bytes guessing the encoding."""
    if isinstance(o, bytes):
        try:
            return o.decode("utf-8")
        except UnicodeDecodeError:
            pass
        enc = charset_normalizer.detect(o)
        if enc["encoding"] is None:
            return o.decode("latin-1")
        try:
            return o.decode(enc["encoding"])
        except (UnicodeDecodeError, LookupError):
            return o.decode("latin-1")
    else:
        return str(o)


Point = tuple[float, float]
Rect = tuple[float, float, float, float]
Matrix = tuple[float, float, float, float, float, float]

#  Matrix operations
MATRIX_IDENTITY: Matrix = (1, 0, 0, 1, 0, 0)


def mult_matrix(m1: Matrix, m0: Matrix) -> Matrix:
    """Returns the multiplication of two matrices.

    Points are row vectors, so the result maps a point through ``m1``
    first and ``m0`` second.
    """
    (a1, b1, c1, d1, e1, f1) = m1
    (a0, b0, c0, d0, e0, f0) = m0
    return (
        a0 * a1 + c0 * b1,
        b0 * a1 + d0 * b1,
        a0 * c1 + c0 * d1,
        b0 * c1 + d0 * d1,
        a0 * e1 + c0 * f1 + e0,
        b0 * e1 + d0 * f1 + f0,
    )


def translate_matrix(m: Matrix, v: Point) -> Matrix:
    """Moves the translation column of a matrix by (x, y).

    Unlike a product with a translation matrix, the linear part of ``m`` does
    not affect the offset.
    """
    (a, b, c, d, e, f) = m
    (x, y) = v
    return a, b, c, d, e + x, f + y


def apply_matrix_pt(m: Matrix, v: Point) -> Point:
    """Applies a matrix to a point."""
    (a, b, c, d, e, f) = m
    (x, y) = v
    return a * x + c * y + e, b * x + d * y + f


def get_bound(pts: Iterable[Point]) -> Rect:
    """Compute a minimal rectangle that covers all the points."""
    limit: Rect = (INF, INF, -INF, -INF)
    (x0, y0, x1, y1) = limit
    for x, y in pts:
        x0 = min(x0, x)
        y0 = min(y0, y)
        x1 = max(x1, x)
        y1 = max(y1, y)
    return x0, y0, x1, y1


def choplist(n: int, seq: Iterable[_T]) -> Iterator[tuple[_T, ...]]:
    """Groups every n elements of the list."""
    r = []
    for x in seq:
        r.append(x)
        if len(r) == n:
            yield tuple(r)
            r = []


def nunpack(s: bytes, default: int = 0) -> int:
    """Unpacks variable-length unsigned integers (big endian)."""
    length = len(s)
    if not length:
        return default
    else:
        return int.from_bytes(s, byteorder="big", signed=False)


def format_number(x: float, precision: int) -> str:
    """Fixed-point text for a coordinate, with negative zero printed as zero."""
    s = f"{x:.{precision}f}"
    if s.startswith("-") and not s.strip("-0."):
        s = s[1:]
    return s


def enc(x: str) -> str:
    """Encodes a string for XML attributes and text"""
    if isinstance(x, bytes):
        return ""
    return escape(x)
