"""Tolerant conversion of content-stream operands.

Operands reach the interpreter as their lexical strings; these helpers turn
them into numbers and return ``None`` when that is not possible so the caller
can log and skip the operator.
"""

from typing import Any

from pdfvector.utils import Matrix, Point

_FloatTriple = tuple[float, float, float]
_FloatQuadruple = tuple[float, float, float, float]


def safe_int(o: Any) -> int | None:
    try:
        return int(o)
    except (TypeError, ValueError):
        f = safe_float(o)
        if f is None or f != f or f in (float("inf"), float("-inf")):
            return None
        return int(f)


def safe_float(o: Any) -> float | None:
    try:
        return float(o)
    except (TypeError, ValueError, OverflowError):
        return None


def safe_point(x: Any, y: Any) -> Point | None:
    x_f = safe_float(x)
    y_f = safe_float(y)

    if x_f is None or y_f is None:
        return None

    return x_f, y_f


def safe_matrix(a: Any, b: Any, c: Any, d: Any, e: Any, f: Any) -> Matrix | None:
    a_f = safe_float(a)
    b_f = safe_float(b)
    c_f = safe_float(c)
    d_f = safe_float(d)
    e_f = safe_float(e)
    f_f = safe_float(f)

    if (
        a_f is None
        or b_f is None
        or c_f is None
        or d_f is None
        or e_f is None
        or f_f is None
    ):
        return None

    return a_f, b_f, c_f, d_f, e_f, f_f


def safe_rgb(r: Any, g: Any, b: Any) -> _FloatTriple | None:
    r_f = safe_float(r)
    g_f = safe_float(g)
    b_f = safe_float(b)

    if r_f is None or g_f is None or b_f is None:
        return None

    return r_f, g_f, b_f


def safe_cmyk(c: Any, m: Any, y: Any, k: Any) -> _FloatQuadruple | None:
    c_f = safe_float(c)
    m_f = safe_float(m)
    y_f = safe_float(y)
    k_f = safe_float(k)

    if c_f is None or m_f is None or y_f is None or k_f is None:
        return None

    return c_f, m_f, y_f, k_f
