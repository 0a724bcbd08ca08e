import enum
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

from pdfvector import settings
from pdfvector.casting import (
    safe_cmyk,
    safe_float,
    safe_int,
    safe_matrix,
    safe_point,
    safe_rgb,
)
from pdfvector.cmapdb import CMapDB, ToUnicodeMap
from pdfvector.diagnostics import (
    INVALID_OPERAND,
    MISSING_OPERANDS,
    UNBALANCED_RESTORE,
    UNKNOWN_OPERATOR,
    Diagnostics,
)
from pdfvector.pdfcolor import DEFAULT_COLOR, cmyk_to_hex, gray_to_hex, rgb_to_hex
from pdfvector.pdfexceptions import PDFInterpreterError
from pdfvector.pdffont import (
    PDFFontSpec,
    decode_string_operand,
    font_key,
    make_fontmap,
)
from pdfvector.pdfpath import (
    EVENODD,
    FILL,
    FILL_STROKE,
    NONZERO,
    STROKE,
    CubicSegment,
    LineSegment,
    PathStyle,
    PDFPath,
)
from pdfvector.psparser import ContentLexer, TokenKind
from pdfvector.utils import (
    MATRIX_IDENTITY,
    Matrix,
    Point,
    mult_matrix,
    translate_matrix,
)

log = logging.getLogger(__name__)

LINE_CAPS = ("butt", "round", "square")
LINE_JOINS = ("miter", "round", "bevel")

# T* moves down by this multiple of the font size.
LEADING_FACTOR = 1.2


class PDFTextState:
    def __init__(self) -> None:
        self.in_text_object = False
        self.font: str | None = None
        self.fontsize: float = 0
        self.charspace: float = 0
        self.wordspace: float = 0
        self.leading: float = 0
        self.reset()

    def __repr__(self) -> str:
        return (
            "<PDFTextState: in_text_object={!r}, font={!r}, fontsize={!r}, "
            "matrix={!r}, linematrix={!r}, leading={!r}>".format(
                self.in_text_object,
                self.font,
                self.fontsize,
                self.matrix,
                self.linematrix,
                self.leading,
            )
        )

    def reset(self) -> None:
        self.matrix: Matrix = MATRIX_IDENTITY
        self.linematrix: Matrix = MATRIX_IDENTITY

    @property
    def position(self) -> Point:
        return self.matrix[4], self.matrix[5]


class PDFGraphicState:
    def __init__(self) -> None:
        self.fill_color: str = DEFAULT_COLOR
        self.stroke_color: str = DEFAULT_COLOR
        self.linewidth: float = 1.0
        self.linecap: str = LINE_CAPS[0]
        self.linejoin: str = LINE_JOINS[0]
        self.dash: str = ""
        self.dash_phase: float = 0
        self.ctm: Matrix = MATRIX_IDENTITY

    def copy(self) -> "PDFGraphicState":
        obj = PDFGraphicState()
        obj.fill_color = self.fill_color
        obj.stroke_color = self.stroke_color
        obj.linewidth = self.linewidth
        obj.linecap = self.linecap
        obj.linejoin = self.linejoin
        obj.dash = self.dash
        obj.dash_phase = self.dash_phase
        obj.ctm = self.ctm
        return obj

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PDFGraphicState):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self) -> str:
        return (
            f"<PDFGraphicState: "
            f"fill_color={self.fill_color!r}, "
            f"stroke_color={self.stroke_color!r}, "
            f"linewidth={self.linewidth!r}, "
            f"linecap={self.linecap!r}, "
            f"linejoin={self.linejoin!r}, "
            f"dash={self.dash!r}, "
            f"dash_phase={self.dash_phase!r}, "
            f"ctm={self.ctm!r}>"
        )


class TextRun(NamedTuple):
    text: str
    x: float
    y: float
    font: str | None
    fontsize: float
    fill_color: str
    ctm: Matrix
    page: int = 0


class PDFContent(NamedTuple):
    paths: list[PDFPath]
    text_runs: list[TextRun]


class PDFResourceManager:
    """Repository of shared resources.

    The manager caches parsed ToUnicode maps so that streams of the same
    document which use the same font resource parse its CMap only once.
    Entries are keyed by the owning resource dictionary and the font
    resource name, since unrelated Form XObjects may reuse a name.
    """

    def __init__(self, caching: bool = True) -> None:
        self.caching = caching
        self._cached_cmaps: dict[tuple[object, str], ToUnicodeMap] = {}
        self._failed: set[tuple[object, str]] = set()

    def __repr__(self) -> str:
        return (
            f"<PDFResourceManager: caching={self.caching}, "
            f"cmaps={len(self._cached_cmaps)}, failed={len(self._failed)}>"
        )

    def get_unicode_map(
        self,
        spec: PDFFontSpec,
        owner: object = None,
        diagnostics: Diagnostics | None = None,
    ) -> ToUnicodeMap | None:
        if spec.to_unicode is None:
            return None
        key = (owner, spec.name)
        if key in self._cached_cmaps:
            return self._cached_cmaps[key]
        if key in self._failed:
            return None
        log.debug("get_unicode_map: create: owner=%r, spec=%r", owner, spec)
        cmap = CMapDB.load(
            spec.to_unicode,
            spec.filters,
            name=spec.name,
            diagnostics=diagnostics,
        )
        if cmap is None:
            self._failed.add(key)
        elif self.caching:
            self._cached_cmaps[key] = cmap
        return cmap


class Operator(str, enum.Enum):
    """Every content-stream operator the interpreter recognizes."""

    # graphics state
    q = "q"
    Q = "Q"
    cm = "cm"
    w = "w"
    J = "J"
    j = "j"
    M = "M"
    d = "d"
    ri = "ri"
    i = "i"
    gs = "gs"
    # path construction
    m = "m"
    l = "l"  # noqa: E741
    c = "c"
    v = "v"
    y = "y"
    h = "h"
    re = "re"
    # path painting
    S = "S"
    s = "s"
    f = "f"
    F = "F"
    f_a = "f*"
    B = "B"
    B_a = "B*"
    b = "b"
    b_a = "b*"
    n = "n"
    # clipping
    W = "W"
    W_a = "W*"
    # color
    CS = "CS"
    cs = "cs"
    SC = "SC"
    SCN = "SCN"
    sc = "sc"
    scn = "scn"
    G = "G"
    g = "g"
    RG = "RG"
    rg = "rg"
    K = "K"
    k = "k"
    sh = "sh"
    # text objects and state
    BT = "BT"
    ET = "ET"
    Tc = "Tc"
    Tw = "Tw"
    Tz = "Tz"
    TL = "TL"
    Tf = "Tf"
    Tr = "Tr"
    Ts = "Ts"
    # text positioning and showing
    Td = "Td"
    TD = "TD"
    Tm = "Tm"
    T_a = "T*"
    Tj = "Tj"
    TJ = "TJ"
    quote = "'"
    double_quote = '"'
    # type 3 fonts
    d0 = "d0"
    d1 = "d1"
    # XObjects, inline images and marked content
    Do = "Do"
    BI = "BI"
    ID = "ID"
    EI = "EI"
    MP = "MP"
    DP = "DP"
    BMC = "BMC"
    BDC = "BDC"
    EMC = "EMC"
    # compatibility
    BX = "BX"
    EX = "EX"

    @property
    def method_name(self) -> str:
        return "do_{}".format(
            self.value.replace("*", "_a").replace('"', "_w").replace("'", "_q")
        )


# Operators that are recognized but have no effect on the extracted geometry.
IGNORED_OPERATORS = frozenset(
    {
        Operator.M,
        Operator.ri,
        Operator.i,
        Operator.gs,
        Operator.W,
        Operator.W_a,
        Operator.CS,
        Operator.cs,
        Operator.sh,
        Operator.Tz,
        Operator.Tr,
        Operator.Ts,
        Operator.d0,
        Operator.d1,
        Operator.Do,
        Operator.BI,
        Operator.EI,
        Operator.MP,
        Operator.DP,
        Operator.BMC,
        Operator.BDC,
        Operator.EMC,
        Operator.BX,
        Operator.EX,
    }
)


class _Handler(NamedTuple):
    func: Callable[..., None]
    nargs: int
    variadic: bool


class PDFContentInterpreter:
    """Runs content streams and records the paths and text they paint.

    One instance interprets one stream at a time; :meth:`process` starts
    from a fresh graphics state. ``fontmap`` maps font resource names to
    :class:`PDFFontSpec` objects (or plain font dictionaries) and ``owner``
    identifies the resource dictionary they come from.
    """

    def __init__(
        self,
        fontmap: Mapping[Any, Any] | None = None,
        rsrcmgr: PDFResourceManager | None = None,
        diagnostics: Diagnostics | None = None,
        owner: object = None,
    ) -> None:
        self.fontmap = make_fontmap(fontmap)
        self.rsrcmgr = rsrcmgr if rsrcmgr is not None else PDFResourceManager()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.owner = owner
        self.handlers = self._build_handlers()
        self.init_state()

    def _build_handlers(self) -> dict[Operator, _Handler]:
        handlers = {}
        for op in Operator:
            if op in IGNORED_OPERATORS:
                func: Callable[..., None] = self.do_nothing
            else:
                func = getattr(self, op.method_name)
            code = func.__code__
            variadic = bool(code.co_flags & inspect.CO_VARARGS)
            handlers[op] = _Handler(func, code.co_argcount - 1, variadic)
        return handlers

    def init_state(self) -> None:
        self.gstack: list[PDFGraphicState] = []
        self.graphicstate = PDFGraphicState()
        self.textstate = PDFTextState()
        self.curpath: PDFPath | None = None
        self.operands: list[str] = []
        self.paths: list[PDFPath] = []
        self.text_runs: list[TextRun] = []
        self.lexer: ContentLexer | None = None

    def process(self, data: bytes | str) -> PDFContent:
        """Interprets one content stream from a clean state."""
        self.init_state()
        self.lexer = ContentLexer(data)
        for token in self.lexer:
            if token.kind is TokenKind.OPERATOR:
                self.execute(token.value)
            else:
                self.operands.append(token.value)
        self.lexer = None
        return PDFContent(self.paths, self.text_runs)

    def execute(self, name: str) -> None:
        """Dispatches one operator and clears the operand stack."""
        operands = self.operands
        self.operands = []
        try:
            op = Operator(name)
        except ValueError:
            self.unknown_operator(name, operands)
            return
        handler = self.handlers[op]
        if handler.variadic:
            handler.func(*operands)
        elif len(operands) < handler.nargs:
            if self.diagnostics.report(MISSING_OPERANDS, name):
                log.debug(
                    "Operator %r needs %d operands, got %r",
                    name,
                    handler.nargs,
                    operands,
                )
        else:
            handler.func(*operands[: handler.nargs])

    def unknown_operator(self, name: str, operands: list[str]) -> None:
        if self.diagnostics.report(UNKNOWN_OPERATOR, name):
            log.debug("Unknown operator %r with operands %r", name, operands)
        if settings.STRICT:
            raise PDFInterpreterError(f"Unknown operator: {name!r}")

    def invalid_operands(self, what: str, values: tuple[object, ...]) -> None:
        self.diagnostics.warn_once(
            log,
            INVALID_OPERAND,
            f"Cannot {what} because not all values in {values!r} "
            "can be parsed as floats",
        )

    def do_nothing(self, *args: str) -> None:
        pass

    def do_q(self) -> None:
        """Save graphics state"""
        self.gstack.append(self.graphicstate.copy())

    def do_Q(self) -> None:
        """Restore graphics state"""
        if self.gstack:
            self.graphicstate = self.gstack.pop()
        else:
            self.diagnostics.report(UNBALANCED_RESTORE)

    def do_cm(self, a1: str, b1: str, c1: str, d1: str, e1: str, f1: str) -> None:
        """Concatenate matrix to current transformation matrix"""
        matrix = safe_matrix(a1, b1, c1, d1, e1, f1)

        if matrix is None:
            self.invalid_operands(
                "concatenate matrix to current transformation matrix",
                (a1, b1, c1, d1, e1, f1),
            )
        else:
            # The operand applies after the current CTM, in stream order.
            self.graphicstate.ctm = mult_matrix(self.graphicstate.ctm, matrix)

    def do_w(self, linewidth: str) -> None:
        """Set line width"""
        linewidth_f = safe_float(linewidth)
        if linewidth_f is None:
            self.invalid_operands("set line width", (linewidth,))
        else:
            self.graphicstate.linewidth = linewidth_f

    def do_J(self, linecap: str) -> None:
        """Set line cap style"""
        index = safe_int(linecap)
        if index is not None and 0 <= index < len(LINE_CAPS):
            self.graphicstate.linecap = LINE_CAPS[index]
        else:
            self.graphicstate.linecap = LINE_CAPS[0]

    def do_j(self, linejoin: str) -> None:
        """Set line join style"""
        index = safe_int(linejoin)
        if index is not None and 0 <= index < len(LINE_JOINS):
            self.graphicstate.linejoin = LINE_JOINS[index]
        else:
            self.graphicstate.linejoin = LINE_JOINS[0]

    def do_d(self, *args: str) -> None:
        """Set line dash pattern

        The operands are ``[dash ...] phase``; the dash numbers become a
        space separated list and an empty array means a solid line.
        """
        if "[" in args:
            start = args.index("[")
            if "]" not in args[start:]:
                self.invalid_operands("set line dash pattern", tuple(args))
                return
            end = args.index("]", start)
            dashes = args[start + 1 : end]
            phase = args[end + 1] if end + 1 < len(args) else "0"
        else:
            dashes = args[:-1]
            phase = args[-1] if args else "0"
        values = [safe_float(x) for x in dashes]
        if None in values:
            self.invalid_operands("set line dash pattern", tuple(args))
            return
        self.graphicstate.dash = " ".join(dashes)
        self.graphicstate.dash_phase = safe_float(phase) or 0

    def do_m(self, x: str, y: str) -> None:
        """Begin new subpath"""
        pt = self._point(x, y, "start new subpath")
        if pt is not None:
            if self.curpath is None:
                self.curpath = PDFPath()
            self.curpath.move_to(pt)

    def do_l(self, x: str, y: str) -> None:
        """Append straight line segment to path"""
        if self.curpath is None:
            return
        pt = self._point(x, y, "append straight line segment to path")
        if pt is not None:
            self.curpath.append(LineSegment(pt))

    def do_c(self, x1: str, y1: str, x2: str, y2: str, x3: str, y3: str) -> None:
        """Append curved segment to path (three control points)"""
        if self.curpath is None:
            return
        pts = self._points((x1, y1, x2, y2, x3, y3), "append curved segment to path")
        if pts is not None:
            self.curpath.append(CubicSegment(pts[0], pts[1], pts[2]))

    def do_v(self, x2: str, y2: str, x3: str, y3: str) -> None:
        """Append curved segment to path (initial point replicated)"""
        if self.curpath is None or self.curpath.current_point is None:
            return
        pts = self._points((x2, y2, x3, y3), "append curved segment to path")
        if pts is not None:
            cp1 = self.curpath.current_point
            self.curpath.append(CubicSegment(cp1, pts[0], pts[1]))

    def do_y(self, x1: str, y1: str, x3: str, y3: str) -> None:
        """Append curved segment to path (final point replicated)"""
        if self.curpath is None:
            return
        pts = self._points((x1, y1, x3, y3), "append curved segment to path")
        if pts is not None:
            self.curpath.append(CubicSegment(pts[0], pts[1], pts[1]))

    def do_h(self) -> None:
        """Close subpath"""
        if self.curpath is not None:
            self.curpath.close()

    def do_re(self, x: str, y: str, w: str, h: str) -> None:
        """Append rectangle to path"""
        values = self._points((x, y, w, h), "append rectangle to path")
        if values is not None:
            ((x_f, y_f), (w_f, h_f)) = values
            if self.curpath is None:
                self.curpath = PDFPath()
            self.curpath.rect(x_f, y_f, w_f, h_f)

    def do_S(self) -> None:
        """Stroke path"""
        self.paint_path(STROKE)

    def do_s(self) -> None:
        """Close and stroke path"""
        self.do_h()
        self.paint_path(STROKE)

    def do_f(self) -> None:
        """Fill path using nonzero winding number rule"""
        self.paint_path(FILL, NONZERO)

    def do_F(self) -> None:
        """Fill path using nonzero winding number rule (obsolete)"""
        self.paint_path(FILL, NONZERO)

    def do_f_a(self) -> None:
        """Fill path using even-odd rule"""
        self.paint_path(FILL, EVENODD)

    def do_B(self) -> None:
        """Fill and stroke path using nonzero winding number rule"""
        self.paint_path(FILL_STROKE, NONZERO)

    def do_B_a(self) -> None:
        """Fill and stroke path using even-odd rule"""
        self.paint_path(FILL_STROKE, EVENODD)

    def do_b(self) -> None:
        """Close, fill, and stroke path using nonzero winding number rule"""
        self.do_h()
        self.paint_path(FILL_STROKE, NONZERO)

    def do_b_a(self) -> None:
        """Close, fill, and stroke path using even-odd rule"""
        self.do_h()
        self.paint_path(FILL_STROKE, EVENODD)

    def do_n(self) -> None:
        """End path without filling or stroking"""
        self.curpath = None

    def paint_path(self, operation: str, fill_rule: str | None = None) -> None:
        if self.curpath is None:
            return
        gs = self.graphicstate
        fill = operation in (FILL, FILL_STROKE)
        stroke = operation in (STROKE, FILL_STROKE)
        path = self.curpath
        path.operation = operation
        path.style = PathStyle(
            fill=gs.fill_color if fill else None,
            fill_rule=fill_rule if fill else None,
            stroke=gs.stroke_color if stroke else None,
            stroke_width=gs.linewidth if stroke else None,
            stroke_linecap=gs.linecap if stroke else None,
            stroke_linejoin=gs.linejoin if stroke else None,
            stroke_dasharray=gs.dash if stroke else None,
        )
        path.transform = gs.ctm
        self.paths.append(path)
        self.curpath = None

    def do_G(self, gray: str) -> None:
        """Set gray level for stroking operations"""
        gray_f = safe_float(gray)
        if gray_f is None:
            self.invalid_operands("set gray level for stroking", (gray,))
        else:
            self.graphicstate.stroke_color = gray_to_hex(gray_f)

    def do_g(self, gray: str) -> None:
        """Set gray level for nonstroking operations"""
        gray_f = safe_float(gray)
        if gray_f is None:
            self.invalid_operands("set gray level for nonstroking", (gray,))
        else:
            self.graphicstate.fill_color = gray_to_hex(gray_f)

    def do_RG(self, r: str, g: str, b: str) -> None:
        """Set RGB color for stroking operations"""
        rgb = safe_rgb(r, g, b)
        if rgb is None:
            self.invalid_operands("set RGB stroke color", (r, g, b))
        else:
            self.graphicstate.stroke_color = rgb_to_hex(*rgb)

    def do_rg(self, r: str, g: str, b: str) -> None:
        """Set RGB color for nonstroking operations"""
        rgb = safe_rgb(r, g, b)
        if rgb is None:
            self.invalid_operands("set RGB non-stroke color", (r, g, b))
        else:
            self.graphicstate.fill_color = rgb_to_hex(*rgb)

    def do_K(self, c: str, m: str, y: str, k: str) -> None:
        """Set CMYK color for stroking operations"""
        cmyk = safe_cmyk(c, m, y, k)
        if cmyk is None:
            self.invalid_operands("set CMYK stroke color", (c, m, y, k))
        else:
            self.graphicstate.stroke_color = cmyk_to_hex(*cmyk)

    def do_k(self, c: str, m: str, y: str, k: str) -> None:
        """Set CMYK color for nonstroking operations"""
        cmyk = safe_cmyk(c, m, y, k)
        if cmyk is None:
            self.invalid_operands("set CMYK non-stroke color", (c, m, y, k))
        else:
            self.graphicstate.fill_color = cmyk_to_hex(*cmyk)

    # Colors given in a named color space are left unresolved.
    def do_SCN(self, *args: str) -> None:
        """Set color for stroking operations (ignored)"""

    def do_scn(self, *args: str) -> None:
        """Set color for nonstroking operations (ignored)"""

    def do_SC(self, *args: str) -> None:
        """Set color for stroking operations (ignored)"""

    def do_sc(self, *args: str) -> None:
        """Set color for nonstroking operations (ignored)"""

    def do_BT(self) -> None:
        """Begin text object

        Initializing the text matrix, Tm, and the text line matrix, Tlm, to
        the identity matrix. Text objects cannot be nested; a second BT
        without an ET between them.
        """
        self.textstate.in_text_object = True
        self.textstate.reset()

    def do_ET(self) -> None:
        """End a text object"""
        self.textstate.in_text_object = False

    def do_Tc(self, space: str) -> None:
        """Set character spacing (recorded, not applied)"""
        space_f = safe_float(space)
        if space_f is not None:
            self.textstate.charspace = space_f

    def do_Tw(self, space: str) -> None:
        """Set the word spacing (recorded, not applied)"""
        space_f = safe_float(space)
        if space_f is not None:
            self.textstate.wordspace = space_f

    def do_TL(self, leading: str) -> None:
        """Set the text leading (recorded, not applied)"""
        leading_f = safe_float(leading)
        if leading_f is not None:
            self.textstate.leading = leading_f

    def do_Tf(self, fontid: str, fontsize: str) -> None:
        """Set the text font

        :param fontid: the font resource name, such as ``/F1``
        :param fontsize: size is a number representing a scale factor
        """
        fontsize_f = safe_float(fontsize)
        if fontsize_f is None:
            self.invalid_operands("set font size", (fontid, fontsize))
            return
        self.textstate.font = fontid
        self.textstate.fontsize = fontsize_f

    def do_Td(self, tx: str, ty: str) -> None:
        """Move to the start of the next line

        Offset from the start of the current line by (tx , ty).
        """
        self._move_line(tx, ty)

    def do_TD(self, tx: str, ty: str) -> None:
        """Move to the start of the next line and set the leading to -ty"""
        if self._move_line(tx, ty):
            self.textstate.leading = -float(ty)

    def _move_line(self, tx: str, ty: str) -> bool:
        offset = self._point(tx, ty, "move to the start of the next line")
        if offset is None:
            return False
        ts = self.textstate
        ts.linematrix = translate_matrix(ts.linematrix, offset)
        ts.matrix = ts.linematrix
        return True

    def do_Tm(self, a: str, b: str, c: str, d: str, e: str, f: str) -> None:
        """Set text matrix and text line matrix"""
        values = (a, b, c, d, e, f)
        matrix = safe_matrix(*values)

        if matrix is None:
            self.invalid_operands("set text matrix", values)
        else:
            self.textstate.matrix = matrix
            self.textstate.linematrix = matrix

    def do_T_a(self) -> None:
        """Move to start of next text line"""
        ts = self.textstate
        ts.linematrix = translate_matrix(
            ts.linematrix, (0, -ts.fontsize * LEADING_FACTOR)
        )
        ts.matrix = ts.linematrix

    def do_TJ(self, *args: str) -> None:
        """Show text, allowing individual glyph positioning

        Every string of the array is shown at the same position; the
        numeric adjustments between them are not applied.
        """
        if not self.textstate.in_text_object:
            return
        for lexeme in args:
            if lexeme.startswith(("(", "<")):
                self.show_text(lexeme)

    def do_Tj(self, s: str) -> None:
        """Show text"""
        if self.textstate.in_text_object:
            self.show_text(s)

    def do__q(self, s: str) -> None:
        """Move to next line and show text

        The ' (single quote) operator.
        """
        if self.textstate.in_text_object:
            self.do_T_a()
            self.show_text(s)

    def do__w(self, aw: str, ac: str, s: str) -> None:
        """Set word and character spacing, move to next line, and show text

        The " (double quote) operator.
        """
        self.do_Tw(aw)
        self.do_Tc(ac)
        self.do__q(s)

    def do_ID(self) -> None:
        """Begin inline image data"""
        if self.lexer is not None:
            self.lexer.skip_inline_data()

    def show_text(self, lexeme: str) -> None:
        ts = self.textstate
        text = decode_string_operand(lexeme, self.get_unicode_map(ts.font))
        if text is None:
            return
        (x, y) = ts.position
        self.text_runs.append(
            TextRun(
                text,
                x,
                y,
                ts.font,
                ts.fontsize,
                self.graphicstate.fill_color,
                self.graphicstate.ctm,
            )
        )

    def get_unicode_map(self, font: str | None) -> ToUnicodeMap | None:
        if font is None:
            return None
        spec = self.fontmap.get(font_key(font))
        if spec is None:
            return None
        return self.rsrcmgr.get_unicode_map(spec, self.owner, self.diagnostics)

    def _point(self, x: str, y: str, what: str) -> Point | None:
        pt = safe_point(x, y)
        if pt is None:
            self.invalid_operands(what, (x, y))
        return pt

    def _points(self, values: tuple[str, ...], what: str) -> list[Point] | None:
        floats = [safe_float(v) for v in values]
        if None in floats:
            self.invalid_operands(what, values)
            return None
        return [
            (floats[i], floats[i + 1])  # type: ignore[misc]
            for i in range(0, len(floats), 2)
        ]
