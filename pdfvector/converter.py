"""Conversion of interpreted paths and text runs to SVG markup.

PDF user space has its origin at the bottom left of the page and y growing
upwards; SVG pixel space has its origin at the top left. Every point goes
through the path's CTM, the crop offset, the vertical flip and the scale, in
that order.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any, NamedTuple

from pdfvector.pdfcolor import DEFAULT_COLOR
from pdfvector.pdfinterp import TextRun
from pdfvector.pdfpath import (
    FILL,
    FILL_STROKE,
    STROKE,
    CubicSegment,
    LineSegment,
    PathStyle,
    PDFPath,
    QuadraticSegment,
    Segment,
    Subpath,
)
from pdfvector.utils import (
    Matrix,
    Point,
    apply_matrix_pt,
    enc,
    format_number,
    get_bound,
)

log = logging.getLogger(__name__)

CropBox = tuple[float, float, float, float]


class ConverterParams:
    """Parameters for coordinate conversion

    :param pdf_width: Width of the PDF page box in points.
    :param pdf_height: Height of the PDF page box in points.
    :param svg_width: Width of the target drawing in pixels. Defaults to
        ``pdf_width``.
    :param svg_height: Height of the target drawing in pixels. Defaults to
        ``pdf_height``.
    :param crop_box: Optional ``(x, y, width, height)`` region of the page
        that is mapped onto the target instead of the whole page box.
    :param precision: Number of decimals written for coordinates.
    :param flip_y: If the y axis is flipped to put the origin at the top.
    :param apply_transform: If the CTM recorded with each path is applied.
    """

    def __init__(
        self,
        pdf_width: float = 612,
        pdf_height: float = 792,
        svg_width: float | None = None,
        svg_height: float | None = None,
        crop_box: CropBox | None = None,
        precision: int = 3,
        flip_y: bool = True,
        apply_transform: bool = True,
    ) -> None:
        self.pdf_width = pdf_width
        self.pdf_height = pdf_height
        self.svg_width = pdf_width if svg_width is None else svg_width
        self.svg_height = pdf_height if svg_height is None else svg_height
        self.crop_box = None if crop_box is None else tuple(crop_box)
        self.precision = precision
        self.flip_y = flip_y
        self.apply_transform = apply_transform

        self._validate()

    def _validate(self) -> None:
        if self.crop_box is not None and len(self.crop_box) != 4:
            raise ValueError("crop_box must be (x, y, width, height)")
        if self.effective_width <= 0 or self.effective_height <= 0:
            raise ValueError("The page or crop box must have a positive size")
        if self.precision < 0:
            raise ValueError("precision must not be negative")

    @property
    def effective_width(self) -> float:
        return self.crop_box[2] if self.crop_box else self.pdf_width

    @property
    def effective_height(self) -> float:
        return self.crop_box[3] if self.crop_box else self.pdf_height

    def __repr__(self) -> str:
        return (
            "<ConverterParams: pdf_size=({}, {}), svg_size=({}, {}), "
            "crop_box={!r}, precision={}, flip_y={}, apply_transform={}>".format(
                self.pdf_width,
                self.pdf_height,
                self.svg_width,
                self.svg_height,
                self.crop_box,
                self.precision,
                self.flip_y,
                self.apply_transform,
            )
        )


class Bounds(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    def viewbox(self, padding: float = 0.05) -> str:
        """A viewBox value around the bounds, padded by a share of the
        larger side."""
        pad = max(self.width, self.height) * padding
        return "{} {} {} {}".format(
            format_number(self.x - pad, 2),
            format_number(self.y - pad, 2),
            format_number(self.width + 2 * pad, 2),
            format_number(self.height + 2 * pad, 2),
        )


class SVGPath(NamedTuple):
    d: str
    style: dict[str, Any]
    operation: str | None
    path: PDFPath


class SVGText(NamedTuple):
    text: str
    x: float
    y: float
    font_size: float
    fill: str
    font: str | None
    run: TextRun


def _bounds(points: Iterable[Point]) -> Bounds | None:
    pts = list(points)
    if not pts:
        return None
    (x0, y0, x1, y1) = get_bound(pts)
    return Bounds(x0, y0, x1 - x0, y1 - y0)


class SVGPathConverter:
    def __init__(self, params: ConverterParams | None = None) -> None:
        self.params = params if params is not None else ConverterParams()
        self.calculate_scale_factors()

    def __repr__(self) -> str:
        return (
            f"<SVGPathConverter: scale=({self.scale_x}, {self.scale_y}), "
            f"offset=({self.offset_x}, {self.offset_y})>"
        )

    def calculate_scale_factors(self) -> None:
        params = self.params
        self.scale_x = params.svg_width / params.effective_width
        self.scale_y = params.svg_height / params.effective_height
        if params.crop_box:
            (self.offset_x, self.offset_y) = params.crop_box[:2]
        else:
            (self.offset_x, self.offset_y) = (0, 0)

    def update_params(self, **changes: Any) -> None:
        """Changes some parameters and recomputes the scale factors."""
        params = self.params
        values = {
            "pdf_width": params.pdf_width,
            "pdf_height": params.pdf_height,
            "svg_width": params.svg_width,
            "svg_height": params.svg_height,
            "crop_box": params.crop_box,
            "precision": params.precision,
            "flip_y": params.flip_y,
            "apply_transform": params.apply_transform,
        }
        unknown = set(changes) - set(values)
        if unknown:
            raise TypeError(f"Unknown converter parameters: {sorted(unknown)}")
        values.update(changes)
        self.params = ConverterParams(**values)
        self.calculate_scale_factors()

    def transform_point(self, pt: Point, transform: Matrix | None = None) -> Point:
        """Maps a point from PDF user space to target pixel space."""
        if self.params.apply_transform and transform is not None:
            pt = apply_matrix_pt(transform, pt)
        (x, y) = pt
        x -= self.offset_x
        y -= self.offset_y
        if self.params.flip_y:
            y = self.params.effective_height - y
        return x * self.scale_x, y * self.scale_y

    def format_coord(self, coord: float) -> str:
        return format_number(coord, self.params.precision)

    def _format_pt(self, pt: Point, transform: Matrix | None) -> str:
        (x, y) = self.transform_point(pt, transform)
        return f"{self.format_coord(x)} {self.format_coord(y)}"

    def convert_segment(self, segment: Segment, transform: Matrix | None) -> str:
        if isinstance(segment, LineSegment):
            return "L " + self._format_pt(segment.point, transform)
        elif isinstance(segment, CubicSegment):
            return "C {} {} {}".format(
                self._format_pt(segment.cp1, transform),
                self._format_pt(segment.cp2, transform),
                self._format_pt(segment.point, transform),
            )
        elif isinstance(segment, QuadraticSegment):
            return "Q {} {}".format(
                self._format_pt(segment.cp, transform),
                self._format_pt(segment.point, transform),
            )
        raise TypeError(f"Unknown segment type: {type(segment)!r}")

    def build_path_data(
        self,
        subpaths: Iterable[Subpath],
        transform: Matrix | None = None,
    ) -> str:
        parts = []
        for subpath in subpaths:
            parts.append("M " + self._format_pt(subpath.start_point, transform))
            for segment in subpath.segments:
                parts.append(self.convert_segment(segment, transform))
            if subpath.closed:
                parts.append("Z")
        return " ".join(parts)

    def build_style(self, style: PathStyle | None, operation: str | None) -> dict:
        """SVG presentation attributes for a painted path, in output order."""
        if style is None:
            style = PathStyle()
        svg_style: dict[str, Any] = {}
        if operation in (FILL, FILL_STROKE):
            svg_style["fill"] = style.fill or DEFAULT_COLOR
            if style.fill_rule:
                svg_style["fill-rule"] = style.fill_rule
        else:
            svg_style["fill"] = "none"

        if operation in (STROKE, FILL_STROKE):
            svg_style["stroke"] = style.stroke or DEFAULT_COLOR
            if style.stroke_width is not None:
                # Non-uniform scaling must not thicken strokes.
                svg_style["stroke-width"] = style.stroke_width * min(
                    self.scale_x, self.scale_y
                )
            if style.stroke_linecap:
                svg_style["stroke-linecap"] = style.stroke_linecap
            if style.stroke_linejoin:
                svg_style["stroke-linejoin"] = style.stroke_linejoin
            if style.stroke_dasharray:
                svg_style["stroke-dasharray"] = style.stroke_dasharray
        return svg_style

    def convert_path(self, path: PDFPath) -> SVGPath | None:
        if not path.subpaths:
            return None
        return SVGPath(
            self.build_path_data(path.subpaths, path.transform),
            self.build_style(path.style, path.operation),
            path.operation,
            path,
        )

    def convert_paths(self, paths: Iterable[PDFPath]) -> list[SVGPath]:
        svg_paths = []
        for path in paths:
            svg_path = self.convert_path(path)
            if svg_path is not None:
                svg_paths.append(svg_path)
        return svg_paths

    def _attribute_value(self, value: object) -> str:
        if isinstance(value, float):
            s = self.format_coord(value)
            if "." in s:
                s = s.rstrip("0").rstrip(".")
            return s
        return str(value)

    def style_to_attributes(self, style: dict[str, Any]) -> str:
        return " ".join(
            f'{name}="{enc(self._attribute_value(value))}"'
            for (name, value) in style.items()
            if value is not None
        )

    def generate_path_element(
        self,
        svg_path: SVGPath,
        id: str | None = None,
        class_name: str | None = None,
    ) -> str:
        attrs = ""
        if id:
            attrs += f' id="{enc(id)}"'
        if class_name:
            attrs += f' class="{enc(class_name)}"'
        attrs += f' d="{enc(svg_path.d)}"'
        style = self.style_to_attributes(svg_path.style)
        if style:
            attrs += " " + style
        return f"<path{attrs}/>"

    def convert_text_run(self, run: TextRun) -> SVGText:
        (x, y) = self.transform_point((run.x, run.y), run.ctm)
        return SVGText(
            run.text,
            x,
            y,
            run.fontsize * min(self.scale_x, self.scale_y),
            run.fill_color,
            run.font,
            run,
        )

    def convert_text_runs(self, runs: Iterable[TextRun]) -> list[SVGText]:
        return [self.convert_text_run(run) for run in runs]

    def generate_text_element(
        self,
        svg_text: SVGText,
        id: str | None = None,
        class_name: str | None = "pdf-text",
    ) -> str:
        attrs = ""
        if id:
            attrs += f' id="{enc(id)}"'
        attrs += ' x="{}" y="{}" font-size="{}" fill="{}"'.format(
            self.format_coord(svg_text.x),
            self.format_coord(svg_text.y),
            enc(self._attribute_value(float(svg_text.font_size))),
            enc(svg_text.fill),
        )
        if class_name:
            attrs += f' class="{enc(class_name)}"'
        if svg_text.font:
            attrs += f' data-font="{enc(svg_text.font)}"'
        return f"<text{attrs}>{enc(svg_text.text)}</text>"

    def calculate_bounds(self, paths: Iterable[PDFPath]) -> Bounds | None:
        """Bounds of the untransformed points of the paths, in PDF units."""
        return _bounds(pt for path in paths for pt in path.points())

    def _transformed_points(
        self,
        paths: Iterable[PDFPath],
        runs: Iterable[TextRun],
    ) -> Iterator[Point]:
        for path in paths:
            for pt in path.points():
                yield self.transform_point(pt, path.transform)
        for run in runs:
            yield self.transform_point((run.x, run.y), run.ctm)

    def calculate_transformed_bounds(
        self,
        paths: Iterable[PDFPath],
        runs: Iterable[TextRun] = (),
    ) -> Bounds | None:
        """Bounds of everything emitted, in target pixel space."""
        return _bounds(self._transformed_points(paths, runs))
