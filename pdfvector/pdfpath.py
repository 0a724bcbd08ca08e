"""Path model built by the content-stream interpreter.

Points are stored untransformed, in the user space that was current when
they were recorded; each painted path carries the CTM snapshot needed to map
them to the page.
"""

from collections.abc import Iterator
from typing import NamedTuple, Union

from pdfvector.utils import Matrix, Point

STROKE = "stroke"
FILL = "fill"
FILL_STROKE = "fill-stroke"

NONZERO = "nonzero"
EVENODD = "evenodd"


class LineSegment(NamedTuple):
    point: Point


class CubicSegment(NamedTuple):
    cp1: Point
    cp2: Point
    point: Point


class QuadraticSegment(NamedTuple):
    cp: Point
    point: Point


Segment = Union[LineSegment, CubicSegment, QuadraticSegment]


def segment_points(segment: Segment) -> tuple[Point, ...]:
    """Control points followed by the end point."""
    return tuple(segment)


class Subpath:
    def __init__(self, start_point: Point) -> None:
        self.start_point = start_point
        self.segments: list[Segment] = []
        self.closed = False

    def __repr__(self) -> str:
        return (
            f"<Subpath: start={self.start_point!r}, "
            f"segments={len(self.segments)}, closed={self.closed}>"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Subpath):
            return NotImplemented
        return (
            self.start_point == other.start_point
            and self.segments == other.segments
            and self.closed == other.closed
        )

    def points(self) -> Iterator[Point]:
        yield self.start_point
        for segment in self.segments:
            yield from segment_points(segment)


class PathStyle(NamedTuple):
    """Paint attributes copied from the graphics state when a path is painted.

    Fields that the painting operation does not use stay None.
    """

    fill: str | None = None
    fill_rule: str | None = None
    stroke: str | None = None
    stroke_width: float | None = None
    stroke_linecap: str | None = None
    stroke_linejoin: str | None = None
    stroke_dasharray: str | None = None


class PDFPath:
    """A path under construction, and once painted, a recorded path."""

    def __init__(self) -> None:
        self.subpaths: list[Subpath] = []
        self.current_point: Point | None = None
        self.operation: str | None = None
        self.style: PathStyle | None = None
        self.transform: Matrix | None = None
        self.page = 0

    def __repr__(self) -> str:
        return (
            f"<PDFPath: operation={self.operation!r}, "
            f"subpaths={len(self.subpaths)}, segments={self.segment_count()}>"
        )

    def move_to(self, pt: Point) -> None:
        self.subpaths.append(Subpath(pt))
        self.current_point = pt

    def append(self, segment: Segment) -> None:
        """Adds a segment to the most recent subpath."""
        self.subpaths[-1].segments.append(segment)
        self.current_point = segment.point

    def close(self) -> None:
        if self.subpaths:
            self.subpaths[-1].closed = True
            self.current_point = self.subpaths[-1].start_point

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        self.move_to((x, y))
        subpath = self.subpaths[-1]
        subpath.segments.append(LineSegment((x + w, y)))
        subpath.segments.append(LineSegment((x + w, y + h)))
        subpath.segments.append(LineSegment((x, y + h)))
        subpath.closed = True
        self.current_point = (x, y)

    def segment_count(self) -> int:
        return sum(len(subpath.segments) for subpath in self.subpaths)

    def points(self) -> Iterator[Point]:
        for subpath in self.subpaths:
            yield from subpath.points()
