"""Functions that can be used for the most common use-cases for pdfvector"""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from pdfvector.converter import Bounds, ConverterParams, SVGPathConverter
from pdfvector.diagnostics import Diagnostics
from pdfvector.pdfexceptions import ContentStreamError, PDFTypeError
from pdfvector.pdfinterp import (
    PDFContent,
    PDFContentInterpreter,
    PDFResourceManager,
    TextRun,
)
from pdfvector.pdfpath import PDFPath
from pdfvector.utils import FileOrName, open_filename

log = logging.getLogger(__name__)


class ContentStream:
    """One decoded content stream handed over by the document layer.

    :param source: the stream bytes, a binary file object or a file name.
    :param fonts: the /Font resources visible to the stream, by name.
    :param page: zero-indexed number of the page the stream belongs to.
    :param owner: identifies the resource dictionary the fonts come from,
        e.g. a page or a Form XObject.
    :param name: a label used in error messages.
    """

    def __init__(
        self,
        source: bytes | FileOrName,
        fonts: Mapping[Any, Any] | None = None,
        page: int = 0,
        owner: object = None,
        name: str | None = None,
    ) -> None:
        self.source = source
        self.fonts = fonts
        self.page = page
        self.owner = owner
        self.name = name if name is not None else f"page {page}"

    def __repr__(self) -> str:
        return f"<ContentStream: {self.name}, page={self.page}>"

    def get_data(self) -> bytes:
        if isinstance(self.source, (bytes, bytearray)):
            return bytes(self.source)
        try:
            with open_filename(self.source, "rb") as fp:
                data = fp.read()
        except (OSError, PDFTypeError) as e:
            raise ContentStreamError(self.name, e) from e
        if isinstance(data, str):
            raise ContentStreamError(self.name, "stream is opened in text mode")
        return data


class ExtractionResult(NamedTuple):
    paths: list[PDFPath]
    text_runs: list[TextRun]
    errors: list[ContentStreamError]
    diagnostics: Diagnostics

    def paths_by_page(self) -> dict[int, list[PDFPath]]:
        pages: dict[int, list[PDFPath]] = {}
        for path in self.paths:
            pages.setdefault(path.page, []).append(path)
        return pages


class ConvertedContent(NamedTuple):
    path_elements: list[str]
    text_elements: list[str]
    bounds: Bounds | None


def extract_content(
    data: bytes,
    fonts: Mapping[Any, Any] | None = None,
    rsrcmgr: PDFResourceManager | None = None,
    diagnostics: Diagnostics | None = None,
) -> PDFContent:
    """Interprets a single decoded content stream.

    :param data: the content stream bytes.
    :param fonts: optional font resources, by resource name.
    :return: the painted paths and the shown text runs, in stream order.
    """
    interpreter = PDFContentInterpreter(fonts, rsrcmgr, diagnostics)
    return interpreter.process(data)


def extract_streams(
    streams: Iterable[ContentStream],
    rsrcmgr: PDFResourceManager | None = None,
    caching: bool = True,
) -> ExtractionResult:
    """Interprets several content streams, one interpreter per stream.

    A stream whose bytes cannot be read is recorded in ``errors`` and the
    remaining streams are still processed.
    """
    if rsrcmgr is None:
        rsrcmgr = PDFResourceManager(caching=caching)
    diagnostics = Diagnostics()
    paths: list[PDFPath] = []
    text_runs: list[TextRun] = []
    errors: list[ContentStreamError] = []
    for stream in streams:
        try:
            data = stream.get_data()
        except ContentStreamError as e:
            log.warning(f"Skipping content stream: {e}")
            errors.append(e)
            continue
        interpreter = PDFContentInterpreter(
            stream.fonts, rsrcmgr, diagnostics, owner=stream.owner
        )
        content = interpreter.process(data)
        log.debug(
            "%r: %d paths, %d text runs",
            stream,
            len(content.paths),
            len(content.text_runs),
        )
        for path in content.paths:
            path.page = stream.page
        paths.extend(content.paths)
        text_runs.extend(run._replace(page=stream.page) for run in content.text_runs)
    return ExtractionResult(paths, text_runs, errors, diagnostics)


def path_statistics(paths: Iterable[PDFPath]) -> dict[str, Any]:
    """Counts paths by painting operation and by color.

    :return: a dictionary with ``total``, ``by_operation``, ``by_color``
        (fill and stroke counts per color) and ``average_segments``.
    """
    total = 0
    segments = 0
    by_operation: Counter[str] = Counter()
    by_color: dict[str, dict[str, int]] = {}
    for path in paths:
        total += 1
        segments += path.segment_count()
        by_operation[path.operation or "unknown"] += 1
        if path.style is None:
            continue
        if path.style.fill:
            counts = by_color.setdefault(path.style.fill, {"fill": 0, "stroke": 0})
            counts["fill"] += 1
        if path.style.stroke:
            counts = by_color.setdefault(path.style.stroke, {"fill": 0, "stroke": 0})
            counts["stroke"] += 1
    return {
        "total": total,
        "by_operation": dict(by_operation),
        "by_color": by_color,
        "average_segments": round(segments / total, 2) if total else 0,
    }


def convert_content(
    content: PDFContent | ExtractionResult,
    params: ConverterParams | None = None,
) -> ConvertedContent:
    """Serializes paths and text runs as SVG elements.

    :return: the ``<path>`` and ``<text>`` elements and the bounds of all
        emitted points in target space.
    """
    converter = SVGPathConverter(params)
    path_elements = [
        converter.generate_path_element(
            svg_path,
            id=f"path-{index}",
            class_name=f"operation-{svg_path.operation}",
        )
        for (index, svg_path) in enumerate(converter.convert_paths(content.paths))
    ]
    text_elements = [
        converter.generate_text_element(svg_text, id=f"text-{index}")
        for (index, svg_text) in enumerate(
            converter.convert_text_runs(content.text_runs)
        )
    ]
    bounds = converter.calculate_transformed_bounds(
        content.paths, content.text_runs
    )
    return ConvertedContent(path_elements, text_elements, bounds)
