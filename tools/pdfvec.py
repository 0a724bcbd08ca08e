#!/usr/bin/env python3
"""Extracts vector paths and text from decoded PDF content streams and writes
them as SVG elements or as JSON statistics."""

import argparse
import json
import logging
import sys
import zlib
from collections.abc import Sequence
from typing import Any, TextIO

import pdfvector
import pdfvector.settings
from pdfvector.converter import ConverterParams
from pdfvector.high_level import (
    ContentStream,
    ExtractionResult,
    convert_content,
    extract_streams,
    path_statistics,
)
from pdfvector.pdfexceptions import ContentStreamError
from pdfvector.pdffont import PDFFontSpec
from pdfvector.pdfinterp import PDFResourceManager

logging.basicConfig()

OUTPUT_TYPES = ("svg", "json")


class FlateContentStream(ContentStream):
    """A content stream stored with /FlateDecode."""

    def get_data(self) -> bytes:
        data = super().get_data()
        try:
            return zlib.decompress(data)
        except zlib.error as e:
            raise ContentStreamError(self.name, e) from e


def crop_box(value: str) -> tuple[float, float, float, float]:
    try:
        (x, y, w, h) = (float(v) for v in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected x,y,width,height but got {value!r}"
        ) from None
    return x, y, w, h


def tounicode(value: str) -> tuple[str, str]:
    (name, sep, path) = value.partition("=")
    if not sep or not name or not path:
        raise argparse.ArgumentTypeError(f"expected NAME=FILE but got {value!r}")
    return name, path


def load_fonts(
    specs: Sequence[tuple[str, str]],
    compressed: bool,
) -> dict[str, PDFFontSpec]:
    fonts = {}
    filters = ("FlateDecode",) if compressed else ()
    for name, path in specs:
        with open(path, "rb") as fp:
            fonts[name] = PDFFontSpec(
                name, subtype="Type0", to_unicode=fp.read(), filters=filters
            )
    return fonts


def write_svg(
    outfp: TextIO,
    result: ExtractionResult,
    params: ConverterParams,
) -> None:
    converted = convert_content(result, params)
    if converted.bounds is not None:
        viewbox = converted.bounds.viewbox()
    else:
        viewbox = f"0 0 {params.svg_width} {params.svg_height}"
    outfp.write(
        '<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{params.svg_width}" height="{params.svg_height}" '
        f'viewBox="{viewbox}">\n'
    )
    outfp.write('<g id="path-elements">\n')
    for element in converted.path_elements:
        outfp.write(element + "\n")
    outfp.write("</g>\n")
    outfp.write('<g id="text-elements">\n')
    for element in converted.text_elements:
        outfp.write(element + "\n")
    outfp.write("</g>\n")
    outfp.write("</svg>\n")


def write_json(outfp: TextIO, result: ExtractionResult) -> None:
    report: dict[str, Any] = {
        "statistics": path_statistics(result.paths),
        "pages": {
            str(page): len(paths) for (page, paths) in result.paths_by_page().items()
        },
        "text": [
            {
                "text": run.text,
                "x": run.x,
                "y": run.y,
                "font": run.font,
                "fontsize": run.fontsize,
                "page": run.page,
            }
            for run in result.text_runs
        ],
        "errors": [str(e) for e in result.errors],
    }
    json.dump(report, outfp, indent=2)
    outfp.write("\n")


def maketheparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, add_help=True)
    parser.add_argument(
        "files",
        type=str,
        default=None,
        nargs="+",
        help="One or more files with decoded content streams, one per page.",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"pdfvector v{pdfvector.__version__}",
    )
    parser.add_argument(
        "--debug",
        "-d",
        default=False,
        action="store_true",
        help="Use debug logging level.",
    )
    parser.add_argument(
        "--strict",
        default=False,
        action="store_true",
        help="Raise errors on unknown operators and broken CMaps.",
    )
    parser.add_argument(
        "--disable-caching",
        "-C",
        default=False,
        action="store_true",
        help="If caching of parsed ToUnicode maps should be disabled.",
    )

    parse_params = parser.add_argument_group(
        "Parser", description="Used during content stream parsing."
    )
    parse_params.add_argument(
        "--inflate",
        default=False,
        action="store_true",
        help="The content stream files are FlateDecode compressed.",
    )
    parse_params.add_argument(
        "--tounicode",
        type=tounicode,
        action="append",
        default=[],
        metavar="NAME=FILE",
        help="ToUnicode CMap for the font resource NAME. Can be repeated.",
    )
    parse_params.add_argument(
        "--compressed-cmaps",
        default=False,
        action="store_true",
        help="The ToUnicode CMap files are FlateDecode compressed.",
    )

    conv_params = parser.add_argument_group(
        "Conversion", description="Used to map PDF points to pixels."
    )
    conv_params.add_argument(
        "--pdf-width", type=float, default=612, help="Width of the page box."
    )
    conv_params.add_argument(
        "--pdf-height", type=float, default=792, help="Height of the page box."
    )
    conv_params.add_argument(
        "--svg-width",
        type=float,
        default=None,
        help="Width of the drawing. Defaults to the page width.",
    )
    conv_params.add_argument(
        "--svg-height",
        type=float,
        default=None,
        help="Height of the drawing. Defaults to the page height.",
    )
    conv_params.add_argument(
        "--crop-box",
        type=crop_box,
        default=None,
        metavar="X,Y,W,H",
        help="Region of the page to map onto the drawing.",
    )
    conv_params.add_argument(
        "--precision",
        type=int,
        default=3,
        help="Number of decimals for coordinates.",
    )
    conv_params.add_argument(
        "--no-flip-y",
        dest="flip_y",
        default=True,
        action="store_false",
        help="Keep the PDF bottom-left origin.",
    )
    conv_params.add_argument(
        "--no-transform",
        dest="apply_transform",
        default=True,
        action="store_false",
        help="Do not apply the transformation matrix recorded with each path.",
    )

    output_params = parser.add_argument_group(
        "Output", description="Used during output generation."
    )
    output_params.add_argument(
        "--outfile",
        "-o",
        type=str,
        default="-",
        help='Path to file where output is written. Or "-" (default) to '
        "write to stdout.",
    )
    output_params.add_argument(
        "--output_type",
        "-t",
        type=str,
        default="svg",
        choices=OUTPUT_TYPES,
        help="Type of output to generate.",
    )
    return parser


def main(args: list[str] | None = None) -> int:
    parser = maketheparser()
    A = parser.parse_args(args=args)

    if A.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    pdfvector.settings.STRICT = A.strict

    params = ConverterParams(
        pdf_width=A.pdf_width,
        pdf_height=A.pdf_height,
        svg_width=A.svg_width,
        svg_height=A.svg_height,
        crop_box=A.crop_box,
        precision=A.precision,
        flip_y=A.flip_y,
        apply_transform=A.apply_transform,
    )
    fonts = load_fonts(A.tounicode, A.compressed_cmaps)
    stream_class = FlateContentStream if A.inflate else ContentStream
    streams = [
        stream_class(fname, fonts=fonts, page=page, name=fname)
        for (page, fname) in enumerate(A.files)
    ]
    rsrcmgr = PDFResourceManager(caching=not A.disable_caching)
    result = extract_streams(streams, rsrcmgr)

    if A.outfile == "-":
        outfp: TextIO = sys.stdout
        close = False
    else:
        outfp = open(A.outfile, "w", encoding="utf-8")
        close = True
    try:
        if A.output_type == "json":
            write_json(outfp, result)
        else:
            write_svg(outfp, result, params)
    finally:
        if close:
            outfp.close()

    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
