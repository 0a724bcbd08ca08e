import pytest

from pdfvector.converter import Bounds, ConverterParams, SVGPathConverter
from pdfvector.pdfinterp import TextRun
from pdfvector.pdfpath import (
    CubicSegment,
    LineSegment,
    PathStyle,
    PDFPath,
    QuadraticSegment,
)
from pdfvector.utils import MATRIX_IDENTITY
from tests.helpers import SQUARE, interpret

SQUARE_D = "M 10.000 782.000 L 50.000 782.000 L 50.000 742.000 L 10.000 742.000 Z"


def square_path():
    (paths, _) = interpret(SQUARE)
    return paths[0]


def text_run(text="Hi", x=100, y=700, ctm=MATRIX_IDENTITY):
    return TextRun(text, x, y, "/F1", 12, "#000000", ctm)


class TestConverterParams:
    def test_defaults(self):
        params = ConverterParams()
        assert (params.pdf_width, params.pdf_height) == (612, 792)
        assert (params.svg_width, params.svg_height) == (612, 792)
        assert params.crop_box is None
        assert params.precision == 3
        assert params.flip_y
        assert params.apply_transform

    def test_effective_size_uses_crop_box(self):
        params = ConverterParams(crop_box=(100, 100, 200, 300))
        assert params.effective_width == 200
        assert params.effective_height == 300

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"crop_box": (0, 0, 0, 10)},
            {"crop_box": (0, 0, 10)},
            {"pdf_width": 0},
            {"pdf_height": -5},
            {"precision": -1},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ConverterParams(**kwargs)


class TestTransformPoint:
    def test_flip(self):
        converter = SVGPathConverter()
        assert converter.transform_point((10, 10)) == (10, 782)

    def test_without_flip(self):
        converter = SVGPathConverter(ConverterParams(flip_y=False))
        assert converter.transform_point((10, 10)) == (10, 10)

    def test_scale(self):
        converter = SVGPathConverter(ConverterParams(svg_width=306, svg_height=396))
        assert (converter.scale_x, converter.scale_y) == (0.5, 0.5)
        assert converter.transform_point((10, 10)) == (5, 391)

    def test_crop_box(self):
        params = ConverterParams(
            svg_width=400, svg_height=400, crop_box=(100, 100, 200, 200)
        )
        converter = SVGPathConverter(params)
        assert converter.transform_point((150, 250)) == (100, 100)
        assert converter.transform_point((100, 300)) == (0, 0)

    def test_ctm_is_applied_first(self):
        converter = SVGPathConverter()
        assert converter.transform_point((1, 1), (2, 0, 0, 2, 10, 20)) == (12, 770)

    def test_ctm_can_be_skipped(self):
        converter = SVGPathConverter(ConverterParams(apply_transform=False))
        assert converter.transform_point((1, 1), (2, 0, 0, 2, 10, 20)) == (1, 791)

    def test_update_params(self):
        converter = SVGPathConverter()
        converter.update_params(svg_width=306, flip_y=False)
        assert converter.scale_x == 0.5
        assert converter.scale_y == 1
        assert converter.transform_point((10, 10)) == (5, 10)
        assert converter.params.pdf_height == 792

    def test_update_params_rejects_unknown_names(self):
        converter = SVGPathConverter()
        with pytest.raises(TypeError):
            converter.update_params(dpi=72)


class TestPathData:
    def test_square(self):
        converter = SVGPathConverter()
        svg_path = converter.convert_path(square_path())
        assert svg_path.d == SQUARE_D
        assert svg_path.operation == "stroke"

    def test_curves(self):
        converter = SVGPathConverter(ConverterParams(flip_y=False, precision=1))
        assert (
            converter.convert_segment(CubicSegment((1, 2), (3, 4), (5, 6)), None)
            == "C 1.0 2.0 3.0 4.0 5.0 6.0"
        )
        assert (
            converter.convert_segment(QuadraticSegment((1, 2), (3, 4)), None)
            == "Q 1.0 2.0 3.0 4.0"
        )

    def test_unknown_segment(self):
        with pytest.raises(TypeError):
            SVGPathConverter().convert_segment(((1, 2),), None)

    def test_open_and_closed_subpaths(self):
        path = PDFPath()
        path.move_to((0, 0))
        path.append(LineSegment((1, 0)))
        path.rect(5, 5, 1, 1)
        converter = SVGPathConverter(ConverterParams(flip_y=False, precision=0))
        assert converter.build_path_data(path.subpaths) == (
            "M 0 0 L 1 0 M 5 5 L 6 5 L 6 6 L 5 6 Z"
        )

    def test_negative_zero_is_normalized(self):
        converter = SVGPathConverter(ConverterParams(flip_y=False, precision=2))
        path = PDFPath()
        path.move_to((-0.001, -0.0))
        assert converter.build_path_data(path.subpaths) == "M 0.00 0.00"

    def test_empty_path_is_skipped(self):
        converter = SVGPathConverter()
        assert converter.convert_path(PDFPath()) is None
        assert converter.convert_paths([PDFPath(), square_path()])[0].d == SQUARE_D


class TestStyle:
    def test_stroke(self):
        converter = SVGPathConverter()
        assert converter.build_style(square_path().style, "stroke") == {
            "fill": "none",
            "stroke": "#ff0000",
            "stroke-width": 1.0,
            "stroke-linecap": "butt",
            "stroke-linejoin": "miter",
        }

    def test_fill(self):
        converter = SVGPathConverter()
        style = PathStyle(fill="#00ff00", fill_rule="evenodd")
        assert converter.build_style(style, "fill") == {
            "fill": "#00ff00",
            "fill-rule": "evenodd",
        }

    def test_fill_stroke_with_dashes(self):
        (paths, _) = interpret(b"0 0 1 rg 2 w [3 1] 0 d 0 0 10 10 re B")
        converter = SVGPathConverter()
        assert converter.build_style(paths[0].style, "fill-stroke") == {
            "fill": "#0000ff",
            "fill-rule": "nonzero",
            "stroke": "#000000",
            "stroke-width": 2.0,
            "stroke-linecap": "butt",
            "stroke-linejoin": "miter",
            "stroke-dasharray": "3 1",
        }

    def test_stroke_width_uses_smaller_scale(self):
        converter = SVGPathConverter(ConverterParams(svg_width=1224, svg_height=396))
        style = converter.build_style(PathStyle(stroke_width=4.0), "stroke")
        assert style["stroke-width"] == 2.0

    def test_missing_style_gets_defaults(self):
        converter = SVGPathConverter()
        assert converter.build_style(None, "fill") == {"fill": "#000000"}
        assert converter.build_style(None, None) == {"fill": "none"}

    def test_style_to_attributes(self):
        converter = SVGPathConverter()
        attrs = converter.style_to_attributes(
            {"fill": "none", "stroke-width": 1.5, "stroke-dasharray": None}
        )
        assert attrs == 'fill="none" stroke-width="1.5"'


class TestElements:
    def test_path_element(self):
        converter = SVGPathConverter()
        svg_path = converter.convert_path(square_path())
        assert converter.generate_path_element(
            svg_path, "path-0", "operation-stroke"
        ) == (
            f'<path id="path-0" class="operation-stroke" d="{SQUARE_D}" '
            'fill="none" stroke="#ff0000" stroke-width="1" '
            'stroke-linecap="butt" stroke-linejoin="miter"/>'
        )

    def test_path_element_without_id(self):
        converter = SVGPathConverter()
        (paths, _) = interpret(b"0 0 1 1 re f")
        element = converter.generate_path_element(converter.convert_path(paths[0]))
        assert element.startswith('<path d="M ')
        assert element.endswith('fill="#000000" fill-rule="nonzero"/>')

    def test_text_element(self):
        converter = SVGPathConverter()
        svg_text = converter.convert_text_run(text_run())
        assert (svg_text.x, svg_text.y) == (100, 92)
        assert converter.generate_text_element(svg_text, "text-0") == (
            '<text id="text-0" x="100.000" y="92.000" font-size="12" '
            'fill="#000000" class="pdf-text" data-font="/F1">Hi</text>'
        )

    def test_text_is_escaped(self):
        converter = SVGPathConverter()
        svg_text = converter.convert_text_run(text_run("<a&b>"))
        element = converter.generate_text_element(svg_text, class_name=None)
        assert element.endswith(">&lt;a&amp;b&gt;</text>")
        assert "class=" not in element

    def test_text_follows_ctm_and_scale(self):
        converter = SVGPathConverter(ConverterParams(svg_width=306, svg_height=396))
        svg_text = converter.convert_text_run(
            text_run(x=10, y=10, ctm=(1, 0, 0, 1, 0, 100))
        )
        assert (svg_text.x, svg_text.y) == (5, 341)
        assert svg_text.font_size == 6


class TestBounds:
    def test_viewbox(self):
        assert Bounds(0, 0, 100, 50).viewbox() == "-5.00 -5.00 110.00 60.00"
        assert Bounds(10, 20, 30, 40).viewbox(0) == "10.00 20.00 30.00 40.00"

    def test_untransformed_bounds(self):
        converter = SVGPathConverter()
        assert converter.calculate_bounds([square_path()]) == Bounds(10, 10, 40, 40)
        assert converter.calculate_bounds([]) is None

    def test_transformed_bounds(self):
        converter = SVGPathConverter()
        assert converter.calculate_transformed_bounds([square_path()]) == Bounds(
            10, 742, 40, 40
        )
        assert converter.calculate_transformed_bounds(
            [square_path()], [text_run()]
        ) == Bounds(10, 92, 90, 690)
        assert converter.calculate_transformed_bounds([], []) is None


def test_identity_configuration_keeps_points():
    converter = SVGPathConverter(ConverterParams(flip_y=False, apply_transform=False))
    assert converter.transform_point((12.5, -3), (2, 0, 0, 2, 1, 1)) == (12.5, -3)


def test_conversion_is_repeatable():
    (paths, runs) = interpret(SQUARE + b" 0 0 1 rg 5 5 20 10 re f BT (x) Tj ET")
    converter = SVGPathConverter(ConverterParams(svg_width=300, svg_height=400))

    def serialize():
        elements = [
            converter.generate_path_element(p) for p in converter.convert_paths(paths)
        ]
        elements += [
            converter.generate_text_element(t) for t in converter.convert_text_runs(runs)
        ]
        return "\n".join(elements)

    assert serialize() == serialize()
