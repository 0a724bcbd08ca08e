import logging
from collections.abc import Mapping
from typing import Any

from pdfvector.cmapdb import ToUnicodeMap
from pdfvector.psparser import decode_string_token
from pdfvector.utils import make_compat_str

log = logging.getLogger(__name__)


def font_key(name: object) -> str:
    """Normalizes a font resource name, ``/F1`` and ``F1`` alike."""
    return make_compat_str(name).lstrip("/")


class PDFFontSpec:
    """One entry of a page's /Font resource dictionary.

    ``to_unicode`` holds the raw bytes of the ToUnicode stream as stored in
    the document and ``filters`` the names of its /Filter entry; the stream
    is inflated when the CMap is first needed.
    """

    def __init__(
        self,
        name: object,
        subtype: str | None = None,
        to_unicode: bytes | None = None,
        filters: tuple[str, ...] = (),
    ) -> None:
        self.name = font_key(name)
        self.subtype = subtype.lstrip("/") if subtype else None
        self.to_unicode = to_unicode
        self.filters = tuple(filters)

    def __repr__(self) -> str:
        return (
            f"<PDFFontSpec: name={self.name!r}, subtype={self.subtype!r}, "
            f"to_unicode={self.has_to_unicode()!r}, filters={self.filters!r}>"
        )

    def has_to_unicode(self) -> bool:
        return self.to_unicode is not None

    @classmethod
    def from_dict(cls, name: object, spec: Mapping[str, Any]) -> "PDFFontSpec":
        """Builds a spec from a plain font dictionary.

        ``ToUnicode`` may be the stream bytes or a mapping with ``data`` and
        ``Filter`` keys.
        """
        subtype = spec.get("Subtype")
        to_unicode = spec.get("ToUnicode")
        filters: Any = spec.get("Filter", ())
        if isinstance(to_unicode, Mapping):
            filters = to_unicode.get("Filter", filters)
            to_unicode = to_unicode.get("data")
        if isinstance(filters, str):
            filters = (filters,)
        return cls(
            name,
            subtype=make_compat_str(subtype) if subtype is not None else None,
            to_unicode=to_unicode,
            filters=tuple(make_compat_str(f) for f in filters),
        )


def make_fontmap(fonts: Mapping[Any, Any] | None) -> dict[str, PDFFontSpec]:
    """Indexes font specs (or plain font dictionaries) by normalized name."""
    fontmap: dict[str, PDFFontSpec] = {}
    if not fonts:
        return fontmap
    for name, spec in fonts.items():
        if not isinstance(spec, PDFFontSpec):
            spec = PDFFontSpec.from_dict(name, spec)
        fontmap[font_key(name)] = spec
    return fontmap


def decode_text(data: bytes, cmap: ToUnicodeMap | None) -> str:
    if cmap is None:
        return data.decode("latin-1")
    return cmap.decode(data)


def decode_string_operand(lexeme: str, cmap: ToUnicodeMap | None) -> str | None:
    """Turns a string operand into text, or None if it is not a string."""
    data = decode_string_token(lexeme)
    if data is None:
        return None
    return decode_text(data, cmap)
