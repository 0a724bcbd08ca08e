import zlib

from pdfvector.pdfinterp import PDFContent, PDFContentInterpreter

TOUNICODE_CMAP = b"""/CIDInit /ProcSet findresource begin
12 dict begin
begincmap
/CIDSystemInfo << /Registry (Adobe) /Ordering (UCS) /Supplement 0 >> def
/CMapName /Adobe-Identity-UCS def
/CMapType 2 def
1 begincodespacerange
<0000> <FFFF>
endcodespacerange
2 beginbfchar
<0003> <0020>
<0024> <0041>
endbfchar
1 beginbfrange
<0041> <0043> <0061>
endbfrange
endcmap
CMapName currentdict /CMap defineresource pop
end
end
"""

SQUARE = b"1 0 0 RG 10 10 m 50 10 l 50 50 l 10 50 l h S"


def interpret(data, fonts=None, **kwargs) -> PDFContent:
    return PDFContentInterpreter(fonts, **kwargs).process(data)


def compress(data: bytes) -> bytes:
    return zlib.compress(data)
