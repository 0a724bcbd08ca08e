from pdfvector.psexceptions import PSException


class PDFException(PSException):
    pass


class PDFTypeError(PDFException, TypeError):
    pass


class PDFIOError(PDFException, IOError):
    pass


class PDFInterpreterError(PDFException):
    pass


class CMapError(PDFException):
    pass


class ContentStreamError(PDFIOError):
    """The bytes of a content stream could not be read."""

    def __init__(self, name: object, reason: object) -> None:
        super().__init__(f"Cannot read content stream {name!r}: {reason}")
        self.name = name
        self.reason = reason
