"""
Exceptions raised by the table reconstruction pipeline.
"""

NO_TABULAR_TEXT_MESSAGE = (
    "No text or tables found in this PDF. It might be a scanned image."
)


class TableGridError(Exception):
    """Base class for pipeline errors."""


class NoTabularTextError(TableGridError):
    """Raised when no page of a document produced a single row.

    Usually the source has no extractable text layer (a scanned image),
    so callers should suggest running OCR first.
    """

    def __init__(self, message: str = NO_TABULAR_TEXT_MESSAGE, pages_processed: int = 0):
        super().__init__(message)
        self.pages_processed = pages_processed


class FragmentFormatError(TableGridError, ValueError):
    """Raised when fragment data cannot be interpreted."""
