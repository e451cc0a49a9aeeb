"""
Text fragment sources for table reconstruction.

Provides:
- TextFragment data class (a positioned run of text)
- FragmentSource interface (page count + per-page fragments)
- PDF text layer extraction via pdfminer.six
- In-memory and JSON-file sources for already extracted text layers

All sources use a bottom-left origin: larger y means higher on the page.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .errors import FragmentFormatError

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class TextFragment:
    """A positioned run of text on one page."""
    x: float
    y: float
    width: float
    text: str
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextFragment":
        """
        Build a fragment from a plain dict.

        Accepts ``{x, y, width, text}`` as well as pdf.js text items
        (``{transform: [a, b, c, d, e, f], str, width}``), where the
        position is the translation part of the transform.

        Raises:
            FragmentFormatError: If required keys are missing or not numeric
        """
        if not isinstance(data, dict):
            raise FragmentFormatError(f"Fragment must be an object, got {type(data).__name__}")

        try:
            if "transform" in data:
                transform = data["transform"]
                x, y = transform[4], transform[5]
                text = data.get("str", data.get("text", ""))
            else:
                x, y = data["x"], data["y"]
                text = data.get("text", "")
            width = data.get("width", 0.0)
            height = data.get("height", 0.0)
            return cls(
                x=float(x),
                y=float(y),
                width=float(width),
                text=str(text),
                height=float(height),
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise FragmentFormatError(f"Invalid fragment {data!r}: {e}") from e


def coerce_fragments(items: Iterable[Any]) -> List[TextFragment]:
    """Convert a page's items (fragments or dicts) to TextFragments."""
    fragments = []
    for item in items:
        if isinstance(item, TextFragment):
            fragments.append(item)
        else:
            fragments.append(TextFragment.from_dict(item))
    return fragments


# ============================================================================
# Fragment Source Interface
# ============================================================================

class FragmentSource:
    """
    Base class for per-page fragment providers.

    Subclasses implement ``page_count`` and ``page_fragments``. A failure
    in ``page_fragments`` affects only that page; a failure in the
    constructor or ``page_count`` means the document cannot be read.
    """

    name: str = "source"

    def page_count(self) -> int:
        raise NotImplementedError

    def page_fragments(self, index: int) -> List[TextFragment]:
        """Return the fragments of the page at 0-based ``index``."""
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class MemoryFragmentSource(FragmentSource):
    """Fragment source over pages that are already in memory."""

    name = "memory"

    def __init__(self, pages: Sequence[Iterable[Any]]):
        self._pages = [coerce_fragments(page) for page in pages]

    def page_count(self) -> int:
        return len(self._pages)

    def page_fragments(self, index: int) -> List[TextFragment]:
        return list(self._pages[index])


class JsonFragmentSource(MemoryFragmentSource):
    """
    Fragment source backed by a JSON file.

    The file holds either ``{"pages": [[fragment, ...], ...]}`` or a bare
    list of pages. Each fragment uses the ``TextFragment.from_dict`` format.
    """

    name = "json"

    def __init__(self, json_path: Union[str, Path]):
        from .io import load_json

        self.json_path = Path(json_path)
        data = load_json(self.json_path)

        if isinstance(data, dict):
            pages = data.get("pages")
        else:
            pages = data

        if not isinstance(pages, list) or not all(isinstance(p, list) for p in pages):
            raise FragmentFormatError(
                f"{self.json_path}: expected a list of pages, each a list of fragments"
            )

        super().__init__(pages)
        logger.info(f"Loaded {len(pages)} page(s) of fragments from {self.json_path}")


# ============================================================================
# PDF Text Layer Source (pdfminer.six)
# ============================================================================

class PdfFragmentSource(FragmentSource):
    """
    Reads text fragments from a PDF's text layer using pdfminer.six.

    The document and its page tree are parsed up front; each page is laid
    out on demand. Use as a context manager to release the file handle.
    """

    name = "pdf"

    def __init__(
        self,
        pdf_path: Union[str, Path],
        fragment_mode: str = "word",
        char_margin: float = 2.0,
        word_margin: float = 0.1,
        line_margin: float = 0.5,
        password: str = ""
    ):
        from pdfminer.converter import PDFPageAggregator
        from pdfminer.layout import LAParams
        from pdfminer.pdfdocument import PDFDocument
        from pdfminer.pdfinterp import PDFPageInterpreter, PDFResourceManager
        from pdfminer.pdfpage import PDFPage
        from pdfminer.pdfparser import PDFParser

        if fragment_mode not in ("word", "line"):
            raise ValueError(f"Unknown fragment mode: {fragment_mode}")

        self.pdf_path = Path(pdf_path)
        if not self.pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {self.pdf_path}")

        self.fragment_mode = fragment_mode
        self._file = open(self.pdf_path, 'rb')
        try:
            parser = PDFParser(self._file)
            document = PDFDocument(parser, password)
            self._pages = list(PDFPage.create_pages(document))
        except Exception:
            self._file.close()
            raise

        laparams = LAParams(
            char_margin=char_margin,
            word_margin=word_margin,
            line_margin=line_margin,
        )
        rsrcmgr = PDFResourceManager()
        self._device = PDFPageAggregator(rsrcmgr, laparams=laparams)
        self._interpreter = PDFPageInterpreter(rsrcmgr, self._device)

        logger.info(f"Opened PDF {self.pdf_path} ({len(self._pages)} pages)")

    @classmethod
    def from_config(cls, pdf_path: Union[str, Path], config: Any) -> "PdfFragmentSource":
        """Create a source from a ``SourceConfig``."""
        return cls(
            pdf_path,
            fragment_mode=config.fragment_mode,
            char_margin=config.char_margin,
            word_margin=config.word_margin,
            line_margin=config.line_margin,
        )

    def page_count(self) -> int:
        return len(self._pages)

    def page_fragments(self, index: int) -> List[TextFragment]:
        from pdfminer.layout import LTTextLine

        self._interpreter.process_page(self._pages[index])
        layout = self._device.get_result()

        fragments = []
        for line in _find_elements_by_type(layout, LTTextLine):
            if self.fragment_mode == "line":
                fragment = _line_fragment(line)
                if fragment is not None:
                    fragments.append(fragment)
            else:
                fragments.extend(_word_fragments(line))

        logger.debug(f"Page {index + 1}: {len(fragments)} fragments")
        return fragments

    def close(self):
        if not self._file.closed:
            self._file.close()


def _find_elements_by_type(container: Any, element_type: type) -> List[Any]:
    """Recursively collect layout elements of a given type."""
    found = []
    for element in container:
        if isinstance(element, element_type):
            found.append(element)
        elif hasattr(element, '__iter__'):
            found.extend(_find_elements_by_type(element, element_type))
    return found


def _line_fragment(line: Any) -> Optional[TextFragment]:
    text = line.get_text().rstrip("\n")
    if not text:
        return None
    return TextFragment(
        x=float(line.x0),
        y=float(line.y0),
        width=float(line.width),
        text=text,
        height=float(line.height),
    )


def _word_fragments(line: Any) -> List[TextFragment]:
    """Split a text line into words at whitespace glyphs and virtual spaces."""
    from pdfminer.layout import LTChar

    words = []
    current: List[Any] = []

    def flush():
        if current:
            first, last = current[0], current[-1]
            words.append(TextFragment(
                x=float(first.x0),
                y=float(min(c.y0 for c in current)),
                width=float(last.x1 - first.x0),
                text="".join(c.get_text() for c in current),
                height=float(max(c.y1 for c in current) - min(c.y0 for c in current)),
            ))
            current.clear()

    for item in line:
        if isinstance(item, LTChar) and not item.get_text().isspace():
            current.append(item)
        else:
            flush()
    flush()

    return words
