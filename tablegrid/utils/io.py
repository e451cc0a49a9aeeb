"""
I/O utilities for the table reconstruction pipeline.

Handles:
- Input type detection and fragment source creation
- JSON serialization
- Directory management
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


# ============================================================================
# JSON Serialization
# ============================================================================

class EnhancedJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles dataclasses and paths."""

    def default(self, obj):
        if hasattr(obj, '__dataclass_fields__'):
            return asdict(obj)
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def save_json(
    data: Any,
    output_path: Union[str, Path],
    indent: int = 2,
    ensure_ascii: bool = False
) -> Path:
    """
    Save data to a JSON file.

    Args:
        data: Data to serialize (dict, list, dataclass, etc.)
        output_path: Path to save the JSON file
        indent: Indentation level for pretty printing
        ensure_ascii: If True, escape non-ASCII characters

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii, cls=EnhancedJSONEncoder)

    logger.debug(f"Saved JSON: {output_path}")
    return output_path


def load_json(json_path: Union[str, Path]) -> Any:
    """
    Load data from a JSON file.

    Args:
        json_path: Path to the JSON file

    Returns:
        Parsed JSON data

    Raises:
        FileNotFoundError: If the file doesn't exist
        FragmentFormatError: If the file is not valid JSON
    """
    from .errors import FragmentFormatError

    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"JSON file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise FragmentFormatError(f"{json_path} is not valid JSON: {e}") from e


# ============================================================================
# Directory Management
# ============================================================================

def ensure_dir(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory

    Returns:
        Path object for the directory
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


# ============================================================================
# File Type Detection
# ============================================================================

def detect_input_type(input_path: Union[str, Path]) -> str:
    """
    Detect the type of input file.

    Args:
        input_path: Path to file

    Returns:
        One of: 'pdf', 'json', 'unknown'
    """
    input_path = Path(input_path)

    if not input_path.is_file():
        return 'unknown'

    suffix = input_path.suffix.lower()
    if suffix == '.pdf':
        return 'pdf'
    elif suffix == '.json':
        return 'json'

    # Fall back to the PDF magic number for files without an extension
    with open(input_path, 'rb') as f:
        if f.read(5) == b'%PDF-':
            return 'pdf'

    return 'unknown'


def open_source(input_path: Union[str, Path], source_config: Optional[Any] = None):
    """
    Open a fragment source for a PDF or fragment JSON file.

    Args:
        input_path: Path to the input file
        source_config: Optional SourceConfig for PDF extraction

    Returns:
        A FragmentSource (use it as a context manager)

    Raises:
        FileNotFoundError: If the input doesn't exist
        ValueError: If the input type is not supported
    """
    from ..config import SourceConfig
    from .fragments import JsonFragmentSource, PdfFragmentSource

    input_path = Path(input_path)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    input_type = detect_input_type(input_path)
    logger.info(f"Input type detected: {input_type}")

    if input_type == 'pdf':
        return PdfFragmentSource.from_config(input_path, source_config or SourceConfig())
    if input_type == 'json':
        return JsonFragmentSource(input_path)

    raise ValueError(f"Unsupported input type: {input_path}")
