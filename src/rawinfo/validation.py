"""
Input validation for rawinfo commands.

Command options are checked before any file is opened; an opened source is
checked before any report reads from it. Both raise, and neither touches
anything beyond the file system check in :func:`validate_file`.
"""

from pathlib import Path
from typing import Optional

from .config import InfoOptions, IsolationOptions
from .core.errors import SourceStateError, ValidationError
from .core.scan_range import validate_scan_range
from .io.base import RawSource


def validate_file(file: Optional[str]) -> Path:
    """
    Check that ``file`` names an existing file.

    Readability and format are not checked here.

    Raises:
        ValidationError: If the path is empty or nothing exists there.
    """
    if file is None or not file.strip():
        raise ValidationError("File can't be an empty string.")
    path = Path(file)
    if not path.is_file():
        raise ValidationError(f"File doesn't exist: '{file}'")
    return path


def validate_info_options(options: InfoOptions) -> None:
    validate_file(options.file)


def validate_isolation_options(options: IsolationOptions) -> None:
    validate_file(options.file)
    validate_scan_range(options.scan_numbers)


def validate_opened_source(source: RawSource) -> None:
    """
    Check that an opened source can be read.

    Raises:
        SourceStateError: If the source is not open, reports an error, or
            its file is still being acquired.
    """
    filename = source.file_name
    if not source.is_open:
        raise SourceStateError(
            f"Unable to access the RAW file using the RawFileReader class! ('{filename}')"
        )
    if source.has_error:
        raise SourceStateError(f"Error opening ({source.file_error}) - {filename}")
    if source.in_acquisition:
        raise SourceStateError(f"RAW file still being acquired: '{filename}'")


__all__ = [
    "validate_file",
    "validate_info_options",
    "validate_isolation_options",
    "validate_opened_source",
    "validate_scan_range",
]
