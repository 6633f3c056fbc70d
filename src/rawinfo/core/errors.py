"""
Error taxonomy for rawinfo.

Validation failures, bad source state and unrecoverable processing errors
are exceptions that travel up to the command dispatcher. Selecting an
instrument is different: a missing device is an expected outcome, so the
selection boundary returns a tagged result instead of raising.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .metadata import InstrumentData, RunHeader


class RawInfoError(Exception):
    """Base class for all rawinfo errors."""


class ValidationError(RawInfoError):
    """Command-line input is missing or malformed."""


class SourceOpenError(RawInfoError):
    """The data file could not be opened by any source."""


class UnsupportedFormatError(SourceOpenError):
    """No source is registered for the file's format."""


class SourceStateError(RawInfoError):
    """An opened source is closed, reports an error, or is still acquiring."""


class AbsentDeviceError(RawInfoError):
    """No device of the requested type exists at an instrument index."""

    def __init__(self, device: str, index: int, message: Optional[str] = None):
        self.device = device
        self.index = index
        super().__init__(message or f"No {device} device at index {index}")


class UnrecoverableProcessingError(RawInfoError):
    """Reading instrument or scan data failed; the report is aborted."""


@dataclass(frozen=True)
class InstrumentSelected:
    """The instrument at ``index`` was selected and its headers read."""
    index: int
    data: InstrumentData
    run_header: RunHeader


@dataclass(frozen=True)
class DeviceAbsent:
    """Recoverable: nothing of the requested type lives at ``index``."""
    index: int
    reason: str


@dataclass(frozen=True)
class SelectionFailed:
    """Fatal: selecting ``index`` failed for any other reason."""
    index: int
    reason: str
    cause: Optional[BaseException] = None


SelectionResult = Union[InstrumentSelected, DeviceAbsent, SelectionFailed]
