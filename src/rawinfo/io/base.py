from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from ..core import (
    Device,
    FileHeader,
    InstrumentData,
    RunHeader,
    SampleInformation,
    ScanEvent,
    ScanFilter,
    TrailerField,
    TrailerHeaderField,
)

class RawSource(ABC):
    """
    Abstract base class for raw data sources.

    A source wraps an external file-reading library. It is opened once per
    command, queried read-only, and closed exactly once. Scan-level queries
    apply to the instrument chosen with ``select_instrument``.

    All vendor-specific sources must implement this interface.
    """

    # Class-level attributes
    vendor: ClassVar[str]  # e.g., "Thermo", "Open Format"
    supported_extensions: ClassVar[list[str]]  # e.g., [".raw"]

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """
        Check if this source's dependencies are available.

        Returns False if required libraries are not installed.
        """
        ...

    @classmethod
    def get_installation_instructions(cls) -> str:
        """Return instructions for installing this source's dependencies."""
        return "See documentation for installation instructions."

    @abstractmethod
    def open(self) -> None:
        """Acquire the underlying file handle."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying file handle."""
        ...

    def __enter__(self) -> 'RawSource':
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Source state

    @property
    def file_name(self) -> str:
        return str(self.path)

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    @property
    @abstractmethod
    def has_error(self) -> bool:
        ...

    @property
    def file_error(self) -> str:
        """Description of the error reported by ``has_error``."""
        return ""

    @property
    @abstractmethod
    def in_acquisition(self) -> bool:
        """True while the instrument is still writing the file."""
        ...

    # Instruments

    @property
    @abstractmethod
    def instrument_count(self) -> int:
        """Number of devices of any type."""
        ...

    @abstractmethod
    def instrument_count_of_type(self, device: Device) -> int:
        ...

    @abstractmethod
    def select_instrument(self, device: Device, index: int) -> None:
        """
        Make the instrument ``index`` of type ``device`` current.

        Raises:
            AbsentDeviceError: If no such device exists at that index.
        """
        ...

    @abstractmethod
    def instrument_data(self) -> InstrumentData:
        ...

    @abstractmethod
    def run_header(self) -> RunHeader:
        ...

    def instrument_method_names(self) -> list[str]:
        """Device names from the instrument method, if the source can read it."""
        return []

    # File-level metadata

    @abstractmethod
    def file_header(self) -> FileHeader:
        ...

    @abstractmethod
    def sample_information(self) -> SampleInformation:
        ...

    # Scans of the current instrument

    def has_scan(self, scan_number: int) -> bool:
        """False for scan numbers inside the run bounds that hold no scan."""
        return True

    @abstractmethod
    def scan_filter(self, scan_number: int) -> ScanFilter:
        ...

    @abstractmethod
    def retention_time(self, scan_number: int) -> float:
        """Retention time of a scan in minutes."""
        ...

    @abstractmethod
    def scan_event(self, scan_number: int) -> ScanEvent:
        ...

    @abstractmethod
    def trailer_fields(self, scan_number: int) -> list[TrailerField]:
        """Trailer extra label/value pairs of a scan, in stored order."""
        ...

    def trailer_header(self) -> list[TrailerHeaderField]:
        """Trailer extra fields declared by the file."""
        return []
