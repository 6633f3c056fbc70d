from pathlib import Path
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from ..core.errors import SourceOpenError, UnsupportedFormatError

if TYPE_CHECKING:
    from .base import RawSource

class Vendor(Enum):
    THERMO = auto()
    OPEN_FORMAT = auto()  # mzML
    UNKNOWN = auto()

# Extension to vendor mapping
VENDOR_EXTENSIONS: dict[str, Vendor] = {
    '.raw': Vendor.THERMO,
    '.mzml': Vendor.OPEN_FORMAT,
}

# Thermo RAW files start with a UTF-16 "Finnigan" signature after a 2-byte marker
THERMO_SIGNATURE = "Finnigan".encode("utf-16-le")

def detect_vendor(path: Path) -> Vendor:
    """
    Detect vendor from file path and contents.

    A .raw file is only reported as Thermo when it carries the Finnigan
    signature (Waters also uses .raw, as a folder).
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == '.raw':
        return Vendor.THERMO if _is_thermo_raw(path) else Vendor.UNKNOWN

    return VENDOR_EXTENSIONS.get(suffix, Vendor.UNKNOWN)

def _is_thermo_raw(path: Path) -> bool:
    """Check the Finnigan signature at the start of a .raw file."""
    if not path.is_file():
        return False
    with open(path, 'rb') as f:
        header = f.read(64)
    return THERMO_SIGNATURE in header


class SourceRegistry:
    """Registry for raw data sources with automatic vendor detection."""

    _sources: dict[Vendor, type['RawSource']] = {}

    @classmethod
    def register(cls, vendor: Vendor):
        """Decorator to register a source class for a vendor."""
        def decorator(source_class: type['RawSource']):
            cls._sources[vendor] = source_class
            return source_class
        return decorator

    @classmethod
    def get_source(cls, path: Path | str, dll_paths: Optional[list[Path]] = None) -> 'RawSource':
        """
        Get an unopened source for a file, with automatic vendor detection.

        Raises:
            UnsupportedFormatError: If no source handles the file's format.
            SourceOpenError: If the matching source's dependencies are missing.
        """
        path = Path(path)
        vendor = detect_vendor(path)

        source_class = cls._sources.get(vendor)
        if source_class is None:
            raise UnsupportedFormatError(
                f"No source available for {path} (detected vendor: {vendor.name})."
            )
        if not source_class.is_available():
            raise SourceOpenError(
                f"{source_class.vendor} source is not available.\n"
                f"{source_class.get_installation_instructions()}"
            )
        if vendor == Vendor.THERMO:
            return source_class(path, dll_paths=dll_paths)
        return source_class(path)

    @classmethod
    def list_available(cls) -> dict[str, bool]:
        """List all sources and their availability status."""
        return {vendor.name: source.is_available() for vendor, source in cls._sources.items()}


def open_raw_source(path: Path | str, dll_paths: Optional[list[Path]] = None) -> 'RawSource':
    """Create and open the source for ``path``."""
    source = SourceRegistry.get_source(path, dll_paths=dll_paths)
    try:
        source.open()
    except BaseException:
        source.close()
        raise
    return source
