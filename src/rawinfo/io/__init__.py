"""
I/O module for opening raw mass spectrometry data files.

This module provides:

Sources:
- ThermoRawSource: Thermo .raw files through RawFileReader
- MzMLSource: mzML files through pyteomics

Base classes:
- RawSource: Abstract interface every source implements

Registry:
- SourceRegistry: Auto-detection and source selection
- detect_vendor(): Detect file vendor from path
- open_raw_source(): Create and open the source for a file
- Vendor: Enum of supported vendors
"""

from .base import RawSource
from .registry import SourceRegistry, Vendor, detect_vendor, open_raw_source
from .sources import MzMLSource, ThermoRawSource

__all__ = [
    # Base
    "RawSource",
    # Sources
    "ThermoRawSource",
    "MzMLSource",
    # Registry
    "SourceRegistry",
    "Vendor",
    "detect_vendor",
    "open_raw_source",
]
