"""
Core data structures for rawinfo.

This module provides the types exchanged between raw data sources and the
reports:

- FileHeader, SampleInformation, InstrumentData, RunHeader: file and
  instrument metadata
- ScanFilter, ScanEvent, Reaction: per-scan classification and precursor data
- TrailerField: trailer extra label/value pairs, with lookup helpers
- ScanRecord: one row of the isolation report

Enums for categorical metadata:
- Device: Controller type
- MSOrder: Fragmentation stage
- ActivationType: Fragmentation method
- IonizationMode: Ion source
- Polarity: Ion polarity (positive/negative)
"""

from .metadata import (
    FileHeader,
    InstrumentData,
    RunHeader,
    SampleInformation,
    SystemInfo,
)
from .scan_record import (
    ActivationType,
    Device,
    IonizationMode,
    MSOrder,
    Polarity,
    Reaction,
    ScanEvent,
    ScanFilter,
    ScanRecord,
    TrailerField,
    TrailerHeaderField,
    find_trailer_value,
    trailer_value,
)
from .scan_range import iter_scan_numbers, resolve_scan_range, validate_scan_range

__all__ = [
    # Metadata
    "FileHeader",
    "InstrumentData",
    "RunHeader",
    "SampleInformation",
    "SystemInfo",
    # Scan records
    "Reaction",
    "ScanEvent",
    "ScanFilter",
    "ScanRecord",
    "TrailerField",
    "TrailerHeaderField",
    "find_trailer_value",
    "trailer_value",
    # Scan ranges
    "iter_scan_numbers",
    "resolve_scan_range",
    "validate_scan_range",
    # Enums
    "ActivationType",
    "Device",
    "IonizationMode",
    "MSOrder",
    "Polarity",
]
