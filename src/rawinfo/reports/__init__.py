"""
Text reports generated from an open raw data source.

- info_report(): system, file, sample and instrument information
- isolation_report(): isolation information of MS2 scans
"""

from .info import info_report
from .instruments import iter_instruments, select_instrument
from .isolation import (
    collect_isolation_records,
    format_scan_record,
    isolation_header,
    isolation_report,
    read_scan_record,
)

__all__ = [
    "info_report",
    "isolation_report",
    "collect_isolation_records",
    "format_scan_record",
    "isolation_header",
    "read_scan_record",
    "iter_instruments",
    "select_instrument",
]
