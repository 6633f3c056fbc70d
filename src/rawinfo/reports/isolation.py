"""
Isolation information of MS2 scans.

For every mass spectrometer in the file, the requested scan range is
resolved against that instrument's first/last spectrum, and each MS2 scan
in the range is reported with its precursor reaction and the monoisotopic
m/z taken from the trailer extra data. Lines are comma separated so the
report can be redirected into a table.
"""

import logging
from collections.abc import Iterator, Sequence
from typing import Optional

from ..config import (
    DEFAULT_MASTER_SCAN,
    DEFAULT_MONOISOTOPIC_MZ,
    FIELD_SEPARATOR,
    FIRST_REACTION,
    ISOLATION_HEADER_FIELDS,
    MASTER_SCAN_LABELS,
    MONOISOTOPIC_MZ_LABEL,
)
from ..core import (
    Device,
    MSOrder,
    ScanRecord,
    iter_scan_numbers,
    resolve_scan_range,
    trailer_value,
)
from ..core.errors import AbsentDeviceError, UnrecoverableProcessingError
from ..io.base import RawSource
from .instruments import iter_instruments


logger = logging.getLogger(__name__)


def isolation_header() -> str:
    return FIELD_SEPARATOR.join(ISOLATION_HEADER_FIELDS)


def format_scan_record(record: ScanRecord) -> str:
    """Report line of a scan; the master scan is not part of it."""
    values = (
        record.instrument_id,
        record.scan_number,
        record.ms_order.label,
        record.retention_time,
        record.precursor_mass,
        record.isolation_width,
        record.isolation_width_offset,
        record.monoisotopic_mz,
        record.activation.label,
        record.collision_energy,
    )
    return FIELD_SEPARATOR.join(str(value) for value in values)


def read_scan_record(source: RawSource, scan_number: int, instrument_id: int) -> Optional[ScanRecord]:
    """
    Read the isolation information of one scan.

    Args:
        source: Open source with the instrument already selected.
        scan_number: Scan to read.
        instrument_id: Index the instrument was selected with.

    Returns:
        The ScanRecord, or None if there is no such scan or it is not an
        MS2 scan.
    """
    if not source.has_scan(scan_number):
        return None

    scan_filter = source.scan_filter(scan_number)
    if scan_filter.ms_order != MSOrder.MS2:
        return None

    retention_time = source.retention_time(scan_number)
    reaction = source.scan_event(scan_number).get_reaction(FIRST_REACTION)

    trailer = source.trailer_fields(scan_number)
    monoisotopic_mz = trailer_value(trailer, MONOISOTOPIC_MZ_LABEL, float, DEFAULT_MONOISOTOPIC_MZ)
    master_scan = trailer_value(trailer, MASTER_SCAN_LABELS, int, DEFAULT_MASTER_SCAN)

    return ScanRecord(
        instrument_id=instrument_id,
        scan_number=scan_number,
        ms_order=scan_filter.ms_order,
        retention_time=retention_time,
        precursor_mass=reaction.precursor_mass,
        isolation_width=reaction.isolation_width,
        isolation_width_offset=reaction.isolation_width_offset,
        monoisotopic_mz=monoisotopic_mz,
        activation=reaction.activation,
        collision_energy=reaction.collision_energy,
        ionization_mode=scan_filter.ionization_mode,
        master_scan=master_scan,
    )


def _scan_records(
    source: RawSource,
    instrument_id: int,
    resolved: tuple[int, int],
) -> Iterator[ScanRecord]:
    """MS2 records of one instrument; a device that disappears ends the instrument, not the report."""
    for scan_number in iter_scan_numbers(resolved):
        try:
            record = read_scan_record(source, scan_number, instrument_id)
        except AbsentDeviceError as e:
            logger.debug(f"Instrument {instrument_id} has no device at scan {scan_number}: {e}")
            return
        except Exception as e:
            raise UnrecoverableProcessingError(
                f"Failed to read scan {scan_number} of instrument {instrument_id}: {e}"
            ) from e
        if record is not None:
            yield record


def isolation_report(source: RawSource, scan_range: Optional[Sequence[int]] = None) -> Iterator[str]:
    """
    Generate the isolation report, line by line.

    A header line is emitted once per instrument, followed by one line per
    MS2 scan in the resolved range.

    Args:
        source: Open, validated source.
        scan_range: Validated request of 0, 1 or 2 scan numbers.

    Raises:
        UnrecoverableProcessingError: If an instrument or scan cannot be read.
    """
    for instrument in iter_instruments(source, Device.MS):
        resolved = resolve_scan_range(scan_range, instrument.run_header.bounds)
        logger.info(f"Instrument {instrument.index}: reporting scans {resolved[0]}-{resolved[1]}")
        yield isolation_header()
        for record in _scan_records(source, instrument.index, resolved):
            yield format_scan_record(record)


def collect_isolation_records(
    source: RawSource,
    scan_range: Optional[Sequence[int]] = None,
) -> list[ScanRecord]:
    """All MS2 ScanRecords of the report, including their master scans."""
    records: list[ScanRecord] = []
    for instrument in iter_instruments(source, Device.MS):
        resolved = resolve_scan_range(scan_range, instrument.run_header.bounds)
        records.extend(_scan_records(source, instrument.index, resolved))
    return records
