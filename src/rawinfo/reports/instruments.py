"""
Instrument selection shared by the reports.

Both reports walk the mass spectrometer devices of a source the same way:
indices ``0`` through ``N`` inclusive, where ``N`` is the number of MS
devices the source reports. Sources number their controllers from 1, so
index 0 (and any other gap) comes back as an absent device and is skipped.
"""

import logging
from collections.abc import Iterator

from ..core import Device
from ..core.errors import (
    AbsentDeviceError,
    DeviceAbsent,
    InstrumentSelected,
    SelectionFailed,
    SelectionResult,
    UnrecoverableProcessingError,
)
from ..io.base import RawSource


logger = logging.getLogger(__name__)


def select_instrument(source: RawSource, device: Device, index: int) -> SelectionResult:
    """
    Select one instrument and read its instrument data and run header.

    Returns:
        InstrumentSelected on success, DeviceAbsent when the source has no
        such device, SelectionFailed for any other error.
    """
    try:
        source.select_instrument(device, index)
        data = source.instrument_data()
        run_header = source.run_header()
    except AbsentDeviceError as e:
        return DeviceAbsent(index=index, reason=str(e))
    except Exception as e:
        return SelectionFailed(index=index, reason=f"{type(e).__name__}: {e}", cause=e)
    return InstrumentSelected(index=index, data=data, run_header=run_header)


def iter_instruments(source: RawSource, device: Device = Device.MS) -> Iterator[InstrumentSelected]:
    """
    Yield every selectable instrument of type ``device``.

    The upper index is inclusive of the device count.

    Raises:
        UnrecoverableProcessingError: If selecting an index fails for a
            reason other than the device being absent.
    """
    count = source.instrument_count_of_type(device)
    for index in range(count + 1):
        result = select_instrument(source, device, index)
        if isinstance(result, DeviceAbsent):
            logger.debug(f"Skipping {device.name} index {index}: {result.reason}")
            continue
        if isinstance(result, SelectionFailed):
            raise UnrecoverableProcessingError(
                f"Failed to select {device.name} instrument {index}: {result.reason}"
            ) from result.cause
        logger.info(
            f"Selected {device.name} instrument {index} "
            f"(scans {result.run_header.first_spectrum}-{result.run_header.last_spectrum})"
        )
        yield result
