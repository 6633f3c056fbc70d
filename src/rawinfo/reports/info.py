"""
System, file, sample and instrument information report.
"""

from collections.abc import Iterator
from typing import Optional

from ..core import Device, SystemInfo
from ..io.base import RawSource
from ..utils.external import get_system_info
from .instruments import iter_instruments


def system_info_lines(info: SystemInfo) -> list[str]:
    return [
        "System Information:",
        f"   OS Version: {info.os_version}",
        f"   64 bit OS: {info.is_64bit}",
        f"   Computer: {info.machine_name}",
        f"   # Cores: {info.processor_count}",
        f"   Date: {info.date:%Y-%m-%d %H:%M:%S}",
        "",
    ]


def file_info_lines(source: RawSource) -> list[str]:
    header = source.file_header()
    created = f"{header.creation_date:%Y-%m-%d %H:%M:%S}" if header.creation_date else ""
    return [
        "General File Information:",
        f"   RAW file: {header.file_name}",
        f"   RAW file version: {header.revision}",
        f"   Creation date: {created}",
        f"   Operator: {header.who_created}",
        f"   Number of instruments: {source.instrument_count}",
        f"   Description: {header.description}",
        "",
        "",
    ]


def sample_info_lines(source: RawSource) -> list[str]:
    sample = source.sample_information()
    return [
        "Sample Information:",
        f"   Sample name: {sample.sample_name}",
        f"   Sample id: {sample.sample_id}",
        f"   Sample type: {sample.sample_type}",
        f"   Sample comment: {sample.comment}",
        f"   Sample vial: {sample.vial}",
        f"   Sample volume: {sample.sample_volume}",
        f"   Sample injection volume: {sample.injection_volume}",
        f"   Sample row number: {sample.row_number}",
        f"   Sample dilution factor: {sample.dilution_factor}",
        "",
        "",
    ]


def instrument_lines(source: RawSource) -> Iterator[str]:
    """Instrument counts, then one block per selectable MS instrument."""
    yield "Instruments:"
    yield f"   Total instruments: {source.instrument_count}"
    yield f"   Mass spec instruments: {source.instrument_count_of_type(Device.MS)}"
    yield ""
    yield ""
    yield f"Listing mass spec instruments (controller type = {Device.MS.name})"
    yield ""

    for instrument in iter_instruments(source, Device.MS):
        data = instrument.data
        run = instrument.run_header
        yield f"Mass Spec Instrument #{instrument.index}:"
        yield f"   Instrument model: {data.model}"
        yield f"   Instrument name: {data.name}"
        yield f"   Serial number: {data.serial_number}"
        yield f"   Software version: {data.software_version}"
        yield f"   Firmware version: {data.hardware_version}"
        yield f"   Units: {data.units}"
        yield f"   Mass resolution: {run.mass_resolution:.3f}"
        yield f"   Number of scans: {run.spectra_count}"
        yield f"   Scan range: {run.first_spectrum} - {run.last_spectrum}"
        yield f"   Time range: {run.start_time:.2f} - {run.end_time:.2f}"
        yield f"   Mass range: {run.low_mass:.4f} - {run.high_mass:.4f}"
        yield ""

        method_devices = source.instrument_method_names()
        if method_devices:
            for device_name in method_devices:
                yield f"Instrument method: {device_name}"
            yield ""


def trailer_header_lines(source: RawSource) -> list[str]:
    lines = ["Trailer Extra Data Information:"]
    for i, field in enumerate(source.trailer_header()):
        lines.append(f"   Field {i} = {field.label} storing data of type {field.data_type}")
    lines.append("")
    return lines


def info_report(
    source: RawSource,
    system_info: Optional[SystemInfo] = None,
    trailer_fields: bool = False,
) -> Iterator[str]:
    """
    Generate the info report, line by line.

    Args:
        source: Open, validated source.
        system_info: Host description; detected when not given.
        trailer_fields: Also list the trailer extra fields the file declares.
    """
    yield from system_info_lines(system_info or get_system_info())
    yield from file_info_lines(source)
    yield from sample_info_lines(source)
    yield from instrument_lines(source)
    if trailer_fields:
        yield from trailer_header_lines(source)
