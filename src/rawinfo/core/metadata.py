"""
File- and instrument-level metadata reported by a raw data source.

These records mirror the header blocks of a vendor file: the file header,
sample information, the data of the selected instrument and its run header.
SystemInfo describes the machine running the report.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class FileHeader:
    """
    General file information.

    Attributes:
        file_name: Path of the opened file.
        revision: File format revision.
        creation_date: Date the file was created.
        who_created: Operator recorded at creation.
        description: Free-text file description.
    """
    file_name: str
    revision: int = 0
    creation_date: Optional[datetime] = None
    who_created: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class SampleInformation:
    """Sample table entry stored with the acquisition."""
    sample_name: str = ""
    sample_id: str = ""
    sample_type: str = ""
    comment: str = ""
    vial: str = ""
    sample_volume: float = 0.0
    injection_volume: float = 0.0
    row_number: int = 0
    dilution_factor: float = 0.0


@dataclass(frozen=True, slots=True)
class InstrumentData:
    """Identification of the currently selected instrument."""
    model: str = ""
    name: str = ""
    serial_number: str = ""
    software_version: str = ""
    hardware_version: str = ""
    units: str = ""


@dataclass(frozen=True, slots=True)
class RunHeader:
    """
    Run statistics of the currently selected instrument.

    Attributes:
        first_spectrum: First scan number.
        last_spectrum: Last scan number.
        spectra_count: Number of scans.
        start_time: Retention time of the first scan (minutes).
        end_time: Retention time of the last scan (minutes).
        low_mass: Lowest acquired m/z.
        high_mass: Highest acquired m/z.
        mass_resolution: Mass resolution of the run.
    """
    first_spectrum: int
    last_spectrum: int
    spectra_count: int = 0
    start_time: float = 0.0
    end_time: float = 0.0
    low_mass: float = 0.0
    high_mass: float = 0.0
    mass_resolution: float = 0.0

    @property
    def bounds(self) -> tuple[int, int]:
        """(first, last) scan numbers of this instrument."""
        return (self.first_spectrum, self.last_spectrum)


@dataclass(frozen=True)
class SystemInfo:
    """Host description printed at the top of the info report."""
    os_version: str
    is_64bit: bool
    machine_name: str
    processor_count: int
    date: datetime = field(default_factory=datetime.now)
