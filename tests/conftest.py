"""Shared fixtures: an in-memory RawSource with configurable instruments and scans."""

from dataclasses import dataclass, field
from typing import Optional

import pytest

from rawinfo.core import (
    ActivationType,
    Device,
    FileHeader,
    InstrumentData,
    MSOrder,
    Reaction,
    RunHeader,
    SampleInformation,
    ScanEvent,
    ScanFilter,
    TrailerField,
    TrailerHeaderField,
)
from rawinfo.core.errors import AbsentDeviceError
from rawinfo.io.base import RawSource


@dataclass
class FakeScan:
    ms_order: MSOrder = MSOrder.MS1
    retention_time: float = 0.0
    reactions: tuple = ()
    trailer: list = field(default_factory=list)


def ms2_scan(precursor_mass: float, retention_time: float = 1.5, mono_mz: Optional[str] = None,
             activation: ActivationType = ActivationType.HCD) -> FakeScan:
    trailer = [TrailerField("Charge State:", "2")]
    if mono_mz is not None:
        trailer.append(TrailerField("Monoisotopic M/Z:", mono_mz))
    reaction = Reaction(
        precursor_mass=precursor_mass,
        collision_energy=30.0,
        isolation_width=1.6,
        isolation_width_offset=0.0,
        activation=activation,
    )
    return FakeScan(MSOrder.MS2, retention_time, (reaction,), trailer)


class FakeRawSource(RawSource):
    """
    RawSource backed by dictionaries.

    ``instruments`` maps an MS controller index to its run header; any other
    index up to ``ms_count`` is absent. Indices in ``failing`` raise a plain
    RuntimeError on selection, scans in ``broken_scans`` on every read.
    ``absent_scans`` holds (index, scan) pairs where the device disappears.
    """

    vendor = "Fake"
    supported_extensions = [".raw"]

    def __init__(self, path="fake.raw", instruments=None, ms_count=None, scans=None,
                 failing=(), broken_scans=(), absent_scans=(), is_open=True, has_error=False,
                 in_acquisition=False, method_names=(), trailer_header=()):
        super().__init__(path)
        self.instruments = instruments if instruments is not None else {1: RunHeader(1, 10, 10)}
        self.ms_count = ms_count if ms_count is not None else len(self.instruments)
        self.scans = scans or {}
        self.failing = set(failing)
        self.broken_scans = set(broken_scans)
        self.absent_scans = set(absent_scans)
        self._is_open = is_open
        self._has_error = has_error
        self._in_acquisition = in_acquisition
        self.method_names = list(method_names)
        self._trailer_header = list(trailer_header)
        self.selected: Optional[int] = None
        self.select_calls: list[int] = []
        self.open_calls = 0
        self.close_calls = 0

    @classmethod
    def is_available(cls) -> bool:
        return True

    def open(self) -> None:
        self.open_calls += 1

    def close(self) -> None:
        self.close_calls += 1

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def has_error(self) -> bool:
        return self._has_error

    @property
    def file_error(self) -> str:
        return "corrupt header" if self._has_error else ""

    @property
    def in_acquisition(self) -> bool:
        return self._in_acquisition

    @property
    def instrument_count(self) -> int:
        return self.ms_count + 1

    def instrument_count_of_type(self, device: Device) -> int:
        return self.ms_count if device == Device.MS else 0

    def select_instrument(self, device: Device, index: int) -> None:
        self.select_calls.append(index)
        if index in self.failing:
            raise RuntimeError(f"controller {index} is corrupt")
        if device != Device.MS or index not in self.instruments:
            self.selected = None
            raise AbsentDeviceError(device.name, index)
        self.selected = index

    def instrument_data(self) -> InstrumentData:
        return InstrumentData(
            model="Orbitrap Fusion Lumos",
            name="Orbitrap Fusion Lumos",
            serial_number="FSN20001",
            software_version="3.4",
            hardware_version="1.0",
            units="None",
        )

    def run_header(self) -> RunHeader:
        return self.instruments[self.selected]

    def instrument_method_names(self) -> list[str]:
        return self.method_names

    def file_header(self) -> FileHeader:
        return FileHeader(file_name=self.file_name, revision=66, who_created="operator", description="test run")

    def sample_information(self) -> SampleInformation:
        return SampleInformation(sample_name="QC", sample_id="S1", vial="A1", row_number=3)

    def _scan(self, scan_number: int) -> FakeScan:
        if scan_number in self.broken_scans:
            raise RuntimeError(f"scan {scan_number} unreadable")
        if (self.selected, scan_number) in self.absent_scans:
            raise AbsentDeviceError(Device.MS.name, self.selected)
        return self.scans.get(scan_number, FakeScan())

    def scan_filter(self, scan_number: int) -> ScanFilter:
        return ScanFilter(ms_order=self._scan(scan_number).ms_order)

    def retention_time(self, scan_number: int) -> float:
        return self._scan(scan_number).retention_time

    def scan_event(self, scan_number: int) -> ScanEvent:
        return ScanEvent(reactions=self._scan(scan_number).reactions)

    def trailer_fields(self, scan_number: int) -> list[TrailerField]:
        return list(self._scan(scan_number).trailer)

    def trailer_header(self) -> list[TrailerHeaderField]:
        return self._trailer_header


@pytest.fixture
def fake_source():
    """One MS instrument, scans 1-100, with scan 7 the only MS2 scan."""
    return FakeRawSource(
        instruments={1: RunHeader(1, 100, 100, 0.0, 60.0, 150.0, 2000.0, 0.5)},
        scans={7: ms2_scan(500.25, retention_time=1.5, mono_mz="500.2512")},
    )


@pytest.fixture
def raw_file(tmp_path):
    path = tmp_path / "sample.raw"
    path.write_bytes(b"\x01\xa1" + "Finnigan".encode("utf-16-le"))
    return path


@pytest.fixture
def opener_for():
    """Build an opener that hands out ``source`` and records the requested paths."""
    def build(source):
        requested = []

        def opener(path):
            requested.append(path)
            source.open()
            return source

        opener.requested = requested
        return opener
    return build
