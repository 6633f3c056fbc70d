"""
mzML source using pyteomics.

This module provides the MzMLSource class, which exposes an mzML file
(for example one converted from a vendor file by msconvert) through the
same interface as a vendor raw file. An mzML file holds a single mass
spectrometer, reported at controller index 1.

mzML has no trailer extra data. The trailer fields consulted by the
isolation report are rebuilt from the precursor's selected ion and its
spectrum reference.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import ClassVar, Optional

import numpy as np

from ..base import RawSource
from ..registry import SourceRegistry, Vendor
from ...config import MASTER_SCAN_LABELS, MONOISOTOPIC_MZ_LABEL
from ...core import (
    ActivationType,
    Device,
    FileHeader,
    InstrumentData,
    MSOrder,
    Polarity,
    Reaction,
    RunHeader,
    SampleInformation,
    ScanEvent,
    ScanFilter,
    TrailerField,
    TrailerHeaderField,
)
from ...core.errors import AbsentDeviceError, SourceOpenError


logger = logging.getLogger(__name__)

MS_CONTROLLER_INDEX = 1
CHARGE_STATE_LABEL = "Charge State:"


# Mapping of CV terms to ActivationType
_ACTIVATION_MAP: dict[str, ActivationType] = {
    'collision-induced dissociation': ActivationType.CID,
    'cid': ActivationType.CID,
    'beam-type collision-induced dissociation': ActivationType.HCD,
    'hcd': ActivationType.HCD,
    'higher energy beam-type collision-induced dissociation': ActivationType.HCD,
    'electron transfer dissociation': ActivationType.ETD,
    'etd': ActivationType.ETD,
    'electron capture dissociation': ActivationType.ECD,
    'ecd': ActivationType.ECD,
    'ultraviolet photodissociation': ActivationType.UVPD,
    'uvpd': ActivationType.UVPD,
    'infrared multiphoton dissociation': ActivationType.IRMPD,
    'irmpd': ActivationType.IRMPD,
    'pulsed q dissociation': ActivationType.PQD,
    'pqd': ActivationType.PQD,
    'supplemental collision-induced dissociation': ActivationType.SA,
    'negative electron transfer dissociation': ActivationType.NETD,
}


def _parse_activation_type(activation_info: dict) -> ActivationType:
    """Parse activation type from mzML activation dictionary."""
    for key in activation_info:
        key_lower = key.lower()
        if key_lower in _ACTIVATION_MAP:
            return _ACTIVATION_MAP[key_lower]
    return ActivationType.UNKNOWN


def _parse_polarity(spectrum_data: dict) -> Polarity:
    """Parse polarity from mzML spectrum dictionary."""
    if 'positive scan' in spectrum_data:
        return Polarity.POSITIVE
    if 'negative scan' in spectrum_data:
        return Polarity.NEGATIVE
    return Polarity.UNKNOWN


def _extract_scan_number(native_id: str, index: int) -> int:
    """
    Extract scan number from native ID string.

    Common formats:
    - "controllerType=0 controllerNumber=1 scan=123"
    - "scan=123"
    - "spectrum=123"
    - "index=123"
    - Just a number

    Falls back to index + 1 if parsing fails.
    """
    if not native_id:
        return index + 1

    patterns = [
        r'scan=(\d+)',
        r'spectrum=(\d+)',
        r'index=(\d+)',
        r'^(\d+)$',
    ]

    for pattern in patterns:
        match = re.search(pattern, native_id)
        if match:
            return int(match.group(1))

    return index + 1


def _first(container: dict, list_key: str, item_key: str) -> Optional[dict]:
    """First entry of a pyteomics list element such as scanList/scan."""
    items = container.get(list_key, {}).get(item_key, [])
    if not items:
        return None
    return items[0] if isinstance(items, list) else items


def _precursors(spectrum_data: dict) -> list[dict]:
    precursors = spectrum_data.get('precursorList', {}).get('precursor', [])
    if isinstance(precursors, dict):
        return [precursors]
    return list(precursors)


def _selected_ion(precursor: dict) -> Optional[dict]:
    return _first(precursor, 'selectedIonList', 'selectedIon')


def _parse_retention_time(spectrum_data: dict) -> float:
    """Parse retention time, converting to minutes."""
    rt = None
    scan_info = _first(spectrum_data, 'scanList', 'scan')
    if scan_info is not None:
        rt = scan_info.get('scan start time')
    if rt is None:
        rt = spectrum_data.get('scan start time')
    if rt is None:
        return 0.0

    unit = getattr(rt, 'unit_info', None) or 'minute'
    if unit in ('second', 's'):
        return float(rt) / 60.0
    return float(rt)


def reaction_from_precursor(precursor: dict) -> Reaction:
    """
    Build a Reaction from a pyteomics precursor dictionary.

    The precursor mass is the isolation window target, falling back to the
    selected ion m/z. The width is the sum of both window offsets and the
    offset is the shift of the window center from the target.
    """
    isolation = precursor.get('isolationWindow', {})
    target = isolation.get('isolation window target m/z')
    lower = float(isolation.get('isolation window lower offset') or 0.0)
    upper = float(isolation.get('isolation window upper offset') or 0.0)

    if target is None:
        ion = _selected_ion(precursor)
        target = ion.get('selected ion m/z') if ion else None

    activation = precursor.get('activation', {})
    collision_energy = activation.get('collision energy')

    return Reaction(
        precursor_mass=float(target) if target is not None else 0.0,
        collision_energy=float(collision_energy) if collision_energy is not None else 0.0,
        isolation_width=lower + upper,
        isolation_width_offset=(upper - lower) / 2.0,
        activation=_parse_activation_type(activation),
    )


def trailer_from_precursor(precursor: dict) -> list[TrailerField]:
    """Trailer fields recoverable from an mzML precursor."""
    fields = []
    ion = _selected_ion(precursor)
    if ion is not None:
        if ion.get('selected ion m/z') is not None:
            fields.append(TrailerField(MONOISOTOPIC_MZ_LABEL, str(float(ion['selected ion m/z']))))
        if ion.get('charge state') is not None:
            fields.append(TrailerField(CHARGE_STATE_LABEL, str(int(ion['charge state']))))

    spec_ref = precursor.get('spectrumRef', '')
    if spec_ref:
        master_scan = _extract_scan_number(spec_ref, -1)
        if master_scan > 0:
            fields.append(TrailerField(MASTER_SCAN_LABELS[0], str(master_scan)))
    return fields


def _mass_bounds(spectrum_data: dict) -> Optional[tuple[float, float]]:
    """Lowest and highest m/z of a spectrum."""
    low = spectrum_data.get('lowest observed m/z')
    high = spectrum_data.get('highest observed m/z')
    if low is not None and high is not None:
        return float(low), float(high)

    mz = spectrum_data.get('m/z array')
    if mz is None or len(mz) == 0:
        return None
    mz = np.asarray(mz, dtype=np.float64)
    return float(np.min(mz)), float(np.max(mz))


@SourceRegistry.register(Vendor.OPEN_FORMAT)
class MzMLSource(RawSource):
    """
    Source for mzML files using pyteomics.

    Opening the file walks it once to map scan numbers to native IDs and
    to collect the run statistics; scans are then fetched by ID.

    Example:
        >>> with MzMLSource("sample.mzML") as source:
        ...     source.select_instrument(Device.MS, 1)
        ...     print(source.run_header().bounds)
    """

    vendor: ClassVar[str] = "Open Format"
    supported_extensions: ClassVar[list[str]] = ['.mzml']

    def __init__(self, path: Path | str):
        super().__init__(path)
        self._reader = None
        self._ids: dict[int, str] = {}
        self._run_header: Optional[RunHeader] = None
        self._selected = False
        self._cached: tuple[int, Optional[dict]] = (-1, None)

    @classmethod
    def is_available(cls) -> bool:
        """Check if pyteomics is installed."""
        try:
            import pyteomics.mzml  # noqa: F401
            return True
        except ImportError:
            return False

    @classmethod
    def get_installation_instructions(cls) -> str:
        return (
            "Install pyteomics with lxml:\n"
            "  pip install pyteomics lxml"
        )

    def open(self) -> None:
        from pyteomics import mzml
        logger.info(f"Opening {self.path.name} with pyteomics")
        try:
            self._reader = mzml.MzML(str(self.path))
        except Exception as e:
            raise SourceOpenError(f"Unable to open mzML file '{self.path}': {e}") from e
        self._build_index(self._reader)

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        self._cached = (-1, None)

    def _build_index(self, spectra: Iterable[dict]) -> None:
        """Map scan numbers to native IDs and collect run statistics."""
        times: dict[int, float] = {}
        lows: list[float] = []
        highs: list[float] = []
        for idx, spectrum_data in enumerate(spectra):
            native_id = spectrum_data.get('id', '')
            scan_number = _extract_scan_number(native_id, idx)
            self._ids[scan_number] = native_id
            times[scan_number] = _parse_retention_time(spectrum_data)
            bounds = _mass_bounds(spectrum_data)
            if bounds is not None:
                lows.append(bounds[0])
                highs.append(bounds[1])

        if not self._ids:
            self._run_header = RunHeader(first_spectrum=1, last_spectrum=0)
            return

        first, last = min(self._ids), max(self._ids)
        self._run_header = RunHeader(
            first_spectrum=first,
            last_spectrum=last,
            spectra_count=len(self._ids),
            start_time=times[first],
            end_time=times[last],
            low_mass=float(np.min(lows)) if lows else 0.0,
            high_mass=float(np.max(highs)) if highs else 0.0,
        )
        logger.debug(f"Indexed {len(self._ids)} spectra (scans {first}-{last})")

    def _spectrum(self, scan_number: int) -> dict:
        if self._reader is None:
            raise RuntimeError("Source not opened. Use 'with' context manager.")
        cached_scan, cached = self._cached
        if cached_scan == scan_number and cached is not None:
            return cached
        if scan_number not in self._ids:
            raise KeyError(f"Scan number {scan_number} not found")
        spectrum_data = self._reader.get_by_id(self._ids[scan_number])
        self._cached = (scan_number, spectrum_data)
        return spectrum_data

    @property
    def is_open(self) -> bool:
        return self._reader is not None

    @property
    def has_error(self) -> bool:
        return False

    @property
    def in_acquisition(self) -> bool:
        return False

    @property
    def instrument_count(self) -> int:
        return 1

    def instrument_count_of_type(self, device: Device) -> int:
        return 1 if device == Device.MS else 0

    def select_instrument(self, device: Device, index: int) -> None:
        if device != Device.MS or index != MS_CONTROLLER_INDEX:
            self._selected = False
            raise AbsentDeviceError(device.name, index)
        self._selected = True

    def _require_selected(self) -> None:
        if not self._selected:
            raise AbsentDeviceError(Device.MS.name, -1, "No MS device selected")

    def instrument_data(self) -> InstrumentData:
        self._require_selected()
        model = ''
        serial = ''
        software = ''
        if hasattr(self._reader, 'iterfind'):
            for inst in self._reader.iterfind('instrumentConfigurationList/instrumentConfiguration'):
                model = str(inst.get('instrument model', ''))
                serial = str(inst.get('instrument serial number', ''))
                break
            for soft in self._reader.iterfind('softwareList/software'):
                software = str(soft.get('version', ''))
                break
            self._reader.reset()
        return InstrumentData(
            model=model,
            name=model,
            serial_number=serial,
            software_version=software,
        )

    def run_header(self) -> RunHeader:
        self._require_selected()
        return self._run_header

    def file_header(self) -> FileHeader:
        return FileHeader(file_name=self.file_name, description="mzML")

    def sample_information(self) -> SampleInformation:
        return SampleInformation(sample_name=self.path.stem)

    def has_scan(self, scan_number: int) -> bool:
        return scan_number in self._ids

    def scan_filter(self, scan_number: int) -> ScanFilter:
        spectrum_data = self._spectrum(scan_number)
        return ScanFilter(
            ms_order=MSOrder.from_level(int(spectrum_data.get('ms level', 1))),
            polarity=_parse_polarity(spectrum_data),
        )

    def retention_time(self, scan_number: int) -> float:
        return _parse_retention_time(self._spectrum(scan_number))

    def scan_event(self, scan_number: int) -> ScanEvent:
        precursors = _precursors(self._spectrum(scan_number))
        return ScanEvent(reactions=tuple(reaction_from_precursor(p) for p in precursors))

    def trailer_fields(self, scan_number: int) -> list[TrailerField]:
        precursors = _precursors(self._spectrum(scan_number))
        if not precursors:
            return []
        return trailer_from_precursor(precursors[0])

    def trailer_header(self) -> list[TrailerHeaderField]:
        return [
            TrailerHeaderField(MONOISOTOPIC_MZ_LABEL, 'Double'),
            TrailerHeaderField(CHARGE_STATE_LABEL, 'Int'),
            TrailerHeaderField(MASTER_SCAN_LABELS[0], 'Long'),
        ]
