"""
Thermo RAW file source using the RawFileReader .NET assemblies.

The ThermoFisher.CommonCore libraries are loaded through pythonnet's
:mod:`clr` bridge the first time a file is opened. The assemblies are not
redistributable and are looked up in ``RAWINFO_DLL_PATH`` and a few default
locations (see :func:`rawinfo.utils.external.default_dll_search_paths`).

Instrument and scan queries are forwarded to the ``IRawDataPlus`` object
returned by ``RawFileReaderAdapter.FileFactory``; .NET values are converted
to the records in :mod:`rawinfo.core`.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from typing import ClassVar, Optional

from ..base import RawSource
from ..registry import SourceRegistry, Vendor
from ...core import (
    ActivationType,
    Device,
    FileHeader,
    InstrumentData,
    IonizationMode,
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
from ...utils.external import (
    check_pythonnet_available,
    find_dll_directory,
    is_windows,
)


logger = logging.getLogger(__name__)


# .NET exceptions raised when no device of the requested type is selected
ABSENT_DEVICE_EXCEPTIONS = frozenset({
    'NoSelectedDeviceException',
    'NoSelectedMsDeviceException',
})

_DEVICE_NAMES: dict[Device, str] = {
    Device.NONE: 'None',
    Device.MS: 'MS',
    Device.MS_ANALOG: 'MSAnalog',
    Device.ANALOG: 'Analog',
    Device.UV: 'UV',
    Device.PDA: 'Pda',
    Device.OTHER: 'Other',
}

_MS_ORDER_NAMES: dict[str, MSOrder] = {order.label: order for order in MSOrder}

_ACTIVATION_NAMES: dict[str, ActivationType] = {activation.label: activation for activation in ActivationType}

_IONIZATION_NAMES: dict[str, IonizationMode] = {
    'ElectronImpact': IonizationMode.EI,
    'ChemicalIonization': IonizationMode.CI,
    'FastAtomBombardment': IonizationMode.FAB,
    'ElectroSpray': IonizationMode.ESI,
    'AtmosphericPressureChemicalIonization': IonizationMode.APCI,
    'NanoSpray': IonizationMode.NSI,
    'ThermoSpray': IonizationMode.TSP,
    'FieldDesorption': IonizationMode.FD,
    'MatrixAssistedLaserDesorptionIonization': IonizationMode.MALDI,
    'GlowDischarge': IonizationMode.GD,
    'PaperSprayIonization': IonizationMode.PSI,
    'Any': IonizationMode.ANY,
}

_POLARITY_NAMES: dict[str, Polarity] = {
    'Positive': Polarity.POSITIVE,
    'Negative': Polarity.NEGATIVE,
}

# late binding of the .NET namespaces, filled by load_rawfilereader()
_dotnet: Optional[SimpleNamespace] = None


def _enum_name(value) -> str:
    """Name of a .NET enum value (pythonnet 3 keeps enums as objects)."""
    return str(value).split('.')[-1]


def ms_order_from_net(value) -> MSOrder:
    name = _enum_name(value)
    if name.lstrip('-').isdigit():
        return MSOrder.from_level(int(name))
    return _MS_ORDER_NAMES.get(name, MSOrder.ANY)


def activation_from_net(value) -> ActivationType:
    return _ACTIVATION_NAMES.get(_enum_name(value), ActivationType.UNKNOWN)


def ionization_from_net(value) -> IonizationMode:
    return _IONIZATION_NAMES.get(_enum_name(value), IonizationMode.UNKNOWN)


def polarity_from_net(value) -> Polarity:
    return _POLARITY_NAMES.get(_enum_name(value), Polarity.UNKNOWN)


def _to_datetime(value) -> Optional[datetime]:
    """Convert a System.DateTime to a naive datetime."""
    if value is None:
        return None
    try:
        return datetime(value.Year, value.Month, value.Day,
                        value.Hour, value.Minute, value.Second)
    except (AttributeError, ValueError):
        return None


def load_rawfilereader(search_paths: Optional[list[Path]] = None) -> SimpleNamespace:
    """
    Start the .NET runtime and load the RawFileReader assemblies.

    Args:
        search_paths: Directories to look in before the default locations.

    Returns:
        Namespace with ``RawFileReaderAdapter`` and ``Device`` .NET types.

    Raises:
        SourceOpenError: If pythonnet or the assemblies cannot be found.
    """
    global _dotnet
    if _dotnet is not None:
        return _dotnet

    available, message = check_pythonnet_available()
    if not available:
        raise SourceOpenError(message)

    dll_dir = find_dll_directory(search_paths)
    if dll_dir is None:
        raise SourceOpenError(
            "Thermo RawFileReader assemblies not found. Set RAWINFO_DLL_PATH "
            "to the directory containing ThermoFisher.CommonCore.RawFileReader.dll."
        )

    logger.debug(f"Loading RawFileReader assemblies from {dll_dir}")
    try:
        import clr
        sys.path.append(str(dll_dir))
        clr.AddReference('ThermoFisher.CommonCore.Data')
        clr.AddReference('ThermoFisher.CommonCore.RawFileReader')
        from ThermoFisher.CommonCore.Data.Business import Device as NetDevice
        from ThermoFisher.CommonCore.RawFileReader import RawFileReaderAdapter
    except Exception as e:
        raise SourceOpenError(f"Failed to load RawFileReader assemblies: {e}") from e

    _dotnet = SimpleNamespace(
        RawFileReaderAdapter=RawFileReaderAdapter,
        Device=NetDevice,
    )
    return _dotnet


@SourceRegistry.register(Vendor.THERMO)
class ThermoRawSource(RawSource):
    """
    Source for Thermo .raw files backed by RawFileReader.

    Example:
        >>> with ThermoRawSource("sample.raw") as source:
        ...     source.select_instrument(Device.MS, 1)
        ...     print(source.run_header().bounds)
    """

    vendor: ClassVar[str] = "Thermo"
    supported_extensions: ClassVar[list[str]] = ['.raw']

    def __init__(self, path: Path | str, dll_paths: Optional[list[Path]] = None):
        super().__init__(path)
        self._dll_paths = list(dll_paths or [])
        self._raw = None
        self._dotnet: Optional[SimpleNamespace] = None
        self._selected: tuple[Device, int] = (Device.NONE, -1)

    @classmethod
    def is_available(cls) -> bool:
        """Check if pythonnet is installed; assemblies are located on open."""
        available, _ = check_pythonnet_available()
        return available

    @classmethod
    def get_installation_instructions(cls) -> str:
        return (
            "Thermo RAW Source Requirements:\n"
            "\n"
            "1. Install pythonnet and a .NET runtime:\n"
            "   pip install pythonnet\n"
            "\n"
            "2. Obtain the RawFileReader assemblies from Thermo Fisher Scientific.\n"
            "\n"
            "3. Point RAWINFO_DLL_PATH at the directory holding\n"
            "   ThermoFisher.CommonCore.Data.dll and ThermoFisher.CommonCore.RawFileReader.dll.\n"
        )

    def open(self) -> None:
        self._dotnet = load_rawfilereader(self._dll_paths)
        logger.info(f"Opening {self.path.name} with RawFileReader")
        try:
            self._raw = self._dotnet.RawFileReaderAdapter.FileFactory(str(self.path))
        except Exception as e:
            raise SourceOpenError(f"Unable to open RAW file '{self.path}': {e}") from e

    def close(self) -> None:
        if self._raw is not None:
            self._raw.Dispose()
            self._raw = None

    @property
    def raw(self):
        if self._raw is None:
            raise RuntimeError("Source not opened. Use 'with' context manager.")
        return self._raw

    @property
    def file_name(self) -> str:
        if self._raw is None:
            return str(self.path)
        return str(self._raw.FileName)

    @property
    def is_open(self) -> bool:
        return self._raw is not None and bool(self._raw.IsOpen)

    @property
    def has_error(self) -> bool:
        return bool(self.raw.IsError)

    @property
    def file_error(self) -> str:
        return str(self.raw.FileError)

    @property
    def in_acquisition(self) -> bool:
        return bool(self.raw.InAcquisition)

    @property
    def instrument_count(self) -> int:
        return int(self.raw.InstrumentCount)

    def _net_device(self, device: Device):
        return getattr(self._dotnet.Device, _DEVICE_NAMES[device])

    def instrument_count_of_type(self, device: Device) -> int:
        return int(self.raw.GetInstrumentCountOfType(self._net_device(device)))

    @contextmanager
    def _absent_device_errors(self) -> Iterator[None]:
        """Translate the .NET 'no selected device' exceptions."""
        try:
            yield
        except Exception as e:
            if type(e).__name__ in ABSENT_DEVICE_EXCEPTIONS:
                device, index = self._selected
                raise AbsentDeviceError(device.name, index, str(e)) from e
            raise

    def select_instrument(self, device: Device, index: int) -> None:
        self._selected = (device, index)
        with self._absent_device_errors():
            self.raw.SelectInstrument(self._net_device(device), index)

    def instrument_data(self) -> InstrumentData:
        with self._absent_device_errors():
            data = self.raw.GetInstrumentData()
        return InstrumentData(
            model=str(data.Model),
            name=str(data.Name),
            serial_number=str(data.SerialNumber),
            software_version=str(data.SoftwareVersion),
            hardware_version=str(data.HardwareVersion),
            units=_enum_name(data.Units),
        )

    def run_header(self) -> RunHeader:
        with self._absent_device_errors():
            header = self.raw.RunHeaderEx
        return RunHeader(
            first_spectrum=int(header.FirstSpectrum),
            last_spectrum=int(header.LastSpectrum),
            spectra_count=int(header.SpectraCount),
            start_time=float(header.StartTime),
            end_time=float(header.EndTime),
            low_mass=float(header.LowMass),
            high_mass=float(header.HighMass),
            mass_resolution=float(header.MassResolution),
        )

    def instrument_method_names(self) -> list[str]:
        # Instrument methods are only readable on Windows
        if not is_windows():
            return []
        return [str(name) for name in self.raw.GetAllInstrumentNamesFromInstrumentMethod()]

    def file_header(self) -> FileHeader:
        header = self.raw.FileHeader
        return FileHeader(
            file_name=self.file_name,
            revision=int(header.Revision),
            creation_date=_to_datetime(header.CreationDate),
            who_created=str(header.WhoCreatedId),
            description=str(header.FileDescription),
        )

    def sample_information(self) -> SampleInformation:
        sample = self.raw.SampleInformation
        return SampleInformation(
            sample_name=str(sample.SampleName),
            sample_id=str(sample.SampleId),
            sample_type=_enum_name(sample.SampleType),
            comment=str(sample.Comment),
            vial=str(sample.Vial),
            sample_volume=float(sample.SampleVolume),
            injection_volume=float(sample.InjectionVolume),
            row_number=int(sample.RowNumber),
            dilution_factor=float(sample.DilutionFactor),
        )

    def scan_filter(self, scan_number: int) -> ScanFilter:
        with self._absent_device_errors():
            scan_filter = self.raw.GetFilterForScanNumber(scan_number)
        return ScanFilter(
            ms_order=ms_order_from_net(scan_filter.MSOrder),
            ionization_mode=ionization_from_net(scan_filter.IonizationMode),
            polarity=polarity_from_net(scan_filter.Polarity),
        )

    def retention_time(self, scan_number: int) -> float:
        with self._absent_device_errors():
            return float(self.raw.RetentionTimeFromScanNumber(scan_number))

    def scan_event(self, scan_number: int) -> ScanEvent:
        with self._absent_device_errors():
            event = self.raw.GetScanEventForScanNumber(scan_number)
        reactions = []
        for i in range(int(event.MassCount)):
            reaction = event.GetReaction(i)
            reactions.append(Reaction(
                precursor_mass=float(reaction.PrecursorMass),
                collision_energy=float(reaction.CollisionEnergy),
                isolation_width=float(reaction.IsolationWidth),
                isolation_width_offset=float(reaction.IsolationWidthOffset),
                activation=activation_from_net(reaction.ActivationType),
            ))
        return ScanEvent(reactions=tuple(reactions))

    def trailer_fields(self, scan_number: int) -> list[TrailerField]:
        with self._absent_device_errors():
            trailer = self.raw.GetTrailerExtraInformation(scan_number)
        return [
            TrailerField(label=str(trailer.Labels[i]), value=str(trailer.Values[i]))
            for i in range(int(trailer.Length))
        ]

    def trailer_header(self) -> list[TrailerHeaderField]:
        return [
            TrailerHeaderField(label=str(field.Label), data_type=_enum_name(field.DataType))
            for field in self.raw.GetTrailerExtraHeaderInformation()
        ]
