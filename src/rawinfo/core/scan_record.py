"""
Scan-level records for MSn isolation reports.

This module defines the categorical types a raw data source reports for a
scan (device type, MS order, activation and ionization), the reaction and
filter records read per scan, the trailer extra fields attached to a scan,
and the ScanRecord assembled by the isolation report.
"""

from dataclasses import dataclass
from enum import Enum, auto
from collections.abc import Callable, Iterable, Sequence
from typing import Optional, TypeVar

T = TypeVar("T")


class Device(Enum):
    """Controller (device) types found in a raw file."""
    NONE = -1
    MS = 0
    MS_ANALOG = 1
    ANALOG = 2
    UV = 3
    PDA = 4
    OTHER = 5


class MSOrder(Enum):
    """Fragmentation stage of a scan, as classified by its scan filter."""
    NEUTRAL_GAIN = -3
    NEUTRAL_LOSS = -2
    PARENT = -1
    ANY = 0
    MS1 = 1
    MS2 = 2
    MS3 = 3
    MS4 = 4
    MS5 = 5
    MS6 = 6
    MS7 = 7
    MS8 = 8
    MS9 = 9
    MS10 = 10

    @classmethod
    def from_level(cls, level: int) -> 'MSOrder':
        """MS order for a numeric MS level (1 for MS1, 2 for MS2, ...)."""
        try:
            return cls(int(level))
        except ValueError:
            return cls.ANY

    @property
    def label(self) -> str:
        """Name RawFileReader gives this order (Ms, Ms2, Nl, ...)."""
        return _MS_ORDER_LABELS[self]


_MS_ORDER_LABELS: dict[MSOrder, str] = {
    MSOrder.NEUTRAL_GAIN: "Ng",
    MSOrder.NEUTRAL_LOSS: "Nl",
    MSOrder.PARENT: "Par",
    MSOrder.ANY: "Any",
    MSOrder.MS1: "Ms",
    **{MSOrder(level): f"Ms{level}" for level in range(2, 11)},
}


class Polarity(Enum):
    """Ion polarity mode."""
    POSITIVE = auto()
    NEGATIVE = auto()
    UNKNOWN = auto()


class ActivationType(Enum):
    """Fragmentation/activation method for MS2+ scans."""
    CID = auto()      # Collision-Induced Dissociation
    MPD = auto()      # Multi-Photon Dissociation
    ECD = auto()      # Electron Capture Dissociation
    PQD = auto()      # Pulsed Q Dissociation
    ETD = auto()      # Electron Transfer Dissociation
    HCD = auto()      # Higher-energy Collisional Dissociation
    SA = auto()       # Supplemental Activation
    PTR = auto()      # Proton Transfer Reaction
    NETD = auto()     # Negative Electron Transfer Dissociation
    NPTR = auto()     # Negative Proton Transfer Reaction
    UVPD = auto()     # Ultraviolet Photodissociation
    IRMPD = auto()    # Infrared Multiphoton Dissociation
    ANY = auto()
    UNKNOWN = auto()

    @property
    def label(self) -> str:
        """Name RawFileReader gives this activation."""
        return _ACTIVATION_LABELS[self]


_ACTIVATION_LABELS: dict[ActivationType, str] = {
    ActivationType.CID: "CollisionInducedDissociation",
    ActivationType.MPD: "MultiPhotonDissociation",
    ActivationType.ECD: "ElectronCaptureDissociation",
    ActivationType.PQD: "PQD",
    ActivationType.ETD: "ElectronTransferDissociation",
    ActivationType.HCD: "HigherEnergyCollisionalDissociation",
    ActivationType.SA: "SAactivation",
    ActivationType.PTR: "ProtonTransferReaction",
    ActivationType.NETD: "NegativeElectronTransferDissociation",
    ActivationType.NPTR: "NegativeProtonTransferReaction",
    ActivationType.UVPD: "UltraVioletPhotoDissociation",
    ActivationType.IRMPD: "InfraredMultiPhotonDissociation",
    ActivationType.ANY: "Any",
    ActivationType.UNKNOWN: "Unknown",
}


class IonizationMode(Enum):
    """Ion source type recorded in the scan filter."""
    EI = auto()       # Electron Impact
    CI = auto()       # Chemical Ionization
    FAB = auto()      # Fast Atom Bombardment
    ESI = auto()      # Electrospray
    APCI = auto()     # Atmospheric Pressure Chemical Ionization
    NSI = auto()      # Nanospray
    TSP = auto()      # Thermospray
    FD = auto()       # Field Desorption
    MALDI = auto()    # Matrix-Assisted Laser Desorption Ionization
    GD = auto()       # Glow Discharge
    PSI = auto()      # Paper Spray
    ANY = auto()
    UNKNOWN = auto()


@dataclass(frozen=True, slots=True)
class Reaction:
    """
    Precursor reaction of an MSn scan event.

    Attributes:
        precursor_mass: m/z selected for fragmentation.
        collision_energy: Collision energy of the activation.
        isolation_width: Width of the isolation window in Da.
        isolation_width_offset: Offset of the window center from the
            precursor mass in Da.
        activation: Fragmentation method.
    """
    precursor_mass: float
    collision_energy: float = 0.0
    isolation_width: float = 0.0
    isolation_width_offset: float = 0.0
    activation: ActivationType = ActivationType.UNKNOWN


@dataclass(frozen=True, slots=True)
class ScanFilter:
    """Classification of a scan by its filter."""
    ms_order: MSOrder
    ionization_mode: IonizationMode = IonizationMode.UNKNOWN
    polarity: Polarity = Polarity.UNKNOWN


@dataclass(frozen=True, slots=True)
class ScanEvent:
    """Scan event holding the precursor reactions of a scan, in order."""
    reactions: tuple[Reaction, ...] = ()

    def get_reaction(self, index: int) -> Reaction:
        if not 0 <= index < len(self.reactions):
            raise IndexError(
                f"Scan event has no reaction {index} "
                f"({len(self.reactions)} reactions)"
            )
        return self.reactions[index]


@dataclass(frozen=True, slots=True)
class TrailerField:
    """One label/value pair of a scan's trailer extra data."""
    label: str
    value: str


@dataclass(frozen=True, slots=True)
class TrailerHeaderField:
    """Declaration of a trailer extra field: its label and storage type."""
    label: str
    data_type: str


@dataclass(frozen=True, slots=True)
class ScanRecord:
    """
    Isolation information of a single MSn scan.

    Produced by the isolation report, one per MS2 scan in the resolved range.
    ``master_scan`` is extracted but not part of the printed report line.
    """
    instrument_id: int
    scan_number: int
    ms_order: MSOrder
    retention_time: float
    precursor_mass: float
    isolation_width: float
    isolation_width_offset: float
    monoisotopic_mz: float
    activation: ActivationType
    collision_energy: float
    ionization_mode: IonizationMode = IonizationMode.UNKNOWN
    master_scan: int = 0


def find_trailer_value(
    fields: Iterable[TrailerField],
    labels: str | Sequence[str],
) -> Optional[str]:
    """
    Look up a trailer value by exact label match.

    Args:
        fields: Trailer fields of a scan, in stored order.
        labels: A label, or several alternative labels for the same field.

    Returns:
        The value of the last matching field, or None if no label matches.
    """
    if isinstance(labels, str):
        labels = (labels,)
    wanted = frozenset(labels)
    value = None
    for trailer_field in fields:
        if trailer_field.label in wanted:
            value = trailer_field.value
    return value


def trailer_value(
    fields: Iterable[TrailerField],
    labels: str | Sequence[str],
    convert: Callable[[str], T],
    default: T,
) -> T:
    """Convert a looked-up trailer value, or return ``default`` if absent."""
    raw = find_trailer_value(fields, labels)
    if raw is None:
        return default
    return convert(raw.strip())
