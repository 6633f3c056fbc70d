"""
Configuration constants and option structures for rawinfo.

This module centralizes report text, trailer labels, defaults and exit
codes, and defines the option dataclasses handed from the command line to
the validators and report handlers.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1  # source could not be opened, bad state, or report aborted
EXIT_USAGE = 2  # argparse errors and input validation errors

# Environment variables
ENV_DLL_PATH = "RAWINFO_DLL_PATH"
ENV_LOG_LEVEL = "RAWINFO_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Trailer extra labels consulted by the isolation report
MONOISOTOPIC_MZ_LABEL = "Monoisotopic M/Z:"
MASTER_SCAN_LABELS = ("Master Scan Number:", "Master Scan Number", "Master Index:")

DEFAULT_MONOISOTOPIC_MZ = 0.0
DEFAULT_MASTER_SCAN = 0

ISOLATION_HEADER_FIELDS = (
    "instrumentId",
    "scanNum",
    "msOrder",
    "rt",
    "precursorMass",
    "isolationWidth",
    "isolationWidthOffset",
    "monoMz",
    "activation",
    "energy",
)
FIELD_SEPARATOR = ", "

# Reaction index of the first precursor in a scan event
FIRST_REACTION = 0


@dataclass(frozen=True)
class Settings:
    """Settings taken from the process environment."""
    dll_paths: tuple[Path, ...] = ()
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> 'Settings':
        environ = os.environ if environ is None else environ
        raw_paths = environ.get(ENV_DLL_PATH, "")
        dll_paths = tuple(Path(p) for p in raw_paths.split(os.pathsep) if p.strip())
        log_level = environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()
        return cls(dll_paths=dll_paths, log_level=log_level)


@dataclass(frozen=True)
class InfoOptions:
    """Options of the ``info`` command."""
    file: str
    trailer_fields: bool = False


@dataclass(frozen=True)
class IsolationOptions:
    """
    Options of the ``isolation`` command.

    Attributes:
        file: Path to the data file.
        scan_numbers: None for the full range, one scan number, or an
            inclusive (low, high) pair.
    """
    file: str
    scan_numbers: Optional[tuple[int, ...]] = None

