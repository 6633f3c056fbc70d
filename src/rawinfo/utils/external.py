"""
System and external library utilities for rawinfo.

This module provides utilities for:
- Describing the host system for the info report
- Finding and validating the Thermo RawFileReader assemblies
- Checking that pythonnet can start a .NET runtime
"""

import os
import platform
import sys
from importlib.util import find_spec
from pathlib import Path
from typing import Optional

from ..core.metadata import SystemInfo


RAWFILEREADER_ASSEMBLIES = (
    "ThermoFisher.CommonCore.Data.dll",
    "ThermoFisher.CommonCore.RawFileReader.dll",
)


def get_system_info() -> SystemInfo:
    """
    Describe the machine the report runs on.

    Returns:
        SystemInfo with OS, architecture, host name and CPU count.
    """
    return SystemInfo(
        os_version=f"{platform.system()} {platform.release()} ({platform.version()})",
        is_64bit=sys.maxsize > 2**32,
        machine_name=platform.node(),
        processor_count=os.cpu_count() or 1,
    )


def is_windows() -> bool:
    return platform.system() == "Windows"


def default_dll_search_paths() -> list[Path]:
    """Locations searched for the RawFileReader assemblies by default."""
    return [
        Path.cwd(),
        Path.cwd() / 'lib',
        Path.home() / '.local' / 'share' / 'rawinfo',
        Path('/opt/rawfilereader'),
        Path('/usr/local/lib/rawfilereader'),
    ]


def validate_dll_directory(path: Path) -> tuple[bool, str]:
    """
    Validate that a directory holds the RawFileReader assemblies.

    Args:
        path: Directory to check.

    Returns:
        Tuple of (is_valid, message).
    """
    if not path.exists():
        return False, f"Directory not found: {path}"

    if not path.is_dir():
        return False, f"Not a directory: {path}"

    missing = [name for name in RAWFILEREADER_ASSEMBLIES if not (path / name).is_file()]
    if missing:
        return False, f"Missing assemblies in {path}: {', '.join(missing)}"

    return True, f"RawFileReader assemblies found in {path}"


def find_dll_directory(search_paths: Optional[list[Path]] = None) -> Optional[Path]:
    """
    Find a directory containing the RawFileReader assemblies.

    Args:
        search_paths: Directories to check first; the default locations are
            searched after them.

    Returns:
        The first valid directory, or None if not found.
    """
    candidates = list(search_paths or []) + default_dll_search_paths()
    for candidate in candidates:
        valid, _ = validate_dll_directory(Path(candidate))
        if valid:
            return Path(candidate)
    return None


def check_pythonnet_available() -> tuple[bool, str]:
    """
    Check if pythonnet is installed.

    Returns:
        Tuple of (is_available, message).
    """
    if find_spec("clr") is None and find_spec("pythonnet") is None:
        return False, "pythonnet not found. Install with: pip install pythonnet"
    return True, "pythonnet is installed"
