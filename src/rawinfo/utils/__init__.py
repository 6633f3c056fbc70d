"""
Utility modules for rawinfo.

This module provides:
- Host system description
- External library management (pythonnet, Thermo RawFileReader)
"""

from .external import (
    RAWFILEREADER_ASSEMBLIES,
    check_pythonnet_available,
    default_dll_search_paths,
    find_dll_directory,
    get_system_info,
    is_windows,
    validate_dll_directory,
)

__all__ = [
    "RAWFILEREADER_ASSEMBLIES",
    "check_pythonnet_available",
    "default_dll_search_paths",
    "find_dll_directory",
    "get_system_info",
    "is_windows",
    "validate_dll_directory",
]
