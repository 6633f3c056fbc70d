"""
Raw data sources.

Tier 1 (Vendor-specific, direct reading):
- ThermoRawSource: Thermo .raw files (pythonnet + RawFileReader)

Tier 2 (Open formats):
- MzMLSource: mzML files (pyteomics)

Importing this module registers both sources with SourceRegistry.
"""

from .thermo import ThermoRawSource, load_rawfilereader
from .mzml import MzMLSource

__all__ = [
    "ThermoRawSource",
    "MzMLSource",
    "load_rawfilereader",
]
