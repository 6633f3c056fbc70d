"""
rawinfo: file, instrument and MS2 isolation information from mass
spectrometry raw files.
"""

__version__ = "0.1.0"
