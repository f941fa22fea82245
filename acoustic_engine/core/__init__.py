"""
Core DSP module - pure numeric stages, no GUI or storage dependencies.

This module contains the processing chain:
- Segmentation and Hamming windowing
- FFT (full two-sided, interleaved layout)
- Periodogram, Welch averaging and broadband energy / SPL
- Base-10 third-octave levels
- WAV record ingestion
"""

from .errors import InvalidInputError
from .frequency import FrequencyConvertible
from .calibration import Calibration, log_normalization
from .fft import FFT
from .signal_processing import Segmentation, HammingWindow
from .spectral import Periodogram, PSD, WelchSpectralDensity, Energy
from .third_octave import TOL, LOWER_LIMIT, MAX_BAND_LIMIT
from .audio_io import AudioFile, Record, load_audio, split_records

__all__ = [
    "InvalidInputError",
    "FrequencyConvertible",
    "Calibration",
    "log_normalization",
    "FFT",
    "Segmentation",
    "HammingWindow",
    "Periodogram",
    "PSD",
    "WelchSpectralDensity",
    "Energy",
    "TOL",
    "LOWER_LIMIT",
    "MAX_BAND_LIMIT",
    "AudioFile",
    "Record",
    "load_audio",
    "split_records",
]
