"""
acoustic_engine - spectral and level features for passive acoustic monitoring.

Converts digitized hydrophone recordings into FFTs, power spectral
densities, Welch estimates, third-octave levels and broadband SPL.
"""

from .core import (
    InvalidInputError,
    Calibration,
    FFT,
    Segmentation,
    HammingWindow,
    Periodogram,
    PSD,
    WelchSpectralDensity,
    Energy,
    TOL,
)
from .workflow import SampleWorkflow, WorkflowConfig, WorkflowResult

__version__ = "1.0.0"

__all__ = [
    "InvalidInputError",
    "Calibration",
    "FFT",
    "Segmentation",
    "HammingWindow",
    "Periodogram",
    "PSD",
    "WelchSpectralDensity",
    "Energy",
    "TOL",
    "SampleWorkflow",
    "WorkflowConfig",
    "WorkflowResult",
]
