"""
Calibration of digital levels.

Raw digital energy is converted to a calibrated level by subtracting

    micro_sensitivity + gain + 20 * log10(1 / v_adc)

The defaults (v_adc=1, sensitivity=0 dB, gain=0 dB) give an offset of
0 dB, i.e. uncalibrated levels re 1 (digital full scale).
"""

from dataclasses import dataclass

import numpy as np

from .errors import InvalidInputError


def log_normalization(
    v_adc: float = 1.0,
    micro_sensitivity: float = 0.0,
    gain: float = 0.0,
) -> float:
    """
    Calibration offset in dB.

    Args:
        v_adc: ADC peak voltage in volts (e.g. 1.414 V)
        micro_sensitivity: Hydrophone sensitivity in dB re 1 V/uPa, without gain
        gain: Recorder gain in dB

    Returns:
        Offset to subtract from 10 * log10(energy)
    """
    if not v_adc > 0:
        raise InvalidInputError(f"ADC voltage must be positive, got: {v_adc}")
    return micro_sensitivity + gain + 20 * np.log10(1.0 / v_adc)


@dataclass(frozen=True)
class Calibration:
    """
    Calibration triple of a recording chain.

    Attributes:
        v_adc: ADC peak voltage in volts
        micro_sensitivity: Sensitivity in dB (typically -170 to -140 dB re 1 V/uPa)
        gain: Gain in dB (typically 20 to 25 dB)
    """
    v_adc: float = 1.0
    micro_sensitivity: float = 0.0
    gain: float = 0.0

    def __post_init__(self):
        if not self.v_adc > 0:
            raise InvalidInputError(f"ADC voltage must be positive, got: {self.v_adc}")

    @property
    def offset_db(self) -> float:
        """Offset subtracted from raw levels."""
        return log_normalization(self.v_adc, self.micro_sensitivity, self.gain)

    def as_kwargs(self) -> dict:
        """Keyword arguments for TOL.compute / Energy.compute_spl_*."""
        return {
            "v_adc": self.v_adc,
            "micro_sensitivity": self.micro_sensitivity,
            "gain": self.gain,
        }
