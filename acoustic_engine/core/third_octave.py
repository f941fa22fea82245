"""
Third-Octave Levels (TOL)

Integrates a one-sided power spectrum into base-10 third-octave bands.

Technical details:
- Band i has center 10^(i / 10) Hz and edges center / 10^0.05, center * 10^0.05
- Supported bands: i = 14 (nominal 25 Hz) to i = 43 (nominal 20 kHz)
- Level of a band: 10 * log10(sum of PSD bins in [lower_index, upper_index))
  minus the calibration offset

Band retention (fixed at construction):
- A band is kept when its upper edge is >= the low study limit and its
  lower edge is <= the high study limit. Bands straddling a study limit
  are kept whole, never clipped.
- A band whose upper edge lies above the absolute upper limit
  (min(fs / 2, upper edge of the 20 kHz band)) is dropped: only complete
  bands below Nyquist are reported. A configuration whose Nyquist frequency
  lies below the first complete band retains no band at all.

Documented limitations:
- Spectral approximation: bin edges are truncated to whole bins, so band
  edges are only as precise as the frequency resolution fs / nfft
- nfft must cover at least one second of signal (resolution <= 1 Hz)
"""

import logging
from typing import Optional

import numpy as np

from ..utils.formatting import format_frequency
from .calibration import log_normalization
from .errors import InvalidInputError
from .frequency import FrequencyConvertible

logger = logging.getLogger(__name__)


# Base-10 third-octave indices of the first and last supported bands
FIRST_BAND_INDEX = 14
LAST_BAND_INDEX = 43

# Ratio between a band center and its edges
TOC_SCALING_FACTOR = 10 ** 0.05


def band_center(index: int) -> float:
    """Exact center frequency of base-10 third-octave band `index`."""
    return 10 ** (index / 10)


def band_bounds(index: int) -> tuple[float, float]:
    """(lower, upper) edge frequencies of band `index` in Hz."""
    center = band_center(index)
    return center / TOC_SCALING_FACTOR, center * TOC_SCALING_FACTOR


# Lowest admissible study frequency (nominal center of the first band)
LOWER_LIMIT = 25.0

# Upper edge of the last supported band
MAX_BAND_LIMIT = band_bounds(LAST_BAND_INDEX)[1]


class TOL(FrequencyConvertible):
    """
    Third-octave levels over a PSD.

    Usage:
        tol = TOL(nfft=fs, sampling_rate=fs, low_freq=100.0)
        levels = tol.compute(welch, v_adc=1.414, micro_sensitivity=-170.0, gain=20.0)

        for (lower, upper), level in zip(tol.bounds, levels):
            print(f"{lower:.1f}-{upper:.1f} Hz: {level:.1f} dB")

    Attributes:
        low_freq: Requested low study limit (None: LOWER_LIMIT)
        high_freq: Requested high study limit (None: upper_limit)
        upper_limit: min(fs / 2, MAX_BAND_LIMIT)
        bounds: Tuple of (lower_hz, upper_hz) per retained band, ascending
        bound_indices: Tuple of (lower_bin, upper_bin) per retained band
    """

    def __init__(
        self,
        nfft: int,
        sampling_rate: float,
        low_freq: Optional[float] = None,
        high_freq: Optional[float] = None,
    ):
        super().__init__(nfft, sampling_rate)

        if self.nfft < self.sampling_rate:
            raise InvalidInputError(
                f"Incorrect window size ({self.nfft}) for TOL ({self.sampling_rate}), "
                "window must cover at least one second"
            )

        self.upper_limit = min(self.sampling_rate / 2.0, MAX_BAND_LIMIT)
        self.low_freq = low_freq
        self.high_freq = high_freq

        if low_freq is not None:
            max_low = high_freq if high_freq is not None else self.upper_limit
            if low_freq < LOWER_LIMIT or low_freq > max_low:
                raise InvalidInputError(
                    f"Incorrect low frequency ({low_freq}) for TOL "
                    f"(smaller than {LOWER_LIMIT} or bigger than {max_low})"
                )

        if high_freq is not None:
            min_high = low_freq if low_freq is not None else LOWER_LIMIT
            if high_freq > self.upper_limit or high_freq < min_high:
                raise InvalidInputError(
                    f"Incorrect high frequency ({high_freq}) for TOL "
                    f"(higher than {self.upper_limit} or smaller than {min_high})"
                )

        self.bounds, self.center_frequencies = self._derive_bands()
        self.bound_indices = tuple(
            (self.frequency_to_spectrum_index(lower), self.frequency_to_spectrum_index(upper))
            for lower, upper in self.bounds
        )

        if self.bounds:
            logger.debug(
                "TOL: nfft=%d, fs=%s, %d bands from %s to %s",
                self.nfft, self.sampling_rate, len(self.bounds),
                format_frequency(self.bounds[0][0]), format_frequency(self.bounds[-1][1]),
            )
        else:
            logger.debug(
                "TOL: nfft=%d, fs=%s, no complete band below %s",
                self.nfft, self.sampling_rate, format_frequency(self.upper_limit),
            )

    def _derive_bands(self) -> tuple[tuple[tuple[float, float], ...], tuple[float, ...]]:
        """Select the bands intersecting the study range."""
        study_low = self.low_freq if self.low_freq is not None else LOWER_LIMIT
        study_high = self.high_freq if self.high_freq is not None else self.upper_limit

        bounds = []
        centers = []
        for index in range(FIRST_BAND_INDEX, LAST_BAND_INDEX + 1):
            lower, upper = band_bounds(index)
            if upper > self.upper_limit:
                break
            if upper >= study_low and lower <= study_high:
                bounds.append((lower, upper))
                centers.append(band_center(index))

        return tuple(bounds), tuple(centers)

    @property
    def num_bands(self) -> int:
        """Number of retained bands (length of every compute() result)."""
        return len(self.bounds)

    @property
    def band_labels(self) -> list[str]:
        """Human-readable center frequencies of the retained bands."""
        return [format_frequency(fc) for fc in self.center_frequencies]

    def compute(
        self,
        spectrum: np.ndarray,
        v_adc: float = 1.0,
        micro_sensitivity: float = 0.0,
        gain: float = 0.0,
    ) -> np.ndarray:
        """
        Compute third-octave levels over a PSD.

        A single periodogram is accepted, although a Welch estimate is the
        more meaningful input. Defaults apply no calibration.

        Args:
            spectrum: One-sided PSD, length nfft // 2 + 1
            v_adc: ADC peak voltage in volts (e.g. 1.414 V)
            micro_sensitivity: Sensitivity without gain in dB
                (-170 to -140 dB re 1 V/uPa is a common range)
            gain: Gain in dB (20 to 25 dB for common hydrophones)

        Returns:
            One level in dB per retained band, ascending frequency (empty
            when no band is retained)
        """
        spectrum = np.asarray(spectrum, dtype=np.float64)
        if spectrum.ndim != 1 or spectrum.shape[0] != self.spectrum_size:
            raise InvalidInputError(
                f"Incorrect PSD size ({spectrum.size}) for TOL ({self.spectrum_size})"
            )

        if not self.bound_indices:
            return np.empty(0)

        offset = log_normalization(v_adc, micro_sensitivity, gain)

        band_energy = np.array([
            spectrum[lower:upper].sum() for lower, upper in self.bound_indices
        ])
        return 10 * np.log10(band_energy) - offset
