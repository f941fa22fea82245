"""
Spectral Density Module

Turns complex FFT output into one-sided power spectra and broadband levels.

Technical assumptions:
- Input spectra use the interleaved layout produced by core.fft.FFT
- One-sided spectra hold nfft // 2 + 1 bins
- Bins other than DC and Nyquist (even nfft) are doubled so that the
  one-sided spectrum carries the energy of the full spectrum
- Normalization is entirely the caller's choice, e.g.
    1 / (nfft * fs)            density, no window (MATLAB periodogram)
    1 / (fs * sum(window**2))  density, windowed (scipy/Welch)
    1 / nfft**2                power spectrum, no window (scipy 'spectrum')
"""

import logging
from typing import Sequence

import numpy as np

from .calibration import log_normalization
from .errors import InvalidInputError
from .frequency import FrequencyConvertible

logger = logging.getLogger(__name__)


def _one_sided_weights(nfft: int) -> np.ndarray:
    """Energy-conserving weights of the one-sided bins."""
    weights = np.full(nfft // 2 + 1, 2.0)
    weights[0] = 1.0
    if nfft % 2 == 0:
        weights[-1] = 1.0
    return weights


def _squared_magnitudes(fft: np.ndarray, nfft: int) -> np.ndarray:
    """re^2 + im^2 of the first nfft // 2 + 1 bins of an interleaved spectrum."""
    fft = np.asarray(fft, dtype=np.float64)
    if fft.ndim != 1 or fft.shape[0] != 2 * nfft:
        raise InvalidInputError(
            f"Incorrect fft size ({fft.size}) for PSD ({2 * nfft})"
        )
    one_sided = fft[:2 * (nfft // 2 + 1)]
    return one_sided[0::2] ** 2 + one_sided[1::2] ** 2


class Periodogram:
    """
    One-sided periodogram of a single FFT.

    Usage:
        psd = Periodogram(nfft=1024, normalization_factor=1 / (1024 * fs))
        density = psd.compute(fft.compute(segment))
    """

    def __init__(self, nfft: int, normalization_factor: float):
        if int(nfft) != nfft or nfft < 1:
            raise InvalidInputError(f"nfft must be a positive integer, got: {nfft}")
        if not normalization_factor > 0:
            raise InvalidInputError(
                f"Normalization factor must be positive, got: {normalization_factor}"
            )

        self.nfft = int(nfft)
        self.normalization_factor = float(normalization_factor)
        self.spectrum_size = self.nfft // 2 + 1

        weights = _one_sided_weights(self.nfft) * self.normalization_factor
        weights.setflags(write=False)
        self._weights = weights

        logger.debug(
            "Periodogram: nfft=%d, normalization=%.6g", self.nfft, self.normalization_factor
        )

    def compute(self, fft: np.ndarray) -> np.ndarray:
        """
        Compute the one-sided PSD.

        Args:
            fft: Interleaved complex spectrum, length 2 * nfft

        Returns:
            Power spectral density, length nfft // 2 + 1
        """
        return _squared_magnitudes(fft, self.nfft) * self._weights


# The periodogram is the PSD estimate of a single segment
PSD = Periodogram


class WelchSpectralDensity(FrequencyConvertible):
    """
    Welch estimate: mean of the periodograms of one record.

    Window and sampling-rate normalization are already carried by each
    periodogram, the average applies no further scaling.
    """

    def compute(self, periodograms: Sequence[np.ndarray]) -> np.ndarray:
        """
        Average periodograms element-wise.

        Args:
            periodograms: Sequence (or 2D array) of one-sided spectra,
                each of length nfft // 2 + 1

        Returns:
            Averaged spectrum, length nfft // 2 + 1
        """
        if len(periodograms) == 0:
            raise InvalidInputError("Welch requires at least one periodogram")

        for psd in periodograms:
            if np.ndim(psd) != 1 or len(psd) != self.spectrum_size:
                raise InvalidInputError(
                    f"Incorrect periodogram size ({np.size(psd)}) for Welch ({self.spectrum_size})"
                )

        stacked = np.asarray(periodograms, dtype=np.float64)
        return np.mean(stacked, axis=0)


class Energy:
    """
    Broadband energy and Sound Pressure Level.

    The raw energy of a segment is identical whether it is computed from
    the samples, from the full FFT (Parseval) or from a one-sided PSD
    normalized with 1 / nfft.
    """

    def __init__(self, nfft: int):
        if int(nfft) != nfft or nfft < 1:
            raise InvalidInputError(f"nfft must be a positive integer, got: {nfft}")
        self.nfft = int(nfft)
        self.spectrum_size = self.nfft // 2 + 1
        self._weights = _one_sided_weights(self.nfft)

    def compute_raw_from_signal(self, data: np.ndarray) -> float:
        """Sum of squared samples."""
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 1 or data.shape[0] != self.nfft:
            raise InvalidInputError(
                f"Incorrect signal size ({data.size}) for Energy ({self.nfft})"
            )
        return float(np.sum(data ** 2))

    def compute_raw_from_fft(self, fft: np.ndarray) -> float:
        """Energy of an interleaved spectrum of length 2 * nfft."""
        magnitudes = _squared_magnitudes(fft, self.nfft)
        return float(np.sum(magnitudes * self._weights) / self.nfft)

    def compute_raw_from_psd(self, spectrum: np.ndarray) -> float:
        """Sum of all bins of a one-sided spectrum."""
        spectrum = np.asarray(spectrum, dtype=np.float64)
        if spectrum.ndim != 1 or spectrum.shape[0] != self.spectrum_size:
            raise InvalidInputError(
                f"Incorrect PSD size ({spectrum.size}) for Energy ({self.spectrum_size})"
            )
        return float(np.sum(spectrum))

    def compute_spl_from_signal(
        self,
        data: np.ndarray,
        v_adc: float = 1.0,
        micro_sensitivity: float = 0.0,
        gain: float = 0.0,
    ) -> float:
        """SPL in dB from the samples of a segment."""
        offset = log_normalization(v_adc, micro_sensitivity, gain)
        return float(10 * np.log10(self.compute_raw_from_signal(data)) - offset)

    def compute_spl_from_fft(
        self,
        fft: np.ndarray,
        v_adc: float = 1.0,
        micro_sensitivity: float = 0.0,
        gain: float = 0.0,
    ) -> float:
        """SPL in dB from a full interleaved spectrum."""
        offset = log_normalization(v_adc, micro_sensitivity, gain)
        return float(10 * np.log10(self.compute_raw_from_fft(fft)) - offset)

    def compute_spl_from_psd(
        self,
        spectrum: np.ndarray,
        v_adc: float = 1.0,
        micro_sensitivity: float = 0.0,
        gain: float = 0.0,
    ) -> float:
        """
        SPL in dB from a one-sided power spectrum.

        Args:
            spectrum: One-sided PSD or Welch estimate, length nfft // 2 + 1
            v_adc: ADC peak voltage in volts
            micro_sensitivity: Sensitivity in dB
            gain: Gain in dB

        Returns:
            10 * log10(sum(spectrum)) minus the calibration offset
        """
        offset = log_normalization(v_adc, micro_sensitivity, gain)
        return float(10 * np.log10(self.compute_raw_from_psd(spectrum)) - offset)
