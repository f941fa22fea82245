"""
Frequency <-> Spectrum Index Conversion

Shared by every stage that works on one-sided spectra.

Technical assumptions:
- One-sided spectrum of nfft // 2 + 1 bins, bin k at k * fs / nfft
- Frequency to index truncates toward zero (bin containing the frequency)
- Indices are clamped to the valid bin range
"""

import numpy as np

from .errors import InvalidInputError


class FrequencyConvertible:
    """
    Mixin providing the affine frequency <-> bin mapping.

    Attributes:
        nfft: Transform size
        sampling_rate: Sampling rate in Hz
        spectrum_size: Number of one-sided bins (nfft // 2 + 1)
    """

    def __init__(self, nfft: int, sampling_rate: float):
        if int(nfft) != nfft or nfft < 1:
            raise InvalidInputError(f"nfft must be a positive integer, got: {nfft}")
        if not sampling_rate > 0:
            raise InvalidInputError(f"Sampling rate must be positive, got: {sampling_rate}")

        self.nfft = int(nfft)
        self.sampling_rate = float(sampling_rate)
        self.spectrum_size = self.nfft // 2 + 1

    def frequency_to_spectrum_index(self, freq: float) -> int:
        """Convert a frequency in Hz to the index of the bin holding it."""
        index = int(freq * self.nfft / self.sampling_rate)
        return max(0, min(index, self.spectrum_size - 1))

    def spectrum_index_to_frequency(self, index: int) -> float:
        """Convert a bin index to its frequency in Hz."""
        if index < 0 or index >= self.spectrum_size:
            raise InvalidInputError(
                f"Incorrect spectrum index ({index}) for spectrum of size {self.spectrum_size}"
            )
        return index * self.sampling_rate / self.nfft

    def frequency_vector(self) -> np.ndarray:
        """Frequencies of all one-sided bins in Hz."""
        return np.arange(self.spectrum_size) * self.sampling_rate / self.nfft
