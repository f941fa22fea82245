"""
FFT Module

Full two-sided discrete Fourier transform of fixed-size real segments.

Output layout:
- 2 * nfft values, real and imaginary parts interleaved
  [re_0, im_0, re_1, im_1, ..., re_{nfft-1}, im_{nfft-1}]
- scipy.fft is the trusted forward transform
"""

import logging

import numpy as np
from scipy import fft as sp_fft

from .errors import InvalidInputError

logger = logging.getLogger(__name__)


class FFT:
    """
    Forward FFT over segments of exactly nfft real samples.

    Usage:
        fft = FFT(nfft=1024)
        spectrum = fft.compute(segment)   # len(spectrum) == 2048
    """

    def __init__(self, nfft: int):
        if int(nfft) != nfft or nfft < 1:
            raise InvalidInputError(f"nfft must be a positive integer, got: {nfft}")
        self.nfft = int(nfft)
        logger.debug("FFT configured with nfft=%d", self.nfft)

    def compute(self, segment: np.ndarray) -> np.ndarray:
        """
        Compute the complex spectrum of a real segment.

        Args:
            segment: Real samples, length nfft

        Returns:
            Interleaved real/imaginary spectrum, length 2 * nfft

        Raises:
            InvalidInputError: Segment length differs from nfft
        """
        segment = np.asarray(segment, dtype=np.float64)
        if segment.ndim != 1 or segment.shape[0] != self.nfft:
            raise InvalidInputError(
                f"Incorrect signal length ({segment.size}) for FFT ({self.nfft})"
            )

        spectrum = sp_fft.fft(segment)

        result = np.empty(2 * self.nfft, dtype=np.float64)
        result[0::2] = spectrum.real
        result[1::2] = spectrum.imag
        return result
