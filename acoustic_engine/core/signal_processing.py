"""
Segmentation and Windowing

Prepares raw records for the FFT stage.

Technical assumptions:
- Segmentation uses a strided sliding window, the result is always a copy
- A trailing partial window (shorter than segment_size) is dropped
- Hamming coefficients come from scipy.signal.windows.hamming
- Coefficients and their energy are computed once at construction
"""

import logging
from typing import Literal, Optional

import numpy as np
from scipy import signal

from .errors import InvalidInputError

logger = logging.getLogger(__name__)


class Segmentation:
    """
    Slices a long signal into fixed-size, possibly overlapping windows.

    The stride between two window starts is `offset`. With the default
    offset (= segment_size) windows are contiguous; a smaller offset
    makes them overlap.

    Partial trailing window: dropped. For a signal of length n the window
    count is 0 if n < segment_size, else (n - segment_size) // offset + 1.

    Usage:
        seg = Segmentation(segment_size=1024, offset=512)
        windows = seg.compute(record)   # shape (n_windows, 1024)
    """

    def __init__(self, segment_size: int, offset: Optional[int] = None):
        if int(segment_size) != segment_size or segment_size < 1:
            raise InvalidInputError(
                f"Segment size must be a positive integer, got: {segment_size}"
            )
        if offset is None:
            offset = segment_size
        if int(offset) != offset or offset < 1:
            raise InvalidInputError(f"Offset must be a positive integer, got: {offset}")

        self.segment_size = int(segment_size)
        self.offset = int(offset)

    def num_segments(self, signal_length: int) -> int:
        """Number of complete windows produced for a signal of this length."""
        if signal_length < self.segment_size:
            return 0
        return (signal_length - self.segment_size) // self.offset + 1

    def compute(self, data: np.ndarray) -> np.ndarray:
        """
        Segment a 1D signal.

        Args:
            data: Real signal (1D), any length

        Returns:
            Segments, Shape: (n_windows, segment_size)
        """
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 1:
            raise InvalidInputError("Segmentation requires a 1D signal (single channel)")

        count = self.num_segments(data.shape[0])
        if count == 0:
            return np.empty((0, self.segment_size), dtype=np.float64)

        windows = np.lib.stride_tricks.sliding_window_view(data, self.segment_size)
        return windows[::self.offset][:count].copy()


class HammingWindow:
    """
    Hamming window of fixed length.

    Window properties:
    - symmetric: classic filter-design window, w[0] == w[-1]
    - periodic: DFT-even window for spectral analysis (length + 1, last dropped)

    Attributes:
        length: Number of coefficients
        symmetry: "symmetric" or "periodic"
        window_coefficients: Read-only coefficient array
        normalization_factor: Sum of squared coefficients
    """

    def __init__(
        self,
        length: int,
        symmetry: Literal["symmetric", "periodic"] = "symmetric",
    ):
        if int(length) != length or length < 1:
            raise InvalidInputError(f"Window length must be a positive integer, got: {length}")
        if symmetry not in ("symmetric", "periodic"):
            raise InvalidInputError(f"Unknown window symmetry: {symmetry}")

        self.length = int(length)
        self.symmetry = symmetry

        coefficients = signal.windows.hamming(self.length, sym=(symmetry == "symmetric"))
        coefficients.setflags(write=False)
        self.window_coefficients = coefficients
        self.normalization_factor = float(np.sum(coefficients ** 2))

        logger.debug(
            "Hamming window: length=%d, symmetry=%s, energy=%.6f",
            self.length, self.symmetry, self.normalization_factor,
        )

    def compute(self, segment: np.ndarray) -> np.ndarray:
        """
        Apply the window to a segment.

        Returns:
            Windowed segment (new array)
        """
        segment = np.asarray(segment, dtype=np.float64)
        if segment.ndim != 1 or segment.shape[0] != self.length:
            raise InvalidInputError(
                f"Incorrect segment length ({segment.size}) for Hamming window ({self.length})"
            )
        return segment * self.window_coefficients
