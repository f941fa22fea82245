"""
Sample Workflow

Chains every stage of the processing core over the records of a recording:

    record -> Segmentation -> HammingWindow -> FFT -> Periodogram
           -> WelchSpectralDensity -> {SPL, TOL}

Stages are built once per workflow and shared by every record and channel.
Periodograms are normalized as densities of the windowed segments:
1 / (fs * sum(window**2)).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from .core.audio_io import LastRecordAction, Record, load_audio, split_records
from .core.calibration import Calibration
from .core.errors import InvalidInputError
from .core.fft import FFT
from .core.signal_processing import HammingWindow, Segmentation
from .core.spectral import Energy, Periodogram, WelchSpectralDensity
from .core.third_octave import TOL
from .utils.formatting import format_db, format_sample_rate, format_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowConfig:
    """
    Configuration of the sample workflow.

    Attributes:
        record_duration: Record duration in seconds
        segment_size: Samples per segment (<= nfft, zero-padded up to nfft)
        nfft: FFT size
        segment_offset: Stride between segments (default: segment_size)
        last_record_action: "skip", "fill" or "fail" for an incomplete last record
        low_freq: Low limit of the TOL study range (None: lowest band)
        high_freq: High limit of the TOL study range (None: Nyquist)
        calibration: Calibration applied to SPL and TOL
    """
    record_duration: float
    segment_size: int
    nfft: int
    segment_offset: Optional[int] = None
    last_record_action: LastRecordAction = "skip"
    low_freq: Optional[float] = None
    high_freq: Optional[float] = None
    calibration: Calibration = field(default_factory=Calibration)

    def __post_init__(self):
        if not self.record_duration > 0:
            raise InvalidInputError(
                f"Record duration must be positive, got: {self.record_duration}"
            )
        if self.segment_size < 1 or self.nfft < 1:
            raise InvalidInputError("Segment size and nfft must be positive")
        if self.segment_size > self.nfft:
            raise InvalidInputError(
                f"Segment size ({self.segment_size}) must not be greater than nfft ({self.nfft})"
            )
        if self.segment_offset is not None and self.segment_offset < 1:
            raise InvalidInputError("Segment offset must be positive")


@dataclass
class WorkflowResult:
    """
    Features of every record, in record order.

    Attributes:
        offsets: Record start times in seconds
        ffts: Per record, Shape: (channels, segments, 2 * nfft)
        periodograms: Per record, Shape: (channels, segments, nfft // 2 + 1)
        welchs: Per record, Shape: (channels, nfft // 2 + 1)
        spls: Per record, Shape: (channels,)
        tols: Per record, Shape: (channels, bands); empty when nfft < fs
            (zero bands when no complete band lies below Nyquist)
        tol_bounds: Band edges of the TOL columns
    """
    offsets: list[float] = field(default_factory=list)
    ffts: list[np.ndarray] = field(default_factory=list)
    periodograms: list[np.ndarray] = field(default_factory=list)
    welchs: list[np.ndarray] = field(default_factory=list)
    spls: list[np.ndarray] = field(default_factory=list)
    tols: list[np.ndarray] = field(default_factory=list)
    tol_bounds: tuple = ()

    def __len__(self) -> int:
        return len(self.offsets)


class SampleWorkflow:
    """
    Computes all basic features of a recording.

    Usage:
        config = WorkflowConfig(record_duration=1.0, segment_size=16000, nfft=16000)
        result = SampleWorkflow(config).run("recording.wav")
    """

    def __init__(self, config: WorkflowConfig):
        self.config = config
        self.segmentation = Segmentation(config.segment_size, config.segment_offset)
        self.hamming = HammingWindow(config.segment_size, "symmetric")
        self.fft = FFT(config.nfft)
        self.energy = Energy(config.nfft)

    def _build_stages(self, sampling_rate: float):
        """Stages that depend on the sampling rate."""
        periodogram = Periodogram(
            self.config.nfft,
            1.0 / (sampling_rate * self.hamming.normalization_factor),
        )
        welch = WelchSpectralDensity(self.config.nfft, sampling_rate)

        tol = None
        if self.config.nfft >= sampling_rate:
            tol = TOL(
                self.config.nfft,
                sampling_rate,
                self.config.low_freq,
                self.config.high_freq,
            )
        else:
            logger.info(
                "nfft (%d) shorter than one second at %s, TOL not computed",
                self.config.nfft, format_sample_rate(sampling_rate),
            )
        return periodogram, welch, tol

    def _process_channel(self, samples, periodogram, welch, tol):
        segments = self.segmentation.compute(samples)
        pad = self.config.nfft - self.config.segment_size

        ffts = []
        for segment in segments:
            windowed = self.hamming.compute(segment)
            if pad:
                windowed = np.pad(windowed, (0, pad))
            ffts.append(self.fft.compute(windowed))

        periodograms = [periodogram.compute(fft) for fft in ffts]
        averaged = welch.compute(periodograms)
        spl = self.energy.compute_spl_from_psd(averaged, **self.config.calibration.as_kwargs())
        levels = None
        if tol is not None:
            levels = tol.compute(averaged, **self.config.calibration.as_kwargs())
        return np.array(ffts), np.array(periodograms), averaged, spl, levels

    def apply(self, records: Sequence[Record], sampling_rate: float) -> WorkflowResult:
        """
        Run the processing chain over records.

        Args:
            records: Records of one recording
            sampling_rate: Sampling rate in Hz

        Returns:
            WorkflowResult with one entry per record
        """
        periodogram, welch, tol = self._build_stages(sampling_rate)
        result = WorkflowResult(tol_bounds=tol.bounds if tol is not None else ())

        for record in records:
            record_size = record.channels.shape[1]
            if self.segmentation.num_segments(record_size) == 0:
                raise InvalidInputError(
                    f"Record of {record_size} samples is shorter than one segment "
                    f"({self.config.segment_size})"
                )

            per_channel = [
                self._process_channel(samples, periodogram, welch, tol)
                for samples in record.channels
            ]
            ffts, periodograms, welchs, spls, tols = zip(*per_channel)

            result.offsets.append(record.offset_seconds)
            result.ffts.append(np.stack(ffts))
            result.periodograms.append(np.stack(periodograms))
            result.welchs.append(np.stack(welchs))
            result.spls.append(np.array(spls))
            if tol is not None:
                result.tols.append(np.stack(tols))

            logger.debug(
                "Record at %s: SPL %s",
                format_time(record.offset_seconds),
                ", ".join(format_db(spl) for spl in spls),
            )

        logger.info("Processed %d records", len(result))
        return result

    def run(self, file_path: str | Path) -> WorkflowResult:
        """Load a WAV file, split it into records and process them."""
        audio = load_audio(file_path)
        records = split_records(
            audio,
            self.config.record_duration,
            self.config.last_record_action,
        )
        return self.apply(records, audio.sample_rate)
