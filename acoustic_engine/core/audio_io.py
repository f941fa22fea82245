"""
Audio I/O Module

Loads WAV recordings and cuts them into fixed-duration records.

Technical assumptions:
- WAV files are loaded with soundfile (high precision, no conversion)
- Audio data is returned as float64 numpy arrays (range -1.0 to 1.0)
- Records hold all channels as a (channels, samples) array
- The last, incomplete record is skipped, zero-filled or rejected
  according to the caller's choice
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

import numpy as np
import soundfile as sf

from ..utils.formatting import format_sample_rate, format_time
from .errors import InvalidInputError

logger = logging.getLogger(__name__)


LastRecordAction = Literal["skip", "fill", "fail"]


@dataclass
class AudioFile:
    """
    A loaded recording with its metadata.

    Attributes:
        data: Audio data, Shape: (samples,) or (samples, channels)
        sample_rate: Sample rate of the file
        channels: Number of channels
        num_samples: Number of samples per channel
        file_path: Path to source file
        format_info: Format information (Subtype, Endianness)
        bit_depth: Bit depth of original (if known)
    """
    data: np.ndarray
    sample_rate: int
    channels: int
    num_samples: int
    file_path: Path
    format_info: dict = field(default_factory=dict)
    bit_depth: Optional[int] = None

    def __post_init__(self):
        """Validate data integrity."""
        if self.data.ndim == 1:
            if self.channels != 1:
                raise ValueError("1D array must be mono")
        elif self.data.ndim == 2:
            if self.data.shape[1] != self.channels:
                raise ValueError("Channel count mismatch")
        else:
            raise ValueError("Audio array must be 1D or 2D")

    @property
    def duration_seconds(self) -> float:
        """Duration in seconds."""
        return self.num_samples / self.sample_rate

    def channels_first(self) -> np.ndarray:
        """Audio data as a (channels, samples) array."""
        if self.data.ndim == 1:
            return self.data[np.newaxis, :]
        return self.data.T


@dataclass(frozen=True)
class Record:
    """
    A fixed-duration slice of a recording.

    Attributes:
        offset_seconds: Start of the record relative to the file start
        channels: Samples, Shape: (channels, record_size)
    """
    offset_seconds: float
    channels: np.ndarray


def load_audio(file_path: str | Path) -> AudioFile:
    """
    Load a WAV file without implicit conversion.

    Raises:
        FileNotFoundError: File does not exist
        ValueError: Unsupported format
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    if path.suffix.lower() != ".wav":
        raise ValueError(f"Unsupported format: {path.suffix}")

    data, sample_rate = sf.read(path, dtype='float64', always_2d=False)
    info = sf.info(path)

    if data.ndim == 1:
        channels = 1
        num_samples = len(data)
    else:
        num_samples, channels = data.shape

    audio = AudioFile(
        data=data,
        sample_rate=sample_rate,
        channels=channels,
        num_samples=num_samples,
        file_path=path,
        format_info={
            "format": info.format,
            "subtype": info.subtype,
            "endian": info.endian,
        },
        bit_depth=_extract_bit_depth(info.subtype),
    )

    logger.info(
        "Loaded %s: %d channel(s), %s, %s, %s (%s bit)",
        path.name, channels, format_sample_rate(sample_rate),
        format_time(audio.duration_seconds), audio.format_info["subtype"],
        audio.bit_depth if audio.bit_depth is not None else "?",
    )
    return audio


def split_records(
    audio: AudioFile,
    record_duration: float,
    last_record_action: LastRecordAction = "skip",
) -> list[Record]:
    """
    Cut a recording into records of `record_duration` seconds.

    Args:
        audio: Loaded recording
        record_duration: Record duration in seconds; sample_rate *
            record_duration must be a whole number of samples
        last_record_action: What to do with an incomplete last record:
            "skip" drops it, "fill" pads it with zeros, "fail" raises

    Returns:
        Records in time order
    """
    if last_record_action not in ("skip", "fill", "fail"):
        raise InvalidInputError(f"Unknown last record action: {last_record_action}")

    exact_size = audio.sample_rate * record_duration
    record_size = int(round(exact_size))
    # float durations such as 0.1 s are not exact, tolerate rounding noise
    if record_size <= 0 or abs(exact_size - record_size) > 1e-6:
        raise InvalidInputError(
            f"Computed record size {exact_size} should be a positive whole number of samples"
        )

    samples = audio.channels_first()
    full_records, remainder = divmod(audio.num_samples, record_size)

    records = [
        Record(
            offset_seconds=i * record_size / audio.sample_rate,
            channels=samples[:, i * record_size:(i + 1) * record_size].copy(),
        )
        for i in range(full_records)
    ]

    if remainder:
        start = full_records * record_size
        offset = start / audio.sample_rate
        if last_record_action == "fail":
            raise InvalidInputError(
                f"Partial record of {remainder} samples at {format_time(offset)}"
            )
        if last_record_action == "fill":
            partial = np.zeros((audio.channels, record_size), dtype=np.float64)
            partial[:, :remainder] = samples[:, start:]
            records.append(Record(offset_seconds=offset, channels=partial))
            logger.warning("Zero-filled partial record at %s", format_time(offset))
        else:
            logger.warning(
                "Skipped partial record of %d samples at %s", remainder, format_time(offset)
            )

    return records


def _extract_bit_depth(subtype: str) -> Optional[int]:
    """Extract bit depth from soundfile subtype string."""
    bit_depth_map = {
        "PCM_16": 16,
        "PCM_24": 24,
        "PCM_32": 32,
        "FLOAT": 32,
        "DOUBLE": 64,
        "PCM_S8": 8,
        "PCM_U8": 8,
    }
    return bit_depth_map.get(subtype)
