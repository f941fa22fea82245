"""
Utility module for acoustic_engine.

Helpers shared by the processing core and the workflow.
"""

from .formatting import (
    format_time,
    format_frequency,
    format_db,
    format_sample_rate,
)

__all__ = [
    "format_time",
    "format_frequency",
    "format_db",
    "format_sample_rate",
]
