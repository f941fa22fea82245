"""
Formatting helpers for log messages and band labels.

Converts numeric values into readable strings.
"""


def format_time(seconds: float) -> str:
    """
    Format a time offset.

    Returns:
        Formatted string (e.g. "1:23.456")
    """
    if seconds < 0:
        sign = "-"
        seconds = abs(seconds)
    else:
        sign = ""

    minutes = int(seconds // 60)
    secs = seconds % 60

    return f"{sign}{minutes}:{secs:06.3f}"


def format_frequency(hz: float) -> str:
    """
    Format a frequency.

    Three significant digits are enough to tell third-octave bands apart.

    Returns:
        Formatted string (e.g. "1.58 kHz", "25.1 Hz" or "250 Hz")
    """
    if hz >= 1000:
        return f"{hz / 1000:.3g} kHz"
    else:
        return f"{hz:.3g} Hz"


def format_db(db: float, precision: int = 1) -> str:
    """
    Format a level in dB.

    Returns:
        Formatted string (e.g. "-12.3 dB")
    """
    if db == float('-inf'):
        return "-∞ dB"
    return f"{db:.{precision}f} dB"


def format_sample_rate(sr: float) -> str:
    """
    Format a sampling rate.

    Returns:
        Formatted string (e.g. "44.1 kHz" or "48 kHz")
    """
    if sr % 1000 == 0:
        return f"{int(sr) // 1000} kHz"
    else:
        return f"{sr / 1000:.1f} kHz"
