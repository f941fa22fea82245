"""
Error types of the processing core.

A single error kind covers every violated precondition
(wrong segment or spectrum length, out-of-range frequency bounds,
empty Welch input, analysis window shorter than one second).
"""


class InvalidInputError(ValueError):
    """Raised when a length, shape or range precondition is violated."""
