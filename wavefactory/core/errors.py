# wavefactory/core/errors.py
"""
Exception types raised by the wavefactory core.

Validation failures, failed zero-crossing searches and decode failures are
kept as distinct types so callers can tell a rejected request apart from a
request that simply produced an empty result.
"""


class WaveFactoryError(Exception):
    """Base class for all wavefactory errors."""


class WaveformValidationError(WaveFactoryError, ValueError):
    """
    Raised before any synthesis when a generator or mixing parameter is
    outside its allowed range. The message names the failed constraint.
    """


class CrossoverNotFoundError(WaveFactoryError):
    """
    Raised when the round tone search window ends without an upward zero
    crossing.
    """


class WavDecodeError(WaveFactoryError):
    """
    Raised by decode_wav when a container holds no usable audio payload.
    The header parser itself never raises.
    """
