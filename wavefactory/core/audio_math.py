# wavefactory/core/audio_math.py
"""
Contains pure, stateless mathematical and signal processing helper functions
for waveform synthesis, envelopes, silence and mixing.
"""
import math
from enum import Enum

import numpy as np

from wavefactory.core.errors import WaveformValidationError


class WaveShape(Enum):
    """The periodic waveform shapes the generators can render."""
    SINE = 'sine'
    SQUARE = 'square'
    TRIANGLE = 'triangle'
    SAWTOOTH = 'sawtooth'

    @classmethod
    def from_string(cls, name: str) -> 'WaveShape':
        """Convert a shape name to a WaveShape (case-insensitive)."""
        try:
            return cls(name.strip().lower())
        except (AttributeError, ValueError):
            raise WaveformValidationError(
                f"Unknown wave shape {name!r}; expected one of "
                f"{', '.join(s.value for s in cls)}.") from None


def calculate_phases(frequency: float, sample_rate: float,
                     num_samples: int, start_index: int = 0) -> np.ndarray:
    """
    Calculates the phase in radians at each sample index.

    Args:
        frequency: The waveform frequency in Hz.
        sample_rate: The sample rate in Hz.
        num_samples: The number of phases to calculate.
        start_index: The sample index of the first phase.

    Returns:
        A float64 NumPy array of 2*pi*frequency*i/sample_rate values.
    """
    indices = np.arange(start_index, start_index + num_samples,
                        dtype=np.float64)
    return 2 * np.pi * frequency * indices / sample_rate


def generate_wave_signal_normalized(shape: WaveShape,
                                    phases_rad: np.ndarray) -> np.ndarray:
    """
    Evaluates a normalized waveform from pre-calculated phases.

    The square wave is the sign of the sine, so it is exactly 0 wherever the
    sine is exactly 0. The sawtooth is evaluated at half phase, which gives
    it the same period as the other shapes.

    Args:
        shape: The waveform shape to evaluate.
        phases_rad: A NumPy array of phase values in radians.

    Returns:
        A float64 NumPy array containing the waveform values.
    """
    if shape is WaveShape.SINE:
        return np.sin(phases_rad)
    if shape is WaveShape.SQUARE:
        return np.sign(np.sin(phases_rad))
    if shape is WaveShape.TRIANGLE:
        return (2 / np.pi) * np.arcsin(np.sin(phases_rad))
    if shape is WaveShape.SAWTOOTH:
        return (2 / np.pi) * np.arctan(np.tan(phases_rad / 2))
    raise WaveformValidationError(f"Unsupported wave shape: {shape!r}")


def calculate_ramp_samples(num_samples: int, fade_ratio: float) -> int:
    """Returns round(num_samples * fade_ratio), rounding halves up."""
    return int(math.floor(num_samples * fade_ratio + 0.5))


def calculate_fade_envelope(num_samples: int,
                            fade_ratio: float) -> np.ndarray:
    """
    Builds a linear fade-in/fade-out envelope.

    With R ramp samples, index i < R is scaled by i/R and index
    i >= num_samples - R by (num_samples - i)/R. When the two regions would
    overlap (odd lengths at the maximum ratio) the fade-in takes precedence.

    Args:
        num_samples: The length of the buffer the envelope is applied to.
        fade_ratio: The fraction of the buffer spent on each ramp.

    Returns:
        A float64 NumPy array of gain values, all ones when R is 0.
    """
    envelope = np.ones(num_samples, dtype=np.float64)
    ramp = calculate_ramp_samples(num_samples, fade_ratio)
    if ramp <= 0:
        return envelope

    indices = np.arange(num_samples, dtype=np.float64)
    envelope[:ramp] = indices[:ramp] / ramp
    fade_out_start = max(ramp, num_samples - ramp)
    envelope[fade_out_start:] = (num_samples - indices[fade_out_start:]) / ramp
    return envelope


def generate_silence(duration: float, sample_rate: int) -> np.ndarray:
    """
    Generates a block of silence.

    Unlike the waveform generators, which round the sample count down,
    silence rounds up: ceil(duration * sample_rate) samples.

    Args:
        duration: Length of the silence in seconds.
        sample_rate: The sample rate in Hz.

    Returns:
        A float32 NumPy array of zeros.
    """
    num_samples = max(0, int(math.ceil(duration * sample_rate)))
    return np.zeros(num_samples, dtype=np.float32)


def generate_silence_pcm(duration: float, sample_rate: int) -> bytes:
    """Generates silence as 16-bit PCM, two zero bytes per sample."""
    return bytes(2 * len(generate_silence(duration, sample_rate)))


def mix_waves(source, destination, offset: int = 0):
    """
    Mixes a sound into another in place via addition and hyperbolic tangent
    compression.

    If the full length of the source cannot fit into the destination at the
    given offset, the source is truncated. The destination is never resized.

    Args:
        source: The samples to mix in.
        destination: The buffer to mix into, modified in place.
        offset: The destination index at which the source starts.

    Returns:
        The destination buffer.
    """
    if offset < 0:
        raise WaveformValidationError(
            f"Mix offset must be >= 0, got {offset}.")

    writeable_samples = min(len(source), len(destination) - offset)
    if writeable_samples <= 0:
        return destination

    end = offset + writeable_samples
    summed = (np.asarray(source[:writeable_samples], dtype=np.float64)
              + np.asarray(destination[offset:end], dtype=np.float64))
    destination[offset:end] = np.tanh(summed)
    return destination
