# wavefactory/core/generators/base.py
"""
Defines the waveform parameter set and the abstract base class for all
waveform generators.
"""
import math
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from wavefactory.config.constants import AUDIO_SAMPLE_RATE, MAX_FADE_RATIO
from wavefactory.core.audio_math import (
    WaveShape, calculate_phases, generate_wave_signal_normalized
)
from wavefactory.core.errors import WaveformValidationError
from wavefactory.core.pcm_codec import samples_to_pcm16

ShapeLike = Union[WaveShape, str]


@dataclass(frozen=True)
class WaveformSpec:
    """
    The parameters of a single generated tone.

    Attributes:
        frequency: Tone frequency in Hz, above 0 and at most Nyquist.
        duration: Duration (or minimum duration) in seconds, above 0.
        sample_rate: Sample rate in Hz, above 0.
        fade_ratio: Fraction of the buffer spent on each edge ramp, 0..0.5.
    """
    frequency: float
    duration: float
    sample_rate: int = AUDIO_SAMPLE_RATE
    fade_ratio: float = 0.0

    @property
    def num_samples(self) -> int:
        """The generated sample count, floor(duration * sample_rate)."""
        return int(math.floor(self.duration * self.sample_rate))

    def validate(self) -> 'WaveformSpec':
        """
        Checks every constraint, raising on the first violation.

        Comparisons are written so that NaN fails each of them.

        Returns:
            The spec itself, to allow chaining.

        Raises:
            WaveformValidationError: If any parameter is out of range.
        """
        for name in ('frequency', 'duration', 'sample_rate', 'fade_ratio'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise WaveformValidationError(
                    f"Waveform parameters must be numeric: {name} is "
                    f"{value!r}.")
        frequency = float(self.frequency)
        duration = float(self.duration)
        sample_rate = float(self.sample_rate)
        fade_ratio = float(self.fade_ratio)

        if not sample_rate > 0:
            raise WaveformValidationError(
                f"sample_rate must be > 0, got {self.sample_rate}.")
        if not frequency > 0:
            raise WaveformValidationError(
                f"frequency must be > 0, got {self.frequency}.")
        if not frequency <= sample_rate / 2:
            raise WaveformValidationError(
                f"frequency {self.frequency} Hz exceeds the Nyquist "
                f"frequency {sample_rate / 2} Hz.")
        if not duration > 0:
            raise WaveformValidationError(
                f"duration must be > 0, got {self.duration}.")
        if not 0.0 <= fade_ratio <= MAX_FADE_RATIO:
            raise WaveformValidationError(
                f"fade_ratio must be in [0, {MAX_FADE_RATIO}], "
                f"got {self.fade_ratio}.")
        return self


def coerce_shape(shape: ShapeLike) -> WaveShape:
    """Accepts a WaveShape or its name."""
    if isinstance(shape, WaveShape):
        return shape
    return WaveShape.from_string(shape)


class WaveformGeneratorBase(ABC):
    """
    An abstract base class for stateless waveform generators.

    This class handles the logic shared by all concrete generators: the
    default sample rate, evaluating the raw per-shape sample function and
    the final PCM quantization. Subclasses decide how many samples to render
    and which envelope, if any, to apply.
    """
    def __init__(self, sample_rate: int = AUDIO_SAMPLE_RATE):
        """
        Initializes the WaveformGeneratorBase instance.

        Args:
            sample_rate: The sample rate used when a call does not give one.
        """
        self.sample_rate = sample_rate

    @classmethod
    def from_settings(cls, settings: dict):
        """Builds a generator from a validated settings dictionary."""
        return cls(sample_rate=settings.get('sample_rate', AUDIO_SAMPLE_RATE))

    def _resolve_sample_rate(self, sample_rate: Optional[int]) -> int:
        return self.sample_rate if sample_rate is None else sample_rate

    @staticmethod
    def sample_function(shape: WaveShape, frequency: float,
                        sample_rate: int, num_samples: int,
                        start_index: int = 0) -> np.ndarray:
        """
        Evaluates the raw, unenveloped waveform at consecutive indices.

        Args:
            shape: The waveform shape.
            frequency: The waveform frequency in Hz.
            sample_rate: The sample rate in Hz.
            num_samples: The number of samples to evaluate.
            start_index: The index of the first sample.

        Returns:
            A float64 NumPy array of waveform values.
        """
        phases = calculate_phases(frequency, sample_rate, num_samples,
                                  start_index)
        return generate_wave_signal_normalized(shape, phases)

    @abstractmethod
    def _synthesize(self, shape: WaveShape, spec: WaveformSpec) -> np.ndarray:
        """
        Core synthesis method to be implemented by subclasses.

        The spec has already been validated. The result is a float64 array
        with any envelope or amplitude already applied.
        """
        raise NotImplementedError

    def render_raw(self, shape: ShapeLike, spec: WaveformSpec) -> np.ndarray:
        """
        Validates the spec and renders a double-precision sample buffer.

        Raises:
            WaveformValidationError: If the spec or shape is invalid.
        """
        shape = coerce_shape(shape)
        spec.validate()
        return self._synthesize(shape, spec)

    def render(self, shape: ShapeLike, spec: WaveformSpec) -> np.ndarray:
        """Validates the spec and renders a float32 sample buffer."""
        return self.render_raw(shape, spec).astype(np.float32)

    def render_pcm(self, shape: ShapeLike, spec: WaveformSpec) -> bytes:
        """
        Renders the same buffer as render() quantized to 16-bit PCM.

        Quantization reads the double-precision samples directly, so the
        float32 cast of the float variant never rounds a PCM value.
        """
        return samples_to_pcm16(self.render_raw(shape, spec))
