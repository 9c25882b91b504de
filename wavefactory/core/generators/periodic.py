# wavefactory/core/generators/periodic.py
"""
Contains the generator for standard periodic waveforms like sine,
square, sawtooth, and triangle.
"""
from typing import Optional

import numpy as np

from wavefactory.config.constants import AUDIO_SAMPLE_RATE
from wavefactory.core.audio_math import WaveShape, calculate_fade_envelope
from wavefactory.core.generators.base import (
    ShapeLike, WaveformGeneratorBase, WaveformSpec
)


class PeriodicGenerator(WaveformGeneratorBase):
    """
    Generates fixed-length buffers of the standard periodic waveforms (sine,
    square, sawtooth, triangle) with a linear fade-in/fade-out envelope.
    """
    def __init__(self, sample_rate: int = AUDIO_SAMPLE_RATE,
                 fade_ratio: float = 0.0):
        """
        Initializes the PeriodicGenerator.

        Args:
            sample_rate: The sample rate used when a call does not give one.
            fade_ratio: The envelope ratio the per-shape helpers use when a
                call does not give one.
        """
        super().__init__(sample_rate)
        self.fade_ratio = fade_ratio

    @classmethod
    def from_settings(cls, settings: dict) -> 'PeriodicGenerator':
        """Builds a generator from a validated settings dictionary."""
        return cls(sample_rate=settings.get('sample_rate', AUDIO_SAMPLE_RATE),
                   fade_ratio=settings.get('fade_ratio', 0.0))

    def _synthesize(self, shape: WaveShape, spec: WaveformSpec) -> np.ndarray:
        """
        Evaluates the shape at every index and applies the edge envelope.
        """
        num_samples = spec.num_samples
        block = self.sample_function(shape, spec.frequency, spec.sample_rate,
                                     num_samples)
        if spec.fade_ratio > 0:
            block *= calculate_fade_envelope(num_samples, spec.fade_ratio)
        return block

    def generate(self, shape: ShapeLike, spec: WaveformSpec) -> np.ndarray:
        """
        Generates a float sample buffer of floor(duration * sample_rate)
        samples.

        Args:
            shape: The waveform shape, as a WaveShape or its name.
            spec: The tone parameters.

        Returns:
            A float32 NumPy array.

        Raises:
            WaveformValidationError: If the spec violates a constraint. No
                buffer is allocated in that case.
        """
        return self.render(shape, spec)

    def generate_pcm(self, shape: ShapeLike, spec: WaveformSpec) -> bytes:
        """
        Generates the same buffer as generate() as 16-bit little-endian PCM,
        exactly 2 * floor(duration * sample_rate) bytes long.
        """
        return self.render_pcm(shape, spec)

    def _spec(self, frequency: float, duration: float,
              sample_rate: Optional[int],
              fade_ratio: Optional[float]) -> WaveformSpec:
        if fade_ratio is None:
            fade_ratio = self.fade_ratio
        return WaveformSpec(frequency, duration,
                            self._resolve_sample_rate(sample_rate), fade_ratio)

    def sine_tone(self, frequency: float, duration: float,
                  fade_ratio: Optional[float] = None,
                  sample_rate: Optional[int] = None) -> np.ndarray:
        """Generates a sine tone with an optional edge envelope."""
        return self.generate(WaveShape.SINE, self._spec(
            frequency, duration, sample_rate, fade_ratio))

    def square_wave(self, frequency: float, duration: float,
                    fade_ratio: Optional[float] = None,
                    sample_rate: Optional[int] = None) -> np.ndarray:
        """Generates a square wave; unenveloped values are -1, 0 or 1."""
        return self.generate(WaveShape.SQUARE, self._spec(
            frequency, duration, sample_rate, fade_ratio))

    def triangle_wave(self, frequency: float, duration: float,
                      fade_ratio: Optional[float] = None,
                      sample_rate: Optional[int] = None) -> np.ndarray:
        return self.generate(WaveShape.TRIANGLE, self._spec(
            frequency, duration, sample_rate, fade_ratio))

    def sawtooth_wave(self, frequency: float, duration: float,
                      fade_ratio: Optional[float] = None,
                      sample_rate: Optional[int] = None) -> np.ndarray:
        return self.generate(WaveShape.SAWTOOTH, self._spec(
            frequency, duration, sample_rate, fade_ratio))
