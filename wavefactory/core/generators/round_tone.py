# wavefactory/core/generators/round_tone.py
"""
Contains the generator for loopable "round" tones: tones of at least a
minimum duration that end just before an upward zero crossing, so that
consecutive copies tile without a click.
"""
import logging
from typing import Optional

import numpy as np

from wavefactory.config.constants import (
    AUDIO_SAMPLE_RATE, ROUND_TONE_PRECISION
)
from wavefactory.core.audio_math import WaveShape
from wavefactory.core.errors import (
    CrossoverNotFoundError, WaveformValidationError
)
from wavefactory.core.generators.base import (
    ShapeLike, WaveformGeneratorBase, WaveformSpec, coerce_shape
)
from wavefactory.core.pcm_codec import samples_to_pcm16

LOOPABLE_SHAPES = (WaveShape.SINE, WaveShape.SQUARE)


class RoundToneGenerator(WaveformGeneratorBase):
    """
    Generates sine or square tones cut at an upward zero crossing.

    The search window is twice the minimum duration. Starting at the
    minimum-duration boundary, the first negative-to-non-negative transition
    is kept as a fallback cut point. For sine tones the search continues to a
    transition that lands within `precision` of zero, which gives a smoother
    splice; square crossings are already exact, so the first one is used.
    """
    def __init__(self, sample_rate: int = AUDIO_SAMPLE_RATE,
                 precision: float = ROUND_TONE_PRECISION):
        """
        Initializes the RoundToneGenerator.

        Args:
            sample_rate: The sample rate used when a call does not give one.
            precision: The largest non-negative value that counts as an
                exact zero crossing for sine tones.
        """
        super().__init__(sample_rate)
        self.precision = precision

    def find_crossover(self, shape: WaveShape, values: np.ndarray,
                       start_index: int) -> tuple[int, int]:
        """
        Searches a block of raw waveform values for upward zero crossings.

        Args:
            shape: The shape the values were generated from.
            values: The raw waveform over the whole search window.
            start_index: The first index a crossing may land on.

        Returns:
            A tuple of (first_crossover_index, proper_crossover_index), where
            the proper index is 0 when no precise crossing was found.

        Raises:
            CrossoverNotFoundError: If the window holds no upward crossing.
        """
        start_index = max(start_index, 1)
        previous = values[start_index - 1:-1]
        current = values[start_index:]
        crossings = np.flatnonzero((previous < 0) & (current >= 0))
        if crossings.size == 0:
            raise CrossoverNotFoundError(
                f"No upward zero crossing between samples {start_index} and "
                f"{len(values)}; the search window is too short.")
        crossings += start_index

        first_crossover_index = int(crossings[0])
        proper_crossover_index = 0
        if shape is WaveShape.SINE:
            precise = crossings[values[crossings] <= self.precision]
            if precise.size:
                proper_crossover_index = int(precise[0])
        return first_crossover_index, proper_crossover_index

    def _synthesize(self, shape: WaveShape, spec: WaveformSpec) -> np.ndarray:
        if shape not in LOOPABLE_SHAPES:
            raise WaveformValidationError(
                f"Round tones support sine and square shapes, "
                f"not {shape.value}.")

        min_samples = spec.num_samples
        window = self.sample_function(shape, spec.frequency,
                                      spec.sample_rate, 2 * min_samples)
        first, proper = self.find_crossover(shape, window, min_samples)
        if shape is WaveShape.SINE and not proper:
            logging.debug("Round tone %.3f Hz: no crossing within %.4f of "
                          "zero, cutting at first crossover %d.",
                          spec.frequency, self.precision, first)
        return window[:max(first, proper)]

    def generate_round_tone(self, shape: ShapeLike, frequency: float,
                            min_duration: float,
                            sample_rate: Optional[int] = None,
                            amplitude: float = 1.0) -> np.ndarray:
        """
        Generates a loopable tone of at least `min_duration` seconds.

        The result always starts at phase 0 and has no envelope.

        Args:
            shape: WaveShape.SINE or WaveShape.SQUARE, or their names.
            frequency: Tone frequency in Hz.
            min_duration: The minimum tone length in seconds.
            sample_rate: The sample rate in Hz; defaults to the generator's.
            amplitude: Plateau level of square tones, clamped to [0, 1].
                Sine tones are always full-scale and ignore it.

        Returns:
            A float32 NumPy array.

        Raises:
            WaveformValidationError: If the shape or parameters are invalid.
            CrossoverNotFoundError: If no crossing fits in the window.
        """
        return self._render_round_tone(shape, frequency, min_duration,
                                       sample_rate, amplitude).astype(np.float32)

    def generate_round_tone_pcm(self, shape: ShapeLike, frequency: float,
                                min_duration: float,
                                sample_rate: Optional[int] = None,
                                amplitude: float = 1.0) -> bytes:
        """Same as generate_round_tone(), quantized to 16-bit PCM."""
        return samples_to_pcm16(self._render_round_tone(
            shape, frequency, min_duration, sample_rate, amplitude))

    def _render_round_tone(self, shape: ShapeLike, frequency: float,
                           min_duration: float, sample_rate: Optional[int],
                           amplitude: float) -> np.ndarray:
        shape = coerce_shape(shape)
        spec = WaveformSpec(frequency, min_duration,
                            self._resolve_sample_rate(sample_rate))
        tone = self.render_raw(shape, spec)
        if shape is WaveShape.SQUARE:
            tone *= min(1.0, max(0.0, float(amplitude)))
        return tone

    def round_sine_tone(self, frequency: float, min_duration: float,
                        sample_rate: Optional[int] = None) -> np.ndarray:
        return self.generate_round_tone(WaveShape.SINE, frequency,
                                        min_duration, sample_rate)

    def round_square_wave(self, frequency: float, min_duration: float,
                          sample_rate: Optional[int] = None,
                          amplitude: float = 1.0) -> np.ndarray:
        return self.generate_round_tone(WaveShape.SQUARE, frequency,
                                        min_duration, sample_rate, amplitude)
