"""Tests for loopable round tones and the zero-crossing search."""

import math

import numpy as np
import pytest

from wavefactory.core.audio_math import WaveShape
from wavefactory.core.errors import CrossoverNotFoundError, WaveformValidationError
from wavefactory.core.generators.round_tone import RoundToneGenerator


@pytest.fixture
def generator():
    return RoundToneGenerator()


def raw_value(shape, frequency, sample_rate, index):
    value = math.sin(2 * math.pi * frequency * index / sample_rate)
    if shape is WaveShape.SQUARE:
        return float(np.sign(value))
    return value


class TestFindCrossover:
    def test_first_and_proper_crossings_for_sine(self, generator):
        values = np.array([0.0, -0.5, 0.3, -0.2, 0.004, -0.1, 0.001])
        assert generator.find_crossover(WaveShape.SINE, values, 1) == (2, 4)

    def test_square_has_no_precise_refinement(self, generator):
        values = np.array([0.0, -1.0, 1.0, -1.0, 0.0, -1.0, 1.0])
        assert generator.find_crossover(WaveShape.SQUARE, values, 1) == (2, 0)

    def test_search_starts_at_boundary(self, generator):
        values = np.array([0.0, -0.5, 0.3, -0.2, 0.4, -0.1, 0.002])
        assert generator.find_crossover(WaveShape.SINE, values, 3) == (4, 6)

    def test_no_crossing_raises(self, generator):
        with pytest.raises(CrossoverNotFoundError):
            generator.find_crossover(WaveShape.SINE, np.array([0.1, 0.2, 0.3, -0.1]), 1)

    def test_custom_precision(self):
        gen = RoundToneGenerator(precision=0.5)
        values = np.array([0.0, -0.5, 0.3, -0.2, 0.004])
        assert gen.find_crossover(WaveShape.SINE, values, 1) == (2, 2)


class TestRoundTone:
    @pytest.mark.parametrize("shape", [WaveShape.SINE, WaveShape.SQUARE])
    @pytest.mark.parametrize(
        "frequency,min_duration,sample_rate",
        [(440.0, 0.01, 44100), (1000.0, 0.05, 48000), (100.0, 0.01, 8000), (261.63, 0.1, 22050)],
    )
    def test_cut_lands_on_upward_crossing(self, generator, shape, frequency, min_duration, sample_rate):
        tone = generator.generate_round_tone(shape, frequency, min_duration, sample_rate)
        min_samples = math.floor(min_duration * sample_rate)
        assert min_samples <= len(tone) < 2 * min_samples
        assert tone[0] == 0.0
        assert tone[-1] < 0
        assert raw_value(shape, frequency, sample_rate, len(tone)) >= 0

    @pytest.mark.parametrize(
        "frequency,sample_rate",
        [(440.0, 44100), (1000.0, 48000), (123.4, 8000)],
    )
    def test_concatenation_has_no_click(self, generator, frequency, sample_rate):
        tone = generator.round_sine_tone(frequency, 0.05, sample_rate)
        looped = np.concatenate([tone, tone])
        splice_jump = abs(float(looped[len(tone)]) - float(looped[len(tone) - 1]))
        max_slope = 2 * math.pi * frequency / sample_rate
        assert splice_jump <= max_slope + 1e-6

    def test_output_starts_at_phase_zero(self, generator):
        tone = generator.round_sine_tone(440.0, 0.02, 44100)
        expected = np.sin(2 * np.pi * 440.0 * np.arange(len(tone)) / 44100)
        np.testing.assert_allclose(tone, expected, atol=1e-6)

    def test_square_amplitude_scales_plateaus(self, generator):
        tone = generator.round_square_wave(100.0, 0.01, 8000, amplitude=0.5)
        assert set(np.unique(tone)) <= {-0.5, 0.0, 0.5}
        assert np.max(tone) == 0.5

    def test_square_amplitude_is_clamped(self, generator):
        loud = generator.round_square_wave(100.0, 0.01, 8000, amplitude=3.0)
        silent = generator.round_square_wave(100.0, 0.01, 8000, amplitude=-1.0)
        assert np.max(loud) == 1.0
        assert np.all(silent == 0.0)
        assert len(silent) == len(loud)

    def test_sine_ignores_amplitude(self, generator):
        full = generator.generate_round_tone("sine", 440.0, 0.01, 44100)
        other = generator.generate_round_tone("sine", 440.0, 0.01, 44100, amplitude=0.1)
        np.testing.assert_array_equal(full, other)

    def test_pcm_variant_length(self, generator):
        tone = generator.generate_round_tone(WaveShape.SINE, 440.0, 0.01, 44100)
        pcm = generator.generate_round_tone_pcm(WaveShape.SINE, 440.0, 0.01, 44100)
        assert len(pcm) == 2 * len(tone)

    def test_pcm_variant_quantizes_double_precision_samples(self, generator):
        tone = generator.generate_round_tone(WaveShape.SINE, 440.0, 0.01, 44100)
        pcm = generator.generate_round_tone_pcm(WaveShape.SINE, 440.0, 0.01, 44100)
        phases = 2 * np.pi * 440.0 * np.arange(len(tone)) / 44100
        expected = np.clip(np.round(np.sin(phases) * 32768), -32768, 32767).astype("<i2")
        assert pcm == expected.tobytes()

    def test_square_pcm_applies_amplitude_before_quantizing(self, generator):
        pcm = generator.generate_round_tone_pcm(WaveShape.SQUARE, 100.0, 0.01, 8000, amplitude=0.3)
        assert set(np.unique(np.frombuffer(pcm, dtype="<i2"))) <= {-9830, 0, 9830}

    def test_no_crossing_in_window_raises(self, generator):
        # A 10 Hz period is 100 samples; the 20-sample window never wraps.
        with pytest.raises(CrossoverNotFoundError):
            generator.round_sine_tone(10.0, 0.01, 1000)

    def test_crossover_failure_is_not_a_validation_error(self, generator):
        with pytest.raises(CrossoverNotFoundError) as excinfo:
            generator.round_square_wave(10.0, 0.01, 1000)
        assert not isinstance(excinfo.value, WaveformValidationError)

    @pytest.mark.parametrize("shape", [WaveShape.TRIANGLE, WaveShape.SAWTOOTH])
    def test_unsupported_shapes_are_rejected(self, generator, shape):
        with pytest.raises(WaveformValidationError, match="sine and square"):
            generator.generate_round_tone(shape, 440.0, 0.01, 44100)

    @pytest.mark.parametrize(
        "frequency,min_duration,sample_rate",
        [(0.0, 0.01, 44100), (30000.0, 0.01, 44100), (440.0, 0.0, 44100), (440.0, 0.01, -1)],
    )
    def test_invalid_parameters_are_rejected(self, generator, frequency, min_duration, sample_rate):
        with pytest.raises(WaveformValidationError):
            generator.generate_round_tone(WaveShape.SINE, frequency, min_duration, sample_rate)


class TestFromSettings:
    def test_round_tone_generator_uses_configured_rate(self):
        generator = RoundToneGenerator.from_settings({"sample_rate": 8000, "fade_ratio": 0.25})
        assert generator.sample_rate == 8000
        tone = generator.round_square_wave(100.0, 0.01)
        assert len(tone) >= 80
