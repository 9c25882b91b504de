"""Tests for float <-> 16-bit PCM conversion."""

import struct

import numpy as np
import pytest

from wavefactory.core.pcm_codec import (
    float32_bytes_to_samples,
    pcm16_to_samples,
    samples_to_pcm16,
)


class TestSamplesToPcm16:
    def test_encodes_little_endian_words(self):
        assert samples_to_pcm16([0.0, 0.5, -0.5]) == struct.pack("<3h", 0, 16384, -16384)

    def test_length_is_twice_sample_count(self):
        samples = np.linspace(-0.9, 0.9, 257, dtype=np.float32)
        assert len(samples_to_pcm16(samples)) == 2 * 257

    def test_rounds_to_nearest(self):
        # 0.7 / 32768 rounds up, 0.3 / 32768 rounds down
        pcm = samples_to_pcm16([0.7 / 32768, 0.3 / 32768, -0.7 / 32768])
        assert struct.unpack("<3h", pcm) == (1, 0, -1)

    def test_out_of_range_is_clamped(self):
        pcm = samples_to_pcm16([1.0, -1.0, 2.0, -2.0])
        assert struct.unpack("<4h", pcm) == (32767, -32768, 32767, -32768)

    def test_nan_quantizes_to_silence(self):
        assert samples_to_pcm16([float("nan")]) == b"\x00\x00"

    def test_empty_input(self):
        assert samples_to_pcm16([]) == b""


class TestPcm16ToSamples:
    def test_decodes_words(self):
        samples = pcm16_to_samples(struct.pack("<3h", 16384, -32768, 0))
        assert samples.dtype == np.float32
        np.testing.assert_array_equal(samples, [0.5, -1.0, 0.0])

    def test_odd_trailing_byte_is_dropped(self):
        samples = pcm16_to_samples(b"\x00\x40\x7f")
        assert len(samples) == 1
        assert samples[0] == 0.5

    def test_single_byte_yields_no_samples(self):
        assert len(pcm16_to_samples(b"\x01")) == 0

    def test_empty_input(self):
        samples = pcm16_to_samples(b"")
        assert samples.dtype == np.float32
        assert len(samples) == 0

    def test_accepts_bytearray_and_memoryview(self):
        raw = struct.pack("<2h", 8192, -8192)
        np.testing.assert_array_equal(pcm16_to_samples(bytearray(raw)), [0.25, -0.25])
        np.testing.assert_array_equal(pcm16_to_samples(memoryview(raw)), [0.25, -0.25])

    def test_values_stay_below_one(self):
        samples = pcm16_to_samples(struct.pack("<h", 32767))
        assert samples[0] < 1.0


class TestRoundTrip:
    def test_float_pcm_float_within_quantization_error(self):
        rng = np.random.default_rng(1234)
        samples = rng.uniform(-1.0, 1.0, 2000).astype(np.float32)
        recovered = pcm16_to_samples(samples_to_pcm16(samples))
        assert np.max(np.abs(recovered - samples)) <= 1 / 32768

    def test_pcm_float_pcm_is_bit_exact(self):
        pcm = np.arange(-32768, 32768, dtype="<i2").tobytes()
        assert samples_to_pcm16(pcm16_to_samples(pcm)) == pcm


class TestFloat32Bytes:
    def test_decodes_ieee_floats(self):
        raw = struct.pack("<3f", 0.25, -0.75, 1.0)
        np.testing.assert_array_equal(float32_bytes_to_samples(raw), [0.25, -0.75, 1.0])

    def test_partial_word_is_dropped(self):
        raw = struct.pack("<f", 0.5) + b"\x00\x00"
        assert len(float32_bytes_to_samples(raw)) == 1

    @pytest.mark.parametrize("raw", [b"", b"\x00\x00\x00"])
    def test_short_input_is_empty(self, raw):
        assert len(float32_bytes_to_samples(raw)) == 0
