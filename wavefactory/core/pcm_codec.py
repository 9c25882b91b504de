# wavefactory/core/pcm_codec.py
"""
Conversion between normalized float sample buffers and signed 16-bit
little-endian PCM byte buffers.
"""
from typing import Union

import numpy as np

from wavefactory.config.constants import (
    PCM16_MAX, PCM16_MIN, PCM16_SAMPLE_WIDTH, PCM16_SCALE
)

BytesLike = Union[bytes, bytearray, memoryview]


def samples_to_pcm16(samples) -> bytes:
    """
    Quantizes float samples into 16-bit little-endian PCM.

    Each sample maps to round(s * 32768) clamped to the signed 16-bit range,
    so full-scale positive input (1.0) saturates at 32767. Out-of-range input
    is clipped rather than rejected, and NaN quantizes to silence.

    Args:
        samples: A sequence or NumPy array of normalized float samples.

    Returns:
        A bytes object exactly twice as long as the sample count.
    """
    data = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0)
    scaled = np.round(data * PCM16_SCALE)
    np.clip(scaled, PCM16_MIN, PCM16_MAX, out=scaled)
    return scaled.astype('<i2').tobytes()


def pcm16_to_samples(data: BytesLike) -> np.ndarray:
    """
    Decodes 16-bit little-endian PCM into normalized float samples.

    A trailing odd byte cannot form a sample and is ignored, so the result
    holds floor(len(data) / 2) samples.

    Args:
        data: The raw PCM payload.

    Returns:
        A float32 NumPy array with values in [-1.0, 1.0).
    """
    num_samples = len(data) // PCM16_SAMPLE_WIDTH
    if num_samples == 0:
        return np.zeros(0, dtype=np.float32)
    ints = np.frombuffer(data, dtype='<i2', count=num_samples)
    return (ints / PCM16_SCALE).astype(np.float32)


def float32_bytes_to_samples(data: BytesLike) -> np.ndarray:
    """
    Decodes little-endian IEEE 754 float32 samples, ignoring any trailing
    partial word.
    """
    num_samples = len(data) // 4
    if num_samples == 0:
        return np.zeros(0, dtype=np.float32)
    return np.frombuffer(data, dtype='<f4', count=num_samples).astype(np.float32)
