import io
import struct
import wave

import numpy as np
import pytest


def build_chunk(tag: bytes, payload: bytes) -> bytes:
    return tag + struct.pack("<I", len(payload)) + payload


def build_fmt_payload(sample_rate=44100, channels=1, bits=16, audio_format=1):
    block_align = channels * bits // 8
    return struct.pack(
        "<HHIIHH", audio_format, channels, sample_rate,
        sample_rate * block_align, block_align, bits,
    )


def build_wav(payload: bytes, sample_rate=44100, channels=1, bits=16,
              audio_format=1, chunks=None) -> bytes:
    """Assemble a RIFF/WAVE container.

    By default this is the canonical 44-byte header followed by the payload.
    ``chunks`` overrides the chunk sequence after the ``WAVE`` marker.
    """
    if chunks is None:
        chunks = [
            build_chunk(b"fmt ", build_fmt_payload(sample_rate, channels, bits, audio_format)),
            build_chunk(b"data", payload),
        ]
    body = b"WAVE" + b"".join(chunks)
    return b"RIFF" + struct.pack("<I", len(body)) + body


@pytest.fixture
def wav_builder():
    return build_wav


@pytest.fixture
def chunk_builder():
    return build_chunk


@pytest.fixture
def fmt_payload_builder():
    return build_fmt_payload


@pytest.fixture
def stdlib_wav_bytes():
    """Return a factory producing mono 16-bit WAV bytes via the ``wave`` module."""

    def _make(ints, sample_rate=22050):
        frames = np.asarray(ints, dtype="<i2").tobytes()
        buf = io.BytesIO()
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(1)
            wf.setsampwidth(2)
            wf.setframerate(sample_rate)
            wf.writeframes(frames)
        return buf.getvalue()

    return _make
