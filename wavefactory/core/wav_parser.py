# wavefactory/core/wav_parser.py
"""
A minimal RIFF/WAVE container parser.

Only the `fmt ` and `data` sub-chunks are located. Field offsets inside the
`fmt ` chunk are read relative to the tag, which matches the canonical 16 and
18 byte chunk layouts; non-canonical chunks are not walked by their declared
size.
"""
import logging
import struct
from dataclasses import dataclass
from typing import Iterator, Union

import numpy as np

from wavefactory.config.constants import (
    DATA_TAG, FMT_TAG, WAV_FORMAT_EXTENSIBLE, WAV_FORMAT_IEEE_FLOAT,
    WAV_FORMAT_PCM
)
from wavefactory.core.errors import WavDecodeError
from wavefactory.core.pcm_codec import (
    float32_bytes_to_samples, pcm16_to_samples
)

BytesLike = Union[bytes, bytearray, memoryview]

TAG_LENGTH = 4
PCM16_FORMATS = (WAV_FORMAT_PCM, WAV_FORMAT_EXTENSIBLE)
FLOAT32_FORMATS = (WAV_FORMAT_IEEE_FLOAT, WAV_FORMAT_EXTENSIBLE)

# Offsets relative to the start of the `fmt ` tag.
FMT_AUDIO_FORMAT_OFFSET = 8
FMT_CHANNELS_OFFSET = 10
FMT_SAMPLE_RATE_OFFSET = 12
FMT_BITS_PER_SAMPLE_OFFSET = 22

# Offsets relative to the start of the `data` tag.
DATA_LENGTH_OFFSET = 4
DATA_PAYLOAD_OFFSET = 8


@dataclass(frozen=True)
class WavHeaderInfo:
    """
    Read-only facts about a parsed container. Every field is 0 when the
    corresponding tag was not found.
    """
    sample_rate: int = 0
    channel_count: int = 0
    bits_per_sample: int = 0
    data_byte_offset: int = 0
    data_byte_length: int = 0
    audio_format: int = 0

    @property
    def has_data(self) -> bool:
        """True if a `data` tag was found and declares a non-empty payload."""
        return self.data_byte_offset > 0 and self.data_byte_length > 0

    def data_slice(self, data: BytesLike) -> bytes:
        """
        Returns the payload bytes, clamped to the end of the buffer when the
        declared length runs past it.
        """
        if self.data_byte_offset <= 0:
            return b''
        end = self.data_byte_offset + self.data_byte_length
        return bytes(data[self.data_byte_offset:end])


class WavFileParser:
    """
    Scans a byte buffer once, left to right, for the `fmt ` and `data` tags.

    Tags may appear in either order. The scan never stops early, so a tag
    that occurs more than once is reported from its last occurrence. A field
    whose bytes would run past the buffer end is left at 0. The parser never
    raises for malformed input.
    """
    def __init__(self, data: BytesLike):
        """
        Initializes the parser and performs the scan.

        Args:
            data: The complete container, already read into memory.
        """
        self.audio_format = 0
        self.channel_count = 0
        self.sample_rate = 0
        self.bits_per_sample = 0
        self.data_byte_offset = 0
        self.data_byte_length = 0

        buffer = bytes(data)
        self._scan(buffer)

    def _scan(self, buffer: bytes):
        limit = len(buffer) - TAG_LENGTH
        matches = sorted(
            [(c, FMT_TAG) for c in _find_tag_offsets(buffer, FMT_TAG, limit)]
            + [(c, DATA_TAG) for c in _find_tag_offsets(buffer, DATA_TAG, limit)]
        )
        for offset, tag in matches:
            if tag == FMT_TAG:
                self._read_fmt_fields(buffer, offset)
            else:
                self._read_data_fields(buffer, offset)

    def _read_fmt_fields(self, buffer: bytes, offset: int):
        audio_format = _read_uint(buffer, offset + FMT_AUDIO_FORMAT_OFFSET, '<H')
        channels = _read_uint(buffer, offset + FMT_CHANNELS_OFFSET, '<H')
        sample_rate = _read_uint(buffer, offset + FMT_SAMPLE_RATE_OFFSET, '<I')
        bits = _read_uint(buffer, offset + FMT_BITS_PER_SAMPLE_OFFSET, '<H')
        if audio_format is not None:
            self.audio_format = audio_format
        if channels is not None:
            self.channel_count = channels
        if sample_rate is not None:
            self.sample_rate = sample_rate
        if bits is not None:
            self.bits_per_sample = bits

    def _read_data_fields(self, buffer: bytes, offset: int):
        length = _read_uint(buffer, offset + DATA_LENGTH_OFFSET, '<I')
        if length is None:
            return
        self.data_byte_offset = offset + DATA_PAYLOAD_OFFSET
        self.data_byte_length = length

    def to_header_info(self) -> WavHeaderInfo:
        return WavHeaderInfo(
            sample_rate=self.sample_rate,
            channel_count=self.channel_count,
            bits_per_sample=self.bits_per_sample,
            data_byte_offset=self.data_byte_offset,
            data_byte_length=self.data_byte_length,
            audio_format=self.audio_format,
        )


def _find_tag_offsets(buffer: bytes, tag: bytes, limit: int) -> Iterator[int]:
    """Yields every offset c < limit where `tag` starts."""
    position = buffer.find(tag, 0)
    while 0 <= position < limit:
        yield position
        position = buffer.find(tag, position + 1)


def _read_uint(buffer: bytes, offset: int, fmt: str):
    """Reads one little-endian unsigned field, or None if out of bounds."""
    if offset + struct.calcsize(fmt) > len(buffer):
        return None
    return struct.unpack_from(fmt, buffer, offset)[0]


def parse_wav_header(data: BytesLike) -> WavHeaderInfo:
    """
    Parses a RIFF/WAVE byte stream into a WavHeaderInfo.

    A buffer without tags yields an all-zero result rather than an error;
    callers check `has_data` to tell whether any audio payload was found.
    """
    return WavFileParser(data).to_header_info()


def decode_wav(data: BytesLike) -> tuple[WavHeaderInfo, np.ndarray]:
    """
    Parses a container and decodes its payload into float samples.

    16-bit PCM and 32-bit IEEE float payloads are supported. An extensible
    (0xFFFE) header is read as integer PCM at 16 bits and as float at 32 bits,
    since the subformat GUID is not inspected. Multi-channel
    payloads are returned interleaved, exactly as stored.

    Args:
        data: The complete container bytes.

    Returns:
        A tuple of (header, float32 samples).

    Raises:
        WavDecodeError: If no `data` chunk exists or the sample format is
            not supported.
    """
    header = parse_wav_header(data)
    if header.data_byte_offset == 0:
        raise WavDecodeError("No 'data' chunk found in container.")

    payload = header.data_slice(data)
    if len(payload) < header.data_byte_length:
        logging.warning("WAV data chunk declares %d bytes but only %d are "
                        "present; decoding the available bytes.",
                        header.data_byte_length, len(payload))
    if header.channel_count > 1:
        logging.warning("WAV container has %d channels; samples are left "
                        "interleaved.", header.channel_count)

    if header.bits_per_sample == 16 and header.audio_format in PCM16_FORMATS:
        return header, pcm16_to_samples(payload)
    if header.bits_per_sample == 32 and header.audio_format in FLOAT32_FORMATS:
        return header, float32_bytes_to_samples(payload)
    raise WavDecodeError(
        f"Unsupported sample format: audio format {header.audio_format}, "
        f"{header.bits_per_sample} bits per sample.")
