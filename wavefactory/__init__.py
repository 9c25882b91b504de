# wavefactory/__init__.py
"""
Deterministic audio-signal toolkit: periodic waveform synthesis, loopable
"round" tones, 16-bit PCM conversion and a minimal WAV container parser.
"""
from wavefactory.core.audio_math import (
    generate_silence, generate_silence_pcm, mix_waves
)
from wavefactory.core.errors import (
    CrossoverNotFoundError, WavDecodeError, WaveFactoryError,
    WaveformValidationError
)
from wavefactory.core.generators.base import WaveformSpec, WaveShape
from wavefactory.core.generators.periodic import PeriodicGenerator
from wavefactory.core.generators.round_tone import RoundToneGenerator
from wavefactory.core.pcm_codec import pcm16_to_samples, samples_to_pcm16
from wavefactory.core.wav_parser import (
    WavHeaderInfo, decode_wav, parse_wav_header
)

__version__ = "1.0.0"

__all__ = [
    "CrossoverNotFoundError",
    "PeriodicGenerator",
    "RoundToneGenerator",
    "WavDecodeError",
    "WavHeaderInfo",
    "WaveFactoryError",
    "WaveShape",
    "WaveformSpec",
    "WaveformValidationError",
    "decode_wav",
    "generate_silence",
    "generate_silence_pcm",
    "mix_waves",
    "parse_wav_header",
    "pcm16_to_samples",
    "samples_to_pcm16",
]
