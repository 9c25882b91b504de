# wavefactory/services/wave_loader.py
"""
Contains the WaveLoader, the host-side collaborator that reads WAV resources
from disk and decodes them into float sample buffers, and the SampleCache it
keeps them in.
"""
import logging
import os
import threading
from typing import Optional

import numpy as np
from scipy import signal as scipy_signal

from wavefactory.config.constants import DEFAULT_SETTINGS
from wavefactory.core import path_utils
from wavefactory.core.wav_parser import (
    WavHeaderInfo, decode_wav, parse_wav_header
)


class SampleCache:
    """
    A thread-safe store of decoded sample buffers keyed by resolved resource
    path.

    Buffers are made read-only on insertion so that a buffer handed to one
    caller can never be changed under another.
    """
    def __init__(self):
        self._data: dict[str, np.ndarray] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[np.ndarray]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, samples: np.ndarray) -> np.ndarray:
        """
        Stores a buffer, unless another thread stored one first.

        Returns:
            The buffer now held in the cache for `key`.
        """
        samples.flags.writeable = False
        with self._lock:
            return self._data.setdefault(key, samples)

    def discard(self, key: str):
        with self._lock:
            self._data.pop(key, None)

    def clear(self):
        with self._lock:
            self._data.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data.keys())

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class WaveLoader:
    """
    Loads WAV resources through the core parser and codec.

    A failed load never propagates: the error is logged and an empty buffer
    is returned (and cached) in place of the audio.
    """
    def __init__(self, cache: Optional[SampleCache] = None,
                 samples_dir: str = DEFAULT_SETTINGS['samples_dir'],
                 target_sample_rate: Optional[int] = None):
        """
        Initializes the WaveLoader.

        Args:
            cache: The cache to store decoded buffers in. A private cache is
                created when none is given.
            samples_dir: The directory relative handles are resolved against.
            target_sample_rate: If set, decoded audio at any other rate is
                resampled to this rate.
        """
        self.cache = cache if cache is not None else SampleCache()
        self.samples_dir = samples_dir
        self.target_sample_rate = target_sample_rate

    @classmethod
    def from_settings(cls, settings: dict,
                      cache: Optional[SampleCache] = None) -> 'WaveLoader':
        """Builds a loader from a validated settings dictionary."""
        target = settings.get('target_sample_rate') \
            if settings.get('resample_on_load') else None
        return cls(cache=cache,
                   samples_dir=settings.get('samples_dir',
                                            DEFAULT_SETTINGS['samples_dir']),
                   target_sample_rate=target)

    def resolve(self, handle: str) -> str:
        return path_utils.resolve_resource_path(handle, self.samples_dir)

    def load_resource(self, handle: str) -> np.ndarray:
        """
        Returns the decoded float samples of a WAV resource.

        Args:
            handle: The path identifying the resource; relative paths are
                resolved against the samples directory.

        Returns:
            A read-only float32 NumPy array, empty if the resource could not
            be read or decoded.
        """
        resolved_path = self.resolve(handle)
        cached = self.cache.get(resolved_path)
        if cached is not None:
            return cached

        try:
            if not resolved_path:
                raise ValueError(f"Invalid resource handle: {handle!r}")
            with open(resolved_path, 'rb') as f:
                file_bytes = f.read()
            header, samples = decode_wav(file_bytes)
            samples = self._resample(samples, header.sample_rate)
            logging.info("Loaded %d samples from %s", len(samples),
                         os.path.basename(resolved_path))
        except Exception as e:
            logging.error("Error loading wave resource '%s': %s", handle, e,
                          exc_info=True)
            samples = np.zeros(0, dtype=np.float32)

        return self.cache.put(resolved_path, samples)

    def get_header(self, handle: str) -> WavHeaderInfo:
        """
        Parses a resource's header without decoding or caching it.

        Raises:
            OSError: If the resource cannot be read.
        """
        with open(self.resolve(handle), 'rb') as f:
            return parse_wav_header(f.read())

    def cached_resources(self) -> list[str]:
        """Lists cached resources, relative to the samples directory."""
        return [path_utils.relativize_resource_path(p, self.samples_dir)
                for p in self.cache.keys()]

    def _resample(self, samples: np.ndarray, source_rate: int) -> np.ndarray:
        if not self.target_sample_rate or not source_rate \
                or source_rate == self.target_sample_rate or len(samples) == 0:
            return samples
        num_samples = int(len(samples) * self.target_sample_rate / source_rate)
        logging.info("Resampling %d Hz -> %d Hz", source_rate,
                     self.target_sample_rate)
        return scipy_signal.resample(samples, num_samples).astype(np.float32)
