# wavefactory/core/path_utils.py
"""
Contains utility functions for resolving and relativizing WAV resource
paths against the configured samples directory.
"""
import os

from wavefactory.config.constants import CONFIG_FILE_PATH, DEFAULT_SETTINGS


def get_samples_dir(samples_dir: str = DEFAULT_SETTINGS['samples_dir']) -> str:
    """
    Calculates the absolute path to the samples directory.

    A relative directory is taken relative to the folder holding the main
    configuration file. The directory is not created.

    Args:
        samples_dir: The configured samples directory.

    Returns:
        The absolute path to the samples directory.
    """
    if os.path.isabs(samples_dir):
        return os.path.normpath(samples_dir)
    config_dir = os.path.dirname(os.path.abspath(CONFIG_FILE_PATH))
    return os.path.normpath(os.path.join(config_dir, samples_dir))


def relativize_resource_path(absolute_path: str, samples_dir: str) -> str:
    """
    Converts an absolute file path to a relative one if it's inside the
    samples directory.

    Args:
        absolute_path: The full, absolute path to the WAV file.
        samples_dir: The configured samples directory.

    Returns:
        The path relative to the samples directory if the file is inside it,
        otherwise the original absolute path.
    """
    if not isinstance(absolute_path, str) or not absolute_path:
        return ""
    base = get_samples_dir(samples_dir)
    try:
        if os.path.commonpath([absolute_path, base]) == base:
            return os.path.relpath(absolute_path, base)
    except ValueError:
        # Paths on different drives on Windows
        pass
    return absolute_path


def resolve_resource_path(handle: str, samples_dir: str) -> str:
    """
    Converts a resource handle (which may be relative) to a full, absolute
    path.

    Args:
        handle: The path string identifying the resource.
        samples_dir: The configured samples directory.

    Returns:
        A normalized absolute path, or an empty string if the handle is
        empty or invalid.
    """
    if not isinstance(handle, (str, os.PathLike)) or not os.fspath(handle):
        return ""
    handle = os.fspath(handle)
    if os.path.isabs(handle):
        return os.path.normpath(handle)
    return os.path.normpath(os.path.join(get_samples_dir(samples_dir), handle))
