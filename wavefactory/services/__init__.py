"""
Host-side services built on top of the core: configuration persistence and
cached WAV resource loading.
"""
