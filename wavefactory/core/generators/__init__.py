# wavefactory/core/generators/__init__.py
"""
This package contains the waveform generator classes.

PeriodicGenerator renders fixed-length buffers of the standard shapes with an
edge envelope; RoundToneGenerator extends a tone to the next upward zero
crossing so copies of it can be looped without a click.
"""
