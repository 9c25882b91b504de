# wavefactory/config/constants.py
"""
Contains default configuration dictionaries, audio constants, and other
static values for the wavefactory toolkit.
"""

# --- Configuration Constants ---
CONFIG_FILE_PATH = 'wavefactory.yaml'

# --- Audio Constants ---

AUDIO_SAMPLE_RATE: int = 44100
PCM16_SCALE: float = 32768.0
PCM16_MIN: int = -32768
PCM16_MAX: int = 32767
PCM16_SAMPLE_WIDTH: int = 2
MAX_FADE_RATIO: float = 0.5

# A negative-to-non-negative transition landing at or below this value is
# treated as an exact zero crossing by the round tone search.
ROUND_TONE_PRECISION: float = 0.005

# --- WAV Container Constants ---

WAV_FORMAT_PCM: int = 1
WAV_FORMAT_IEEE_FLOAT: int = 3
WAV_FORMAT_EXTENSIBLE: int = 0xFFFE
FMT_TAG: bytes = b'fmt '
DATA_TAG: bytes = b'data'


# --- Default Application-Wide Configuration ---

DEFAULT_SETTINGS: dict = {
    # Generator defaults
    'sample_rate': AUDIO_SAMPLE_RATE,
    'fade_ratio': 0.0,

    # Loader
    'samples_dir': 'Samples',
    'resample_on_load': False,
    'target_sample_rate': AUDIO_SAMPLE_RATE,
}
