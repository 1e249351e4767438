"""Audio-reactive procedural flower field."""

from .activity import AudioActivity, AudioSignals
from .falling_petals import FallingPetalSystem
from .field import FlowerField
from .presets import PRESET_ORDER, get_preset, list_presets

__version__ = "0.1.0"

__all__ = [
    "AudioActivity",
    "AudioSignals",
    "FallingPetalSystem",
    "FlowerField",
    "PRESET_ORDER",
    "get_preset",
    "list_presets",
]
