"""
Audio-Activity Estimator

Turns the four per-tick analysis scalars into the slow, smooth control
signals the field reacts to:

1. Single-pole smoothing of volume, spectral fullness and pitch
2. Log-scale pitch normalization around middle C
3. Onset (beat) detection against a slow volume baseline
4. A composite activity level mixing beat density, volume and fullness

All smoothing here is per update tick (not per second), matching the
rate the analysis collaborator delivers its values.
"""

import math
from collections import deque, namedtuple


AudioSignals = namedtuple("AudioSignals", ["volume", "pitch", "confidence", "fullness"])
AudioSignals.__new__.__defaults__ = (0.0, None, 0.0, 0.0)

SILENCE = AudioSignals(0.0, None, 0.0, 0.0)

PITCH_CENTER_HZ = 261.0
PITCH_MIN_HZ = 50.0
PITCH_MAX_HZ = 2500.0

VOLUME_ALPHA = 0.08
FULLNESS_ALPHA = 0.10
PITCH_ALPHA = 0.12
SLOW_VOLUME_ALPHA = 0.02
ACTIVITY_ALPHA = 0.03

BEAT_RATIO = 1.4
BEAT_MIN_VOLUME = 0.05
BEAT_COOLDOWN = 0.25    # seconds
BEAT_WINDOW = 5.0       # seconds of beat history
BEATS_FOR_FULL_DENSITY = 20.0


def ema(old, new, alpha):
    return old * (1.0 - alpha) + new * alpha


def _clamp01(x):
    return max(0.0, min(1.0, x))


def normalize_pitch(pitch_hz):
    """Map a pitch in Hz to [-1, 1] on a log2 scale centered at 261 Hz.

    Anything at or below 50 Hz (including no pitch) maps to 0.
    """
    if not pitch_hz or pitch_hz <= PITCH_MIN_HZ:
        return 0.0
    log_range = math.log2(PITCH_MAX_HZ) - math.log2(PITCH_MIN_HZ)
    norm = (math.log2(pitch_hz) - math.log2(PITCH_CENTER_HZ)) / (log_range * 0.5)
    return max(-1.0, min(1.0, norm))


NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def pitch_to_note_name(pitch_hz):
    """Nearest equal-tempered note name, e.g. 440.0 -> "A4"."""
    if not pitch_hz or not math.isfinite(pitch_hz) or pitch_hz <= 0:
        return ""
    midi = int(round(69 + 12 * math.log2(pitch_hz / 440.0)))
    return f"{NOTE_NAMES[midi % 12]}{midi // 12 - 1}"


class AudioActivity:
    """Smoothed audio state plus beat detector and activity level."""

    def __init__(self):
        self.reset()

    def reset(self):
        """Return every accumulator to silence."""
        self.volume = 0.0
        self.fullness = 0.0
        self.pitch = 0.0
        self.slow_volume = 0.0
        self.beat_cooldown = 0.0
        self.beat_history = deque()
        self.elapsed_time = 0.0
        self.activity_level = 0.0
        self.total_beats = 0

    @property
    def pitch_norm(self):
        return normalize_pitch(self.pitch)

    @property
    def beat_density(self):
        return min(len(self.beat_history) / BEATS_FOR_FULL_DENSITY, 1.0)

    def update(self, dt, signals):
        """Fold one tick of analysis output into the smoothed state.

        Args:
            dt: Seconds since the previous tick
            signals: AudioSignals (volume, pitch, confidence, fullness)

        Returns:
            True if a beat fired on this tick
        """
        volume, pitch, confidence, fullness = signals
        self.elapsed_time += dt

        self.volume = ema(self.volume, _clamp01((volume or 0.0) * 5.0), VOLUME_ALPHA)
        self.fullness = ema(self.fullness, _clamp01(fullness or 0.0), FULLNESS_ALPHA)
        # Pitch only follows confident, audible, finite estimates
        if (pitch is not None and (confidence or 0.0) > 0.1
                and math.isfinite(pitch) and pitch > PITCH_MIN_HZ):
            self.pitch = ema(self.pitch, min(pitch, PITCH_MAX_HZ), PITCH_ALPHA)

        beat = self._detect_beat(dt)

        self.activity_level = ema(
            self.activity_level,
            0.5 * self.beat_density + 0.3 * self.volume + 0.2 * self.fullness,
            ACTIVITY_ALPHA,
        )
        return beat

    def _detect_beat(self, dt):
        if self.beat_cooldown > 0:
            self.beat_cooldown -= dt

        fired = False
        if (self.beat_cooldown <= 0
                and self.volume > BEAT_MIN_VOLUME
                and self.volume > self.slow_volume * BEAT_RATIO):
            fired = True
            self.beat_cooldown = BEAT_COOLDOWN
            self.beat_history.append(self.elapsed_time)
            self.total_beats += 1

        # Baseline lags the comparison by one tick
        self.slow_volume = ema(self.slow_volume, self.volume, SLOW_VOLUME_ALPHA)

        while self.beat_history and self.elapsed_time - self.beat_history[0] > BEAT_WINDOW:
            self.beat_history.popleft()
        return fired
