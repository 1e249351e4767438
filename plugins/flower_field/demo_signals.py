"""
Synthetic Audio Signals

Stands in for the audio analysis collaborator so the field can run
(and be tested) without a microphone. Produces the same four scalars
a real analyzer would deliver once per frame:

1. SinusoidalLFO - slow breathing oscillation for one signal
2. SmoothedParameter - time-constant drift for the user "energy" knob
3. DemoSignalSource - kick pulses over LFO-driven volume, pitch and fullness

All modulation is frame-rate independent via delta-time integration.
"""

import math

from .activity import AudioSignals
from .noise import make_rng


class SinusoidalLFO:
    """Single-parameter phase accumulator with sinusoidal modulation.

    Provides smooth breathing oscillation for one parameter around a base value.
    Phase accumulates continuously based on delta-time for frame-rate independence.
    """

    def __init__(self, base_value, amplitude, frequency_hz=0.01, phase=0.0):
        """Initialize LFO.

        Args:
            base_value: Center point of oscillation
            amplitude: Oscillation range (± from base)
            frequency_hz: Oscillation frequency in Hz (default: 0.01 = ~100s period)
            phase: Starting phase in radians
        """
        self.base_value = base_value
        self.amplitude = amplitude
        self.frequency_hz = frequency_hz
        self.phase = phase

    def update(self, dt):
        """Advance phase by delta-time."""
        self.phase += 2.0 * math.pi * self.frequency_hz * dt

    def get_value(self):
        """Get current modulated value."""
        return self.base_value + self.amplitude * math.sin(self.phase)


class SmoothedParameter:
    """EMA wrapper for a single numeric parameter.

    Key presses move the target; the value drifts there over roughly
    tau seconds instead of snapping.
    """

    def __init__(self, initial_value, time_constant=2.0):
        self.target = initial_value
        self.current = initial_value
        self.tau = time_constant

    def set_target(self, new_target):
        self.target = new_target

    def update(self, dt):
        """Advance EMA by delta-time.

        alpha = 1 - exp(-dt / tau)
        current += alpha * (target - current)
        """
        if dt <= 0:
            return
        alpha = 1.0 - math.exp(-dt / self.tau)
        self.current += alpha * (self.target - self.current)

    def get_value(self):
        return self.current


class DemoSignalSource:
    """Fake analyzer output: a kick drum over a wandering melody.

    Args:
        bpm: Kick tempo
        energy: Initial energy in [0, 1]; scales volume, fullness and kick rate
        seed: Seed for pitch jitter
    """

    KICK_DECAY = 25.0       # 1/s, exponential kick envelope
    BASE_PITCH_HZ = 261.0

    def __init__(self, bpm=120.0, energy=0.6, seed=None):
        self.bpm = bpm
        self.rng = make_rng(seed)
        self.energy = SmoothedParameter(energy, time_constant=2.0)
        self.volume_lfo = SinusoidalLFO(0.5, 0.5, frequency_hz=1.0 / 30.0)
        self.fullness_lfo = SinusoidalLFO(0.5, 0.4, frequency_hz=1.0 / 45.0, phase=1.3)
        # Pitch wanders over +-1 octave around middle C
        self.pitch_lfo = SinusoidalLFO(0.0, 1.0, frequency_hz=1.0 / 17.0)
        self.time = 0.0
        self.kick_env = 0.0
        self._next_kick = 0.0

    def set_energy(self, value):
        self.energy.set_target(max(0.0, min(1.0, value)))

    def nudge_energy(self, delta):
        self.set_energy(self.energy.target + delta)
        return self.energy.target

    def update(self, dt):
        """Advance by dt and return this frame's AudioSignals."""
        self.time += dt
        self.energy.update(dt)
        for lfo in (self.volume_lfo, self.fullness_lfo, self.pitch_lfo):
            lfo.update(dt)
        energy = self.energy.get_value()

        self.kick_env *= math.exp(-self.KICK_DECAY * dt)
        if energy > 0.05 and self.time >= self._next_kick:
            self.kick_env = 1.0
            # Low energy skips beats: half time below 0.4
            beat_len = 60.0 / max(self.bpm, 1.0)
            self._next_kick = self.time + (beat_len if energy >= 0.4 else beat_len * 2.0)

        bed = 0.002 + 0.006 * energy * self.volume_lfo.get_value()
        volume = bed + 0.2 * energy * self.kick_env

        octave = self.pitch_lfo.get_value() + float(self.rng.normal(0.0, 0.02))
        pitch = self.BASE_PITCH_HZ * 2.0 ** octave
        confidence = 0.3 + 0.6 * energy

        fullness = max(0.0, min(1.0, energy * self.fullness_lfo.get_value() + 0.2 * self.kick_env))
        return AudioSignals(volume=volume, pitch=pitch, confidence=confidence, fullness=fullness)
