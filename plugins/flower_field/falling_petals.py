"""
Falling Petal Physics

Petals that detach from a head become independent bodies: a small
upward/outward pop, gravity, a tumbling spin, and a sideways sinusoidal
wander around their ballistic path. They fade after a delay and are
purged once expired, faded, or fallen past the bottom of the viewport.
"""

import math
from dataclasses import replace

from .commands import PolygonCommand, direction_for_angle, transform_points, with_alpha
from .geometry import build_petal_outline, is_degenerate_petal
from .noise import make_rng


DEFAULT_PARAMS = {
    "gravity": 60.0,             # px/s^2, +Y down
    "initial_up_pop": 25.0,      # px/s
    "max_lifetime": 6.0,         # seconds
    "fade_delay": 2.5,           # seconds before alpha starts to drop
    "fade_speed": 0.6,           # alpha per second
    "tumble_speed": 120.0,       # deg/s, jittered +-30% with random sign
    "wander_amplitude": 14.0,    # px
    "wander_frequency": 0.6,     # Hz
    "offscreen_margin": 50.0,    # px below the viewport before culling
}

_JITTER = 0.3
_AGE_EPSILON = 1e-6    # absorbs dt accumulation error at the lifetime boundary


class FallingPetal:
    """One detached petal."""

    def __init__(self, position, velocity, rotation, rotation_speed,
                 wander_phase, wander_amplitude, wander_frequency,
                 outline, color):
        self.base_x, self.base_y = position
        self.vx, self.vy = velocity
        self.rotation = rotation
        self.rotation_speed = rotation_speed
        self.wander_phase = wander_phase
        self.wander_amplitude = wander_amplitude
        self.wander_frequency = wander_frequency
        self.outline = outline
        self.color = color
        self.age = 0.0
        self.alpha = 1.0
        self.alive = True

    @property
    def position(self):
        """Draw position: base position plus horizontal wander."""
        wander = self.wander_amplitude * math.sin(
            self.age * self.wander_frequency * 2.0 * math.pi + self.wander_phase)
        return (self.base_x + wander, self.base_y)


class FallingPetalSystem:
    """Owns every live falling petal."""

    def __init__(self, rng=None, **params):
        self.rng = rng if rng is not None else make_rng()
        self.petals = []
        self.viewport_height = None
        for key, value in DEFAULT_PARAMS.items():
            setattr(self, key, value)
        self.set_params(**params)

    def set_params(self, **params):
        for key, value in params.items():
            if key not in DEFAULT_PARAMS:
                raise ValueError(f"Unknown falling petal parameter: {key!r}")
            setattr(self, key, float(value))

    def get_params(self):
        return {key: getattr(self, key) for key in DEFAULT_PARAMS}

    @property
    def live_count(self):
        return len(self.petals)

    def _jitter(self, value):
        return value * float(self.rng.uniform(1.0 - _JITTER, 1.0 + _JITTER))

    def spawn(self, head_position, detach_angle, shape, color):
        """Release one petal from a head.

        Args:
            head_position: (x, y) of the petal base in viewport space
            detach_angle: Petal axis in degrees (0 = pointing up)
            shape: PetalShape captured at the moment of detachment
            color: RGB petal color

        Returns:
            The new FallingPetal, or None for a degenerate shape
        """
        captured = replace(shape, count=1)
        if is_degenerate_petal(captured):
            return None

        dx, dy = direction_for_angle(detach_angle)
        offset = 0.4 * shape.length
        position = (head_position[0] + dx * offset, head_position[1] + dy * offset)
        outward = 0.4 * self.initial_up_pop
        velocity = (dx * outward, dy * outward - self.initial_up_pop)

        spin = self._jitter(self.tumble_speed)
        if self.rng.random() < 0.5:
            spin = -spin

        petal = FallingPetal(
            position=position,
            velocity=velocity,
            rotation=detach_angle,
            rotation_speed=spin,
            wander_phase=float(self.rng.uniform(0.0, 2.0 * math.pi)),
            wander_amplitude=self._jitter(self.wander_amplitude),
            wander_frequency=self._jitter(self.wander_frequency),
            outline=build_petal_outline(captured),
            color=tuple(color[:3]),
        )
        self.petals.append(petal)
        return petal

    def update(self, dt):
        """Integrate every live petal by dt and purge the dead ones."""
        for p in self.petals:
            p.age += dt
            p.vy += self.gravity * dt
            p.base_x += p.vx * dt
            p.base_y += p.vy * dt
            p.rotation += p.rotation_speed * dt
            if p.age > self.fade_delay:
                p.alpha = max(0.0, p.alpha - self.fade_speed * dt)

            if p.age >= self.max_lifetime - _AGE_EPSILON or p.alpha <= 0.0:
                p.alive = False
            elif (self.viewport_height is not None
                  and p.base_y > self.viewport_height + self.offscreen_margin):
                p.alive = False

        self.petals = [p for p in self.petals if p.alive]

    def draw(self):
        commands = []
        for p in self.petals:
            pts = transform_points(p.outline, p.rotation, offset=p.position)
            commands.append(PolygonCommand(pts, with_alpha(p.color, p.alpha)))
        return commands

    def clear(self):
        self.petals = []
