"""
Seeded Randomness and Coherent Noise

Two sources of variation drive the field:

1. make_rng - per-field numpy Generator for parameter randomization
   (positions, petal counts, colors, tumble speeds).
2. noise1d - smooth 2D gradient noise over one spatial coordinate and
   one temporal coordinate, used for the organic petal wobble.

Noise is deterministic: the permutation table is fixed, so the same
(x, t) always yields the same value regardless of the field seed.
"""

import math
from dataclasses import dataclass

import numpy as np


def make_rng(seed=None):
    """Return a numpy Generator (fresh entropy when seed is None)."""
    return np.random.default_rng(seed)


# Fixed permutation table, doubled so lookups never wrap mid-hash
_PERM = np.random.default_rng(1337).permutation(256)
_PERM = np.concatenate([_PERM, _PERM]).astype(int).tolist()

# Eight unit gradients around the circle
_GRADIENTS = [
    (math.cos(a), math.sin(a))
    for a in np.linspace(0.0, 2.0 * math.pi, 8, endpoint=False)
]

# 2D Perlin noise with unit gradients peaks at sqrt(2)/2
_NORMALIZE = math.sqrt(2.0)


def _fade(t):
    """Quintic smootherstep: C2-continuous interpolation weight."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _grad(ix, it, dx, dt):
    g = _GRADIENTS[_PERM[_PERM[ix] + it] & 7]
    return g[0] * dx + g[1] * dt


def noise1d(x, t):
    """Coherent gradient noise sampled at spatial x and time t.

    Returns a value in [-1, 1]. Zero at integer lattice points, smooth
    everywhere else, so advancing t slowly yields a gentle wander.
    """
    xi = math.floor(x)
    ti = math.floor(t)
    xf = x - xi
    tf = t - ti
    X = int(xi) & 255
    T = int(ti) & 255

    n00 = _grad(X, T, xf, tf)
    n10 = _grad(X + 1, T, xf - 1.0, tf)
    n01 = _grad(X, T + 1, xf, tf - 1.0)
    n11 = _grad(X + 1, T + 1, xf - 1.0, tf - 1.0)

    u = _fade(xf)
    v = _fade(tf)
    nx0 = n00 + u * (n10 - n00)
    nx1 = n01 + u * (n11 - n01)
    value = (nx0 + v * (nx1 - nx0)) * _NORMALIZE
    return max(-1.0, min(1.0, value))


@dataclass
class NoiseWobble:
    """Per-head wobble modifier: noise-driven length/angle/scale drift."""

    enabled: bool = False
    seed: float = 0.0
    length_amount: float = 0.15
    angle_amount: float = 8.0      # degrees
    scale_amount: float = 0.05
    time_speed: float = 0.5


def wobble_terms(wobble, index, time):
    """Return (length_factor, angle_offset_deg, scale_offset) for one petal.

    Each petal samples its own noise lane (seed + index * 7.3) and the three
    channels are decorrelated by fixed lane offsets.
    """
    if wobble is None or not wobble.enabled:
        return 1.0, 0.0, 0.0
    lane = wobble.seed + index * 7.3
    length_factor = 1.0 + noise1d(lane, time) * wobble.length_amount
    angle_offset = noise1d(lane + 100.0, time) * wobble.angle_amount
    scale_offset = noise1d(lane + 200.0, time) * wobble.scale_amount
    return length_factor, angle_offset, scale_offset
