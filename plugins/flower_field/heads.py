"""
Head Topology Strategies and Center Ornaments

A flower head is described by two closed tagged unions:

- Head variants decide where petal i of n goes:
    Radial        - evenly spaced around the center
    Phyllotaxis   - golden-angle spiral (sunflower packing)
    RoseCurve     - even spacing, petal length follows |cos(k*theta)|
    Superformula  - even spacing, length from the Gielis superformula
    LayeredWhorls - concentric rings, inner rings shorter and wider

- Center variants decide what is drawn at the head origin:
    SimpleDisc, Stamens, PollenGrid, GeometricStar

Each variant is a frozen dataclass; behavior is looked up by type in a
fixed dispatch table, so an unknown variant is a TypeError rather than a
silent fallback.
"""

import math
from collections import namedtuple
from dataclasses import dataclass

import numpy as np

from .geometry import circle_points


GOLDEN_ANGLE = 137.508  # degrees

PetalPlacement = namedtuple(
    "PetalPlacement",
    ["angle", "radial_offset", "length_scale", "width_scale", "layer"],
)


# ---------------------------------------------------------------------------
# Head variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Radial:
    pass


@dataclass(frozen=True)
class Phyllotaxis:
    spiral_spacing: float = 2.5


@dataclass(frozen=True)
class RoseCurve:
    k: float = 3.0
    base_scale: float = 0.4


@dataclass(frozen=True)
class Superformula:
    m: float = 6.0
    n1: float = 1.0
    n2: float = 1.0
    n3: float = 1.0
    a: float = 1.0
    b: float = 1.0


@dataclass(frozen=True)
class LayeredWhorls:
    layer_count: int = 3
    petals_per_layer: int = 6
    length_falloff: float = 0.75
    width_growth: float = 0.15
    phase_shift: float = 0.5


HEAD_VARIANTS = (Radial, Phyllotaxis, RoseCurve, Superformula, LayeredWhorls)


def superformula_radius(theta, m, n1, n2, n3, a=1.0, b=1.0):
    """Gielis superformula, clamped to [0.2, 1.5] to avoid spikes."""
    term_a = abs(math.cos(m * theta / 4.0) / a) ** n2
    term_b = abs(math.sin(m * theta / 4.0) / b) ** n3
    total = term_a + term_b
    if total <= 0.0:
        return 1.5
    r = total ** (-1.0 / n1)
    return min(max(r, 0.2), 1.5)


def _even_angle(index, total):
    return index * 360.0 / max(total, 1)


def _place_radial(variant, index, total):
    return PetalPlacement(_even_angle(index, total), 0.0, 1.0, 1.0, 0)


def _place_phyllotaxis(variant, index, total):
    angle = (index * GOLDEN_ANGLE) % 360.0
    offset = variant.spiral_spacing * math.sqrt(index)
    return PetalPlacement(angle, offset, 1.0, 1.0, 0)


def _place_rose(variant, index, total):
    angle = _even_angle(index, total)
    k_theta = variant.k * math.radians(angle)
    scale = variant.base_scale + abs(math.cos(k_theta)) * (1.0 - variant.base_scale)
    return PetalPlacement(angle, 0.0, scale, 1.0, 0)


def _place_superformula(variant, index, total):
    angle = _even_angle(index, total)
    r = superformula_radius(math.radians(angle), variant.m, variant.n1,
                            variant.n2, variant.n3, variant.a, variant.b)
    return PetalPlacement(angle, 0.0, r, 1.0, 0)


def _place_whorls(variant, index, total):
    per_layer = max(1, variant.petals_per_layer)
    layer = index // per_layer
    step = 360.0 / per_layer
    angle = (index % per_layer) * step
    if layer % 2 == 1:
        angle += variant.phase_shift * step
    return PetalPlacement(
        angle % 360.0,
        0.0,
        variant.length_falloff ** layer,
        1.0 + variant.width_growth * layer,
        layer,
    )


_PLACEMENT = {
    Radial: _place_radial,
    Phyllotaxis: _place_phyllotaxis,
    RoseCurve: _place_rose,
    Superformula: _place_superformula,
    LayeredWhorls: _place_whorls,
}


def petal_placement(variant, index, total):
    """Placement of petal `index` among `total` for the given head variant.

    Petals are ordered so that drawing by ascending index paints outer
    whorls before inner ones.
    """
    try:
        place = _PLACEMENT[type(variant)]
    except KeyError:
        raise TypeError(f"Unknown head variant: {variant!r}") from None
    return place(variant, index, total)


def petal_total(variant, base_count):
    """Number of petals a head actually carries for this variant."""
    if isinstance(variant, LayeredWhorls):
        return variant.layer_count * variant.petals_per_layer
    return base_count


# (min, max) petal count, upper bound exclusive
PETAL_COUNT_RANGES = {
    Radial: (4, 10),
    Phyllotaxis: (13, 35),
    RoseCurve: (5, 13),
    Superformula: (6, 15),
}


def random_head_variant(rng):
    kind = HEAD_VARIANTS[int(rng.integers(len(HEAD_VARIANTS)))]
    if kind is Radial:
        return Radial()
    if kind is Phyllotaxis:
        return Phyllotaxis(spiral_spacing=float(rng.uniform(1.5, 3.5)))
    if kind is RoseCurve:
        return RoseCurve(k=float(rng.choice([2.0, 2.5, 3.0, 4.0, 5.0])),
                         base_scale=float(rng.uniform(0.3, 0.6)))
    if kind is Superformula:
        return Superformula(
            m=float(rng.integers(3, 9)),
            n1=float(rng.uniform(0.6, 3.0)),
            n2=float(rng.uniform(0.5, 2.5)),
            n3=float(rng.uniform(0.5, 2.5)),
        )
    return LayeredWhorls(
        layer_count=int(rng.integers(2, 4)),
        petals_per_layer=int(rng.integers(5, 9)),
        length_falloff=float(rng.uniform(0.6, 0.85)),
        width_growth=float(rng.uniform(0.05, 0.25)),
        phase_shift=0.5,
    )


def random_petal_count(rng, variant):
    if isinstance(variant, LayeredWhorls):
        return petal_total(variant, 0)
    lo, hi = PETAL_COUNT_RANGES[type(variant)]
    return int(rng.integers(lo, hi))


# ---------------------------------------------------------------------------
# Center variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SimpleDisc:
    pass


@dataclass(frozen=True)
class Stamens:
    detail: int = 8


@dataclass(frozen=True)
class PollenGrid:
    detail: int = 5


@dataclass(frozen=True)
class GeometricStar:
    detail: int = 6


CENTER_VARIANTS = (SimpleDisc, Stamens, PollenGrid, GeometricStar)


def shade(rgb, factor):
    """Scale an RGB color toward black (<1) or white (>1)."""
    if factor >= 1.0:
        t = min(factor - 1.0, 1.0)
        return tuple(int(c + (255 - c) * t) for c in rgb)
    return tuple(int(c * max(factor, 0.0)) for c in rgb)


def _center_disc(variant, radius, color):
    return [(circle_points(radius), color)], []


def _center_stamens(variant, radius, color):
    n = max(1, variant.detail)
    anther = shade(color, 1.4)
    filament = shade(color, 0.7)
    polys = [(circle_points(radius * 0.6), color)]
    lines = []
    for i in range(n):
        a = 2.0 * math.pi * i / n
        tip = (math.cos(a) * radius * 1.4, math.sin(a) * radius * 1.4)
        lines.append(((0.0, 0.0), tip, filament, max(1.0, radius * 0.08)))
        polys.append((circle_points(max(radius * 0.15, 0.5), 8, center=tip), anther))
    return polys, lines


def _center_pollen(variant, radius, color):
    n = max(1, variant.detail)
    polys = [(circle_points(radius), shade(color, 0.8))]
    spacing = 2.0 * radius / n
    dot = max(spacing * 0.3, 0.4)
    pollen = shade(color, 1.3)
    for row in range(n):
        for col in range(n):
            x = -radius + spacing * (col + 0.5)
            y = -radius + spacing * (row + 0.5)
            if x * x + y * y <= (radius - dot) ** 2:
                polys.append((circle_points(dot, 6, center=(x, y)), pollen))
    return polys, []


def _center_star(variant, radius, color):
    n = max(3, variant.detail)
    a = np.linspace(0.0, 2.0 * math.pi, 2 * n, endpoint=False) - math.pi / 2.0
    r = np.where(np.arange(2 * n) % 2 == 0, radius * 1.2, radius * 0.5)
    star = np.column_stack([np.cos(a) * r, np.sin(a) * r])
    star = np.vstack([star, star[:1]])
    polys = [(circle_points(radius * 0.8), shade(color, 0.75)), (star, color)]
    return polys, []


_CENTER = {
    SimpleDisc: _center_disc,
    Stamens: _center_stamens,
    PollenGrid: _center_pollen,
    GeometricStar: _center_star,
}


def center_shapes(variant, radius, color):
    """Local-space center ornament.

    Returns (polygons, lines): polygons are (points, rgb) and lines are
    (start, end, rgb, width). Nothing is produced for a non-positive radius.
    """
    try:
        render = _CENTER[type(variant)]
    except KeyError:
        raise TypeError(f"Unknown center variant: {variant!r}") from None
    if radius <= 0:
        return [], []
    return render(variant, radius, color)


def default_center_for(head, rng):
    """Phyllotaxis heads get a pollen grid, radial heads get stamens."""
    if isinstance(head, Phyllotaxis):
        return PollenGrid(detail=int(rng.integers(4, 8)))
    if isinstance(head, Radial):
        return Stamens(detail=int(rng.integers(5, 13)))
    return random_center_variant(rng)


def random_center_variant(rng):
    kind = CENTER_VARIANTS[int(rng.integers(len(CENTER_VARIANTS)))]
    if kind is SimpleDisc:
        return SimpleDisc()
    if kind is Stamens:
        return Stamens(detail=int(rng.integers(5, 13)))
    if kind is PollenGrid:
        return PollenGrid(detail=int(rng.integers(4, 8)))
    return GeometricStar(detail=int(rng.integers(5, 9)))
