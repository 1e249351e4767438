"""
Flower Composition: Inflorescence (head) + Stem

Both parts keep a lazily rebuilt outline cache. Setting parameters only
marks the cache stale when the geometry-relevant fields actually change;
the outline is regenerated on the next read. Colors, rotation and wobble
are applied per draw and never invalidate the cache.
"""

import dataclasses
from dataclasses import dataclass, field

from .commands import (
    LineCommand, PolygonCommand, direction_for_angle, transform_points, with_alpha,
)
from .geometry import (
    PetalShape, StemShape, build_petal_outline, build_stem_outline,
    build_tendril_polyline, is_degenerate_petal, stem_top,
)
from .heads import Radial, SimpleDisc, center_shapes, petal_placement
from .noise import NoiseWobble, wobble_terms


@dataclass
class InflorescenceParams:
    petal: PetalShape = field(default_factory=PetalShape)
    head: object = field(default_factory=Radial)
    center: object = field(default_factory=SimpleDisc)
    petal_slots: int = 0          # placement total; 0 means petal.count
    center_radius: float = 8.0
    rotation: float = 0.0         # degrees
    petal_color: tuple = (220, 80, 120)
    center_color: tuple = (255, 220, 50)
    wobble: NoiseWobble = field(default_factory=NoiseWobble)


class Inflorescence:
    """Flower head: one cached petal outline stamped once per petal."""

    def __init__(self, params=None):
        self.params = params if params is not None else InflorescenceParams()
        self.noise_time = 0.0
        self.rebuild_count = 0
        self._outline = None
        self._dirty = True

    @property
    def dirty(self):
        return self._dirty

    def set_params(self, params):
        if self._outline is None or params.petal != self.params.petal:
            self._dirty = True
        self.params = params

    def petal_outline(self):
        if self._dirty:
            self._rebuild()
        return self._outline

    def _rebuild(self):
        self._outline = build_petal_outline(self.params.petal)
        self._dirty = False
        self.rebuild_count += 1

    def advance(self, dt):
        """Advance the wobble clock."""
        wobble = self.params.wobble
        if wobble is not None and wobble.enabled:
            self.noise_time += dt * wobble.time_speed

    def petal_slots(self):
        return self.params.petal_slots or self.params.petal.count

    def petal_transform(self, index):
        """Return (angle_deg, radial_offset, scale_x, scale_y) for a petal."""
        p = self.params
        placement = petal_placement(p.head, index, self.petal_slots())
        length_factor, angle_offset, scale_offset = wobble_terms(
            p.wobble, index, self.noise_time)
        uniform = 1.0 + scale_offset
        scale_y = placement.length_scale * length_factor * uniform
        scale_x = placement.length_scale * placement.width_scale * uniform
        angle = p.rotation + placement.angle + angle_offset
        return angle, placement.radial_offset * uniform, scale_x, scale_y

    def petal_base(self, index, origin):
        """Base point, axis angle and (scale_x, scale_y) of petal `index`."""
        angle, radial, scale_x, scale_y = self.petal_transform(index)
        dx, dy = direction_for_angle(angle)
        base = (origin[0] + dx * radial, origin[1] + dy * radial)
        return base, angle, scale_x, scale_y

    def draw(self, origin, alpha=1.0):
        p = self.params
        commands = []
        if not is_degenerate_petal(p.petal):
            outline = self.petal_outline()
            color = with_alpha(p.petal_color, alpha)
            for i in range(p.petal.count):
                angle, radial, sx, sy = self.petal_transform(i)
                dx, dy = direction_for_angle(angle)
                pts = transform_points(outline, angle, sx, sy,
                                       (origin[0] + dx * radial, origin[1] + dy * radial))
                commands.append(PolygonCommand(pts, color))

        polys, lines = center_shapes(p.center, p.center_radius, p.center_color)
        for pts, rgb in polys:
            commands.append(PolygonCommand(
                transform_points(pts, p.rotation, offset=origin), with_alpha(rgb, alpha)))
        for start, end, rgb, width in lines:
            ends = transform_points([start, end], p.rotation, offset=origin)
            commands.append(LineCommand(tuple(ends[0]), tuple(ends[1]),
                                        with_alpha(rgb, alpha), width))
        return commands


def _stem_geometry_key(stem):
    return (stem.height, stem.thickness, stem.taper_ratio, stem.curvature,
            stem.segments, stem.node_width)


class Stem:
    """Stem ribbon with a cached outline; tendrils are rebuilt every draw."""

    def __init__(self, params=None):
        self.params = params if params is not None else StemShape()
        self.tendril_scale = 1.0
        self.rebuild_count = 0
        self._outline = None
        self._dirty = True

    @property
    def dirty(self):
        return self._dirty

    def set_params(self, params):
        if self._outline is None or _stem_geometry_key(params) != _stem_geometry_key(self.params):
            self._dirty = True
        self.params = params

    def outline(self):
        if self._dirty:
            self._outline = build_stem_outline(self.params)
            self._dirty = False
            self.rebuild_count += 1
        return self._outline

    def top(self):
        return stem_top(self.params)

    def draw(self, origin, alpha=1.0):
        if self.params.height <= 0 or self.params.thickness <= 0:
            return []
        color = with_alpha(self.params.color, alpha)
        commands = [PolygonCommand(transform_points(self.outline(), offset=origin), color)]
        for tendril in self.params.tendrils:
            scaled = dataclasses.replace(tendril, length=tendril.length * self.tendril_scale)
            if scaled.length <= 0:
                continue
            pts = build_tendril_polyline(self.params, scaled)
            pts = transform_points(pts, offset=origin)
            for a, b in zip(pts[:-1], pts[1:]):
                commands.append(LineCommand(tuple(a), tuple(b), color, tendril.thickness))
        return commands


class Flower:
    """Stem rooted at a ground point with the head mounted on its top."""

    def __init__(self, head_params=None, stem_params=None):
        self.head = Inflorescence(head_params)
        self.stem = Stem(stem_params)

    def head_origin(self, x, y):
        tx, ty = self.stem.top()
        return (x + tx, y + ty)

    def draw(self, x, y, alpha=1.0):
        commands = self.stem.draw((x, y), alpha)
        commands.extend(self.head.draw(self.head_origin(x, y), alpha))
        return commands
