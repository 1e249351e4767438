"""
Petal and Stem Geometry Generators

Pure functions mapping a small parameter set to renderable outlines.
All outlines are (N, 2) float64 arrays in local space with +Y down:

- A petal grows from the origin toward -Y (its tip sits at (0, -length)).
- A stem grows from its ground point at the origin toward -Y.

Closed outlines repeat their first point at the end.
"""

import math
from dataclasses import dataclass, field

import numpy as np


@dataclass
class PetalShape:
    count: int = 5
    length: float = 60.0          # pixels from base to tip
    width_ratio: float = 0.35     # max half-width as a fraction of length
    tip_pointiness: float = 0.5   # 0 = fully rounded tip, 1 = sharp point
    bulge_position: float = 0.5   # where the widest point sits (0=base, 1=tip)
    edge_curvature: float = 0.2   # >0 convex, <0 concave, 0 straight


@dataclass
class Tendril:
    stem_t: float = 0.5        # attachment point along the stem (0=base, 1=top)
    length: float = 30.0
    curl_amount: float = 2.0   # total heading change in half-turns
    direction: int = 1         # -1 left, +1 right
    start_angle: float = 0.6   # radians: 0 = along normal, pi/2 = along tangent
    thickness: float = 1.0

    def __post_init__(self):
        if self.direction not in (-1, 1):
            raise ValueError(f"Tendril direction must be -1 or +1, got {self.direction!r}")


@dataclass
class StemShape:
    height: float = 120.0
    thickness: float = 3.0
    taper_ratio: float = 0.5     # tip half-width as a fraction of base
    curvature: float = 0.0       # -2..2, bend left/right
    segments: int = 1            # node boundaries at k / segments
    node_width: float = 1.0      # >= 1, bulge multiplier at nodes
    color: tuple = (60, 140, 50)
    tendrils: list = field(default_factory=list)


def is_degenerate_petal(shape):
    return shape.count <= 0 or shape.length <= 0


def circle_points(radius, segments=24, center=(0.0, 0.0)):
    """Closed regular polygon approximating a circle."""
    a = np.linspace(0.0, 2.0 * math.pi, segments + 1)
    pts = np.empty((segments + 1, 2), dtype=np.float64)
    pts[:, 0] = center[0] + np.cos(a) * radius
    pts[:, 1] = center[1] + np.sin(a) * radius
    pts[-1] = pts[0]
    return pts


def cubic_bezier(p0, p1, p2, p3, t):
    """Evaluate a cubic Bezier at parameter array t -> (len(t), 2)."""
    t = np.asarray(t, dtype=np.float64)[:, None]
    mt = 1.0 - t
    return (mt ** 3 * np.asarray(p0, dtype=np.float64)
            + 3.0 * mt ** 2 * t * np.asarray(p1, dtype=np.float64)
            + 3.0 * mt * t ** 2 * np.asarray(p2, dtype=np.float64)
            + t ** 3 * np.asarray(p3, dtype=np.float64))


def cubic_bezier_derivative(p0, p1, p2, p3, t):
    t = np.asarray(t, dtype=np.float64)[:, None]
    mt = 1.0 - t
    p0, p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    return (3.0 * mt ** 2 * (p1 - p0)
            + 6.0 * mt * t * (p2 - p1)
            + 3.0 * t ** 2 * (p3 - p2))


# ---------------------------------------------------------------------------
# Petal
# ---------------------------------------------------------------------------

def build_petal_outline(shape, samples=16):
    """Build the closed outline of a single petal pointing along -Y.

    Two mirrored cubic arcs: base -> tip on the left, tip -> base on the
    right. The left arc stays at x <= 0 and the right arc at x >= 0, so
    the outline cannot cross itself for any edge_curvature in [-1, 1].
    """
    length = shape.length
    half_width = length * shape.width_ratio
    bulge_y = length * min(max(shape.bulge_position, 0.05), 0.95)
    tip_width = half_width * (1.0 - min(max(shape.tip_pointiness, 0.0), 1.0))
    # Shifts the bulge control points outward (convex) or inward (concave)
    curve_shift = shape.edge_curvature * half_width * 0.5
    near_tip = -(length - length * 0.08)

    t = np.linspace(0.0, 1.0, samples + 1)
    left = cubic_bezier(
        (0.0, 0.0),
        (-(half_width + curve_shift), -bulge_y),
        (-tip_width, near_tip),
        (0.0, -length),
        t,
    )
    right = cubic_bezier(
        (0.0, -length),
        (tip_width, near_tip),
        (half_width + curve_shift, -bulge_y),
        (0.0, 0.0),
        t,
    )
    outline = np.vstack([left, right[1:]])
    outline[-1] = outline[0]
    return outline


# ---------------------------------------------------------------------------
# Stem
# ---------------------------------------------------------------------------

def stem_control_points(stem):
    """Control points of the stem centerline.

    Shared by the outline builder and the point/tangent queries so tendril
    anchors always sit on the drawn stem.
    """
    h = stem.height
    x_offset = stem.curvature * h * 0.3
    return (
        (0.0, 0.0),
        (x_offset * 0.6, -h * 0.5),
        (x_offset, -h * 0.9),
        (x_offset, -h),
    )


def stem_point_at(stem, t):
    p = cubic_bezier(*stem_control_points(stem), [t])[0]
    return (float(p[0]), float(p[1]))


def stem_tangent_at(stem, t):
    """Unit tangent of the stem centerline (points upward, toward the head)."""
    d = cubic_bezier_derivative(*stem_control_points(stem), [t])[0]
    n = math.hypot(d[0], d[1])
    if n < 1e-9:
        return (0.0, -1.0)
    return (float(d[0] / n), float(d[1] / n))


def stem_top(stem):
    return stem_point_at(stem, 1.0)


def _node_bulge(s, segments, node_width, radius=0.06):
    """Multiplicative half-width factor at normalized arc length s."""
    factor = np.ones_like(s)
    if segments <= 1 or node_width <= 1.0:
        return factor
    for k in range(1, segments):
        d = np.abs(s - k / segments)
        bump = np.where(d < radius, 0.5 * (1.0 + np.cos(math.pi * d / radius)), 0.0)
        factor *= 1.0 + (node_width - 1.0) * bump
    return factor


def build_stem_outline(stem):
    """Thickened ribbon around the stem centerline, closed.

    Half-width tapers linearly from thickness/2 at the base to
    thickness/2 * taper_ratio at the tip, with cosine bumps at each
    internal segment boundary.
    """
    segments = max(1, int(stem.segments))
    n = max(segments * 8, 20)
    t = np.linspace(0.0, 1.0, n)
    ctrl = stem_control_points(stem)
    pts = cubic_bezier(*ctrl, t)
    deriv = cubic_bezier_derivative(*ctrl, t)

    norms = np.hypot(deriv[:, 0], deriv[:, 1])
    norms[norms < 1e-9] = 1.0
    tangents = deriv / norms[:, None]
    normals = np.column_stack([-tangents[:, 1], tangents[:, 0]])

    # Normalized arc length for node placement
    seg_len = np.hypot(np.diff(pts[:, 0]), np.diff(pts[:, 1]))
    s = np.concatenate([[0.0], np.cumsum(seg_len)])
    if s[-1] > 0:
        s /= s[-1]
    else:
        s = t

    base_half = stem.thickness * 0.5
    tip_half = base_half * stem.taper_ratio
    half = (base_half + (tip_half - base_half) * s) * _node_bulge(
        s, segments, stem.node_width)

    left = pts + normals * half[:, None]
    right = pts - normals * half[:, None]
    return np.vstack([left, right[::-1], left[:1]])


def build_tendril_polyline(stem, tendril, steps=15):
    """Spiral poly-line growing out of the stem at tendril.stem_t.

    The starting heading mixes the outward normal (cos start_angle) with
    the upward tangent (sin start_angle); every step rotates the heading by
    curl_amount * pi / steps and the step length shrinks to 60%.
    """
    ax, ay = stem_point_at(stem, tendril.stem_t)
    tx, ty = stem_tangent_at(stem, tendril.stem_t)
    nx, ny = -ty * tendril.direction, tx * tendril.direction
    ca, sa = math.cos(tendril.start_angle), math.sin(tendril.start_angle)
    hx = nx * ca + tx * sa
    hy = ny * ca + ty * sa
    hn = math.hypot(hx, hy) or 1.0
    heading = math.atan2(hy / hn, hx / hn)

    turn = tendril.curl_amount * math.pi / steps * tendril.direction
    step0 = tendril.length / steps
    points = np.empty((steps + 1, 2), dtype=np.float64)
    points[0] = (ax, ay)
    x, y = ax, ay
    for i in range(steps):
        step_len = step0 * (1.0 - 0.4 * i / max(steps - 1, 1))
        x += math.cos(heading) * step_len
        y += math.sin(heading) * step_len
        points[i + 1] = (x, y)
        heading += turn
    return points
