"""
Draw Commands

The core never talks to a graphics API. It emits an ordered list of
filled polygons and line segments in viewport space; a rendering
collaborator (see viewer.py) turns them into pixels.

Screen convention: +Y points down, positive angles rotate clockwise.
"""

import math
from collections import namedtuple

import numpy as np


PolygonCommand = namedtuple("PolygonCommand", ["points", "color"])
LineCommand = namedtuple("LineCommand", ["start", "end", "color", "width"])


def with_alpha(rgb, alpha):
    """Attach an alpha in [0, 1] to an RGB tuple -> (r, g, b, a) ints."""
    a = int(round(max(0.0, min(1.0, alpha)) * 255))
    return (int(rgb[0]), int(rgb[1]), int(rgb[2]), a)


def direction_for_angle(angle_deg):
    """Unit vector of a petal axis at angle_deg (0 = straight up)."""
    rad = math.radians(angle_deg)
    return (math.sin(rad), -math.cos(rad))


def transform_points(points, angle_deg=0.0, scale_x=1.0, scale_y=1.0,
                     offset=(0.0, 0.0)):
    """Scale, then rotate, then translate an (N, 2) point array."""
    pts = np.asarray(points, dtype=np.float64)
    sx = pts[:, 0] * scale_x
    sy = pts[:, 1] * scale_y
    rad = math.radians(angle_deg)
    c, s = math.cos(rad), math.sin(rad)
    out = np.empty_like(pts)
    out[:, 0] = sx * c - sy * s + offset[0]
    out[:, 1] = sx * s + sy * c + offset[1]
    return out
