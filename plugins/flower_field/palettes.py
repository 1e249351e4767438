"""
Flower Color Palettes

Each palette is a set of HSV ranges (hue in degrees, saturation and
value in [0, 1]) for petals, centers and stems. A spawn draws one color
from each range, so flowers sharing a palette stay related but never
identical.

Color scheme selection index:
    0     cycle through the palettes over time
    1..8  fixed palette (PALETTE_ORDER[index - 1])
    9     random hue per spawn
"""

import colorsys


CYCLE_SECONDS = 20.0
SCHEME_CYCLE = 0
SCHEME_RANDOM = 9

PALETTES = {
    "warm_meadow": {
        "name": "Warm Meadow",
        # Mostly warm petals with an occasional blue bloom
        "petal_hues": [(0, 40), (0, 40), (200, 260)],
        "petal_sat": (0.47, 0.90), "petal_val": (0.63, 0.98),
        "center_hue": (35, 70), "center_sat": (0.70, 0.94), "center_val": (0.78, 1.0),
        "stem_hue": (105, 155), "stem_sat": (0.40, 0.78), "stem_val": (0.24, 0.63),
    },
    "sunflower": {
        "name": "Sunflower",
        "petal_hues": [(40, 58)],
        "petal_sat": (0.75, 1.0), "petal_val": (0.85, 1.0),
        "center_hue": (15, 30), "center_sat": (0.70, 0.95), "center_val": (0.25, 0.45),
        "stem_hue": (90, 130), "stem_sat": (0.50, 0.80), "stem_val": (0.30, 0.55),
    },
    "lavender_field": {
        "name": "Lavender Field",
        "petal_hues": [(255, 290)],
        "petal_sat": (0.30, 0.65), "petal_val": (0.65, 0.95),
        "center_hue": (45, 60), "center_sat": (0.50, 0.80), "center_val": (0.85, 1.0),
        "stem_hue": (120, 150), "stem_sat": (0.25, 0.50), "stem_val": (0.35, 0.60),
    },
    "coral_reef": {
        "name": "Coral Reef",
        "petal_hues": [(345, 360), (0, 20), (170, 190)],
        "petal_sat": (0.55, 0.85), "petal_val": (0.80, 1.0),
        "center_hue": (180, 200), "center_sat": (0.40, 0.70), "center_val": (0.80, 1.0),
        "stem_hue": (150, 175), "stem_sat": (0.40, 0.70), "stem_val": (0.30, 0.55),
    },
    "pastel_spring": {
        "name": "Pastel Spring",
        "petal_hues": [(300, 340), (190, 220), (50, 70)],
        "petal_sat": (0.20, 0.40), "petal_val": (0.90, 1.0),
        "center_hue": (40, 55), "center_sat": (0.40, 0.60), "center_val": (0.95, 1.0),
        "stem_hue": (95, 125), "stem_sat": (0.30, 0.50), "stem_val": (0.55, 0.75),
    },
    "moonlit": {
        "name": "Moonlit",
        "petal_hues": [(200, 240)],
        "petal_sat": (0.05, 0.30), "petal_val": (0.75, 0.95),
        "center_hue": (190, 220), "center_sat": (0.30, 0.60), "center_val": (0.55, 0.80),
        "stem_hue": (160, 200), "stem_sat": (0.20, 0.40), "stem_val": (0.20, 0.40),
    },
    "autumn": {
        "name": "Autumn",
        "petal_hues": [(10, 35), (35, 50)],
        "petal_sat": (0.70, 1.0), "petal_val": (0.55, 0.90),
        "center_hue": (0, 15), "center_sat": (0.60, 0.90), "center_val": (0.30, 0.50),
        "stem_hue": (40, 70), "stem_sat": (0.40, 0.70), "stem_val": (0.25, 0.45),
    },
    "neon_bloom": {
        "name": "Neon Bloom",
        "petal_hues": [(290, 320), (160, 185), (75, 95)],
        "petal_sat": (0.85, 1.0), "petal_val": (0.90, 1.0),
        "center_hue": (0, 360), "center_sat": (0.80, 1.0), "center_val": (0.90, 1.0),
        "stem_hue": (120, 140), "stem_sat": (0.70, 1.0), "stem_val": (0.45, 0.70),
    },
}

PALETTE_ORDER = [
    "warm_meadow", "sunflower", "lavender_field", "coral_reef",
    "pastel_spring", "moonlit", "autumn", "neon_bloom",
]


def hsv_color(h_deg, s, v):
    r, g, b = colorsys.hsv_to_rgb((h_deg % 360.0) / 360.0, s, v)
    return (int(r * 255), int(g * 255), int(b * 255))


def _draw(rng, lo_hi):
    return float(rng.uniform(lo_hi[0], lo_hi[1]))


def pick_colors(rng, palette_key=None):
    """Draw (petal, center, stem) RGB colors.

    palette_key None means a fully random petal hue with the default
    center and stem ranges.
    """
    if palette_key is None:
        p = PALETTES["warm_meadow"]
        petal_hue = _draw(rng, (0.0, 360.0))
    else:
        p = PALETTES[palette_key]
        hues = p["petal_hues"]
        petal_hue = _draw(rng, hues[int(rng.integers(len(hues)))])
    petal = hsv_color(petal_hue, _draw(rng, p["petal_sat"]), _draw(rng, p["petal_val"]))
    center = hsv_color(_draw(rng, p["center_hue"]), _draw(rng, p["center_sat"]),
                       _draw(rng, p["center_val"]))
    stem = hsv_color(_draw(rng, p["stem_hue"]), _draw(rng, p["stem_sat"]),
                     _draw(rng, p["stem_val"]))
    return petal, center, stem


def palette_for_scheme(scheme, elapsed_time):
    """Palette key a new spawn should use, or None for random colors."""
    if scheme == SCHEME_RANDOM:
        return None
    if scheme == SCHEME_CYCLE:
        idx = int(elapsed_time // CYCLE_SECONDS) % len(PALETTE_ORDER)
        return PALETTE_ORDER[idx]
    return PALETTE_ORDER[scheme - 1]


def scheme_label(scheme, elapsed_time=0.0):
    if scheme == SCHEME_RANDOM:
        return "Random"
    key = palette_for_scheme(scheme, elapsed_time)
    label = PALETTES[key]["name"]
    if scheme == SCHEME_CYCLE:
        return f"Cycling ({label})"
    return label
