"""
Flower Field Presets

Each preset defines a starting population, mode and color scheme plus
the falling petal physics. Keys under "petals" map one-to-one onto
FallingPetalSystem parameters.
"""

PRESETS = {
    "meadow": {
        "name": "Meadow",
        "description": "Balanced field, slow drifting petals",
        "count": 120, "reactive": False, "color_scheme": 0,
        "petals": {
            "gravity": 60.0, "initial_up_pop": 25.0, "max_lifetime": 6.0,
            "fade_delay": 2.5, "fade_speed": 0.6, "tumble_speed": 120.0,
            "wander_amplitude": 14.0, "wander_frequency": 0.6,
            "offscreen_margin": 50.0,
        },
    },
    "sparse": {
        "name": "Sparse",
        "description": "A few large-feeling flowers with long petal falls",
        "count": 40, "reactive": False, "color_scheme": 3,
        "petals": {
            "gravity": 35.0, "initial_up_pop": 20.0, "max_lifetime": 9.0,
            "fade_delay": 4.0, "fade_speed": 0.4, "tumble_speed": 80.0,
            "wander_amplitude": 22.0, "wander_frequency": 0.4,
            "offscreen_margin": 50.0,
        },
    },
    "dense": {
        "name": "Dense",
        "description": "Crowded bed of small blooms",
        "count": 400, "reactive": False, "color_scheme": 5,
        "petals": {
            "gravity": 70.0, "initial_up_pop": 20.0, "max_lifetime": 4.0,
            "fade_delay": 1.5, "fade_speed": 0.8, "tumble_speed": 140.0,
            "wander_amplitude": 10.0, "wander_frequency": 0.7,
            "offscreen_margin": 40.0,
        },
    },
    "storm": {
        "name": "Storm",
        "description": "Reactive population, petals thrown hard and scattered",
        "count": 120, "reactive": True, "color_scheme": 9,
        "petals": {
            "gravity": 110.0, "initial_up_pop": 60.0, "max_lifetime": 5.0,
            "fade_delay": 2.0, "fade_speed": 0.7, "tumble_speed": 300.0,
            "wander_amplitude": 35.0, "wander_frequency": 1.2,
            "offscreen_margin": 80.0,
        },
    },
    "windless": {
        "name": "Windless",
        "description": "Reactive population, petals drop straight down",
        "count": 120, "reactive": True, "color_scheme": 6,
        "petals": {
            "gravity": 45.0, "initial_up_pop": 8.0, "max_lifetime": 7.0,
            "fade_delay": 3.0, "fade_speed": 0.5, "tumble_speed": 40.0,
            "wander_amplitude": 0.0, "wander_frequency": 0.0,
            "offscreen_margin": 50.0,
        },
    },
}

PRESET_ORDER = ["meadow", "sparse", "dense", "storm", "windless"]

DEFAULT_PRESET = "meadow"


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]
