#!/usr/bin/env python3
"""
Test script for detached petal physics.

Verifies:
1. Spawn offset, initial pop velocity and captured shape
2. Gravity integration and lifetime / fade / offscreen culling
3. Parameter validation and per-petal jitter ranges
"""

import pytest

from flower_field.commands import PolygonCommand
from flower_field.falling_petals import DEFAULT_PARAMS, FallingPetalSystem
from flower_field.geometry import PetalShape
from flower_field.noise import make_rng

PINK = (230, 120, 160)


def _system(**params):
    base = {"gravity": 50.0, "initial_up_pop": 10.0, "max_lifetime": 4.0,
            "fade_delay": 0.0, "fade_speed": 0.0, "wander_amplitude": 0.0}
    base.update(params)
    return FallingPetalSystem(rng=make_rng(0), **base)


def test_spawn_and_gravity():
    print("Testing spawn and gravity...")
    system = _system()
    shape = PetalShape(count=7, length=20.0)
    petal = system.spawn((100.0, 200.0), 90.0, shape, PINK)
    assert petal is not None and system.live_count == 1

    assert petal.base_x == pytest.approx(108.0), "Offset 0.4 * length along the axis"
    assert petal.base_y == pytest.approx(200.0)
    assert petal.vx == pytest.approx(4.0), "Outward 0.4 * pop"
    assert petal.vy == pytest.approx(-10.0), "Upward pop"
    assert petal.rotation == 90.0
    assert len(petal.outline) == 33, "Outline captured for a single petal"

    system.update(1.0)
    assert petal.vy == pytest.approx(40.0)
    assert petal.base_x == pytest.approx(112.0)
    assert petal.base_y == pytest.approx(240.0)
    assert petal.alpha == 1.0
    print("  ✓ pop, then gravity pulls down")


def test_degenerate_shape_ignored():
    print("Testing degenerate spawn...")
    system = _system()
    assert system.spawn((0.0, 0.0), 0.0, PetalShape(length=0.0), PINK) is None
    assert system.live_count == 0
    print("  ✓ zero-length petals never spawn")


def test_lifetime_expiry():
    print("Testing lifetime...")
    system = _system()
    system.spawn((50.0, 50.0), 0.0, PetalShape(length=15.0), PINK)
    for _ in range(7):
        system.update(0.5)
    assert system.live_count == 1, "Alive before max_lifetime"
    system.update(0.5)
    assert system.live_count == 0, "Purged once age reaches max_lifetime"

    system.spawn((50.0, 50.0), 0.0, PetalShape(length=15.0), PINK)
    for _ in range(240):
        system.update(1.0 / 60.0)
    assert system.live_count == 0, "Gone by 4 s at 60 fps"
    print("  ✓ purged by max_lifetime")


def test_fade_out():
    print("Testing fade...")
    system = _system(fade_delay=1.0, fade_speed=0.5, max_lifetime=10.0)
    petal = system.spawn((50.0, 50.0), 0.0, PetalShape(length=15.0), PINK)
    for _ in range(3):
        system.update(0.5)
    assert petal.alpha == pytest.approx(0.75), "Fading starts after the delay"
    assert system.draw()[0].color[3] == round(0.75 * 255)
    for _ in range(3):
        system.update(0.5)
    assert system.live_count == 0, "Purged when fully faded"
    print("  ✓ fade after delay, purge at zero alpha")


def test_offscreen_cull():
    print("Testing offscreen cull...")
    system = _system(gravity=400.0, max_lifetime=30.0)
    system.viewport_height = 100.0
    system.spawn((50.0, 140.0), 180.0, PetalShape(length=10.0), PINK)
    system.update(0.1)
    assert system.live_count == 1
    for _ in range(10):
        system.update(0.1)
    assert system.live_count == 0, "Culled below viewport + margin"
    print("  ✓ culled once past the bottom margin")


def test_params_and_jitter():
    print("Testing parameters...")
    system = FallingPetalSystem(rng=make_rng(9))
    assert system.get_params() == DEFAULT_PARAMS
    system.set_params(gravity=80)
    assert system.get_params()["gravity"] == 80.0
    with pytest.raises(ValueError):
        system.set_params(wind=3.0)

    for i in range(100):
        p = system.spawn((0.0, 0.0), i * 3.6, PetalShape(length=12.0), PINK)
        assert 0.7 * 14.0 - 1e-9 <= p.wander_amplitude <= 1.3 * 14.0 + 1e-9
        assert 0.7 * 0.6 - 1e-9 <= p.wander_frequency <= 1.3 * 0.6 + 1e-9
        assert 0.7 * 120.0 - 1e-9 <= abs(p.rotation_speed) <= 1.3 * 120.0 + 1e-9
    spins = [p.rotation_speed > 0 for p in system.petals]
    assert any(spins) and not all(spins), "Tumble direction is random"

    commands = system.draw()
    assert len(commands) == 100
    assert all(isinstance(c, PolygonCommand) for c in commands)
    system.clear()
    assert system.live_count == 0 and system.draw() == []
    print("  ✓ validated params, ±30% wander and tumble jitter, random spin sign")


if __name__ == "__main__":
    print("\n=== Testing Falling Petals ===\n")

    test_spawn_and_gravity()
    test_degenerate_shape_ignored()
    test_lifetime_expiry()
    test_fade_out()
    test_offscreen_cull()
    test_params_and_jitter()

    print("\n✓ All tests passed!\n")
