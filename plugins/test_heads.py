#!/usr/bin/env python3
"""
Test script for head topologies and center ornaments.

Verifies:
1. Petal placement for all five head variants
2. Superformula clamping
3. Center ornament output and the head/center pairing rule
4. Unknown variants are rejected
"""

import math

import pytest

from flower_field.heads import (
    CENTER_VARIANTS, GOLDEN_ANGLE, GeometricStar, LayeredWhorls, Phyllotaxis,
    PollenGrid, Radial, RoseCurve, SimpleDisc, Stamens, Superformula,
    center_shapes, default_center_for, petal_placement, petal_total,
    random_head_variant, random_petal_count, superformula_radius,
)
from flower_field.noise import make_rng


def test_radial_placement():
    print("Testing Radial...")
    for i in range(6):
        p = petal_placement(Radial(), i, 6)
        assert abs(p.angle - i * 60.0) < 1e-9
        assert p.radial_offset == 0.0 and p.length_scale == 1.0
    print("  ✓ Radial evenly spaced")


def test_phyllotaxis_placement():
    print("Testing Phyllotaxis...")
    head = Phyllotaxis(spiral_spacing=2.0)
    assert petal_placement(head, 0, 21).radial_offset == 0.0
    for i in (1, 4, 9, 20):
        p = petal_placement(head, i, 21)
        assert abs(p.angle - (i * GOLDEN_ANGLE) % 360.0) < 1e-9
        assert abs(p.radial_offset - 2.0 * math.sqrt(i)) < 1e-9
    print("  ✓ golden-angle spiral with sqrt(i) offsets")


def test_rose_curve_placement():
    print("Testing RoseCurve...")
    head = RoseCurve(k=3.0, base_scale=0.4)
    assert abs(petal_placement(head, 0, 8).length_scale - 1.0) < 1e-9
    for i in range(8):
        scale = petal_placement(head, i, 8).length_scale
        assert 0.4 - 1e-9 <= scale <= 1.0 + 1e-9
    print("  ✓ rose lengths within [base_scale, 1]")


def test_superformula():
    print("Testing Superformula...")
    assert abs(superformula_radius(0.0, 4, 1, 1, 1) - 1.0) < 1e-9
    # Tiny n1 would spike far beyond the clamp
    for i in range(36):
        r = superformula_radius(math.radians(i * 10), 5, 0.1, 1.7, 1.7)
        assert 0.2 <= r <= 1.5
    head = Superformula(m=6, n1=0.3, n2=1.0, n3=1.0)
    for i in range(12):
        assert 0.2 <= petal_placement(head, i, 12).length_scale <= 1.5
    print("  ✓ superformula clamped to [0.2, 1.5]")


def test_layered_whorls():
    print("Testing LayeredWhorls...")
    head = LayeredWhorls(layer_count=3, petals_per_layer=6, length_falloff=0.75,
                         width_growth=0.15, phase_shift=0.5)
    assert petal_total(head, 99) == 18
    assert petal_total(Radial(), 7) == 7

    p0 = petal_placement(head, 0, 18)
    assert p0.layer == 0 and p0.length_scale == 1.0 and p0.angle == 0.0

    p6 = petal_placement(head, 6, 18)
    assert p6.layer == 1
    assert abs(p6.angle - 30.0) < 1e-9, "Odd layers are offset by half a step"
    assert abs(p6.length_scale - 0.75) < 1e-9
    assert abs(p6.width_scale - 1.15) < 1e-9

    p13 = petal_placement(head, 13, 18)
    assert p13.layer == 2
    assert abs(p13.angle - 60.0) < 1e-9
    assert abs(p13.length_scale - 0.5625) < 1e-9
    print("  ✓ whorls shrink inward, odd layers interleave")


def test_unknown_variants_rejected():
    print("Testing unknown variants...")
    with pytest.raises(TypeError):
        petal_placement(object(), 0, 5)
    with pytest.raises(TypeError):
        center_shapes("disc", 5.0, (255, 255, 0))
    print("  ✓ TypeError for unknown variants")


def test_center_shapes():
    print("Testing center ornaments...")
    color = (240, 200, 60)
    for variant in (SimpleDisc(), Stamens(detail=8), PollenGrid(detail=5),
                    GeometricStar(detail=6)):
        polys, lines = center_shapes(variant, 10.0, color)
        assert polys, f"{variant} should draw something"
        for pts, rgb in polys:
            assert len(pts) >= 4 and len(rgb) == 3
        assert center_shapes(variant, 0.0, color) == ([], [])

    _, lines = center_shapes(Stamens(detail=8), 10.0, color)
    assert len(lines) == 8, "One filament per stamen"

    polys, _ = center_shapes(PollenGrid(detail=5), 10.0, color)
    for pts, _rgb in polys[1:]:
        cx, cy = pts[:-1].mean(axis=0)
        assert math.hypot(cx, cy) < 10.0, "Pollen stays inside the disc"
    print("  ✓ all four centers render, none at zero radius")


def test_pairing_and_random_draws():
    print("Testing pairing rule and random identity...")
    rng = make_rng(5)
    assert isinstance(default_center_for(Phyllotaxis(), rng), PollenGrid)
    assert isinstance(default_center_for(Radial(), rng), Stamens)
    for _ in range(20):
        assert isinstance(default_center_for(RoseCurve(), rng), CENTER_VARIANTS)

    ranges = {Radial: (4, 10), Phyllotaxis: (13, 35), RoseCurve: (5, 13),
              Superformula: (6, 15)}
    for _ in range(200):
        head = random_head_variant(rng)
        count = random_petal_count(rng, head)
        if isinstance(head, LayeredWhorls):
            assert count == head.layer_count * head.petals_per_layer
        else:
            lo, hi = ranges[type(head)]
            assert lo <= count < hi
    print("  ✓ pairing rule and petal count ranges")


if __name__ == "__main__":
    print("\n=== Testing Head Topologies ===\n")

    test_radial_placement()
    test_phyllotaxis_placement()
    test_rose_curve_placement()
    test_superformula()
    test_layered_whorls()
    test_unknown_variants_rejected()
    test_center_shapes()
    test_pairing_and_random_draws()

    print("\n✓ All tests passed!\n")
