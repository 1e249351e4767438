#!/usr/bin/env python3
"""
Test script for the flower field engine.

Verifies:
1. Setup, depth sort and draw output
2. Normal-mode population: respawn, overshoot retirement, growth
3. Reactive-mode population: batched growth, bounded fast-death marking
4. Petal detachment into the falling petal system
5. Controls (presets, color scheme, reactive toggle) and dt clamping
"""

from dataclasses import replace

import numpy as np
import pytest

from flower_field.activity import AudioSignals
from flower_field.commands import LineCommand, PolygonCommand
from flower_field.field import (
    BASE_CYCLE_SECONDS, MAX_DEATHS_PER_TICK, MAX_POPULATION, MAX_SPAWN_PER_TICK,
    FlowerField,
)
from flower_field.geometry import build_petal_outline
from flower_field.heads import LayeredWhorls, SimpleDisc
from flower_field.instance import lifecycle_pose
from flower_field.noise import NoiseWobble

DT = 1.0 / 60.0
LOUD = AudioSignals(volume=0.3, pitch=330.0, confidence=0.9, fullness=1.0)


def _sorted_by_depth(field):
    ys = [fi.norm_y for fi in field.instances]
    return all(a <= b for a, b in zip(ys, ys[1:]))


def test_setup_and_draw():
    print("Testing setup...")
    field = FlowerField(count=50, seed=1, width=800, height=600)
    assert field.population == 50
    assert _sorted_by_depth(field)
    phases = {round(fi.life_phase, 6) for fi in field.instances}
    assert len(phases) > 40, "Life phases are desynchronized"

    commands = field.draw()
    assert commands
    assert all(isinstance(c, (PolygonCommand, LineCommand)) for c in commands)
    for c in commands:
        assert len(c.color) == 4 and 0 <= c.color[3] <= 255
    print(f"  ✓ 50 flowers, {len(commands)} draw commands")


def test_dt_clamped():
    print("Testing dt clamp...")
    field = FlowerField(count=5, seed=2)
    field.update(5.0)
    assert field.activity.elapsed_time == pytest.approx(0.1)
    field.update(0.0)
    assert field.activity.elapsed_time == pytest.approx(0.101)
    print("  ✓ dt clamped to [0.001, 0.1]")


def test_normal_mode_population_steady():
    print("Testing normal mode...")
    field = FlowerField(count=40, seed=3)
    for _ in range(300):
        field.update(DT, LOUD)
        assert field.population == 40
        assert _sorted_by_depth(field)
    print("  ✓ population held at base count, sort kept")


def test_respawn_on_cycle_end():
    print("Testing respawn...")
    field = FlowerField(count=10, seed=4)
    fi = field.instances[3]
    fi.life_phase = 0.999999
    field.update(DT)
    assert fi.active and fi.life_phase == 0.0, "Completed cycle respawns in place"
    assert field.population == 10
    print("  ✓ slot reused with a new identity")


def test_overshoot_retired_at_cycle_end():
    print("Testing overshoot retirement...")
    field = FlowerField(count=10, seed=5)
    field.base_count = 5
    for fi in field.instances:
        fi.life_phase = 0.999999
    field.update(DT)
    assert field.population == 5
    assert len(field.instances) == 5, "Removed instances are purged at tick end"
    print("  ✓ surplus flowers removed instead of respawned")


def test_lifecycle_speed():
    print("Testing lifecycle speed...")
    field = FlowerField(count=10, seed=6)
    quiet = field.lifecycle_speed()
    assert quiet == pytest.approx(0.05 / BASE_CYCLE_SECONDS)

    field.base_count = 5
    assert field.lifecycle_speed() == pytest.approx(quiet * 2.0), "Overshoot boost"

    field.base_count = 10
    field.set_reactive(True)
    field.activity.activity_level = 1.0
    assert field.lifecycle_speed() == pytest.approx(quiet * 2.5)
    print("  ✓ fullness, activity and overshoot scaling")


def test_normal_mode_growth_batched():
    print("Testing normal-mode growth...")
    field = FlowerField(count=10, seed=7)
    field.base_count = 25
    field.update(DT)
    assert field.population == 20
    field.update(DT)
    assert field.population == 25
    assert _sorted_by_depth(field)
    print("  ✓ grows back to base count 10 per tick")


def test_reactive_growth_bounded():
    print("Testing reactive growth...")
    field = FlowerField(count=30, reactive=True, seed=8)
    field.activity.activity_level = 1.0
    previous = field.population
    for _ in range(40):
        field.update(DT, LOUD)
        pop = field.population
        assert pop - previous <= MAX_SPAWN_PER_TICK
        assert pop <= MAX_POPULATION
        previous = pop
    assert field.population > 300, "Population grows toward the target"
    assert _sorted_by_depth(field)
    print(f"  ✓ grew to {field.population} in batches of <= {MAX_SPAWN_PER_TICK}")


def test_reactive_shrink_bounded():
    print("Testing reactive shrink...")
    field = FlowerField(count=200, reactive=True, seed=9)
    assert field.population_target == 30
    for _ in range(200):
        before = {id(fi) for fi in field.instances if fi.fast_death}
        field.update(0.05)
        newly = [fi for fi in field.instances if fi.fast_death and id(fi) not in before]
        assert len(newly) <= MAX_DEATHS_PER_TICK
        for fi in field.instances:
            assert 0.0 <= fi.life_phase <= 1.0
    assert field.population < 120, f"Population should shrink, got {field.population}"
    print(f"  ✓ shrank to {field.population}, <= {MAX_DEATHS_PER_TICK} marks per tick")


def test_petals_detach_into_falling_system():
    print("Testing petal detachment...")
    field = FlowerField(count=20, seed=10, width=800, height=600)
    expected = 0
    for fi in field.instances:
        fi.fast_death = False
        fi.life_phase = 0.7
        fi.last_visible_petals = fi.base_petal_count
    field.update(DT)
    for fi in field.instances:
        assert fi.last_visible_petals < fi.base_petal_count
        expected += fi.base_petal_count - fi.last_visible_petals
    assert field.falling_petals.live_count == expected
    assert field.stats["falling_petals"] == expected
    print(f"  ✓ {expected} petals handed to the falling petal system")


def test_inner_whorl_petals_drop_first():
    print("Testing petal drop order...")
    field = FlowerField(count=1, seed=13, width=800, height=600)
    field.falling_petals.set_params(tumble_speed=0.0)
    fi = field.instances[0]
    fi.head_variant = LayeredWhorls(layer_count=3, petals_per_layer=6)
    fi.center_variant = SimpleDisc()
    fi.base_petal_count = 18
    fi.wobble = NoiseWobble(enabled=False)
    fi.rotation_speed = 0.0
    fi.fast_death = False
    fi.life_phase = 0.7
    fi.last_visible_petals = 18
    fi.apply_pose(lifecycle_pose(0.5, 18), 0.0, 0.0)

    head = fi.flower.head
    shape = head.params.petal
    transforms = [head.petal_transform(idx) for idx in range(18)]

    field.update(DT)
    visible = fi.last_visible_petals
    assert visible == 9, "Halfway through petal loss half the petals remain"

    dropped = list(range(17, visible - 1, -1))
    petals = field.falling_petals.petals
    assert len(petals) == len(dropped)
    for petal, idx in zip(petals, dropped):
        angle, _, scale_x, scale_y = transforms[idx]
        assert petal.rotation == pytest.approx(angle), f"petal {idx} out of order"
        captured = replace(shape, count=1, length=shape.length * scale_y,
                           width_ratio=shape.width_ratio * scale_x / scale_y)
        assert np.allclose(petal.outline, build_petal_outline(captured))

    assert all(transforms[idx][2] / transforms[idx][3] == pytest.approx(1.3)
               for idx in dropped[:6]), "Innermost whorl is widest"
    print(f"  ✓ indices {dropped[0]}..{dropped[-1]} dropped innermost first, width kept")


def test_controls():
    print("Testing controls...")
    field = FlowerField.from_preset("storm", count=12, seed=11)
    assert field.reactive is True
    assert field.falling_petals.gravity == 110.0
    assert field.base_count == 12

    with pytest.raises(ValueError):
        FlowerField.from_preset("jungle")
    with pytest.raises(ValueError):
        field.set_color_scheme(10)
    with pytest.raises(ValueError):
        field.set_color_scheme(-1)

    field.set_color_scheme(2)
    assert field.stats["palette"] == "Sunflower"
    assert field.toggle_reactive() is False
    assert field.population_target == 12

    stats = field.stats
    for key in ("population", "target", "activity", "beats", "falling_petals", "palette"):
        assert key in stats
    print("  ✓ presets, color scheme validation, reactive toggle")


def test_headless_run(capsys):
    print("Testing headless run...")
    from flower_field.__main__ import headless

    field = headless("storm", 330, count=20, seed=12, width=640, height=360)
    out = capsys.readouterr().out
    assert "t=   5.0s" in out
    assert "Done: 330 frames" in out
    assert field.width == 640 and field.falling_petals.viewport_height == 360
    assert field.activity.total_beats > 0
    print("  ✓ runs without a window and reports every 5 s")


if __name__ == "__main__":
    print("\n=== Testing Flower Field ===\n")

    test_setup_and_draw()
    test_dt_clamped()
    test_normal_mode_population_steady()
    test_respawn_on_cycle_end()
    test_overshoot_retired_at_cycle_end()
    test_lifecycle_speed()
    test_normal_mode_growth_batched()
    test_reactive_growth_bounded()
    test_reactive_shrink_bounded()
    test_petals_detach_into_falling_system()
    test_inner_whorl_petals_drop_first()
    test_controls()

    print("\n✓ All tests passed!\n")
