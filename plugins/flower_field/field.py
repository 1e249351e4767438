"""
FlowerField - Population Lifecycle Engine

Owns the flower instances, the audio-activity estimator and the falling
petal system. One update(dt, signals) per frame advances everything;
one draw() per frame returns the back-to-front command list.

Usage:
    from flower_field.field import FlowerField
    from flower_field.activity import AudioSignals

    field = FlowerField(count=120, seed=7)
    field.update(1 / 60, AudioSignals(volume=0.1, pitch=330.0,
                                      confidence=0.8, fullness=0.5))
    commands = field.draw()

Population control:
    Normal mode   target = base count; surplus flowers are retired as
                  they finish their cycle (cycle speed is boosted in
                  proportion to the overshoot).
    Reactive mode target = lerp(30, 1500, activity_level); growth is
                  batched (<= 10 spawns per tick) and shrinkage marks
                  <= 5 blooming flowers per tick for fast-death.
"""

import logging
from dataclasses import replace

from .activity import SILENCE, AudioActivity
from .falling_petals import FallingPetalSystem
from .instance import FlowerInstance, lifecycle_pose
from .noise import make_rng
from .palettes import SCHEME_RANDOM, palette_for_scheme, scheme_label
from .presets import get_preset

logger = logging.getLogger(__name__)


BASE_CYCLE_SECONDS = 18.0
MIN_POPULATION = 30
MAX_POPULATION = 1500
MAX_SPAWN_PER_TICK = 10
MAX_DEATHS_PER_TICK = 5
DEATH_PICK_ATTEMPTS = 5
MAX_OVERSHOOT_BOOST = 8.0
DT_MIN, DT_MAX = 0.001, 0.1


class FlowerField:
    """A field of audio-reactive flowers.

    Args:
        count: Base population (normal-mode target)
        reactive: Start in reactive (dynamic population) mode
        color_scheme: 0 cycling, 1..8 fixed palette, 9 random per spawn
        seed: Seed for every random draw the field makes
        width, height: Viewport size used to map normalized positions
        petals: Falling petal physics overrides (see falling_petals.DEFAULT_PARAMS)
    """

    def __init__(self, count=120, reactive=False, color_scheme=0, seed=None,
                 width=1280, height=720, petals=None):
        self.rng = make_rng(seed)
        self.activity = AudioActivity()
        self.falling_petals = FallingPetalSystem(rng=self.rng, **(petals or {}))
        self.width = width
        self.height = height
        self.falling_petals.viewport_height = height
        self.reactive = bool(reactive)
        self.color_scheme = 0
        self.set_color_scheme(color_scheme)
        self.instances = []
        self.last_beat = False
        self.setup(count)

    @classmethod
    def from_preset(cls, key, **overrides):
        """Build a field from a named preset; keyword args override it."""
        preset = get_preset(key)
        if preset is None:
            raise ValueError(f"Unknown preset: {key!r}")
        kwargs = {
            "count": preset["count"],
            "reactive": preset["reactive"],
            "color_scheme": preset["color_scheme"],
            "petals": dict(preset.get("petals", {})),
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    # ------------------------------------------------------------------
    # Setup / controls
    # ------------------------------------------------------------------

    def setup(self, count):
        """(Re)create the population with desynchronized life phases."""
        self.base_count = int(count)
        self.activity.reset()
        self.falling_petals.clear()
        self.instances = []
        for _ in range(self.base_count):
            fi = FlowerInstance(self.rng, self._palette_key())
            # Stagger starting phases so they don't all bloom at once
            fi.life_phase = float(self.rng.uniform(0.0, 1.0))
            pose = lifecycle_pose(fi.life_phase, fi.base_petal_count)
            fi.last_visible_petals = pose.visible_petals
            fi.apply_pose(pose, 0.0, 0.0)
            self.instances.append(fi)
        self._sort()

    def set_viewport(self, width, height):
        self.width = width
        self.height = height
        self.falling_petals.viewport_height = height

    def set_reactive(self, reactive):
        reactive = bool(reactive)
        if reactive != self.reactive:
            logger.debug("Reactive mode %s", "on" if reactive else "off")
        self.reactive = reactive

    def toggle_reactive(self):
        self.set_reactive(not self.reactive)
        return self.reactive

    def set_color_scheme(self, index):
        if not isinstance(index, int) or not 0 <= index <= SCHEME_RANDOM:
            raise ValueError(f"Color scheme must be an int in 0..{SCHEME_RANDOM}, got {index!r}")
        if index != self.color_scheme:
            logger.debug("Color scheme -> %d", index)
        self.color_scheme = index

    def _palette_key(self):
        return palette_for_scheme(self.color_scheme, self.activity.elapsed_time)

    # ------------------------------------------------------------------
    # Derived control values
    # ------------------------------------------------------------------

    @property
    def population(self):
        """Instances still alive (fast-dying ones included)."""
        return sum(1 for fi in self.instances if fi.active)

    @property
    def population_target(self):
        if not self.reactive:
            return self.base_count
        a = self.activity.activity_level
        return int(round(MIN_POPULATION + (MAX_POPULATION - MIN_POPULATION) * a))

    def lifecycle_speed(self):
        """Phase units per second shared by every instance this tick."""
        speed = (1.0 / BASE_CYCLE_SECONDS) * (0.05 + 0.95 * self.activity.fullness)
        if self.reactive:
            speed *= 1.0 + 1.5 * self.activity.activity_level
        else:
            overshoot = self.population - self.base_count
            if overshoot > 0:
                speed *= 1.0 + min(overshoot / max(self.base_count, 1), MAX_OVERSHOOT_BOOST)
        return speed

    # ------------------------------------------------------------------
    # Per-frame update
    # ------------------------------------------------------------------

    def update(self, dt, signals=SILENCE):
        """Advance the whole field by one frame.

        Args:
            dt: Seconds since last frame (clamped to [0.001, 0.1])
            signals: AudioSignals for this frame

        Returns:
            True if a beat was detected on this frame
        """
        dt = min(max(dt, DT_MIN), DT_MAX)
        self.last_beat = self.activity.update(dt, signals)

        target = self.population_target
        speed = self.lifecycle_speed()
        volume = self.activity.volume
        pitch_norm = self.activity.pitch_norm
        live = self.population
        needs_sort = False

        for fi in self.instances:
            if not fi.active:
                continue

            if not fi.fast_death and fi.advance(speed * fi.life_speed_mult * dt):
                if live <= target:
                    fi.respawn(self.rng, self._palette_key())
                    needs_sort = True
                else:
                    fi.mark_for_removal()
                    live -= 1
                continue

            assert 0.0 <= fi.life_phase <= 1.0, f"life_phase out of range: {fi.life_phase}"

            fi.spin(dt)
            pose = fi.compute_pose(dt)
            self._detach_petals(fi, pose.visible_petals)
            fi.apply_pose(pose, volume, pitch_norm)
            if fi.fast_death_done:
                fi.mark_for_removal()
                live -= 1

        # Deferred removal: never erase while iterating
        self.instances = [fi for fi in self.instances if fi.active]

        if self._control_population(target):
            needs_sort = True
        if needs_sort:
            self._sort()

        self.falling_petals.update(dt)
        return self.last_beat

    def _detach_petals(self, fi, visible):
        """Hand every petal lost since last tick to the falling petal system."""
        previous = fi.last_visible_petals
        if visible < previous:
            head = fi.flower.head
            shape = head.params.petal
            x, y = fi.screen_position(self.width, self.height)
            origin = fi.flower.head_origin(x, y)
            # Highest indices drop first
            for idx in range(previous - 1, visible - 1, -1):
                base, angle, scale_x, scale_y = head.petal_base(idx, origin)
                if scale_y <= 0.0:
                    continue
                petal_shape = replace(shape, length=shape.length * scale_y,
                                      width_ratio=shape.width_ratio * scale_x / scale_y)
                self.falling_petals.spawn(base, angle, petal_shape, fi.petal_color)
        fi.last_visible_petals = visible

    def _control_population(self, target):
        """Batched growth toward target, fast-death when over it (reactive only).

        Returns True if new instances were added.
        """
        population = self.population
        if population < target:
            n = min(MAX_SPAWN_PER_TICK, target - population)
            for _ in range(n):
                self.instances.append(FlowerInstance(self.rng, self._palette_key()))
            logger.debug("Spawned %d flowers (population %d -> target %d)",
                         n, population + n, target)
            return True

        if self.reactive:
            live = sum(1 for fi in self.instances if fi.active and not fi.fast_death)
            excess = live - target
            if excess > 0:
                marked = self._mark_fast_deaths(min(MAX_DEATHS_PER_TICK, excess))
                if marked:
                    logger.debug("Fast-death marked %d flowers (excess %d)", marked, excess)
        return False

    def _mark_fast_deaths(self, n):
        """Pick up to n eligible blooming flowers by bounded random retry."""
        marked = 0
        if not self.instances:
            return marked
        for _ in range(n):
            for _attempt in range(DEATH_PICK_ATTEMPTS):
                fi = self.instances[int(self.rng.integers(len(self.instances)))]
                if fi.fast_death_eligible:
                    fi.start_fast_death()
                    marked += 1
                    break
        return marked

    def _sort(self):
        # Farther (higher on screen) first
        self.instances.sort(key=lambda fi: fi.norm_y)

    # ------------------------------------------------------------------
    # Draw
    # ------------------------------------------------------------------

    def draw(self):
        """Ordered draw commands: flowers back to front, then falling petals."""
        commands = []
        for fi in self.instances:
            commands.extend(fi.draw(self.width, self.height))
        commands.extend(self.falling_petals.draw())
        return commands

    @property
    def stats(self):
        return {
            "population": self.population,
            "target": self.population_target,
            "reactive": self.reactive,
            "activity": self.activity.activity_level,
            "volume": self.activity.volume,
            "fullness": self.activity.fullness,
            "pitch_norm": self.activity.pitch_norm,
            "beats": self.activity.total_beats,
            "beat_density": self.activity.beat_density,
            "falling_petals": self.falling_petals.live_count,
            "palette": scheme_label(self.color_scheme, self.activity.elapsed_time),
        }
