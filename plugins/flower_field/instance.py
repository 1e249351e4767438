"""
Flower Instance and Lifecycle State Machine

Each instance is one organism in the field: an immutable random identity
(head topology, petal/stem shape, colors, tendrils, music personality)
plus live lifecycle state driven by life_phase in [0, 1]:

    [0.00, 0.15)  growing        scale t^2, stem t, alpha t
    [0.15, 0.60)  blooming       full music reactivity
    [0.60, 0.80)  losing_petals  petals drop one by one, reactivity fades
    [0.80, 0.95)  wilting        head shrinks away, stem droops
    [0.95, 1.00)  dying          stem collapses, alpha fades out

Fast-death is an accelerated wilt used to shrink the population. An
instance whose cycle ends without a respawn is PENDING_REMOVAL and is
dropped by the field at the end of the tick.
"""

import enum
import math
from collections import namedtuple

from .flower import Flower, InflorescenceParams
from .geometry import PetalShape, StemShape, Tendril
from .heads import (
    LayeredWhorls, Phyllotaxis, default_center_for, random_head_variant,
    random_petal_count,
)
from .noise import NoiseWobble
from .palettes import pick_colors


GROW_END = 0.15
BLOOM_END = 0.60
LOSS_END = 0.80
WILT_END = 0.95

FAST_DEATH_RATE = 1.5


class LifeState(enum.Enum):
    ACTIVE = "active"
    PENDING_REMOVAL = "pending_removal"


LifecyclePose = namedtuple(
    "LifecyclePose",
    ["stage", "scale", "stem_scale", "stem_curve_mod", "alpha",
     "reactivity", "visible_petals"],
)


def round_half_up(x):
    return int(math.floor(x + 0.5))


def visible_petal_count(base_petal_count, t):
    """Petals left after fraction t of the petal-loss stage."""
    return max(0, round_half_up(base_petal_count * (1.0 - t)))


def lifecycle_pose(phase, base_petal_count):
    """Shape multipliers for a normal (not fast-dying) lifecycle phase."""
    if phase < GROW_END:
        t = phase / GROW_END
        return LifecyclePose("growing", t * t, t, 0.0, t, 0.0, base_petal_count)
    if phase < BLOOM_END:
        return LifecyclePose("blooming", 1.0, 1.0, 0.0, 1.0, 1.0, base_petal_count)
    if phase < LOSS_END:
        t = (phase - BLOOM_END) / (LOSS_END - BLOOM_END)
        return LifecyclePose("losing_petals", 1.0 - t * 0.3, 1.0, 0.0, 1.0, 1.0 - t,
                             visible_petal_count(base_petal_count, t))
    if phase < WILT_END:
        t = (phase - LOSS_END) / (WILT_END - LOSS_END)
        return LifecyclePose("wilting", (1.0 - t) * 0.7, 1.0 - t * 0.6, t * 1.5,
                             1.0 - t * 0.6, 0.0, 0)
    t = min((phase - WILT_END) / (1.0 - WILT_END), 1.0)
    return LifecyclePose("dying", 0.01, 0.4 * (1.0 - t), 1.5, (1.0 - t) * 0.4, 0.0, 0)


def fast_death_pose(timer):
    """Accelerated decay: fd = min(timer * 1.5, 1) drives everything to zero."""
    fd = min(timer * FAST_DEATH_RATE, 1.0)
    alpha = 0.0 if fd >= 1.0 else 1.0 - fd * fd
    return LifecyclePose("fast_death", 1.0 - fd, 1.0 - 0.7 * fd, 3.0 * fd,
                         alpha, 0.0, 0)


def depth_scale_for(norm_y):
    """Lower on screen = nearer = larger."""
    depth_t = (norm_y - 0.05) / 0.93
    return 0.3 + (1.2 - 0.3) * depth_t


def _lerp(a, b, t):
    return a + (b - a) * t


class FlowerInstance:
    """One organism: random identity plus lifecycle state."""

    def __init__(self, rng, palette_key=None):
        self.flower = Flower()
        self.respawn(rng, palette_key)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def respawn(self, rng, palette_key=None):
        """Give this slot a brand-new random identity starting at phase 0."""
        self.norm_x = float(rng.uniform(0.02, 0.98))
        self.norm_y = float(rng.uniform(0.05, 0.98))
        self.depth_scale = depth_scale_for(self.norm_y)

        self.head_variant = random_head_variant(rng)
        self.center_variant = default_center_for(self.head_variant, rng)
        self.base_petal_count = random_petal_count(rng, self.head_variant)

        if isinstance(self.head_variant, Phyllotaxis):
            self.base_length = float(rng.uniform(15.0, 30.0))
        elif isinstance(self.head_variant, LayeredWhorls):
            self.base_length = float(rng.uniform(30.0, 65.0))
        else:
            self.base_length = float(rng.uniform(35.0, 75.0))
        self.base_width = float(rng.uniform(0.2, 0.55))
        self.base_pointiness = float(rng.uniform(0.2, 0.8))
        self.base_bulge = float(rng.uniform(0.3, 0.7))
        self.base_edge_curvature = float(rng.uniform(-0.15, 0.4))
        self.base_center_radius = float(rng.uniform(4.0, 12.0))

        self.base_stem_height = float(rng.uniform(60.0, 140.0))
        self.base_stem_curvature = float(rng.uniform(-0.4, 0.4))
        self.stem_thickness = _lerp(1.5, 4.0, self.depth_scale)
        self.stem_taper = float(rng.uniform(0.3, 0.7))
        self.stem_segments = int(rng.integers(1, 5))
        self.stem_node_width = float(rng.uniform(1.0, 1.6))
        self.tendrils = self._random_tendrils(rng)

        self.palette_key = palette_key
        self.petal_color, self.center_color, self.stem_color = pick_colors(rng, palette_key)

        if rng.random() < 0.6:
            self.wobble = NoiseWobble(
                enabled=True,
                seed=float(rng.uniform(0.0, 1000.0)),
                length_amount=float(rng.uniform(0.05, 0.2)),
                angle_amount=float(rng.uniform(3.0, 12.0)),
                scale_amount=float(rng.uniform(0.02, 0.08)),
                time_speed=float(rng.uniform(0.3, 1.0)),
            )
        else:
            self.wobble = NoiseWobble(enabled=False)

        # Music personality
        self.pitch_direction = 1.0 if rng.random() > 0.5 else -1.0
        self.reactivity_bias = float(rng.uniform(0.6, 1.4))
        self.rotation = float(rng.uniform(0.0, 360.0))
        self.rotation_speed = float(rng.uniform(5.0, 25.0)) * (1.0 if rng.random() > 0.5 else -1.0)
        self.life_speed_mult = float(rng.uniform(0.7, 1.3))

        # Lifecycle
        self.life_phase = 0.0
        self.state = LifeState.ACTIVE
        self.current_alpha = 0.0
        self.last_visible_petals = self.base_petal_count
        self.fast_death = False
        self.fast_death_timer = 0.0
        self.pose = lifecycle_pose(0.0, self.base_petal_count)

        self.flower.head.noise_time = 0.0
        self.apply_pose(self.pose, 0.0, 0.0)

    def _random_tendrils(self, rng):
        if rng.random() < 0.5:
            return []
        return [
            Tendril(
                stem_t=float(rng.uniform(0.25, 0.8)),
                length=float(rng.uniform(12.0, 35.0)),
                curl_amount=float(rng.uniform(1.0, 3.0)),
                direction=1 if rng.random() > 0.5 else -1,
                start_angle=float(rng.uniform(0.2, 1.0)),
                thickness=float(rng.uniform(0.8, 1.5)),
            )
            for _ in range(int(rng.integers(1, 4)))
        ]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def active(self):
        return self.state is LifeState.ACTIVE

    @property
    def fast_death_done(self):
        return self.fast_death and self.fast_death_timer * FAST_DEATH_RATE >= 1.0

    @property
    def fast_death_eligible(self):
        return (self.active and not self.fast_death
                and GROW_END < self.life_phase < LOSS_END)

    def start_fast_death(self):
        self.fast_death = True
        self.fast_death_timer = 0.0

    def mark_for_removal(self):
        self.state = LifeState.PENDING_REMOVAL
        self.current_alpha = 0.0

    def advance(self, amount):
        """Advance life_phase; returns True when the cycle completed."""
        assert self.active, "advancing an instance pending removal"
        self.life_phase += amount
        assert self.life_phase >= 0.0, f"life_phase went negative: {self.life_phase}"
        if self.life_phase >= 1.0:
            self.life_phase = 1.0
            return True
        return False

    def compute_pose(self, dt):
        """Current pose; fast-death overrides the normal phase mapping."""
        if self.fast_death:
            self.fast_death_timer += dt
            return fast_death_pose(self.fast_death_timer)
        pose = lifecycle_pose(self.life_phase, self.base_petal_count)
        if pose.stage == "losing_petals" and pose.visible_petals > self.last_visible_petals:
            # Never regrow a petal that already fell this cycle
            pose = pose._replace(visible_petals=self.last_visible_petals)
        return pose

    def apply_pose(self, pose, volume, pitch_norm):
        """Push pose and music modulation into the flower's shape params."""
        self.pose = pose
        self.current_alpha = max(0.0, min(1.0, pose.alpha))

        reactivity = pose.reactivity * self.reactivity_bias
        volume_pulse = 1.0 + volume * 0.9 * reactivity
        pointiness = self.base_pointiness + self.pitch_direction * pitch_norm * 0.35 * reactivity
        pointiness = max(0.0, min(1.0, pointiness))

        self.flower.head.set_params(InflorescenceParams(
            petal=PetalShape(
                count=pose.visible_petals,
                length=self.base_length * self.depth_scale * pose.scale * volume_pulse,
                width_ratio=self.base_width,
                tip_pointiness=pointiness,
                bulge_position=self.base_bulge,
                edge_curvature=self.base_edge_curvature,
            ),
            head=self.head_variant,
            center=self.center_variant,
            petal_slots=self.base_petal_count,
            center_radius=self.base_center_radius * self.depth_scale * max(pose.scale, 0.1),
            rotation=self.rotation,
            petal_color=self.petal_color,
            center_color=self.center_color,
            wobble=self.wobble,
        ))

        self.flower.stem.set_params(StemShape(
            height=self.base_stem_height * self.depth_scale * pose.stem_scale,
            thickness=self.stem_thickness,
            taper_ratio=self.stem_taper,
            curvature=max(-2.0, min(2.0, self.base_stem_curvature + pose.stem_curve_mod)),
            segments=self.stem_segments,
            node_width=self.stem_node_width,
            color=self.stem_color,
            tendrils=self.tendrils,
        ))
        self.flower.stem.tendril_scale = self.depth_scale * pose.stem_scale

    def spin(self, dt):
        self.rotation = (self.rotation + self.rotation_speed * dt) % 360.0
        self.flower.head.advance(dt)

    def screen_position(self, width, height):
        return (self.norm_x * width, self.norm_y * height)

    def draw(self, width, height):
        if not self.active or self.current_alpha <= 0.01:
            return []
        x, y = self.screen_position(width, height)
        return self.flower.draw(x, y, self.current_alpha)
