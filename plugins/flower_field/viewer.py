"""
Interactive Pygame Viewer for the Flower Field

Renders the field's draw commands and feeds it synthetic audio from
DemoSignalSource, so the whole lifecycle can be watched without an
audio collaborator.

Controls:
  SPACE       Pause / Resume
  R           Toggle reactive (dynamic population) mode
  0-9         Color scheme (0 cycle, 1-8 palette, 9 random)
  UP / DOWN   Demo audio energy
  C           Clear falling petals
  H           Toggle HUD overlay
  Q / ESC     Quit
"""

import time

import numpy as np
import pygame

from .activity import pitch_to_note_name
from .commands import LineCommand, PolygonCommand
from .demo_signals import DemoSignalSource
from .field import FlowerField
from .presets import DEFAULT_PRESET, get_preset

BG_COLOR = (12, 14, 20)
HUD_TEXT = (210, 215, 225)
BEAT_FLASH = (255, 200, 90)
ENERGY_STEP = 0.1


def _draw_alpha_polygon(screen, points, color):
    """Blend one filled polygon onto screen, honoring its alpha."""
    if len(points) < 3:
        return
    r, g, b, a = color
    if a <= 0:
        return
    if a >= 255:
        pygame.draw.polygon(screen, (r, g, b), points)
        return
    xs = points[:, 0]
    ys = points[:, 1]
    x0, y0 = int(np.floor(xs.min())), int(np.floor(ys.min()))
    w = int(np.ceil(xs.max())) - x0 + 1
    h = int(np.ceil(ys.max())) - y0 + 1
    if w <= 0 or h <= 0:
        return
    layer = pygame.Surface((w, h), pygame.SRCALPHA)
    pygame.draw.polygon(layer, color, points - (x0, y0))
    screen.blit(layer, (x0, y0))


def _draw_alpha_line(screen, start, end, color, width):
    r, g, b, a = color
    if a <= 0:
        return
    width = max(1, int(round(width)))
    if a >= 255:
        pygame.draw.line(screen, (r, g, b), start, end, width)
        return
    x0 = int(min(start[0], end[0])) - width
    y0 = int(min(start[1], end[1])) - width
    w = int(abs(end[0] - start[0])) + 2 * width + 1
    h = int(abs(end[1] - start[1])) + 2 * width + 1
    layer = pygame.Surface((w, h), pygame.SRCALPHA)
    pygame.draw.line(layer, color, (start[0] - x0, start[1] - y0),
                     (end[0] - x0, end[1] - y0), width)
    screen.blit(layer, (x0, y0))


def render_commands(screen, commands):
    """Execute draw commands in order onto a pygame surface."""
    for cmd in commands:
        if isinstance(cmd, PolygonCommand):
            _draw_alpha_polygon(screen, np.asarray(cmd.points, dtype=float), cmd.color)
        elif isinstance(cmd, LineCommand):
            _draw_alpha_line(screen, cmd.start, cmd.end, cmd.color, cmd.width)


class Viewer:
    """Window, input and frame loop around one FlowerField."""

    def __init__(self, width=1280, height=720, preset=DEFAULT_PRESET,
                 count=None, reactive=None, seed=None):
        self.width = width
        self.height = height
        self.preset_key = preset
        overrides = {"width": width, "height": height, "seed": seed}
        if count is not None:
            overrides["count"] = count
        if reactive is not None:
            overrides["reactive"] = reactive
        self.field = FlowerField.from_preset(preset, **overrides)
        self.signals = DemoSignalSource(seed=seed)
        self.running = True
        self.paused = False
        self.show_hud = True
        self.hud_font = None
        self.fps_history = []
        self.beat_flash = 0.0
        self.last_signals = None

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        font = self.hud_font
        stats = self.field.stats
        preset = get_preset(self.preset_key)
        note = pitch_to_note_name(self.field.activity.pitch) or "--"
        mode = "REACTIVE" if stats["reactive"] else "normal"

        line = (f"{preset['name']}  |  {mode}  |  "
                f"Flowers: {stats['population']:,}/{stats['target']:,}  |  "
                f"Petals: {stats['falling_petals']:,}  |  "
                f"Activity: {stats['activity']:.2f}  |  Beats: {stats['beats']}  |  "
                f"Note: {note}  |  {stats['palette']}  |  "
                f"Energy: {self.signals.energy.target:.1f}  |  FPS: {fps:.0f}")
        if self.paused:
            line = "[PAUSED]  " + line

        padding = 6
        bg_height = 24
        bg_surface = pygame.Surface((self.width, bg_height), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))

        text_surface = font.render(line, True, HUD_TEXT)
        screen.blit(text_surface, (padding + 4, padding))

        if self.beat_flash > 0:
            radius = int(4 + 4 * self.beat_flash)
            pygame.draw.circle(screen, BEAT_FLASH, (self.width - 16, 12), radius)

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption("Flower Field")
        clock = pygame.time.Clock()

        self.hud_font = pygame.font.SysFont("menlo", 13)

        last_time = time.time()

        while self.running:
            now = time.time()
            dt = min(now - last_time, 0.1)  # cap dt to avoid jumps
            last_time = now
            frame_start = now

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event)
                elif event.type == pygame.VIDEORESIZE:
                    self.width, self.height = event.w, event.h
                    self.field.set_viewport(self.width, self.height)

            if not self.paused:
                self.last_signals = self.signals.update(dt)
                if self.field.update(dt, self.last_signals):
                    self.beat_flash = 1.0
                self.beat_flash = max(0.0, self.beat_flash - dt * 4.0)

            screen.fill(BG_COLOR)
            render_commands(screen, self.field.draw())

            frame_time = time.time() - frame_start
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)

            self._draw_hud(screen, avg_fps)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.paused = not self.paused

        elif key == pygame.K_r:
            reactive = self.field.toggle_reactive()
            print(f"Reactive mode: {'on' if reactive else 'off'}")

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_c:
            self.field.falling_petals.clear()

        elif key == pygame.K_UP:
            self.signals.nudge_energy(ENERGY_STEP)

        elif key == pygame.K_DOWN:
            self.signals.nudge_energy(-ENERGY_STEP)

        # Color scheme selection (0-9)
        elif pygame.K_0 <= key <= pygame.K_9:
            self.field.set_color_scheme(key - pygame.K_0)
