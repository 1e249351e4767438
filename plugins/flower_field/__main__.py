"""
Flower Field Viewer - Entry Point

Usage:
    python -m flower_field [preset] [--count N] [--window WxH] [--reactive]
                           [--seed N] [--headless FRAMES] [--verbose]

Examples:
    python -m flower_field
    python -m flower_field storm
    python -m flower_field dense --window 1600x900
    python -m flower_field meadow --count 300 --reactive --seed 7
    python -m flower_field storm --headless 600

Use --list to see all available presets.
"""

import logging
import sys

from .presets import DEFAULT_PRESET, PRESET_ORDER, list_presets


def headless(preset, frames, count=None, reactive=None, seed=None,
             width=1280, height=720, fps=60):
    """Run the field against demo signals without a window and report stats."""
    from .demo_signals import DemoSignalSource
    from .field import FlowerField

    overrides = {"width": width, "height": height, "seed": seed}
    if count is not None:
        overrides["count"] = count
    if reactive is not None:
        overrides["reactive"] = reactive
    field = FlowerField.from_preset(preset, **overrides)
    source = DemoSignalSource(seed=seed)

    dt = 1.0 / fps
    report_every = max(1, fps * 5)
    commands = 0
    for frame in range(frames):
        field.update(dt, source.update(dt))
        commands = len(field.draw())
        if (frame + 1) % report_every == 0:
            s = field.stats
            print(f"  t={(frame + 1) * dt:6.1f}s  flowers={s['population']:5d}  "
                  f"target={s['target']:5d}  activity={s['activity']:.2f}  "
                  f"beats={s['beats']:4d}  petals={s['falling_petals']:4d}")

    s = field.stats
    print(f"Done: {frames} frames, {s['population']} flowers, "
          f"{s['falling_petals']} falling petals, {commands} draw commands")
    return field


def main():
    preset = DEFAULT_PRESET
    count = None
    reactive = None
    seed = None
    win_w, win_h = 1280, 720
    headless_frames = 0
    verbose = False

    args = sys.argv[1:]
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--count" and i + 1 < len(args):
            count = int(args[i + 1])
            i += 2
        elif arg == "--window" and i + 1 < len(args):
            parts = args[i + 1].split("x")
            win_w, win_h = int(parts[0]), int(parts[1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif arg == "--headless" and i + 1 < len(args):
            headless_frames = int(args[i + 1])
            i += 2
        elif arg == "--reactive":
            reactive = True
            i += 1
        elif arg in ("--verbose", "-v"):
            verbose = True
            i += 1
        elif arg == "--list":
            print("\nAvailable presets:\n")
            for key, name, desc in list_presets():
                print(f"    {key:12s} {name:12s} {desc}")
            print()
            return
        elif arg in ("--help", "-h"):
            print(__doc__)
            return
        elif arg in PRESET_ORDER:
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available presets")
            return

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    if headless_frames > 0:
        print(f"Headless mode: {preset}, {headless_frames} frames")
        headless(preset, headless_frames, count=count, reactive=reactive,
                 seed=seed, width=win_w, height=win_h)
        return

    from .viewer import Viewer

    print("Starting Flower Field Viewer")
    print(f"  Preset: {preset}")
    print(f"  Window: {win_w}x{win_h}")
    if count is not None:
        print(f"  Count: {count}")
    if seed is not None:
        print(f"  Seed: {seed}")
    print()

    viewer = Viewer(
        width=win_w,
        height=win_h,
        preset=preset,
        count=count,
        reactive=reactive,
        seed=seed,
    )
    viewer.run()


if __name__ == "__main__":
    main()
