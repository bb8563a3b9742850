"""
Blob Hotspots Viewer - Entry Point

Usage:
    python -m crown_blobs [preset] [--window WxH] [options]

Examples:
    python -m crown_blobs
    python -m crown_blobs tooltip
    python -m crown_blobs portfolio --policy clustering --labels tooltip
    python -m crown_blobs pair --snap 120 --seed 7
    python -m crown_blobs --base-url https://example.com/

Options:
    --window WxH     Canvas size (default 1280x800)
    --policy NAME    Pointer force policy: attraction | clustering
    --labels NAME    Label style: curved | tooltip
    --ripple         Enable the click ripple
    --seed N         Fix layout, noise and ripple randomness
    --base-url URL   Open clicked targets in the browser, relative to URL
    --snap N         Headless: run N steps, save a PNG, exit
    --pointer X,Y    Pointer position for --snap (shows hover labels)
    --list           List presets
"""

import os
import sys

from .presets import PRESET_ORDER, list_presets
from .navigation import BrowserNavigator, PrintNavigator, RecordingNavigator


def snap(preset, width, height, steps, seed=None, pointer=None, options=None):
    """Headless mode: run N steps, save screenshot, exit."""
    from .simulator import Simulation
    from .renderer import Renderer
    from .surfaces import PillowSurface

    screenshots_dir = os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
        "screenshots"
    )
    os.makedirs(screenshots_dir, exist_ok=True)

    presets_to_snap = [preset] if preset != "all" else PRESET_ORDER

    for pkey in presets_to_snap:
        sim = Simulation(pkey, width, height, navigator=RecordingNavigator(), seed=seed)
        sim.configure(**(options or {}))
        if pointer is not None:
            sim.on_pointer_move(pointer)

        print(f"  {pkey}: running {steps} steps...", end="", flush=True)
        sim.step_n(steps)

        surface = PillowSurface(width, height)
        Renderer(sim).draw(surface)
        path = os.path.join(screenshots_dir, f"blobs_{pkey}.png")
        surface.save(path)
        surface.save(os.path.join(screenshots_dir, "latest.png"))
        print(f" saved: {path}")


def main():
    preset = "portfolio"
    win_w, win_h = 1280, 800
    snap_steps = 0
    seed = None
    pointer = None
    base_url = None
    options = {}

    args = sys.argv[1:]
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--window" and i + 1 < len(args):
            parts = args[i + 1].split("x")
            win_w, win_h = int(parts[0]), int(parts[1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_steps = int(args[i + 1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif arg == "--pointer" and i + 1 < len(args):
            parts = args[i + 1].split(",")
            pointer = (float(parts[0]), float(parts[1]))
            i += 2
        elif arg == "--policy" and i + 1 < len(args):
            options["force_policy"] = args[i + 1]
            i += 2
        elif arg == "--labels" and i + 1 < len(args):
            options["label_style"] = args[i + 1]
            i += 2
        elif arg == "--base-url" and i + 1 < len(args):
            base_url = args[i + 1]
            i += 2
        elif arg == "--ripple":
            options["ripple"] = True
            i += 1
        elif arg == "--list":
            print("\nAvailable presets:\n")
            for key, name, desc in list_presets():
                print(f"    {key:12s} {name:16s} {desc}")
            print()
            return
        elif arg in ("--help", "-h"):
            print(__doc__)
            return
        elif arg in PRESET_ORDER or arg == "all":
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print(f"Use --list to see available presets")
            return

    if snap_steps > 0:
        print(f"Headless snap mode: {preset} @ {win_w}x{win_h}, {snap_steps} steps")
        snap(preset, win_w, win_h, snap_steps, seed=seed, pointer=pointer, options=options)
        return

    if preset == "all":
        print("'all' is only valid with --snap")
        return

    try:
        from .viewer import Viewer
    except ImportError as e:
        if e.name != "pygame":
            raise
        print("The interactive viewer needs pygame: pip install 'crown-blobs[viewer]'")
        print("Use --snap N to render without a window")
        return

    navigator = BrowserNavigator(base_url) if base_url else PrintNavigator()

    print(f"Starting Blob Hotspots Viewer")
    print(f"  Preset: {preset}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    viewer = Viewer(
        width=win_w,
        height=win_h,
        preset=preset,
        navigator=navigator,
        seed=seed,
        options=options,
    )
    viewer.run()


if __name__ == "__main__":
    main()
