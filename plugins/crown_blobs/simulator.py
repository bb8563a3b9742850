"""
Simulation - Headless layout core for the blob hotspots

Owns the blob collection, the input state written by the host, the
noise field, and the active force policy. Zero pygame dependency: the
viewer and the headless snap mode both drive it through step() and the
on_pointer_move / on_click entry points.

Usage:
    from crown_blobs.simulator import Simulation
    sim = Simulation("portfolio", 1280, 800, seed=1)
    sim.on_pointer_move((900, 300))
    sim.step()
"""

import numpy as np

from .presets import get_preset, resolve_options, build_blobs
from .forces import repulsion_forces, make_policy
from .interaction import update_hover, resolve_click
from .navigation import Navigator
from .noise import make_noise
from .renderer import LABEL_STYLES


class InputState:
    """Pointer and click state shared between input callbacks and the frame loop.

    Input handlers only write here; the simulation reads it once per step.
    """

    def __init__(self):
        self.pointer = None      # (x, y) once the pointer has moved
        self.last_click = None   # (x, y) of the most recent click
        self.ripple_pending = False


class Simulation:
    """Per-frame repulsion, pointer forces, ripple and integration over all blobs."""

    def __init__(self, preset="portfolio", width=1280, height=800,
                 navigator=None, seed=None):
        """
        Args:
            preset: Preset name or preset dict
            width, height: Canvas size in pixels
            navigator: Receives NavigationRequests on click hits
            seed: Seed for layout randomness, noise and ripples (None = random)
        """
        if isinstance(preset, str):
            key = preset
            preset = get_preset(key)
            if preset is None:
                raise ValueError(f"Unknown preset: {key!r}")
        self.preset = preset
        self.options = resolve_options(preset)
        self.width = width
        self.height = height
        self.navigator = navigator if navigator is not None else Navigator()
        self.seed = seed
        self.input = InputState()

        self.policy = make_policy(self.options["force_policy"], self.options)
        self._check_label_style(self.options["label_style"])

        self.rng = np.random.default_rng(seed)
        field_seed = seed if seed is not None else int(self.rng.integers(2 ** 31))
        self.noise = make_noise(self.options["noise"], field_seed)

        self.blobs = self._build_layout()
        self.frame = 0
        self.ripple_count = 0

    # -- configuration ------------------------------------------------------

    @staticmethod
    def _check_label_style(name):
        if name not in LABEL_STYLES:
            raise ValueError(f"Unknown label style: {name!r}. "
                             f"Supported: {list(LABEL_STYLES.keys())}")

    def set_force_policy(self, name):
        self.policy = make_policy(name, self.options)
        self.options["force_policy"] = name

    def set_label_style(self, name):
        self._check_label_style(name)
        self.options["label_style"] = name

    def set_ripple(self, enabled):
        self.options["ripple"] = bool(enabled)
        if not enabled:
            self.input.ripple_pending = False

    def configure(self, force_policy=None, label_style=None, ripple=None):
        """Apply runtime overrides on top of the preset (None leaves a setting alone)."""
        if force_policy is not None:
            self.set_force_policy(force_policy)
        if label_style is not None:
            self.set_label_style(label_style)
        if ripple is not None:
            self.set_ripple(ripple)

    def _build_layout(self):
        layout_rng = np.random.default_rng(self.seed)
        return build_blobs(self.preset, self.width, self.height, layout_rng)

    def reset(self):
        """Rebuild the layout from the preset. Same seed gives the same layout."""
        self.blobs = self._build_layout()
        self.input.ripple_pending = False
        self.frame = 0
        self.ripple_count = 0

    # -- input entry points -------------------------------------------------

    def on_pointer_move(self, position):
        self.input.pointer = (float(position[0]), float(position[1]))

    def on_click(self, position):
        """Resolve a click. Returns the NavigationRequest, or None on a miss.

        A hit is forwarded to the navigator and, with ripple enabled, arms
        a one-shot impulse for the next step. Blob physics is not touched.
        """
        position = (float(position[0]), float(position[1]))
        self.input.last_click = position
        request = resolve_click(self.blobs, position)
        if request is None:
            return None
        if self.options["ripple"]:
            self.input.ripple_pending = True
        self.navigator.navigate(request)
        return request

    # -- frame --------------------------------------------------------------

    def positions(self):
        return np.stack([blob.position for blob in self.blobs])

    def radii(self):
        return np.array([blob.radius for blob in self.blobs])

    def _ripple_impulses(self, n):
        """Random direction, magnitude in [0.25, 1] * ripple_strength."""
        angles = self.rng.uniform(0.0, 2.0 * np.pi, n)
        mags = self.rng.uniform(0.25, 1.0, n) * self.options["ripple_strength"]
        return np.stack([np.cos(angles), np.sin(angles)], axis=1) * mags[:, None]

    def step(self):
        """Advance one frame. Returns the new frame number."""
        opts = self.options
        # Snapshot: every force this frame reads the previous frame's layout
        positions = self.positions()
        hovered = np.array([blob.hovered for blob in self.blobs], dtype=bool)

        forces = repulsion_forces(positions, self.radii(),
                                  opts["margin"], opts["repulsion_gain"])
        forces += self.policy.forces(positions, self.input.pointer, hovered)

        if self.input.ripple_pending:
            forces += self._ripple_impulses(len(self.blobs))
            self.input.ripple_pending = False
            self.ripple_count += 1

        damping = opts["damping"]
        for blob, force in zip(self.blobs, forces):
            blob.velocity += force
            blob.position += blob.velocity
            blob.velocity *= damping

        self.refresh_hover()
        self.frame += 1
        return self.frame

    def refresh_hover(self):
        """Recompute hover flags from the current pointer without advancing.

        step() calls this after integrating; a paused host calls it directly
        so labels still follow the pointer.
        """
        return update_hover(self.blobs, self.input.pointer)

    def step_n(self, n):
        for _ in range(n):
            self.step()
        return self.frame

    def hovered_blob(self):
        for blob in self.blobs:
            if blob.hovered:
                return blob
        return None

    @property
    def stats(self):
        """Return current simulation statistics."""
        velocities = np.stack([blob.velocity for blob in self.blobs])
        hovered = self.hovered_blob()
        return {
            "frame": self.frame,
            "blobs": len(self.blobs),
            "kinetic": float(0.5 * (velocities ** 2).sum()),
            "hovered": hovered.label if hovered else None,
            "ripples": self.ripple_count,
        }
