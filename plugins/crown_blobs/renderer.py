"""
Blob Renderer

Turns each blob's state into a noise-perturbed closed outline and, for
the hovered blob, a label. Labels follow one of two styles chosen in
the preset:

    curved   - Characters spaced along the lower arc, inside the outline
    tooltip  - A dark box with the label above the outline
"""

import math
from abc import ABC, abstractmethod

import numpy as np


LABEL_COLOR = (0, 0, 0, 255)
TOOLTIP_BG = (30, 30, 36, 220)
TOOLTIP_TEXT = (240, 240, 245, 255)


def outline(blob, noise, angle_step, amplitude, noise_scale, phase=0.0):
    """Organic silhouette for a blob.

    For each angle a in [0, 2pi) stepping by angle_step, the radius is
    radius + noise(a * noise_scale + phase, blob.noise_seed) * amplitude.

    Args:
        blob: Blob to outline
        noise: NoiseField
        angle_step: Step between vertices in radians
        amplitude: Max outward bulge in pixels
        noise_scale: Angle-to-noise coordinate scale (smaller = smoother)
        phase: Extra noise offset (0 keeps the silhouette fixed)

    Returns:
        (N, 2) float array of vertices; the polygon closes back to row 0
    """
    # Vertex count from the step, so 3 degrees gives exactly 120 vertices
    count = max(3, int(math.ceil(2.0 * math.pi / angle_step - 1e-9)))
    angles = np.arange(count) * angle_step
    r = blob.radius + noise.sample(angles * noise_scale + phase,
                                   blob.noise_seed) * amplitude
    cx, cy = blob.position
    return np.stack([cx + np.cos(angles) * r, cy + np.sin(angles) * r], axis=1)


class LabelStyle(ABC):
    """Base class for hover label presentation."""

    style_name = ""

    @abstractmethod
    def draw(self, surface, blob, points, options):
        """Draw the label for a hovered blob whose outline is points."""


class CurvedLabel(LabelStyle):
    """Characters fanned along the bottom arc of the blob."""

    style_name = "curved"
    spread = math.pi / 6  # Angular margin from the horizontal on each side

    def char_positions(self, blob, inset):
        """(char, x, y) for each label character, left-to-right along the arc.

        Angles map linearly from pi - spread down to spread; screen y grows
        downward so these sit on the lower half.
        """
        label = blob.label
        n = len(label)
        start, end = math.pi - self.spread, self.spread
        r = blob.radius - inset
        cx, cy = blob.position
        out = []
        for i, ch in enumerate(label):
            angle = start + (end - start) * i / n
            out.append((ch, cx + math.cos(angle) * r, cy + math.sin(angle) * r))
        return out

    def draw(self, surface, blob, points, options):
        for ch, x, y in self.char_positions(blob, options["label_inset"]):
            surface.text(ch, (x, y), LABEL_COLOR, options["label_size"])


class TooltipLabel(LabelStyle):
    """Fixed box above the outline's top edge."""

    style_name = "tooltip"
    gap = 10
    padding = 6

    def box(self, blob, points, size):
        """Return (x, y, w, h) of the tooltip box."""
        # Rough text extent; surfaces centre the real glyphs inside it
        w = len(blob.label) * size * 0.6 + 2 * self.padding
        h = size + 2 * self.padding
        top = float(points[:, 1].min()) if len(points) else blob.position[1] - blob.radius
        cx = float(blob.position[0])
        return cx - w / 2, top - self.gap - h, w, h

    def draw(self, surface, blob, points, options):
        size = options["label_size"]
        x, y, w, h = self.box(blob, points, size)
        surface.rect(x, y, w, h, TOOLTIP_BG)
        surface.text(blob.label, (x + w / 2, y + h / 2), TOOLTIP_TEXT, size)


LABEL_STYLES = {
    "curved": CurvedLabel,
    "tooltip": TooltipLabel,
}

LABEL_ORDER = ["curved", "tooltip"]


class Renderer:
    """Draws a Simulation onto any DrawingSurface."""

    def __init__(self, simulation, background=(255, 255, 255, 255)):
        self.simulation = simulation
        self.background = background
        self._styles = {name: cls() for name, cls in LABEL_STYLES.items()}

    def phase(self):
        """Noise phase for this frame; 0 unless outline_drift is set."""
        return self.simulation.frame * self.simulation.options["outline_drift"]

    def outlines(self):
        """Vertex arrays for every blob, in blob order."""
        sim = self.simulation
        opts = sim.options
        step = math.radians(opts["angle_step_deg"])
        phase = self.phase()
        return [outline(blob, sim.noise, step, opts["outline_amplitude"],
                        opts["noise_scale"], phase)
                for blob in sim.blobs]

    def draw(self, surface):
        """Clear, fill every outline, then label hovered blobs."""
        sim = self.simulation
        opts = sim.options
        if self.background is not None:
            surface.clear(self.background)

        shapes = self.outlines()
        for blob, points in zip(sim.blobs, shapes):
            surface.polygon(points, blob.color)

        # Labels after all fills so neighbours never cover them
        style = self._styles[opts["label_style"]]
        for blob, points in zip(sim.blobs, shapes):
            if blob.hovered:
                style.draw(surface, blob, points, opts)
        return shapes
