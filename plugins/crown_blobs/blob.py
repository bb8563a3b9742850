"""
Blob Entity

A blob is one navigation hotspot: a centre, a velocity, a fixed base
radius, and the identity (label + target) it links to. Its noise seed
picks the stretch of the noise field that shapes its outline.
"""

import numpy as np


def parse_color(value):
    """Normalize a colour value to an (r, g, b, a) tuple of ints.

    Accepts "#RRGGBB", "#RRGGBBAA", or an RGB / RGBA sequence.
    """
    if isinstance(value, str):
        text = value.lstrip("#")
        if len(text) not in (6, 8):
            raise ValueError(f"Bad colour {value!r}: expected #RRGGBB or #RRGGBBAA")
        try:
            channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError:
            raise ValueError(f"Bad colour {value!r}: not hexadecimal") from None
    else:
        channels = [int(c) for c in value]
        if len(channels) not in (3, 4):
            raise ValueError(f"Bad colour {value!r}: expected 3 or 4 channels")
        if any(c < 0 or c > 255 for c in channels):
            raise ValueError(f"Bad colour {value!r}: channels must be 0-255")
    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)


class Blob:
    """Interactive organic region linked to a navigation target."""

    def __init__(self, x, y, radius, label, target, color, noise_seed):
        if not radius > 0:
            raise ValueError(f"Blob {label!r}: radius must be > 0, got {radius}")
        self.position = np.array([x, y], dtype=np.float64)
        self.velocity = np.zeros(2, dtype=np.float64)
        self._radius = float(radius)
        self.label = label
        self.target = target
        self.color = parse_color(color)
        self.noise_seed = float(noise_seed)
        self.hovered = False

    @property
    def radius(self):
        return self._radius

    def distance_to(self, point):
        return float(np.hypot(point[0] - self.position[0],
                              point[1] - self.position[1]))

    def contains(self, point):
        """True if point is strictly inside the base radius."""
        return self.distance_to(point) < self._radius

    def __repr__(self):
        x, y = self.position
        return (f"Blob({self.label!r}, pos=({x:.1f}, {y:.1f}), "
                f"r={self._radius:.1f})")
