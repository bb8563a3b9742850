"""
Drawing Surfaces

The renderer only needs filled closed polygons, filled rectangles, and
centred text. Hosts supply a surface implementing this interface; the
pygame adapter lives in viewer.py, the Pillow one (headless snapshots)
lives here.
"""

from abc import ABC, abstractmethod


class DrawingSurface(ABC):
    """Minimal render target. Colours are (r, g, b, a) tuples."""

    @abstractmethod
    def clear(self, color):
        """Fill the whole surface."""

    @abstractmethod
    def polygon(self, points, color):
        """Fill the closed polygon through points (sequence of (x, y))."""

    @abstractmethod
    def rect(self, x, y, width, height, color):
        """Fill an axis-aligned rectangle."""

    @abstractmethod
    def text(self, string, position, color, size):
        """Draw string centred on position."""


class PillowSurface(DrawingSurface):
    """RGBA image surface backed by PIL.ImageDraw."""

    def __init__(self, width, height):
        from PIL import Image, ImageDraw

        self.width = width
        self.height = height
        self.image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        self._draw = ImageDraw.Draw(self.image, "RGBA")
        self._fonts = {}

    def _font(self, size):
        font = self._fonts.get(size)
        if font is None:
            from PIL import ImageFont
            font = ImageFont.load_default(size=size)
            self._fonts[size] = font
        return font

    def clear(self, color):
        self._draw.rectangle([0, 0, self.width, self.height], fill=tuple(color))

    def polygon(self, points, color):
        pts = [(float(x), float(y)) for x, y in points]
        if len(pts) >= 3:
            self._draw.polygon(pts, fill=tuple(color))

    def rect(self, x, y, width, height, color):
        self._draw.rectangle([x, y, x + width, y + height], fill=tuple(color))

    def text(self, string, position, color, size):
        font = self._font(size)
        left, top, right, bottom = self._draw.textbbox((0, 0), string, font=font)
        x = position[0] - (right - left) / 2 - left
        y = position[1] - (bottom - top) / 2 - top
        self._draw.text((x, y), string, fill=tuple(color), font=font)

    def save(self, path):
        self.image.save(path)
        return path
