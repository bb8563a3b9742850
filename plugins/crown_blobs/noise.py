"""
Coherent Noise Fields for Blob Outlines

All noise generators implement this interface so the renderer can work
with any of them interchangeably. A field is built once from an integer
field seed; the per-sample seed is an offset into that field, so each
blob reads its own stretch of a shared, repeatable signal.

Fields:
    value     - Lattice value noise, summed over octaves (default)
    gradient  - 1D Perlin gradient noise
"""

from abc import ABC, abstractmethod
import numpy as np


TABLE_SIZE = 4096  # Lattice period


def _fade(t):
    """Quintic smoothstep (C2 continuous at lattice points)."""
    return t * t * t * (t * (t * 6 - 15) + 10)


class NoiseField(ABC):
    """Base class for deterministic, continuous 1D noise fields."""

    noise_name = ""   # e.g. "value"
    noise_label = ""  # e.g. "Value Noise"

    def __init__(self, field_seed=0):
        self.field_seed = None
        self.reseed(field_seed)

    def reseed(self, field_seed):
        """Rebuild the lattice table from a new field seed."""
        self.field_seed = int(field_seed)
        rng = np.random.default_rng(self.field_seed)
        self._table = self._build_table(rng)

    @abstractmethod
    def _build_table(self, rng):
        """Return the lattice table (length TABLE_SIZE) for this field."""

    @abstractmethod
    def _raw(self, x):
        """Evaluate the field at coordinates x (ndarray). Returns [0, 1)."""

    def sample(self, coordinate, seed=0.0):
        """Sample the field.

        Args:
            coordinate: Scalar or array of coordinates
            seed: Per-entity offset into the field

        Returns:
            float (scalar input) or ndarray, every value in [0, 1)
        """
        x = np.asarray(coordinate, dtype=np.float64) + float(seed)
        values = self._raw(x)
        if np.ndim(coordinate) == 0:
            return float(values)
        return values


class ValueNoise(NoiseField):
    """Octave-summed lattice value noise.

    Each octave doubles frequency and scales amplitude by `falloff`.
    The sum is normalised by the total amplitude, so the result stays
    in [0, 1) like a single octave.
    """

    noise_name = "value"
    noise_label = "Value Noise"

    def __init__(self, field_seed=0, octaves=4, falloff=0.5):
        """
        Args:
            field_seed: Seed for the lattice table
            octaves: Number of summed octaves (>= 1)
            falloff: Amplitude multiplier per octave (0, 1]
        """
        if octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")
        if not 0.0 < falloff <= 1.0:
            raise ValueError(f"falloff must be in (0, 1], got {falloff}")
        self.octaves = int(octaves)
        self.falloff = float(falloff)
        super().__init__(field_seed)

    def _build_table(self, rng):
        return rng.random(TABLE_SIZE)

    def _lattice(self, x):
        x0 = np.floor(x)
        t = _fade(x - x0)
        i0 = x0.astype(np.int64) % TABLE_SIZE
        i1 = (i0 + 1) % TABLE_SIZE
        a = self._table[i0]
        b = self._table[i1]
        return a + (b - a) * t

    def _raw(self, x):
        total = np.zeros_like(x)
        amp = 1.0
        amp_sum = 0.0
        freq = 1.0
        for _ in range(self.octaves):
            total += self._lattice(x * freq) * amp
            amp_sum += amp
            amp *= self.falloff
            freq *= 2.0
        return total / amp_sum


class GradientNoise(NoiseField):
    """1D Perlin gradient noise, shifted and clipped into [0, 1)."""

    noise_name = "gradient"
    noise_label = "Gradient Noise"

    def _build_table(self, rng):
        # Slopes in [-1, 1)
        return rng.random(TABLE_SIZE) * 2.0 - 1.0

    def _raw(self, x):
        x0 = np.floor(x)
        t = x - x0
        i0 = x0.astype(np.int64) % TABLE_SIZE
        i1 = (i0 + 1) % TABLE_SIZE
        n0 = self._table[i0] * t
        n1 = self._table[i1] * (t - 1.0)
        n = n0 + (n1 - n0) * _fade(t)
        # |n| <= 0.5 for slopes in [-1, 1]
        return np.clip(n + 0.5, 0.0, np.nextafter(1.0, 0.0))


NOISE_FIELDS = {
    "value": ValueNoise,
    "gradient": GradientNoise,
}


def make_noise(name, field_seed=0):
    """Create a noise field by registry name."""
    cls = NOISE_FIELDS.get(name)
    if cls is None:
        raise ValueError(f"Unknown noise field: {name!r}. "
                         f"Supported: {list(NOISE_FIELDS.keys())}")
    return cls(field_seed)
