"""
Layout Forces

Repulsion ("crown shyness") between every pair of blobs, plus the
pointer force policies. Every function here reads a position snapshot
(N x 2 array) and returns an N x 2 force array; nothing mutates blobs.

Pointer policies:
    attraction  - Nudge blobs near the pointer toward it
    clustering  - Pull blobs near the pointer toward the hovered blob
"""

from abc import ABC, abstractmethod

import numpy as np


def repulsion_forces(positions, radii, margin=20.0, gain=0.1):
    """Pairwise repulsion for blobs closer than r_a + r_b + margin.

    Each overlapping pair gets equal and opposite pushes along the line
    between centres, with magnitude (min_dist - d) * gain.

    Args:
        positions: (N, 2) centres
        radii: (N,) base radii
        margin: Extra gap kept between outlines
        gain: Force per unit of overlap

    Returns:
        (N, 2) force array
    """
    positions = np.asarray(positions, dtype=np.float64)
    radii = np.asarray(radii, dtype=np.float64)
    n = len(positions)
    forces = np.zeros((n, 2), dtype=np.float64)
    if n < 2:
        return forces

    # diff[i, j] points from j to i
    diff = positions[:, None, :] - positions[None, :, :]
    dist = np.sqrt((diff ** 2).sum(axis=2))
    min_dist = radii[:, None] + radii[None, :] + margin

    i_idx, j_idx = np.triu_indices(n, k=1)
    d = dist[i_idx, j_idx]
    overlap = d < min_dist[i_idx, j_idx]
    if not overlap.any():
        return forces

    i_idx, j_idx, d = i_idx[overlap], j_idx[overlap], d[overlap]
    direction = diff[i_idx, j_idx].copy()
    coincident = d == 0.0
    # Exact overlap: fixed axis, lower index goes +x
    direction[coincident] = (1.0, 0.0)
    d_safe = np.where(coincident, 1.0, d)
    direction /= d_safe[:, None]

    magnitude = (min_dist[i_idx, j_idx] - d) * gain
    push = direction * magnitude[:, None]
    np.add.at(forces, i_idx, push)
    np.add.at(forces, j_idx, -push)
    return forces


def _within(positions, pointer, radius):
    offset = np.asarray(pointer, dtype=np.float64)[None, :] - positions
    dist = np.sqrt((offset ** 2).sum(axis=1))
    return offset, dist, dist < radius


class ForcePolicy(ABC):
    """Base class for pointer-interaction forces."""

    policy_name = ""
    policy_label = ""

    def __init__(self, interaction_radius=300.0):
        self.interaction_radius = interaction_radius

    @abstractmethod
    def forces(self, positions, pointer, hovered):
        """Return (N, 2) forces.

        Args:
            positions: (N, 2) snapshot of blob centres
            pointer: (x, y) or None when the pointer has not been seen
            hovered: (N,) bool array from the previous frame
        """


class PointerAttraction(ForcePolicy):
    """Small constant-magnitude pull toward the pointer."""

    policy_name = "attraction"
    policy_label = "Pointer attraction"

    def __init__(self, interaction_radius=300.0, strength=0.01):
        super().__init__(interaction_radius)
        self.strength = strength

    def forces(self, positions, pointer, hovered):
        positions = np.asarray(positions, dtype=np.float64)
        out = np.zeros_like(positions)
        if pointer is None or len(positions) == 0:
            return out
        offset, dist, near = _within(positions, pointer, self.interaction_radius)
        # Pointer exactly on a centre has no direction
        near &= dist > 0
        out[near] = offset[near] / dist[near, None] * self.strength
        return out


class HoverClustering(ForcePolicy):
    """Blobs near the pointer drift toward whichever other blob is hovered."""

    policy_name = "clustering"
    policy_label = "Hover clustering"

    def __init__(self, interaction_radius=300.0, strength=0.05):
        super().__init__(interaction_radius)
        self.strength = strength

    def forces(self, positions, pointer, hovered):
        positions = np.asarray(positions, dtype=np.float64)
        out = np.zeros_like(positions)
        hovered = np.asarray(hovered, dtype=bool)
        if pointer is None or not hovered.any():
            return out
        _, _, near = _within(positions, pointer, self.interaction_radius)
        for j in np.flatnonzero(hovered):
            toward = positions[j][None, :] - positions
            dist = np.sqrt((toward ** 2).sum(axis=1))
            mask = near & (dist > 0)
            mask[j] = False
            out[mask] += toward[mask] / dist[mask, None] * self.strength
        return out


FORCE_POLICIES = {
    "attraction": PointerAttraction,
    "clustering": HoverClustering,
}

POLICY_ORDER = ["attraction", "clustering"]


def make_policy(name, options):
    """Build a force policy from its registry name and preset options."""
    if name == "attraction":
        return PointerAttraction(options["interaction_radius"],
                                 options["attraction_strength"])
    if name == "clustering":
        return HoverClustering(options["interaction_radius"],
                               options["cluster_strength"])
    raise ValueError(f"Unknown force policy: {name!r}. "
                     f"Supported: {list(FORCE_POLICIES.keys())}")
