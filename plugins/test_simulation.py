#!/usr/bin/env python3
"""
Test script for the blob layout simulation.

Verifies:
1. Crown shyness: overlapping blobs separate and never move back in
2. Damping: velocity decays geometrically with no forces
3. Pointer policies: attraction and hover clustering
4. Click-to-navigation and the one-shot ripple
5. Fail-fast configuration errors
"""

import math
import numpy as np
from crown_blobs.simulator import Simulation
from crown_blobs.forces import repulsion_forces, ForcePolicy, PointerAttraction, HoverClustering
from crown_blobs.navigation import RecordingNavigator, NavigationRequest
from crown_blobs.presets import build_blobs, resolve_options


def _preset(blobs, **options):
    preset = {"name": "test", "description": "", "blobs": blobs}
    preset.update(options)
    return preset


def _entry(label, x, y, radius=50, seed=None, color="#336699"):
    entry = {"label": label, "target": f"{label}.html", "color": color,
             "position": (x, y), "radius": radius}
    if seed is not None:
        entry["noise_seed"] = seed
    return entry


def _distance(a, b):
    return float(np.hypot(*(a.position - b.position)))


def test_repulsion_is_symmetric():
    """Equal and opposite pushes along the centre line."""
    print("Testing repulsion symmetry...")
    positions = np.array([[0.0, 0.0], [30.0, 40.0]])  # d = 50
    forces = repulsion_forces(positions, np.array([40.0, 40.0]), margin=10.0, gain=0.1)
    # min_dist 90, overlap 40 -> magnitude 4
    assert np.allclose(forces[0], -forces[1])
    assert math.isclose(float(np.hypot(*forces[0])), 4.0)
    assert np.allclose(forces[0] / 4.0, [-0.6, -0.8]), f"Should point away: {forces[0]}"

    far = np.array([[0.0, 0.0], [500.0, 0.0]])
    assert not repulsion_forces(far, np.array([40.0, 40.0])).any(), "Far blobs feel nothing"
    print("  ✓ Repulsion symmetric")


def test_repulsion_coincident_centres():
    """Exact overlap picks a fixed axis instead of dividing by zero."""
    print("Testing coincident centres...")
    positions = np.array([[100.0, 100.0], [100.0, 100.0]])
    forces = repulsion_forces(positions, np.array([30.0, 20.0]), margin=10.0, gain=0.1)
    assert np.all(np.isfinite(forces))
    assert np.allclose(forces[0], [6.0, 0.0]), f"Lower index pushed +x: {forces[0]}"
    assert np.allclose(forces[1], [-6.0, 0.0])
    print("  ✓ Coincident centres handled")


def test_crown_shyness_convergence():
    """Overlapping pair separates to r_a + r_b + margin and keeps distance non-decreasing."""
    print("Testing crown shyness convergence...")
    sim = Simulation(_preset([_entry("a", 400, 300, 90, 1.0),
                              _entry("b", 460, 300, 90, 2.0)]),
                     800, 600, seed=3)
    a, b = sim.blobs
    min_dist = a.radius + b.radius + sim.options["margin"]
    last = _distance(a, b)
    reached = None
    for frame in range(200):
        sim.step()
        d = _distance(a, b)
        assert d >= last - 1e-9, f"Distance shrank at frame {frame}: {last} -> {d}"
        last = d
        if reached is None and d >= min_dist:
            reached = frame
    assert reached is not None and reached < 50, f"Should separate quickly, got {reached}"
    print(f"  ✓ Separated after {reached + 1} frames")


def test_damping_stability():
    """With no forces, velocity shrinks by the damping factor every frame."""
    print("Testing damping stability...")
    sim = Simulation(_preset([_entry("a", 100, 100), _entry("b", 900, 900)], damping=0.85),
                     1000, 1000, seed=1)
    sim.blobs[0].velocity[:] = (4.0, -3.0)  # |v| = 5
    for _ in range(60):
        sim.step()
    speed = float(np.hypot(*sim.blobs[0].velocity))
    assert math.isclose(speed, 5.0 * 0.85 ** 60, rel_tol=1e-9), f"Unexpected speed {speed}"
    assert speed < 1e-3
    assert sim.stats["kinetic"] < 1e-6
    print("  ✓ Damping converges")


def test_pointer_attraction():
    """Blobs inside the interaction radius drift toward the pointer."""
    print("Testing pointer attraction...")
    positions = np.array([[0.0, 0.0], [1000.0, 0.0]])
    policy = PointerAttraction(interaction_radius=300.0, strength=0.01)
    forces = policy.forces(positions, (100.0, 0.0), np.zeros(2, dtype=bool))
    assert np.allclose(forces[0], [0.01, 0.0])
    assert not forces[1].any(), "Out of range blob is untouched"
    assert not policy.forces(positions, None, np.zeros(2, dtype=bool)).any()

    sim = Simulation(_preset([_entry("a", 200, 200)]), 800, 600, seed=1)
    sim.on_pointer_move((400, 200))
    x0 = sim.blobs[0].position[0]
    sim.step_n(10)
    assert sim.blobs[0].position[0] > x0, "Blob should shift toward pointer"
    print("  ✓ Pointer attraction working")


def test_hover_clustering():
    """Nearby blobs are pulled toward the hovered blob, not the pointer."""
    print("Testing hover clustering...")
    positions = np.array([[0.0, 0.0], [200.0, 0.0], [0.0, 200.0]])
    hovered = np.array([False, True, False])
    policy = HoverClustering(interaction_radius=300.0, strength=0.05)
    forces = policy.forces(positions, (200.0, 10.0), hovered)
    assert np.allclose(forces[0], [0.05, 0.0])
    assert not forces[1].any(), "Hovered blob is not pulled toward itself"
    direction = forces[2] / np.hypot(*forces[2])
    assert np.allclose(direction, [math.sqrt(0.5), -math.sqrt(0.5)])

    none_hovered = policy.forces(positions, (200.0, 10.0), np.zeros(3, dtype=bool))
    assert not none_hovered.any()
    print("  ✓ Hover clustering working")


def test_hover_recomputed_each_frame():
    """Hover follows the pointer after every step."""
    print("Testing hover update...")
    sim = Simulation(_preset([_entry("a", 100, 100), _entry("b", 400, 100)]), 800, 600, seed=1)
    sim.on_pointer_move((105, 100))
    sim.step()
    assert [b.hovered for b in sim.blobs] == [True, False]
    assert sim.stats["hovered"] == "a"
    sim.on_pointer_move((700, 500))
    sim.step()
    assert not any(b.hovered for b in sim.blobs)
    print("  ✓ Hover recomputed")


def test_hover_refresh_without_step():
    """A paused host still sees hover follow the pointer."""
    print("Testing hover refresh while paused...")
    sim = Simulation(_preset([_entry("a", 100, 100), _entry("b", 400, 100)]), 800, 600, seed=1)
    before = sim.positions()
    sim.on_pointer_move((400, 110))
    assert sim.refresh_hover() is sim.blobs[1]
    assert [b.hovered for b in sim.blobs] == [False, True]
    assert sim.frame == 0
    assert np.array_equal(sim.positions(), before), "Refreshing hover must not move blobs"
    sim.on_pointer_move((700, 500))
    assert sim.refresh_hover() is None
    assert sim.stats["hovered"] is None
    print("  ✓ Hover refreshed without advancing the frame")


def test_force_policy_is_abstract():
    print("Testing ForcePolicy base...")
    try:
        ForcePolicy()
    except TypeError:
        pass
    else:
        raise AssertionError("ForcePolicy without forces() should not instantiate")
    assert isinstance(PointerAttraction(), ForcePolicy)
    print("  ✓ ForcePolicy is abstract")


def test_click_to_navigation():
    """A click inside a blob yields its target; a miss yields nothing."""
    print("Testing click-to-navigation...")
    nav = RecordingNavigator()
    sim = Simulation(_preset([{"label": "cv", "target": "cv.html", "color": "#32CD32",
                               "position": (100, 100), "radius": 50}]),
                     800, 600, navigator=nav, seed=1)
    request = sim.on_click((110, 110))
    assert request == NavigationRequest("cv.html", "cv")
    assert nav.last.target == "cv.html"
    assert sim.on_click((500, 500)) is None
    assert len(nav.requests) == 1, "Miss must not navigate"
    assert sim.input.last_click == (500.0, 500.0)
    print("  ✓ Click-to-navigation working")


def test_click_does_not_touch_physics():
    """Input handlers leave positions and velocities alone."""
    print("Testing click isolation...")
    sim = Simulation(_preset([_entry("a", 100, 100)], ripple=True), 800, 600, seed=1)
    before = sim.blobs[0].position.copy()
    sim.on_pointer_move((100, 100))
    sim.on_click((100, 100))
    assert np.array_equal(sim.blobs[0].position, before)
    assert not sim.blobs[0].velocity.any()
    assert sim.input.ripple_pending
    print("  ✓ Click isolated from physics")


def test_ripple_one_shot():
    """After a click, exactly one impulse on the next step, none on the one after."""
    print("Testing ripple one-shot...")
    sim = Simulation(_preset([_entry("a", 100, 100), _entry("b", 600, 100),
                              _entry("c", 100, 500)], ripple=True, ripple_strength=3.0),
                     800, 600, seed=5)
    assert sim.on_click((100, 100)) is not None

    sim.step()
    damping = sim.options["damping"]
    first = [b.velocity.copy() for b in sim.blobs]
    for v in first:
        speed = float(np.hypot(*v)) / damping
        assert 0.75 - 1e-9 <= speed <= 3.0 + 1e-9, f"Impulse out of bounds: {speed}"
    assert sim.stats["ripples"] == 1
    assert not sim.input.ripple_pending

    sim.step()
    for v0, b in zip(first, sim.blobs):
        assert np.allclose(b.velocity, v0 * damping), "Second step must add nothing"
    assert sim.stats["ripples"] == 1
    print("  ✓ Ripple fires once")


def test_ripple_disabled():
    """Without ripple, a click hit leaves velocities at zero."""
    print("Testing ripple disabled...")
    sim = Simulation(_preset([_entry("a", 100, 100), _entry("b", 600, 100)]), 800, 600, seed=5)
    sim.on_click((100, 100))
    sim.step()
    assert all(not b.velocity.any() for b in sim.blobs)
    sim.set_ripple(True)
    sim.on_click((100, 100))
    sim.set_ripple(False)
    assert not sim.input.ripple_pending, "Disabling ripple drops a pending impulse"
    print("  ✓ Ripple toggle working")


def test_forces_use_previous_positions():
    """Blob order does not change the outcome of a step."""
    print("Testing order independence...")
    entries = [_entry("a", 300, 300, 60, 1.0), _entry("b", 350, 320, 60, 2.0),
               _entry("c", 320, 380, 60, 3.0)]
    forward = Simulation(_preset(entries), 800, 600, seed=2)
    backward = Simulation(_preset(list(reversed(entries))), 800, 600, seed=2)
    for sim in (forward, backward):
        sim.on_pointer_move((330, 330))
        sim.step_n(5)
    by_label = {b.label: b.position for b in backward.blobs}
    for blob in forward.blobs:
        assert np.allclose(blob.position, by_label[blob.label]), blob.label
    print("  ✓ Order independent")


def test_layout_fixed_and_reproducible():
    """Blob set is fixed; the same seed rebuilds the same layout."""
    print("Testing layout reproducibility...")
    sim = Simulation("portfolio", 1280, 800, seed=42)
    assert isinstance(sim.blobs, tuple) and len(sim.blobs) == 5
    radii = [b.radius for b in sim.blobs]
    assert all(80 <= r <= 120 for r in radii)
    seeds = {b.noise_seed for b in sim.blobs}
    assert len(seeds) == 5, "Every blob gets its own noise seed"
    assert [b.target for b in sim.blobs][0] == "#about"

    sim.step_n(20)
    sim.reset()
    assert sim.frame == 0
    assert [b.radius for b in sim.blobs] == radii
    assert np.allclose(sim.blobs[0].position, (740, 300))
    print("  ✓ Layout reproducible")


def test_configuration_errors():
    """Bad configuration fails at construction."""
    print("Testing configuration errors...")
    rng = np.random.default_rng(0)
    bad = [
        _preset([_entry("a", 0, 0), _entry("a", 200, 0)]),               # duplicate label
        _preset([{"label": "a", "target": "a", "color": "#fff000"}]),     # missing fields
        _preset([_entry("a", 0, 0, radius=0)]),                          # radius
        _preset([_entry("a", 0, 0, seed=1.0), _entry("b", 9, 9, seed=1.0)]),
        _preset([_entry("a", 0, 0, color="#zzzzzz")]),
        _preset([]),
    ]
    for preset in bad:
        try:
            build_blobs(preset, 800, 600, rng)
        except ValueError:
            continue
        raise AssertionError(f"Should reject {preset['blobs']}")

    for options in ({"damping": 1.0}, {"damping": 0.0}, {"margin": -1},
                    {"bogus": 1}, {"angle_step_deg": 0}):
        try:
            resolve_options(_preset([_entry("a", 0, 0)], **options))
        except ValueError:
            continue
        raise AssertionError(f"Should reject options {options}")

    for kwargs in ({"force_policy": "gravity"}, {"label_style": "marquee"}, {"noise": "pink"}):
        try:
            Simulation(_preset([_entry("a", 0, 0)], **kwargs), 800, 600)
        except ValueError:
            continue
        raise AssertionError(f"Should reject {kwargs}")

    try:
        Simulation("nope", 800, 600)
    except ValueError:
        pass
    else:
        raise AssertionError("Unknown preset should fail")

    sim = Simulation(_preset([_entry("a", 0, 0)]), 800, 600)
    try:
        sim.set_force_policy("gravity")
    except ValueError:
        pass
    else:
        raise AssertionError("Unknown policy should fail")
    assert sim.options["force_policy"] == "attraction", "Failed switch keeps old policy"
    print("  ✓ Configuration errors raised")


if __name__ == "__main__":
    print("\n=== Testing Blob Layout Simulation ===\n")

    test_repulsion_is_symmetric()
    test_repulsion_coincident_centres()
    test_crown_shyness_convergence()
    test_damping_stability()
    test_pointer_attraction()
    test_hover_clustering()
    test_hover_recomputed_each_frame()
    test_hover_refresh_without_step()
    test_force_policy_is_abstract()
    test_click_to_navigation()
    test_click_does_not_touch_physics()
    test_ripple_one_shot()
    test_ripple_disabled()
    test_forces_use_previous_positions()
    test_layout_fixed_and_reproducible()
    test_configuration_errors()

    print("\n✓ All tests passed!\n")
