"""
Blob Layout Presets

Each preset defines the fixed blob set for a session plus any option
overriding DEFAULTS. Blob positions are either absolute (x, y) or
canvas-relative (fx, fy, dx, dy) meaning (fx * width + dx, fy * height + dy).
A radius may be a number or a (lo, hi) range drawn once at startup.
"""

from .blob import Blob


DEFAULTS = {
    # Crown shyness
    "margin": 20.0,
    "repulsion_gain": 0.1,
    "damping": 0.9,
    # Pointer response
    "force_policy": "attraction",
    "interaction_radius": 300.0,
    "attraction_strength": 0.01,
    "cluster_strength": 0.05,
    # Click ripple
    "ripple": False,
    "ripple_strength": 3.0,
    # Outline
    "noise": "value",
    "noise_scale": 0.1,
    "outline_amplitude": 40.0,
    "angle_step_deg": 3.0,
    "outline_drift": 0.0,
    # Labels
    "label_style": "curved",
    "label_size": 20,
    "label_inset": 15.0,
}

REQUIRED_BLOB_FIELDS = ("label", "target", "color", "position", "radius")

_PORTFOLIO_LABELS = ["about", "contact", "cv", "projects", "art"]
_PORTFOLIO_COLORS = ["#FF6347", "#4682B4", "#32CD32", "#FFD700", "#FF69B4"]
# Oriented toward the centre-right of the canvas
_PORTFOLIO_POSITIONS = [
    (0.5, 0.5, 100, -100),
    (0.5, 0.5, 200, -200),
    (0.5, 0.5, 300, 0),
    (0.5, 1 / 3, 250, 150),
    (0.5, 0.5, 150, 250),
]

PRESETS = {
    "portfolio": {
        "name": "Portfolio",
        "description": "Five hotspots, curved in-shape labels, pointer attraction",
        "blobs": [
            {"label": label, "target": f"#{label}", "color": color,
             "position": pos, "radius": (80, 120)}
            for label, color, pos in zip(_PORTFOLIO_LABELS, _PORTFOLIO_COLORS,
                                         _PORTFOLIO_POSITIONS)
        ],
    },
    "tooltip": {
        "name": "Tooltip",
        "description": "Hover tooltips, clustering toward the hovered blob, click ripple",
        "force_policy": "clustering",
        "label_style": "tooltip",
        "ripple": True,
        "damping": 0.85,
        "repulsion_gain": 0.15,
        "blobs": [
            {"label": label, "target": f"{label}.html", "color": color,
             "position": pos, "radius": (80, 120)}
            for label, color, pos in zip(_PORTFOLIO_LABELS, _PORTFOLIO_COLORS,
                                         _PORTFOLIO_POSITIONS)
        ],
    },
    "pair": {
        "name": "Crown Shyness",
        "description": "Two overlapping blobs pushing apart",
        "outline_amplitude": 25.0,
        "blobs": [
            {"label": "left", "target": "#left", "color": "#4682B4",
             "position": (0.5, 0.5, -30, 0), "radius": 90, "noise_seed": 11.0},
            {"label": "right", "target": "#right", "color": "#FF6347",
             "position": (0.5, 0.5, 30, 0), "radius": 90, "noise_seed": 517.0},
        ],
    },
}

PRESET_ORDER = ["portfolio", "tooltip", "pair"]


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]


def resolve_options(preset):
    """Merge preset overrides onto DEFAULTS and check ranges."""
    unknown = set(preset) - set(DEFAULTS) - {"name", "description", "blobs"}
    if unknown:
        raise ValueError(f"Unknown preset options: {sorted(unknown)}")
    options = dict(DEFAULTS)
    options.update({k: v for k, v in preset.items() if k in DEFAULTS})
    if not 0.0 < options["damping"] < 1.0:
        raise ValueError(f"damping must be in (0, 1), got {options['damping']}")
    if options["angle_step_deg"] <= 0:
        raise ValueError(f"angle_step_deg must be > 0, got {options['angle_step_deg']}")
    for key in ("margin", "repulsion_gain", "interaction_radius",
                "ripple_strength", "outline_amplitude", "outline_drift"):
        if options[key] < 0:
            raise ValueError(f"{key} must be >= 0, got {options[key]}")
    return options


def resolve_position(position, width, height):
    """Turn an absolute or canvas-relative position into (x, y)."""
    if len(position) == 2:
        return float(position[0]), float(position[1])
    if len(position) == 4:
        fx, fy, dx, dy = position
        return fx * width + dx, fy * height + dy
    raise ValueError(f"Bad position {position!r}: expected (x, y) or (fx, fy, dx, dy)")


def _resolve_radius(radius, rng):
    if isinstance(radius, (tuple, list)):
        lo, hi = radius
        if lo <= 0 or hi < lo:
            raise ValueError(f"Bad radius range {radius!r}")
        return float(rng.uniform(lo, hi))
    return float(radius)


def build_blobs(preset, width, height, rng):
    """Construct the session's blob tuple from a preset.

    Args:
        preset: Preset dict with a "blobs" list
        width, height: Canvas size (for relative positions)
        rng: numpy Generator for radius ranges and missing noise seeds

    Returns:
        Tuple of Blob, in preset order
    """
    entries = preset.get("blobs")
    if not entries:
        raise ValueError("Preset defines no blobs")

    labels = set()
    seeds = set()
    blobs = []
    for i, entry in enumerate(entries):
        missing = [f for f in REQUIRED_BLOB_FIELDS if f not in entry]
        if missing:
            raise ValueError(f"Blob entry {i} is missing fields: {missing}")
        label = entry["label"]
        if label in labels:
            raise ValueError(f"Duplicate blob label: {label!r}")
        labels.add(label)

        seed = entry.get("noise_seed")
        if seed is not None:
            if seed in seeds:
                raise ValueError(f"Duplicate noise seed {seed!r} (blob {label!r})")
            seeds.add(seed)
        else:
            seed = float(rng.uniform(0, 1000))

        x, y = resolve_position(entry["position"], width, height)
        radius = _resolve_radius(entry["radius"], rng)
        blobs.append(Blob(x, y, radius, label, entry["target"],
                          entry["color"], seed))
    return tuple(blobs)
