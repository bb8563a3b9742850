"""
Interaction Detector

Hover and click hit-testing against each blob's base radius. Hover is
recomputed every frame from the pointer; clicks resolve to a
NavigationRequest for the blob under the pointer.
"""

from .navigation import NavigationRequest


def hit_test(blobs, pointer):
    """Return the first blob whose centre is closer than its radius, else None."""
    if pointer is None:
        return None
    for blob in blobs:
        if blob.contains(pointer):
            return blob
    return None


def update_hover(blobs, pointer):
    """Recompute every blob's hovered flag. Returns the first hovered blob or None."""
    hit = None
    for blob in blobs:
        blob.hovered = pointer is not None and blob.contains(pointer)
        if blob.hovered and hit is None:
            hit = blob
    return hit


def resolve_click(blobs, position):
    """Map a click position to a NavigationRequest, or None on a miss."""
    blob = hit_test(blobs, position)
    if blob is None:
        return None
    return NavigationRequest(blob.target, blob.label)
